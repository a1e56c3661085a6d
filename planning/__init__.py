"""
Planning - Core business logic for the utility-connection planning dashboard.

This package contains:
- models: Domain models (ProjectRecord, InfraPaymentRecord, StagedImportBatch, etc.)
- importing: Spreadsheet import, row classification, staging and batch commit
- payments: Plot payment status, plot lookup and the infra contribution calculator
- records: Project record service and dashboard queries
- data: Record store adapters (PocketBase)
- insights: Text-generation collaborator for dataset insights and reports
"""
