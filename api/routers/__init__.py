"""
API Routers - Organized endpoint handlers for the Planning API.

Each router handles a specific domain:
- projects: Project CRUD, search and dashboard summary
- imports: Two-phase spreadsheet import (stage, review, commit)
- infra: Infrastructure-fee ledger, paid status and CC calculator
- insights: AI-generated insights and project reports
"""
