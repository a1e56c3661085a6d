"""Logical spreadsheet fields and the column labels that may carry them.

Candidates are listed most preferred first and are matched through
planning.shared.field_utils.resolve_field, so case, spacing and
punctuation differences in the export headers do not matter.
"""

from __future__ import annotations

LABEL = ("Label", "Title", "Project Name", "Name")
STATUS = ("Status", "Workflow Status", "Application Status")
PLOT_NUMBER = ("Plot Number", "Parcel / Plot number", "Plot No", "Plot", "Parcel")
REFERENCE_NUMBER = ("Reference Number", "Reference No", "Reference", "Ref")
ZONE = ("Zone",)
BLOCK = ("Block", "Block Number")
WAYLEAVE_NUMBER = ("Wayleave Number", "Wayleave No", "Wayleave")
ACCOUNT_NUMBER = ("Account Number", "Account No", "Account")
CREATION_DATE = ("Creation Date", "Created At", "Entry Date", "Application Date", "Date")
JUSTIFICATION = ("Justification", "Remarks")
ESCALATION_DATE = ("Sent to USP Date", "Escalation Date", "USP Date")

APPLICATION_NUMBER = ("Application Number", "Application No")
OWNER_NAME = ("Owner Name", "Owner English Name", "Owner")
FIRST_PAYMENT = ("Initial Payment Date", "Initial Payment", "First Payment")
SECOND_PAYMENT = ("Second Payment", "Second Payment Date")
THIRD_PAYMENT = ("Third Payment", "Third Payment Date")
