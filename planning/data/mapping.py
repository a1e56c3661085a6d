"""Field mapping between store records and canonical domain models.

Older collections were written with camelCase field names, newer ones
with snake_case. Both spellings are accepted when reading; writes always
use the snake_case schema. Nothing outside this module sees either.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from ..errors import RecordValidationError
from ..importing.status_classifier import classify_status, is_known_status
from ..models import CanonicalStage, InfraPaymentRecord, ProjectRecord, utc_now
from ..shared import format_iso, normalize_plot, parse_date, to_text

# Canonical attribute -> store field names accepted on read, write name first
PROJECT_FIELD_NAMES: dict[str, tuple[str, ...]] = {
    "label": ("label", "title"),
    "stage": ("stage", "status"),
    "reference_number": ("reference_number", "referenceNumber"),
    "plot_number": ("plot_number", "plotNumber"),
    "zone": ("zone",),
    "block": ("block",),
    "wayleave_number": ("wayleave_number", "wayleaveNumber"),
    "account_number": ("account_number", "accountNumber"),
    "source_status": ("source_status", "sourceStatus", "application_status", "applicationStatus"),
    "justification": ("justification",),
    "escalation_date": ("escalation_date", "escalationDate", "sent_to_usp_date", "sentToUSPDate"),
    "created_at": ("created_at", "createdAt", "created"),
}

INFRA_FIELD_NAMES: dict[str, tuple[str, ...]] = {
    "plot_number": ("plot_number", "plotNumber"),
    "owner_name": ("owner_name", "ownerName", "owner_name_en", "ownerNameEn"),
    "application_number": ("application_number", "applicationNumber"),
    "first_payment": ("first_payment", "firstPayment", "initial_payment_date", "initialPaymentDate"),
    "second_payment": ("second_payment", "secondPayment"),
    "third_payment": ("third_payment", "thirdPayment"),
    "created_at": ("created_at", "createdAt", "created"),
}

PAYMENT_MARKER_FIELDS = ("first_payment", "second_payment", "third_payment")


def _field(raw: Any, names: tuple[str, ...]) -> Any:
    """Read the first present, non-blank field from a dict or SDK record."""
    for name in names:
        value = raw.get(name) if isinstance(raw, Mapping) else getattr(raw, name, None)
        if value is not None and value != "":
            return value
    return None


def _text(raw: Any, names: tuple[str, ...]) -> str:
    return to_text(_field(raw, names))


def _timestamp(raw: Any, names: tuple[str, ...]) -> datetime:
    return parse_date(_field(raw, names)) or utc_now()


def store_field(canonical: str) -> str:
    """Store field name written for a canonical project attribute."""
    return PROJECT_FIELD_NAMES[canonical][0]


def parse_stage(value: Any, *, strict: bool = False) -> CanonicalStage:
    """Read a stage, accepting legacy rows that stored the raw upstream status.

    Lenient by default: unknown text reads as IN_DESIGN. With strict=True,
    text that is neither a canonical value, a tab label nor a known upstream
    status raises RecordValidationError.
    """
    text = to_text(value)
    try:
        return CanonicalStage(text)
    except ValueError:
        pass
    if strict and not is_known_status(text):
        raise RecordValidationError(f"Unknown stage '{text}'")
    return classify_status(text)


def project_from_store(raw: Any) -> ProjectRecord:
    names = PROJECT_FIELD_NAMES
    return ProjectRecord(
        id=_text(raw, ("id",)) or None,
        label=_text(raw, names["label"]) or "Untitled",
        stage=parse_stage(_field(raw, names["stage"])),
        reference_number=_text(raw, names["reference_number"]),
        plot_number=normalize_plot(_field(raw, names["plot_number"])),
        zone=_text(raw, names["zone"]),
        block=_text(raw, names["block"]),
        wayleave_number=_text(raw, names["wayleave_number"]),
        account_number=_text(raw, names["account_number"]),
        source_status=_text(raw, names["source_status"]),
        justification=_text(raw, names["justification"]),
        escalation_date=_text(raw, names["escalation_date"]),
        created_at=_timestamp(raw, names["created_at"]),
    )


def project_to_store(record: ProjectRecord) -> dict[str, Any]:
    return {
        "label": record.label,
        "stage": record.stage.value,
        "reference_number": record.reference_number,
        "plot_number": normalize_plot(record.plot_number),
        "zone": record.zone,
        "block": record.block,
        "wayleave_number": record.wayleave_number,
        "account_number": record.account_number,
        "source_status": record.source_status,
        "justification": record.justification,
        "escalation_date": record.escalation_date,
        "created_at": format_iso(record.created_at),
    }


def project_updates_to_store(updates: Mapping[str, Any]) -> dict[str, Any]:
    """Translate a canonical partial update into store field names."""
    body: dict[str, Any] = {}
    for canonical, value in updates.items():
        if isinstance(value, CanonicalStage):
            value = value.value
        elif isinstance(value, datetime):
            value = format_iso(value)
        elif canonical == "plot_number":
            value = normalize_plot(value)
        body[store_field(canonical)] = value
    return body


def infra_from_store(raw: Any) -> InfraPaymentRecord:
    names = INFRA_FIELD_NAMES
    return InfraPaymentRecord(
        id=_text(raw, ("id",)) or None,
        plot_number=normalize_plot(_field(raw, names["plot_number"])),
        owner_name=_text(raw, names["owner_name"]),
        application_number=_text(raw, names["application_number"]),
        first_payment=_text(raw, names["first_payment"]),
        second_payment=_text(raw, names["second_payment"]),
        third_payment=_text(raw, names["third_payment"]),
        created_at=_timestamp(raw, names["created_at"]),
    )


def infra_to_store(record: InfraPaymentRecord) -> dict[str, Any]:
    return {
        "plot_number": normalize_plot(record.plot_number),
        "owner_name": record.owner_name,
        "application_number": record.application_number,
        "first_payment": record.first_payment,
        "second_payment": record.second_payment,
        "third_payment": record.third_payment,
        "created_at": format_iso(record.created_at),
    }
