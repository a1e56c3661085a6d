"""Row classification for mixed project / payment-ledger spreadsheets.

A single export may mix newly started projects (identified by a
recognized workflow status) with historical payment-ledger rows
(identified by a plot number and no recognized status). There is no
discriminator column, so status allow-list membership is the signal.

Decision procedure, first match wins:
1. Resolve reference number and status
2. Recognized status + new, non-blank reference -> project
3. Plot number not yet in the infra ledger -> infra
4. Otherwise -> discard
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from ..models import DedupState, InfraPaymentRecord, ProjectRecord, RowDecision, RowKind, utc_now
from ..shared import normalize_plot, parse_date, resolve_field, resolve_raw, to_text
from . import fields
from .status_classifier import classify_status, is_recognized_import_status, normalize_status

Clock = Callable[[], datetime]


def _date_text(value: Any) -> str:
    """ISO date for a parseable cell, otherwise the cell text as-is."""
    parsed = parse_date(value)
    return parsed.date().isoformat() if parsed is not None else to_text(value)


def _build_project(
    row: Mapping[str, Any], reference: str, raw_status: str, row_index: int, now: Clock
) -> ProjectRecord:
    created_at = parse_date(resolve_raw(row, fields.CREATION_DATE)) or now()
    return ProjectRecord(
        label=resolve_field(row, fields.LABEL) or f"Imported {row_index + 1}",
        stage=classify_status(raw_status),
        reference_number=reference,
        plot_number=normalize_plot(resolve_field(row, fields.PLOT_NUMBER)),
        zone=resolve_field(row, fields.ZONE),
        block=resolve_field(row, fields.BLOCK),
        wayleave_number=resolve_field(row, fields.WAYLEAVE_NUMBER),
        account_number=resolve_field(row, fields.ACCOUNT_NUMBER),
        source_status=raw_status,
        justification=resolve_field(row, fields.JUSTIFICATION),
        escalation_date=_date_text(resolve_raw(row, fields.ESCALATION_DATE)),
        created_at=created_at,
    )


def _build_infra_payment(row: Mapping[str, Any], plot: str, now: Clock) -> InfraPaymentRecord:
    return InfraPaymentRecord(
        plot_number=plot,
        owner_name=resolve_field(row, fields.OWNER_NAME),
        application_number=resolve_field(row, fields.APPLICATION_NUMBER),
        first_payment=resolve_field(row, fields.FIRST_PAYMENT),
        second_payment=resolve_field(row, fields.SECOND_PAYMENT),
        third_payment=resolve_field(row, fields.THIRD_PAYMENT),
        created_at=now(),
    )


def classify_row(
    row: Mapping[str, Any],
    dedup_state: DedupState,
    *,
    row_index: int = 0,
    now: Clock = utc_now,
) -> RowDecision:
    """Decide whether a row is a new project, a new ledger row, or neither.

    Pure over its inputs: the dedup state is read, never modified.

    Args:
        row: Raw spreadsheet row (column label -> scalar)
        dedup_state: Snapshot of existing references and infra plots
        row_index: Zero-based data row position, used for default labels
        now: Clock for rows without a usable creation date

    Returns:
        RowDecision with the staged record for project/infra rows
    """
    reference = resolve_field(row, fields.REFERENCE_NUMBER)
    raw_status = resolve_field(row, fields.STATUS)

    if is_recognized_import_status(raw_status) and reference:
        if reference not in dedup_state.existing_references:
            return RowDecision(RowKind.PROJECT, _build_project(row, reference, raw_status, row_index, now))

    plot = normalize_plot(resolve_field(row, fields.PLOT_NUMBER))
    if plot and plot not in dedup_state.existing_infra_plots:
        # A known reference must never leak into the ledger path
        if reference and reference in dedup_state.existing_references:
            return RowDecision(RowKind.DISCARD, reason="duplicate reference")
        return RowDecision(RowKind.INFRA, _build_infra_payment(row, plot, now))

    if reference and reference in dedup_state.existing_references:
        return RowDecision(RowKind.DISCARD, reason="duplicate reference")
    if plot:
        return RowDecision(RowKind.DISCARD, reason="duplicate plot")
    return RowDecision(RowKind.DISCARD, reason=f"unclassifiable (status={normalize_status(raw_status)!r})")
