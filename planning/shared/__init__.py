"""Shared utilities module."""

from __future__ import annotations

from .date_utils import format_iso, parse_date
from .field_utils import normalize_label, resolve_field, resolve_raw, to_text
from .plot_utils import normalize_plot, normalize_plots, plots_match_casefold

__all__ = [
    "format_iso",
    "parse_date",
    "normalize_label",
    "resolve_field",
    "resolve_raw",
    "to_text",
    "normalize_plot",
    "normalize_plots",
    "plots_match_casefold",
]
