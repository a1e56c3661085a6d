"""Plot identifier normalization.

Canonical rule: trim only, case-sensitive. The normalized value is what
gets stored and what exact set-membership filters compare against.
Case-insensitive matching happens only in the plot search, which uses
the store's `~` operator (see planning.payments.plot_lookup).
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .field_utils import to_text


def normalize_plot(value: Any) -> str:
    """Canonicalize a plot identifier for use as a join key.

    Idempotent: normalize_plot(normalize_plot(x)) == normalize_plot(x).
    """
    return to_text(value)


def normalize_plots(values: Iterable[Any]) -> set[str]:
    """Normalize a collection of plot identifiers, dropping blanks."""
    return {plot for plot in (normalize_plot(v) for v in values) if plot}


def plots_match_casefold(left: str, right: str) -> bool:
    """Case-insensitive comparison used only for display-side plot search."""
    return normalize_plot(left).casefold() == normalize_plot(right).casefold()
