"""Derived goalkeeper ratios.

Everything here is pure: raw counters in, rounded ratios out. Values are
never persisted, so a counter update can't leave a stale percentage behind.

Rounding follows SQL ``ROUND`` (half away from zero) rather than Python's
banker's rounding, and every zero denominator yields ``0.0``.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping

DERIVED_FIELDS = (
    "goals_per_match",
    "clean_sheet_percentage",
    "save_percentage",
    "penalty_save_percentage",
)

_TWO_PLACES = Decimal("0.01")


def round2(value: float | Decimal) -> float:
    return float(Decimal(str(value)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def _ratio(numerator: int, denominator: int, scale: int = 1) -> float:
    if denominator <= 0:
        return 0.0
    return round2(Decimal(numerator) * scale / Decimal(denominator))


def goals_per_match(goals_conceded: int, matches_played: int) -> float:
    return _ratio(goals_conceded, matches_played)


def clean_sheet_percentage(clean_sheets: int, matches_played: int) -> float:
    return _ratio(clean_sheets, matches_played, 100)


def save_percentage(saves: int, goals_conceded: int) -> float:
    return _ratio(saves, saves + goals_conceded, 100)


def penalty_save_percentage(penalties_saved: int, penalties_faced: int) -> float:
    return _ratio(penalties_saved, penalties_faced, 100)


def _counter(source: Any, name: str) -> int:
    if isinstance(source, Mapping):
        value = source.get(name)
    else:
        value = getattr(source, name, None)
    return int(value or 0)


def derive_metrics(source: Any) -> dict[str, float]:
    """Compute the four derived ratios for a record.

    ``source`` may be an ORM row or any mapping carrying the raw counters;
    missing counters count as zero.
    """
    matches = _counter(source, "matches_played")
    conceded = _counter(source, "goals_conceded")
    saves = _counter(source, "saves")

    return {
        "goals_per_match": goals_per_match(conceded, matches),
        "clean_sheet_percentage": clean_sheet_percentage(_counter(source, "clean_sheets"), matches),
        "save_percentage": save_percentage(saves, conceded),
        "penalty_save_percentage": penalty_save_percentage(
            _counter(source, "penalties_saved"),
            _counter(source, "penalties_faced"),
        ),
    }


def with_metrics(row: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``row`` with the derived fields attached."""
    out = dict(row)
    out.update(derive_metrics(row))
    return out
