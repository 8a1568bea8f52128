from __future__ import annotations

import unicodedata
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from ..models.report_variant import GroupBy, Layout, ReportRow, ReportVariant
from ..models.row_data import SourceRow
from .grouping import OverrideMap, summarize
from .normalize import is_null_equivalent, parse_dotted_date

"""Report variant selector.

Canonical worksheet row (16 columns):
  0-8   primary:   code, name, date, PDA pont, pont 2, shift start, shift end, hours, note
  9-15  secondary: code, name, date, overtime, points, shift start, shift end

Each variant = column slice + pre-filter + sort key + grouping parameters.
"""

__all__ = [
    "PRIMARY_HEADERS",
    "SECONDARY_HEADERS",
    "BY_DATE",
    "DETAILED_BY_DATE",
    "BY_NAME",
    "DETAILED_BY_NAME",
    "VARIANTS",
    "UnknownVariantError",
    "get_variant",
    "is_structurally_empty",
    "date_sort_key",
    "name_sort_key",
    "prepare_rows",
    "build_report",
]

PRIMARY_HEADERS = (
    "Szedőkód",
    "Szedő neve",
    "Dátum",
    "PDA Pont",
    "Pont 2",
    "Műszak kezdete",
    "Műszak vége",
    "Összesített óra",
    "Megjegyzés",
    "Szorzó",
    "Fizetés",
)

SECONDARY_HEADERS = (
    "Szedőkód",
    "Szedő neve",
    "Dátum",
    "Túlóra",
    "Elszámolandó pont",
    "Műszak kezdet",
    "Műszak vége",
    "Megjegyzés",
    "Szorzó",
    "Fizetés",
)

BY_DATE = ReportVariant(
    name="by-date",
    title="Összegzés",
    layout=Layout.PRIMARY,
    group_by=GroupBy.DATE,
    column_start=0,
    column_stop=9,
    sum_columns=(3, 4),
    multiplier_column=9,
    headers=PRIMARY_HEADERS,
)

DETAILED_BY_DATE = ReportVariant(
    name="detailed-by-date",
    title="Túlóra kimutatás",
    layout=Layout.SECONDARY,
    group_by=GroupBy.DATE,
    column_start=9,
    column_stop=16,
    sum_columns=(4,),
    multiplier_column=8,
    headers=SECONDARY_HEADERS,
)

BY_NAME = ReportVariant(
    name="by-name",
    title="Név szerinti összegzés",
    layout=Layout.PRIMARY,
    group_by=GroupBy.NAME,
    column_start=0,
    column_stop=9,
    sum_columns=(3, 4),
    multiplier_column=9,
    headers=PRIMARY_HEADERS,
)

# The trailing summary of this report uses a shifted column layout while its
# in-stream summaries do not. Existing downstream sheets rely on it; keep it.
DETAILED_BY_NAME = ReportVariant(
    name="detailed-by-name",
    title="Név szerinti összegzés túlóra kimutatás",
    layout=Layout.SECONDARY,
    group_by=GroupBy.NAME,
    column_start=9,
    column_stop=16,
    sum_columns=(4,),
    multiplier_column=8,
    headers=SECONDARY_HEADERS,
    shifted_trailing_summary=True,
)

VARIANTS: dict[str, ReportVariant] = {
    v.name: v for v in (BY_DATE, DETAILED_BY_DATE, BY_NAME, DETAILED_BY_NAME)
}


class UnknownVariantError(ValueError):
    """Raised when a report identifier does not name a known variant."""


def get_variant(name: str) -> ReportVariant:
    try:
        return VARIANTS[name]
    except KeyError:
        raise UnknownVariantError(
            f"unknown report variant: {name!r} (expected one of {sorted(VARIANTS)})"
        ) from None


def is_structurally_empty(row: SourceRow) -> bool:
    """Row with no cells, or only None / "" / 0 cells."""
    return all(is_null_equivalent(c) for c in row.cells)


def date_sort_key(row: SourceRow) -> tuple[int, datetime]:
    """Ascending by "YYYY.MM.DD"; rows without a parseable date go last."""
    parsed = parse_dotted_date(row.cell(2))
    if parsed is None:
        return (1, datetime.min)
    return (0, parsed)


def name_sort_key(row: SourceRow) -> tuple[Any, ...]:
    """Locale-style ordering: accents and case are secondary/tertiary differences.

    "Ádám" sorts next to "Adam", lowercase before uppercase on otherwise equal names.
    """
    name = row.cell(1)
    text = "" if name is None else str(name)
    decomposed = unicodedata.normalize("NFD", text)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return (base.casefold(), decomposed.casefold(), tuple(ch.isupper() for ch in text))


def prepare_rows(rows: Sequence[SourceRow], variant: ReportVariant) -> list[SourceRow]:
    """Slice, filter and sort dataset rows for ``variant`` (stable)."""
    sliced = [r.sliced(variant.column_start, variant.column_stop) for r in rows]
    kept = [r for r in sliced if not is_structurally_empty(r)]
    key = date_sort_key if variant.group_by is GroupBy.DATE else name_sort_key
    return sorted(kept, key=key)


def build_report(
    rows: Sequence[SourceRow],
    variant: ReportVariant | str,
    srbn_multiplier: float,
    hfex_multiplier: float,
    overrides: OverrideMap | None = None,
) -> list[ReportRow]:
    """Run the full variant pipeline over dataset rows (header already excluded)."""
    if isinstance(variant, str):
        variant = get_variant(variant)
    prepared = prepare_rows(rows, variant)
    return summarize(prepared, variant, srbn_multiplier, hfex_multiplier, overrides)
