from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from ..models.report_variant import Layout, ReportRow, ReportVariant
from ..models.row_data import SourceRow
from .normalize import is_null_equivalent, is_number, round_half_up
from .payment import compute_payment, default_multiplier

logger = logging.getLogger(__name__)

"""Grouping / summarization engine.

Input rows must already be sliced to the variant's layout, filtered of
structurally empty rows and sorted by the group key (see services.variants).

Two passes over the same row order:
1. pre-pass: per group key, sum the variant's numeric columns and the payment
2. emission pass: emit annotated data rows; right after the last keyed row of a key
   run emit that group's summary (the final run gets the trailing summary)

Rows without a group key are annotated in place; they never open, close or feed a group.
"""

__all__ = [
    "SUMMARY_SENTINEL",
    "TRAILING_SENTINEL",
    "OverrideMap",
    "GroupAggregate",
    "is_valid_group_key",
    "is_summary_row",
    "summarize",
]

SUMMARY_SENTINEL = "ÖSSZEGZÉS"
TRAILING_SENTINEL = "ÖSSZESÍTÉS"

LABEL_PDA_TOTAL = "PDA Pont teljes összege"
LABEL_PONT2_TOTAL = "Pont2 teljes összege"
LABEL_POINTS_TOTAL = "Elszámolandó pont teljes összege"
LABEL_PAYMENT_TOTAL = "Fizetés teljes összege"

NAME_COLUMN = 1
POINTS_COLUMN = 4

# (row_id, column index) -> value
OverrideMap = Mapping[tuple[int, int], Any]


@dataclass
class GroupAggregate:
    """Running sums for one group key."""
    sums: list[float] = field(default_factory=list)
    payment: int = 0


def is_valid_group_key(key: Any) -> bool:
    return key is not False and not is_null_equivalent(key)


def is_summary_row(cells: Sequence[Any]) -> bool:
    """True when the first populated text cell carries the summary sentinel."""
    for cell in cells:
        if isinstance(cell, str) and cell != "":
            return SUMMARY_SENTINEL in cell
    return False


def _display_total(total: float) -> int:
    # 小数2桁に丸めてから四捨五入
    return round_half_up(float(f"{total:.2f}"))


def _summary_cells(
    variant: ReportVariant, key: Any, aggregate: GroupAggregate, trailing: bool
) -> list[Any]:
    payment = f"{LABEL_PAYMENT_TOTAL}: {round_half_up(aggregate.payment)}"
    if variant.layout is Layout.PRIMARY:
        sum_a, sum_b = aggregate.sums
        return [
            SUMMARY_SENTINEL,
            key,
            None,
            f"{LABEL_PDA_TOTAL}: {_display_total(sum_a)}",
            f"{LABEL_PONT2_TOTAL}: {_display_total(sum_b)}",
            None,
            None,
            None,
            None,
            None,
            payment,
        ]
    points = f"{LABEL_POINTS_TOTAL}: {_display_total(aggregate.sums[-1])}"
    if trailing and variant.shifted_trailing_summary:
        return [None, TRAILING_SENTINEL, key, None, points, None, None, None, None, payment]
    return [SUMMARY_SENTINEL, key, None, None, points, None, None, None, None, payment]


def _padded(cells: list[Any], width: int) -> list[Any]:
    out = list(cells[:width])
    out.extend([None] * (width - len(out)))
    return out


def _aggregate(
    rows: Sequence[SourceRow],
    variant: ReportVariant,
    srbn_multiplier: float,
    hfex_multiplier: float,
    overrides: OverrideMap,
) -> dict[Any, GroupAggregate]:
    aggregates: dict[Any, GroupAggregate] = {}
    for row in rows:
        key = row.cell(variant.key_column)
        if not is_valid_group_key(key):
            continue
        values = [row.cell(c) for c in variant.sum_columns]
        if not all(is_number(v) for v in values):
            continue
        aggregate = aggregates.get(key)
        if aggregate is None:
            aggregate = GroupAggregate(sums=[0.0] * len(values))
            aggregates[key] = aggregate
        for i, v in enumerate(values):
            aggregate.sums[i] += v
        aggregate.payment += compute_payment(
            row.cell(NAME_COLUMN),
            row.cell(POINTS_COLUMN),
            srbn_multiplier,
            hfex_multiplier,
            overrides.get((row.row_id, variant.multiplier_column)),
        )
    return aggregates


def _annotate(
    row: SourceRow,
    variant: ReportVariant,
    srbn_multiplier: float,
    hfex_multiplier: float,
    overrides: OverrideMap,
) -> ReportRow:
    name = row.cell(NAME_COLUMN)
    individual = overrides.get((row.row_id, variant.multiplier_column))
    multiplier = (
        individual
        if individual is not None
        else default_multiplier(name, srbn_multiplier, hfex_multiplier)
    )
    payment = compute_payment(
        name, row.cell(POINTS_COLUMN), srbn_multiplier, hfex_multiplier, individual
    )
    cells = _padded(row.cells, variant.multiplier_column)
    cells.extend([multiplier, payment])
    return ReportRow(cells=cells, row_id=row.row_id)


def _run_ends(rows: Sequence[SourceRow], variant: ReportVariant) -> dict[int, bool]:
    """Index of the last keyed row of every key run -> whether it is the final run.

    Rows without a key are skipped when looking for the next keyed row, so they
    neither split a run nor delay its summary.
    """
    keyed = [
        (i, row.cell(variant.key_column))
        for i, row in enumerate(rows)
        if is_valid_group_key(row.cell(variant.key_column))
    ]
    ends: dict[int, bool] = {}
    for pos, (index, key) in enumerate(keyed):
        if pos + 1 == len(keyed):
            ends[index] = True
        elif keyed[pos + 1][1] != key:
            ends[index] = False
    return ends


def summarize(
    rows: Any,
    variant: ReportVariant,
    srbn_multiplier: float,
    hfex_multiplier: float,
    overrides: OverrideMap | None = None,
) -> list[ReportRow]:
    """Group, annotate and summarize pre-sorted rows for one report variant.

    Args:
        rows: SourceRows sliced to the variant layout, filtered and sorted
        variant: report descriptor (group key, summed columns, layout)
        srbn_multiplier: global multiplier for SRBN workers
        hfex_multiplier: global multiplier for HF-EX workers
        overrides: individual multipliers keyed by (row_id, multiplier column)

    Returns:
        Data rows (cells + multiplier + payment) interleaved with summary rows.
        Empty or malformed input yields an empty list.
    """
    if not isinstance(rows, (list, tuple)) or not rows:
        return []
    if not all(isinstance(r, SourceRow) for r in rows):
        logger.debug("summarize: non-row input ignored (variant=%s)", variant.name)
        return []
    overrides = overrides or {}

    aggregates = _aggregate(rows, variant, srbn_multiplier, hfex_multiplier, overrides)

    ends = _run_ends(rows, variant)

    result: list[ReportRow] = []
    for index, row in enumerate(rows):
        result.append(_annotate(row, variant, srbn_multiplier, hfex_multiplier, overrides))
        trailing = ends.get(index)
        key = row.cell(variant.key_column)
        if trailing is not None and key in aggregates:
            result.append(ReportRow(cells=_summary_cells(variant, key, aggregates[key], trailing)))
    return result
