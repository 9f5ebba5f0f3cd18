"""Bucket statistics for declared-person records.

`aggregate_records` partitions records by group key and computes, per
bucket:

- `total`, `min_value`, `max_value` and `average` (integer, truncated)
- `max_increase` / `max_drop`: the largest rise and the deepest fall between
  chronologically consecutive records of the bucket (0 when there is none)
- `change`: bucket total minus the total of the previous bucket in
  lexicographic key order (0 for the first bucket)

Buckets are returned in lexicographic key order.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np
import pandas as pd

from declared_persons.aggregate.group_key import encode_key, normalize_mode
from declared_persons.models import DeclaredPerson

log = logging.getLogger(__name__)

DATE_COLS = ["year", "month", "day"]


@dataclass(frozen=True)
class Group:
    """Statistics for all records sharing one group key.

    Attributes:
        key: Group key as produced by `encode_key`.
        records: Member records sorted by (year, month, day).
        total: Sum of record values.
        min_value: Smallest record value.
        max_value: Largest record value.
        average: `total` divided by the record count, truncated toward zero.
        max_increase: Largest positive consecutive delta, else 0.
        max_drop: Most negative consecutive delta, else 0.
        change: `total` minus the previous group's total (0 for the first).
    """
    key: str
    records: tuple[DeclaredPerson, ...]
    total: int
    min_value: int
    max_value: int
    average: int
    max_increase: int
    max_drop: int
    change: int

    @property
    def count(self) -> int:
        return len(self.records)


def _records_frame(records: Sequence[DeclaredPerson], mode: str) -> pd.DataFrame:
    """Tabulate records with their group key and input position."""
    return pd.DataFrame(
        {
            "key": [encode_key(r, mode) for r in records],
            "year": [r.year for r in records],
            "month": [r.month for r in records],
            "day": [r.day for r in records],
            "value": [r.value for r in records],
            "pos": range(len(records)),
        }
    ).astype({"key": object, "value": "int64"})


def _consecutive_extremes(values: np.ndarray) -> tuple[int, int]:
    """Return (max_increase, max_drop) over consecutive deltas of `values`."""
    if values.size < 2:
        return 0, 0
    deltas = np.diff(values)
    return max(int(deltas.max()), 0), min(int(deltas.min()), 0)


def aggregate_records(records: Sequence[DeclaredPerson], mode: str | None) -> list[Group]:
    """Group records by `mode` and compute per-group statistics.

    Args:
        records: Records of a single request, in any order.
        mode: Grouping mode (``y``, ``m``, ``d``, ``ym``, ``yd``, ``md``);
            empty or unknown modes put every record in one ``all`` group.

    Returns:
        Groups ordered by key (string order). Empty input gives an empty list.
    """
    mode = normalize_mode(mode)
    if not records:
        log.info("No records to aggregate (mode=%s)", mode)
        return []

    pdf = _records_frame(records, mode)
    # chronological inside each bucket, input order on ties
    pdf = pdf.sort_values(["key", *DATE_COLS, "pos"], kind="mergesort").reset_index(drop=True)

    stats = pdf.groupby("key", sort=True)["value"].agg(["sum", "min", "max", "count"])
    stats["average"] = (stats["sum"].abs() // stats["count"]) * np.sign(stats["sum"])
    # first group is its own baseline
    stats["change"] = stats["sum"] - stats["sum"].shift(1, fill_value=stats["sum"].iloc[0])

    groups: list[Group] = []
    for key, bucket in pdf.groupby("key", sort=True):
        row = stats.loc[key]
        max_increase, max_drop = _consecutive_extremes(bucket["value"].to_numpy())
        groups.append(
            Group(
                key=str(key),
                records=tuple(records[i] for i in bucket["pos"]),
                total=int(row["sum"]),
                min_value=int(row["min"]),
                max_value=int(row["max"]),
                average=int(row["average"]),
                max_increase=max_increase,
                max_drop=max_drop,
                change=int(row["change"]),
            )
        )

    log.info("Built %d groups from %d records (mode=%s)", len(groups), len(records), mode)
    return groups


def summarize_groups(groups: Sequence[Group]) -> pd.DataFrame:
    """Return one row of statistics per group, in group order.

    Columns: `key`, `records`, `value`, `change`, `min`, `max`, `average`,
    `max_drop`, `max_increase`.
    """
    return pd.DataFrame(
        [
            {
                "key": g.key,
                "records": g.count,
                "value": g.total,
                "change": g.change,
                "min": g.min_value,
                "max": g.max_value,
                "average": g.average,
                "max_drop": g.max_drop,
                "max_increase": g.max_increase,
            }
            for g in groups
        ],
        columns=[
            "key", "records", "value", "change", "min",
            "max", "average", "max_drop", "max_increase",
        ],
    )
