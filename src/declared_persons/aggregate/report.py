"""Map aggregated groups to report rows.

A report covers exactly one district: `resolve_district_name` checks that
precondition on the fetched records before `build_report` stamps the name on
every row.
"""
from __future__ import annotations

import logging
from typing import Sequence

from declared_persons.aggregate.build_groups import Group
from declared_persons.aggregate.group_key import decode_key, normalize_mode
from declared_persons.models import DeclaredPerson, OutputRow

log = logging.getLogger(__name__)


class MixedDistrictError(ValueError):
    """Raised when the records of one report belong to several districts."""


def resolve_district_name(records: Sequence[DeclaredPerson]) -> str:
    """Return the district name shared by all `records`.

    Args:
        records: Records of one request.

    Returns:
        The district name, or ``""`` when there are no records.

    Raises:
        MixedDistrictError: if the records span more than one `district_id`.
    """
    if not records:
        return ""

    district_ids = sorted({r.district_id for r in records})
    if len(district_ids) > 1:
        raise MixedDistrictError(
            f"records span {len(district_ids)} districts {district_ids}; "
            "a report covers a single district"
        )
    return records[0].district_name


def build_report(groups: Sequence[Group], mode: str | None, district_name: str) -> list[OutputRow]:
    """Turn groups into report rows, keeping the group order.

    Args:
        groups: Output of `aggregate_records`.
        mode: The grouping mode the groups were built with.
        district_name: Name written on every row.

    Returns:
        One `OutputRow` per group with the date fields decoded from its key.
    """
    mode = normalize_mode(mode)
    rows = [
        OutputRow(
            district_name=district_name,
            **decode_key(g.key, mode),
            value=g.total,
            change=g.change,
            maximum=g.max_value,
            minimum=g.min_value,
            average=g.average,
            max_drop=g.max_drop,
            max_increase=g.max_increase,
        )
        for g in groups
    ]
    log.debug("Built %d report rows for %s", len(rows), district_name or "<no district>")
    return rows
