from __future__ import annotations

import logging

import pytest

from declared_persons.aggregate.build_groups import aggregate_records
from declared_persons.aggregate.report import (
    MixedDistrictError,
    build_report,
    resolve_district_name,
)
from tests.factories import make_record


def test_build_report_decodes_fields_for_mode() -> None:
    records = [
        make_record(2017, 6, 15, "10", id=1),
        make_record(2017, 6, 20, "30", id=2),
        make_record(2017, 7, 1, "5", id=3),
    ]
    rows = build_report(aggregate_records(records, "ym"), "ym", "Centrs")

    assert [r.to_json_dict() for r in rows] == [
        {
            "district_name": "Centrs",
            "year": 2017,
            "month": 6,
            "value": 40,
            "change": 0,
            "Max": 30,
            "Min": 10,
            "Average": 20,
            "Max_drop": 0,
            "Max_increase": 20,
        },
        {
            "district_name": "Centrs",
            "year": 2017,
            "month": 7,
            "value": 5,
            "change": -35,
            "Max": 5,
            "Min": 5,
            "Average": 5,
            "Max_drop": 0,
            "Max_increase": 0,
        },
    ]


def test_build_report_all_mode_has_no_date_fields() -> None:
    rows = build_report(aggregate_records([make_record()], ""), "", "Centrs")
    (row,) = rows
    assert row.year is None and row.month is None and row.day is None
    assert "year" not in row.to_json_dict()


def test_build_report_md_mode() -> None:
    rows = build_report(aggregate_records([make_record(2017, 6, 5)], "md"), "md", "X")
    assert (rows[0].year, rows[0].month, rows[0].day) == (None, 6, 5)


def test_resolve_district_name() -> None:
    records = [make_record(id=1), make_record(id=2)]
    assert resolve_district_name(records) == "Centrs"
    assert resolve_district_name([]) == ""


def test_resolve_district_name_rejects_mixed_districts() -> None:
    records = [make_record(district_id=1), make_record(district_id=2, district_name="Other")]
    with pytest.raises(MixedDistrictError):
        resolve_district_name(records)


def test_build_report_warns_once_for_unknown_mode(caplog: pytest.LogCaptureFixture) -> None:
    groups = aggregate_records([make_record(id=1), make_record(2018, id=2)], "week")
    caplog.clear()
    with caplog.at_level(logging.WARNING):
        rows = build_report(groups, "week", "Centrs")
    assert len(rows) == 1
    assert len([r for r in caplog.records if "week" in r.getMessage()]) == 1
