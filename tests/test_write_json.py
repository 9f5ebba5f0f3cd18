from __future__ import annotations

import json
from pathlib import Path

from declared_persons.export.write_json import save_report
from declared_persons.models import OutputRow


def test_save_report_writes_indented_array(tmp_path: Path) -> None:
    row = OutputRow(
        district_name="Ķengarags",
        day=4,
        value=12,
        change=-3,
        maximum=7,
        minimum=5,
        average=6,
        max_drop=-2,
        max_increase=0,
    )
    out = save_report([row], tmp_path / "reports" / "out.json")

    text = out.read_text(encoding="utf-8")
    assert "Ķengarags" in text
    assert text.startswith("[\n  {")
    assert json.loads(text) == [
        {
            "district_name": "Ķengarags",
            "day": 4,
            "value": 12,
            "change": -3,
            "Max": 7,
            "Min": 5,
            "Average": 6,
            "Max_drop": -2,
            "Max_increase": 0,
        }
    ]


def test_save_report_empty(tmp_path: Path) -> None:
    out = save_report([], tmp_path / "empty.json")
    assert json.loads(out.read_text(encoding="utf-8")) == []
