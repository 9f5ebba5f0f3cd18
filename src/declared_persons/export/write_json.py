"""Write report rows to a JSON file."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Sequence

from declared_persons.models import OutputRow

log = logging.getLogger(__name__)


def save_report(rows: Sequence[OutputRow], path: Path) -> Path:
    """Write `rows` as an indented JSON array to `path`.

    Parent directories are created as needed; date fields that do not apply
    to the grouping mode are omitted from each row.

    Args:
        rows: Rows produced by `build_report`.
        path: Destination file.

    Returns:
        The path written.

    Raises:
        OSError: if the file cannot be written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = [row.to_json_dict() for row in rows]
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    log.info("Data successfully exported to %s (%d rows)", path, len(payload))
    return path
