"""Pydantic models for incoming records and outgoing report rows.

`DeclaredPerson` validates a single record returned by the OData service and
`OutputRow` defines the JSON shape of one aggregated report entry.
"""

from __future__ import annotations

import re
from typing import Any

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator


INT_TEXT_RE = re.compile(r"^[+-]?[0-9]+$")
VALUE_RANGE = np.iinfo(np.int64)


def parse_value(raw: Any) -> int:
    """Parse the service's text-encoded `value` into an integer.

    Only ASCII decimal text with an optional sign is accepted, after stripping
    surrounding whitespace. Anything else (``None``, ``""``, ``"12a"``,
    ``"1.5"``, ``"1_000"``, non-ASCII digits, floats, ...) becomes 0, and so
    does any number outside the int64 range.
    """
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str) and INT_TEXT_RE.match(raw.strip()):
        value = int(raw.strip())
    else:
        return 0
    if not VALUE_RANGE.min <= value <= VALUE_RANGE.max:
        return 0
    return value


class DeclaredPerson(BaseModel):
    """Schema for one declared-person observation.

    Attributes:
        id: Source record id.
        year: Calendar year (0 when not reported).
        month: Calendar month, 1-based (0 when not reported).
        day: Day of month, 1-based (0 when not reported).
        value: Number of declared persons; malformed source text parses to 0.
        district_id: Numeric district identifier.
        district_name: Human-readable district name.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")
    id: int
    year: int = 0
    month: int = 0
    day: int = 0
    value: int = 0
    district_id: int
    district_name: str = ""

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, v: Any) -> int:
        return parse_value(v)

    @field_validator("year", "month", "day", mode="before")
    @classmethod
    def _missing_date_part(cls, v: Any) -> Any:
        return 0 if v is None else v


class OutputRow(BaseModel):
    """Report row for one aggregated group.

    Date fields are ``None`` when the grouping mode does not carry them and
    are dropped from the serialized form by `to_json_dict`.
    """
    model_config = ConfigDict(extra="forbid", populate_by_name=True)
    district_name: str
    year: int | None = None
    month: int | None = None
    day: int | None = None
    value: int
    change: int
    maximum: int = Field(..., alias="Max")
    minimum: int = Field(..., alias="Min")
    average: int = Field(..., alias="Average")
    max_drop: int = Field(..., alias="Max_drop", le=0)
    max_increase: int = Field(..., alias="Max_increase", ge=0)

    def to_json_dict(self) -> dict[str, Any]:
        """Return the row keyed by its report field names, without unset dates."""
        return self.model_dump(by_alias=True, exclude_none=True)
