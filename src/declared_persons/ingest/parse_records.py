"""Validation of OData responses into `DeclaredPerson` records."""
from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from declared_persons.models import DeclaredPerson

log = logging.getLogger(__name__)


def parse_records(payload: Any) -> tuple[list[DeclaredPerson], int]:
    """Validate the records of an OData ``{"value": [...]}`` envelope.

    Items that fail validation (missing `id`, non-integer `district_id`, ...)
    are skipped and counted. A malformed `value` field does not make a record
    invalid; it parses to 0.

    Args:
        payload: Decoded JSON response body.

    Returns:
        A tuple of (list_of_records, bad_count).

    Raises:
        ValueError: if `payload` is not an object with a ``value`` list.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("value"), list):
        raise ValueError("unexpected response payload: expected an object with a 'value' list")

    good: list[DeclaredPerson] = []
    bad = 0

    for item in payload["value"]:
        try:
            good.append(DeclaredPerson.model_validate(item))
        except ValidationError as e:
            bad += 1
            log.warning("Skipping invalid record: %s", e.errors()[0].get("msg", e))

    if bad:
        log.warning("Skipped %d invalid records out of %d", bad, len(payload["value"]))
    return good, bad
