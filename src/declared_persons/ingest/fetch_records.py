"""Query construction and retrieval against the declared persons service.

`RecordQuery` describes which records to fetch; `fetch_records` turns it into
an OData ``$filter``/``$top`` request and returns validated records.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests

from declared_persons.ingest.parse_records import parse_records
from declared_persons.models import DeclaredPerson

log = logging.getLogger(__name__)

PREVIEW_CHARS = 200


@dataclass(frozen=True)
class RecordQuery:
    """Filter for one request.

    Attributes:
        district: District identifier (required, positive).
        year: Optional year filter; 0 or None means any year.
        month: Optional month filter.
        day: Optional day filter.
        limit: Maximum number of records to retrieve (`$top`).
    """
    district: int
    year: int | None = None
    month: int | None = None
    day: int | None = None
    limit: int = 100

    def __post_init__(self) -> None:
        if self.district <= 0:
            raise ValueError("district must be a positive identifier")
        if self.limit <= 0:
            raise ValueError("limit must be positive")


def build_query_params(query: RecordQuery) -> dict[str, str]:
    """Return the OData query parameters for `query`.

    Args:
        query: The filter to translate.

    Returns:
        Dict with ``$filter`` (clauses joined with `` and ``) and ``$top``.
    """
    clauses = [f"district_id eq {query.district}"]
    for field in ("year", "month", "day"):
        value = getattr(query, field)
        if value:
            clauses.append(f"{field} eq {value}")

    return {"$filter": " and ".join(clauses), "$top": str(query.limit)}


def build_query_url(source: str, query: RecordQuery) -> str:
    """Return the fully encoded request URL for `query` against `source`."""
    prepared = requests.Request("GET", source, params=build_query_params(query)).prepare()
    return str(prepared.url)


def fetch_records(
    source: str,
    query: RecordQuery,
    timeout: float = 10.0,
    session: Any = None,
) -> list[DeclaredPerson]:
    """Fetch and validate the records matching `query`.

    Args:
        source: Service URL (OData entity set).
        query: Filter to apply server-side.
        timeout: Request timeout in seconds.
        session: Optional `requests.Session`-like object; a plain
            `requests.get` is used when omitted.

    Returns:
        Validated records in service order.

    Raises:
        requests.RequestException: on connection errors or non-2xx status.
        ValueError: if the body is not JSON or not an OData envelope.
    """
    url = build_query_url(source, query)
    log.info("Requesting data from %s", url)

    getter = session.get if session is not None else requests.get
    resp = getter(url, headers={"Accept": "application/json"}, timeout=timeout)
    resp.raise_for_status()

    preview = resp.text
    if len(preview) > PREVIEW_CHARS:
        preview = preview[:PREVIEW_CHARS] + "... (truncated)"
    log.debug("Response status %s, preview: %s", resp.status_code, preview)

    records, bad = parse_records(resp.json())
    log.info("Found %d matching records (%d invalid)", len(records), bad)
    return records
