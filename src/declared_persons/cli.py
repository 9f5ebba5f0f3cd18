"""Command-line interface for the declared persons report.

Provides subcommands: `list` and `report`. Each command is implemented as a
`cmd_*` function that accepts an argparse namespace.
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path

import requests
from dotenv import load_dotenv

from declared_persons.config import get_settings
from declared_persons.logging_config import configure_logging
from declared_persons.models import DeclaredPerson

# INGEST
from declared_persons.ingest.fetch_records import RecordQuery, fetch_records

# AGGREGATE
from declared_persons.aggregate.build_groups import aggregate_records, summarize_groups
from declared_persons.aggregate.group_key import MODE_FIELDS, normalize_mode
from declared_persons.aggregate.report import MixedDistrictError, build_report, resolve_district_name

# EXPORT
from declared_persons.export.write_json import save_report

log = logging.getLogger(__name__)


# --------------------------------------------------
# Helpers
# --------------------------------------------------
def _positive_int(text: str) -> int:
    """argparse type for identifiers and limits that must be > 0."""
    try:
        value = int(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected an integer, got {text!r}") from e
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return value


def _query_from_args(args: argparse.Namespace) -> RecordQuery:
    """Build a `RecordQuery` from the shared filter options."""
    s = get_settings()
    return RecordQuery(
        district=args.district,
        year=args.year,
        month=args.month,
        day=args.day,
        limit=args.limit if args.limit is not None else s.default_limit,
    )


def _fetch(args: argparse.Namespace) -> list[DeclaredPerson]:
    """Fetch records for the CLI filter options."""
    s = get_settings()
    return fetch_records(
        args.source or s.source_url,
        _query_from_args(args),
        timeout=args.timeout if args.timeout is not None else s.request_timeout,
    )


# --------------------------------------------------
# LIST
# --------------------------------------------------
def cmd_list(args: argparse.Namespace) -> None:
    """Fetch records and log up to `--show` of them individually.

    Args:
        args: argparse namespace with the filter options and `show`.
    """
    records = _fetch(args)
    for r in records[: args.show]:
        log.info(
            "ID: %d, District: %s (ID: %d), Year: %d, Month: %d, Day: %d, Value: %d",
            r.id, r.district_name, r.district_id, r.year, r.month, r.day, r.value,
        )
    if len(records) > args.show:
        log.info("... %d more records not shown", len(records) - args.show)


# --------------------------------------------------
# REPORT
# --------------------------------------------------
def cmd_report(args: argparse.Namespace) -> None:
    """Fetch, aggregate and optionally save the grouped report.

    Args:
        args: argparse namespace with the filter options, `group` and `out`.

    Raises:
        MixedDistrictError: if the service returned several districts.
    """
    records = _fetch(args)
    mode = normalize_mode(args.group)
    district_name = resolve_district_name(records)

    groups = aggregate_records(records, mode)
    log.info("Found %d groups based on '%s' grouping", len(groups), mode)

    if groups:
        log.info("Group summary:\n%s", summarize_groups(groups).to_string(index=False))

    rows = build_report(groups, mode, district_name)

    if args.out:
        save_report(rows, Path(args.out))


# --------------------------------------------------
# CLI
# --------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser for the CLI.

    The returned parser has subcommands `list` and `report`, both accepting
    the service address and the district/date filter options.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--source", default=None, help="Service address")
    common.add_argument("--district", type=_positive_int, required=True, help="District identifier")
    common.add_argument("--year", type=int, default=None)
    common.add_argument("--month", type=int, choices=range(1, 13), default=None, metavar="1-12")
    common.add_argument("--day", type=int, choices=range(1, 32), default=None, metavar="1-31")
    common.add_argument("--limit", type=_positive_int, default=None, help="Maximum number of records")
    common.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds")
    common.add_argument("-v", "--verbose", action="store_true")

    p = argparse.ArgumentParser(prog="declared-persons")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_list = sub.add_parser("list", parents=[common])
    p_list.add_argument("--show", type=int, default=100)

    p_report = sub.add_parser("report", parents=[common])
    p_report.add_argument(
        "--group",
        default="",
        help="Grouping option: " + ", ".join(m for m in MODE_FIELDS if m != "all"),
    )
    p_report.add_argument("--out", default=None, help="Output JSON file")

    return p


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: parse args, configure logging and dispatch commands."""
    load_dotenv()
    args = build_parser().parse_args(argv)

    s = get_settings()
    configure_logging(s.log_path, logging.DEBUG if args.verbose else logging.INFO)

    try:
        if args.cmd == "list":
            cmd_list(args)
        elif args.cmd == "report":
            cmd_report(args)
        else:
            raise SystemExit(2)
    except MixedDistrictError as e:
        log.error("%s", e)
        raise SystemExit(2) from e
    except (requests.RequestException, ValueError) as e:
        log.error("Failed to fetch records: %s", e)
        raise SystemExit(1) from e
    except OSError as e:
        log.error("Error saving to JSON: %s", e)
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
