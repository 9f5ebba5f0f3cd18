"""Group-key encoding and decoding.

A grouping mode selects which date components of a record form its bucket
key. `encode_key` renders those components into a string and `decode_key`
recovers them from the string given the same mode:

    ====  ===================  ==========
    mode  format               example
    ====  ===================  ==========
    y     year                 2017
    m     month                6
    d     day                  15
    ym    year-MM              2017-06
    yd    year-DD              2017-15
    md    MM-DD                06-15
    all   constant             all
    ====  ===================  ==========

Decoding is driven by the mode alone; the shape of a key is never used to
guess which fields it holds.
"""

from __future__ import annotations

import logging

from declared_persons.models import DeclaredPerson

log = logging.getLogger(__name__)

ALL_KEY = "all"

MODE_FIELDS: dict[str, tuple[str, ...]] = {
    "y": ("year",),
    "m": ("month",),
    "d": ("day",),
    "ym": ("year", "month"),
    "yd": ("year", "day"),
    "md": ("month", "day"),
    ALL_KEY: (),
}


def normalize_mode(mode: str | None) -> str:
    """Return a known grouping mode, falling back to ``"all"``.

    Args:
        mode: Requested mode; ``None`` or empty means no grouping.

    Returns:
        One of the keys of `MODE_FIELDS`.
    """
    if not mode:
        return ALL_KEY
    if mode not in MODE_FIELDS:
        log.warning("Unknown grouping mode %r, using a single '%s' group", mode, ALL_KEY)
        return ALL_KEY
    return mode


def mode_fields(mode: str | None) -> tuple[str, ...]:
    """Return the date fields carried by keys of `mode`."""
    return MODE_FIELDS[normalize_mode(mode)]


def encode_key(record: DeclaredPerson, mode: str | None) -> str:
    """Return the bucket key of `record` for `mode`.

    Args:
        record: Record to bucket.
        mode: Grouping mode; unknown or empty modes yield ``"all"``.

    Returns:
        Key string in the format listed in the module docstring.
    """
    mode = normalize_mode(mode)
    if mode == "y":
        return f"{record.year}"
    if mode == "m":
        return f"{record.month}"
    if mode == "d":
        return f"{record.day}"
    if mode == "ym":
        return f"{record.year}-{record.month:02d}"
    if mode == "yd":
        return f"{record.year}-{record.day:02d}"
    if mode == "md":
        return f"{record.month:02d}-{record.day:02d}"
    return ALL_KEY


def _parse_int(text: str) -> int | None:
    try:
        return int(text)
    except ValueError:
        return None


def decode_key(key: str, mode: str | None) -> dict[str, int]:
    """Recover the date components encoded in `key` for `mode`.

    Composite keys are split once on the first ``-``. A component that does
    not parse as an integer is left out of the result instead of raising.

    Args:
        key: Key produced by `encode_key`.
        mode: The mode the key was encoded with.

    Returns:
        Mapping of field name (``year``/``month``/``day``) to value, holding
        only the fields the mode carries. ``"all"`` decodes to ``{}``.
    """
    fields = mode_fields(mode)
    if not fields:
        return {}

    if len(fields) == 1:
        parts = [key]
    else:
        head, sep, tail = key.partition("-")
        if not sep:
            log.debug("Key %r has no separator for mode %r", key, mode)
            return {}
        parts = [head, tail]

    decoded: dict[str, int] = {}
    for field, text in zip(fields, parts):
        value = _parse_int(text)
        if value is None:
            log.debug("Could not parse %s from key %r", field, key)
            continue
        decoded[field] = value
    return decoded
