"""Parsing of wait durations such as ``5sec``, ``200milli`` or ``2min``."""

import logging
import re
from collections.abc import Mapping

log = logging.getLogger(__name__)

DEFAULT_WAIT_MILLIS = 5000

# Checked in order; "milli" must come before the shorter suffixes.
UNIT_MULTIPLIERS: Mapping[str, int] = {
    "milli": 1,
    "sec": 1000,
    "min": 60 * 1000,
}

_DIGITS = re.compile(r"[0-9]+")


def parse_duration(value: str) -> int | None:
    """Convert a duration string to milliseconds.

    Returns None when the unit suffix is unknown or the amount is not a
    base-10 integer.
    """
    for suffix, multiplier in UNIT_MULTIPLIERS.items():
        if value.endswith(suffix):
            amount = value[: -len(suffix)]
            if not _DIGITS.fullmatch(amount):
                return None
            return int(amount) * multiplier
    return None


def parse_wait_for(value: str) -> int:
    """Convert a ``--waitFor`` value to milliseconds, falling back to 5 seconds."""
    millis = parse_duration(value)
    if millis is None:
        log.warning(
            "--waitFor format is wrong (%r). Applying default %dmilli",
            value,
            DEFAULT_WAIT_MILLIS,
        )
        return DEFAULT_WAIT_MILLIS
    return millis
