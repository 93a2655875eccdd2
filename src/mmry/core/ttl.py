"""
Parse "<amount> <unit>" TTL strings into milliseconds.
Why: human-readable expiry at the call site ("5 minutes", "1 day").
"""

from typing import Dict

from .errors import InvalidAmount, InvalidUnit
from .logging import get_logger

_LOG = get_logger(__name__)

_UNIT_MS: Dict[str, int] = {
    "second": 1000,
    "seconds": 1000,
    "minute": 60 * 1000,
    "minutes": 60 * 1000,
    "hour": 60 * 60 * 1000,
    "hours": 60 * 60 * 1000,
    "day": 24 * 60 * 60 * 1000,
    "days": 24 * 60 * 60 * 1000,
}


def parse_ttl(ttl: str) -> int:
    """Return the duration of ``ttl`` in milliseconds.

    Raises InvalidUnit for an unknown or missing unit and InvalidAmount when
    the amount is not a non-negative integer.
    """
    amount, _, unit = ttl.partition(" ")
    factor = _UNIT_MS.get(unit.lower())
    if factor is None:
        _LOG.warning(f"rejected ttl={ttl!r} reason=unit")
        raise InvalidUnit(ttl, f"unknown unit {unit!r}")
    if not amount.isdigit() or not amount.isascii():
        _LOG.warning(f"rejected ttl={ttl!r} reason=amount")
        raise InvalidAmount(ttl, f"amount {amount!r} is not a non-negative integer")
    return int(amount) * factor
