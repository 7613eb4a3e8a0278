"""
Duration parsing for Ingress-DNS.

Accepts the duration format used by Kubernetes tooling, e.g. '10s', '1m30s',
'1.5h' or '250ms'.
"""

import math
import re

_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(duration_str: str) -> float:
    """
    Parse a duration string into seconds.

    Args:
        duration_str: Duration string, optionally signed

    Returns:
        float: Duration in seconds

    Raises:
        ValueError: If the string is not a valid duration
    """
    if not duration_str:
        raise ValueError("empty duration")

    value = duration_str
    sign = 1.0
    if value[0] in "+-":
        if value[0] == "-":
            sign = -1.0
        value = value[1:]

    if value == "0":
        return 0.0

    total = 0.0
    pos = 0
    while pos < len(value):
        match = _COMPONENT.match(value, pos)
        if not match:
            raise ValueError(f"invalid duration {duration_str!r}")
        number, unit = match.groups()
        total += float(number) * _UNITS[unit]
        pos = match.end()

    if pos == 0:
        raise ValueError(f"invalid duration {duration_str!r}")
    if not math.isfinite(total):
        raise ValueError(f"duration {duration_str!r} out of range")

    return sign * total
