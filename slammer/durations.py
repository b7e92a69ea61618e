# slammer/durations.py
"""
Elapsed-time helpers.

Durations travel through the package as seconds (``int``/``float``) or as
``datetime.timedelta``. They are rendered in the compact unit form cue
operators are used to reading on a console (``150ms``, ``1.5s``, ``1m1s``)
and parsed back from the same form when they come from a config file.
"""

import re
from datetime import timedelta
from typing import Union

Duration = Union[int, float, timedelta]

NANOSECOND = 1
MICROSECOND = 1000 * NANOSECOND
MILLISECOND = 1000 * MICROSECOND
SECOND = 1000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

_UNITS = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "µs": MICROSECOND,  # micro sign
    "μs": MICROSECOND,  # greek mu
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
}

_RE_GROUP = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def to_nanoseconds(value: Duration) -> int:
    """Convert seconds or a timedelta to whole nanoseconds."""
    if isinstance(value, timedelta):
        whole = (value.days * 86400 + value.seconds) * SECOND
        return whole + value.microseconds * MICROSECOND
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"duration must be seconds or timedelta, got {type(value).__name__}")
    return int(round(value * SECOND))


def to_seconds(value: Duration) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds()
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"duration must be seconds or timedelta, got {type(value).__name__}")
    return float(value)


def _fmt_frac(value: int, digits: int) -> str:
    """Render value / 10**digits with trailing zeros of the fraction dropped."""
    whole, frac = divmod(value, 10 ** digits)
    if not frac:
        return str(whole)
    return f"{whole}.{str(frac).zfill(digits).rstrip('0')}"


def format_duration(value: Duration) -> str:
    """
    Render a duration the way the cue console expects it.

    >>> format_duration(0.15)
    '150ms'
    >>> format_duration(61)
    '1m1s'
    """
    ns = to_nanoseconds(value)
    if ns == 0:
        return "0s"

    sign = "-" if ns < 0 else ""
    ns = abs(ns)

    if ns < MICROSECOND:
        return f"{sign}{ns}ns"
    if ns < MILLISECOND:
        return f"{sign}{_fmt_frac(ns, 3)}µs"
    if ns < SECOND:
        return f"{sign}{_fmt_frac(ns, 6)}ms"

    hours, rest = divmod(ns, HOUR)
    minutes, rest = divmod(rest, MINUTE)
    seconds = _fmt_frac(rest, 9) + "s"
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}"
    if minutes:
        return f"{sign}{minutes}m{seconds}"
    return sign + seconds


def parse_duration(value) -> float:
    """
    Parse a config duration into seconds.

    Accepts a plain number of seconds or a string of ``<number><unit>``
    groups, e.g. ``"10ms"``, ``"1.5s"``, ``"1m30s"``. A bare ``"0"`` is
    allowed. Raises ValueError on anything else, including negatives.
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        if value < 0:
            raise ValueError(f"duration must not be negative: {value!r}")
        return float(value)
    if not isinstance(value, str):
        raise ValueError(f"invalid duration: {value!r}")

    text = value.strip()
    if text.startswith("-"):
        raise ValueError(f"duration must not be negative: {value!r}")
    text = text.lstrip("+")
    if text == "0":
        return 0.0
    if not text:
        raise ValueError("empty duration")

    total = 0.0
    pos = 0
    while pos < len(text):
        m = _RE_GROUP.match(text, pos)
        if not m:
            raise ValueError(f"invalid duration: {value!r}")
        total += float(m.group(1)) * _UNITS[m.group(2)]
        pos = m.end()
    return total / SECOND
