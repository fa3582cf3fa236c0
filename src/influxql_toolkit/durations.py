"""Duration text as written and returned by InfluxDB (e.g. ``24h0m0s``)."""

from __future__ import annotations

from datetime import timedelta
import re

import pandas as pd

# One or more <number><unit> components, no separators.
_DURATION = re.compile(r"(?:(?:\d+\.?\d*|\.\d+)(?:ns|us|µs|μs|ms|s|m|h))+")


def format_duration(value: timedelta) -> str:
    """Render a timedelta in the compound form, e.g. ``1h0m0s`` or ``1.5ms``."""
    total = (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
    if total == 0:
        return "0s"
    sign = "-" if total < 0 else ""
    total = abs(total)

    if total < 1_000:
        return f"{sign}{total}µs"
    if total < 1_000_000:
        return f"{sign}{_with_fraction(total, 1_000)}ms"

    seconds, micros = divmod(total, 1_000_000)
    hours, rest = divmod(seconds, 3_600)
    minutes, seconds = divmod(rest, 60)

    text = f"{_with_fraction(seconds * 1_000_000 + micros, 1_000_000)}s"
    if hours or minutes:
        text = f"{minutes}m{text}"
    if hours:
        text = f"{hours}h{text}"
    return sign + text


def parse_duration(text: str) -> timedelta:
    """Parse the compound duration grammar (``24h0m0s``, ``1.5h``, ``300ms``).

    Nanoseconds below one microsecond are truncated. Raises ValueError when
    the text does not follow the grammar.
    """
    if not isinstance(text, str):
        raise ValueError(f"invalid duration: {text!r}")
    body = text
    sign = 1
    if body[:1] in ("-", "+"):
        sign = -1 if body[0] == "-" else 1
        body = body[1:]
    if body == "0":
        return timedelta(0)
    if _DURATION.fullmatch(body) is None:
        raise ValueError(f"invalid duration: {text!r}")
    try:
        nanos = pd.Timedelta(body.replace("μs", "us").replace("µs", "us")).value
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"invalid duration: {text!r}") from exc
    return timedelta(microseconds=sign * (nanos // 1_000))


def _with_fraction(value: int, unit: int) -> str:
    whole, frac = divmod(value, unit)
    if not frac:
        return str(whole)
    digits = len(str(unit)) - 1
    return f"{whole}.{frac:0{digits}d}".rstrip("0")
