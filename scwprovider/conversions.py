"""Conversions between declared values and API values (expand/flatten)."""

import ipaddress
import re
import uuid
from datetime import timedelta

from .errors import ValidationError

_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_UNIT_SECONDS = {"h": 3600.0, "m": 60.0, "s": 1.0, "ms": 0.001}


def expand_or_generate_name(name: str | None, prefix: str) -> str:
    """Return name, or a generated ``scw-<prefix>-<suffix>`` when it is empty."""
    if name:
        return name
    return f"scw-{prefix}-{uuid.uuid4().hex[:8]}"


def parse_duration(value: str) -> timedelta:
    """Parse a Go-style duration such as ``10s``, ``1m30s`` or ``1.5h``.

    Raises:
        ValidationError: If value is not a duration
    """
    text = value.strip()
    if text in ("0", ""):
        return timedelta(0)

    position = 0
    seconds = 0.0
    for match in _DURATION_PART_RE.finditer(text):
        if match.start() != position:
            break
        seconds += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        position = match.end()

    if position != len(text):
        raise ValidationError(f"invalid duration: {value!r}")
    return timedelta(seconds=seconds)


def format_duration(value: timedelta | float | int | None) -> str | None:
    """Format a duration compactly (``90`` -> ``1m30s``)."""
    if value is None:
        return None
    total = value.total_seconds() if isinstance(value, timedelta) else float(value)
    if total == 0:
        return "0s"

    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    text = ""
    if hours:
        text += f"{int(hours)}h"
    if minutes:
        text += f"{int(minutes)}m"
    if seconds:
        text += f"{seconds:g}s"
    return text


def normalize_duration(value: str | None) -> str | None:
    if value is None:
        return None
    return format_duration(parse_duration(value))


def expand_api_duration(value: str | None) -> str | None:
    """Declared duration -> API duration string (``1m`` -> ``60s``)."""
    if value is None:
        return None
    return f"{parse_duration(value).total_seconds():g}s"


def seconds_to_api_duration(seconds: int | None) -> str | None:
    if seconds is None:
        return None
    return f"{seconds}s"


def api_duration_to_seconds(value: str | None) -> int | None:
    """API duration string (``300.000000000s``) -> whole seconds."""
    if value is None:
        return None
    return int(parse_duration(value).total_seconds())


def expand_ip_net(value: str) -> str:
    """Validate an address with its prefix length (``192.168.1.10/24``)."""
    try:
        return str(ipaddress.ip_interface(value))
    except ValueError as e:
        raise ValidationError(f"invalid ip_net {value!r}: {e}") from e


def flatten_ip_net(value: str | None) -> str:
    if not value:
        return ""
    return str(ipaddress.ip_interface(value))
