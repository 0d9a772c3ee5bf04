"""
Network time helpers.

Electricity networks publish timestamps in a fixed local offset (NEM is
AEST/UTC+10 all year round, WEM is AWST/UTC+8). The API sends wall-clock
strings that are either zone-naive or carry a zone tag, and the client must
turn them into absolute instants without consulting the host's local zone.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

import pandas as pd

from . import canon, exceptions
from .config import TableConfig, default_config
from .types import OffsetSpec

# Trailing zone designator, optionally preceded by fractional seconds
_ZONE_SUFFIX = re.compile(r"(?:\.\d+)?(?:[Zz]|[+-]\d{2}:?\d{2})$")
_OFFSET = re.compile(r"^([+-])(\d{2}):?(\d{2})$")
_WALL_CLOCK = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}")
_ISO_NAIVE = "%Y-%m-%dT%H:%M:%S"


def get_network_timezone(network: str) -> float:
    """Fixed UTC offset in hours for a network code (e.g. 'NEM' -> 10)."""
    code = str(network).strip().upper()
    if code not in canon.NETWORK_TIMEZONE_OFFSETS:
        raise exceptions.NetworkError(
            f"Unknown network {network!r}. "
            f"Expected one of: {', '.join(canon.NETWORK_TIMEZONE_OFFSETS)}."
        )
    return canon.NETWORK_TIMEZONE_OFFSETS[code]


def get_network_timezone_offset(network: str) -> int:
    """Fixed UTC offset for a network in milliseconds."""
    return int(get_network_timezone(network) * 60 * 60 * 1000)


def format_utc_offset(hours: float) -> str:
    """Hours → '+HH:MM' (e.g. 10 -> '+10:00', 9.5 -> '+09:30', -3 -> '-03:00')."""
    sign = "+" if hours >= 0 else "-"
    total = int(round(abs(hours) * 60))
    return f"{sign}{total // 60:02d}:{total % 60:02d}"


def network_utc_offset(network: str) -> str:
    return format_utc_offset(get_network_timezone(network))


def network_tzinfo(network: str) -> timezone:
    return timezone(timedelta(hours=get_network_timezone(network)))


def normalise_offset(utc_offset: OffsetSpec) -> str:
    """
    Normalise an offset to '+HH:MM'.

    Accepts an offset string ('+10:00', '+1000', 'Z'), a number of hours
    or a network code ('NEM', 'WEM', 'AU').
    """
    if isinstance(utc_offset, bool):
        raise exceptions.TimestampError(f"Invalid UTC offset: {utc_offset!r}")
    if isinstance(utc_offset, (int, float)):
        if not math.isfinite(utc_offset):
            raise exceptions.TimestampError(f"Invalid UTC offset: {utc_offset!r}")
        return format_utc_offset(utc_offset)

    s = str(utc_offset).strip()
    if s.upper() in canon.NETWORK_TIMEZONE_OFFSETS:
        return network_utc_offset(s)
    if s.upper() == "Z":
        return "+00:00"
    m = _OFFSET.match(s)
    if m is None:
        raise exceptions.TimestampError(f"Invalid UTC offset: {utc_offset!r}")
    sign, hh, mm = m.groups()
    return f"{sign}{hh}:{mm}"


def reconstruct(timestamp: str, utc_offset: OffsetSpec) -> pd.Timestamp:
    """
    Interpret a network timestamp string as an absolute instant.

    Any zone designator already on the string is discarded and replaced by
    `utc_offset`, so the wall-clock value is always read in network time:

        reconstruct("2024-01-01T00:00:00", "+10:00")   -> 2023-12-31 14:00 UTC
        reconstruct("2024-01-01T00:00:00Z", "+10:00")  -> 2023-12-31 14:00 UTC

    Callers that need a zone-qualified string parsed as-is should use
    pd.Timestamp directly instead.
    """
    if not isinstance(timestamp, str):
        raise exceptions.TimestampError(
            f"Timestamp must be a string, got {type(timestamp).__name__}"
        )
    offset = normalise_offset(utc_offset)
    wall = _ZONE_SUFFIX.sub("", timestamp.strip())
    if not wall:
        raise exceptions.TimestampError(f"Empty timestamp {timestamp!r}")
    try:
        ts = pd.Timestamp(wall + offset)
    except (ValueError, TypeError, OverflowError) as exc:
        raise exceptions.TimestampError(
            f"Cannot parse timestamp {timestamp!r} with offset {offset}"
        ) from exc
    if pd.isna(ts) or ts.tzinfo is None:
        raise exceptions.TimestampError(
            f"Cannot parse timestamp {timestamp!r} with offset {offset}"
        )
    return ts


def is_aware(value: str | datetime) -> bool:
    """True if the value carries timezone information."""
    if isinstance(value, datetime):
        return value.tzinfo is not None
    return _ZONE_SUFFIX.search(str(value).strip()) is not None


def strip_timezone(value: str) -> str:
    """Return the leading 'YYYY-MM-DDTHH:MM:SS' of value, or value unchanged."""
    m = _WALL_CLOCK.match(value)
    return m.group(0) if m else value


def make_aware(value: str | datetime, network: str) -> str:
    """Keep the wall-clock value and tag it with the network offset."""
    if isinstance(value, datetime):
        wall = pd.Timestamp(value.replace(tzinfo=None))
    else:
        wall = pd.Timestamp(_ZONE_SUFFIX.sub("", value.strip()))
    return wall.strftime(_ISO_NAIVE) + network_utc_offset(network)


def get_last_complete_interval(
    network: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
    minutes: Optional[int] = None,
    config: Optional[TableConfig] = None,
) -> str:
    """
    Last fully elapsed dispatch interval in network-local wall time.

    Returned without zone information, the format the API expects for
    date_start/date_end. `now` defaults to the current time; naive values
    are read as UTC.
    """
    cfg = config or default_config()
    code = network or cfg.default_network
    step = int(minutes or cfg.interval_minutes)

    ts = pd.Timestamp.now(tz="UTC") if now is None else pd.Timestamp(now)
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    local = ts.tz_convert(network_tzinfo(code))
    last = local.floor(f"{step}min") - pd.Timedelta(minutes=step)
    return last.strftime(_ISO_NAIVE)
