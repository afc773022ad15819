"""
Time Parsing & Conversion
=========================
Pure functions that validate, normalise and convert wall-clock times between
IANA timezones.

Why is this file needed?
------------------------
1. Single source of truth: Every widget and controller that needs to turn user
   input like "930" or "9:30" into "09:30" goes through `normalize`.
2. DST correctness: `convert` resolves the UTC offset with the zone rules for
   the requested calendar day, so a conversion on 15 January and one on
   15 July can give different answers for the same pair of cities.

Failure policy: nothing here raises on bad input. Malformed text, out-of-range
components and unknown zones all yield ``None``.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone, tzinfo
import logging
import re
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

# ASCII digits only; "\d" would also accept other Unicode digits
_COLON_PATTERN = re.compile(r"([0-9]{1,2}):([0-9]{2})")
_RAW_DIGITS_PATTERN = re.compile(r"[0-9]{3,4}")

ZoneLike = Union[str, tzinfo]


@dataclass(frozen=True)
class ConversionResult:
    """Converted clock text plus the absolute instant it represents."""
    time: str
    instant: datetime
    timezone: tzinfo

    @property
    def date(self) -> date:
        """Calendar date at the destination (may differ from the reference date)."""
        return self.instant.date()


def _in_range(hours: int, minutes: int) -> bool:
    return 0 <= hours <= 23 and 0 <= minutes <= 59


def _format(hours: int, minutes: int) -> str:
    return f"{hours:02d}:{minutes:02d}"


def is_valid_time(text: str) -> bool:
    """
    Strict check for ``H:mm`` / ``HH:mm``.

    Raw digits ("930") are rejected here; only `normalize` accepts them.
    """
    match = _COLON_PATTERN.fullmatch(text.strip())
    if match is None:
        return False
    return _in_range(int(match.group(1)), int(match.group(2)))


def _parse_raw_digits(digits: str) -> Optional[str]:
    """3 digits read as H+MM, 4 digits as HH+MM."""
    if _RAW_DIGITS_PATTERN.fullmatch(digits) is None:
        return None

    split = 1 if len(digits) == 3 else 2
    hours, minutes = int(digits[:split]), int(digits[split:])
    if not _in_range(hours, minutes):
        return None
    return _format(hours, minutes)


def normalize(text: str) -> Optional[str]:
    """
    Turn user input into canonical zero-padded ``HH:mm``.

    Examples:
        - normalize("9:30") -> "09:30"
        - normalize("930") -> "09:30"
        - normalize("2359") -> "23:59"
        - normalize("2500") -> None
    """
    trimmed = text.strip()

    match = _COLON_PATTERN.fullmatch(trimmed)
    if match is not None:
        hours, minutes = int(match.group(1)), int(match.group(2))
        if not _in_range(hours, minutes):
            return None
        return _format(hours, minutes)

    return _parse_raw_digits(trimmed)


def resolve_zone(zone: ZoneLike) -> Optional[tzinfo]:
    """Return a tzinfo for an IANA identifier (or pass one through), else None."""
    if isinstance(zone, tzinfo):
        return zone
    if not isinstance(zone, str) or not zone:
        return None
    try:
        return ZoneInfo(zone)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        # ValueError: malformed keys; OSError: keys naming a directory ("America")
        logger.debug(f"Unresolvable timezone '{zone}': {e}")
        return None


def convert(
    text: str,
    from_zone: ZoneLike,
    to_zone: ZoneLike,
    reference_date: Union[date, datetime],
) -> Optional[ConversionResult]:
    """
    Convert a wall-clock time in `from_zone` into `to_zone` on `reference_date`.

    The year/month/day of `reference_date` are combined with the parsed
    hour/minute (second 0) and interpreted in `from_zone`, so the offset comes
    from that zone's rules for that specific day. A wall time inside a
    spring-forward gap uses the pre-transition offset and therefore lands
    after the gap.

    Returns:
        ConversionResult with the ``HH:mm`` text in `to_zone` and the aware
        instant (expressed in `to_zone`), or None on any failure.
    """
    normalized = normalize(text)
    if normalized is None:
        return None

    source_tz = resolve_zone(from_zone)
    target_tz = resolve_zone(to_zone)
    if source_tz is None or target_tz is None:
        return None

    hours, minutes = (int(part) for part in normalized.split(":"))
    day = reference_date.date() if isinstance(reference_date, datetime) else reference_date

    source = datetime(day.year, day.month, day.day, hours, minutes, 0, tzinfo=source_tz)
    # Round-trip through UTC so gap/fold handling follows the source offset
    instant = source.astimezone(timezone.utc).astimezone(target_tz)

    return ConversionResult(
        time=_format(instant.hour, instant.minute),
        instant=instant,
        timezone=target_tz,
    )
