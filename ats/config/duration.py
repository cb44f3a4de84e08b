"""Duration parsing for timeout settings.

Accepts the short human form used in `.env` files ("15s", "2m", "1m30s")
as well as ISO-8601 durations ("PT15S", "PT2M").
"""

import re


class DurationParseError(ValueError):
    """Raised when a duration string cannot be parsed."""

    pass


_ISO_PATTERN = re.compile(
    r"^P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+(?:\.\d+)?)S)?)?$"
)
_HUMAN_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(ms|s|m|h)")

_UNIT_SECONDS = {
    "ms": 0.001,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(duration_str: str) -> float:
    """
    Parse a duration string to seconds.

    Args:
        duration_str: Duration such as "15s", "500ms", "1m30s" or "PT15S"

    Returns:
        Duration in seconds (may be fractional)

    Raises:
        DurationParseError: If the duration string is invalid or zero

    Examples:
        >>> parse_duration("15s")
        15.0
        >>> parse_duration("PT1M")
        60.0
        >>> parse_duration("500ms")
        0.5
    """
    duration_str = duration_str.strip()

    if not duration_str:
        raise DurationParseError("Duration string cannot be empty")

    if duration_str.upper().startswith("P"):
        return _parse_iso8601_duration(duration_str)

    # A bare number is taken as seconds
    if re.fullmatch(r"\d+(?:\.\d+)?", duration_str):
        seconds = float(duration_str)
        if seconds == 0:
            raise DurationParseError(f"Duration cannot be zero: '{duration_str}'")
        return seconds

    return _parse_human_readable_duration(duration_str)


def _parse_iso8601_duration(duration_str: str) -> float:
    match = _ISO_PATTERN.match(duration_str.upper())
    if not match:
        raise DurationParseError(
            f"Invalid ISO-8601 duration format: '{duration_str}'. "
            "Expected format like 'PT15S', 'PT2M' or 'PT1H'"
        )

    days, hours, minutes, seconds = match.groups()

    total = 0.0
    if days:
        total += int(days) * 86400
    if hours:
        total += int(hours) * 3600
    if minutes:
        total += int(minutes) * 60
    if seconds:
        total += float(seconds)

    if total == 0:
        raise DurationParseError(f"Duration cannot be zero: '{duration_str}'")

    return total


def _parse_human_readable_duration(duration_str: str) -> float:
    lowered = duration_str.lower()
    matches = _HUMAN_PATTERN.findall(lowered)

    if not matches:
        raise DurationParseError(
            f"Invalid duration format: '{duration_str}'. "
            "Expected format like '15s', '500ms', '2m' or '1m30s'"
        )

    # Reject leftovers such as "15x" or "abc15s"
    parsed_str = "".join(f"{num}{unit}" for num, unit in matches)
    if parsed_str != re.sub(r"\s+", "", lowered):
        raise DurationParseError(
            f"Invalid characters in duration: '{duration_str}'. "
            "Use only digits and units: ms, s, m, h"
        )

    total = sum(float(num) * _UNIT_SECONDS[unit] for num, unit in matches)

    if total == 0:
        raise DurationParseError(f"Duration cannot be zero: '{duration_str}'")

    return total


def validate_duration_range(
    duration_seconds: float,
    min_seconds: float = 1,
    max_seconds: float = 300,
    label: str = "Timeout",
) -> None:
    """
    Validate that a duration is within an acceptable range.

    Raises:
        DurationParseError: If duration is outside the valid range
    """
    if duration_seconds < min_seconds:
        raise DurationParseError(
            f"{label} too short: {_seconds_to_human_readable(duration_seconds)}. "
            f"Minimum is {_seconds_to_human_readable(min_seconds)}."
        )

    if duration_seconds > max_seconds:
        raise DurationParseError(
            f"{label} too long: {_seconds_to_human_readable(duration_seconds)}. "
            f"Maximum is {_seconds_to_human_readable(max_seconds)}."
        )


def _seconds_to_human_readable(seconds: float) -> str:
    if seconds < 1:
        return f"{int(round(seconds * 1000))} milliseconds"
    if seconds < 60:
        whole = int(seconds) if float(seconds).is_integer() else seconds
        return f"{whole} second{'s' if whole != 1 else ''}"
    if seconds < 3600:
        minutes = int(seconds // 60)
        return f"{minutes} minute{'s' if minutes != 1 else ''}"
    hours = int(seconds // 3600)
    return f"{hours} hour{'s' if hours != 1 else ''}"
