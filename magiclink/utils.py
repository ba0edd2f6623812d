import re
from datetime import datetime, timedelta, timezone

MS_PER_MINUTE = 60_000


def parse_time(time_str: str) -> int:
    """Parse time string with units (s, m, h, d) to seconds.

    Examples:
        "60" -> 60 seconds
        "30m" or "30M" -> 1800 seconds
        "2h" or "2H" -> 7200 seconds
        "1d" or "1D" -> 86400 seconds
    """
    time_str = str(time_str).strip()

    # Check if it's just a number (seconds)
    if time_str.isdigit():
        return int(time_str)

    # Parse with units
    match = re.match(r'^(\d+(?:\.\d+)?)\s*(s|m|h|d)$', time_str, re.IGNORECASE)
    if not match:
        raise ValueError(f"Invalid time format: {time_str}")

    value = float(match.group(1))
    unit = match.group(2).lower()

    multipliers = {
        's': 1,
        'm': 60,        # minutes to seconds
        'h': 3600,      # hours to seconds
        'd': 86400      # days to seconds
    }

    return int(value * multipliers[unit])


def round_minutes(ms: int) -> int:
    """Round a non-negative millisecond span to the nearest minute, halves up."""
    return (ms + MS_PER_MINUTE // 2) // MS_PER_MINUTE


def ceil_minutes(ms: int) -> int:
    """Round a non-negative millisecond span up to whole minutes."""
    return -(-ms // MS_PER_MINUTE)


def format_minutes(ms: int) -> int | float:
    """Express a TTL in minutes, as an int when it is a whole number of minutes."""
    if ms % MS_PER_MINUTE == 0:
        return ms // MS_PER_MINUTE
    return ms / MS_PER_MINUTE


def to_iso(epoch_ms: int) -> str:
    """Format epoch milliseconds as an ISO-8601 UTC string, e.g. 2024-01-01T00:00:00.000Z"""
    seconds, millis = divmod(int(epoch_ms), 1000)
    dt = datetime.fromtimestamp(seconds, tz=timezone.utc) + timedelta(milliseconds=millis)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")
