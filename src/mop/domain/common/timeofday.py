from __future__ import annotations

MINUTES_PER_DAY = 24 * 60


def parse_hhmm(value: str) -> int:
    """Return minutes from midnight for an ``HH:mm`` string."""
    parts = value.split(":")
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        raise ValueError(f"time must be HH:mm, got {value!r}")
    hours, minutes = int(parts[0]), int(parts[1])
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise ValueError(f"time out of range: {value!r}")
    return hours * 60 + minutes


def format_minutes(minutes: int) -> str:
    hours = (minutes // 60) % 24
    mins = minutes % 60
    suffix = "PM" if hours >= 12 else "AM"
    hour12 = hours % 12 or 12
    return f"{hour12}:{mins:02d} {suffix}"


def in_window(minute_of_day: int, open_minute: int, close_minute: int) -> bool:
    # Inclusive on both ends. close < open means the window wraps past midnight.
    if open_minute <= close_minute:
        return open_minute <= minute_of_day <= close_minute
    return minute_of_day >= open_minute or minute_of_day <= close_minute
