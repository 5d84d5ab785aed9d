from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from zoneinfo import ZoneInfo

from mop.domain.common.timeofday import format_minutes, in_window, parse_hhmm
from mop.domain.menu.entities import AvailabilityKind, MenuItem
from mop.domain.restaurant.entities import Restaurant, Weekday


class AvailabilityCode(str, Enum):
    AVAILABLE = "AVAILABLE"
    CLOSED_TODAY = "CLOSED_TODAY"
    CLOSED_NOW = "CLOSED_NOW"
    CLOSED_FOR_DAY = "CLOSED_FOR_DAY"
    ITEM_NOT_YET_AVAILABLE = "ITEM_NOT_YET_AVAILABLE"
    ITEM_NO_LONGER_AVAILABLE = "ITEM_NO_LONGER_AVAILABLE"


@dataclass(frozen=True)
class AvailabilityResult:
    is_available: bool
    code: AvailabilityCode
    reason: str


AVAILABLE = AvailabilityResult(
    is_available=True,
    code=AvailabilityCode.AVAILABLE,
    reason="Available",
)


def _local_time(restaurant: Restaurant, now: datetime) -> datetime:
    if now.tzinfo is None:
        return now
    return now.astimezone(ZoneInfo(restaurant.timezone))


def evaluate(item: MenuItem, restaurant: Restaurant, now: datetime) -> AvailabilityResult:
    """Decide whether ``item`` can be ordered from ``restaurant`` at ``now``.

    The store's schedule for the current weekday is checked first, then the
    item's own CUSTOM_TIME window. Both use inclusive bounds and treat a
    window whose close precedes its open as wrapping past midnight.
    """
    if restaurant.operating_hours is None:
        return AVAILABLE

    local_now = _local_time(restaurant, now)
    today = restaurant.operating_hours.for_day(Weekday.from_index(local_now.weekday()))
    minute_of_day = local_now.hour * 60 + local_now.minute

    if not today.is_open or not today.slots:
        return AvailabilityResult(
            is_available=False,
            code=AvailabilityCode.CLOSED_TODAY,
            reason="Restaurant is closed today.",
        )

    if not any(in_window(minute_of_day, s.open_minute, s.close_minute) for s in today.slots):
        next_slot = next((s for s in today.slots if s.open_minute > minute_of_day), None)
        if next_slot is not None:
            return AvailabilityResult(
                is_available=False,
                code=AvailabilityCode.CLOSED_NOW,
                reason=(
                    "Restaurant is currently closed. "
                    f"Opens at {format_minutes(next_slot.open_minute)}."
                ),
            )
        return AvailabilityResult(
            is_available=False,
            code=AvailabilityCode.CLOSED_FOR_DAY,
            reason="Restaurant is closed for the day.",
        )

    window = item.availability
    if window is not None and window.kind == AvailabilityKind.CUSTOM_TIME:
        # ItemAvailability guarantees both bounds for CUSTOM_TIME.
        start = parse_hhmm(window.start_time or "")
        end = parse_hhmm(window.end_time or "")
        if not in_window(minute_of_day, start, end):
            if minute_of_day < start:
                return AvailabilityResult(
                    is_available=False,
                    code=AvailabilityCode.ITEM_NOT_YET_AVAILABLE,
                    reason=f"This item is available from {format_minutes(start)}.",
                )
            return AvailabilityResult(
                is_available=False,
                code=AvailabilityCode.ITEM_NO_LONGER_AVAILABLE,
                reason="This item is no longer available today.",
            )

    return AVAILABLE
