from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from mop.domain.common.ids import RestaurantId
from mop.domain.common.timeofday import parse_hhmm


class Weekday(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_index(cls, index: int) -> Weekday:
        # datetime.weekday(): Monday == 0
        return list(cls)[index]


@dataclass(frozen=True)
class TimeSlot:
    open: str
    close: str

    def __post_init__(self) -> None:
        parse_hhmm(self.open)
        parse_hhmm(self.close)

    @property
    def open_minute(self) -> int:
        return parse_hhmm(self.open)

    @property
    def close_minute(self) -> int:
        return parse_hhmm(self.close)


@dataclass(frozen=True)
class DaySchedule:
    is_open: bool
    slots: tuple[TimeSlot, ...] = ()


CLOSED_DAY = DaySchedule(is_open=False)


@dataclass(frozen=True)
class OperatingHours:
    days: Mapping[Weekday, DaySchedule] = field(default_factory=dict)

    def for_day(self, day: Weekday) -> DaySchedule:
        return self.days.get(day, CLOSED_DAY)


@dataclass(frozen=True)
class Restaurant:
    restaurant_id: RestaurantId
    name: str
    operating_hours: OperatingHours | None = None
    timezone: str = "UTC"

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
