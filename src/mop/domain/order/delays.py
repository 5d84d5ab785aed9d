from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from mop.domain.order.entities import OrderStatus

UNACCEPTED_DELAY = timedelta(minutes=5)
PREPARATION_DELAY = timedelta(minutes=15)


class DelayLevel(str, Enum):
    NONE = "NONE"
    UNACCEPTED = "UNACCEPTED"
    PREPARATION = "PREPARATION"


class DelaySeverity(str, Enum):
    NONE = "none"
    WARNING = "warning"
    HIGH = "high"


@dataclass(frozen=True)
class DelayClassification:
    level: DelayLevel
    severity: DelaySeverity
    elapsed: timedelta
    message: str

    @property
    def is_delayed(self) -> bool:
        return self.level != DelayLevel.NONE


def _on_time(elapsed: timedelta) -> DelayClassification:
    return DelayClassification(
        level=DelayLevel.NONE,
        severity=DelaySeverity.NONE,
        elapsed=elapsed,
        message="",
    )


def classify_delay(
    status: OrderStatus,
    placed_at: datetime,
    accepted_at: datetime | None,
    now: datetime,
) -> DelayClassification:
    if status == OrderStatus.PLACED:
        elapsed = now - placed_at
        if elapsed > UNACCEPTED_DELAY:
            return DelayClassification(
                level=DelayLevel.UNACCEPTED,
                severity=DelaySeverity.WARNING,
                elapsed=elapsed,
                message=f"Unaccepted for over {int(UNACCEPTED_DELAY.total_seconds() // 60)} mins",
            )
        return _on_time(elapsed)

    if status == OrderStatus.PREPARING and accepted_at is not None:
        elapsed = now - accepted_at
        if elapsed > PREPARATION_DELAY:
            return DelayClassification(
                level=DelayLevel.PREPARATION,
                severity=DelaySeverity.HIGH,
                elapsed=elapsed,
                message=(
                    f"In preparation for over {int(PREPARATION_DELAY.total_seconds() // 60)} mins"
                ),
            )
        return _on_time(elapsed)

    return _on_time(timedelta(0))
