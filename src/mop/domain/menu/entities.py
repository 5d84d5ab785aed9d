from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Mapping, Sequence

from mop.domain.common.ids import MenuItemId, RestaurantId
from mop.domain.common.money import Money
from mop.domain.common.outcome import Outcome, RejectionCode
from mop.domain.common.timeofday import parse_hhmm


class SelectionMode(str, Enum):
    SINGLE = "SINGLE"
    MULTIPLE = "MULTIPLE"


class AvailabilityKind(str, Enum):
    ALL_DAY = "ALL_DAY"
    CUSTOM_TIME = "CUSTOM_TIME"


@dataclass(frozen=True)
class CustomizationChoice:
    name: str
    price_delta: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        if not isinstance(self.price_delta, Decimal):
            object.__setattr__(self, "price_delta", Decimal(str(self.price_delta)))


@dataclass(frozen=True)
class CustomizationOption:
    option_id: str
    name: str
    selection_mode: SelectionMode
    required: bool
    choices: tuple[CustomizationChoice, ...] = ()

    def choice(self, name: str) -> CustomizationChoice | None:
        for candidate in self.choices:
            if candidate.name == name:
                return candidate
        return None


@dataclass(frozen=True)
class ItemAvailability:
    kind: AvailabilityKind
    start_time: str | None = None
    end_time: str | None = None

    def __post_init__(self) -> None:
        if self.kind == AvailabilityKind.CUSTOM_TIME:
            if self.start_time is None or self.end_time is None:
                raise ValueError("CUSTOM_TIME availability requires start_time and end_time")
            parse_hhmm(self.start_time)
            parse_hhmm(self.end_time)


@dataclass(frozen=True)
class MenuItem:
    item_id: MenuItemId
    restaurant_id: RestaurantId
    name: str
    price: Money
    restaurant_name: str = ""
    customization_options: tuple[CustomizationOption, ...] = ()
    availability: ItemAvailability | None = None
    category: str | None = None

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")

    def option(self, option_id: str) -> CustomizationOption | None:
        for candidate in self.customization_options:
            if candidate.option_id == option_id:
                return candidate
        return None


@dataclass(frozen=True)
class SelectedCustomization:
    option_id: str
    option_name: str
    choices: tuple[CustomizationChoice, ...] = field(default_factory=tuple)

    @property
    def price_delta(self) -> Decimal:
        return sum((choice.price_delta for choice in self.choices), Decimal("0"))


def resolve_customizations(
    item: MenuItem,
    requested: Mapping[str, Sequence[str]],
) -> Outcome[tuple[SelectedCustomization, ...]]:
    """Match requested choice names against the catalog definition of ``item``.

    Price deltas always come from the catalog. Options are returned in the
    order the item declares them.
    """
    for option_id in requested:
        if item.option(option_id) is None:
            return Outcome.reject(
                RejectionCode.INVALID_CUSTOMIZATION,
                f"unknown customization option {option_id} for item {item.item_id}",
            )

    selected: list[SelectedCustomization] = []
    for option in item.customization_options:
        names = list(requested.get(option.option_id, ()))
        if not names:
            if option.required:
                return Outcome.reject(
                    RejectionCode.INVALID_CUSTOMIZATION,
                    f"{option.name} is required",
                )
            continue
        if option.selection_mode == SelectionMode.SINGLE and len(names) > 1:
            return Outcome.reject(
                RejectionCode.INVALID_CUSTOMIZATION,
                f"{option.name} accepts a single choice",
            )
        if len(set(names)) != len(names):
            return Outcome.reject(
                RejectionCode.INVALID_CUSTOMIZATION,
                f"duplicate choice for {option.name}",
            )

        choices: list[CustomizationChoice] = []
        for name in names:
            choice = option.choice(name)
            if choice is None:
                return Outcome.reject(
                    RejectionCode.INVALID_CUSTOMIZATION,
                    f"unknown choice {name!r} for {option.name}",
                )
            choices.append(choice)
        selected.append(
            SelectedCustomization(
                option_id=option.option_id,
                option_name=option.name,
                choices=tuple(choices),
            )
        )
    return Outcome.success(tuple(selected))
