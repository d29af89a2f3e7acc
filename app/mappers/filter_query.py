"""Pure functions for editing filter criteria and turning them into a room query.

Every edit returns a new FilterCriteria; invalid input raises ValidationError
and never produces a partially updated value.
"""

import re

from app.exceptions.custom import ValidationError
from app.schemas.catalog import FilterCriteria, RoomQuery, SortOption

ROOM_TYPES: tuple[str, ...] = (
    "Deluxe Room",
    "Executive Suite",
    "Family Room",
    "Premium Suite",
    "Standard Room",
    "Ocean View Room",
)

PRICE_RANGES: tuple[str, ...] = (
    "0 to 5000",
    "5000 to 10000",
    "10000 to 15000",
    "15000 to 20000",
)

SORT_OPTIONS: tuple[str, ...] = tuple(option.value for option in SortOption)

_CURRENCY_PREFIX_RE = re.compile(r"^\s*₹\s*")
_RANGE_RE = re.compile(r"^(\d+)\s+to\s+(\d+)$")


def normalize_price_range(label: str) -> str:
    """Strip the currency prefix a UI label may carry (" ₹ 0 to 5000")."""
    return _CURRENCY_PREFIX_RE.sub("", label).strip()


def parse_price_range(label: str) -> tuple[int, int]:
    match = _RANGE_RE.match(normalize_price_range(label))
    if not match:
        raise ValidationError(f"Unknown price range: {label!r}")
    low, high = int(match.group(1)), int(match.group(2))
    if low > high:
        raise ValidationError(f"Price range {label!r} has min above max")
    return low, high


def _toggle(values: tuple[str, ...], value: str, selected: bool) -> tuple[str, ...]:
    if selected:
        return values if value in values else values + (value,)
    return tuple(v for v in values if v != value)


def toggle_room_type(criteria: FilterCriteria, label: str, selected: bool) -> FilterCriteria:
    if label not in ROOM_TYPES:
        raise ValidationError(f"Unknown room type: {label!r}")
    return criteria.model_copy(
        update={"room_types": _toggle(criteria.room_types, label, selected)}
    )


def toggle_price_range(criteria: FilterCriteria, label: str, selected: bool) -> FilterCriteria:
    parse_price_range(label)
    return criteria.model_copy(
        update={
            "price_ranges": _toggle(
                criteria.price_ranges, normalize_price_range(label), selected
            )
        }
    )


def parse_sort_option(option: str | SortOption | None) -> SortOption | None:
    if option is None or option == "":
        return None
    try:
        return SortOption(option)
    except ValueError:
        raise ValidationError(f"Unknown sort option: {option!r}") from None


def select_sort(criteria: FilterCriteria, option: str | SortOption | None) -> FilterCriteria:
    return criteria.model_copy(update={"sort_option": parse_sort_option(option)})


def clear_criteria() -> FilterCriteria:
    return FilterCriteria()


def build_query(criteria: FilterCriteria) -> RoomQuery:
    """Translate criteria into the catalog query.

    Several price ranges are sent as one enclosing interval
    [min of mins, max of maxes]; the catalog API takes a single bound pair.
    """
    min_price: int | None = None
    max_price: int | None = None
    if criteria.price_ranges:
        bounds = [parse_price_range(label) for label in criteria.price_ranges]
        min_price = min(low for low, _ in bounds)
        max_price = max(high for _, high in bounds)

    return RoomQuery(
        room_types=criteria.room_types,
        min_price=min_price,
        max_price=max_price,
        sort_by=criteria.sort_option,
    )


def _split(values: list[str] | None) -> list[str]:
    items: list[str] = []
    for value in values or []:
        items.extend(part.strip() for part in value.split(",") if part.strip())
    return items


def criteria_from_params(
    room_types: list[str] | None = None,
    price_ranges: list[str] | None = None,
    sort_by: str | None = None,
) -> FilterCriteria:
    """Build criteria from query-string values (repeated or comma separated)."""
    criteria = clear_criteria()
    for label in _split(room_types):
        criteria = toggle_room_type(criteria, label, True)
    for label in _split(price_ranges):
        criteria = toggle_price_range(criteria, label, True)
    return select_sort(criteria, sort_by)
