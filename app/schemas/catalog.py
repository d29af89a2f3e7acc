from enum import StrEnum

from pydantic import AliasChoices, BaseModel, Field, field_validator


class SortOption(StrEnum):
    price_low_to_high = "Price Low to High"
    price_high_to_low = "Price High to Low"
    newest_first = "Newest First"


class Hotel(BaseModel):
    model_config = {"frozen": True}

    id: str | None = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    name: str | None = None
    address: str | None = None
    city: str | None = None
    contact: str | None = None


class Room(BaseModel):
    id: str | None = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    roomType: str | None = None
    pricePerNight: str | None = None  # raw upstream value, e.g. "10,000"
    amenities: list[str] = []
    images: list[str] = []
    hotel: Hotel | None = None

    @field_validator("pricePerNight", mode="before")
    @classmethod
    def _price_as_text(cls, value: object) -> object:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def has_hotel(self) -> bool:
        return self.hotel is not None and bool(self.hotel.id)

    @property
    def unique_amenities(self) -> list[str]:
        return list(dict.fromkeys(self.amenities))

    def highlight_amenities(self, limit: int = 5) -> list[str]:
        return self.unique_amenities[:limit]


class FilterCriteria(BaseModel):
    """Current filter/sort selection. Immutable: every change builds a new value."""

    model_config = {"frozen": True}

    room_types: tuple[str, ...] = ()
    price_ranges: tuple[str, ...] = ()
    sort_option: SortOption | None = None

    @property
    def is_empty(self) -> bool:
        return not self.room_types and not self.price_ranges and self.sort_option is None


class RoomQuery(BaseModel):
    model_config = {"frozen": True}

    room_types: tuple[str, ...] = ()
    min_price: int | None = None
    max_price: int | None = None
    sort_by: SortOption | None = None

    def to_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.room_types:
            params["roomType"] = ",".join(self.room_types)
        if self.min_price is not None:
            params["minPrice"] = str(self.min_price)
        if self.max_price is not None:
            params["maxPrice"] = str(self.max_price)
        if self.sort_by is not None:
            params["sortBy"] = self.sort_by.value
        return params


class SearchResult(BaseModel):
    criteria: FilterCriteria
    query: RoomQuery
    rooms: list[Room] = []
    error: str | None = None  # set when the catalog could not be reached

    @property
    def ok(self) -> bool:
        return self.error is None
