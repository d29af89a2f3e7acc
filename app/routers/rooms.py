import logging

from fastapi import APIRouter, Header, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.dependencies import CatalogDep, SearchStoreDep, SettingsDep
from app.mappers.date_range import resolve_date_range
from app.mappers.filter_query import (
    PRICE_RANGES,
    ROOM_TYPES,
    SORT_OPTIONS,
    build_query,
    criteria_from_params,
)
from app.mappers.pricing import format_amount, quote_or_placeholder
from app.schemas.catalog import FilterCriteria, Room, SearchResult
from app.schemas.quote import QuoteResponse
from app.services.room_search import RoomSearchService

logger = logging.getLogger(__name__)

router = APIRouter()


class FilterOptionsResponse(BaseModel):
    room_types: list[str]
    price_ranges: list[str]
    sort_options: list[str]


class RoomListResponse(BaseModel):
    query: dict[str, str]
    rooms: list[Room]


@router.get("/filters", response_model=FilterOptionsResponse)
async def list_filter_options() -> FilterOptionsResponse:
    return FilterOptionsResponse(
        room_types=list(ROOM_TYPES),
        price_ranges=list(PRICE_RANGES),
        sort_options=list(SORT_OPTIONS),
    )


@router.get("/rooms", response_model=RoomListResponse)
async def search_rooms(
    catalog: CatalogDep,
    room_type: list[str] | None = Query(default=None, alias="roomType"),
    price_range: list[str] | None = Query(default=None, alias="priceRange"),
    sort_by: str | None = Query(default=None, alias="sortBy"),
) -> RoomListResponse:
    criteria = criteria_from_params(room_type, price_range, sort_by)
    rooms = await catalog.search(criteria)
    return RoomListResponse(query=build_query(criteria).to_params(), rooms=rooms)


@router.get("/rooms/{room_id}", response_model=Room)
async def get_room(room_id: str, catalog: CatalogDep) -> Room:
    return await catalog.get_by_id(room_id)


@router.get("/rooms/{room_id}/quote", response_model=QuoteResponse)
async def quote_room(
    room_id: str,
    catalog: CatalogDep,
    settings: SettingsDep,
    check_in: str | None = Query(default=None, alias="checkIn"),
    check_out: str | None = Query(default=None, alias="checkOut"),
) -> QuoteResponse:
    room = await catalog.get_by_id(room_id)
    date_range = resolve_date_range(check_in, check_out)
    quote = quote_or_placeholder(room.pricePerNight, date_range.nights, settings.tax_rate)

    grouping = settings.price_grouping
    return QuoteResponse(
        room_id=room.id,
        check_in=check_in,
        check_out=check_out,
        complete=date_range.complete,
        quote=quote,
        formatted_nightly=format_amount(quote.nightly, grouping),
        formatted_base=format_amount(quote.display_base, grouping),
        formatted_tax=format_amount(quote.display_tax, grouping),
        formatted_total=format_amount(quote.total, grouping),
    )


class SearchToggle(BaseModel):
    label: str
    selected: bool


class SortSelection(BaseModel):
    option: str | None = None


class SearchStateResponse(BaseModel):
    criteria: FilterCriteria
    query: dict[str, str]
    rooms: list[Room]
    error: str | None = None
    loading: bool = False


def _search_state(search: RoomSearchService, result: SearchResult) -> JSONResponse:
    # a superseded fetch still reports the newest published result
    if search.results is not None:
        result = search.results
    response = SearchStateResponse(
        criteria=result.criteria,
        query=result.query.to_params(),
        rooms=result.rooms,
        error=result.error,
        loading=search.loading,
    )
    return JSONResponse(
        status_code=200 if result.ok else 502,
        content=response.model_dump(mode="json"),
    )


@router.get("/search", response_model=SearchStateResponse)
async def get_search(
    searches: SearchStoreDep,
    device_id: str = Header(default="default", alias="X-Device-Id"),
) -> JSONResponse:
    search = searches.get_or_create(device_id)
    result = search.results
    if result is None:
        result = await search.refresh()
    return _search_state(search, result)


@router.post("/search/room-types", response_model=SearchStateResponse)
async def toggle_search_room_type(
    toggle: SearchToggle,
    searches: SearchStoreDep,
    device_id: str = Header(default="default", alias="X-Device-Id"),
) -> JSONResponse:
    search = searches.get_or_create(device_id)
    return _search_state(search, await search.toggle_room_type(toggle.label, toggle.selected))


@router.post("/search/price-ranges", response_model=SearchStateResponse)
async def toggle_search_price_range(
    toggle: SearchToggle,
    searches: SearchStoreDep,
    device_id: str = Header(default="default", alias="X-Device-Id"),
) -> JSONResponse:
    search = searches.get_or_create(device_id)
    return _search_state(search, await search.toggle_price_range(toggle.label, toggle.selected))


@router.post("/search/sort", response_model=SearchStateResponse)
async def select_search_sort(
    selection: SortSelection,
    searches: SearchStoreDep,
    device_id: str = Header(default="default", alias="X-Device-Id"),
) -> JSONResponse:
    search = searches.get_or_create(device_id)
    return _search_state(search, await search.select_sort(selection.option))


@router.post("/search/clear", response_model=SearchStateResponse)
async def clear_search(
    searches: SearchStoreDep,
    device_id: str = Header(default="default", alias="X-Device-Id"),
) -> JSONResponse:
    search = searches.get_or_create(device_id)
    logger.info("Clearing search filters for device %s", device_id)
    return _search_state(search, await search.clear())
