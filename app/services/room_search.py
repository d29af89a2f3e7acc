import logging

from app.exceptions.custom import CatalogUnavailable
from app.mappers.filter_query import (
    build_query,
    clear_criteria,
    select_sort,
    toggle_price_range,
    toggle_room_type,
)
from app.schemas.catalog import FilterCriteria, SearchResult, SortOption
from app.services.catalog import RoomCatalogService

logger = logging.getLogger(__name__)


class RoomSearchService:
    """Owns the filter criteria and the visible result set.

    Each change to the criteria issues one catalog fetch. Fetches are numbered;
    only the newest one may publish its result, so a slow response for an
    older query never overwrites a newer result.
    """

    def __init__(self, catalog: RoomCatalogService):
        self._catalog = catalog
        self._criteria = FilterCriteria()
        self._generation = 0
        self._results: SearchResult | None = None

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    @property
    def results(self) -> SearchResult | None:
        return self._results

    @property
    def loading(self) -> bool:
        return self._results is None or self._results.criteria != self._criteria

    async def toggle_room_type(self, label: str, selected: bool) -> SearchResult:
        return await self._apply(toggle_room_type(self._criteria, label, selected))

    async def toggle_price_range(self, label: str, selected: bool) -> SearchResult:
        return await self._apply(toggle_price_range(self._criteria, label, selected))

    async def select_sort(self, option: str | SortOption | None) -> SearchResult:
        return await self._apply(select_sort(self._criteria, option))

    async def clear(self) -> SearchResult:
        return await self._apply(clear_criteria())

    async def refresh(self) -> SearchResult:
        return await self._apply(self._criteria)

    async def _apply(self, criteria: FilterCriteria) -> SearchResult:
        self._criteria = criteria
        self._generation += 1
        generation = self._generation
        query = build_query(criteria)

        try:
            rooms = await self._catalog.search(criteria)
            result = SearchResult(criteria=criteria, query=query, rooms=rooms)
        except CatalogUnavailable as exc:
            logger.error("Room search failed: %s (status=%s)", exc.message, exc.status_code)
            result = SearchResult(criteria=criteria, query=query, error=exc.message)

        if generation == self._generation:
            self._results = result
        else:
            logger.debug(
                "Discarding stale results for fetch %d (latest is %d)",
                generation,
                self._generation,
            )
        return result
