import logging

import httpx
from pydantic import ValidationError as SchemaValidationError

from app.exceptions.custom import CatalogUnavailable, IncompleteRoomData, RoomNotFound
from app.mappers.filter_query import build_query
from app.schemas.catalog import FilterCriteria, Room

logger = logging.getLogger(__name__)

ROOMS_PATH = "/api/rooms"


class RoomCatalogService:
    def __init__(self, client: httpx.AsyncClient, timeout: float = 10.0):
        self._client = client
        self._timeout = timeout

    async def _get(self, path: str, params: dict[str, str] | None = None) -> httpx.Response:
        try:
            return await self._client.get(path, params=params, timeout=self._timeout)
        except httpx.TimeoutException:
            raise CatalogUnavailable(f"Room catalog timed out after {self._timeout}s") from None
        except httpx.HTTPError as exc:
            raise CatalogUnavailable(f"Room catalog request failed: {exc}") from exc

    async def search(self, criteria: FilterCriteria) -> list[Room]:
        """Fetch rooms matching criteria. An empty list means no matches."""
        query = build_query(criteria)
        params = query.to_params()

        resp = await self._get(ROOMS_PATH, params=params)
        if resp.status_code >= 400:
            raise CatalogUnavailable(resp.text, status_code=resp.status_code)

        try:
            data = resp.json()
        except ValueError:
            raise CatalogUnavailable("Room catalog returned invalid JSON") from None
        if not isinstance(data, list):
            raise CatalogUnavailable("Room catalog returned an unexpected payload")

        rooms: list[Room] = []
        for record in data:
            try:
                room = Room.model_validate(record)
            except SchemaValidationError:
                logger.warning("Skipping malformed room record: %s", record)
                continue
            if not room.has_hotel:
                logger.warning("Skipping room %s without hotel information", room.id)
                continue
            rooms.append(room)

        logger.info("Found %d rooms for params %s", len(rooms), params)
        return rooms

    async def get_by_id(self, room_id: str) -> Room:
        resp = await self._get(f"{ROOMS_PATH}/{room_id}")

        if resp.status_code == 404:
            raise RoomNotFound(room_id)
        if resp.status_code >= 400:
            raise CatalogUnavailable(resp.text, status_code=resp.status_code)

        try:
            room = Room.model_validate(resp.json())
        except (ValueError, SchemaValidationError):
            raise CatalogUnavailable(f"Room {room_id} returned an unreadable record") from None

        if not room.has_hotel:
            logger.error("Room %s is missing hotel information", room_id)
            raise IncompleteRoomData(room_id)

        if room.id is None:
            room.id = room_id
        logger.info("Fetched room %s", room_id)
        return room
