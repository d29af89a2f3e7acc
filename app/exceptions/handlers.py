import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from .custom import CatalogUnavailable, IncompleteRoomData, RoomNotFound, ValidationError

logger = logging.getLogger(__name__)


async def catalog_unavailable_handler(_request: Request, exc: CatalogUnavailable) -> JSONResponse:
    logger.error("Room catalog error: %s (status=%s)", exc.message, exc.status_code)
    return JSONResponse(
        status_code=502,
        content={"detail": f"Room catalog unavailable: {exc.message}"},
    )


async def room_not_found_handler(_request: Request, exc: RoomNotFound) -> JSONResponse:
    logger.info("Room not found: %s", exc.room_id)
    return JSONResponse(status_code=404, content={"detail": exc.message})


async def incomplete_room_handler(_request: Request, exc: IncompleteRoomData) -> JSONResponse:
    logger.error("Incomplete room data for %s", exc.room_id)
    return JSONResponse(status_code=502, content={"detail": exc.message})


async def validation_error_handler(_request: Request, exc: ValidationError) -> JSONResponse:
    logger.warning("Invalid input: %s", exc.message)
    return JSONResponse(status_code=422, content={"detail": exc.message})
