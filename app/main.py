import logging
import sys
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from app.config import Settings
from app.exceptions.custom import (
    CatalogUnavailable,
    IncompleteRoomData,
    RoomNotFound,
    ValidationError,
)
from app.exceptions.handlers import (
    catalog_unavailable_handler,
    incomplete_room_handler,
    room_not_found_handler,
    validation_error_handler,
)
from app.routers.bookings import router as bookings_router
from app.routers.rooms import router as rooms_router
from app.services.bookings import BookingApiService
from app.services.catalog import RoomCatalogService
from app.services.email_store import EmailStore
from app.sessions import SearchStore, SessionStore


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    async with httpx.AsyncClient(
        base_url=settings.api_base_url, timeout=settings.request_timeout
    ) as client:
        app.state.settings = settings
        app.state.catalog_service = RoomCatalogService(client, timeout=settings.request_timeout)
        app.state.booking_api = BookingApiService(client, timeout=settings.request_timeout)
        app.state.email_store = EmailStore(settings.contact_email_path)
        app.state.session_store = SessionStore()
        app.state.search_store = SearchStore(app.state.catalog_service)

        yield


app = FastAPI(title="Villa Storefront", lifespan=lifespan)

app.add_exception_handler(CatalogUnavailable, catalog_unavailable_handler)
app.add_exception_handler(RoomNotFound, room_not_found_handler)
app.add_exception_handler(IncompleteRoomData, incomplete_room_handler)
app.add_exception_handler(ValidationError, validation_error_handler)

app.include_router(rooms_router)
app.include_router(bookings_router)
