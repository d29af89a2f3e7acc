from typing import Annotated

from fastapi import Depends, Request

from app.config import Settings
from app.services.bookings import BookingApiService
from app.services.catalog import RoomCatalogService
from app.services.email_store import EmailStore
from app.sessions import SearchStore, SessionStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_catalog_service(request: Request) -> RoomCatalogService:
    return request.app.state.catalog_service


def get_booking_api(request: Request) -> BookingApiService:
    return request.app.state.booking_api


def get_email_store(request: Request) -> EmailStore:
    return request.app.state.email_store


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_search_store(request: Request) -> SearchStore:
    return request.app.state.search_store


SettingsDep = Annotated[Settings, Depends(get_settings)]
CatalogDep = Annotated[RoomCatalogService, Depends(get_catalog_service)]
BookingApiDep = Annotated[BookingApiService, Depends(get_booking_api)]
EmailStoreDep = Annotated[EmailStore, Depends(get_email_store)]
SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]
SearchStoreDep = Annotated[SearchStore, Depends(get_search_store)]
