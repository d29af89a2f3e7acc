from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict

from app.schemas.booking import WorkflowState
from app.services.booking_workflow import BookingWorkflow
from app.services.catalog import RoomCatalogService
from app.services.room_search import RoomSearchService


class BookingSession(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    session_id: str
    created_at: datetime
    workflow: BookingWorkflow
    contact_email: str | None = None


class SessionStore:
    def __init__(self, max_sessions: int = 1000) -> None:
        self._sessions: dict[str, BookingSession] = {}
        self._max_sessions = max_sessions

    def _evict(self) -> None:
        if len(self._sessions) <= self._max_sessions:
            return
        # Never drop a session with a submission in flight
        candidates = sorted(
            (
                s for s in self._sessions.values()
                if s.workflow.state in (WorkflowState.idle, WorkflowState.succeeded)
            ),
            key=lambda s: s.created_at,
        )
        while len(self._sessions) > self._max_sessions and candidates:
            self._sessions.pop(candidates.pop(0).session_id, None)

    def create_session(
        self, workflow: BookingWorkflow, session_id: str | None = None,
    ) -> BookingSession:
        session = BookingSession(
            session_id=session_id or uuid.uuid4().hex[:12],
            created_at=datetime.now(timezone.utc),
            workflow=workflow,
        )
        self._sessions[session.session_id] = session
        self._evict()
        return session

    def get_session(self, session_id: str) -> BookingSession | None:
        return self._sessions.get(session_id)

    def __len__(self) -> int:
        return len(self._sessions)


class SearchStore:
    """One RoomSearchService per client, least recently used evicted first."""

    def __init__(self, catalog: RoomCatalogService, max_clients: int = 1000) -> None:
        self._catalog = catalog
        self._searches: dict[str, RoomSearchService] = {}
        self._max_clients = max_clients

    def get_or_create(self, client_id: str) -> RoomSearchService:
        search = self._searches.pop(client_id, None)
        if search is None:
            search = RoomSearchService(self._catalog)
        self._searches[client_id] = search
        while len(self._searches) > self._max_clients:
            self._searches.pop(next(iter(self._searches)))
        return search

    def __len__(self) -> int:
        return len(self._searches)
