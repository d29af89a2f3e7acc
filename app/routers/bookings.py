import logging
from datetime import date

from fastapi import APIRouter, Header, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.dependencies import (
    BookingApiDep,
    CatalogDep,
    EmailStoreDep,
    SessionStoreDep,
    SettingsDep,
)
from app.schemas.booking import (
    PAY_AT_PROPERTY,
    BookingConfirmation,
    BookingForm,
    Identity,
    WorkflowState,
)
from app.services.booking_workflow import BookingWorkflow

logger = logging.getLogger(__name__)

router = APIRouter()

_STATUS_CODES = {
    "succeeded": 201,
    "invalid": 422,
    "missing_email": 422,
    "busy": 409,
    "closed": 409,
    "rejected": 400,
}


class BookingSubmission(BaseModel):
    room_id: str
    session_id: str | None = None
    check_in: date | None = None
    check_out: date | None = None
    guests: int = 1
    payment_method: str = PAY_AT_PROPERTY
    identity: Identity | None = None
    contact_email: str | None = None  # answer to the "enter your email" prompt


class SessionStatusResponse(BaseModel):
    session_id: str
    room_id: str | None
    state: WorkflowState
    form: BookingForm
    last_error: str | None = None
    booking: BookingConfirmation | None = None
    transitions: list[WorkflowState] = []


class BookingOutcomeResponse(SessionStatusResponse):
    status: str
    message: str | None = None


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _session_status(session_id: str, workflow: BookingWorkflow) -> dict:
    return {
        "session_id": session_id,
        "room_id": workflow.room.id,
        "state": workflow.state,
        "form": workflow.form,
        "last_error": workflow.last_error,
        "booking": workflow.booking,
        "transitions": workflow.transitions,
    }


@router.post("/bookings", response_model=BookingOutcomeResponse)
async def submit_booking(
    submission: BookingSubmission,
    catalog: CatalogDep,
    api: BookingApiDep,
    email_store: EmailStoreDep,
    sessions: SessionStoreDep,
    settings: SettingsDep,
    authorization: str | None = Header(default=None),
    device_id: str = Header(default="default", alias="X-Device-Id"),
) -> JSONResponse:
    token = _bearer_token(authorization)
    session = sessions.get_session(submission.session_id) if submission.session_id else None

    if session is None:
        room = await catalog.get_by_id(submission.room_id)
        # the same session may have been opened while the room was loading
        if submission.session_id:
            session = sessions.get_session(submission.session_id)

    if session is None:

        async def prompt_email() -> str | None:
            return session.contact_email

        workflow = BookingWorkflow(
            room,
            api,
            identity=submission.identity,
            token=token,
            email_store=email_store,
            device_id=device_id,
            prompt_email=prompt_email,
            tax_rate=settings.tax_rate,
            max_guests=settings.max_guests,
        )
        session = sessions.create_session(workflow, submission.session_id)
        logger.info("Opened booking session %s for room %s", session.session_id, room.id)
    elif session.workflow.room.id != submission.room_id:
        raise HTTPException(
            status_code=409,
            detail=f"Session {session.session_id} belongs to another room",
        )
    else:
        session.workflow.authenticate(submission.identity, token)

    session.contact_email = submission.contact_email
    form = BookingForm(
        check_in=submission.check_in,
        check_out=submission.check_out,
        guests=submission.guests,
        payment_method=submission.payment_method,
    )
    outcome = await session.workflow.submit(form)

    response = BookingOutcomeResponse(
        **_session_status(session.session_id, session.workflow),
        status=outcome.status,
        message=outcome.message,
    )
    return JSONResponse(
        status_code=_STATUS_CODES[outcome.status],
        content=response.model_dump(mode="json"),
    )


@router.get("/bookings/sessions/{session_id}", response_model=SessionStatusResponse)
async def get_booking_session(session_id: str, sessions: SessionStoreDep) -> SessionStatusResponse:
    session = sessions.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Booking session not found")
    return SessionStatusResponse(**_session_status(session_id, session.workflow))


@router.post("/bookings/sessions/{session_id}/reset", response_model=SessionStatusResponse)
async def reset_booking_session(session_id: str, sessions: SessionStoreDep) -> SessionStatusResponse:
    session = sessions.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Booking session not found")
    session.workflow.reset()
    return SessionStatusResponse(**_session_status(session_id, session.workflow))
