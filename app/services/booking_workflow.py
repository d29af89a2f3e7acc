import logging
from collections.abc import Awaitable, Callable
from decimal import Decimal

from app.exceptions.custom import (
    BookingRejected,
    IncompleteRoomData,
    MalformedPrice,
    MissingContactEmail,
    ValidationError,
)
from app.mappers.date_range import count_nights, resolve_date_range
from app.mappers.pricing import compute_quote, quote_or_placeholder
from app.schemas.booking import (
    PAY_AT_PROPERTY,
    PAYMENT_METHODS,
    BookingConfirmation,
    BookingForm,
    BookingOutcome,
    BookingRequest,
    Identity,
    OutcomeStatus,
    WorkflowState,
)
from app.schemas.catalog import Room
from app.schemas.quote import PriceQuote
from app.services.bookings import BookingApiService
from app.services.email_store import EmailStore

logger = logging.getLogger(__name__)

EmailPrompt = Callable[[], Awaitable[str | None]]

_IN_FLIGHT = (WorkflowState.validating, WorkflowState.submitting)


class BookingWorkflow:
    """Submission of one reservation for one room.

    idle -> validating -> submitting -> succeeded | failed. A failure is shown
    and the workflow drops back to idle with the form intact; success is
    terminal until reset().
    """

    def __init__(
        self,
        room: Room,
        api: BookingApiService,
        *,
        identity: Identity | None,
        token: str | None,
        email_store: EmailStore | None = None,
        device_id: str = "default",
        prompt_email: EmailPrompt | None = None,
        tax_rate: Decimal = Decimal("0.18"),
        max_guests: int = 4,
    ):
        if not room.has_hotel:
            raise IncompleteRoomData(room.id)

        self._room = room
        self._api = api
        self._identity = identity
        self._token = token
        self._email_store = email_store or EmailStore()
        self._device_id = device_id
        self._prompt_email = prompt_email
        self._tax_rate = tax_rate
        self._max_guests = max_guests

        self._state = WorkflowState.idle
        self.transitions: list[WorkflowState] = [WorkflowState.idle]
        self.form = BookingForm()
        self.booking: BookingConfirmation | None = None
        self.last_error: str | None = None

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def room(self) -> Room:
        return self._room

    def _enter(self, state: WorkflowState) -> None:
        self._state = state
        self.transitions.append(state)

    def _outcome(
        self,
        status: OutcomeStatus,
        message: str | None = None,
        booking: BookingConfirmation | None = None,
    ) -> BookingOutcome:
        return BookingOutcome(status=status, state=self._state, message=message, booking=booking)

    def quote(self, form: BookingForm | None = None) -> PriceQuote:
        form = form or self.form
        nights = count_nights(form.check_in, form.check_out)
        return quote_or_placeholder(self._room.pricePerNight, nights, self._tax_rate)

    async def submit(self, form: BookingForm | None = None) -> BookingOutcome:
        if self._state in _IN_FLIGHT:
            logger.warning("Ignoring submission for room %s: one already in flight", self._room.id)
            return self._outcome("busy", "A booking is already being submitted")
        if self._state == WorkflowState.succeeded:
            return self._outcome("closed", "This booking has already been completed", self.booking)

        if form is not None:
            self.form = form
        self.last_error = None
        self._enter(WorkflowState.validating)

        try:
            request = await self._build_request(self.form)
        except ValidationError as exc:
            self._enter(WorkflowState.idle)
            self.last_error = exc.message
            return self._outcome("invalid", exc.message)
        except MissingContactEmail as exc:
            self._enter(WorkflowState.idle)
            self.last_error = exc.message
            return self._outcome("missing_email", exc.message)
        except Exception:
            logger.exception("Preparing booking for room %s failed", self._room.id)
            return self._fail("Could not prepare the booking, please try again")

        self._enter(WorkflowState.submitting)
        try:
            booking = await self._api.create_booking(request, self._token)
        except BookingRejected as exc:
            logger.warning(
                "Booking for room %s rejected: %s (status=%s)",
                self._room.id, exc.message, exc.status_code,
            )
            return self._fail(exc.message)
        except Exception:
            logger.exception("Booking submission for room %s failed", self._room.id)
            return self._fail("An error occurred while booking")

        self.booking = booking
        self._enter(WorkflowState.succeeded)
        return self._outcome("succeeded", booking=booking)

    def _fail(self, message: str) -> BookingOutcome:
        self._enter(WorkflowState.failed)
        self.last_error = message
        self._enter(WorkflowState.idle)
        return self._outcome("rejected", message)

    def authenticate(self, identity: Identity | None, token: str | None) -> None:
        """Replace the caller's identity and bearer token for later submissions."""
        if self._state in _IN_FLIGHT:
            logger.warning("Keeping credentials for room %s while submitting", self._room.id)
            return
        self._identity = identity
        self._token = token

    def reset(self) -> None:
        if self._state in _IN_FLIGHT:
            logger.warning("Cannot reset workflow for room %s while submitting", self._room.id)
            return
        self.form = BookingForm()
        self.booking = None
        self.last_error = None
        if self._state != WorkflowState.idle:
            self._enter(WorkflowState.idle)

    async def _build_request(self, form: BookingForm) -> BookingRequest:
        identity = self._identity
        if identity is None or not identity.userId or not self._token:
            raise ValidationError("Please log in to book a room")

        date_range = resolve_date_range(form.check_in, form.check_out)
        if not date_range.complete:
            raise ValidationError("Please select check-in and check-out dates")

        if not 1 <= form.guests <= self._max_guests:
            raise ValidationError(f"Guests must be between 1 and {self._max_guests}")

        if form.payment_method not in PAYMENT_METHODS:
            raise ValidationError(f"Unknown payment method: {form.payment_method}")

        if not self._room.id:
            raise ValidationError("Missing required IDs for booking. Please refresh and try again.")

        try:
            quote = compute_quote(self._room.pricePerNight, date_range.nights, self._tax_rate)
        except MalformedPrice as exc:
            logger.warning("%s for room %s", exc.message, self._room.id)
            raise ValidationError("Price is unavailable for this room") from exc

        email = await self._resolve_email(identity)

        return BookingRequest(
            userId=identity.userId,
            roomId=self._room.id,
            hotelId=self._room.hotel.id,
            checkInDate=form.check_in,
            checkOutDate=form.check_out,
            totalPrice=quote.total,
            guests=form.guests,
            paymentMethod=form.payment_method,
            isPaid=form.payment_method != PAY_AT_PROPERTY,
            userEmail=email,
            userName=identity.display_name,
        )

    async def _resolve_email(self, identity: Identity) -> str:
        # identity first, then the device's remembered email, then ask
        if identity.email:
            return identity.email

        stored = self._email_store.get(self._device_id)
        if stored:
            logger.info("Using remembered contact email for device %s", self._device_id)
            return stored

        if self._prompt_email is not None:
            email = (await self._prompt_email() or "").strip()
            if email:
                self._email_store.save(self._device_id, email)
                return email

        raise MissingContactEmail()
