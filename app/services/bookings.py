import logging

import httpx
from pydantic import ValidationError as SchemaValidationError

from app.exceptions.custom import BookingRejected
from app.schemas.booking import BookingConfirmation, BookingRequest

logger = logging.getLogger(__name__)

BOOKINGS_PATH = "/api/bookings"


class BookingApiService:
    def __init__(self, client: httpx.AsyncClient, timeout: float = 10.0):
        self._client = client
        self._timeout = timeout

    async def create_booking(self, request: BookingRequest, token: str) -> BookingConfirmation:
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        try:
            resp = await self._client.post(
                BOOKINGS_PATH,
                json=request.model_dump(mode="json"),
                headers=headers,
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            raise BookingRejected(f"Booking request failed: {exc}") from exc

        try:
            data = resp.json()
        except ValueError:
            data = {"error": resp.text}
        if not isinstance(data, dict):
            data = {}

        if resp.status_code >= 400:
            raise BookingRejected(
                data.get("error") or "Failed to book room",
                status_code=resp.status_code,
            )

        try:
            booking = BookingConfirmation.model_validate(data)
        except SchemaValidationError:
            logger.error("Unreadable booking confirmation for room %s: %s", request.roomId, data)
            raise BookingRejected(
                "Booking service returned an unreadable confirmation",
                status_code=resp.status_code,
            ) from None
        logger.info("Created booking %s for room %s", booking.reference, request.roomId)
        return booking
