from datetime import date
from enum import StrEnum
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field

PAY_AT_PROPERTY = "Pay At Hotel"
PAYMENT_METHODS = (PAY_AT_PROPERTY, "Credit Card", "UPI")


class WorkflowState(StrEnum):
    idle = "idle"
    validating = "validating"
    submitting = "submitting"
    succeeded = "succeeded"
    failed = "failed"


class Identity(BaseModel):
    userId: str | None = Field(
        default=None, validation_alias=AliasChoices("userId", "_id", "id")
    )
    email: str | None = None
    firstName: str | None = None
    lastName: str | None = None

    @property
    def display_name(self) -> str:
        if not self.firstName:
            return "Guest"
        return f"{self.firstName} {self.lastName or ''}".strip()


class BookingForm(BaseModel):
    check_in: date | None = None
    check_out: date | None = None
    guests: int = 1
    payment_method: str = PAY_AT_PROPERTY


class BookingRequest(BaseModel):
    userId: str
    roomId: str
    hotelId: str
    checkInDate: date
    checkOutDate: date
    totalPrice: int
    guests: int
    paymentMethod: str
    isPaid: bool
    userEmail: str
    userName: str


class BookingConfirmation(BaseModel):
    model_config = {"extra": "allow"}

    id: str | None = Field(default=None, validation_alias=AliasChoices("_id", "id"))

    @property
    def reference(self) -> str | None:
        return self.id


OutcomeStatus = Literal["succeeded", "invalid", "missing_email", "rejected", "busy", "closed"]


class BookingOutcome(BaseModel):
    status: OutcomeStatus
    state: WorkflowState
    message: str | None = None
    booking: BookingConfirmation | None = None
