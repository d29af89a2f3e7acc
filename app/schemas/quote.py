from decimal import Decimal

from pydantic import BaseModel


class DateRange(BaseModel):
    nights: int = 0
    complete: bool = False


class PriceQuote(BaseModel):
    nights: int = 0
    nightly: Decimal = Decimal(0)
    base: Decimal = Decimal(0)  # full precision
    tax: Decimal = Decimal(0)  # full precision
    total: int = 0
    display_base: int = 0
    display_tax: int = 0
    malformed: bool = False


class QuoteResponse(BaseModel):
    room_id: str | None
    check_in: str | None = None
    check_out: str | None = None
    complete: bool
    quote: PriceQuote
    formatted_nightly: str
    formatted_base: str
    formatted_tax: str
    formatted_total: str
