"""Pure price/tax computation for room quotes.

Amounts are Decimals. Only the final total is rounded; the displayed base and
tax are reconciled so they always add up to the displayed total.
"""

import logging
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from app.exceptions.custom import MalformedPrice
from app.schemas.quote import PriceQuote

logger = logging.getLogger(__name__)

_CURRENCY_PREFIX_RE = re.compile(r"^\s*₹\s*")
_GROUPING_RE = re.compile(r"[,_\s]")

PriceInput = str | int | float | Decimal | None


def parse_price(value: PriceInput) -> Decimal:
    """Convert an upstream nightly price (e.g. "10,000") to a Decimal."""
    if value is None or isinstance(value, bool):
        raise MalformedPrice(value)

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    else:
        text = _GROUPING_RE.sub("", _CURRENCY_PREFIX_RE.sub("", value))
        try:
            amount = Decimal(text)
        except InvalidOperation:
            raise MalformedPrice(value) from None

    if not amount.is_finite() or amount < 0:
        raise MalformedPrice(value)
    return amount


def round_whole(amount: Decimal) -> int:
    return int(amount.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def compute_quote(
    price: PriceInput,
    nights: int,
    tax_rate: Decimal | float | str,
) -> PriceQuote:
    nightly = parse_price(price)
    nights = max(nights, 0)
    rate = Decimal(str(tax_rate))

    base = nightly * nights
    tax = base * rate
    total = round_whole(base + tax)
    display_base = round_whole(base)

    return PriceQuote(
        nights=nights,
        nightly=nightly,
        base=base,
        tax=tax,
        total=total,
        display_base=display_base,
        display_tax=total - display_base,
    )


def quote_or_placeholder(
    price: PriceInput,
    nights: int,
    tax_rate: Decimal | float | str,
) -> PriceQuote:
    """Like compute_quote, but a malformed price yields a zero quote."""
    try:
        return compute_quote(price, nights, tax_rate)
    except MalformedPrice as exc:
        logger.warning("%s, showing placeholder quote", exc.message)
        return PriceQuote(nights=max(nights, 0), malformed=True)


def _group_indian(digits: str) -> str:
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups: list[str] = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_amount(value: PriceInput, grouping: str = "indian") -> str:
    """Render an amount with thousands separators for display.

    ``grouping="indian"`` gives 1,50,000; ``"western"`` gives 150,000.
    Strings that already carry separators are returned as is.
    """
    if isinstance(value, str) and "," in value:
        return value
    if not value:
        return "0"

    try:
        amount = parse_price(value)
    except MalformedPrice as exc:
        logger.warning("%s, formatting as 0", exc.message)
        return "0"

    amount = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    whole, _, fraction = f"{amount:f}".partition(".")
    if grouping == "indian":
        grouped = _group_indian(whole)
    else:
        grouped = f"{int(whole):,}"

    fraction = fraction.rstrip("0")
    return f"{grouped}.{fraction}" if fraction else grouped
