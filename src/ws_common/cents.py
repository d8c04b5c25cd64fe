"""Fixed-point money helpers.

Local balances, prices and transaction amounts are int cents.
The mirrored Wingy coin balance is int milli-coins (3 fractional digits).
No float arithmetic anywhere; Decimal is only used to parse upstream numbers.
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

PRICE_PATTERN = re.compile(r"^\d+(\.\d{1,2})?$")

_MILLI = Decimal("0.001")


def parse_price(value: str) -> int:
    """Parse a price string like '19.99' or '5' into cents: '19.99' -> 1999."""
    if not PRICE_PATTERN.match(value):
        raise ValueError(f"Price must match {PRICE_PATTERN.pattern}, got {value!r}")
    whole, _, frac = value.partition(".")
    return int(whole) * 100 + int(frac.ljust(2, "0"))


def cents_to_str(cents: int) -> str:
    """Render cents as a two-decimal string: 3001 -> '30.01', -50 -> '-0.50'."""
    sign = "-" if cents < 0 else ""
    abs_cents = abs(cents)
    return f"{sign}{abs_cents // 100}.{abs_cents % 100:02d}"


def coins_to_milli(value: Decimal | int | str) -> int:
    """Convert an upstream coin amount to milli-coins, rounding half-up at 3 places."""
    try:
        amount = Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Not a coin amount: {value!r}") from e
    if not amount.is_finite():
        raise ValueError(f"Not a coin amount: {value!r}")
    return int(amount.quantize(_MILLI, rounding=ROUND_HALF_UP) * 1000)


def milli_to_coins(milli: int) -> Decimal:
    """1250 -> Decimal('1.25'); trailing zeros dropped, never an exponent form."""
    coins = Decimal(milli) / 1000
    return coins.quantize(Decimal(1)) if coins == coins.to_integral() else coins.normalize()
