from decimal import Context, Decimal, DivisionByZero, Inexact, InvalidOperation, Overflow, ROUND_HALF_EVEN

# All amounts share one currency and are kept at four decimal places.
Currency = Decimal

PRECISION = Decimal("0.0001")
SIGNIFICANT_DIGITS = 34

# Balance arithmetic must be exact: anything that would round raises Inexact.
ARITHMETIC = Context(
    prec=SIGNIFICANT_DIGITS,
    rounding=ROUND_HALF_EVEN,
    traps=[InvalidOperation, DivisionByZero, Overflow, Inexact],
)

# Parsing and formatting round to 4 places on purpose.
_ROUNDING = Context(
    prec=SIGNIFICANT_DIGITS,
    rounding=ROUND_HALF_EVEN,
    traps=[InvalidOperation, DivisionByZero, Overflow],
)


def zero() -> Currency:
    return Decimal("0").quantize(PRECISION)


def parse_amount(text: str) -> Currency:
    """
    Parse a decimal string into a Currency value rounded to 4 places.
    Raises ValueError for empty, malformed, non-finite or oversized input.
    """
    try:
        value = Decimal(text.strip())
    except InvalidOperation:
        raise ValueError(f"invalid amount {text!r}") from None

    if not value.is_finite():
        raise ValueError(f"invalid amount {text!r}")

    try:
        return value.quantize(PRECISION, context=_ROUNDING)
    except InvalidOperation:
        raise ValueError(f"amount out of range {text!r}") from None


def format_amount(value: Currency) -> str:
    """Format with exactly 4 decimal places."""
    return f"{value.quantize(PRECISION, context=_ROUNDING):f}"
