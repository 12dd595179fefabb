from decimal import Decimal, ROUND_HALF_UP


def round_half_up(value) -> int:
    """Round to the nearest whole unit, halves away from zero (2.5 -> 3)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_amount(value, currency: str = "LKR") -> str:
    return f"{currency} {value:,.2f}"
