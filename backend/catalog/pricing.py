from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation


def to_paise(value) -> int | None:
    """Convert a rupee amount (``"1499.50"``, ``1499.5``) to integer paise."""
    if value is None or value == "":
        return None
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_paise(paise: int | None) -> str:
    return f"{(paise or 0) / 100:.2f}"


def price_per_person_paise(package) -> int:
    """Offer packages sell at their discount price; everything else at list price."""
    if package.offer and package.discount_price_paise:
        return package.discount_price_paise
    return package.price_paise


def calculate_total_paise(package, persons: int) -> int:
    return price_per_person_paise(package) * max(persons, 1)
