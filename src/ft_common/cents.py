"""Integer arithmetic utilities for money amounts.

All amounts and totals use int (cents). No float, no Decimal.
Averages are rounded half-up to the nearest cent.
"""


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 6500 -> '$65.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"


def average_cents(total_cents: int, count: int) -> int:
    """Integer average rounded half-up; 0 when count is 0."""
    if count == 0:
        return 0
    sign = -1 if total_cents < 0 else 1
    return sign * ((abs(total_cents) * 2 + count) // (2 * count))


def percentage(part_cents: int, total_cents: int) -> float:
    """Share of total as a percentage rounded to 2 decimals; 0.0 for empty totals."""
    if total_cents <= 0:
        return 0.0
    return round(part_cents * 100 / total_cents, 2)
