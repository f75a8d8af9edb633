"""
Core utility functions for the PLUS+ Calculator.

Contains numeric helpers used across the pricing pipeline.
All financial calculations use Python's Decimal for precision.
"""

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation, getcontext

# Set high precision for intermediate financial calculations
getcontext().prec = 28

ZERO = Decimal('0')
TWO_PLACES = Decimal('0.01')

# Largest amount accepted anywhere in the pipeline, in any currency or in MMK
MAX_AMOUNT = Decimal('1000000000000000')


def to_decimal(value) -> Decimal:
    """
    Normalize free-text or numeric input into a non-negative Decimal.

    Empty, unparsable, non-finite and negative input all become zero,
    since they represent a form that is still being filled in.
    Thousands separators (commas) are ignored.

    Args:
        value: str, int, float, Decimal or None.

    Returns:
        A finite Decimal >= 0.
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, str):
        value = value.strip().replace(',', '')
        if not value:
            return ZERO

    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return ZERO

    if not amount.is_finite() or amount < 0:
        return ZERO
    return amount


def annuity_payment(
    principal: Decimal,
    periodic_rate: Decimal,
    periods: int,
) -> Decimal:
    """
    Calculate a level installment using the annuity (PMT) formula.

    PMT = P × r / (1 - (1+r)^-n)

    Where:
        P = principal
        r = rate applied per period (already divided down by the caller)
        n = number of periods

    The result is NOT quantized; callers decide where rounding belongs.

    Args:
        principal: Amount financed. Accepts Decimal, float, or int.
        periodic_rate: Rate per period as a fraction (e.g., 0.0376).
        periods: Number of installments (must be >= 1).

    Returns:
        Installment amount as Decimal.

    Raises:
        ValueError: If inputs are invalid.
    """
    principal = Decimal(str(principal))
    periodic_rate = Decimal(str(periodic_rate))

    if periodic_rate < 0:
        raise ValueError("Rate cannot be negative.")
    if periods < 1:
        raise ValueError("Number of periods must be at least 1.")

    # Handle 0% rate edge case
    if periodic_rate == 0:
        return principal / Decimal(periods)

    one_plus_r = Decimal('1') + periodic_rate
    discount = one_plus_r ** -periods
    return principal * periodic_rate / (Decimal('1') - discount)


def floor_to_nearest(amount, unit: int = 1000) -> Decimal:
    """
    Round an amount DOWN to a multiple of ``unit``.

    Truncates instead of rounding to nearest, so a quoted figure
    is never overstated.

    Args:
        amount: The amount to round.
        unit: Granularity (default 1000).

    Returns:
        Largest multiple of ``unit`` that is <= amount, or 0 for
        non-positive amounts.

    Examples:
        floor_to_nearest(179355) → 179000
        floor_to_nearest(3100)   → 3000
        floor_to_nearest(999)    → 0
    """
    amount = Decimal(str(amount))
    if amount <= 0:
        return ZERO
    step = Decimal(unit)
    return (amount / step).to_integral_value(rounding=ROUND_FLOOR) * step


def quantize_money(amount) -> Decimal:
    """Quantize an amount to 2 decimal places (ROUND_HALF_UP)."""
    return Decimal(str(amount)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
