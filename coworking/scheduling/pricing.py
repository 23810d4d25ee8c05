"""Price lookup by duration and duration type."""

from decimal import ROUND_HALF_UP, Decimal

from coworking.scheduling.domain import DurationType, Resource

CENTS = Decimal("0.01")


def price(resource: Resource, duration_value: Decimal | int | float, duration_type: DurationType | str) -> Decimal:
    """Return ``duration_value * rate`` rounded to cents.

    Whole-rate billing: no proration or discount. Bounds on the duration are
    the caller's concern, so fractional values are accepted.

    Raises:
        ValueError: if *duration_type* is not a known duration type.
    """
    rate = resource.pricing.rate_for(duration_type)
    amount = Decimal(str(duration_value)) * rate
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
