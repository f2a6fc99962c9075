"""
loyalty_ledger.py
-----------------
Point arithmetic and balance updates.

Rules (1 point = 1 currency unit):
- Redeem: all-or-nothing, capped at the lower of the balance and
  SALON_REDEEM_CAP_PERCENT (50%) of the subtotal.
- Earn: SALON_EARN_PERCENT (5%) of the amount actually paid, credited only
  when an appointment is completed.
- Redeemed points leave the balance when the booking is made. Cancelling
  does not give them back.
"""

import logging
from dataclasses import dataclass

from django.conf import settings
from django.db import transaction

from ..models import CustomerProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookingTotals:
    subtotal: int
    max_redeemable: int
    discount: int
    final_total: int
    points_to_earn: int


def max_redeemable(points_available: int, subtotal: int) -> int:
    points_available = max(int(points_available), 0)
    subtotal = max(int(subtotal), 0)
    cap = subtotal * settings.SALON_REDEEM_CAP_PERCENT // 100
    return min(points_available, cap)


def points_for(final_total: int) -> int:
    return max(int(final_total), 0) * settings.SALON_EARN_PERCENT // 100


def compute_totals(points_available: int, subtotal: int, redeem_points: bool) -> BookingTotals:
    """
    Price a booking.

    Args:
        points_available: customer's current balance (0 for guests)
        subtotal: sum of the selected services' prices
        redeem_points: the customer's redeem toggle

    Returns:
        BookingTotals; points_to_earn is a preview, nothing is credited here.
    """
    cap = max_redeemable(points_available, subtotal)
    discount = cap if redeem_points else 0
    final_total = subtotal - discount
    return BookingTotals(
        subtotal=subtotal,
        max_redeemable=cap,
        discount=discount,
        final_total=final_total,
        points_to_earn=points_for(final_total),
    )


@transaction.atomic
def apply_delta(customer, delta: int) -> int:
    """
    Add delta (negative to redeem, positive to earn) to the customer's balance.

    The balance never drops below zero: a result under zero is clamped and
    logged as a ledger inconsistency.

    Returns:
        The new balance. The passed instance is refreshed to match.
    """
    locked = CustomerProfile.objects.select_for_update().get(pk=customer.pk)
    new_balance = locked.loyalty_points + int(delta)
    if new_balance < 0:
        logger.warning(
            "Ledger inconsistency for customer %s: balance %s + delta %s < 0, clamped to 0",
            locked.pk, locked.loyalty_points, delta,
        )
        new_balance = 0

    locked.loyalty_points = new_balance
    locked.save(update_fields=["loyalty_points"])
    customer.loyalty_points = new_balance

    logger.info("Points %+d for customer %s (balance %s)", delta, locked.pk, new_balance)
    return new_balance
