"""
customer_directory.py
---------------------
Phone-number login: find the customer with that phone or register a new one.

There is no real OTP check. OtpVerifier stands in for the SMS provider and
accepts any code; swap it out when a real provider is added.
"""

import logging

from django.db import IntegrityError, transaction

from ..exceptions import ValidationError
from ..models import CustomerProfile
from .tokens import generate_id

logger = logging.getLogger(__name__)

NEW_CUSTOMER_NAME = "New Customer"


class OtpVerifier:
    def verify(self, phone, code) -> bool:
        return True


def resolve_or_create(phone):
    """
    Return the customer registered under `phone` (exact match), creating a
    CUSTOMER with zero points when there is none.
    """
    phone = (phone or "").strip()
    if not phone:
        raise ValidationError("Phone number is required.")

    existing = CustomerProfile.objects.filter(phone=phone).first()
    if existing:
        return existing

    try:
        with transaction.atomic():
            customer = CustomerProfile.objects.create(
                id=generate_id(CustomerProfile),
                name=NEW_CUSTOMER_NAME,
                phone=phone,
                role=CustomerProfile.ROLE_CUSTOMER,
                loyalty_points=0,
            )
    except IntegrityError:
        # Registered by a parallel login in the meantime
        return CustomerProfile.objects.get(phone=phone)

    logger.info("Registered new customer %s", customer.pk)
    return customer


def visit_history(customer):
    """Customer's appointments, newest first (read-only view)."""
    if customer is None:
        return []
    return list(
        customer.appointments.all()
        .select_related("stylist")
        .prefetch_related("lines__service")
        .order_by("-created_at")
    )
