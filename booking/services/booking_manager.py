"""
booking_manager.py
------------------
Coordinates appointment creation and status changes.

Alignment:
- Booking: services + optional stylist + date/slot, priced by the loyalty ledger
- Double-booking prevention (via AvailabilityEngine + DB constraint)
- Admin-driven lifecycle:
      PENDING -> CONFIRMED -> COMPLETED
      PENDING -> CANCELLED
  COMPLETED and CANCELLED are final.

Notes:
- Each public method runs in one transaction. A rejected booking leaves no
  appointment behind and no points deducted.
- Completing an appointment sets points_earned and credits the customer in
  the same transaction; the status update is a compare-and-set, so a second
  completion attempt can never credit twice.
"""

import logging

from django.db import IntegrityError, transaction

from ..exceptions import InvalidTransitionError, UnavailableError, ValidationError
from ..models import Appointment, AppointmentService, CustomerProfile
from .availability_engine import AvailabilityEngine
from .catalog import is_valid_time_slot
from .loyalty_ledger import apply_delta, compute_totals, points_for
from .tokens import generate_id

logger = logging.getLogger(__name__)


ALLOWED_TRANSITIONS = {
    Appointment.STATUS_PENDING: {Appointment.STATUS_CONFIRMED, Appointment.STATUS_CANCELLED},
    Appointment.STATUS_CONFIRMED: {Appointment.STATUS_COMPLETED},
    Appointment.STATUS_COMPLETED: set(),
    Appointment.STATUS_CANCELLED: set(),
}


class BookingManager:
    def __init__(self):
        self.availability = AvailabilityEngine()

    @staticmethod
    def _unique_services(services):
        # keep first occurrence, keep order
        seen = set()
        result = []
        for service in services or []:
            if service.pk not in seen:
                seen.add(service.pk)
                result.append(service)
        return result

    @transaction.atomic
    def create_appointment(self, customer, services, stylist, date, time_slot, redeem_points=False):
        """
        Create a PENDING appointment after validating the selection.

        Args:
            customer: CustomerProfile, or None for a guest booking
            services: Service instances (at least one; duplicates ignored)
            stylist: Stylist instance, or None for "any available"
            date: datetime.date
            time_slot: "HH:MM" label from the day template
            redeem_points: apply the maximum redeemable discount

        Raises:
            ValidationError: nothing selected, or missing/unknown date or slot.
            UnavailableError: the stylist is off or already booked for that slot.
        """
        services = self._unique_services(services)
        if not services:
            raise ValidationError("Select at least one service.")
        if date is None:
            raise ValidationError("Select a date.")
        if not time_slot:
            raise ValidationError("Select a time slot.")
        if not is_valid_time_slot(time_slot):
            raise ValidationError(f"'{time_slot}' is not a bookable time slot.")

        # Only check the slot when a specific stylist is picked
        if stylist is not None:
            if not self.availability.is_stylist_available(stylist, date, time_slot):
                raise UnavailableError(
                    f"{stylist.name} is not available on {date} at {time_slot}."
                )

        balance = 0
        if customer is not None:
            balance = (
                CustomerProfile.objects.select_for_update()
                .values_list("loyalty_points", flat=True)
                .get(pk=customer.pk)
            )

        subtotal = sum(s.price for s in services)
        totals = compute_totals(balance, subtotal, redeem_points)

        if customer is not None:
            identity = (customer.pk, customer.name, customer.phone)
        else:
            identity = (
                Appointment.GUEST_USER_ID,
                Appointment.GUEST_USER_NAME,
                Appointment.GUEST_USER_PHONE,
            )

        try:
            with transaction.atomic():
                appointment = Appointment.objects.create(
                    id=generate_id(Appointment),
                    customer=customer,
                    user_id=identity[0],
                    user_name=identity[1],
                    user_phone=identity[2],
                    stylist=stylist,
                    date=date,
                    time_slot=time_slot,
                    status=Appointment.STATUS_PENDING,
                    total_price=totals.final_total,
                    discount=totals.discount,
                    points_redeemed=totals.discount,
                    points_earned=0,
                )
        except IntegrityError:
            # Someone took the slot between the check and the insert
            raise UnavailableError(
                f"{stylist.name if stylist else 'Stylist'} is not available on {date} at {time_slot}."
            )

        AppointmentService.objects.bulk_create([
            AppointmentService(appointment=appointment, service=s, position=i, price=s.price)
            for i, s in enumerate(services)
        ])

        if totals.discount:
            apply_delta(customer, -totals.discount)

        logger.info(
            "Appointment %s created for %s: %s on %s at %s, total %s (discount %s)",
            appointment.pk, identity[0], [s.pk for s in services], date, time_slot,
            totals.final_total, totals.discount,
        )
        return appointment

    @transaction.atomic
    def transition(self, appointment, new_status):
        """
        Move an appointment to new_status if the state machine allows it.

        Args:
            appointment: Appointment instance or its id
            new_status: one of Appointment.STATUS_*

        Raises:
            ValidationError: unknown appointment.
            InvalidTransitionError: the move is not allowed; nothing changes.
        """
        appointment_id = getattr(appointment, "pk", appointment)
        current = Appointment.objects.select_for_update().filter(pk=appointment_id).first()
        if current is None:
            raise ValidationError(f"Appointment {appointment_id} does not exist.")

        if new_status not in ALLOWED_TRANSITIONS.get(current.status, set()):
            raise InvalidTransitionError(
                f"Cannot change appointment {current.pk} from {current.status} to {new_status}."
            )

        updates = {"status": new_status}
        earned = 0
        if new_status == Appointment.STATUS_COMPLETED:
            earned = points_for(current.total_price)
            updates["points_earned"] = earned

        changed = Appointment.objects.filter(pk=current.pk, status=current.status).update(**updates)
        if changed != 1:
            raise InvalidTransitionError(
                f"Appointment {current.pk} changed while moving to {new_status}."
            )

        if earned and current.customer_id:
            apply_delta(current.customer, earned)

        logger.info(
            "Appointment %s: %s -> %s%s",
            current.pk, current.status, new_status,
            f" (+{earned} points)" if earned else "",
        )

        current.refresh_from_db()
        if isinstance(appointment, Appointment):
            appointment.status = current.status
            appointment.points_earned = current.points_earned
        return current

    def confirm(self, appointment):
        return self.transition(appointment, Appointment.STATUS_CONFIRMED)

    def cancel(self, appointment):
        return self.transition(appointment, Appointment.STATUS_CANCELLED)

    def complete(self, appointment):
        return self.transition(appointment, Appointment.STATUS_COMPLETED)
