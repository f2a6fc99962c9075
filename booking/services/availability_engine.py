"""
availability_engine.py
----------------------
Decides whether a stylist can take a (date, time slot) pair:
1) the stylist's own is_available switch (off = on leave), and
2) existing appointments: PENDING or CONFIRMED on the same stylist, date and
   slot block it; CANCELLED and COMPLETED never do.

"Any available" bookings (no stylist) never hold a stylist's slot, so they
are not checked here.
"""

from ..models import Appointment, Stylist
from .catalog import generate_time_slots, get_stylist, TimeSlot


class AvailabilityEngine:
    def _is_valid_stylist(self, stylist) -> bool:
        return isinstance(stylist, Stylist)

    def _resolve(self, stylist):
        # accept a catalog id as well as a Stylist row
        if isinstance(stylist, (str, int)):
            return get_stylist(stylist)
        return stylist

    def _has_booking_conflict(self, stylist, date, time_slot, appointments=None) -> bool:
        """
        Conflict if any active appointment already holds this exact
        stylist / date / slot.
        """
        if appointments is None:
            return Appointment.objects.filter(
                stylist=stylist,
                date=date,
                time_slot=time_slot,
                status__in=Appointment.ACTIVE_STATUSES,
            ).exists()

        # Plain iterables (or querysets) supplied by the caller
        for appt in appointments:
            if (
                appt.stylist_id == stylist.pk
                and appt.date == date
                and appt.time_slot == time_slot
                and appt.status in Appointment.ACTIVE_STATUSES
            ):
                return True
        return False

    def is_stylist_available(self, stylist, date, time_slot, appointments=None) -> bool:
        stylist = self._resolve(stylist)
        if not self._is_valid_stylist(stylist):
            return False
        if not stylist.is_available:
            return False
        return not self._has_booking_conflict(stylist, date, time_slot, appointments)

    def available_stylists(self, date, time_slot, stylists=None):
        if stylists is None:
            stylists = Stylist.objects.all()
        appointments = list(
            Appointment.objects.filter(date=date, status__in=Appointment.ACTIVE_STATUSES)
        )
        return [
            s for s in stylists
            if self.is_stylist_available(s, date, time_slot, appointments)
        ]

    def find_available_slots(self, date, stylist=None):
        """
        Day template with each slot flagged for the given stylist.
        Without a stylist ("any available") nothing constrains the booking,
        so the plain template comes back.
        """
        if stylist is None:
            return generate_time_slots(date)

        appointments = list(
            Appointment.objects.filter(date=date, status__in=Appointment.ACTIVE_STATUSES)
        )
        results = []
        for slot in generate_time_slots(date):
            free = self.is_stylist_available(stylist, date, slot.time, appointments)
            results.append(TimeSlot(time=slot.time, available=free))
        return results
