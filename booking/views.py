# booking/views.py
#
# Purpose:
# - Read APIs for the catalog (services, stylists, time slots).
# - Appointment API: create (guest or logged-in customer), quote, list,
#   and admin status changes.
# - Permissions:
#   * Catalog and booking creation are public (guests can book).
#   * Status changes are admin-only (session customer with role ADMIN).
#   * Listing: admins see everything, customers their own, guests nothing.
#
# Error mapping:
# - Domain errors (booking/exceptions.py) carry their own HTTP status:
#   400 validation, 409 stylist unavailable / illegal status change.
#
from django.shortcuts import get_object_or_404
from django.utils.dateparse import parse_date

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import BasePermission
from rest_framework.response import Response
from rest_framework.views import APIView

from .auth_views import current_customer
from .exceptions import BookingError
from .models import Appointment, Service, Stylist
from .serializers import (
    AppointmentSerializer,
    BookingRequestSerializer,
    ServiceSerializer,
    StatusChangeSerializer,
    StylistSerializer,
    TimeSlotSerializer,
)
from .services.availability_engine import AvailabilityEngine
from .services.booking_manager import BookingManager
from .services.catalog import is_valid_time_slot
from .services.loyalty_ledger import compute_totals


# -------------------- Permissions --------------------
class IsSalonAdmin(BasePermission):
    """
    Session customer with role ADMIN.
    """
    def has_permission(self, request, view):
        customer = current_customer(request)
        return bool(customer and customer.is_admin)


def _error_response(exc):
    return Response({"detail": str(exc)}, status=exc.status_code)


def _parse_day(raw):
    """
    'YYYY-MM-DD', also accepting values that carry a time part.
    Returns None when it cannot be parsed.
    """
    raw = (raw or "").strip()
    if "T" in raw:
        raw = raw.split("T", 1)[0]
    elif " " in raw:
        raw = raw.split(" ", 1)[0]
    try:
        return parse_date(raw)
    except ValueError:
        return None


# -------------------- Catalog --------------------
class ServiceViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = Service.objects.all()
    serializer_class = ServiceSerializer


class StylistViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = Stylist.objects.all()
    serializer_class = StylistSerializer

    @action(detail=False, methods=["get"], url_path="available")
    def available(self, request):
        """
        GET /api/stylists/available/?date=YYYY-MM-DD&time_slot=HH:MM
        Stylists that can still take that slot.
        """
        day = _parse_day(request.query_params.get("date"))
        time_slot = (request.query_params.get("time_slot") or "").strip()
        if day is None or not time_slot:
            return Response(
                {"detail": "Provide 'date' (YYYY-MM-DD) and 'time_slot' (HH:MM)."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        if not is_valid_time_slot(time_slot):
            return Response(
                {"detail": f"'{time_slot}' is not a bookable time slot."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        stylists = AvailabilityEngine().available_stylists(day, time_slot)
        return Response(StylistSerializer(stylists, many=True).data)


class TimeSlotView(APIView):
    """
    GET /api/time-slots/?date=YYYY-MM-DD[&stylist=ID]
    The day's slots, each flagged with whether it can still be booked for
    that stylist (or for anyone, when no stylist is given).
    """
    def get(self, request):
        day = _parse_day(request.query_params.get("date"))
        if day is None:
            return Response(
                {"detail": "Invalid date format. Use YYYY-MM-DD."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        stylist = None
        stylist_id = (request.query_params.get("stylist") or "").strip()
        if stylist_id:
            stylist = get_object_or_404(Stylist, pk=stylist_id)

        slots = AvailabilityEngine().find_available_slots(day, stylist)
        return Response({"date": day.isoformat(), "slots": TimeSlotSerializer(slots, many=True).data})


# -------------------- Appointments --------------------
class AppointmentViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Endpoints:
    - POST /api/appointments/               book (guest or session customer)
    - POST /api/appointments/quote/         price preview, books nothing
    - GET  /api/appointments/               list (scoped by role)
    - POST /api/appointments/{id}/status/   admin status change
    """
    serializer_class = AppointmentSerializer
    manager = BookingManager()

    def get_queryset(self):
        qs = Appointment.objects.all().select_related("stylist").prefetch_related("lines__service")
        customer = current_customer(self.request)
        if customer is None:
            return qs.none()
        if customer.is_admin:
            return qs
        return qs.filter(customer=customer)

    def create(self, request, *args, **kwargs):
        serializer = BookingRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        customer = current_customer(request)

        try:
            appointment = self.manager.create_appointment(
                customer=customer,
                services=data["services"],
                stylist=data["stylist"],
                date=data["date"],
                time_slot=data["time_slot"],
                redeem_points=data["redeem_points"],
            )
        except BookingError as e:
            return _error_response(e)

        out = AppointmentSerializer(appointment)
        return Response(out.data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"])
    def quote(self, request):
        """
        Totals the booking screen shows before confirming:
        subtotal, max_redeemable, discount, final_total, points_to_earn.
        """
        serializer = BookingRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        customer = current_customer(request)

        # de-duplicate like the booking itself does
        services = list({s.pk: s for s in data["services"]}.values())
        subtotal = sum(s.price for s in services)
        points = customer.loyalty_points if customer else 0
        totals = compute_totals(points, subtotal, data["redeem_points"])

        return Response({
            "points_available": points,
            "subtotal": totals.subtotal,
            "max_redeemable": totals.max_redeemable,
            "discount": totals.discount,
            "final_total": totals.final_total,
            "points_to_earn": totals.points_to_earn,
        })

    @action(detail=True, methods=["post"], url_path="status", permission_classes=[IsSalonAdmin])
    def change_status(self, request, pk=None):
        """
        Admin moves an appointment along PENDING -> CONFIRMED -> COMPLETED,
        or PENDING -> CANCELLED. Anything else answers 409.
        """
        appointment = get_object_or_404(Appointment, pk=pk)
        serializer = StatusChangeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            appointment = self.manager.transition(appointment, serializer.validated_data["status"])
        except BookingError as e:
            return _error_response(e)

        return Response(AppointmentSerializer(appointment).data, status=status.HTTP_200_OK)
