# reports/views.py

from django.db.models import Count, Sum
from django.utils import timezone
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import BasePermission

from booking.auth_views import current_customer
from booking.models import Appointment


class IsSalonAdminOnly(BasePermission):
    """
    Only allow requests from a logged-in ADMIN customer.
    """
    def has_permission(self, request, view):
        customer = current_customer(request)
        return bool(customer and customer.is_admin)


class ReportsView(APIView):
    """
    GET /api/reports/summary

    Returns JSON with:
    - total_revenue: sum of total_price over appointments that are not CANCELLED
    - total_appointments: all appointments
    - today_appointments: appointments dated today
    - by_status: {"PENDING": N, "CONFIRMED": N, ...}
    - points_redeemed / points_earned: loyalty points spent and issued

    Only accessible by admins.
    """
    permission_classes = [IsSalonAdminOnly]

    def get(self, request):
        today = timezone.localdate()
        qs = Appointment.objects.all()

        revenue = (
            qs.exclude(status=Appointment.STATUS_CANCELLED)
            .aggregate(total=Sum("total_price"))["total"]
        )
        points = qs.aggregate(redeemed=Sum("points_redeemed"), earned=Sum("points_earned"))

        by_status = {code: 0 for code, _label in Appointment.STATUS_CHOICES}
        for row in qs.values("status").annotate(count=Count("id")):
            by_status[row["status"]] = row["count"]

        data = {
            "total_revenue": revenue or 0,
            "total_appointments": qs.count(),
            "today_appointments": qs.filter(date=today).count(),
            "by_status": by_status,
            "points_redeemed": points["redeemed"] or 0,
            "points_earned": points["earned"] or 0,
        }
        return Response(data)
