from datetime import timedelta

from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from booking.models import CustomerProfile, Service
from booking.services.booking_manager import BookingManager
from booking.services.catalog import seed_catalog


class ReportsSummaryTests(TestCase):
    def setUp(self):
        seed_catalog(with_demo_users=True)
        self.client = APIClient()
        manager = BookingManager()
        haircut = Service.objects.get(pk="s1")   # 300
        facial = Service.objects.get(pk="s4")    # 800
        rahul = CustomerProfile.objects.get(phone="9876543210")
        today = timezone.localdate()

        done = manager.create_appointment(rahul, [haircut], None, today, "10:00", redeem_points=True)
        manager.confirm(done)
        manager.complete(done)  # paid 180, earns 9

        manager.create_appointment(None, [facial], None, today + timedelta(days=1), "10:00")
        dropped = manager.create_appointment(None, [facial], None, today, "11:00")
        manager.cancel(dropped)

    def login(self, phone):
        self.client.post("/api/auth/login", {"phone": phone}, format="json")

    def test_requires_admin(self):
        self.assertEqual(self.client.get("/api/reports/summary").status_code, 403)
        self.login("9876543210")
        self.assertEqual(self.client.get("/api/reports/summary").status_code, 403)

    def test_summary(self):
        self.login("9998887776")
        resp = self.client.get("/api/reports/summary")
        self.assertEqual(resp.status_code, 200)

        data = resp.json()
        # seeded 300 visit + 180 + 800, the cancelled facial is left out
        self.assertEqual(data["total_revenue"], 1280)
        self.assertEqual(data["total_appointments"], 4)
        self.assertEqual(data["today_appointments"], 2)
        self.assertEqual(data["by_status"], {
            "PENDING": 1, "CONFIRMED": 0, "COMPLETED": 2, "CANCELLED": 1,
        })
        self.assertEqual(data["points_redeemed"], 120)
        self.assertEqual(data["points_earned"], 24)  # 15 seeded + 9
