from datetime import timedelta

from django.db import connection
from django.test import TestCase, override_settings
from django.test.utils import CaptureQueriesContext
from django.utils import timezone
from rest_framework.test import APIClient

from booking.models import Appointment, CustomerProfile
from booking.services.catalog import seed_catalog


class ApiTestBase(TestCase):
    def setUp(self):
        seed_catalog(with_demo_users=True)
        self.client = APIClient()
        self.day = (timezone.localdate() + timedelta(days=1)).isoformat()

    def login(self, phone):
        resp = self.client.post("/api/auth/login", {"phone": phone, "otp": "1234"}, format="json")
        self.assertEqual(resp.status_code, 200)
        return resp.json()

    def book(self, **overrides):
        payload = {
            "services": ["s1", "s2"],
            "stylist": "b1",
            "date": self.day,
            "time_slot": "10:00",
            "redeem_points": False,
        }
        payload.update(overrides)
        return self.client.post("/api/appointments/", payload, format="json")


class CatalogApiTests(ApiTestBase):

    def test_services_and_stylists(self):
        services = self.client.get("/api/services/").json()
        self.assertEqual([s["id"] for s in services], ["s1", "s2", "s3", "s4", "s5"])
        self.assertEqual(services[0]["price"], 300)

        stylists = self.client.get("/api/stylists/").json()
        self.assertFalse(next(s for s in stylists if s["id"] == "b3")["is_available"])

    def test_time_slots(self):
        self.book()
        resp = self.client.get("/api/time-slots/", {"date": self.day, "stylist": "b1"})
        self.assertEqual(resp.status_code, 200)

        slots = {s["time"]: s["available"] for s in resp.json()["slots"]}
        self.assertEqual(len(slots), 20)
        self.assertFalse(slots["10:00"])
        self.assertTrue(slots["10:30"])

    def test_any_available_slot_matches_booking(self):
        self.book(stylist="b1")
        self.book(stylist="b2")

        resp = self.client.get("/api/time-slots/", {"date": self.day})
        slots = {s["time"]: s["available"] for s in resp.json()["slots"]}
        self.assertTrue(slots["10:00"])

        self.assertEqual(self.book(stylist=None).status_code, 201)

    def test_time_slots_bad_date(self):
        resp = self.client.get("/api/time-slots/", {"date": "12/01/2030"})
        self.assertEqual(resp.status_code, 400)

    def test_available_stylists(self):
        self.book()
        resp = self.client.get("/api/stylists/available/", {"date": self.day, "time_slot": "10:00"})
        self.assertEqual([s["id"] for s in resp.json()], ["b2"])


class BookingApiTests(ApiTestBase):

    def test_guest_booking(self):
        resp = self.book(stylist=None)
        self.assertEqual(resp.status_code, 201)

        data = resp.json()
        self.assertEqual(data["user_id"], "guest")
        self.assertEqual(data["status"], "PENDING")
        self.assertEqual(data["total_price"], 450)
        self.assertEqual([s["id"] for s in data["services"]], ["s1", "s2"])

    def test_customer_redeems_points(self):
        self.login("9876543210")  # demo customer, 120 points
        resp = self.book(redeem_points=True)
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["discount"], 120)
        self.assertEqual(resp.json()["total_price"], 330)

        me = self.client.get("/api/auth/me").json()
        self.assertEqual(me["loyalty_points"], 0)
        self.assertEqual(len(me["visit_history"]), 2)  # seeded visit + this one

    def test_quote(self):
        self.login("9876543210")
        resp = self.client.post(
            "/api/appointments/quote/",
            {"services": ["s1", "s2"], "redeem_points": True},
            format="json",
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {
            "points_available": 120,
            "subtotal": 450,
            "max_redeemable": 120,
            "discount": 120,
            "final_total": 330,
            "points_to_earn": 16,
        })
        # nothing booked, nothing spent
        self.assertEqual(Appointment.objects.count(), 1)  # the seeded past visit
        self.assertEqual(CustomerProfile.objects.get(phone="9876543210").loyalty_points, 120)

    def test_double_booking_conflict(self):
        self.assertEqual(self.book().status_code, 201)
        resp = self.book()
        self.assertEqual(resp.status_code, 409)
        self.assertIn("not available", resp.json()["detail"])

    def test_stylist_on_leave(self):
        self.assertEqual(self.book(stylist="b3").status_code, 409)

    def test_validation_errors(self):
        self.assertEqual(self.book(services=[]).status_code, 400)
        self.assertEqual(self.book(services=["nope"]).status_code, 400)
        self.assertEqual(self.book(time_slot="07:15").status_code, 400)
        self.assertEqual(self.book(time_slot=None).status_code, 400)
        past = (timezone.localdate() - timedelta(days=1)).isoformat()
        self.assertEqual(self.book(date=past).status_code, 400)
        self.assertEqual(Appointment.objects.count(), 1)  # the seeded past visit

    def test_listing_is_scoped(self):
        self.book(stylist=None)  # guest
        self.assertEqual(self.client.get("/api/appointments/").json(), [])

        self.login("9876543210")
        self.book(time_slot="11:00")
        mine = self.client.get("/api/appointments/").json()
        self.assertEqual(len(mine), 2)  # includes the seeded past visit

        self.login("9998887776")
        self.assertEqual(len(self.client.get("/api/appointments/").json()), 3)

    def test_listing_query_count_is_flat(self):
        self.book(stylist=None)
        self.login("9998887776")
        with CaptureQueriesContext(connection) as few:
            self.assertEqual(len(self.client.get("/api/appointments/").json()), 2)

        self.book(stylist=None, time_slot="11:00", services=["s3", "s4"])
        self.book(stylist=None, time_slot="12:00", services=["s5"])
        with CaptureQueriesContext(connection) as many:
            self.assertEqual(len(self.client.get("/api/appointments/").json()), 4)

        self.assertEqual(len(many), len(few))


class AdminStatusApiTests(ApiTestBase):

    def change(self, appointment_id, new_status):
        return self.client.post(
            f"/api/appointments/{appointment_id}/status/", {"status": new_status}, format="json"
        )

    def test_customer_cannot_change_status(self):
        self.login("9876543210")
        appt_id = self.book().json()["id"]
        self.assertEqual(self.change(appt_id, "CONFIRMED").status_code, 403)

    def test_admin_lifecycle_awards_points(self):
        self.login("9876543210")
        appt_id = self.book(redeem_points=True).json()["id"]  # pays 330

        self.login("9998887776")
        self.assertEqual(self.change(appt_id, "CONFIRMED").status_code, 200)
        resp = self.change(appt_id, "COMPLETED")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["points_earned"], 16)

        # completing twice is refused
        self.assertEqual(self.change(appt_id, "COMPLETED").status_code, 409)
        self.assertEqual(CustomerProfile.objects.get(phone="9876543210").loyalty_points, 16)

    def test_illegal_transition(self):
        appt_id = self.book().json()["id"]
        self.login("9998887776")
        self.assertEqual(self.change(appt_id, "CANCELLED").status_code, 200)
        self.assertEqual(self.change(appt_id, "CONFIRMED").status_code, 409)
        self.assertEqual(Appointment.objects.get(pk=appt_id).status, "CANCELLED")

    def test_unknown_status_value(self):
        appt_id = self.book().json()["id"]
        self.login("9998887776")
        self.assertEqual(self.change(appt_id, "ARCHIVED").status_code, 400)


class CsrfApiTests(ApiTestBase):

    def setUp(self):
        super().setUp()
        self.client = APIClient(enforce_csrf_checks=True)

    def test_logged_in_writes_need_csrf_token(self):
        # guests carry no session identity, so no token is needed
        appt_id = self.book(stylist=None).json()["id"]
        self.login("9998887776")

        url = f"/api/appointments/{appt_id}/status/"
        resp = self.client.post(url, {"status": "CONFIRMED"}, format="json")
        self.assertEqual(resp.status_code, 403)
        self.assertIn("CSRF", resp.json()["detail"])
        self.assertEqual(Appointment.objects.get(pk=appt_id).status, "PENDING")

        token = self.client.cookies["csrftoken"].value
        resp = self.client.post(url, {"status": "CONFIRMED"}, format="json", HTTP_X_CSRFTOKEN=token)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(Appointment.objects.get(pk=appt_id).status, "CONFIRMED")


class AuthApiTests(ApiTestBase):

    def test_login_creates_then_reuses_customer(self):
        first = self.login("9111111111")
        self.assertEqual(first["role"], "CUSTOMER")
        self.assertEqual(first["loyalty_points"], 0)
        self.assertEqual(first["visit_history"], [])

        self.client.post("/api/auth/logout")
        second = self.login("9111111111")
        self.assertEqual(first["id"], second["id"])

    def test_login_rejects_bad_phone(self):
        resp = self.client.post("/api/auth/login", {"phone": "12-34"}, format="json")
        self.assertEqual(resp.status_code, 400)

    def test_me_requires_login(self):
        self.assertEqual(self.client.get("/api/auth/me").status_code, 401)


@override_settings(GEMINI_API_KEY="")
class AssistantApiTests(ApiTestBase):

    def test_suggestion_requires_login(self):
        self.assertEqual(self.client.get("/api/assistant/suggestion").status_code, 401)

    def test_suggestion_fallback(self):
        self.login("9876543210")
        resp = self.client.get("/api/assistant/suggestion")
        self.assertEqual(resp.status_code, 200)
        self.assertIn("Welcome back, Rahul Varma!", resp.json()["suggestion"])
        self.assertIn("Classic Haircut", resp.json()["suggestion"])

    def test_chat_fallback(self):
        resp = self.client.post("/api/assistant/chat", {"message": "Hi"}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertIn("assistant", resp.json()["reply"])
