from datetime import date
from io import StringIO

from django.core.management import call_command
from django.test import TestCase, override_settings

from booking.models import Appointment, CustomerProfile, Service, Stylist
from booking.services.catalog import (
    generate_time_slots,
    get_service,
    is_valid_time_slot,
    list_services,
    list_stylists,
    seed_catalog,
)
from booking.services.customer_directory import visit_history


class CatalogTests(TestCase):
    def setUp(self):
        seed_catalog()

    def test_catalog_order(self):
        self.assertEqual([s.pk for s in list_services()], ["s1", "s2", "s3", "s4", "s5"])
        self.assertEqual([s.pk for s in list_stylists()], ["b1", "b2", "b3"])

    def test_seed_is_idempotent(self):
        result = seed_catalog()
        self.assertEqual(result["created"], 0)
        self.assertEqual(Service.objects.count(), 5)
        self.assertEqual(Stylist.objects.count(), 3)

    def test_localized_names(self):
        haircut = get_service("s1")
        self.assertEqual(haircut.localized_name("en"), "Classic Haircut")
        self.assertEqual(haircut.localized_name("hi"), "क्लासिक हेयरकट")
        self.assertEqual(haircut.localized_name("fr"), "Classic Haircut")

    def test_default_day_template(self):
        slots = generate_time_slots()
        self.assertEqual(len(slots), 20)
        self.assertEqual(slots[0].time, "10:00")
        self.assertEqual(slots[-1].time, "19:30")
        self.assertTrue(all(s.available for s in slots))

    @override_settings(SALON_OPEN_HOUR=9, SALON_CLOSE_HOUR=11, SALON_SLOT_MINUTES=60)
    def test_template_follows_settings(self):
        self.assertEqual([s.time for s in generate_time_slots()], ["09:00", "10:00"])

    def test_is_valid_time_slot(self):
        self.assertTrue(is_valid_time_slot("14:30"))
        self.assertFalse(is_valid_time_slot("20:00"))
        self.assertFalse(is_valid_time_slot("10:15"))

    def test_seed_command_with_demo_users(self):
        call_command("seed_catalog", "--with-demo-users", stdout=StringIO())
        rahul = CustomerProfile.objects.get(phone="9876543210")
        self.assertEqual(rahul.loyalty_points, 120)
        self.assertTrue(CustomerProfile.objects.get(phone="9998887776").is_admin)

    def test_demo_customer_has_visit_history(self):
        seed_catalog(with_demo_users=True)
        rahul = CustomerProfile.objects.get(phone="9876543210")

        history = visit_history(rahul)
        self.assertEqual(len(history), 1)
        visit = history[0]
        self.assertEqual(visit.status, Appointment.STATUS_COMPLETED)
        self.assertEqual(visit.date, date(2023, 10, 1))
        self.assertEqual(visit.stylist_id, "b1")
        self.assertEqual(visit.total_price, 300)
        self.assertEqual(visit.points_earned, 15)
        self.assertEqual([s.pk for s in visit.ordered_services()], ["s1"])

        # re-seeding does not duplicate it
        seed_catalog(with_demo_users=True)
        self.assertEqual(len(visit_history(rahul)), 1)
