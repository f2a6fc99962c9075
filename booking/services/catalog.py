"""
catalog.py
----------
Read access to the salon catalog (services, stylists) and the daily
time-slot template.

Notes:
- The catalog rows are seeded by `python manage.py seed_catalog`, which
  upserts the entries below by id. Bookings never modify them.
- Business hours come from settings (SALON_OPEN_HOUR / SALON_CLOSE_HOUR /
  SALON_SLOT_MINUTES). Every day gets the same template.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from django.conf import settings
from django.db import transaction

from ..models import Appointment, AppointmentService, CustomerProfile, Service, Stylist

logger = logging.getLogger(__name__)


SERVICES = [
    {
        "id": "s1",
        "name": "Classic Haircut",
        "name_gu": "ક્લાસિક હેરકટ",
        "name_hi": "क्लासिक हेयरकट",
        "price": 300,
        "duration_minutes": 30,
        "description": "Precision cut with styling and wash.",
        "category": "hair",
        "is_popular": True,
    },
    {
        "id": "s2",
        "name": "Beard Trim & Shape",
        "name_gu": "દાઢી ટ્રીમ",
        "name_hi": "बियर्ड ट्रिम",
        "price": 150,
        "duration_minutes": 20,
        "description": "Professional beard sculpting with razor finish.",
        "category": "beard",
        "is_popular": False,
    },
    {
        "id": "s3",
        "name": "Royal Shave",
        "name_gu": "રોયલ શેવ",
        "name_hi": "रॉयल शेव",
        "price": 200,
        "duration_minutes": 25,
        "description": "Hot towel shave with premium oils.",
        "category": "beard",
        "is_popular": False,
    },
    {
        "id": "s4",
        "name": "Gold Facial",
        "name_gu": "ગોલ્ડ ફેશિયલ",
        "name_hi": "गोल्ड फेशियल",
        "price": 800,
        "duration_minutes": 45,
        "description": "Deep cleansing and rejuvenating facial treatment.",
        "category": "face",
        "is_popular": False,
    },
    {
        "id": "s5",
        "name": "Groom Package (Cut + Beard + Facial)",
        "name_gu": "ગ્રૂમ પેકેજ",
        "name_hi": "ग्रूम पैकेज",
        "price": 1100,
        "duration_minutes": 90,
        "description": "Complete makeover package for men.",
        "category": "combo",
        "is_popular": True,
    },
]

STYLISTS = [
    {"id": "b1", "name": "Rajesh Kumar", "specialization": "Senior Stylist",
     "experience": "8 Years", "rating": "4.8", "is_available": True},
    {"id": "b2", "name": "Vikram Singh", "specialization": "Beard Expert",
     "experience": "5 Years", "rating": "4.6", "is_available": True},
    # On leave
    {"id": "b3", "name": "Amit Patel", "specialization": "Colorist",
     "experience": "6 Years", "rating": "4.9", "is_available": False},
]

DEMO_CUSTOMERS = [
    {"id": "u1", "name": "Rahul Varma", "phone": "9876543210",
     "role": CustomerProfile.ROLE_CUSTOMER, "loyalty_points": 120},
    {"id": "admin", "name": "Padla Admin", "phone": "9998887776",
     "role": CustomerProfile.ROLE_ADMIN, "loyalty_points": 0},
]

# Past visits for the demo customers, keyed by phone. Added only when the
# customer is first created.
DEMO_VISITS = {
    "9876543210": [
        {"id": "prev1", "services": ["s1"], "stylist": "b1", "date": date(2023, 10, 1),
         "time_slot": "10:00", "total_price": 300, "points_earned": 15},
    ],
}


@dataclass(frozen=True)
class TimeSlot:
    time: str
    available: bool = True


def list_services():
    return tuple(Service.objects.all())


def list_stylists():
    return tuple(Stylist.objects.all())


def get_service(service_id):
    return Service.objects.filter(pk=service_id).first()


def get_stylist(stylist_id):
    return Stylist.objects.filter(pk=stylist_id).first()


def _slot_labels():
    open_at = datetime.combine(datetime.min, time(settings.SALON_OPEN_HOUR, 0))
    close_at = datetime.combine(datetime.min, time(settings.SALON_CLOSE_HOUR, 0))
    step = timedelta(minutes=settings.SALON_SLOT_MINUTES)

    labels = []
    current = open_at
    while current < close_at:
        labels.append(current.strftime("%H:%M"))
        current += step
    return labels


def generate_time_slots(day=None):
    """
    Return the business-hours template for a day, every slot available.

    `day` is accepted for API symmetry; the template is the same every day.
    """
    return [TimeSlot(time=label) for label in _slot_labels()]


def is_valid_time_slot(label) -> bool:
    return label in _slot_labels()


def _seed_visit(customer, visit):
    appointment = Appointment.objects.create(
        id=visit["id"],
        customer=customer,
        user_id=customer.pk,
        user_name=customer.name,
        user_phone=customer.phone,
        stylist_id=visit["stylist"],
        date=visit["date"],
        time_slot=visit["time_slot"],
        status=Appointment.STATUS_COMPLETED,
        total_price=visit["total_price"],
        points_earned=visit["points_earned"],
    )
    services = [Service.objects.get(pk=service_id) for service_id in visit["services"]]
    AppointmentService.objects.bulk_create(
        AppointmentService(appointment=appointment, service=s, position=i, price=s.price)
        for i, s in enumerate(services)
    )


@transaction.atomic
def seed_catalog(with_demo_users=False):
    """
    Create or update the standard catalog, upserting by id.

    Returns:
        dict with created/updated counts.
    """
    created = 0
    updated = 0

    for position, item in enumerate(SERVICES):
        defaults = dict(item, position=position)
        defaults.pop("id")
        _, is_created = Service.objects.update_or_create(id=item["id"], defaults=defaults)
        if is_created:
            created += 1
        else:
            updated += 1

    for position, item in enumerate(STYLISTS):
        defaults = dict(item, position=position)
        defaults.pop("id")
        _, is_created = Stylist.objects.update_or_create(id=item["id"], defaults=defaults)
        if is_created:
            created += 1
        else:
            updated += 1

    if with_demo_users:
        for item in DEMO_CUSTOMERS:
            # Existing balances are left alone on re-seed.
            customer, is_created = CustomerProfile.objects.get_or_create(
                phone=item["phone"],
                defaults={k: v for k, v in item.items() if k != "phone"},
            )
            if is_created:
                created += 1
                for visit in DEMO_VISITS.get(customer.phone, []):
                    _seed_visit(customer, visit)

    logger.info("Catalog seeded: created=%s updated=%s", created, updated)
    return {"created": created, "updated": updated}
