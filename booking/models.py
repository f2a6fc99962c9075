# booking/models.py
#
# Purpose:
# - Core domain models for the salon booking system.
#
# Design highlights:
# - Service / Stylist: catalog rows keyed by short ids ("s1", "b1").
#   Seeded by `python manage.py seed_catalog` and never changed by bookings.
# - CustomerProfile: identity keyed by phone number (unique). Holds the
#   loyalty balance, which must never go below zero.
# - Appointment: the transactional record.
#   • customer snapshot (user_id / user_name / user_phone) taken at booking time
#   • ordered services through AppointmentService, each line keeps the price paid
#   • stylist is optional (NULL = "any available")
#   • status is uppercase PENDING / CONFIRMED / COMPLETED / CANCELLED
#
# Notes for developers:
# - Double-booking is blocked twice: AvailabilityEngine checks before insert,
#   and a partial unique constraint on (stylist, date, time_slot) for active
#   statuses rejects anything that slips through.
# - Status changes must go through BookingManager.transition() so that points
#   are credited exactly once.
#

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q


# -------------------------
# Service catalog item
# -------------------------
class Service(models.Model):
    """
    A service offered by the salon. Price is in whole currency units.
    """
    CATEGORY_CHOICES = [
        ("hair", "Hair"),
        ("beard", "Beard"),
        ("face", "Face"),
        ("combo", "Combo"),
    ]

    id = models.CharField(primary_key=True, max_length=20)
    name = models.CharField(max_length=200)
    name_gu = models.CharField(max_length=200, blank=True)
    name_hi = models.CharField(max_length=200, blank=True)
    description = models.TextField(blank=True)
    price = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    duration_minutes = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    category = models.CharField(max_length=10, choices=CATEGORY_CHOICES)
    is_popular = models.BooleanField(default=False)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position", "id"]

    def __str__(self):
        return f"{self.name} (₹{self.price})"

    def localized_name(self, language="en"):
        """Name in 'gu' or 'hi' when we have one, English otherwise."""
        if language == "gu" and self.name_gu:
            return self.name_gu
        if language == "hi" and self.name_hi:
            return self.name_hi
        return self.name


# -------------------------
# Stylist
# -------------------------
class Stylist(models.Model):
    """
    A stylist who can be picked for an appointment.
    is_available is the staff-level switch (e.g. on leave); it is independent
    of whether a particular slot is already booked.
    """
    id = models.CharField(primary_key=True, max_length=20)
    name = models.CharField(max_length=200)
    specialization = models.CharField(max_length=100)
    experience = models.CharField(max_length=50, blank=True)
    rating = models.DecimalField(
        max_digits=2,
        decimal_places=1,
        default=5,
        validators=[MinValueValidator(0), MaxValueValidator(5)],
    )
    is_available = models.BooleanField(default=True)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position", "id"]

    def __str__(self):
        return self.name


# -------------------------
# Customer (person who books)
# -------------------------
class CustomerProfile(models.Model):
    """
    A salon customer, resolved by phone number at login.
    """
    ROLE_GUEST = "GUEST"
    ROLE_CUSTOMER = "CUSTOMER"
    ROLE_ADMIN = "ADMIN"
    ROLE_CHOICES = [
        (ROLE_GUEST, "Guest"),
        (ROLE_CUSTOMER, "Customer"),
        (ROLE_ADMIN, "Admin"),
    ]

    id = models.CharField(primary_key=True, max_length=20)
    name = models.CharField(max_length=200)
    phone = models.CharField(max_length=20, unique=True)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_CUSTOMER)
    loyalty_points = models.PositiveIntegerField(default=0)
    preferred_stylist = models.ForeignKey(
        Stylist, on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=Q(loyalty_points__gte=0),
                name="customer_loyalty_points_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.phone})"

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN


# -------------------------
# Appointment record
# -------------------------
class Appointment(models.Model):
    """
    One booking: services, optional stylist, date and time slot.

    Money fields:
    - total_price = sum(line prices) - discount
    - points_redeemed == discount (1 point = 1 currency unit)
    - points_earned stays 0 until the appointment is COMPLETED
    """
    STATUS_PENDING = "PENDING"
    STATUS_CONFIRMED = "CONFIRMED"
    STATUS_COMPLETED = "COMPLETED"
    STATUS_CANCELLED = "CANCELLED"
    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_CONFIRMED, "Confirmed"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
    ]
    # Statuses that hold a stylist's slot
    ACTIVE_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED)

    GUEST_USER_ID = "guest"
    GUEST_USER_NAME = "Guest User"
    GUEST_USER_PHONE = "N/A"

    id = models.CharField(primary_key=True, max_length=20)
    customer = models.ForeignKey(
        CustomerProfile,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="appointments",
    )
    user_id = models.CharField(max_length=20)
    user_name = models.CharField(max_length=200)
    user_phone = models.CharField(max_length=20)
    services = models.ManyToManyField(Service, through="AppointmentService", related_name="+")
    stylist = models.ForeignKey(
        Stylist, on_delete=models.PROTECT, null=True, blank=True, related_name="appointments"
    )
    date = models.DateField()
    time_slot = models.CharField(max_length=5)
    status = models.CharField(
        max_length=10,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
        help_text="Appointment lifecycle status",
    )
    total_price = models.PositiveIntegerField()
    discount = models.PositiveIntegerField(default=0)
    points_redeemed = models.PositiveIntegerField(default=0)
    points_earned = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["stylist", "date", "time_slot"],
                condition=Q(status__in=["PENDING", "CONFIRMED"]),
                name="uniq_active_stylist_slot",
            ),
        ]

    def __str__(self):
        return f"{self.user_name} → {self.date} {self.time_slot} [{self.status}]"

    def ordered_services(self):
        # lines are ordered by position (Meta); .all() reuses a prefetch
        return [line.service for line in self.lines.all()]

    @property
    def subtotal(self):
        return self.total_price + self.discount


class AppointmentService(models.Model):
    """
    A service line on an appointment; keeps the order and the price at booking time.
    """
    appointment = models.ForeignKey(Appointment, on_delete=models.CASCADE, related_name="lines")
    service = models.ForeignKey(Service, on_delete=models.PROTECT)
    position = models.PositiveSmallIntegerField()
    price = models.PositiveIntegerField()

    class Meta:
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(fields=["appointment", "service"], name="uniq_appointment_service"),
        ]

    def __str__(self):
        return f"{self.appointment_id}: {self.service.name} (₹{self.price})"
