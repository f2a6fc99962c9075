from django.contrib import admin
from .models import Appointment, AppointmentService, CustomerProfile, Service, Stylist

@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "price", "duration_minutes", "category", "is_popular")
    list_filter = ("category", "is_popular")
    search_fields = ("name",)

@admin.register(Stylist)
class StylistAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "specialization", "rating", "is_available")
    list_filter = ("is_available",)
    list_editable = ("is_available",)  # quick on-leave toggle

@admin.register(CustomerProfile)
class CustomerProfileAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "phone", "role", "loyalty_points")
    list_filter = ("role",)
    search_fields = ("name", "phone")
    # Balances move only through bookings and completions.
    readonly_fields = ("loyalty_points",)

class AppointmentServiceInline(admin.TabularInline):
    model = AppointmentService
    extra = 0
    readonly_fields = ("service", "position", "price")
    can_delete = False

@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ("id", "user_name", "stylist", "date", "time_slot", "status", "total_price")
    list_filter = ("status", "date")
    search_fields = ("user_name", "user_phone")
    inlines = [AppointmentServiceInline]
    # Status changes go through BookingManager so points are credited once.
    readonly_fields = (
        "status", "total_price", "discount", "points_redeemed", "points_earned", "created_at",
    )
