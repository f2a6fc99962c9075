from rest_framework import serializers
from django.utils import timezone

from .models import Appointment, CustomerProfile, Service, Stylist
from .services.catalog import is_valid_time_slot
from .services import customer_directory


class ServiceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Service
        fields = [
            "id", "name", "name_gu", "name_hi", "description",
            "price", "duration_minutes", "category", "is_popular",
        ]


class StylistSerializer(serializers.ModelSerializer):
    class Meta:
        model = Stylist
        fields = ["id", "name", "specialization", "experience", "rating", "is_available"]


class TimeSlotSerializer(serializers.Serializer):
    time = serializers.CharField()
    available = serializers.BooleanField()


class AppointmentSerializer(serializers.ModelSerializer):
    services = serializers.SerializerMethodField()
    stylist = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model = Appointment
        fields = [
            "id", "user_id", "user_name", "user_phone", "services", "stylist",
            "date", "time_slot", "status", "total_price", "discount",
            "points_redeemed", "points_earned", "created_at",
        ]
        read_only_fields = fields

    def get_services(self, obj):
        return ServiceSerializer(obj.ordered_services(), many=True).data


class CustomerProfileSerializer(serializers.ModelSerializer):
    visit_history = serializers.SerializerMethodField()

    class Meta:
        model = CustomerProfile
        fields = ["id", "name", "phone", "role", "loyalty_points", "preferred_stylist", "visit_history"]
        read_only_fields = fields

    def get_visit_history(self, obj):
        return AppointmentSerializer(customer_directory.visit_history(obj), many=True).data


class BookingRequestSerializer(serializers.Serializer):
    """
    Payload for creating (or quoting) an appointment.
    Service and stylist ids are resolved to catalog rows here.
    """
    services = serializers.PrimaryKeyRelatedField(queryset=Service.objects.all(), many=True)
    stylist = serializers.PrimaryKeyRelatedField(
        queryset=Stylist.objects.all(), allow_null=True, required=False, default=None
    )
    date = serializers.DateField(required=False, allow_null=True, default=None)
    time_slot = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    redeem_points = serializers.BooleanField(required=False, default=False)

    def validate_services(self, value):
        if not value:
            raise serializers.ValidationError("Select at least one service.")
        return value

    def validate_date(self, value):
        # no bookings in the past
        if value is not None and value < timezone.localdate():
            raise serializers.ValidationError("Date must be today or later.")
        return value

    def validate_time_slot(self, value):
        if value and not is_valid_time_slot(value):
            raise serializers.ValidationError(f"'{value}' is not a bookable time slot.")
        return value


class StatusChangeSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in Appointment.STATUS_CHOICES])


class LoginSerializer(serializers.Serializer):
    phone = serializers.RegexField(
        r"^\d{7,15}$", error_messages={"invalid": "Phone must be digits only, 7 to 15 digits."}
    )
    otp = serializers.CharField(required=False, allow_blank=True, default="")


class ChatMessageSerializer(serializers.Serializer):
    message = serializers.CharField(max_length=2000)
