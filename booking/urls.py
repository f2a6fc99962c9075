# booking/urls.py
#
# Purpose:
# - Expose the booking REST API via DRF router, mounted under /api/.
#
# Notes for developers:
# - Catalog and appointment endpoints are registered on the DefaultRouter.
# - Phone login, time slots and the AI assistant are plain APIViews.

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .auth_views import LogoutView, MeView, PhoneLoginView
from .views import AppointmentViewSet, ServiceViewSet, StylistViewSet, TimeSlotView
from .views_assistant import ChatView, SuggestionView

# --------------------------
# DRF Router registrations
# --------------------------
router = DefaultRouter()
router.register(r"services", ServiceViewSet, basename="service")
router.register(r"stylists", StylistViewSet, basename="stylist")
router.register(r"appointments", AppointmentViewSet, basename="appointment")

# --------------------------
# URL patterns
# --------------------------
urlpatterns = [
    # 1) REST API (JSON) — all the viewsets above
    path("", include(router.urls)),

    # 2) Slot picker
    path("time-slots/", TimeSlotView.as_view(), name="time_slots"),

    # 3) Phone login (no real OTP check)
    path("auth/login", PhoneLoginView.as_view(), name="auth_login"),
    path("auth/logout", LogoutView.as_view(), name="auth_logout"),
    path("auth/me", MeView.as_view(), name="auth_me"),

    # 4) AI assistant
    path("assistant/suggestion", SuggestionView.as_view(), name="assistant_suggestion"),
    path("assistant/chat", ChatView.as_view(), name="assistant_chat"),
]
