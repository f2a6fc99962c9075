# salon_system/urls.py
#
# Purpose:
# - Project URL router.
# - Keeps all JSON APIs under /api/ and the Django admin under /admin/.
#
from django.contrib import admin
from django.urls import path, include


urlpatterns = [
    # Django admin
    path("admin/", admin.site.urls),

    # =====
    # API's
    # =====
    path("api/", include("booking.urls")),
    path("api/reports/", include("reports.urls")),
]
