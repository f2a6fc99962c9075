# booking/authentication.py
#
# Purpose:
# - DRF authentication backed by the phone-login session.
# - request.user is the CustomerProfile; guests stay anonymous.
#
# Notes:
# - Same CSRF rule as DRF's SessionAuthentication: once a session carries a
#   customer, unsafe requests must send the CSRF token.
#
from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication, CSRFCheck


class CustomerSessionAuthentication(BaseAuthentication):
    def authenticate(self, request):
        # Imported here: auth_views imports rest_framework.views, which loads
        # this class via api_settings (circular import at module level).
        from .auth_views import current_customer

        customer = current_customer(request._request)
        if customer is None:
            return None

        self.enforce_csrf(request)
        return (customer, None)

    def enforce_csrf(self, request):
        def dummy_get_response(request):  # pragma: no cover
            return None

        check = CSRFCheck(dummy_get_response)
        # populates request.META['CSRF_COOKIE'], which is used in process_view()
        check.process_request(request)
        reason = check.process_view(request, None, (), {})
        if reason:
            raise exceptions.PermissionDenied(f"CSRF Failed: {reason}")
