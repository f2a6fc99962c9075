from django.middleware.csrf import get_token
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status

from .models import CustomerProfile
from .serializers import CustomerProfileSerializer, LoginSerializer
from .services.customer_directory import OtpVerifier, resolve_or_create

SESSION_KEY = "customer_id"


def current_customer(request):
    """Customer logged in on this session, or None for guests."""
    customer_id = request.session.get(SESSION_KEY)
    if not customer_id:
        return None
    return CustomerProfile.objects.filter(pk=customer_id).first()


@method_decorator(csrf_exempt, name="dispatch")
class PhoneLoginView(APIView):
    """
    POST /api/auth/login
    { "phone": "9876543210", "otp": "1234" }
    Finds the customer by phone (or registers a new one) and stores it on
    the session. The OTP is accepted as-is.
    The response sets the csrftoken cookie that later writes must echo back.
    """
    authentication_classes = []
    verifier = OtpVerifier()

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        phone = serializer.validated_data["phone"]

        if not self.verifier.verify(phone, serializer.validated_data["otp"]):
            return Response({"detail": "Invalid code."}, status=status.HTTP_400_BAD_REQUEST)

        customer = resolve_or_create(phone)
        request.session.cycle_key()
        request.session[SESSION_KEY] = customer.pk
        get_token(request)
        return Response(CustomerProfileSerializer(customer).data, status=status.HTTP_200_OK)


class LogoutView(APIView):
    """
    POST /api/auth/logout
    """
    def post(self, request):
        request.session.flush()
        return Response({"detail": "Logged out."}, status=status.HTTP_200_OK)


class MeView(APIView):
    """
    GET /api/auth/me
    Profile, loyalty balance and visit history of the session customer.
    """
    def get(self, request):
        customer = current_customer(request)
        if customer is None:
            return Response({"detail": "Not logged in."}, status=status.HTTP_401_UNAUTHORIZED)
        return Response(CustomerProfileSerializer(customer).data)
