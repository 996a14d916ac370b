from django.contrib.auth import authenticate, get_user_model
from django.db import transaction
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiResponse

from core.responses import error_response, first_error

from ..models import AccessToken, Profile
from ..serializers.account import LoginSerializer, SignupSerializer, UserOutSerializer

User = get_user_model()


@extend_schema(
    tags=["Auth"],
    request=SignupSerializer,
    responses={201: OpenApiResponse(description="Utilisateur créé + jeton"), 400: OpenApiResponse(description="Validation")},
)
class SignupView(APIView):
    """
    POST /auth/signup
    Crée l'utilisateur (email = identifiant) + profil, et retourne un jeton Bearer.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    @transaction.atomic
    def post(self, request):
        ser = SignupSerializer(data=request.data)
        if not ser.is_valid():
            return error_response(first_error(ser.errors), status.HTTP_400_BAD_REQUEST)
        data = ser.validated_data

        user = User.objects.create_user(username=data["email"], email=data["email"], password=data["password"])
        Profile.objects.create(user=user, display_name=data["username"])
        _, raw = AccessToken.issue(user)

        return Response({"user": UserOutSerializer(user).data, "token": raw}, status=status.HTTP_201_CREATED)


@extend_schema(
    tags=["Auth"],
    request=LoginSerializer,
    responses={200: OpenApiResponse(description="Jeton Bearer"), 400: OpenApiResponse(description="Identifiants invalides")},
)
class LoginView(APIView):
    """
    POST /auth/login
    Vérifie email/mot de passe et émet un nouveau jeton Bearer.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        ser = LoginSerializer(data=request.data)
        if not ser.is_valid():
            return error_response(first_error(ser.errors), status.HTTP_400_BAD_REQUEST)

        email = ser.validated_data["email"].strip().lower()
        user = authenticate(request, username=email, password=ser.validated_data["password"])
        if user is None:
            return error_response("Invalid email or password", status.HTTP_400_BAD_REQUEST)

        _, raw = AccessToken.issue(user)
        return Response({"user": UserOutSerializer(user).data, "token": raw}, status=status.HTTP_200_OK)
