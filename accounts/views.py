from django.contrib.auth import get_user_model
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from accounts.permissions import IsAdmin
from accounts.serializers import LoginSerializer, RefreshSerializer, UserSummarySerializer

User = get_user_model()

TAGS = ["Authentication"]

token_pair_schema = openapi.Schema(
    type=openapi.TYPE_OBJECT,
    properties={
        "refresh": openapi.Schema(type=openapi.TYPE_STRING, description="JWT refresh token"),
        "access": openapi.Schema(type=openapi.TYPE_STRING, description="JWT access token"),
    },
)

login_response = openapi.Response(
    "Login successful",
    openapi.Schema(
        type=openapi.TYPE_OBJECT,
        properties={
            "user": openapi.Schema(
                type=openapi.TYPE_OBJECT,
                properties={
                    "id": openapi.Schema(type=openapi.TYPE_INTEGER),
                    "username": openapi.Schema(type=openapi.TYPE_STRING, example="RES001"),
                    "full_name": openapi.Schema(type=openapi.TYPE_STRING),
                    "role": openapi.Schema(
                        type=openapi.TYPE_STRING,
                        enum=[role for role, _ in User.ROLE_CHOICES],
                    ),
                },
            ),
            "tokens": token_pair_schema,
        },
    ),
)

invalid_credentials = openapi.Response(
    "Invalid credentials or token",
    examples={"application/json": {"non_field_errors": ["Invalid credentials."]}},
)


class LoginView(APIView):
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    @swagger_auto_schema(
        tags=TAGS,
        operation_summary="Sign in",
        operation_description=(
            "Residents, garbage collectors and admins sign in with their phone number, "
            "email or username and receive a JWT pair."
        ),
        operation_id="auth_login",
        request_body=LoginSerializer,
        responses={200: login_response, 400: invalid_credentials, 403: "Account is inactive."},
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]

        if not user.is_active:
            return Response({"detail": "Account is inactive."}, status=status.HTTP_403_FORBIDDEN)

        refresh = RefreshToken.for_user(user)
        return Response({
            "user": UserSummarySerializer(user).data,
            "tokens": {"refresh": str(refresh), "access": str(refresh.access_token)},
        })


class TokenRefreshView(APIView):
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    @swagger_auto_schema(
        tags=TAGS,
        operation_summary="Refresh access token",
        operation_id="auth_token_refresh",
        request_body=RefreshSerializer,
        responses={200: token_pair_schema, 400: invalid_credentials},
    )
    def post(self, request):
        serializer = RefreshSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response({"access": serializer.access_token()})


class LogoutView(APIView):

    @swagger_auto_schema(
        tags=TAGS,
        operation_summary="Sign out",
        operation_description="Blacklists the refresh token so it can no longer mint access tokens.",
        operation_id="auth_logout",
        request_body=RefreshSerializer,
        responses={205: "Token revoked", 400: invalid_credentials},
    )
    def post(self, request):
        serializer = RefreshSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.blacklist()
        return Response(status=status.HTTP_205_RESET_CONTENT)


class CollectorListView(APIView):
    permission_classes = [IsAdmin]

    @swagger_auto_schema(
        tags=["Accounts"],
        operation_summary="List garbage collectors",
        operation_description="Active collectors that pickup requests can be assigned to.",
        operation_id="accounts_collectors",
        responses={200: UserSummarySerializer(many=True)},
    )
    def get(self, request):
        collectors = User.objects.filter(role=User.COLLECTOR, is_active=True).order_by("username")
        return Response(UserSummarySerializer(collectors, many=True).data)
