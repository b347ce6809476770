from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

User = get_user_model()


class UserSummarySerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(source="get_full_name", read_only=True)

    class Meta:
        model = User
        fields = ["id", "username", "full_name", "phone_number", "email", "role", "address"]
        read_only_fields = fields


class LoginSerializer(serializers.Serializer):
    """
    Residents usually sign in with their phone number, staff with the
    generated username (RES001, COL002, ...); email works for everyone.
    """
    identifier = serializers.CharField(help_text="Phone number, email or username")
    password = serializers.CharField(write_only=True, style={"input_type": "password"})

    def validate(self, attrs):
        identifier = attrs["identifier"].strip()
        user = (
            User.objects.filter(phone_number=identifier).first()
            or User.objects.filter(email__iexact=identifier).first()
            or User.objects.filter(username__iexact=identifier).first()
        )
        if user is None or not user.check_password(attrs["password"]):
            raise serializers.ValidationError("Invalid credentials.")
        attrs["user"] = user
        return attrs


class RefreshSerializer(serializers.Serializer):
    refresh = serializers.CharField()

    def validate_refresh(self, value):
        try:
            self.token = RefreshToken(value)
        except TokenError:
            raise serializers.ValidationError("Invalid or expired refresh token.")
        return value

    def access_token(self):
        return str(self.token.access_token)

    def blacklist(self):
        try:
            self.token.blacklist()
        except TokenError:
            raise serializers.ValidationError({"refresh": "Refresh token was already revoked."})
