from rest_framework import serializers

from directory.models import ROLE_CHOICES, ROLE_USER
from directory.serializers.fields import CleanCharField

MIN_PASSWORD_LENGTH = 6


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)

    def validate_email(self, v):
        return v.strip().lower()


class RegisterSerializer(serializers.Serializer):
    name = CleanCharField(max_length=100)
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)
    confirmPassword = serializers.CharField(trim_whitespace=False, required=False, allow_blank=True)
    phone = CleanCharField(required=False, allow_blank=True, max_length=32)
    address = CleanCharField(required=False, allow_blank=True, max_length=255)
    role = serializers.ChoiceField(choices=ROLE_CHOICES, default=ROLE_USER)
    lng = serializers.FloatField(required=False, min_value=-180, max_value=180)
    lat = serializers.FloatField(required=False, min_value=-90, max_value=90)

    def validate(self, attrs):
        # same order as the form shows them: match first, then length
        if attrs.get('password') != attrs.get('confirmPassword', ''):
            raise serializers.ValidationError('Passwords do not match')
        if len(attrs.get('password') or '') < MIN_PASSWORD_LENGTH:
            raise serializers.ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')
        return attrs

    def payload(self) -> dict:
        """The body for ``POST /auth/register``."""
        vd = dict(self.validated_data)
        vd.pop('confirmPassword', None)
        lng, lat = vd.pop('lng', None), vd.pop('lat', None)
        if lng is not None and lat is not None:
            # [lng, lat] for GeoJSON
            vd['location'] = {'coordinates': [lng, lat]}
        return vd
