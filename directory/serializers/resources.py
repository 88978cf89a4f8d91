from rest_framework import serializers

from directory.models import HOSPITAL_TYPES
from directory.serializers.fields import CleanCharField

CREATE_REQUIRED = 'Please fill in all required fields'


class ShopDetailsSerializer(serializers.Serializer):
    name = CleanCharField(max_length=120)
    phone = CleanCharField(max_length=32)
    address = CleanCharField(max_length=255)
    email = serializers.EmailField(required=False, allow_blank=True)
    openingHours = CleanCharField(required=False, allow_blank=True, max_length=120)

    def payload(self) -> dict:
        return dict(self.validated_data)


class ShopCreateSerializer(ShopDetailsSerializer):
    lng = serializers.FloatField(required=False, default=0, min_value=-180, max_value=180)
    lat = serializers.FloatField(required=False, default=0, min_value=-90, max_value=90)

    def payload(self) -> dict:
        vd = super().payload()
        vd['coordinates'] = [vd.pop('lng'), vd.pop('lat')]
        return vd


class HospitalDetailsSerializer(serializers.Serializer):
    name = CleanCharField(max_length=120)
    type = serializers.ChoiceField(choices=HOSPITAL_TYPES, default='Private')
    phone = CleanCharField(max_length=32)
    address = CleanCharField(max_length=255)
    email = serializers.EmailField(required=False, allow_blank=True)
    openingHours = CleanCharField(required=False, allow_blank=True, max_length=120)
    emergencyServices = serializers.BooleanField(default=False)
    bedsAvailable = serializers.IntegerField(required=False, default=0, min_value=0)
    specializations = CleanCharField(required=False, allow_blank=True, max_length=500)

    def validate_specializations(self, v):
        return [s.strip() for s in (v or '').split(',') if s.strip()]

    def payload(self) -> dict:
        vd = dict(self.validated_data)
        vd.setdefault('specializations', [])
        return vd


class HospitalCreateSerializer(HospitalDetailsSerializer):
    lng = serializers.FloatField(required=False, default=0, min_value=-180, max_value=180)
    lat = serializers.FloatField(required=False, default=0, min_value=-90, max_value=90)

    def payload(self) -> dict:
        vd = super().payload()
        vd['coordinates'] = [vd.pop('lng'), vd.pop('lat')]
        return vd
