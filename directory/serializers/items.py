"""
Line items embedded in a shop or hospital, and shop reviews.

Each serializer checks the fields the owner panel insists on and parses the
numeric inputs before the collection goes to the backend.  ``REQUIRED``
holds the alert shown when a required field is missing.
"""
from rest_framework import serializers

from directory.serializers.fields import CleanCharField


class MedicineSerializer(serializers.Serializer):
    REQUIRED = 'Please fill in required fields (name, price, stock)'

    name = CleanCharField(max_length=120)
    price = serializers.FloatField(min_value=0)
    stock = serializers.IntegerField(min_value=0)
    description = CleanCharField(required=False, allow_blank=True, max_length=500)
    category = CleanCharField(required=False, allow_blank=True, max_length=80)
    manufacturer = CleanCharField(required=False, allow_blank=True, max_length=120)


class DoctorSerializer(serializers.Serializer):
    REQUIRED = 'Please fill in required fields (name, specialization)'

    name = CleanCharField(max_length=120)
    specialization = CleanCharField(max_length=120)
    qualification = CleanCharField(required=False, allow_blank=True, max_length=120)
    experience = serializers.IntegerField(required=False, min_value=0)
    consultationFee = serializers.FloatField(required=False, min_value=0)
    availability = CleanCharField(required=False, allow_blank=True, max_length=120)
    isAvailable = serializers.BooleanField(default=True)


class LabTestSerializer(serializers.Serializer):
    REQUIRED = 'Please fill in required fields (name, price)'

    name = CleanCharField(max_length=120)
    price = serializers.FloatField(min_value=0)
    description = CleanCharField(required=False, allow_blank=True, max_length=500)
    duration = CleanCharField(required=False, allow_blank=True, max_length=80)
    category = CleanCharField(required=False, allow_blank=True, max_length=80)


class ServiceSerializer(serializers.Serializer):
    REQUIRED = 'Please fill in service name'

    name = CleanCharField(max_length=120)
    description = CleanCharField(required=False, allow_blank=True, max_length=500)
    category = CleanCharField(required=False, allow_blank=True, max_length=80)


class ReviewSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = CleanCharField(required=False, allow_blank=True, max_length=1000)


class StockSerializer(serializers.Serializer):
    stock = serializers.IntegerField(min_value=0)
