import re

from rest_framework import serializers

DOSE_TIME_RE = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')


class MarkDoseTakenSerializer(serializers.Serializer):
    medicineId = serializers.CharField(max_length=255)
    doseTime = serializers.CharField(max_length=5)
    date = serializers.DateField(required=False)
    # Sent by the service worker; must match the authenticated user when present.
    userId = serializers.CharField(max_length=255, required=False)

    def validate_doseTime(self, value):
        if not DOSE_TIME_RE.match(value):
            raise serializers.ValidationError('doseTime must be HH:MM (24-hour).')
        return value


class DoseDocumentSerializer(serializers.Serializer):
    """One entry of a medicine document's ``doses`` array."""
    time = serializers.CharField(trim_whitespace=False)
    status = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    takenAt = serializers.DateTimeField(required=False, allow_null=True)
    date = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class MedicineDocumentSerializer(serializers.Serializer):
    """
    A ``users/{userId}/medicines/{medicineId}`` document as written by the web app.

    ``doses`` entries are left raw here and checked one at a time with
    DoseDocumentSerializer, so a bad entry drops only itself.
    """
    name = serializers.CharField(required=False, allow_null=True, allow_blank=True, trim_whitespace=False)
    dosage = serializers.CharField(required=False, allow_null=True, allow_blank=True, trim_whitespace=False)
    scheduleTimes = serializers.ListField(child=serializers.CharField(allow_blank=True, trim_whitespace=False), allow_empty=True)
    enableNotifications = serializers.BooleanField(required=False, allow_null=True, default=False)
    doses = serializers.ListField(required=False, allow_null=True)
