from rest_framework import serializers


class DeviceDocumentSerializer(serializers.Serializer):
    """A ``users/{userId}/devices/{deviceId}`` document, as registered by the web app."""
    token = serializers.CharField(trim_whitespace=False)
    platform = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    createdAt = serializers.DateTimeField(required=False, allow_null=True)
    lastUpdated = serializers.DateTimeField(required=False, allow_null=True)
    # Devices registered before the flag existed are active.
    active = serializers.BooleanField(required=False, allow_null=True, default=True)
