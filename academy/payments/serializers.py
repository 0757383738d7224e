"""
Payment Request Serializers
"""

from rest_framework import serializers


class SessionIdSerializer(serializers.Serializer):
    """Body of the POST verify-payment endpoints."""

    session_id = serializers.CharField(max_length=255)
