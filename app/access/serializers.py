"""
Serializers for access control endpoints.
"""

from rest_framework import serializers

from access.levels import AccessType
from access.models import ModuleAccess


class ModuleDefinitionSerializer(serializers.Serializer):
    name = serializers.CharField()
    path = serializers.CharField()
    description = serializers.CharField()


class ModuleAccessSerializer(serializers.ModelSerializer):
    class Meta:
        model = ModuleAccess
        fields = ["module_name", "access_type", "sub_domain", "updated_at"]
        read_only_fields = fields


class GrantSerializer(serializers.Serializer):
    """Request body for upserting a single grant."""

    module_name = serializers.CharField(max_length=100)
    access_type = serializers.ChoiceField(choices=AccessType.choices)
    sub_domain = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)


class AccessMapSerializer(serializers.Serializer):
    """
    Request body for saving a full access map.

    Example:
        {"access": {"Dashboard": "view", "Attendance": "all", "Settings": "none"}}
    """

    access = serializers.DictField(child=serializers.ChoiceField(choices=AccessType.choices))


class GrantAllSerializer(serializers.Serializer):
    """Optional module list for grant-all; omitted means the whole catalog."""

    modules = serializers.ListField(
        child=serializers.CharField(max_length=100),
        required=False,
    )


class AccessSummarySerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    role = serializers.CharField()
    is_super_admin = serializers.BooleanField()
    access = serializers.DictField(child=serializers.CharField())
    modules = serializers.ListField(child=serializers.DictField())
