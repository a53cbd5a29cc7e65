"""
Serializers for Project model.
"""
from rest_framework import serializers

from .models import Project


class ProjectSerializer(serializers.ModelSerializer):
    """Serializer for Project model."""
    project_id = serializers.UUIDField(source='id', read_only=True)
    user_id = serializers.UUIDField(read_only=True)
    page_count = serializers.SerializerMethodField()

    class Meta:
        model = Project
        fields = (
            'project_id', 'user_id', 'name', 'description', 'status',
            'default_language', 'created_at', 'updated_at', 'page_count',
        )
        read_only_fields = ('project_id', 'user_id', 'created_at', 'updated_at', 'page_count')
        extra_kwargs = {
            'description': {'required': False, 'allow_blank': True},
            'default_language': {'required': False},
            'status': {'required': False},
        }

    def get_page_count(self, obj):
        """Get count of pages for this project."""
        return obj.pages.count()

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Project name cannot be blank.')
        return value

    def validate_default_language(self, value):
        value = value.strip().lower()
        if not value:
            return 'en'
        return value

    def validate_status(self, value):
        # 'published' is only reached through a publish job
        if value == 'published' and (self.instance is None or self.instance.status != 'published'):
            raise serializers.ValidationError("Use the publish endpoint to publish a project.")
        return value
