"""
Serializers for Page and SEOMetadata models.
"""
from rest_framework import serializers

from sitegenie.exceptions import ConflictError
from .hierarchy import HierarchyError, validate_parent
from .models import Page, SEOMetadata
from .slugs import normalize_slug


class PageSerializer(serializers.ModelSerializer):
    """
    Serializer for Page model.

    Expects the owning project in context['project'].
    """
    page_id = serializers.UUIDField(source='id', read_only=True)
    project_id = serializers.UUIDField(read_only=True)
    parent_page_id = serializers.PrimaryKeyRelatedField(
        source='parent_page',
        queryset=Page.objects.all(),
        allow_null=True,
        required=False,
    )

    class Meta:
        model = Page
        fields = (
            'page_id', 'project_id', 'title', 'url_slug', 'content',
            'is_pillar_page', 'parent_page_id', 'created_at', 'updated_at',
        )
        read_only_fields = ('page_id', 'project_id', 'created_at', 'updated_at')
        extra_kwargs = {
            'content': {'required': False, 'allow_blank': True},
            'is_pillar_page': {'required': False},
        }
        # Slug uniqueness is answered with 409 below, not with a 400 from the unique validator
        validators = []

    def validate_title(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Title cannot be blank.')
        return value

    def validate_url_slug(self, value):
        slug = normalize_slug(value)
        if not slug:
            raise serializers.ValidationError('url_slug must contain at least one letter or digit.')
        return slug

    def validate(self, attrs):
        project = self.context['project']

        if 'parent_page' in attrs:
            page_id = self.instance.pk if self.instance else None
            try:
                validate_parent(project, page_id, attrs['parent_page'])
            except HierarchyError as e:
                raise serializers.ValidationError({'parent_page_id': str(e)})

        slug = attrs.get('url_slug')
        if slug:
            clash = Page.objects.filter(project=project, url_slug=slug)
            if self.instance:
                clash = clash.exclude(pk=self.instance.pk)
            if clash.exists():
                raise ConflictError(f"A page with url_slug '{slug}' already exists in this project")

        return attrs


class PageListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for page lists (no content body)."""
    page_id = serializers.UUIDField(source='id', read_only=True)
    parent_page_id = serializers.UUIDField(read_only=True)
    has_seo_metadata = serializers.SerializerMethodField()

    class Meta:
        model = Page
        fields = (
            'page_id', 'title', 'url_slug', 'is_pillar_page', 'parent_page_id',
            'has_seo_metadata', 'created_at', 'updated_at',
        )

    def get_has_seo_metadata(self, obj):
        return hasattr(obj, 'seo_metadata')


class KeywordListField(serializers.ListField):
    """Accepts a list of keywords or one comma-separated string."""
    child = serializers.CharField(max_length=255)

    def to_internal_value(self, data):
        if isinstance(data, str):
            data = [part for part in data.split(',') if part.strip()]
        keywords = super().to_internal_value(data)
        return [k.strip() for k in keywords if k.strip()]


class SEOMetadataSerializer(serializers.ModelSerializer):
    """
    Serializer for SEOMetadata model.

    Every writable field has a default, so an upsert replaces the whole row
    with the latest payload.
    """
    metadata_id = serializers.UUIDField(source='id', read_only=True)
    page_id = serializers.UUIDField(read_only=True)
    meta_title = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    meta_description = serializers.CharField(required=False, allow_blank=True, default='')
    focus_keyword = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    secondary_keywords = KeywordListField(required=False, default=list)

    class Meta:
        model = SEOMetadata
        fields = (
            'metadata_id', 'page_id', 'meta_title', 'meta_description',
            'focus_keyword', 'secondary_keywords', 'created_at', 'updated_at',
        )
        read_only_fields = ('metadata_id', 'page_id', 'created_at', 'updated_at')
