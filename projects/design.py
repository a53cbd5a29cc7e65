"""
Design customization: defaults and validation for Project.design_settings.
"""
import copy
import re

from rest_framework import serializers

DEFAULT_DESIGN = {
    'theme': 'classic',
    'colors': {
        'primary': '#1d4ed8',
        'secondary': '#64748b',
        'background': '#ffffff',
        'text': '#111827',
        'accent': '#f59e0b',
    },
    'typography': {
        'headings_font': 'Arial',
        'body_font': 'Helvetica',
        'base_font_size': 16,
        'line_height': 1.5,
    },
    'layout': {
        'header_style': 'standard',
        'footer_style': 'standard',
        'show_sidebar': False,
        'max_width': 1200,
    },
    'custom_code': {
        'css': '',
        'js': '',
    },
}

HEX_COLOR_RE = re.compile(r'^#(?:[0-9a-fA-F]{3}){1,2}$')


def resolve_design(stored):
    """Merge stored design settings over the defaults, section by section."""
    design = copy.deepcopy(DEFAULT_DESIGN)
    for section, value in (stored or {}).items():
        if isinstance(design.get(section), dict) and isinstance(value, dict):
            design[section].update(value)
        else:
            design[section] = value
    return design


class ColorsSerializer(serializers.Serializer):
    primary = serializers.CharField(required=False)
    secondary = serializers.CharField(required=False)
    background = serializers.CharField(required=False)
    text = serializers.CharField(required=False)
    accent = serializers.CharField(required=False)

    def validate(self, attrs):
        for key, value in attrs.items():
            if not HEX_COLOR_RE.match(value):
                raise serializers.ValidationError({key: 'Must be a hex color such as #1d4ed8.'})
        return attrs


class TypographySerializer(serializers.Serializer):
    headings_font = serializers.CharField(required=False, max_length=100)
    body_font = serializers.CharField(required=False, max_length=100)
    base_font_size = serializers.IntegerField(required=False, min_value=10, max_value=32)
    line_height = serializers.FloatField(required=False, min_value=1.0, max_value=3.0)


class LayoutSerializer(serializers.Serializer):
    header_style = serializers.ChoiceField(choices=['standard', 'centered', 'minimal'], required=False)
    footer_style = serializers.ChoiceField(choices=['standard', 'minimal', 'none'], required=False)
    show_sidebar = serializers.BooleanField(required=False)
    max_width = serializers.IntegerField(required=False, min_value=600, max_value=2400)


class CustomCodeSerializer(serializers.Serializer):
    css = serializers.CharField(required=False, allow_blank=True, max_length=50000)
    js = serializers.CharField(required=False, allow_blank=True, max_length=50000)


class DesignSettingsSerializer(serializers.Serializer):
    """PUT /api/projects/{id}/design body. Omitted sections keep their stored values."""
    theme = serializers.CharField(required=False, max_length=50)
    colors = ColorsSerializer(required=False)
    typography = TypographySerializer(required=False)
    layout = LayoutSerializer(required=False)
    custom_code = CustomCodeSerializer(required=False)
