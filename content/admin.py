from django.contrib import admin
from .models import Page, SEOMetadata


@admin.register(Page)
class PageAdmin(admin.ModelAdmin):
    list_display = ('title', 'project', 'url_slug', 'is_pillar_page', 'updated_at')
    list_filter = ('is_pillar_page', 'created_at')
    search_fields = ('title', 'url_slug', 'project__name')
    readonly_fields = ('created_at', 'updated_at')


@admin.register(SEOMetadata)
class SEOMetadataAdmin(admin.ModelAdmin):
    list_display = ('page', 'meta_title', 'focus_keyword', 'updated_at')
    search_fields = ('page__title', 'meta_title', 'focus_keyword')
    readonly_fields = ('created_at', 'updated_at')
