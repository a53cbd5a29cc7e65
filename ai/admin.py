from django.contrib import admin
from .models import AIContentGeneration


@admin.register(AIContentGeneration)
class AIContentGenerationAdmin(admin.ModelAdmin):
    list_display = ('id', 'page', 'status', 'model', 'created_at', 'completed_at')
    list_filter = ('status', 'model', 'created_at')
    search_fields = ('prompt', 'page__title')
    readonly_fields = ('created_at', 'completed_at')
