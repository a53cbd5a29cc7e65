from django.contrib import admin
from .models import DeploymentLog


@admin.register(DeploymentLog)
class DeploymentLogAdmin(admin.ModelAdmin):
    list_display = ('id', 'project', 'kind', 'deployment_status', 'pages_bundled', 'pages_total', 'started_at', 'completed_at')
    list_filter = ('kind', 'deployment_status', 'started_at')
    search_fields = ('project__name',)
    readonly_fields = ('started_at', 'completed_at')
