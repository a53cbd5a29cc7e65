from django.contrib import admin
from .models import CSVUpload


@admin.register(CSVUpload)
class CSVUploadAdmin(admin.ModelAdmin):
    list_display = ('file_name', 'project', 'status', 'rows_imported', 'rows_failed', 'upload_date')
    list_filter = ('status', 'upload_date')
    search_fields = ('file_name', 'project__name')
    readonly_fields = ('upload_date', 'completed_at', 'errors')
