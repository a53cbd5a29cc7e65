"""
URL routing for CSV ingestion, nested under /api/projects/<project_id>/.
"""
from django.urls import path

from .views import csv_preview, csv_upload_status, csv_uploads

urlpatterns = [
    path('csv', csv_uploads, name='csv-uploads'),
    path('csv/preview', csv_preview, name='csv-preview'),
    path('csv/<uuid:upload_id>', csv_upload_status, name='csv-upload-status'),
]
