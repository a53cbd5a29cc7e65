"""
URL routing for exports and publishing, nested under /api/projects/<project_id>/.
"""
from django.urls import path

from .views import (
    export_download,
    export_history,
    export_project,
    export_status,
    publish_project,
    publish_status,
)

urlpatterns = [
    path('export', export_project, name='export-create'),
    path('export/history', export_history, name='export-history'),
    path('export/<uuid:export_id>', export_status, name='export-detail'),
    path('export/<uuid:export_id>/status', export_status, name='export-status'),
    path('export/<uuid:export_id>/download', export_download, name='export-download'),
    path('publish', publish_project, name='publish-create'),
    path('publish/<uuid:publish_id>/status', publish_status, name='publish-status'),
]
