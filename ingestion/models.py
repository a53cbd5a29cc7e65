"""
CSV upload jobs.
"""
import uuid

from django.conf import settings
from django.db import models

from jobs.models import JobRecord
from jobs.status import JobStatus


def upload_to(instance, filename):
    return f"uploads/{instance.project_id}/{instance.id}.csv"


class CSVUpload(JobRecord):
    """
    A CSV file of page definitions waiting to be, or already, imported.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='csv_uploads')
    project = models.ForeignKey('projects.Project', on_delete=models.CASCADE, related_name='csv_uploads')
    file = models.FileField(upload_to=upload_to, max_length=500)
    file_name = models.CharField(max_length=255)
    status = models.CharField(max_length=30, choices=JobStatus.choices, default=JobStatus.PENDING)
    upload_date = models.DateTimeField(auto_now_add=True)

    # Import results
    rows_total = models.IntegerField(default=0)
    rows_imported = models.IntegerField(default=0)
    rows_failed = models.IntegerField(default=0)
    errors = models.JSONField(default=list, blank=True, help_text="Per-row errors: [{row, field, message}]")

    class Meta:
        db_table = 'csv_uploads'
        ordering = ['-upload_date']
        indexes = [
            models.Index(fields=['project', 'upload_date'], name='csv_upload_project_date_idx'),
        ]

    def __str__(self):
        return f"{self.file_name} ({self.status})"

    @property
    def file_path(self):
        return self.file.name if self.file else None
