"""
Export and publish jobs.
"""
import uuid

from django.db import models

from jobs.models import JobRecord
from jobs.status import JobStatus


def artifact_upload_to(instance, filename):
    return f"exports/{instance.project_id}/{filename}"


class DeploymentLog(JobRecord):
    """
    One export (zip download) or publish (static site) run of a project.
    """
    KIND_EXPORT = 'export'
    KIND_PUBLISH = 'publish'
    KIND_CHOICES = [
        (KIND_EXPORT, 'Export'),
        (KIND_PUBLISH, 'Publish'),
    ]

    STATUS_FIELD = 'deployment_status'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    project = models.ForeignKey('projects.Project', on_delete=models.CASCADE, related_name='deployment_logs')
    kind = models.CharField(max_length=10, choices=KIND_CHOICES, default=KIND_EXPORT)
    deployment_status = models.CharField(max_length=30, choices=JobStatus.choices, default=JobStatus.PENDING)
    started_at = models.DateTimeField()

    # Progress
    pages_total = models.IntegerField(default=0)
    pages_bundled = models.IntegerField(default=0)

    artifact = models.FileField(upload_to=artifact_upload_to, max_length=500, blank=True)
    site_url = models.URLField(max_length=500, blank=True, default='')

    class Meta:
        db_table = 'deployment_logs'
        ordering = ['-started_at']
        indexes = [
            models.Index(fields=['project', 'kind', 'started_at'], name='deploy_project_kind_idx'),
        ]

    def __str__(self):
        return f"{self.kind} {self.id} ({self.deployment_status})"

    @property
    def progress(self):
        """Percentage of pages bundled; 100 once completed."""
        if self.deployment_status in (JobStatus.COMPLETED, JobStatus.COMPLETED_WITH_ERRORS):
            return 100
        if not self.pages_total:
            return 0
        return min(99, int(self.pages_bundled * 100 / self.pages_total))
