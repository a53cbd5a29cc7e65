"""
Abstract base for rows that represent a long-running operation.
"""
from django.db import models

from .status import JobStatus, is_terminal, transition


class JobRecord(models.Model):
    """
    A job row: created synchronously by a request, advanced later by a worker.

    Concrete models declare their own status column and name it in
    STATUS_FIELD; all status writes go through `transition`.
    """
    STATUS_FIELD = 'status'

    error_message = models.TextField(blank=True, null=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        abstract = True

    @property
    def job_status(self):
        return getattr(self, self.STATUS_FIELD)

    @property
    def is_finished(self):
        return is_terminal(self.job_status)

    def mark_in_progress(self, **fields):
        return transition(self, JobStatus.IN_PROGRESS, **fields)

    def mark_completed(self, with_errors=False, **fields):
        target = JobStatus.COMPLETED_WITH_ERRORS if with_errors else JobStatus.COMPLETED
        return transition(self, target, **fields)

    def mark_failed(self, error_message, **fields):
        return transition(self, JobStatus.FAILED, error_message=error_message[:2000], **fields)
