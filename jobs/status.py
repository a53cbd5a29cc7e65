"""
Job status lifecycle shared by CSV uploads, exports/publishes and AI generations.

    pending ──► in_progress ──► completed | completed_with_errors | failed
       └──────────────────────► completed | completed_with_errors | failed

`transition` is the only code path that writes a job's status column.
"""
import logging

from django.db import models
from django.utils import timezone

logger = logging.getLogger(__name__)


class JobStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    IN_PROGRESS = 'in_progress', 'In progress'
    COMPLETED = 'completed', 'Completed'
    COMPLETED_WITH_ERRORS = 'completed_with_errors', 'Completed with errors'
    FAILED = 'failed', 'Failed'


TERMINAL_STATES = frozenset({
    JobStatus.COMPLETED,
    JobStatus.COMPLETED_WITH_ERRORS,
    JobStatus.FAILED,
})

# target state -> states it may be entered from
ALLOWED_SOURCES = {
    JobStatus.IN_PROGRESS: (JobStatus.PENDING,),
    JobStatus.COMPLETED: (JobStatus.PENDING, JobStatus.IN_PROGRESS),
    JobStatus.COMPLETED_WITH_ERRORS: (JobStatus.PENDING, JobStatus.IN_PROGRESS),
    JobStatus.FAILED: (JobStatus.PENDING, JobStatus.IN_PROGRESS),
}


class IllegalTransition(Exception):
    def __init__(self, job, current, target):
        self.job = job
        self.current = current
        self.target = target
        super().__init__(
            f"{job.__class__.__name__} {job.pk}: cannot move from '{current}' to '{target}'"
        )


def is_terminal(status):
    return status in TERMINAL_STATES


def transition(job, target, **fields):
    """
    Move `job` to `target`, writing `fields` in the same UPDATE.

    Returns True when the row changed. Re-applying the job's current state is
    a no-op and returns False. A job whose row was deleted, or which another
    writer already moved on, also returns False without raising. Any other
    move raises IllegalTransition.
    """
    target = JobStatus(target)
    status_field = job.STATUS_FIELD
    current = getattr(job, status_field)

    if current == target:
        return False

    sources = ALLOWED_SOURCES.get(target, ())
    if current not in sources:
        raise IllegalTransition(job, current, target)

    if target in TERMINAL_STATES and 'completed_at' not in fields and hasattr(job, 'completed_at'):
        fields['completed_at'] = timezone.now()

    updated = type(job).objects.filter(
        pk=job.pk,
        **{f'{status_field}__in': sources},
    ).update(**{status_field: target}, **fields)

    if not updated:
        logger.info(
            f"{job.__class__.__name__} {job.pk}: no row moved to '{target}' "
            "(deleted or already transitioned)"
        )
        return False

    setattr(job, status_field, target)
    for name, value in fields.items():
        setattr(job, name, value)
    logger.info(f"{job.__class__.__name__} {job.pk}: {current} -> {target}")
    return True
