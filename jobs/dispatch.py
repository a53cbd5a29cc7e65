"""
Queueing of job tasks once the creating transaction has committed.
"""
import logging

from django.db import transaction

logger = logging.getLogger(__name__)


def schedule_job(job, task):
    """
    Queue `task(job.pk)` after the current transaction commits.

    The worker must never see a row the request has not committed yet. If
    the broker refuses the task the job is failed rather than left pending.
    """
    job_pk = str(job.pk)

    def _enqueue():
        try:
            task.delay(job_pk)
        except Exception as e:
            logger.exception(f"Could not queue {task.name} for {job.__class__.__name__} {job_pk}")
            job.mark_failed(f"Could not queue background job: {e}")
            return
        logger.info(f"Queued {task.name} for {job.__class__.__name__} {job_pk}")

    transaction.on_commit(_enqueue)
