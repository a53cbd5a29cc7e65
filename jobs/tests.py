"""
Tests for the job status lifecycle and deferred dispatch.
"""
from unittest.mock import MagicMock

import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone

from exports.models import DeploymentLog
from jobs.dispatch import schedule_job
from jobs.status import IllegalTransition, JobStatus, is_terminal, transition
from projects.models import Project

User = get_user_model()


@pytest.fixture
def project():
    user = User.objects.create_user(email='test@example.com', username='test@example.com', password='testpass123')
    return Project.objects.create(user=user, name='Acme')


@pytest.fixture
def job(project):
    return DeploymentLog.objects.create(project=project, started_at=timezone.now())


def _stored_status(job):
    return DeploymentLog.objects.values_list('deployment_status', flat=True).get(pk=job.pk)


def test_terminal_states():
    assert is_terminal(JobStatus.COMPLETED)
    assert is_terminal(JobStatus.COMPLETED_WITH_ERRORS)
    assert is_terminal(JobStatus.FAILED)
    assert not is_terminal(JobStatus.PENDING)
    assert not is_terminal(JobStatus.IN_PROGRESS)


@pytest.mark.django_db
class TestTransition:

    def test_pending_to_in_progress_to_completed(self, job):
        assert job.mark_in_progress(pages_total=3)
        assert _stored_status(job) == 'in_progress'
        assert job.pages_total == 3

        assert job.mark_completed()
        assert _stored_status(job) == 'completed'
        assert job.completed_at is not None
        assert job.is_finished

    def test_pending_straight_to_terminal(self, job):
        assert job.mark_completed(with_errors=True)
        assert _stored_status(job) == 'completed_with_errors'

    def test_repeating_terminal_state_is_noop(self, job):
        job.mark_completed()
        first_completed_at = job.completed_at
        assert job.mark_completed() is False
        job.refresh_from_db()
        assert job.completed_at == first_completed_at

    def test_terminal_states_are_final(self, job):
        job.mark_completed()
        with pytest.raises(IllegalTransition):
            job.mark_failed('late failure')
        with pytest.raises(IllegalTransition):
            transition(job, JobStatus.IN_PROGRESS)
        assert _stored_status(job) == 'completed'

    def test_cannot_return_to_pending(self, job):
        job.mark_in_progress()
        with pytest.raises(IllegalTransition):
            transition(job, JobStatus.PENDING)

    def test_failed_records_message(self, job):
        job.mark_failed('x' * 5000)
        job.refresh_from_db()
        assert job.deployment_status == 'failed'
        assert len(job.error_message) == 2000

    def test_deleted_row_is_silent_noop(self, job):
        DeploymentLog.objects.filter(pk=job.pk).delete()
        assert job.mark_completed() is False

    def test_row_moved_by_someone_else_is_noop(self, job):
        DeploymentLog.objects.filter(pk=job.pk).update(deployment_status=JobStatus.FAILED)
        # The in-memory copy still believes it is pending
        assert job.mark_completed() is False
        assert _stored_status(job) == 'failed'


@pytest.mark.django_db
class TestScheduleJob:

    def test_task_queued_only_after_commit(self, job, django_capture_on_commit_callbacks):
        task = MagicMock()
        with django_capture_on_commit_callbacks(execute=False) as callbacks:
            schedule_job(job, task)
            task.delay.assert_not_called()

        assert len(callbacks) == 1
        callbacks[0]()
        task.delay.assert_called_once_with(str(job.pk))

    def test_broker_failure_fails_job(self, job, django_capture_on_commit_callbacks):
        task = MagicMock()
        task.name = 'exports.tasks.build_export'
        task.delay.side_effect = ConnectionError('broker down')

        with django_capture_on_commit_callbacks(execute=True):
            schedule_job(job, task)

        assert _stored_status(job) == 'failed'
        job.refresh_from_db()
        assert 'broker down' in job.error_message

    def test_scheduled_task_runs_inline_under_test(self, job, django_capture_on_commit_callbacks):
        from exports.tasks import build_export

        with django_capture_on_commit_callbacks(execute=True):
            schedule_job(job, build_export)

        job.refresh_from_db()
        assert job.deployment_status == 'completed'
        assert job.error_message is None
