"""
Shared pytest configuration: eager Celery and a throwaway media root.
"""
import pytest

from sitegenie.celery import app as celery_app

EAGER = ('CELERY_TASK_ALWAYS_EAGER', 'CELERY_TASK_EAGER_PROPAGATES')


@pytest.fixture(autouse=True)
def eager_celery():
    # Load the CELERY_* Django settings first. Namespaced keys are looked up
    # before plain ones, so the overrides use the same names.
    celery_app.conf.get('task_always_eager')
    celery_app.conf.update({key: True for key in EAGER})
    yield
    celery_app.conf.update({key: False for key in EAGER})


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path / 'media')
    return settings.MEDIA_ROOT
