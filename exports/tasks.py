"""Celery tasks for exports and publishes.

Each task owns its DeploymentLog's status transitions and fails the job on
any exception.
"""
import logging

from celery import shared_task
from django.core.files.base import ContentFile
from django.db import transaction

from projects.models import Project
from . import bundler
from .models import DeploymentLog

logger = logging.getLogger(__name__)


def _claim(log_id):
    log = DeploymentLog.objects.select_related('project').filter(pk=log_id).first()
    if log is None:
        logger.info(f"Deployment {log_id} no longer exists, skipping")
        return None
    if log.is_finished:
        return None
    if not log.mark_in_progress(pages_total=log.project.pages.count()):
        logger.info(f"Deployment {log_id} is already being processed, skipping")
        return None
    return log


def _render(log):
    project = log.project

    def on_page(n):
        DeploymentLog.objects.filter(pk=log.pk).update(pages_bundled=n)
        log.pages_bundled = n

    return bundler.render_site(project, on_page=on_page)


@shared_task(soft_time_limit=600, time_limit=660)
def build_export(log_id: str) -> dict:
    """Render the project and store it as a zip artifact."""
    log = _claim(log_id)
    if log is None:
        return {"export_id": log_id, "status": None}

    logger.info(f"Building export {log_id} for project {log.project_id}")
    try:
        files = _render(log)
        archive = bundler.build_zip(files)
        log.artifact.save(f"project-{log.project_id}-export.zip", ContentFile(archive), save=False)
        stored_name = log.artifact.name
    except Exception as e:
        logger.exception(f"Export {log_id} failed")
        log.mark_failed(f"Export failed: {e}")
        return {"export_id": log_id, "status": log.deployment_status}

    log.mark_completed(artifact=stored_name, pages_bundled=log.pages_total)
    logger.info(f"Export {log_id} completed ({len(archive)} bytes)")
    return {"export_id": log_id, "status": log.deployment_status}


@shared_task(soft_time_limit=600, time_limit=660)
def publish_site(log_id: str) -> dict:
    """Render the project and write it to the published site location."""
    log = _claim(log_id)
    if log is None:
        return {"publish_id": log_id, "status": None}

    logger.info(f"Publishing project {log.project_id} ({log_id})")
    try:
        files = _render(log)
        site_url = bundler.publish_files(log.project, files)
    except Exception as e:
        logger.exception(f"Publish {log_id} failed")
        log.mark_failed(f"Publish failed: {e}")
        return {"publish_id": log_id, "status": log.deployment_status}

    with transaction.atomic():
        log.mark_completed(site_url=site_url, pages_bundled=log.pages_total)
        Project.objects.filter(pk=log.project_id).update(status='published')
        log.project.touch()

    logger.info(f"Publish {log_id} completed: {site_url}")
    return {"publish_id": log_id, "status": log.deployment_status}
