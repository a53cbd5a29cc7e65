"""
API endpoints for exporting and publishing a project's site.
"""
import logging

from django.db import transaction
from django.http import FileResponse
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from jobs.dispatch import schedule_job
from jobs.status import JobStatus
from projects.permissions import owned_project
from sitegenie.exceptions import NotFoundError
from .models import DeploymentLog
from .tasks import build_export, publish_site

logger = logging.getLogger(__name__)


def _get_log(project, log_id, kind):
    try:
        return DeploymentLog.objects.get(pk=log_id, project=project, kind=kind)
    except DeploymentLog.DoesNotExist:
        raise NotFoundError('Export not found' if kind == DeploymentLog.KIND_EXPORT else 'Publish not found')


def _download_url(log):
    if log.deployment_status != JobStatus.COMPLETED or not log.artifact:
        return None
    return reverse('export-download', kwargs={'project_id': log.project_id, 'export_id': log.pk})


def _serialize_export(log):
    return {
        'export_id': str(log.id),
        'status': log.deployment_status,
        'progress': log.progress,
        'download_url': _download_url(log),
        'error_message': log.error_message,
    }


def _serialize_history(log):
    return {
        **_serialize_export(log),
        'pages_total': log.pages_total,
        'pages_bundled': log.pages_bundled,
        'error_message': log.error_message,
        'started_at': log.started_at.isoformat() if log.started_at else None,
        'completed_at': log.completed_at.isoformat() if log.completed_at else None,
    }


def _start(project, kind, task):
    with transaction.atomic():
        log = DeploymentLog.objects.create(project=project, kind=kind, started_at=timezone.now())
        schedule_job(log, task)
    logger.info(f"{kind.capitalize()} {log.id} requested for project {project.id}")
    return log


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def export_project(request, project_id):
    """POST /api/projects/{project_id}/export - Start building a zip of the site."""
    project = owned_project(request, project_id)
    log = _start(project, DeploymentLog.KIND_EXPORT, build_export)
    return Response({
        'export_id': str(log.id),
        'status': log.deployment_status,
    }, status=status.HTTP_202_ACCEPTED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def export_status(request, project_id, export_id):
    """
    GET /api/projects/{project_id}/export/{export_id}
    GET /api/projects/{project_id}/export/{export_id}/status
    """
    project = owned_project(request, project_id)
    log = _get_log(project, export_id, DeploymentLog.KIND_EXPORT)
    return Response(_serialize_export(log))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def export_download(request, project_id, export_id):
    """GET /api/projects/{project_id}/export/{export_id}/download - 404 until completed."""
    project = owned_project(request, project_id)
    log = _get_log(project, export_id, DeploymentLog.KIND_EXPORT)
    if log.deployment_status != JobStatus.COMPLETED or not log.artifact:
        raise NotFoundError('Export not found or not completed')

    return FileResponse(
        log.artifact.open('rb'),
        as_attachment=True,
        filename=f"project-{project.pk}-export.zip",
        content_type='application/zip',
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def export_history(request, project_id):
    """GET /api/projects/{project_id}/export/history - newest first."""
    project = owned_project(request, project_id)
    logs = DeploymentLog.objects.filter(project=project, kind=DeploymentLog.KIND_EXPORT)
    return Response({
        'data': [_serialize_history(log) for log in logs],
        'count': logs.count(),
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def publish_project(request, project_id):
    """POST /api/projects/{project_id}/publish - Start publishing the site."""
    project = owned_project(request, project_id)
    log = _start(project, DeploymentLog.KIND_PUBLISH, publish_site)
    return Response({
        'publish_id': str(log.id),
        'status': log.deployment_status,
    }, status=status.HTTP_202_ACCEPTED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def publish_status(request, project_id, publish_id):
    """GET /api/projects/{project_id}/publish/{publish_id}/status"""
    project = owned_project(request, project_id)
    log = _get_log(project, publish_id, DeploymentLog.KIND_PUBLISH)
    return Response({
        'publish_id': str(log.id),
        'status': log.deployment_status,
        'progress': log.progress,
        'site_url': log.site_url or None,
        'error_message': log.error_message,
    })
