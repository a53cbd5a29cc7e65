"""
API endpoints for CSV ingestion.
"""
import logging
import os

from django.db import transaction
from rest_framework import status
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from jobs.dispatch import schedule_job
from projects.permissions import owned_project
from sitegenie.exceptions import NotFoundError, ValidationError
from . import csv_import
from .models import CSVUpload
from .tasks import process_csv_upload

logger = logging.getLogger(__name__)


def _uploaded_csv(request):
    upload = request.FILES.get('file')
    if upload is None:
        raise ValidationError('No file uploaded')
    if os.path.splitext(upload.name)[1].lower() != '.csv':
        raise ValidationError('Only .csv files are accepted')
    return upload


def _serialize_upload(upload):
    return {
        'upload_id': str(upload.id),
        'file_name': upload.file_name,
        'status': upload.status,
        'rows_total': upload.rows_total,
        'rows_imported': upload.rows_imported,
        'rows_failed': upload.rows_failed,
        'errors': upload.errors,
        'error_message': upload.error_message,
        'upload_date': upload.upload_date.isoformat() if upload.upload_date else None,
        'completed_at': upload.completed_at.isoformat() if upload.completed_at else None,
    }


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def csv_uploads(request, project_id):
    """
    POST /api/projects/{project_id}/csv - Upload a CSV and start importing it
    GET  /api/projects/{project_id}/csv - Upload history, newest first
    """
    project = owned_project(request, project_id)

    if request.method == 'GET':
        uploads = CSVUpload.objects.filter(project=project)
        return Response({
            'data': [_serialize_upload(u) for u in uploads],
            'count': uploads.count(),
        })

    file = _uploaded_csv(request)
    with transaction.atomic():
        upload = CSVUpload(
            user=request.user,
            project=project,
            file_name=os.path.basename(file.name)[:255],
        )
        upload.file.save(file.name, file, save=False)
        upload.save()
        project.touch()
        schedule_job(upload, process_csv_upload)

    logger.info(f"CSV upload {upload.id} accepted for project {project.id}")
    return Response({
        'upload_id': str(upload.id),
        'file_name': upload.file_name,
        'status': upload.status,
    }, status=status.HTTP_202_ACCEPTED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def csv_preview(request, project_id):
    """
    POST /api/projects/{project_id}/csv/preview

    Parses and validates the file; nothing is stored.
    """
    project = owned_project(request, project_id)
    file = _uploaded_csv(request)
    try:
        result = csv_import.preview(project, file.read())
    except csv_import.CSVFormatError as e:
        raise ValidationError(str(e))
    return Response(result)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def csv_upload_status(request, project_id, upload_id):
    """GET /api/projects/{project_id}/csv/{upload_id}"""
    project = owned_project(request, project_id)
    try:
        upload = CSVUpload.objects.get(pk=upload_id, project=project)
    except CSVUpload.DoesNotExist:
        raise NotFoundError('CSV upload not found')
    return Response(_serialize_upload(upload))
