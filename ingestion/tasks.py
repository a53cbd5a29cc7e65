"""Celery tasks for CSV ingestion.

The task is a thin wrapper around csv_import; it owns the job's status
transitions and never lets an exception escape without failing the job.
"""
import logging

from celery import shared_task

from .csv_import import CSVFormatError, import_rows, parse_csv
from .models import CSVUpload

logger = logging.getLogger(__name__)


@shared_task(soft_time_limit=600, time_limit=660)
def process_csv_upload(upload_id: str) -> dict:
    """Import the pages of an uploaded CSV file into its project."""
    upload = CSVUpload.objects.select_related('project').filter(pk=upload_id).first()
    if upload is None:
        logger.info(f"CSV upload {upload_id} no longer exists, skipping")
        return {"upload_id": upload_id, "status": None}

    if upload.is_finished:
        return {"upload_id": upload_id, "status": upload.status}

    if not upload.mark_in_progress():
        logger.info(f"CSV upload {upload_id} is already being processed, skipping")
        return {"upload_id": upload_id, "status": upload.status}

    logger.info(f"Processing CSV upload {upload_id} ({upload.file_name})")

    try:
        with upload.file.open('rb') as fh:
            data = fh.read()
        parsed = parse_csv(data)
        result = import_rows(upload.project, parsed.rows)
    except CSVFormatError as e:
        logger.warning(f"CSV upload {upload_id} rejected: {e}")
        upload.mark_failed(str(e))
        return {"upload_id": upload_id, "status": upload.status}
    except Exception as e:
        logger.exception(f"CSV upload {upload_id} failed")
        upload.mark_failed(f"Import failed: {e}")
        return {"upload_id": upload_id, "status": upload.status}

    upload.mark_completed(
        with_errors=bool(result.errors),
        rows_total=result.rows_total,
        rows_imported=result.rows_imported,
        rows_failed=result.rows_failed,
        errors=result.errors,
    )
    if result.rows_imported:
        upload.project.touch()

    logger.info(
        f"CSV upload {upload_id} finished: {result.rows_imported} imported, {result.rows_failed} failed"
    )
    return {"upload_id": upload_id, "status": upload.status}
