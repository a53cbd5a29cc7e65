"""
Content analytics for a project, computed from stored data.

No visitor tracking exists, so the numbers describe the site being built:
pages, SEO coverage, AI usage and job outcomes.
"""
from datetime import datetime, time
from typing import Any, Dict, Optional

from django.db.models import Count, Q
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime


def parse_bound(value: Optional[str], end_of_day: bool = False) -> Optional[datetime]:
    """
    Parse a date_from/date_to query value.

    Accepts an ISO date ("2024-05-01") or datetime. A bare date used as an
    upper bound covers the whole day. Raises ValueError on garbage.
    """
    if not value:
        return None
    moment = parse_datetime(value)
    if moment is None:
        day = parse_date(value)
        if day is None:
            raise ValueError(f"Invalid date: {value}")
        moment = datetime.combine(day, time.max if end_of_day else time.min)
    if timezone.is_naive(moment):
        moment = timezone.make_aware(moment)
    return moment


def _window(field: str, date_from: Optional[datetime], date_to: Optional[datetime]) -> Q:
    q = Q()
    if date_from:
        q &= Q(**{f'{field}__gte': date_from})
    if date_to:
        q &= Q(**{f'{field}__lte': date_to})
    return q


def _status_counts(queryset, field: str) -> Dict[str, int]:
    rows = queryset.values(field).annotate(n=Count('pk')).order_by(field)
    return {row[field]: row['n'] for row in rows}


def project_analytics(project, date_from: Optional[datetime] = None,
                      date_to: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Aggregate project content statistics.

    The date window filters on each row's creation time (pages, generations,
    uploads) or start time (deployments).
    """
    from ai.models import AIContentGeneration
    from content.models import Page
    from exports.models import DeploymentLog
    from ingestion.models import CSVUpload

    pages = Page.objects.filter(project=project).filter(_window('created_at', date_from, date_to))
    page_stats = pages.aggregate(
        total=Count('pk'),
        pillar=Count('pk', filter=Q(is_pillar_page=True)),
        with_content=Count('pk', filter=~Q(content='')),
        with_seo=Count('seo_metadata'),
        top_level=Count('pk', filter=Q(parent_page__isnull=True)),
    )
    total_pages = page_stats['total']

    generations = AIContentGeneration.objects.filter(project=project).filter(
        _window('created_at', date_from, date_to)
    )
    uploads = CSVUpload.objects.filter(project=project).filter(
        _window('upload_date', date_from, date_to)
    )
    deployments = DeploymentLog.objects.filter(project=project).filter(
        _window('started_at', date_from, date_to)
    )

    def coverage(count):
        return round(count * 100.0 / total_pages, 1) if total_pages else 0.0

    return {
        'project_id': str(project.pk),
        'date_from': date_from.isoformat() if date_from else None,
        'date_to': date_to.isoformat() if date_to else None,
        'pages': {
            'total': total_pages,
            'pillar_pages': page_stats['pillar'],
            'top_level': page_stats['top_level'],
            'with_content': page_stats['with_content'],
            'content_coverage': coverage(page_stats['with_content']),
        },
        'seo': {
            'pages_with_metadata': page_stats['with_seo'],
            'coverage': coverage(page_stats['with_seo']),
        },
        'ai_generations': _status_counts(generations, 'status'),
        'csv_uploads': {
            'by_status': _status_counts(uploads, 'status'),
            'rows_imported': sum(uploads.values_list('rows_imported', flat=True)),
        },
        'exports': _status_counts(deployments.filter(kind='export'), 'deployment_status'),
        'publishes': _status_counts(deployments.filter(kind='publish'), 'deployment_status'),
        'last_updated': project.updated_at.isoformat() if project.updated_at else None,
    }
