"""
CSV page import: parsing, row validation and page creation.

Expected columns (header names are case-insensitive):
    title, url_slug                       required
    content | description                 page body
    is_pillar_page                        true/false, yes/no, 1/0
    parent_slug                           url_slug of a page in the same project
    meta_title, meta_description,
    focus_keyword, secondary_keywords     SEO metadata (keywords comma-separated)
"""
import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from django.conf import settings
from django.db import IntegrityError, transaction

from content.hierarchy import HierarchyError, validate_parent
from content.models import Page, SEOMetadata
from content.slugs import normalize_slug

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ('title', 'url_slug')
SEO_COLUMNS = ('meta_title', 'meta_description', 'focus_keyword', 'secondary_keywords')
TRUE_VALUES = {'1', 'true', 'yes', 'y'}


class CSVFormatError(Exception):
    """The file as a whole cannot be imported (encoding, missing header)."""


@dataclass
class ParsedCSV:
    columns: List[str]
    rows: List[Dict[str, str]]


@dataclass
class ImportResult:
    rows_total: int = 0
    rows_imported: int = 0
    errors: List[dict] = field(default_factory=list)

    @property
    def rows_failed(self):
        return self.rows_total - self.rows_imported


def parse_csv(data: bytes) -> ParsedCSV:
    """Decode and parse CSV bytes. Raises CSVFormatError on unusable input."""
    try:
        text = data.decode('utf-8-sig')
    except UnicodeDecodeError:
        raise CSVFormatError('File is not valid UTF-8 text.')

    try:
        reader = csv.DictReader(io.StringIO(text))
        if not reader.fieldnames:
            raise CSVFormatError('CSV file is empty.')
        columns = [(name or '').strip().lower() for name in reader.fieldnames]
        missing = [c for c in REQUIRED_COLUMNS if c not in columns]
        if missing:
            raise CSVFormatError(f"Missing required column(s): {', '.join(missing)}")

        rows = []
        for raw in reader:
            row = {
                name: (raw.get(key) or '').strip()
                for name, key in zip(columns, reader.fieldnames)
            }
            if any(row.values()):
                rows.append(row)
    except csv.Error as e:
        raise CSVFormatError(f"Malformed CSV: {e}")

    return ParsedCSV(columns=columns, rows=rows)


def _row_error(row_number, field_name, message):
    return {'row': row_number, 'field': field_name, 'message': message}


def validate_rows(project, rows: List[Dict[str, str]]) -> List[dict]:
    """
    Check every row without writing anything.

    Row numbers are 1-based data rows (the header is not counted). Returns a
    list of {row, field, message}.
    """
    max_rows = settings.CSV_MAX_ROWS
    existing = set(Page.objects.filter(project=project).values_list('url_slug', flat=True))
    seen = {}
    errors = []

    for number, row in enumerate(rows, start=1):
        if number > max_rows:
            errors.append(_row_error(number, None, f"Row limit of {max_rows} exceeded"))
            continue
        if not row.get('title'):
            errors.append(_row_error(number, 'title', 'title is required'))
        raw_slug = row.get('url_slug', '')
        slug = normalize_slug(raw_slug)
        if not raw_slug:
            errors.append(_row_error(number, 'url_slug', 'url_slug is required'))
        elif not slug:
            errors.append(_row_error(number, 'url_slug', f"'{raw_slug}' is not a usable slug"))
        elif slug in existing:
            errors.append(_row_error(number, 'url_slug', f"url_slug '{slug}' already exists in this project"))
        elif slug in seen:
            errors.append(_row_error(number, 'url_slug', f"url_slug '{slug}' duplicates row {seen[slug]}"))
        else:
            seen[slug] = number
    return errors


def preview(project, data: bytes) -> dict:
    """Parse and validate an upload without persisting anything."""
    parsed = parse_csv(data)
    return {
        'columns': parsed.columns,
        'rows': parsed.rows[:settings.CSV_PREVIEW_ROWS],
        'total_rows': len(parsed.rows),
        'errors': validate_rows(project, parsed.rows),
    }


def _seo_fields(row) -> Optional[dict]:
    if not any(row.get(c) for c in SEO_COLUMNS):
        return None
    keywords = [k.strip() for k in row.get('secondary_keywords', '').split(',') if k.strip()]
    return {
        'meta_title': row.get('meta_title', '')[:500],
        'meta_description': row.get('meta_description', ''),
        'focus_keyword': row.get('focus_keyword', '')[:255],
        'secondary_keywords': keywords,
    }


def import_rows(project, rows: List[Dict[str, str]]) -> ImportResult:
    """
    Create one Page per valid row, then link parent_slug references.

    Each row is written in its own transaction, so a bad row never rolls back
    the good ones.
    """
    result = ImportResult(rows_total=len(rows))
    result.errors = validate_rows(project, rows)
    rejected = {e['row'] for e in result.errors}

    created: Dict[int, Page] = {}
    for number, row in enumerate(rows, start=1):
        if number in rejected:
            continue
        try:
            with transaction.atomic():
                page = Page.objects.create(
                    project=project,
                    title=row['title'][:500],
                    url_slug=normalize_slug(row['url_slug']),
                    content=row.get('content') or row.get('description', ''),
                    is_pillar_page=row.get('is_pillar_page', '').lower() in TRUE_VALUES,
                )
                seo = _seo_fields(row)
                if seo:
                    SEOMetadata.objects.create(page=page, **seo)
        except IntegrityError:
            result.errors.append(_row_error(number, 'url_slug', 'url_slug already exists in this project'))
            continue
        created[number] = page

    # Parents may appear later in the file than their children
    for number, page in created.items():
        parent_slug = normalize_slug(rows[number - 1].get('parent_slug', ''))
        if not parent_slug:
            continue
        parent = Page.objects.filter(project=project, url_slug=parent_slug).first()
        if parent is None:
            result.errors.append(_row_error(number, 'parent_slug', f"No page with url_slug '{parent_slug}'"))
            continue
        try:
            validate_parent(project, page.pk, parent)
        except HierarchyError as e:
            result.errors.append(_row_error(number, 'parent_slug', str(e)))
            continue
        Page.objects.filter(pk=page.pk).update(parent_page=parent)

    result.rows_imported = len(created)
    result.errors.sort(key=lambda e: e['row'])
    logger.info(
        f"CSV import into project {project.pk}: {result.rows_imported}/{result.rows_total} rows imported, "
        f"{len(result.errors)} error(s)"
    )
    return result
