"""
Static site bundling for exports and publishes.

A project renders to a flat mapping of relative path -> text:

    index.html              home page listing the page tree
    styles.css              generated from the project's design settings
    sitemap.xml
    <url_slug>/index.html   one per page
"""
import io
import logging
import posixpath
import zipfile

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.template.loader import render_to_string

from content.hierarchy import build_page_tree
from content.models import SEOMetadata
from projects.design import resolve_design

logger = logging.getLogger(__name__)


def site_base_url(project):
    return f"{settings.SITEGENIE_PUBLISH_BASE_URL.rstrip('/')}/{project.pk}/"


def _relative_root(url_slug):
    depth = len([part for part in url_slug.split('/') if part])
    return '../' * depth if depth else './'


def render_site(project, on_page=None):
    """
    Render every page of `project` to static files.

    `on_page(n)` is called after the n-th page is rendered. Returns
    {relative_path: text}.
    """
    design = resolve_design(project.design_settings)
    pages = list(project.pages.select_related('seo_metadata').order_by('url_slug'))
    tree = build_page_tree(pages)
    base_url = site_base_url(project)

    files = {}
    for number, page in enumerate(pages, start=1):
        try:
            seo = page.seo_metadata
        except SEOMetadata.DoesNotExist:
            seo = None
        files[f"{page.url_slug}/index.html"] = render_to_string('exports/page.html', {
            'project': project,
            'page': page,
            'seo': seo,
            'design': design,
            'tree': tree,
            'root': _relative_root(page.url_slug),
        })
        if on_page:
            on_page(number)

    files['index.html'] = render_to_string('exports/index.html', {
        'project': project,
        'design': design,
        'tree': tree,
        'root': './',
    })
    files['styles.css'] = render_to_string('exports/styles.css', {'design': design})
    files['sitemap.xml'] = render_to_string('exports/sitemap.xml', {
        'base_url': base_url,
        'pages': pages,
        'project': project,
    })
    return files


def build_zip(files):
    """Pack rendered files into zip bytes."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w', compression=zipfile.ZIP_DEFLATED) as archive:
        for path in sorted(files):
            archive.writestr(path, files[path])
    return buffer.getvalue()


def _clear_prefix(prefix):
    """Delete everything stored under `prefix` in the default storage."""
    if not default_storage.exists(prefix):
        return
    directories, filenames = default_storage.listdir(prefix)
    for name in filenames:
        default_storage.delete(posixpath.join(prefix, name))
    for name in directories:
        _clear_prefix(posixpath.join(prefix, name))


def publish_files(project, files):
    """
    Replace the project's published site with `files`.

    Returns the public URL of the site.
    """
    prefix = f"published/{project.pk}"
    _clear_prefix(prefix)
    for path, text in files.items():
        default_storage.save(posixpath.join(prefix, path), ContentFile(text.encode('utf-8')))
    logger.info(f"Published {len(files)} files for project {project.pk}")
    return site_base_url(project)
