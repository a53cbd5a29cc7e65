"""
Content models: pages of a project and their SEO metadata.
"""
import uuid

from django.db import models

from projects.models import Project


class Page(models.Model):
    """
    A page of a generated site. Pages form a hierarchy through parent_page;
    pillar pages act as hubs for the pages beneath them.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name='pages')
    title = models.CharField(max_length=500)
    url_slug = models.CharField(max_length=500)
    content = models.TextField(blank=True, default='')
    is_pillar_page = models.BooleanField(default=False)
    parent_page = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='child_pages'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'pages'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['project', 'url_slug'], name='unique_page_slug_per_project'),
        ]
        indexes = [
            models.Index(fields=['project', 'is_pillar_page'], name='pages_project_pillar_idx'),
        ]

    def __str__(self):
        return f"{self.title} (/{self.url_slug})"


class SEOMetadata(models.Model):
    """SEO fields of a page; at most one row per page, written by upsert."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    page = models.OneToOneField(Page, on_delete=models.CASCADE, related_name='seo_metadata')
    meta_title = models.CharField(max_length=500, blank=True, default='')
    meta_description = models.TextField(blank=True, default='')
    focus_keyword = models.CharField(max_length=255, blank=True, default='')
    secondary_keywords = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'seo_metadata'
        verbose_name_plural = 'SEO metadata'

    def __str__(self):
        return f"SEO metadata for {self.page.title}"
