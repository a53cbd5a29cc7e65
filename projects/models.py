"""
Project model: the root of everything a user builds.
"""
import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone


class Project(models.Model):
    """
    A marketing website being generated.
    Owns its pages, SEO metadata, CSV uploads, AI generations and deployments.
    """
    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('published', 'Published'),
        ('archived', 'Archived'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='projects'
    )
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='draft')
    default_language = models.CharField(max_length=10, default='en')
    design_settings = models.JSONField(
        default=dict,
        blank=True,
        help_text="Theme, colors, typography, layout and custom code used by exports"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'projects'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'status'], name='projects_user_status_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.user.email})"

    def touch(self):
        """Refresh updated_at without rewriting the row's other columns."""
        self.updated_at = timezone.now()
        Project.objects.filter(pk=self.pk).update(updated_at=self.updated_at)
