"""
AI content generation records.
"""
import uuid

from django.db import models

from jobs.models import JobRecord
from jobs.status import JobStatus


class AIContentGeneration(JobRecord):
    """
    One request to fill a page with AI-written content.

    Resolved within the request that creates it: pending while the provider
    is called, then completed or failed.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    project = models.ForeignKey('projects.Project', on_delete=models.CASCADE, related_name='ai_generations')
    page = models.ForeignKey('content.Page', on_delete=models.CASCADE, related_name='ai_generations')
    prompt = models.TextField()
    status = models.CharField(max_length=30, choices=JobStatus.choices, default=JobStatus.PENDING)
    generated_content = models.TextField(blank=True, default='')
    model = models.CharField(max_length=100, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'ai_content_generations'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['page', 'created_at'], name='ai_gen_page_created_idx'),
        ]

    def __str__(self):
        return f"Generation {self.id} for {self.page_id} ({self.status})"
