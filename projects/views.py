"""
Views for Project management.
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from content.hierarchy import build_page_tree
from sitegenie.exceptions import NotFoundError, ValidationError
from .analytics import parse_bound, project_analytics
from .design import DesignSettingsSerializer, resolve_design
from .models import Project
from .permissions import IsProjectOwner
from .serializers import ProjectSerializer

logger = logging.getLogger(__name__)


class ProjectViewSet(viewsets.ModelViewSet):
    """
    ViewSet for managing projects.

    list: GET /api/projects - List the current user's projects, newest first
    create: POST /api/projects - Create a new project
    retrieve: GET /api/projects/{id} - Get project details
    update: PUT /api/projects/{id} - Update project
    destroy: DELETE /api/projects/{id} - Delete project and everything it owns
    design: GET|PUT /api/projects/{id}/design - Design customization
    structure: GET /api/projects/{id}/structure - Page hierarchy tree
    analytics: GET /api/projects/{id}/analytics - Content analytics
    """
    serializer_class = ProjectSerializer
    permission_classes = [IsAuthenticated, IsProjectOwner]
    lookup_value_regex = '[0-9a-fA-F-]{36}'

    def get_queryset(self):
        """Return only projects owned by the current user."""
        return Project.objects.filter(user=self.request.user)

    def get_object(self):
        try:
            project = self.get_queryset().get(pk=self.kwargs['pk'])
        except (Project.DoesNotExist, ValueError, DjangoValidationError):
            raise NotFoundError('Project not found')
        self.check_object_permissions(self.request, project)
        return project

    def perform_create(self, serializer):
        """Set the owner when creating a project."""
        serializer.save(user=self.request.user)
        logger.info(f"Project {serializer.instance.pk} created by user {self.request.user.pk}")

    def perform_destroy(self, instance):
        logger.info(f"Deleting project {instance.pk}")
        instance.delete()

    @action(detail=True, methods=['get', 'put'])
    def design(self, request, pk=None):
        """
        GET /api/projects/{id}/design - Stored design merged over defaults
        PUT /api/projects/{id}/design - Update one or more design sections
        """
        project = self.get_object()

        if request.method == 'PUT':
            serializer = DesignSettingsSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            stored = dict(project.design_settings or {})
            for section, value in serializer.validated_data.items():
                if isinstance(value, dict):
                    merged = dict(stored.get(section) or {})
                    merged.update(value)
                    stored[section] = merged
                else:
                    stored[section] = value
            project.design_settings = stored
            project.save(update_fields=['design_settings', 'updated_at'])

        return Response({
            'project_id': str(project.pk),
            'design_settings': resolve_design(project.design_settings),
            'updated_at': project.updated_at,
        })

    @action(detail=True, methods=['get'])
    def structure(self, request, pk=None):
        """
        GET /api/projects/{id}/structure

        Returns the page hierarchy as nested nodes.
        """
        project = self.get_object()
        pages = list(project.pages.only('id', 'title', 'url_slug', 'is_pillar_page', 'parent_page_id'))
        return Response({
            'project_id': str(project.pk),
            'total_pages': len(pages),
            'pages': build_page_tree(pages),
        })

    @action(detail=True, methods=['get'])
    def analytics(self, request, pk=None):
        """
        GET /api/projects/{id}/analytics?date_from=YYYY-MM-DD&date_to=YYYY-MM-DD
        """
        project = self.get_object()
        params = request.query_params
        try:
            date_from = parse_bound(params.get('date_from') or params.get('dateFrom'))
            date_to = parse_bound(params.get('date_to') or params.get('dateTo'), end_of_day=True)
        except ValueError as e:
            raise ValidationError(str(e))
        if date_from and date_to and date_from > date_to:
            raise ValidationError('date_from must not be after date_to')

        return Response(project_analytics(project, date_from, date_to))
