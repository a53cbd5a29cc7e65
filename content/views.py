"""
Views for pages of a project and their SEO metadata.
"""
import logging

from django.db import IntegrityError, transaction
from rest_framework import status, viewsets
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from projects.permissions import owned_project
from sitegenie.exceptions import ConflictError, NotFoundError
from .models import Page, SEOMetadata
from .serializers import PageListSerializer, PageSerializer, SEOMetadataSerializer

logger = logging.getLogger(__name__)


class PageViewSet(viewsets.ModelViewSet):
    """
    ViewSet for the pages of one project.

    list: GET /api/projects/{project_id}/pages
    create: POST /api/projects/{project_id}/pages
    retrieve: GET /api/projects/{project_id}/pages/{page_id}
    update: PUT /api/projects/{project_id}/pages/{page_id}
    destroy: DELETE /api/projects/{project_id}/pages/{page_id}

    Every mutation refreshes the project's updated_at.
    """
    permission_classes = [IsAuthenticated]
    lookup_url_kwarg = 'page_id'

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        self.project = owned_project(request, kwargs['project_id'])

    def get_queryset(self):
        queryset = Page.objects.filter(project=self.project).select_related('seo_metadata')
        if self.action == 'list':
            pillar = self.request.query_params.get('is_pillar_page')
            if pillar is not None:
                queryset = queryset.filter(is_pillar_page=pillar.lower() in ('1', 'true', 'yes'))
            search = self.request.query_params.get('search')
            if search:
                queryset = queryset.filter(title__icontains=search)
        return queryset

    def get_object(self):
        try:
            return self.get_queryset().get(pk=self.kwargs['page_id'])
        except Page.DoesNotExist:
            raise NotFoundError('Page not found')

    def get_serializer_class(self):
        if self.action == 'list':
            return PageListSerializer
        return PageSerializer

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context['project'] = self.project
        return context

    def perform_create(self, serializer):
        self._save(serializer, project=self.project)
        logger.info(f"Page {serializer.instance.pk} created in project {self.project.pk}")

    def perform_update(self, serializer):
        self._save(serializer)

    def perform_destroy(self, instance):
        with transaction.atomic():
            instance.delete()
            self.project.touch()
        logger.info(f"Page {instance.pk} deleted from project {self.project.pk}")

    def _save(self, serializer, **kwargs):
        try:
            with transaction.atomic():
                serializer.save(**kwargs)
                self.project.touch()
        except IntegrityError:
            # Lost a race with a concurrent write of the same slug
            raise ConflictError('A page with this url_slug already exists in this project')


@api_view(['GET', 'PUT', 'POST'])
@permission_classes([IsAuthenticated])
def page_seo(request, project_id, page_id):
    """
    GET /api/projects/{project_id}/pages/{page_id}/seo - Read SEO metadata
    PUT|POST /api/projects/{project_id}/pages/{page_id}/seo - Upsert SEO metadata

    Writes replace the stored row with the submitted fields; missing fields
    fall back to their empty defaults.
    """
    project = owned_project(request, project_id)
    try:
        page = Page.objects.get(pk=page_id, project=project)
    except Page.DoesNotExist:
        raise NotFoundError('Page not found')

    if request.method == 'GET':
        try:
            metadata = page.seo_metadata
        except SEOMetadata.DoesNotExist:
            raise NotFoundError('SEO metadata not found')
        return Response(SEOMetadataSerializer(metadata).data)

    serializer = SEOMetadataSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    with transaction.atomic():
        metadata, created = SEOMetadata.objects.update_or_create(
            page=page,
            defaults=serializer.validated_data,
        )
        project.touch()

    if created:
        logger.info(f"SEO metadata created for page {page.pk}")
    return Response(SEOMetadataSerializer(metadata).data, status=status.HTTP_200_OK)
