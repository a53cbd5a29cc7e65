"""
URL routing for pages, nested under /api/projects/<project_id>/.
"""
from django.urls import path

from .views import PageViewSet, page_seo

page_list = PageViewSet.as_view({'get': 'list', 'post': 'create'})
page_detail = PageViewSet.as_view({
    'get': 'retrieve',
    'put': 'update',
    'patch': 'partial_update',
    'delete': 'destroy',
})

urlpatterns = [
    path('pages', page_list, name='page-list'),
    path('pages/<uuid:page_id>', page_detail, name='page-detail'),
    path('pages/<uuid:page_id>/seo', page_seo, name='page-seo'),
]
