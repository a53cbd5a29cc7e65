"""
URL routing for AI generation, nested under /api/projects/<project_id>/.
"""
from django.urls import path

from .views import generate, generations

urlpatterns = [
    path('pages/<uuid:page_id>/generate', generate, name='page-generate'),
    path('pages/<uuid:page_id>/generations', generations, name='page-generations'),
]
