"""
API URL routing for sitegenie.
All API endpoints are prefixed with /api/
"""
from django.urls import path, include
from django.http import JsonResponse


# Health check endpoint
def health_check(request):
    return JsonResponse({"status": "healthy"})


urlpatterns = [
    # Health check (no auth) - GET /api/health
    path('health', health_check),
    # Registration, login, profile
    path('users/', include('accounts.urls')),
    # Projects, design settings, structure, analytics
    path('', include('projects.urls')),
    # Everything nested under a project
    path('projects/<uuid:project_id>/', include('content.urls')),
    path('projects/<uuid:project_id>/', include('ai.urls')),
    path('projects/<uuid:project_id>/', include('ingestion.urls')),
    path('projects/<uuid:project_id>/', include('exports.urls')),
]
