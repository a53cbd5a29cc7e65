"""
URL configuration for sitegenie project.
"""
from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse


def custom_404(request, exception=None):
    """Return JSON for 404 errors instead of HTML."""
    return JsonResponse({
        'message': 'The requested resource was not found.',
        'error_code': 'not_found',
        'status': 404,
    }, status=404)


def custom_500(request):
    """Return JSON for 500 errors instead of HTML."""
    return JsonResponse({
        'message': 'An unexpected error occurred.',
        'error_code': 'internal_error',
        'status': 500,
    }, status=500)


urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('sitegenie.api_urls')),
]

# Uploaded files and published sites (development only)
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

handler404 = custom_404
handler500 = custom_500
