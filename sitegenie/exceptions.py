"""
Error taxonomy and the project-wide DRF exception handler.

Every error leaves the API as
    { "message": "...", "error_code": "...", "status": 400 }
with an extra "errors" mapping for field-level validation failures.
"""
import logging

from django.core.exceptions import PermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class SiteGenieError(exceptions.APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'An unexpected error occurred.'
    default_code = 'internal_error'


class ValidationError(SiteGenieError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid input.'
    default_code = 'validation_error'


class AuthError(SiteGenieError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Authentication credentials were not provided or are invalid.'
    default_code = 'auth_error'


class PermissionDeniedError(SiteGenieError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Permission denied.'
    default_code = 'forbidden'


class NotFoundError(SiteGenieError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'


class ConflictError(SiteGenieError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Resource already exists.'
    default_code = 'conflict'


class UpstreamError(SiteGenieError):
    """An external provider failed; carries the provider's HTTP status when it has one."""
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'An upstream provider failed.'
    default_code = 'upstream_error'

    def __init__(self, detail=None, status_code=None):
        super().__init__(detail)
        if status_code and 400 <= status_code < 600:
            self.status_code = status_code


class InternalError(SiteGenieError):
    default_detail = 'An unexpected error occurred.'
    default_code = 'internal_error'


# Error codes for DRF's own exceptions
_DRF_ERROR_CODES = {
    exceptions.ValidationError: 'validation_error',
    exceptions.ParseError: 'validation_error',
    exceptions.UnsupportedMediaType: 'validation_error',
    exceptions.NotAuthenticated: 'auth_error',
    exceptions.AuthenticationFailed: 'auth_error',
    exceptions.PermissionDenied: 'forbidden',
    exceptions.NotFound: 'not_found',
    exceptions.MethodNotAllowed: 'method_not_allowed',
    exceptions.Throttled: 'throttled',
}


def _error_code_for(exc):
    if isinstance(exc, SiteGenieError):
        return exc.default_code
    for exc_class, code in _DRF_ERROR_CODES.items():
        if isinstance(exc, exc_class):
            return code
    return 'error'


def _message_for(exc):
    detail = getattr(exc, 'detail', None)
    if isinstance(detail, str):
        return str(detail)
    if isinstance(exc, exceptions.ValidationError):
        return 'Invalid input.'
    if isinstance(detail, dict) and 'detail' in detail:
        return str(detail['detail'])
    return str(detail) if detail else 'Request failed.'


def api_exception_handler(exc, context):
    """Translate any exception raised in a view into one JSON error response."""
    if isinstance(exc, Http404):
        exc = NotFoundError(str(exc) or None)
    elif isinstance(exc, PermissionDenied):
        exc = PermissionDeniedError()

    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(f"Unhandled error in {view.__class__.__name__ if view else 'view'}: {exc}")
        return Response({
            'message': InternalError.default_detail,
            'error_code': InternalError.default_code,
            'status': status.HTTP_500_INTERNAL_SERVER_ERROR,
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    body = {
        'message': _message_for(exc),
        'error_code': _error_code_for(exc),
        'status': response.status_code,
    }
    if isinstance(exc, exceptions.ValidationError) and isinstance(exc.detail, (dict, list)):
        body['errors'] = exc.detail
    response.data = body
    return response
