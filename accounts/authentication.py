"""
Bearer-token authentication for dashboard requests.

Tokens are ordinary simplejwt access tokens; on top of signature and expiry
checks, the token's JWT ID must belong to a live UserSession so logout can
revoke tokens before they expire.
"""
import logging

from django.utils import timezone
from rest_framework import exceptions
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.settings import api_settings

from .models import UserSession

logger = logging.getLogger(__name__)


class SessionJWTAuthentication(JWTAuthentication):

    def authenticate(self, request):
        result = super().authenticate(request)
        if result is None:
            return None

        user, validated_token = result
        jti = validated_token.get(api_settings.JTI_CLAIM)
        session_exists = UserSession.objects.filter(
            user=user,
            jti=jti,
            expires_at__gt=timezone.now(),
        ).exists()
        if not session_exists:
            logger.debug(f"Rejected token without a live session for user {user.pk}")
            raise exceptions.AuthenticationFailed('Session has expired or was logged out.')

        return user, validated_token
