"""
Token issuance backed by UserSession rows.
"""
import logging
from datetime import datetime, timezone as dt_timezone

from django.contrib.auth import get_user_model
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

from .models import UserSession

logger = logging.getLogger(__name__)


def issue_token(user):
    """
    Create an access token for `user` and record the session it belongs to.

    Returns (token_string, expires_at).
    """
    token = AccessToken.for_user(user)
    expires_at = datetime.fromtimestamp(token['exp'], tz=dt_timezone.utc)
    UserSession.objects.create(
        user=user,
        jti=token[api_settings.JTI_CLAIM],
        expires_at=expires_at,
    )
    return str(token), expires_at


def revoke_sessions(user):
    """Delete every session of `user`; outstanding tokens stop working immediately."""
    deleted, _ = UserSession.objects.filter(user=user).delete()
    logger.info(f"Revoked {deleted} session(s) for user {user.pk}")
    return deleted


def user_by_email(email):
    User = get_user_model()
    return User.objects.filter(email__iexact=email).first()
