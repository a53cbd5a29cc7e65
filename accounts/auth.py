"""
Authentication views for dashboard users.
Handles register, login, logout, and user profile.
"""
import logging

from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from sitegenie.exceptions import ConflictError
from .serializers import LoginSerializer, ProfileUpdateSerializer, RegisterSerializer, UserSerializer
from .sessions import issue_token, revoke_sessions, user_by_email

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """
    User registration endpoint.

    POST /api/users/register
    Body: { "email": "...", "password": "...", "first_name": "...", "last_name": "..." }

    Returns: { "user_id": "...", "email": "...", "token": "...", "expires_at": "..." }
    """
    serializer = RegisterSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    if user_by_email(serializer.validated_data['email']):
        raise ConflictError('User already exists')

    try:
        with transaction.atomic():
            user = serializer.save()
    except IntegrityError:
        raise ConflictError('User already exists')

    # Issue a token so the frontend can log in immediately
    token, expires_at = issue_token(user)
    logger.info(f"Registered user {user.pk}")

    return Response({
        **UserSerializer(user).data,
        'token': token,
        'expires_at': expires_at.isoformat(),
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """
    User login endpoint.

    POST /api/users/login
    Body: { "email": "user@example.com", "password": "password123" }

    Returns: { "token": "...", "user_id": "...", "expires_at": "..." }
    """
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    user = serializer.validated_data['user']

    token, expires_at = issue_token(user)
    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    return Response({
        'token': token,
        'user_id': str(user.pk),
        'expires_at': expires_at.isoformat(),
    }, status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """
    User logout endpoint. Revokes every session of the caller.

    POST /api/users/logout
    Headers: Authorization: Bearer <token>
    """
    revoke_sessions(request.user)
    return Response({'message': 'Logged out successfully'}, status=status.HTTP_200_OK)


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def me(request):
    """
    Get or update the current authenticated user.

    GET /api/users/me
    PUT /api/users/me  Body: { "first_name"?, "last_name"?, "password"? }
    """
    if request.method == 'GET':
        return Response(UserSerializer(request.user).data)

    serializer = ProfileUpdateSerializer(request.user, data=request.data)
    serializer.is_valid(raise_exception=True)
    user = serializer.save()
    return Response(UserSerializer(user).data)
