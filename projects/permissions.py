"""
Ownership checks for projects and everything nested under them.
"""
from rest_framework import permissions

from sitegenie.exceptions import NotFoundError
from .models import Project


class IsProjectOwner(permissions.BasePermission):
    """
    Permission to check if user owns the project.
    """
    def has_object_permission(self, request, view, obj):
        return obj.user_id == request.user.pk


def owned_project(request, project_id):
    """
    Resolve `project_id` within the caller's projects.

    Projects owned by someone else answer exactly like missing ones.
    """
    try:
        return Project.objects.get(pk=project_id, user=request.user)
    except Project.DoesNotExist:
        raise NotFoundError('Project not found')
