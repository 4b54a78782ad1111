"""
Custom permissions for role-based access
"""
from rest_framework import permissions


class IsTeacher(permissions.BasePermission):
    """Permission check for teacher role"""

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.is_teacher
        )


class IsManager(permissions.BasePermission):
    """Manager or admin: packages, enrollment, payments"""

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.is_manager
        )
