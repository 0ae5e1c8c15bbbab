"""Shared API permissions.

Admin endpoints across apps (orders, availability, broadcasts, stats) are
limited to staff users; everyone else has the plain `user` role.
"""

from rest_framework.permissions import BasePermission


class IsAdminStaff(BasePermission):
    """Allows access only if the requester is an authenticated staff (admin) user."""

    message = "Admin required."

    def has_permission(self, request, view):
        return bool(
            request.user and request.user.is_authenticated and request.user.is_staff
        )
