from rest_framework.permissions import BasePermission


class IsVerified(BasePermission):
    """Only accounts that confirmed their email may book, pay or rate."""

    message = "Email not verified. Please verify to use this service."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return bool(user.is_verified)
