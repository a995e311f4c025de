from rest_framework.permissions import BasePermission

from .utils.constants import UserRole
from .utils.tenant_utils import get_profile, is_super_admin


def _role_in(request, roles):
    user = request.user
    if not (user and user.is_authenticated):
        return False
    if is_super_admin(user):
        return True
    profile = get_profile(user)
    return bool(profile and profile.role in roles)


class IsCooperativeAdmin(BasePermission):
    """Schedules, fleet assignment and trip generation"""
    def has_permission(self, request, view):
        return _role_in(request, [UserRole.ADMIN])


class IsCooperativeStaff(BasePermission):
    """Office staff selling tickets and reading route sheets"""
    def has_permission(self, request, view):
        return _role_in(request, [UserRole.ADMIN, UserRole.CLERK])


class IsBoardingStaff(BasePermission):
    """Crew and office staff allowed to validate boarding and read manifests"""
    def has_permission(self, request, view):
        return _role_in(request, [UserRole.ADMIN, UserRole.CLERK, UserRole.DRIVER, UserRole.ASSISTANT])
