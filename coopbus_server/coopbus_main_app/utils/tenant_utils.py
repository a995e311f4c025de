"""Helpers resolving the caller's cooperative scope"""
from ..services.exceptions import UnauthorizedScopeError


def get_profile(user):
    return getattr(user, 'profile', None)


def is_super_admin(user):
    profile = get_profile(user)
    return bool(user.is_superuser or (profile and profile.is_super_admin))


def get_cooperative_for_user(user):
    """
    Cooperative the user may act on, or None for platform-wide access

    Accounts without a cooperative are rejected so they never fall
    through to unscoped queries.
    """
    if is_super_admin(user):
        return None
    profile = get_profile(user)
    if profile is None or profile.cooperative_id is None:
        raise UnauthorizedScopeError('User is not associated with a cooperative')
    return profile.cooperative
