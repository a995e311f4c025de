"""Shared view helpers"""
import logging

from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response

from ..services import UnauthorizedScopeError
from ..utils.tenant_utils import get_cooperative_for_user

logger = logging.getLogger(__name__)

UUID_LOOKUP_REGEX = '[0-9a-fA-F-]{32,36}'


def service_error_response(exc):
    """Translate a service-layer error into the API error payload"""
    logger.info(f'[API] {exc.__class__.__name__}: {exc.reason}')
    return Response(exc.to_dict(), status=exc.status_code)


class CooperativeScopedMixin:
    """Resolves the caller's cooperative once per request"""

    def get_cooperative(self):
        if not hasattr(self, '_cooperative'):
            try:
                self._cooperative = get_cooperative_for_user(self.request.user)
            except UnauthorizedScopeError as e:
                raise PermissionDenied(e.reason)
        return self._cooperative

    def scope_queryset(self, queryset, lookup):
        cooperative = self.get_cooperative()
        if cooperative is None:
            return queryset
        return queryset.filter(**{lookup: cooperative})
