"""
Audit views (ADMIN only).
"""
from rest_framework import mixins, viewsets

from apps.audit.models import DOCUMENT_ACTIONS, SECURITY_ACTIONS, AuditLog
from apps.audit.serializers import AuditLogSerializer
from apps.authz.permissions import IsAdminRole
from apps.core.exceptions import ValidationError
from apps.core.pagination import AuditLogPagination

CATEGORIES = {
    'document': DOCUMENT_ACTIONS,
    'security': SECURITY_ACTIONS,
}


class AuditLogViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    GET /api/v1/admin/audit-log/?page=&limit=&action=&category=

    category: document | security. Newest first, at most 100 per page.
    """
    permission_classes = [IsAdminRole]
    serializer_class = AuditLogSerializer
    pagination_class = AuditLogPagination

    def get_queryset(self):
        qs = AuditLog.objects.select_related('actor_user').order_by('-created_at')
        params = self.request.query_params

        category = params.get('category')
        if category:
            if category not in CATEGORIES:
                raise ValidationError('Categoria inválida (document ou security)')
            qs = qs.filter(action__in=CATEGORIES[category])

        action = params.get('action')
        if action:
            qs = qs.filter(action=action)
        return qs
