"""
Role-based permissions for the API.
"""
from rest_framework import permissions
from apps.authz.models import RoleChoices


class RolePermission(permissions.BasePermission):
    """Allow authenticated users whose role is in `allowed_roles`."""
    allowed_roles = frozenset()
    message = 'Acesso negado'

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        return request.user.role in self.allowed_roles


class IsReceptor(RolePermission):
    allowed_roles = frozenset({RoleChoices.RECEPTOR})


class IsEmissor(RolePermission):
    """Only laboratories/clinics may send reports."""
    allowed_roles = frozenset({RoleChoices.EMISSOR})
    message = 'Apenas emissores podem enviar laudos'


class IsAdminRole(RolePermission):
    allowed_roles = frozenset({RoleChoices.ADMIN})


class IsReceptorOrAdmin(RolePermission):
    """
    Patient-owned resources (events, professionals, files).

    ADMIN passes the role check; object ownership is still enforced in
    querysets and services.
    """
    allowed_roles = frozenset({RoleChoices.RECEPTOR, RoleChoices.ADMIN})
