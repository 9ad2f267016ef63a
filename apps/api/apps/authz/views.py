"""
Authz views: registration, current-user profile and the ADMIN user listing.
"""
from rest_framework import mixins, status, viewsets
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.authz.models import RoleChoices, User
from apps.authz.permissions import IsAdminRole
from apps.authz.serializers import AdminUserSerializer, RegisterSerializer, UserProfileSerializer
from apps.core.exceptions import AuthorizationError
from apps.core.observability import log_domain_event
from apps.core.pagination import UserPagination


class RegisterView(APIView):
    """POST /api/v1/auth/register/ - create a RECEPTOR account."""
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        if request.data.get('role') == RoleChoices.EMISSOR:
            raise AuthorizationError('Registro de emissores não disponível')

        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        log_domain_event(
            'user_registered',
            entity_type='User',
            entity_id=str(user.id),
            role=user.role,
        )
        return Response(UserProfileSerializer(user).data, status=status.HTTP_201_CREATED)


class MeView(APIView):
    """GET/PATCH /api/v1/me/ - the authenticated user's profile."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(UserProfileSerializer(request.user).data)

    def patch(self, request):
        serializer = UserProfileSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)


class AdminUserViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    GET /api/v1/admin/users/?page=&limit=&role=

    Newest accounts first, at most 100 per page.
    """
    permission_classes = [IsAdminRole]
    serializer_class = AdminUserSerializer
    pagination_class = UserPagination

    def get_queryset(self):
        qs = User.objects.select_related('emissor_info').order_by('-created_at')
        role = self.request.query_params.get('role')
        if role:
            qs = qs.filter(role=role)
        return qs
