"""
Professionals views.
"""
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.authz.permissions import IsReceptorOrAdmin
from apps.professionals.models import Professional
from apps.professionals.serializers import ProfessionalSerializer
from apps.professionals.services import delete_professional, list_specialties


class ProfessionalViewSet(viewsets.ModelViewSet):
    """
    ViewSet for the caller's professionals.

    Endpoints:
    - GET /api/v1/professionals/
    - GET /api/v1/professionals/specialties/
    - POST /api/v1/professionals/
    - PATCH /api/v1/professionals/{id}/
    - DELETE /api/v1/professionals/{id}/ - orphans linked files first
    """
    permission_classes = [IsReceptorOrAdmin]
    serializer_class = ProfessionalSerializer
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        return Professional.objects.filter(user=self.request.user).order_by('name')

    def perform_create(self, serializer):
        serializer.save(user=self.request.user)

    def destroy(self, request, *args, **kwargs):
        orphaned = delete_professional(kwargs['pk'], request.user)
        return Response({'success': True, 'orphanedFiles': orphaned}, status=status.HTTP_200_OK)

    @action(detail=False, methods=['get'])
    def specialties(self, request):
        return Response(list_specialties(request.user))
