"""
Events views: health events, files, orphan repository.
"""
import mimetypes

from django.db.models import Prefetch
from django.http import HttpResponse
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.audit.models import AuditActionChoices
from apps.audit.services import log_document_event
from apps.authz.permissions import IsReceptorOrAdmin
from apps.core.exceptions import ValidationError
from apps.core.models import AdminMetrics
from apps.core.pagination import EventPagination
from apps.events import services
from apps.events.models import FileInfo, FileSlotChoices, HealthEvent
from apps.events.serializers import (
    FileInfoSerializer,
    HealthEventSerializer,
    HealthEventWriteSerializer,
)
from apps.uploads.storage import get_storage

TRUE_VALUES = {'true', '1', 'yes'}


class HealthEventViewSet(viewsets.ModelViewSet):
    """
    ViewSet for the caller's health events.

    Endpoints:
    - GET /api/v1/events/?page=&limit= - paginated list, newest first
    - GET /api/v1/events/{id}/
    - POST /api/v1/events/
    - PATCH /api/v1/events/{id}/ (optionally with notification_id)
    - DELETE /api/v1/events/{id}/?deleteFiles=true|false
    - DELETE /api/v1/events/{id}/files/{slot}/
    """
    permission_classes = [IsReceptorOrAdmin]
    pagination_class = EventPagination
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        return (
            HealthEvent.objects.filter(user=self.request.user)
            .select_related('professional')
            .prefetch_related(Prefetch(
                'files',
                queryset=FileInfo.objects.filter(is_orphaned=False).order_by('slot'),
                to_attr='active_files',
            ))
            .order_by('-date', '-start_time')
        )

    def get_serializer_class(self):
        if self.action in ('create', 'partial_update'):
            return HealthEventWriteSerializer
        return HealthEventSerializer

    def _read(self, event_id):
        return HealthEventSerializer(self.get_queryset().get(pk=event_id)).data

    def create(self, request, *args, **kwargs):
        serializer = HealthEventWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        event = services.create_event(request.user, serializer.validated_data)
        return Response(self._read(event.id), status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        serializer = HealthEventWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        event = services.update_event(
            kwargs['pk'],
            request.user,
            data,
            overwrite=data.pop('overwrite', False),
            slot=data.pop('slot', None),
        )
        return Response(self._read(event.id))

    def destroy(self, request, *args, **kwargs):
        delete_files = request.query_params.get('deleteFiles', 'false').lower() in TRUE_VALUES
        count = services.delete_event(kwargs['pk'], request.user, delete_files=delete_files)
        return Response(
            {'success': True, 'deletedFiles' if delete_files else 'orphanedFiles': count},
            status=status.HTTP_200_OK
        )

    @action(
        detail=True,
        methods=['delete'],
        url_path=r'files/(?P<slot>[a-z]+)',
    )
    def delete_slot(self, request, pk=None, slot=None):
        if slot not in FileSlotChoices.values:
            raise ValidationError(f'Slot inválido: {slot}')
        services.delete_event_slot(pk, slot, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class FileViewSet(mixins.ListModelMixin, mixins.DestroyModelMixin, viewsets.GenericViewSet):
    """
    Endpoints:
    - GET /api/v1/files/ - caller's non-orphaned files (repository)
    - DELETE /api/v1/files/{id}/ - file owner, event owner or ADMIN
    - GET /api/v1/files/{id}/download/
    """
    permission_classes = [IsReceptorOrAdmin]
    serializer_class = FileInfoSerializer

    def get_queryset(self):
        return FileInfo.objects.filter(user=self.request.user, is_orphaned=False).order_by('-upload_date')

    def destroy(self, request, pk=None):
        services.delete_file(pk, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['get'])
    def download(self, request, pk=None):
        file = services.get_downloadable_file(pk, request.user)

        handle = get_storage().open(file.physical_path)
        try:
            content = handle.read()
        finally:
            handle.close()

        AdminMetrics.add_download_bytes(len(content))
        log_document_event(
            AuditActionChoices.DOCUMENT_DOWNLOADED,
            request.user,
            file.name,
            file_hash=file.file_hash,
            document_type=file.slot,
            file_id=str(file.id),
        )
        content_type = mimetypes.guess_type(file.name)[0] or 'application/octet-stream'
        response = HttpResponse(content, content_type=content_type)
        response['Content-Disposition'] = f'attachment; filename="{file.name}"'
        return response


class OrphanFileViewSet(mixins.ListModelMixin, mixins.DestroyModelMixin, viewsets.GenericViewSet):
    """
    Endpoints:
    - GET /api/v1/repository/orphan-files/
    - DELETE /api/v1/repository/orphan-files/{id}/ - permanent deletion
    """
    permission_classes = [IsReceptorOrAdmin]
    serializer_class = FileInfoSerializer

    def get_queryset(self):
        return FileInfo.objects.filter(user=self.request.user, is_orphaned=True).order_by('-updated_at')

    def destroy(self, request, pk=None):
        services.delete_orphan_file(pk, request.user)
        return Response({'success': True}, status=status.HTTP_200_OK)
