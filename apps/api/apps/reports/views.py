"""
Reports views.
"""
import mimetypes

from django.http import HttpResponse
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.audit.models import AuditActionChoices
from apps.audit.services import log_document_event
from apps.authz.models import RoleChoices
from apps.authz.permissions import IsEmissor
from apps.core.models import AdminMetrics
from apps.core.pagination import ReportPagination
from apps.reports.models import Report, ReportStatusChoices
from apps.reports.serializers import (
    ReportCreateSerializer,
    ReportSerializer,
    ReportStatusSerializer,
)
from apps.reports.services import (
    get_downloadable_report,
    get_participant_report,
    resolve_receiver,
    send_report,
    update_status,
)
from apps.uploads.ratelimit import UploadRateThrottle
from apps.uploads.services import store_upload
from apps.uploads.storage import get_storage

REPORT_PREFIX = 'reports'


class ReportViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    ViewSet for reports (laudos).

    Endpoints:
    - GET /api/v1/reports/?page=&limit= - EMISSOR: sent, RECEPTOR: received, ADMIN: all
    - GET /api/v1/reports/{id}/ - sender or receiver only
    - POST /api/v1/reports/ - EMISSOR only; JSON with file_url or multipart
      with `file`; creates the LAB_RESULT notification
    - GET /api/v1/reports/{id}/download/ - stored report file
    - PATCH /api/v1/reports/{id}/status/
    - POST /api/v1/reports/{id}/access/ - receiver opened the report (RECEIVED)
    """
    pagination_class = ReportPagination
    serializer_class = ReportSerializer
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def get_permissions(self):
        if self.action == 'create':
            return [IsEmissor()]
        return [IsAuthenticated()]

    def get_throttles(self):
        if self.action == 'create' and 'file' in self.request.FILES:
            return [UploadRateThrottle()]
        return super().get_throttles()

    def get_queryset(self):
        user = self.request.user
        qs = Report.objects.select_related('sender__emissor_info', 'receiver').order_by('-sent_at')
        if user.role == RoleChoices.EMISSOR:
            return qs.filter(sender=user)
        if user.role == RoleChoices.RECEPTOR:
            return qs.filter(receiver=user)
        return qs

    def retrieve(self, request, pk=None):
        report = get_participant_report(pk, request.user)
        return Response(ReportSerializer(report).data)

    def create(self, request):
        serializer = ReportCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        receiver = resolve_receiver(data.get('receiver_id'), data.get('receiver_cpf'))

        file_url = data.get('file_url', '')
        physical_path = file_hash = ''
        upload = data.get('file')
        if upload is not None:
            record = store_upload(upload, request.user, resource=request.path, prefix=REPORT_PREFIX)
            file_url, physical_path, file_hash = record.url, record.key, record.file_hash

        report = send_report(
            request.user,
            title=data['title'],
            file_name=data['file_name'],
            file_url=file_url,
            receiver=receiver,
            physical_path=physical_path,
            file_hash=file_hash,
        )
        return Response(ReportSerializer(report).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['get'])
    def download(self, request, pk=None):
        report = get_downloadable_report(pk, request.user)

        handle = get_storage(REPORT_PREFIX).open(report.physical_path)
        try:
            content = handle.read()
        finally:
            handle.close()

        AdminMetrics.add_download_bytes(len(content))
        log_document_event(
            AuditActionChoices.DOCUMENT_DOWNLOADED,
            request.user,
            report.file_name,
            file_hash=report.file_hash,
            document_type='result',
            protocol=report.protocol,
            receiver_cpf=report.receiver.cpf,
            report_id=str(report.id),
        )
        content_type = mimetypes.guess_type(report.file_name)[0] or 'application/octet-stream'
        response = HttpResponse(content, content_type=content_type)
        response['Content-Disposition'] = f'attachment; filename="{report.file_name}"'
        return response

    @action(detail=True, methods=['patch'], url_path='status')
    def set_status(self, request, pk=None):
        serializer = ReportStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        report = update_status(pk, request.user, serializer.validated_data['status'])
        return Response(ReportSerializer(report).data)

    @action(detail=True, methods=['post'])
    def access(self, request, pk=None):
        report = update_status(pk, request.user, ReportStatusChoices.RECEIVED)
        return Response(ReportSerializer(report).data)
