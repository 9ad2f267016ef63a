"""
Core views - admin dashboard metrics.
"""
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.authz.permissions import IsAdminRole
from apps.core.models import AdminMetrics
from apps.core.serializers import AdminMetricsSerializer
from apps.events.models import FileInfo

BYTES_PER_MB = 1024 * 1024


def _to_mb(value):
    return round(value / BYTES_PER_MB, 2)


class AdminMetricsView(APIView):
    """
    GET /api/v1/admin/metrics/ - ADMIN only.

    totalFiles counts non-orphaned files; volumes come from the
    AdminMetrics singleton.
    """
    permission_classes = [IsAdminRole]

    def get(self, request):
        counters = AdminMetrics.load()
        data = {
            'totalFiles': FileInfo.objects.filter(is_orphaned=False).count(),
            'uploadVolumeMB': _to_mb(counters.total_upload_bytes),
            'downloadVolumeMB': _to_mb(counters.total_download_bytes),
        }
        serializer = AdminMetricsSerializer(data)
        return Response(serializer.data, status=status.HTTP_200_OK)
