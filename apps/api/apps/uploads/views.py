"""
Upload endpoint.
"""
from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.exceptions import ValidationError
from apps.core.observability import metrics
from apps.uploads.ratelimit import UploadRateThrottle
from apps.uploads.services import store_upload


class UploadView(APIView):
    """
    POST /api/v1/uploads/ (multipart, field "file")

    Rate limited per client IP, then size/MIME validated. Returns
    {url, name, uploadDate, physicalPath, fileHash}; the caller attaches
    the result to an event through the events API, which only accepts
    physicalPath values the same user uploaded.
    """
    permission_classes = [IsAuthenticated]
    throttle_classes = [UploadRateThrottle]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        upload = request.FILES.get('file')
        if upload is None:
            metrics.uploads_total.labels(result='missing').inc()
            raise ValidationError('Nenhum arquivo enviado')

        record = store_upload(upload, request.user, resource=request.path)

        return Response(
            {
                'url': record.url,
                'name': record.name,
                'uploadDate': record.created_at.isoformat(),
                'physicalPath': record.key,
                'fileHash': record.file_hash,
            },
            status=status.HTTP_201_CREATED
        )
