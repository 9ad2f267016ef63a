"""
Sharing views.
"""
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.authz.permissions import IsReceptorOrAdmin
from apps.sharing.serializers import ShareGenerateSerializer, ShareValidateSerializer
from apps.sharing.services import generate_share, validate_share


class ShareGenerateView(APIView):
    """POST /api/v1/share/generate/ - link + access code for event files."""
    permission_classes = [IsReceptorOrAdmin]

    def post(self, request):
        serializer = ShareGenerateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        share = generate_share(
            serializer.validated_data['event_id'],
            serializer.validated_data['file_ids'],
            request.user,
        )
        return Response(share)


class ShareValidateView(APIView):
    """POST /api/v1/share/validate/ - public, one-time use."""
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = ShareValidateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        files = validate_share(
            serializer.validated_data['token'],
            serializer.validated_data['code'],
        )
        return Response({'files': files})
