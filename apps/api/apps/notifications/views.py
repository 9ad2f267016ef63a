"""
Notifications views.
"""
from rest_framework import mixins, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.notifications.models import Notification, NotificationStatusChoices
from apps.notifications.serializers import NotificationSerializer, NotificationStatusSerializer
from apps.notifications.services import get_user_notification, set_status


class NotificationViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Endpoints:
    - GET /api/v1/notifications/ - UNREAD and ARCHIVED notifications, newest first
    - PATCH /api/v1/notifications/{id}/ - change status (owner only)
    """
    permission_classes = [IsAuthenticated]
    serializer_class = NotificationSerializer

    def get_queryset(self):
        return Notification.objects.filter(
            user=self.request.user,
            status__in=[NotificationStatusChoices.UNREAD, NotificationStatusChoices.ARCHIVED]
        ).order_by('-created_at')

    def partial_update(self, request, pk=None):
        serializer = NotificationStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        notification = get_user_notification(pk, request.user)
        set_status(notification, serializer.validated_data['status'])
        return Response(NotificationSerializer(notification).data)
