from rest_framework import serializers

from apps.notifications.models import Notification, NotificationStatusChoices


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = ['id', 'type', 'status', 'payload', 'created_at']
        read_only_fields = fields


class NotificationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=NotificationStatusChoices.choices)
