"""
Notification services.
"""
from apps.core.exceptions import NotFoundError
from apps.notifications.models import Notification, NotificationStatusChoices
from apps.notifications.payloads import validate_payload


def create_notification(user, notification_type, payload):
    """Create an UNREAD notification after validating its payload."""
    return Notification.objects.create(
        user=user,
        type=notification_type,
        status=NotificationStatusChoices.UNREAD,
        payload=validate_payload(notification_type, payload),
    )


def get_user_notification(notification_id, user, for_update=False):
    qs = Notification.objects.filter(pk=notification_id, user=user)
    if for_update:
        qs = qs.select_for_update()
    notification = qs.first()
    if notification is None:
        raise NotFoundError('Notificação não encontrada')
    return notification


def set_status(notification, status):
    if notification.status != status:
        notification.status = status
        notification.save(update_fields=['status', 'updated_at'])
    return notification


def archive_notification(notification_id, user):
    """Archive a notification once its content was attached to an event."""
    notification = get_user_notification(notification_id, user, for_update=True)
    return set_status(notification, NotificationStatusChoices.ARCHIVED)
