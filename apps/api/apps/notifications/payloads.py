"""
Per-type notification payloads.

Each notification type has its own serializer; `validate_payload` picks
it from the type and rejects unknown keys so that stored payloads always
have the documented shape.
"""
from rest_framework import serializers

from apps.core.exceptions import ValidationError
from apps.notifications.models import NotificationTypeChoices


class StrictPayloadSerializer(serializers.Serializer):

    def validate(self, attrs):
        unknown = set(self.initial_data) - set(self.fields)
        if unknown:
            raise serializers.ValidationError(
                f"Campos desconhecidos: {', '.join(sorted(unknown))}"
            )
        return attrs


class LabResultPayload(StrictPayloadSerializer):
    report_id = serializers.UUIDField()
    title = serializers.CharField(max_length=255)
    protocol = serializers.RegexField(r'^\d{4}-\d{5}$')


class InfoPayload(StrictPayloadSerializer):
    message = serializers.CharField(max_length=2000)


PAYLOAD_SERIALIZERS = {
    NotificationTypeChoices.LAB_RESULT: LabResultPayload,
    NotificationTypeChoices.INFO: InfoPayload,
}


def validate_payload(notification_type, payload):
    """
    Validate `payload` for `notification_type` and return it JSON-ready.

    Raises:
        ValidationError: unknown type, missing/invalid/unknown fields
    """
    serializer_class = PAYLOAD_SERIALIZERS.get(notification_type)
    if serializer_class is None:
        raise ValidationError(f'Tipo de notificação inválido: {notification_type}')
    if not isinstance(payload, dict):
        raise ValidationError('Payload da notificação deve ser um objeto')

    serializer = serializer_class(data=payload)
    if not serializer.is_valid():
        field, errors = next(iter(serializer.errors.items()))
        raise ValidationError(f'Payload inválido ({field}): {errors[0]}')

    return {key: str(value) for key, value in serializer.validated_data.items()}
