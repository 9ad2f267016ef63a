from rest_framework import serializers

from apps.audit.models import AuditLog


class AuditLogSerializer(serializers.ModelSerializer):
    actor_email = serializers.SerializerMethodField()

    class Meta:
        model = AuditLog
        fields = [
            'id',
            'created_at',
            'action',
            'status',
            'origin',
            'actor_user',
            'actor_email',
            'emitter_cnpj',
            'receiver_cpf',
            'protocol',
            'file_name',
            'file_hash',
            'document_type',
            'resource',
            'ip_address',
            'user_agent',
            'metadata',
        ]
        read_only_fields = fields

    def get_actor_email(self, obj):
        return obj.actor_user.email if obj.actor_user else None
