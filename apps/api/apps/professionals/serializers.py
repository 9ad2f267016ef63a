from rest_framework import serializers

from apps.professionals.models import DEFAULT_SPECIALTY, Professional


class ProfessionalSerializer(serializers.ModelSerializer):
    """Blank or missing specialty falls back to "A ser definido"."""
    specialty = serializers.CharField(max_length=255, required=False, allow_blank=True)

    class Meta:
        model = Professional
        fields = ['id', 'name', 'specialty', 'address', 'contact', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']
        extra_kwargs = {
            'name': {'error_messages': {'required': 'Nome é obrigatório.', 'blank': 'Nome é obrigatório.'}},
        }

    def validate_specialty(self, value):
        return value.strip() or DEFAULT_SPECIALTY

    def create(self, validated_data):
        validated_data.setdefault('specialty', DEFAULT_SPECIALTY)
        return super().create(validated_data)
