from rest_framework import serializers

from apps.reports.models import Report, ReportStatusChoices


class ReportParticipantSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()


class ReportSerializer(serializers.ModelSerializer):
    sender = ReportParticipantSerializer(read_only=True)
    receiver = ReportParticipantSerializer(read_only=True)
    clinic_name = serializers.SerializerMethodField()

    class Meta:
        model = Report
        fields = [
            'id',
            'protocol',
            'title',
            'file_name',
            'file_url',
            'status',
            'sender',
            'receiver',
            'clinic_name',
            'notification',
            'sent_at',
            'received_at',
            'viewed_at',
        ]
        read_only_fields = fields

    def get_clinic_name(self, obj):
        info = getattr(obj.sender, 'emissor_info', None)
        return info.clinic_name if info else obj.sender.name


class ReportCreateSerializer(serializers.Serializer):
    """
    JSON with a file_url, or multipart with the report `file` itself.

    file_name defaults to the uploaded file's name.
    """
    title = serializers.CharField(max_length=255)
    file_name = serializers.CharField(max_length=255, required=False)
    file_url = serializers.CharField(max_length=1024, required=False)
    file = serializers.FileField(required=False, allow_empty_file=True)
    receiver_id = serializers.UUIDField(required=False)
    receiver_cpf = serializers.CharField(required=False)

    def validate(self, attrs):
        upload = attrs.get('file')
        if upload is None and not attrs.get('file_url'):
            raise serializers.ValidationError('Informe o arquivo ou file_url')
        if upload is None and not attrs.get('file_name'):
            raise serializers.ValidationError('file_name é obrigatório')
        if upload is not None:
            attrs.setdefault('file_name', upload.name)
        return attrs


class ReportStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ReportStatusChoices.choices)
