"""
Events serializers.

Times cross the API as local wall-clock values ("HH:MM" in
settings.TIME_ZONE) next to a "YYYY-MM-DD" date; services turn them into
aware datetimes.
"""
from django.utils import timezone
from rest_framework import serializers

from apps.events.models import EventTypeChoices, FileInfo, FileSlotChoices, HealthEvent

TIME_INPUT_FORMATS = ['%H:%M', '%H:%M:%S']


class FileInfoSerializer(serializers.ModelSerializer):
    class Meta:
        model = FileInfo
        fields = [
            'id',
            'slot',
            'name',
            'url',
            'physical_path',
            'file_hash',
            'upload_date',
            'expiry_date',
            'event',
            'is_orphaned',
            'orphaned_reason',
        ]
        read_only_fields = fields


class FileInputSerializer(serializers.Serializer):
    """One attachment of an event create/update payload."""
    slot = serializers.ChoiceField(choices=FileSlotChoices.choices)
    name = serializers.CharField(max_length=255)
    url = serializers.CharField(max_length=1024)
    physical_path = serializers.CharField(max_length=1024, required=False, allow_blank=True)
    file_hash = serializers.RegexField(r'^[0-9a-f]{64}$', required=False, allow_blank=True)
    upload_date = serializers.DateTimeField(required=False, allow_null=True)
    expiry_date = serializers.DateTimeField(required=False, allow_null=True)


class ProfessionalSummarySerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    specialty = serializers.CharField()


class HealthEventSerializer(serializers.ModelSerializer):
    """Read representation; only non-orphaned files are embedded."""
    start_time = serializers.SerializerMethodField()
    end_time = serializers.SerializerMethodField()
    professional = ProfessionalSummarySerializer(read_only=True)
    files = serializers.SerializerMethodField()

    class Meta:
        model = HealthEvent
        fields = [
            'id',
            'title',
            'description',
            'observation',
            'type',
            'date',
            'start_time',
            'end_time',
            'professional',
            'files',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_start_time(self, obj):
        return timezone.localtime(obj.start_time).strftime('%H:%M')

    def get_end_time(self, obj):
        return timezone.localtime(obj.end_time).strftime('%H:%M')

    def get_files(self, obj):
        # Prefetched as `active_files` by the viewset
        files = getattr(obj, 'active_files', None)
        if files is None:
            files = obj.files.filter(is_orphaned=False)
        return FileInfoSerializer(files, many=True).data


class HealthEventWriteSerializer(serializers.Serializer):
    """
    Create (all event fields required) and partial update payload.

    `files` is always a list of file objects; `notification_id` links the
    write to a notification that gets archived in the same transaction.
    `overwrite`/`slot` drive the slot conflict check of that association.
    """
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    observation = serializers.CharField(required=False, allow_blank=True, default='')
    type = serializers.ChoiceField(choices=EventTypeChoices.choices)
    date = serializers.DateField()
    start_time = serializers.TimeField(input_formats=TIME_INPUT_FORMATS)
    end_time = serializers.TimeField(input_formats=TIME_INPUT_FORMATS)
    professional_id = serializers.UUIDField(required=False, allow_null=True)
    files = FileInputSerializer(many=True, required=False)
    notification_id = serializers.UUIDField(required=False, allow_null=True)
    overwrite = serializers.BooleanField(required=False, default=False)
    slot = serializers.ChoiceField(choices=FileSlotChoices.choices, required=False)
