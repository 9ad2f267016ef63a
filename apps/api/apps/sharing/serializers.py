from rest_framework import serializers


class ShareGenerateSerializer(serializers.Serializer):
    event_id = serializers.UUIDField()
    file_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)


class ShareValidateSerializer(serializers.Serializer):
    token = serializers.CharField(max_length=64)
    code = serializers.CharField(max_length=6)
