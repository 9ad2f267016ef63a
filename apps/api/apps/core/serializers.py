"""
Admin metrics serializer.
"""
from rest_framework import serializers


class AdminMetricsSerializer(serializers.Serializer):
    """Dashboard counters; volumes in MB rounded to two decimals."""
    totalFiles = serializers.IntegerField()
    uploadVolumeMB = serializers.FloatField()
    downloadVolumeMB = serializers.FloatField()
