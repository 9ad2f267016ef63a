from django.contrib import admin
from .models import AdminMetrics


@admin.register(AdminMetrics)
class AdminMetricsAdmin(admin.ModelAdmin):
    list_display = ['id', 'total_upload_bytes', 'total_download_bytes', 'updated_at']
    readonly_fields = ['id', 'updated_at']
