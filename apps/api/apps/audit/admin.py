from django.contrib import admin
from .models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ['created_at', 'action', 'status', 'actor_user', 'protocol', 'ip_address']
    list_filter = ['action', 'status', 'origin']
    search_fields = ['protocol', 'file_name']
    readonly_fields = [f.name for f in AuditLog._meta.fields]
