from django.contrib import admin
from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'type', 'status', 'created_at']
    list_filter = ['type', 'status']
    readonly_fields = ['id', 'payload', 'created_at', 'updated_at']
