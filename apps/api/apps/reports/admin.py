from django.contrib import admin
from .models import Report


@admin.register(Report)
class ReportAdmin(admin.ModelAdmin):
    list_display = ['protocol', 'title', 'sender', 'receiver', 'status', 'sent_at']
    list_filter = ['status']
    search_fields = ['protocol', 'title']
    readonly_fields = ['id', 'protocol', 'sent_at', 'received_at', 'viewed_at']
