from django.contrib import admin
from .models import HealthEvent, FileInfo


class FileInfoInline(admin.TabularInline):
    model = FileInfo
    extra = 0
    fields = ['slot', 'name', 'url', 'is_orphaned']
    readonly_fields = ['slot', 'name', 'url', 'is_orphaned']


@admin.register(HealthEvent)
class HealthEventAdmin(admin.ModelAdmin):
    list_display = ['title', 'type', 'date', 'start_time', 'end_time', 'professional', 'user']
    list_filter = ['type', 'date']
    search_fields = ['title']
    readonly_fields = ['id', 'created_at', 'updated_at']
    inlines = [FileInfoInline]


@admin.register(FileInfo)
class FileInfoAdmin(admin.ModelAdmin):
    list_display = ['name', 'slot', 'event', 'is_orphaned', 'upload_date', 'user']
    list_filter = ['slot', 'is_orphaned']
    search_fields = ['name', 'orphaned_reason']
    readonly_fields = ['id', 'created_at', 'updated_at']
