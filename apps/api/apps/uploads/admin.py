from django.contrib import admin
from .models import StoredUpload


@admin.register(StoredUpload)
class StoredUploadAdmin(admin.ModelAdmin):
    list_display = ['key', 'user', 'size', 'content_type', 'created_at']
    search_fields = ['key']
    readonly_fields = ['id', 'key', 'url', 'user', 'size', 'content_type', 'file_hash', 'created_at']
