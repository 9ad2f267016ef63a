from django.contrib import admin
from .models import Professional


@admin.register(Professional)
class ProfessionalAdmin(admin.ModelAdmin):
    list_display = ['name', 'specialty', 'user', 'created_at']
    search_fields = ['name', 'specialty']
    readonly_fields = ['id', 'created_at', 'updated_at']
