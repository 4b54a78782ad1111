"""
Admin configuration for catalog app
"""
from django.contrib import admin
from .models import LessonPackage


@admin.register(LessonPackage)
class LessonPackageAdmin(admin.ModelAdmin):
    list_display = ['code', 'title', 'price', 'schedule_code', 'lessons_count']
    search_fields = ['code', 'title']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['code']
