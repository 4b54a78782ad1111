"""
Admin configuration for attendance app
"""
from django.contrib import admin
from .models import AttendanceRecord


@admin.register(AttendanceRecord)
class AttendanceRecordAdmin(admin.ModelAdmin):
    """Attendance Record Admin. Status changes go through the API so balances stay in sync."""
    list_display = ['student', 'lesson_date', 'status', 'marked_by', 'marked_at', 'checkin_time']
    list_filter = ['status', 'lesson_date']
    search_fields = ['student__first_name', 'student__last_name', 'student__student_code']
    readonly_fields = ['student', 'lesson_date', 'status', 'marked_by', 'marked_at', 'checkin_time', 'created_at', 'updated_at']
    ordering = ['-lesson_date']

    def has_add_permission(self, request):
        return False
