"""
Admin configuration for students app
"""
from django.contrib import admin
from .models import Student, TimeSlot


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    """Balances are read-only here: they change through attendance, packages and payments."""
    list_display = ['student_code', 'first_name', 'last_name', 'teacher', 'package_code', 'remaining_lessons', 'debt', 'is_active']
    list_filter = ['is_active', 'needs_book', 'package_code', 'teacher']
    search_fields = ['student_code', 'first_name', 'last_name', 'phone']
    readonly_fields = ['student_code', 'lesson_package', 'package_code', 'package_price', 'remaining_lessons', 'debt', 'created_at', 'updated_at']
    ordering = ['last_name', 'first_name']


@admin.register(TimeSlot)
class TimeSlotAdmin(admin.ModelAdmin):
    list_display = ['label', 'teacher', 'start_time', 'end_time']
    list_filter = ['teacher']
    ordering = ['teacher', 'start_time']
