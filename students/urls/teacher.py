"""
Teacher API URLs
"""
from django.urls import path
from attendance.views.teacher import (
    attendance_day_view,
    attendance_save_batch_view,
    attendance_update_view,
    attendance_status_view,
    attendance_monthly_view,
)
from ..views.teacher import student_consume_lesson_view

app_name = 'teacher'

urlpatterns = [
    path('attendance', attendance_day_view, name='attendance-day'),
    path('attendance/save-batch', attendance_save_batch_view, name='attendance-save-batch'),
    path('attendance/update', attendance_update_view, name='attendance-update'),
    path('attendance/status', attendance_status_view, name='attendance-status'),
    path('attendance/monthly', attendance_monthly_view, name='attendance-monthly'),
    path('students/<int:pk>/consume', student_consume_lesson_view, name='student-consume'),
]
