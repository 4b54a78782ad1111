"""
Serializers for attendance app
"""
from rest_framework import serializers
from .models import AttendanceRecord


class AttendanceRecordSerializer(serializers.ModelSerializer):
    """Attendance Record serializer. Exposes date from lesson_date."""
    studentId = serializers.IntegerField(source='student_id', read_only=True)
    date = serializers.DateField(source='lesson_date', read_only=True)
    markedBy = serializers.IntegerField(source='marked_by_id', read_only=True, allow_null=True)
    markedAt = serializers.DateTimeField(source='marked_at', read_only=True, allow_null=True)
    checkinTime = serializers.DateTimeField(source='checkin_time', read_only=True, allow_null=True)

    class Meta:
        model = AttendanceRecord
        fields = ['id', 'studentId', 'date', 'status', 'markedBy', 'markedAt', 'checkinTime']
        read_only_fields = fields


class AttendanceUpdateSerializer(serializers.Serializer):
    """Single status change: {studentId, date, status}."""
    studentId = serializers.IntegerField()
    date = serializers.CharField()
    status = serializers.CharField()

    def validate_status(self, value):
        value = value.strip().upper()
        if not AttendanceRecord.is_valid_status(value):
            raise serializers.ValidationError(
                f"status must be one of {', '.join(v for v, _ in AttendanceRecord.STATUS_CHOICES)}"
            )
        return value


class SaveBatchSerializer(serializers.Serializer):
    """
    Batch body: {date, items: [{studentId, status, extraLessons}]}.
    Items stay raw dicts; each one is validated inside the coordinator so one
    bad item fails alone.
    """
    date = serializers.CharField()
    items = serializers.ListField(child=serializers.JSONField(), allow_empty=True, required=False, default=list)
