"""
Serializers for students app
"""
from rest_framework import serializers
from .models import Student, TimeSlot
from .utils import get_row_flag


class StudentSerializer(serializers.ModelSerializer):
    """Student snapshot: package, remaining lessons, debt. Decimal fields as float for frontend."""
    studentCode = serializers.CharField(source='student_code', read_only=True)
    fullName = serializers.CharField(source='full_name', read_only=True)
    teacherId = serializers.IntegerField(source='teacher_id', read_only=True, allow_null=True)
    timeSlot = serializers.SerializerMethodField()
    packageId = serializers.IntegerField(source='lesson_package_id', read_only=True, allow_null=True)
    packageCode = serializers.CharField(source='package_code', read_only=True, allow_null=True)
    packagePrice = serializers.DecimalField(source='package_price', max_digits=10, decimal_places=2, read_only=True)
    remainingLessons = serializers.IntegerField(source='remaining_lessons', read_only=True, allow_null=True)
    needsBook = serializers.BooleanField(source='needs_book', read_only=True)
    isActive = serializers.BooleanField(source='is_active', read_only=True)

    class Meta:
        model = Student
        fields = [
            'id', 'studentCode', 'fullName', 'phone', 'teacherId', 'timeSlot',
            'packageId', 'packageCode', 'packagePrice', 'remainingLessons', 'debt',
            'needsBook', 'isActive',
        ]
        read_only_fields = fields

    def get_timeSlot(self, obj):
        return str(obj.time_slot) if obj.time_slot_id else None

    def to_representation(self, instance):
        data = super().to_representation(instance)
        for key in ('packagePrice', 'debt'):
            if data.get(key) is not None:
                data[key] = float(data[key])
        return data


class RosterRowSerializer(StudentSerializer):
    """Teacher roster row: student snapshot + row flag + attendance for the requested date."""
    rowFlag = serializers.SerializerMethodField()
    attendance = serializers.SerializerMethodField()

    class Meta(StudentSerializer.Meta):
        fields = StudentSerializer.Meta.fields + ['rowFlag', 'attendance']
        read_only_fields = fields

    def get_rowFlag(self, obj):
        return get_row_flag(obj)

    def get_attendance(self, obj):
        records = self.context.get('records') or {}
        record = records.get(obj.id)
        if record is None:
            return None
        from attendance.serializers import AttendanceRecordSerializer
        return AttendanceRecordSerializer(record).data


class StudentEnrollSerializer(serializers.Serializer):
    """Manager enrollment input. packageId wins over the legacy packageType."""
    firstName = serializers.CharField(max_length=100)
    lastName = serializers.CharField(max_length=100)
    phone = serializers.CharField(max_length=20, required=False, allow_null=True, allow_blank=True)
    teacherId = serializers.IntegerField(required=False, allow_null=True)
    timeSlotId = serializers.IntegerField(required=False, allow_null=True)
    packageId = serializers.IntegerField(required=False, allow_null=True)
    packageType = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    needsBook = serializers.BooleanField(required=False, default=False)
    initialPayment = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True, min_value=0,
    )
    note = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    def validate_timeSlotId(self, value):
        if value is not None and not TimeSlot.objects.filter(id=value).exists():
            raise serializers.ValidationError('Time slot not found')
        return value


class PackageChangeSerializer(serializers.Serializer):
    """Package (re)assignment input: {packageId | packageType, initialPayment, note}."""
    packageId = serializers.IntegerField(required=False, allow_null=True)
    packageType = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    initialPayment = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True, min_value=0,
    )
    note = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    def validate(self, attrs):
        if not attrs.get('packageId') and not attrs.get('packageType'):
            raise serializers.ValidationError({'packageId': 'packageId or packageType is required'})
        return attrs
