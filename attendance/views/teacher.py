"""
Teacher attendance API.
Endpoints:
- GET  /attendance?date=                         Roster day view: students + balances + record for date
- POST /attendance/save-batch                    Full-day reconciliation (statuses, auto-fill, extra lessons)
- POST /attendance/update                        Single status change
- GET  /attendance/status?studentId=&date=       One record or {record: null}
- GET  /attendance/monthly?year=&month=          Per-student status counts for a month
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsTeacher
from attendance.serializers import (
    AttendanceRecordSerializer,
    AttendanceUpdateSerializer,
    SaveBatchSerializer,
)
from attendance.services.ledger import AttendanceLedger
from attendance.services.reconcile import BatchReconciliationCoordinator
from core.utils import ensure_date_allowed, parse_iso_date
from students.serializers import RosterRowSerializer
from students.services.roster import ensure_owned_by, get_roster, get_student

logger = logging.getLogger(__name__)


@api_view(["GET"])
@permission_classes([IsAuthenticated, IsTeacher])
def attendance_day_view(request):
    """
    GET /api/teacher/attendance?date=2025-12-05
    Returns the teacher's active roster with remaining lessons, debt, row flag
    and the attendance record for that date (null when unmarked).
    """
    target_date = ensure_date_allowed(parse_iso_date(request.query_params.get("date")))
    students = list(get_roster(request.user).select_related("time_slot"))
    records = AttendanceLedger().records_for_date([s.id for s in students], target_date)

    return Response({
        "date": target_date.isoformat(),
        "students": RosterRowSerializer(students, many=True, context={"records": records}).data,
    })


@api_view(["POST"])
@permission_classes([IsAuthenticated, IsTeacher])
def attendance_save_batch_view(request):
    """
    POST /api/teacher/attendance/save-batch
    Body: { date: "YYYY-MM-DD", items: [{ studentId, status, extraLessons }] }
    Per-student failures come back in results; the request itself still succeeds.
    """
    serializer = SaveBatchSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    lesson_date = parse_iso_date(serializer.validated_data["date"])
    result = BatchReconciliationCoordinator().reconcile_day(
        request.user, lesson_date, serializer.validated_data["items"],
    )
    return Response(result.as_dict(), status=status.HTTP_200_OK)


@api_view(["POST"])
@permission_classes([IsAuthenticated, IsTeacher])
def attendance_update_view(request):
    """
    POST /api/teacher/attendance/update
    Body: { studentId, date, status }
    """
    serializer = AttendanceUpdateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    lesson_date = ensure_date_allowed(parse_iso_date(data["date"]))
    student = ensure_owned_by(get_student(data["studentId"]), request.user)

    outcome = AttendanceLedger().record_status(student.id, lesson_date, data["status"], request.user)
    return Response({
        "success": True,
        "studentId": student.id,
        "date": lesson_date.isoformat(),
        "status": outcome.record.status,
        "created": outcome.created,
        "lessonDelta": outcome.lesson_delta,
        "remainingLessons": outcome.remaining_lessons,
    })


@api_view(["GET"])
@permission_classes([IsAuthenticated, IsTeacher])
def attendance_status_view(request):
    """
    GET /api/teacher/attendance/status?studentId=1&date=2025-12-05
    Returns { record: {...} } or { record: null }.
    """
    lesson_date = parse_iso_date(request.query_params.get("date"))
    student = ensure_owned_by(get_student(request.query_params.get("studentId")), request.user)
    record = AttendanceLedger().get_record(student.id, lesson_date)
    return Response({
        "record": AttendanceRecordSerializer(record).data if record else None,
    })


@api_view(["GET"])
@permission_classes([IsAuthenticated, IsTeacher])
def attendance_monthly_view(request):
    """
    GET /api/teacher/attendance/monthly?year=2025&month=12
    Returns per-student status counts for the teacher's roster.
    """
    try:
        year = int(request.query_params.get("year"))
        month = int(request.query_params.get("month"))
    except (TypeError, ValueError):
        return Response(
            {"detail": "year and month query params required", "code": "invalid_month"},
            status=status.HTTP_400_BAD_REQUEST,
        )
    if not 1 <= month <= 12 or not 1 <= year <= 9999:
        return Response(
            {"detail": "year must be 1-9999 and month 1-12", "code": "invalid_month"},
            status=status.HTTP_400_BAD_REQUEST,
        )

    students = list(get_roster(request.user))
    counts = AttendanceLedger().monthly_counts([s.id for s in students], year, month)
    return Response({
        "year": year,
        "month": month,
        "students": [
            {
                "studentId": s.id,
                "fullName": s.full_name,
                "remainingLessons": s.remaining_lessons,
                "counts": counts.get(s.id, {}),
            }
            for s in students
        ],
    })
