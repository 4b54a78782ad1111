"""
Attendance ledger: upsert of the single (student, lesson_date) record and the
lesson-balance delta that goes with it.

Transitions (consuming = PRESENT/LATE/ABSENT, everything else non-consuming):
- new record, consuming       -> consume one lesson (clamped), check-in set
- new record, non-consuming   -> no balance change, no check-in
- non-consuming -> consuming  -> consume one lesson
- consuming -> non-consuming  -> restore one lesson
- same classification         -> no balance change
Status, marker, mark time and check-in are overwritten on every call.
"""
import logging
from calendar import monthrange
from dataclasses import dataclass
from datetime import date

from django.db import IntegrityError, transaction
from django.db.models import Count

from attendance.models import AttendanceRecord
from core.utils import system_clock
from students.services.balance import LessonBalanceTracker
from students.services.roster import get_student, lock_student

logger = logging.getLogger(__name__)


@dataclass
class RecordOutcome:
    record: AttendanceRecord
    created: bool
    lesson_delta: int
    remaining_lessons: int | None


class AttendanceLedger:

    def __init__(self, clock=system_clock, balance=None):
        self.clock = clock
        self.balance = balance or LessonBalanceTracker(clock=clock)

    def _locked_record(self, student, lesson_date):
        return (
            AttendanceRecord.objects.select_for_update()
            .filter(student=student, lesson_date=lesson_date)
            .first()
        )

    def _create_or_fetch(self, student, lesson_date, status, marker, now):
        """
        Insert the record inside a savepoint. If another request inserted the
        same (student, lesson_date) first, fall back to the winner's row.
        Returns (record, created).
        """
        try:
            with transaction.atomic():
                record = AttendanceRecord.objects.create(
                    student=student,
                    lesson_date=lesson_date,
                    status=status,
                    marked_by=marker,
                    marked_at=now,
                    checkin_time=now if AttendanceRecord.is_consuming(status) else None,
                )
            return record, True
        except IntegrityError:
            logger.warning(
                f"[attendance] Insert race on student={student.pk} date={lesson_date}, retrying as update"
            )
            record = AttendanceRecord.objects.select_for_update().get(student=student, lesson_date=lesson_date)
            return record, False

    def record_status(self, student_id, lesson_date, status, marker=None):
        """
        Create or update the attendance record for (student, lesson_date) and
        apply the matching lesson-balance delta, atomically.
        Raises NotFoundError(student_not_found) with no mutation for unknown students.
        """
        if not AttendanceRecord.is_valid_status(status):
            logger.warning(f"[attendance] Unrecognized status {status!r} for student={student_id}, treated as non-consuming")
        consuming = AttendanceRecord.is_consuming(status)

        with transaction.atomic():
            student = lock_student(student_id)
            now = self.clock()

            record = self._locked_record(student, lesson_date)
            created = False
            if record is None:
                record, created = self._create_or_fetch(student, lesson_date, status, marker, now)

            delta = 0
            if created:
                if consuming:
                    self.balance.consume(student)
                    delta = -1
            else:
                was_consuming = record.consumes_lesson
                if consuming and not was_consuming:
                    self.balance.consume(student)
                    delta = -1
                elif was_consuming and not consuming:
                    self.balance.restore(student)
                    delta = 1

                record.status = status
                record.marked_by = marker
                record.marked_at = now
                record.checkin_time = now if consuming else None
                record.save(update_fields=["status", "marked_by", "marked_at", "checkin_time", "updated_at"])

        logger.info(
            f"[attendance] student={student.pk} date={lesson_date} status={status} "
            f"created={created} delta={delta} remaining={student.remaining_lessons}"
        )
        return RecordOutcome(
            record=record,
            created=created,
            lesson_delta=delta,
            remaining_lessons=student.remaining_lessons,
        )

    def get_record(self, student_id, lesson_date):
        """Record for (student, lesson_date) or None. Unknown student -> NotFoundError."""
        student = get_student(student_id)
        return AttendanceRecord.objects.filter(student=student, lesson_date=lesson_date).first()

    def records_for_date(self, student_ids, lesson_date):
        """{student_id: AttendanceRecord} for the given students on one date."""
        records = AttendanceRecord.objects.filter(student_id__in=student_ids, lesson_date=lesson_date)
        return {r.student_id: r for r in records}

    def monthly_counts(self, student_ids, year, month):
        """
        Per-student status counts for a calendar month.
        Returns {student_id: {"PRESENT": n, "LATE": n, "ABSENT": n, "EXCUSED": n}}.
        """
        _, last_day = monthrange(year, month)
        start_date = date(year, month, 1)
        end_date = date(year, month, last_day)

        rows = (
            AttendanceRecord.objects.filter(
                student_id__in=student_ids,
                lesson_date__gte=start_date,
                lesson_date__lte=end_date,
            )
            .values("student_id", "status")
            .annotate(cnt=Count("id"))
        )
        stats = {sid: {value: 0 for value, _ in AttendanceRecord.STATUS_CHOICES} for sid in student_ids}
        for row in rows:
            stats.setdefault(row["student_id"], {value: 0 for value, _ in AttendanceRecord.STATUS_CHOICES})
            stats[row["student_id"]][row["status"]] = row["cnt"]
        return stats
