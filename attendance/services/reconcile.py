"""
Day-level attendance reconciliation for one teacher.

reconcile_day(marker, lesson_date, items):
1. reject dates before ATTENDANCE_MIN_DATE (nothing applied)
2. apply every explicit status through AttendanceLedger, one transaction per student
3. give every roster member without an applied status and without a record an EXCUSED record
4. apply extra-lesson adjustments (unclamped) for students whose status step succeeded
One student's failure is reported in its result and never stops the batch.
"""
import logging
from dataclasses import dataclass, field
from datetime import date

from django.db import DatabaseError, transaction

from attendance.models import AttendanceRecord
from attendance.services.ledger import AttendanceLedger
from core.errors import ServiceError, ValidationError
from core.utils import ensure_date_allowed, system_clock
from students.services.balance import MAX_EXTRA_LESSONS, LessonBalanceTracker
from students.services.roster import ensure_owned_by, get_roster, get_student, lock_student

logger = logging.getLogger(__name__)


@dataclass
class BatchEntry:
    student_id: int
    status: str | None = None
    extra_lessons: int = 0

    @classmethod
    def from_payload(cls, item):
        """
        Build an entry from {studentId, status, extraLessons}.
        Raises ValidationError(invalid_item) for anything malformed.
        """
        if not isinstance(item, dict):
            raise ValidationError("Item must be an object", code="invalid_item")
        try:
            student_id = int(item.get("studentId"))
        except (TypeError, ValueError):
            raise ValidationError("studentId must be an integer", code="invalid_item")
        status = item.get("status") or None
        if status is not None:
            status = str(status).strip().upper()
        extra = item.get("extraLessons")
        try:
            extra = int(extra) if extra not in (None, "") else 0
        except (TypeError, ValueError):
            raise ValidationError("extraLessons must be an integer", code="invalid_extra_lessons")
        if abs(extra) > MAX_EXTRA_LESSONS:
            raise ValidationError(
                f"extraLessons must be between -{MAX_EXTRA_LESSONS} and {MAX_EXTRA_LESSONS}",
                code="invalid_extra_lessons",
            )
        return cls(student_id=student_id, status=status, extra_lessons=extra)


@dataclass
class StudentResult:
    student_id: object
    applied: bool
    new_remaining: int | None = None
    error_code: str | None = None
    status: str | None = None

    def as_dict(self):
        data = {"studentId": self.student_id, "applied": self.applied}
        if self.applied:
            data["newRemaining"] = self.new_remaining
            if self.status:
                data["status"] = self.status
        else:
            data["error"] = self.error_code
        return data


@dataclass
class ReconciliationResult:
    lesson_date: date
    results: list = field(default_factory=list)
    autofilled: list = field(default_factory=list)

    @property
    def failed(self):
        return [r for r in self.results if not r.applied]

    def as_dict(self):
        return {
            "success": True,
            "date": self.lesson_date.isoformat(),
            "results": [r.as_dict() for r in self.results],
            "autofilled": self.autofilled,
        }


class BatchReconciliationCoordinator:

    def __init__(self, clock=system_clock, balance=None, ledger=None):
        self.clock = clock
        self.balance = balance or LessonBalanceTracker(clock=clock)
        self.ledger = ledger or AttendanceLedger(clock=clock, balance=self.balance)

    def _apply_status(self, marker, lesson_date, entry):
        if not AttendanceRecord.is_valid_status(entry.status):
            raise ValidationError(f"Unknown status {entry.status!r}", code="invalid_status")
        student = get_student(entry.student_id)
        ensure_owned_by(student, marker)
        outcome = self.ledger.record_status(student.pk, lesson_date, entry.status, marker)
        return outcome.remaining_lessons

    def _apply_extra_lessons(self, marker, entry):
        with transaction.atomic():
            student = lock_student(entry.student_id)
            ensure_owned_by(student, marker)
            return self.balance.adjust_extra_lessons(student, entry.extra_lessons)

    def autofill_unmarked(self, marker, lesson_date, exclude_ids=()):
        """
        Create an EXCUSED record (no check-in, no balance change) for every
        roster member outside exclude_ids that has no record for the date.
        Existing records are never modified. Returns the filled student ids.
        """
        exclude_ids = set(exclude_ids)
        roster_ids = [sid for sid in get_roster(marker).values_list("id", flat=True) if sid not in exclude_ids]
        existing = set(
            AttendanceRecord.objects.filter(student_id__in=roster_ids, lesson_date=lesson_date)
            .values_list("student_id", flat=True)
        )
        now = self.clock()
        filled = []
        for sid in roster_ids:
            if sid in existing:
                continue
            _, created = AttendanceRecord.objects.get_or_create(
                student_id=sid,
                lesson_date=lesson_date,
                defaults={
                    "status": AttendanceRecord.DEFAULT_STATUS,
                    "marked_by": marker,
                    "marked_at": now,
                    "checkin_time": None,
                },
            )
            if created:
                filled.append(sid)
        if filled:
            logger.info(f"[reconcile] teacher={marker.pk} date={lesson_date}: auto-filled {len(filled)} student(s) {filled}")
        return filled

    def reconcile_day(self, marker, lesson_date, items):
        """
        Apply a teacher's full-day submission.
        items: BatchEntry objects or {studentId, status, extraLessons} dicts.
        Raises DateTooEarlyError before touching anything; every other error
        is reported per student in the returned ReconciliationResult.
        """
        ensure_date_allowed(lesson_date)
        logger.info(f"[reconcile] teacher={marker.pk} date={lesson_date} items={len(items or [])}")

        results = {}
        entries = []
        for index, item in enumerate(items or []):
            try:
                entry = item if isinstance(item, BatchEntry) else BatchEntry.from_payload(item)
            except ValidationError as exc:
                raw_id = item.get("studentId") if isinstance(item, dict) else None
                results[("invalid", index)] = StudentResult(raw_id, applied=False, error_code=exc.code)
                continue
            if entry.student_id in results:
                # Repeated student: the later item replaces the earlier one.
                entries = [e for e in entries if e.student_id != entry.student_id]
                del results[entry.student_id]
            entries.append(entry)
            results[entry.student_id] = None

        # Explicit statuses
        status_ids = set()
        for entry in entries:
            if entry.status is None:
                continue
            try:
                remaining = self._apply_status(marker, lesson_date, entry)
                status_ids.add(entry.student_id)
                results[entry.student_id] = StudentResult(
                    entry.student_id, applied=True, new_remaining=remaining, status=entry.status,
                )
            except ServiceError as exc:
                logger.warning(f"[reconcile] student={entry.student_id} status={entry.status} failed: {exc.code}")
                results[entry.student_id] = StudentResult(entry.student_id, applied=False, error_code=exc.code)
            except DatabaseError:
                logger.exception(f"[reconcile] student={entry.student_id} status={entry.status}: database error")
                results[entry.student_id] = StudentResult(entry.student_id, applied=False, error_code="internal_error")

        # Fill the gaps
        autofilled = self.autofill_unmarked(marker, lesson_date, exclude_ids=status_ids)

        # Extra lessons, after statuses so they see the post-attendance balance
        for entry in entries:
            previous = results[entry.student_id]
            if previous is not None and not previous.applied:
                continue
            if not entry.extra_lessons:
                if previous is None:
                    results[entry.student_id] = StudentResult(entry.student_id, applied=False, error_code="nothing_to_apply")
                continue
            try:
                remaining = self._apply_extra_lessons(marker, entry)
                results[entry.student_id] = StudentResult(
                    entry.student_id, applied=True, new_remaining=remaining, status=entry.status,
                )
            except ServiceError as exc:
                logger.warning(f"[reconcile] student={entry.student_id} extra={entry.extra_lessons} failed: {exc.code}")
                results[entry.student_id] = StudentResult(entry.student_id, applied=False, error_code=exc.code)
            except DatabaseError:
                logger.exception(f"[reconcile] student={entry.student_id} extra={entry.extra_lessons}: database error")
                results[entry.student_id] = StudentResult(entry.student_id, applied=False, error_code="internal_error")

        outcome = ReconciliationResult(lesson_date=lesson_date, results=list(results.values()), autofilled=autofilled)
        logger.info(
            f"[reconcile] teacher={marker.pk} date={lesson_date}: "
            f"{len(outcome.results) - len(outcome.failed)} applied, {len(outcome.failed)} failed, {len(autofilled)} auto-filled"
        )
        return outcome
