"""
Lesson balance tracker: the only writer of Student.remaining_lessons
(apart from package assignment, which resets it).

Two policies:
- clamped (consume/restore): attendance-driven and the manual "consume one
  lesson" button. Untracked students (remaining_lessons is None) are skipped;
  consume floors at zero; restore has no ceiling.
- unclamped (adjust_extra_lessons): teacher-entered extra lessons. Subtracts
  any integer and may leave remaining_lessons negative.
"""
import logging

from django.db import transaction

from core.errors import ValidationError
from core.utils import system_clock
from students.services.roster import lock_student

logger = logging.getLogger(__name__)

# Upper bound on a single extra-lesson adjustment, in either direction.
MAX_EXTRA_LESSONS = 1000


class LessonBalanceTracker:

    def __init__(self, clock=system_clock):
        self.clock = clock

    def _persist(self, student):
        student.updated_at = self.clock()
        student.save(update_fields=["remaining_lessons", "updated_at"])

    def consume(self, student):
        """Clamped decrement. Returns the new value, or None if untracked."""
        remaining = student.remaining_lessons
        if remaining is None:
            logger.debug(f"[balance] Student {student.pk}: untracked, consume skipped")
            return None
        student.remaining_lessons = max(0, remaining - 1)
        self._persist(student)
        logger.info(f"[balance] Student {student.pk}: consume {remaining} -> {student.remaining_lessons}")
        return student.remaining_lessons

    def restore(self, student):
        """Clamped-policy increment (give one lesson back). None if untracked."""
        remaining = student.remaining_lessons
        if remaining is None:
            logger.debug(f"[balance] Student {student.pk}: untracked, restore skipped")
            return None
        student.remaining_lessons = remaining + 1
        self._persist(student)
        logger.info(f"[balance] Student {student.pk}: restore {remaining} -> {student.remaining_lessons}")
        return student.remaining_lessons

    def consume_lesson(self, student_id):
        """
        Manual "consume one lesson" for a single student.
        Returns the new remaining_lessons (None when untracked).
        """
        with transaction.atomic():
            student = lock_student(student_id)
            return self.consume(student)

    def adjust_extra_lessons(self, student, extra):
        """
        Unclamped: remaining_lessons -= extra; the result may be negative.
        Caller owns the transaction and should pass a locked student.
        """
        try:
            extra = int(extra)
        except (TypeError, ValueError):
            raise ValidationError("extraLessons must be an integer", code="invalid_extra_lessons")
        if abs(extra) > MAX_EXTRA_LESSONS:
            raise ValidationError(
                f"extraLessons must be between -{MAX_EXTRA_LESSONS} and {MAX_EXTRA_LESSONS}",
                code="invalid_extra_lessons",
            )
        remaining = student.remaining_lessons
        if remaining is None:
            raise ValidationError(
                f"Student {student.pk} has no tracked lesson balance",
                code="remaining_not_tracked",
            )
        student.remaining_lessons = remaining - extra
        self._persist(student)
        logger.info(
            f"[balance] Student {student.pk}: extra lessons {extra}, {remaining} -> {student.remaining_lessons}"
        )
        return student.remaining_lessons
