"""
Attendance model: one record per student per day.
Unique constraint: (student, lesson_date).
"""
from django.conf import settings
from django.db import models


class AttendanceRecord(models.Model):
    """
    Daily attendance record. One record per student per day globally.
    Records are updated in place when a teacher corrects a mark; there is no
    deletion path.
    """
    STATUS_PRESENT = "PRESENT"
    STATUS_LATE = "LATE"
    STATUS_ABSENT = "ABSENT"
    STATUS_EXCUSED = "EXCUSED"

    STATUS_CHOICES = [
        (STATUS_PRESENT, "Present"),
        (STATUS_LATE, "Late"),
        (STATUS_ABSENT, "Absent"),
        (STATUS_EXCUSED, "Excused"),
    ]

    # A lesson was held against the student's package: these consume one lesson.
    CONSUMING_STATUSES = frozenset({STATUS_PRESENT, STATUS_LATE, STATUS_ABSENT})
    # Filled in for students the teacher did not mark; never consumes.
    DEFAULT_STATUS = STATUS_EXCUSED

    student = models.ForeignKey(
        "students.Student",
        on_delete=models.CASCADE,
        related_name="attendance_records",
    )
    lesson_date = models.DateField(db_column="lesson_date")
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_EXCUSED,
    )
    marked_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="marked_attendance",
        db_column="marked_by_id",
    )
    marked_at = models.DateTimeField(null=True, blank=True)
    checkin_time = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "attendance_records"
        verbose_name = "Attendance Record"
        verbose_name_plural = "Attendance Records"
        constraints = [
            models.UniqueConstraint(
                fields=["student", "lesson_date"],
                name="unique_student_lesson_date",
            ),
        ]
        ordering = ["-lesson_date", "student"]
        indexes = [
            models.Index(fields=["lesson_date"], name="attendance_lesson_date_idx"),
        ]

    def __str__(self):
        return f"{self.student} - {self.lesson_date} - {self.status}"

    @classmethod
    def is_consuming(cls, status):
        """Anything outside the consuming set (including unknown values) is non-consuming."""
        return status in cls.CONSUMING_STATUSES

    @classmethod
    def is_valid_status(cls, status):
        return status in {value for value, _ in cls.STATUS_CHOICES}

    @property
    def consumes_lesson(self):
        return self.is_consuming(self.status)
