"""
Student and TimeSlot.
Student holds the two mutable balances of the system: remaining_lessons
(lesson counter, null = untracked) and debt (money owed, never negative).
"""
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class TimeSlot(models.Model):
    """Teacher's lesson slot, e.g. "08:00-09:00"."""
    teacher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='time_slots',
        limit_choices_to={'role': 'teacher'},
    )
    start_time = models.TimeField()
    end_time = models.TimeField()
    label = models.CharField(max_length=50, blank=True)

    class Meta:
        db_table = 'time_slots'
        verbose_name = 'Time Slot'
        verbose_name_plural = 'Time Slots'
        ordering = ['teacher', 'start_time']

    def __str__(self):
        return self.label or f"{self.start_time:%H:%M}-{self.end_time:%H:%M}"

    def save(self, *args, **kwargs):
        if not self.label and self.start_time and self.end_time:
            self.label = f"{self.start_time:%H:%M}-{self.end_time:%H:%M}"
        super().save(*args, **kwargs)


class Student(models.Model):
    """
    Student enrolled with one teacher.
    package_code/package_price are a snapshot taken at assignment time and are
    never recomputed from the catalog.
    remaining_lessons and debt are only changed through
    students.services.balance, payments.services.ledger and
    catalog.services.assignment.
    """
    student_code = models.CharField(max_length=32, unique=True, null=True, blank=True)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    phone = models.CharField(max_length=20, blank=True, null=True)

    teacher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='students',
        limit_choices_to={'role': 'teacher'},
    )
    time_slot = models.ForeignKey(
        TimeSlot,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='students',
    )
    lesson_package = models.ForeignKey(
        'catalog.LessonPackage',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='students',
    )
    package_code = models.CharField(max_length=64, blank=True, null=True)
    package_price = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    remaining_lessons = models.IntegerField(
        null=True,
        blank=True,
        help_text="Null = untracked. May go negative only through extra-lesson adjustments.",
    )
    debt = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0)],
    )
    needs_book = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True, db_index=True)

    created_at = models.DateTimeField(default=timezone.now)
    # Set explicitly by the services (injected clock), not auto_now.
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'students'
        verbose_name = 'Student'
        verbose_name_plural = 'Students'
        ordering = ['last_name', 'first_name']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(debt__gte=0),
                name='student_debt_non_negative',
            ),
        ]
        indexes = [
            models.Index(fields=['teacher', 'is_active'], name='students_teacher_active_idx'),
        ]

    def __str__(self):
        return f"{self.full_name} ({self.student_code or self.pk})"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()
