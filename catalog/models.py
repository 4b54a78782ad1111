"""
Lesson package catalog.
Students copy code/price onto their own row at assignment time, so edits here
never change what an already-enrolled student owes.
"""
from django.core.validators import MinValueValidator
from django.db import models


class PackageType(models.TextChoices):
    """Coarse legacy package types, resolved to a catalog row by code."""
    LESSONS_12 = "LESSONS_12", "12 lessons"
    LESSONS_24 = "LESSONS_24", "24 lessons"
    UNLIMITED = "UNLIMITED", "Unlimited"


class LessonPackage(models.Model):
    """
    Package of lessons: code (e.g. LESSONS_12_MWF), title, price, schedule code.
    lessons_count is optional; packages without it leave the student's
    remaining_lessons untracked.
    """
    code = models.CharField(max_length=64, unique=True)
    title = models.CharField(max_length=200)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(0)],
    )
    schedule_code = models.CharField(max_length=32, help_text="MWF, TTS, MON_SAT, CUSTOM")
    lessons_count = models.PositiveIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'lesson_packages'
        verbose_name = 'Lesson Package'
        verbose_name_plural = 'Lesson Packages'
        ordering = ['code']

    def __str__(self):
        return f"{self.code} ({self.price})"
