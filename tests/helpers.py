"""
Shared fixtures for service and API tests.
"""
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

from accounts.models import User
from catalog.models import LessonPackage
from students.models import Student

FIXED_NOW = datetime(2025, 12, 5, 9, 0, tzinfo=dt_timezone.utc)


def fixed_clock():
    return FIXED_NOW


def make_teacher(email="teacher@test.az", **extra):
    return User.objects.create_user(
        email=email,
        password="pass123",
        full_name=extra.pop("full_name", "Teacher"),
        role=User.ROLE_TEACHER,
        **extra,
    )


def make_manager(email="manager@test.az"):
    return User.objects.create_user(
        email=email,
        password="pass123",
        full_name="Manager",
        role=User.ROLE_MANAGER,
    )


def make_student(teacher=None, remaining_lessons=12, debt="0.00", last_name="Aliyev", **extra):
    return Student.objects.create(
        first_name=extra.pop("first_name", "Student"),
        last_name=last_name,
        teacher=teacher,
        remaining_lessons=remaining_lessons,
        debt=Decimal(debt),
        **extra,
    )


def make_package(code="LESSONS_12_MWF", price="3400.00", schedule_code="MWF", lessons_count=12):
    return LessonPackage.objects.create(
        code=code,
        title=code.replace("_", " ").title(),
        price=Decimal(price),
        schedule_code=schedule_code,
        lessons_count=lessons_count,
    )
