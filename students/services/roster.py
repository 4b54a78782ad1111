"""
Student lookups - single source of truth for roster membership.
"""
from core.errors import NotFoundError, OwnershipError
from students.models import Student


def get_roster(teacher):
    """
    Canonical queryset: students currently owned by teacher (active only).
    Accepts a User or a user id.
    """
    teacher_id = getattr(teacher, "pk", teacher)
    return Student.objects.filter(teacher_id=teacher_id, is_active=True).order_by("last_name", "first_name", "id")


def get_student(student_id):
    try:
        return Student.objects.get(id=student_id)
    except (Student.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Student {student_id} not found", code="student_not_found")


def lock_student(student_id):
    """
    Re-read the student row with a row lock. Must run inside transaction.atomic();
    concurrent balance updates for the same student queue behind this lock.
    """
    try:
        return Student.objects.select_for_update().get(id=student_id)
    except (Student.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Student {student_id} not found", code="student_not_found")


def ensure_owned_by(student, teacher):
    """Raise OwnershipError unless student.teacher is the given teacher."""
    teacher_id = getattr(teacher, "pk", teacher)
    if student.teacher_id is None or student.teacher_id != teacher_id:
        raise OwnershipError(f"Student {student.pk} does not belong to teacher {teacher_id}")
    return student
