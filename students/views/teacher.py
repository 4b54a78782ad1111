"""
Teacher student API: manual lesson consumption.
"""
import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsTeacher
from students.services.balance import LessonBalanceTracker
from students.services.roster import ensure_owned_by, get_student

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsTeacher])
def student_consume_lesson_view(request, pk):
    """
    POST /api/teacher/students/{id}/consume
    Consume one lesson (clamped at 0). Untracked students return remainingLessons: null.
    """
    ensure_owned_by(get_student(pk), request.user)
    remaining = LessonBalanceTracker().consume_lesson(pk)
    logger.info(f"[balance] Teacher {request.user.pk} consumed a lesson for student {pk}")
    return Response({'studentId': pk, 'remainingLessons': remaining})
