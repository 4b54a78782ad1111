"""
Manager student API: enrollment, package (re)assignment, payment history.
"""
from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsManager
from catalog.services.assignment import PackageAssignmentResolver
from core.errors import NotFoundError, ValidationError
from payments.serializers import PaymentSerializer
from payments.services.ledger import DebtLedger
from students.models import TimeSlot
from students.serializers import PackageChangeSerializer, StudentEnrollSerializer, StudentSerializer
from students.services.enrollment import StudentEnrollment

User = get_user_model()


def _resolve_package(assignment, package_id=None, package_type=None):
    if package_id:
        return assignment.get_package(package_id)
    if package_type:
        package = assignment.resolve_for_coarse_type(package_type)
        if package is None:
            raise ValidationError(f"No package for type {package_type!r}", code="package_not_found")
        return package
    return None


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsManager])
def manager_student_enroll_view(request):
    """
    POST /api/manager/students
    Body: { firstName, lastName, phone?, teacherId?, timeSlotId?, packageId? | packageType?,
            needsBook?, initialPayment?, note? }
    Returns: { student: {...}, payment: {...} | null }
    """
    serializer = StudentEnrollSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    teacher = None
    if data.get('teacherId'):
        teacher = User.objects.filter(id=data['teacherId'], role=User.ROLE_TEACHER).first()
        if teacher is None:
            raise NotFoundError(f"Teacher {data['teacherId']} not found", code="teacher_not_found")
    time_slot = TimeSlot.objects.filter(id=data['timeSlotId']).first() if data.get('timeSlotId') else None

    enrollment = StudentEnrollment()
    package = None
    if data.get('packageId'):
        package = enrollment.assignment.get_package(data['packageId'])

    student, payment = enrollment.enroll(
        first_name=data['firstName'],
        last_name=data['lastName'],
        teacher=teacher,
        phone=data.get('phone') or None,
        package=package,
        package_type=data.get('packageType') or None,
        time_slot=time_slot,
        needs_book=data.get('needsBook', False),
        initial_payment=data.get('initialPayment'),
        note=data.get('note'),
        actor=request.user,
    )
    return Response({
        'student': StudentSerializer(student).data,
        'payment': PaymentSerializer(payment).data if payment else None,
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsManager])
def manager_student_package_view(request, pk):
    """
    POST /api/manager/students/{id}/package
    Body: { packageId | packageType, initialPayment?, note? }
    Debt of the previous package is carried forward; remaining lessons reset to the package count.
    """
    serializer = PackageChangeSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    assignment = PackageAssignmentResolver()
    package = _resolve_package(assignment, data.get('packageId'), data.get('packageType'))
    student, payment = DebtLedger(assignment=assignment).apply_package_change(
        pk,
        package,
        initial_payment=data.get('initialPayment'),
        note=data.get('note'),
        actor=request.user,
    )
    response = StudentSerializer(student).data
    response['paymentId'] = payment.id if payment else None
    return Response(response, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsManager])
def manager_student_payments_view(request, pk):
    """
    GET /api/manager/students/{id}/payments
    Payment history, newest first.
    """
    payments = DebtLedger().payment_history(pk)
    return Response(PaymentSerializer(payments, many=True).data)
