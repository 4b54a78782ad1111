"""
Manager payment API.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsManager
from payments.serializers import PaymentCreateSerializer
from payments.services.ledger import DebtLedger


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsManager])
def manager_payment_create_view(request):
    """
    POST /api/manager/payments
    Body: { studentId, amount, note? }
    Returns: { newDebt, appliedAmount, paymentId, receiptNo }
    Overpayment clamps debt at 0; the full amount is still recorded.
    """
    serializer = PaymentCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    payment, new_debt = DebtLedger().apply_payment(
        data['studentId'], data['amount'], actor=request.user, note=data.get('note'),
    )
    return Response({
        'studentId': data['studentId'],
        'newDebt': float(new_debt),
        'appliedAmount': float(payment.amount),
        'paymentId': payment.id,
        'receiptNo': payment.receipt_no,
    }, status=status.HTTP_201_CREATED)
