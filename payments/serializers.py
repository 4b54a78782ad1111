"""
Serializers for payments app
"""
from rest_framework import serializers
from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    """Payment ledger row. Amount as float for frontend."""
    studentId = serializers.IntegerField(source='student_id', read_only=True)
    paidAt = serializers.DateTimeField(source='paid_at', read_only=True)
    paidBy = serializers.IntegerField(source='paid_by_id', read_only=True, allow_null=True)
    receiptNo = serializers.CharField(source='receipt_no', read_only=True)

    class Meta:
        model = Payment
        fields = ['id', 'studentId', 'amount', 'paidAt', 'paidBy', 'note', 'receiptNo']
        read_only_fields = fields

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if data.get('amount') is not None:
            data['amount'] = float(data['amount'])
        return data


class PaymentCreateSerializer(serializers.Serializer):
    """Manager payment input: {studentId, amount, note}."""
    studentId = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    note = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError('Amount must be greater than 0')
        return value
