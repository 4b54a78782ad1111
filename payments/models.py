"""
Payment models
"""
import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Payment(models.Model):
    """
    Payment record. Append-only: once saved, a payment is never edited or deleted;
    corrections are made with a new payment.
    """
    student = models.ForeignKey(
        'students.Student',
        on_delete=models.PROTECT,
        related_name='payments',
    )
    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(0.01)],
    )
    paid_at = models.DateTimeField(default=timezone.now, db_index=True)
    paid_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='recorded_payments',
    )
    note = models.TextField(blank=True, null=True)
    receipt_no = models.CharField(max_length=50, unique=True, blank=True, null=True)

    class Meta:
        db_table = 'payments'
        verbose_name = 'Payment'
        verbose_name_plural = 'Payments'
        ordering = ['-paid_at', '-id']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name='payment_amount_positive',
            ),
        ]
        indexes = [
            models.Index(fields=['student', 'paid_at'], name='payments_student_paid_idx'),
        ]

    def __str__(self):
        return f"Payment {self.receipt_no or self.id} - {self.student} - {self.amount}"

    def save(self, *args, **kwargs):
        """Generate receipt number; refuse to rewrite an existing payment."""
        if self.pk is not None and not self._state.adding:
            raise ValueError("Payments are append-only and cannot be modified")
        if not self.receipt_no:
            self.receipt_no = f"PAY-{uuid.uuid4().hex[:8].upper()}"
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Payments are append-only and cannot be deleted")
