"""
Debt ledger: the only writer of Student.debt.

- initial_debt(price, paid) = max(0, price - paid)
- package change: debt is additive, new_debt = previous_debt + initial_debt(new price, paid)
- payment: new_debt = max(0, debt - amount); overpayment is not kept as credit
Debt update and Payment append always commit together in one transaction.
"""
import logging
from decimal import Decimal, InvalidOperation

from django.db import transaction

from catalog.services.assignment import PackageAssignmentResolver
from core.errors import ValidationError
from core.utils import system_clock
from payments.models import Payment
from students.services.roster import get_student, lock_student

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")
CENT = Decimal("0.01")


def to_amount(value, field="amount", allow_zero=False):
    """
    Parse a money value (str/int/float/Decimal) into a 2-place Decimal.
    None and '' count as zero when allow_zero, otherwise they are rejected.
    """
    if value in (None, ""):
        if allow_zero:
            return ZERO
        raise ValidationError(f"{field} is required", code="invalid_amount")
    try:
        amount = Decimal(str(value)).quantize(CENT)
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"{field} must be a number", code="invalid_amount")
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a number", code="invalid_amount")
    if amount < 0 or (amount == 0 and not allow_zero):
        raise ValidationError(f"{field} must be greater than 0", code="invalid_amount")
    return amount


class DebtLedger:

    def __init__(self, clock=system_clock, assignment=None):
        self.clock = clock
        self.assignment = assignment or PackageAssignmentResolver(clock=clock)

    @staticmethod
    def initial_debt(price, initial_payment=None):
        """Debt for a freshly assigned package: price minus what was paid up front, floored at 0."""
        price = Decimal(str(price or 0))
        paid = Decimal(str(initial_payment or 0))
        return max(ZERO, price - paid).quantize(CENT)

    def append_payment(self, student, amount, actor=None, note=None):
        payment = Payment.objects.create(
            student=student,
            amount=amount,
            paid_at=self.clock(),
            paid_by=actor,
            note=note or None,
        )
        logger.info(f"[payment] Recorded {payment.receipt_no}: student={student.pk}, amount={amount}")
        return payment

    def _save_debt(self, student, extra_fields=()):
        student.updated_at = self.clock()
        student.save(update_fields=["debt", "updated_at", *extra_fields])

    def apply_payment(self, student_id, amount, actor=None, note=None):
        """
        Subtract a payment from the student's debt (clamped at zero) and append
        a Payment row. Returns (payment, new_debt).
        """
        amount = to_amount(amount)
        with transaction.atomic():
            student = lock_student(student_id)
            current_debt = student.debt or ZERO
            new_debt = max(ZERO, current_debt - amount)
            student.debt = new_debt
            self._save_debt(student)
            payment = self.append_payment(student, amount, actor=actor, note=note)

        logger.info(f"[payment] Student {student.pk}: debt {current_debt} -> {new_debt} (paid {amount})")
        return payment, new_debt

    def apply_package_change(self, student_id, package, initial_payment=None, note=None, actor=None):
        """
        (Re)assign a package. Unpaid debt from the previous package is carried
        forward: new_debt = previous_debt + max(0, package.price - initial_payment).
        A positive initial payment is also appended to the payment ledger; it is
        already netted against the price and does not reduce the debt twice.
        Returns (student, payment_or_None).
        """
        paid = to_amount(initial_payment, field="initialPayment", allow_zero=True)
        with transaction.atomic():
            student = lock_student(student_id)
            previous_debt = student.debt or ZERO
            added_debt = self.initial_debt(package.price, paid)
            student.debt = previous_debt + added_debt
            self.assignment.assign(student, package, save=False)
            self._save_debt(student, extra_fields=(
                "lesson_package", "package_code", "package_price", "remaining_lessons",
            ))
            payment = None
            if paid > 0:
                payment = self.append_payment(
                    student, paid, actor=actor, note=note or f"Initial payment for {package.code}",
                )

        logger.info(
            f"[package] Student {student.pk}: package {package.code}, debt {previous_debt} + {added_debt} = {student.debt}"
        )
        return student, payment

    def payment_history(self, student_id):
        """Append-only payment ledger for a student, most recent first."""
        student = get_student(student_id)
        return Payment.objects.filter(student=student).select_related("paid_by").order_by("-paid_at", "-id")
