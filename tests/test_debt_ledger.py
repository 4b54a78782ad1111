"""
DebtLedger: initial debt, payments clamped at zero, additive package change.
"""
from decimal import Decimal

from django.test import TestCase

from core.errors import NotFoundError, ValidationError
from payments.models import Payment
from payments.services.ledger import DebtLedger
from students.services.enrollment import StudentEnrollment

from .helpers import FIXED_NOW, fixed_clock, make_manager, make_package, make_student, make_teacher


class DebtLedgerTests(TestCase):
    def setUp(self):
        self.teacher = make_teacher()
        self.manager = make_manager()
        self.mwf = make_package("LESSONS_12_MWF", "3400.00", "MWF", 12)
        self.big = make_package("LESSONS_24", "5400.00", "CUSTOM", 24)
        self.ledger = DebtLedger(clock=fixed_clock)

    def test_initial_debt(self):
        self.assertEqual(DebtLedger.initial_debt(Decimal("3400"), Decimal("1000")), Decimal("2400.00"))
        self.assertEqual(DebtLedger.initial_debt(Decimal("3400"), Decimal("5000")), Decimal("0.00"))
        self.assertEqual(DebtLedger.initial_debt(Decimal("3400"), None), Decimal("3400.00"))

    def test_enrollment_then_payments_down_to_zero(self):
        enrollment = StudentEnrollment(clock=fixed_clock)
        student, payment = enrollment.enroll(
            "Nigar", "Mammadova", teacher=self.teacher, package=self.mwf,
            initial_payment="1000", actor=self.manager,
        )
        self.assertEqual(student.debt, Decimal("2400.00"))
        self.assertEqual(payment.amount, Decimal("1000.00"))

        _, debt = self.ledger.apply_payment(student.id, "2000", actor=self.manager)
        self.assertEqual(debt, Decimal("400.00"))

        # Overpayment clamps the debt; the full amount is still on the ledger
        last, debt = self.ledger.apply_payment(student.id, "1000", actor=self.manager)
        self.assertEqual(debt, Decimal("0.00"))
        self.assertEqual(last.amount, Decimal("1000.00"))
        student.refresh_from_db()
        self.assertEqual(student.debt, Decimal("0.00"))
        self.assertEqual(Payment.objects.filter(student=student).count(), 3)

    def test_payment_is_stamped_by_clock(self):
        student = make_student(self.teacher, debt="100.00")
        payment, _ = self.ledger.apply_payment(student.id, "50", actor=self.manager, note="cash")
        self.assertEqual(payment.paid_at, FIXED_NOW)
        self.assertEqual(payment.paid_by, self.manager)
        self.assertTrue(payment.receipt_no.startswith("PAY-"))
        student.refresh_from_db()
        self.assertEqual(student.updated_at, FIXED_NOW)

    def test_invalid_amounts_change_nothing(self):
        student = make_student(self.teacher, debt="100.00")
        for amount in ("0", "-5", "abc", None):
            with self.assertRaises(ValidationError) as ctx:
                self.ledger.apply_payment(student.id, amount)
            self.assertEqual(ctx.exception.code, "invalid_amount")
        student.refresh_from_db()
        self.assertEqual(student.debt, Decimal("100.00"))
        self.assertFalse(Payment.objects.exists())

    def test_payment_for_unknown_student(self):
        with self.assertRaises(NotFoundError):
            self.ledger.apply_payment(999999, "10")

    def test_package_change_carries_previous_debt(self):
        student = make_student(self.teacher, remaining_lessons=3, debt="500.00")
        student, payment = self.ledger.apply_package_change(student.id, self.big, initial_payment=0)
        self.assertIsNone(payment)
        student.refresh_from_db()
        self.assertEqual(student.debt, Decimal("5900.00"))
        self.assertEqual(student.remaining_lessons, 24)
        self.assertEqual(student.package_code, "LESSONS_24")
        self.assertEqual(student.package_price, Decimal("5400.00"))

    def test_package_change_with_initial_payment(self):
        student = make_student(self.teacher, debt="0.00")
        student, payment = self.ledger.apply_package_change(
            student.id, self.mwf, initial_payment="400", actor=self.manager,
        )
        self.assertEqual(student.debt, Decimal("3000.00"))
        self.assertEqual(payment.amount, Decimal("400.00"))
        self.assertEqual(Payment.objects.filter(student=student).count(), 1)

    def test_payments_are_append_only(self):
        student = make_student(self.teacher, debt="100.00")
        payment, _ = self.ledger.apply_payment(student.id, "10")
        payment.note = "edited"
        with self.assertRaises(ValueError):
            payment.save()
        with self.assertRaises(ValueError):
            payment.delete()

    def test_payment_history_newest_first(self):
        student = make_student(self.teacher, debt="100.00")
        first, _ = self.ledger.apply_payment(student.id, "10")
        second, _ = self.ledger.apply_payment(student.id, "20")
        history = list(self.ledger.payment_history(student.id))
        self.assertEqual([p.id for p in history], [second.id, first.id])
