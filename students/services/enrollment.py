"""
Student enrollment: create the student row, attach a package, open the debt
and record the registration payment in one transaction.
"""
import logging

from django.db import transaction

from catalog.services.assignment import PackageAssignmentResolver
from core.utils import system_clock
from payments.services.ledger import DebtLedger, ZERO, to_amount
from students.models import Student

logger = logging.getLogger(__name__)


def student_code_for(student_id):
    return f"S{100000 + student_id}"


class StudentEnrollment:

    def __init__(self, clock=system_clock, assignment=None, ledger=None):
        self.clock = clock
        self.assignment = assignment or PackageAssignmentResolver(clock=clock)
        self.ledger = ledger or DebtLedger(clock=clock, assignment=self.assignment)

    def enroll(self, first_name, last_name, teacher=None, phone=None, package=None,
               package_type=None, time_slot=None, needs_book=False,
               initial_payment=None, note=None, actor=None):
        """
        Create a student. The package is either given directly or resolved from
        a legacy coarse type; without a package the student is untracked
        (remaining_lessons None) and owes nothing.
        Returns (student, payment_or_None).
        """
        paid = to_amount(initial_payment, field="initialPayment", allow_zero=True)
        if package is None and package_type:
            package = self.assignment.resolve_for_coarse_type(package_type)

        now = self.clock()
        with transaction.atomic():
            student = Student(
                first_name=(first_name or "").strip(),
                last_name=(last_name or "").strip(),
                phone=phone,
                teacher=teacher,
                time_slot=time_slot,
                needs_book=bool(needs_book),
                created_at=now,
                updated_at=now,
            )
            if package is not None:
                self.assignment.assign(student, package, save=False)
                student.debt = self.ledger.initial_debt(package.price, paid)
            else:
                student.package_code = None
                student.package_price = ZERO
                student.debt = ZERO
            student.save()

            student.student_code = student_code_for(student.pk)
            student.save(update_fields=["student_code"])

            payment = None
            if paid > 0:
                payment = self.ledger.append_payment(
                    student, paid, actor=actor,
                    note=note or (f"Initial payment for {package.code}" if package else "Initial payment"),
                )

        logger.info(
            f"[enroll] Created student id={student.pk} code={student.student_code} "
            f"package={package.code if package else 'none'} debt={student.debt}"
        )
        return student, payment
