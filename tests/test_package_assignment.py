"""
PackageAssignmentResolver, catalog seed and student enrollment.
"""
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from catalog.models import LessonPackage, PackageType
from catalog.services.assignment import PackageAssignmentResolver
from core.errors import NotFoundError
from students.services.enrollment import StudentEnrollment, student_code_for

from .helpers import FIXED_NOW, fixed_clock, make_manager, make_package, make_student, make_teacher


class PackageResolutionTests(TestCase):
    def setUp(self):
        call_command("seed_packages", stdout=StringIO())
        self.resolver = PackageAssignmentResolver(clock=fixed_clock)

    def test_seed_is_idempotent(self):
        call_command("seed_packages", stdout=StringIO())
        self.assertEqual(LessonPackage.objects.count(), 4)
        mwf = LessonPackage.objects.get(code="LESSONS_12_MWF")
        self.assertEqual(mwf.price, Decimal("3400.00"))
        self.assertEqual(mwf.lessons_count, 12)

    def test_lessons_24_resolves_exact_code(self):
        self.assertEqual(self.resolver.resolve_for_coarse_type(PackageType.LESSONS_24).code, "LESSONS_24")

    def test_lessons_12_prefers_mwf(self):
        self.assertEqual(self.resolver.resolve_for_coarse_type("LESSONS_12").code, "LESSONS_12_MWF")

    def test_lessons_12_falls_back_to_tts_then_prefix(self):
        LessonPackage.objects.filter(code="LESSONS_12_MWF").delete()
        self.assertEqual(self.resolver.resolve_for_coarse_type("LESSONS_12").code, "LESSONS_12_TTS")
        LessonPackage.objects.filter(code="LESSONS_12_TTS").delete()
        make_package("LESSONS_12_EVENING", "2800.00", "CUSTOM", 12)
        self.assertEqual(self.resolver.resolve_for_coarse_type("LESSONS_12").code, "LESSONS_12_EVENING")

    def test_unlimited_and_unknown_resolve_to_none(self):
        self.assertIsNone(self.resolver.resolve_for_coarse_type(PackageType.UNLIMITED))
        self.assertIsNone(self.resolver.resolve_for_coarse_type("WEEKLY"))
        self.assertIsNone(self.resolver.resolve_for_coarse_type(None))

    def test_get_package_not_found(self):
        with self.assertRaises(NotFoundError) as ctx:
            self.resolver.get_package(999999)
        self.assertEqual(ctx.exception.code, "package_not_found")


class PackageAssignTests(TestCase):
    def setUp(self):
        self.teacher = make_teacher()
        self.resolver = PackageAssignmentResolver(clock=fixed_clock)

    def test_assign_resets_remaining_and_freezes_snapshot(self):
        package = make_package("LESSONS_12_TTS", "3000.00", "TTS", 12)
        student = make_student(self.teacher, remaining_lessons=2)
        self.resolver.assign(student, package)
        student.refresh_from_db()
        self.assertEqual(student.remaining_lessons, 12)
        self.assertEqual(student.package_code, "LESSONS_12_TTS")
        self.assertEqual(student.updated_at, FIXED_NOW)

        # Later catalog edits do not touch the student's snapshot
        package.price = Decimal("3900.00")
        package.save()
        student.refresh_from_db()
        self.assertEqual(student.package_price, Decimal("3000.00"))

    def test_package_without_count_keeps_remaining(self):
        package = make_package("SPECIAL", "100.00", "CUSTOM", None)
        student = make_student(self.teacher, remaining_lessons=5)
        self.resolver.assign(student, package)
        student.refresh_from_db()
        self.assertEqual(student.remaining_lessons, 5)
        self.assertEqual(student.package_code, "SPECIAL")


class StudentEnrollmentTests(TestCase):
    def setUp(self):
        self.teacher = make_teacher()
        self.manager = make_manager()
        call_command("seed_packages", stdout=StringIO())
        self.enrollment = StudentEnrollment(clock=fixed_clock)

    def test_enroll_by_coarse_type(self):
        student, payment = self.enrollment.enroll(
            "Murad", "Huseynov", teacher=self.teacher, package_type="LESSONS_24", actor=self.manager,
        )
        self.assertIsNone(payment)
        self.assertEqual(student.package_code, "LESSONS_24")
        self.assertEqual(student.remaining_lessons, 24)
        self.assertEqual(student.debt, Decimal("5400.00"))
        self.assertEqual(student.student_code, student_code_for(student.id))
        self.assertEqual(student.created_at, FIXED_NOW)

    def test_enroll_without_package_is_untracked(self):
        student, payment = self.enrollment.enroll("Leyla", "Karimova", teacher=self.teacher)
        self.assertIsNone(payment)
        self.assertIsNone(student.remaining_lessons)
        self.assertEqual(student.debt, Decimal("0.00"))

    def test_student_code_format(self):
        self.assertEqual(student_code_for(7), "S100007")
