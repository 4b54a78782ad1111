"""
Package assignment: attach a catalog package to a student and freeze its
code/price on the student row.

Assignment is a swap, not a top-up: remaining_lessons is reset to the new
package's lessons_count. Debt is handled by payments.services.ledger.DebtLedger.
"""
import logging

from catalog.models import LessonPackage, PackageType
from core.errors import NotFoundError
from core.utils import system_clock

logger = logging.getLogger(__name__)

# LESSONS_12 prefers the MWF schedule, then TTS, then any LESSONS_12* code.
_COARSE_TYPE_CODES = {
    PackageType.LESSONS_24: ["LESSONS_24"],
    PackageType.LESSONS_12: ["LESSONS_12_MWF", "LESSONS_12_TTS"],
}
_COARSE_TYPE_PREFIXES = {
    PackageType.LESSONS_12: "LESSONS_12",
}


class PackageAssignmentResolver:
    """Resolves catalog packages and writes the frozen snapshot onto a Student."""

    def __init__(self, clock=system_clock):
        self.clock = clock

    def get_package(self, package_id):
        try:
            return LessonPackage.objects.get(id=package_id)
        except (LessonPackage.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(f"Package {package_id} not found", code="package_not_found")

    def resolve_for_coarse_type(self, package_type):
        """
        Map a coarse PackageType to a catalog package.
        Exact code match first, then code prefix. UNLIMITED, None and unknown
        values resolve to None.
        """
        if not package_type:
            return None
        try:
            package_type = PackageType(package_type)
        except ValueError:
            logger.warning(f"[package] Unknown package type {package_type!r}, no package resolved")
            return None

        for code in _COARSE_TYPE_CODES.get(package_type, []):
            package = LessonPackage.objects.filter(code=code).first()
            if package is not None:
                return package

        prefix = _COARSE_TYPE_PREFIXES.get(package_type)
        if prefix:
            return LessonPackage.objects.filter(code__startswith=prefix).order_by("code").first()
        return None

    def assign(self, student, package, save=True):
        """
        Set the package reference and overwrite package_code/package_price.
        If the package declares lessons_count, remaining_lessons is reset to it
        (prior remaining lessons are discarded).
        Caller owns the transaction; with save=False the caller persists.
        """
        previous_code = student.package_code
        previous_remaining = student.remaining_lessons

        student.lesson_package = package
        student.package_code = package.code
        student.package_price = package.price
        if package.lessons_count is not None:
            student.remaining_lessons = package.lessons_count
        student.updated_at = self.clock()

        logger.info(
            f"[package] Student {student.pk}: {previous_code} -> {package.code}, "
            f"remaining {previous_remaining} -> {student.remaining_lessons}"
        )
        if save:
            student.save(update_fields=[
                "lesson_package", "package_code", "package_price", "remaining_lessons", "updated_at",
            ])
        return student
