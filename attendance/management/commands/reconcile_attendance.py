"""
Auto-fill missing attendance for one teacher's roster on a date.
Unmarked active students get an EXCUSED record (no balance change); existing
records are left untouched.
Usage: python manage.py reconcile_attendance <teacher_id> [--date YYYY-MM-DD]
"""
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from attendance.services.reconcile import BatchReconciliationCoordinator
from core.errors import ServiceError
from core.utils import parse_iso_date

User = get_user_model()


class Command(BaseCommand):
    help = "Give every unmarked student of a teacher an EXCUSED record for the date."

    def add_arguments(self, parser):
        parser.add_argument("teacher_id", type=int, help="Teacher user id")
        parser.add_argument("--date", help="Lesson date YYYY-MM-DD (default: today)")

    def handle(self, *args, **options):
        teacher = User.objects.filter(id=options["teacher_id"], role=User.ROLE_TEACHER).first()
        if teacher is None:
            raise CommandError(f"Teacher id={options['teacher_id']} not found")

        try:
            lesson_date = parse_iso_date(options.get("date") or timezone.localdate())
            result = BatchReconciliationCoordinator().reconcile_day(teacher, lesson_date, [])
        except ServiceError as exc:
            raise CommandError(f"{exc.code}: {exc.detail}")

        if result.autofilled:
            self.stdout.write(self.style.SUCCESS(
                f"{lesson_date}: auto-filled {len(result.autofilled)} student(s): "
                f"{', '.join(str(sid) for sid in result.autofilled)}"
            ))
        else:
            self.stdout.write(f"{lesson_date}: nothing to fill")
