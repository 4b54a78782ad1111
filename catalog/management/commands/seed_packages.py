"""
Seed the lesson package catalog (idempotent: existing codes are left as-is).
Usage: python manage.py seed_packages
"""
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from catalog.models import LessonPackage

DEFAULT_PACKAGES = [
    # code, title, price, schedule_code, lessons_count
    ("LESSONS_12_MWF", "12 lessons (Mon/Wed/Fri)", Decimal("3400"), "MWF", 12),
    ("LESSONS_12_TTS", "12 lessons (Tue/Thu/Sat)", Decimal("3000"), "TTS", 12),
    ("LESSONS_6_MON_SAT", "6 lessons/week (Mon-Sat)", Decimal("5400"), "MON_SAT", 24),
    ("LESSONS_24", "24 lessons", Decimal("5400"), "CUSTOM", 24),
]


class Command(BaseCommand):
    help = 'Create the default lesson packages if they are missing.'

    def handle(self, *args, **options):
        created_count = 0
        with transaction.atomic():
            for code, title, price, schedule_code, lessons_count in DEFAULT_PACKAGES:
                _, created = LessonPackage.objects.get_or_create(
                    code=code,
                    defaults={
                        'title': title,
                        'price': price,
                        'schedule_code': schedule_code,
                        'lessons_count': lessons_count,
                    },
                )
                if created:
                    created_count += 1
                    self.stdout.write(self.style.SUCCESS(f'Created package {code}'))
                else:
                    self.stdout.write(f'Package {code} exists, skipped')
        self.stdout.write(self.style.SUCCESS(f'Done: {created_count} package(s) created'))
