"""
Utility functions for roster display.
"""
from decimal import Decimal

LOW_LESSONS_THRESHOLD = 2
WARN_LESSONS_THRESHOLD = 4


def get_row_flag(student):
    """
    Highlight for the teacher's roster row.
    debt > 0 -> 'debt', remaining < 2 -> 'low', remaining < 4 -> 'warn', else ''.
    Untracked students (remaining_lessons None) only ever get the debt flag.
    """
    if (student.debt or Decimal('0')) > 0:
        return 'debt'
    remaining = student.remaining_lessons
    if remaining is None:
        return ''
    if remaining < LOW_LESSONS_THRESHOLD:
        return 'low'
    if remaining < WARN_LESSONS_THRESHOLD:
        return 'warn'
    return ''
