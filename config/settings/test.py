"""
Test settings: in-memory SQLite, fast password hashing, quiet logs.
"""
from .base import *

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

ATTENDANCE_MIN_DATE = '2025-12-01'

LOGGING['root']['level'] = 'WARNING'
