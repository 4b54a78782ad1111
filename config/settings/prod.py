"""
Production settings
"""
from .base import *
from .database import get_database_config

DEBUG = False

# Production security settings
SECURE_SSL_REDIRECT = True
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'DENY'

# Production database (must be PostgreSQL); get_database_config raises if unset
DATABASES = {
    'default': get_database_config(env),
}
DATABASES['default'].setdefault('CONN_MAX_AGE', 60)
