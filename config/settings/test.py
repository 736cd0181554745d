"""Test settings: in-memory database and fast password hashing."""

from .base import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

BOOKING_CURRENCY = 'USD'
BOOKING_REFERENCE_PREFIX = 'BOOK'

LOGGING["root"]["level"] = "ERROR"  # noqa: F405
