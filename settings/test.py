"""
Test-specific Django settings.
"""
# Inherit from base settings
from .base import *  # pylint:disable=W0614,W0401

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': 'formreview_test',
    },
}

PASSWORD_HASHERS = (
    'django.contrib.auth.hashers.MD5PasswordHasher',
)

LOGGING['loggers']['formreview']['level'] = 'WARNING'
