"""
Base settings for formreview.
"""

import os

DEBUG = True

ADMINS = (
    ('admin', 'admin'),
)

MANAGERS = ADMINS

DEFAULT_AUTO_FIELD = "django.db.models.AutoField"
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',  # Row locks need 'postgresql' or 'mysql' in production.
        'NAME': 'formreviewdb',
        'USER': '',
        'PASSWORD': '',
        'HOST': '',
        'PORT': '',
    }
}

TIME_ZONE = 'UTC'

LANGUAGE_CODE = 'en-us'

SITE_ID = 1

USE_I18N = True

USE_TZ = True

STATIC_URL = '/static/'

# Make this unique, and don't share it with anybody.
SECRET_KEY = os.environ.get('FORMREVIEW_SECRET_KEY', 'formreview-insecure-development-key')

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
                'django.template.context_processors.request',
            ],
            'debug': DEBUG,
        },
    },
]

MIDDLEWARE = (
    'django.middleware.common.CommonMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'simple_history.middleware.HistoryRequestMiddleware',
)

ROOT_URLCONF = 'urls'

INSTALLED_APPS = (
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'django.contrib.admin',

    'rest_framework',
    'simple_history',

    # formreview apps
    'formreview.organizations',
    'formreview.forms',
    'formreview.submissions',
    'formreview.review',
    'formreview.events',
)

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'default_loc_mem',
    },
}

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'console': {
            'level': 'INFO',
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'formatters': {
        'simple': {
            'format': '%(asctime)s %(name)s [%(levelname)s] %(message)s'
        }
    },
    'loggers': {
        'formreview': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
    },
}

# disable indexing on history_date
SIMPLE_HISTORY_DATE_INDEX = False

# Connection the review components read and write through. Organizations,
# forms and submissions always use the default connection, and Django does
# not relate rows across databases, so this must name a connection to the
# same database.
FORMREVIEW_DATABASE_ALIAS = 'default'

# How often a lost race to create a reviewer's review is retried as an update
FORMREVIEW_REVIEW_CREATE_RETRIES = 1

# Review comments are truncated to this many characters
FORMREVIEW_MAX_COMMENT_SIZE = 1024 * 100

# Default page size of the review queue (at most 100)
FORMREVIEW_REVIEW_QUEUE_PAGE_SIZE = 20

# Rubric versions never change, so they can stay cached for a long time
FORMREVIEW_RUBRIC_CACHE_TIMEOUT = 60 * 60 * 8
