"""
Django settings for the journal insight engine.

The engine has no views, models or database of its own; Django hosts the
app registry, settings-driven configuration and logging.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'journal-insights-local-only')

DEBUG = os.environ.get('DJANGO_DEBUG', 'False').lower() in ('true', '1', 'yes')

ALLOWED_HOSTS = []

INSTALLED_APPS = [
    'journal.apps.JournalConfig',
]

DATABASES = {}

USE_TZ = True
TIME_ZONE = 'UTC'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Insight engine overrides; keys are upper-case InsightContext field names
JOURNAL_INSIGHTS = {
    'CACHE_TTL_MS': 5 * 60 * 1000,
    'SLOW_COMPUTE_THRESHOLD_MS': 200,
}

LOG_LEVEL = os.environ.get('JOURNAL_LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'structured': {
            '()': 'journal.utils.logging_utils.StructuredFormatter',
        },
        'simple': {
            'format': '{levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'structured' if not DEBUG else 'simple',
        },
    },
    'loggers': {
        'journal': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': True,
        },
    },
}
