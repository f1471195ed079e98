"""
Base settings for the neuroevolution project.

Environment-specific modules (development, test) import everything from
here and override what they need.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'insecure-neuro-development-key')

DEBUG = False

ALLOWED_HOSTS = []

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'apps.neuro',
]

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

USE_TZ = True
TIME_ZONE = 'UTC'

# Logging
NEURO_LOG_LEVEL = os.environ.get('NEURO_LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '{asctime} {levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        'apps.neuro': {
            'handlers': ['console'],
            'level': NEURO_LOG_LEVEL,
            'propagate': False,
        },
    },
}

# Neuroevolution defaults (keys map to TrainerConfig fields)
NEUROEVOLUTION = {
    'POPULATION_SIZE': 256,
    'LAYER0': 6,
    'LAYER1': 24,
    'LAYER2': 3,
    'ACTIVATION': 'tanh_approx',
    'CYCLE_TIME': 5.0,
    'FIXED_DT': 0.02,
    'MODE': 'realtime',
    'BATCH_TICKS': 10,
    'UPDATE_OPERATORS': ('lerp', 'mutate'),
    'COPY_RATE': 0.5,
    'MUTATE_RATE': 0.1,
    'EVOLVE_RATE': 0.5,
    'ACCEPT_SLACK': 0.1,
    'REJECT_SLACK': 1.0,
    'WORKERS': None,
    'SEED': None,
}
