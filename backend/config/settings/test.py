"""
Test settings for the neuroevolution project.
"""
from .base import *

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

LOGGING['loggers']['apps.neuro']['level'] = 'WARNING'

# Small, fast, deterministic runs
NEUROEVOLUTION = {
    **NEUROEVOLUTION,
    'POPULATION_SIZE': 8,
    'LAYER1': 4,
    'CYCLE_TIME': 0.2,
    'FIXED_DT': 0.05,
    'MODE': 'batched',
    'BATCH_TICKS': 2,
    'WORKERS': 1,
    'SEED': 1234,
}
