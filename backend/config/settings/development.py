"""
Development settings for the neuroevolution project.
"""
from .base import *

DEBUG = True

ALLOWED_HOSTS = ['localhost', '127.0.0.1', '0.0.0.0']

# Verbose trainer output while developing
LOGGING['loggers']['apps.neuro']['level'] = os.environ.get('NEURO_LOG_LEVEL', 'DEBUG')

# Hyper speed by default so a local run shows progress quickly
NEUROEVOLUTION = {
    **NEUROEVOLUTION,
    'MODE': 'batched',
    'BATCH_TICKS': 25,
}
