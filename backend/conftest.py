"""
Pytest configuration and shared fixtures for the neuroevolution project.

This module provides fixtures for:
- Seeded random sources (torch and numpy)
- Django settings overrides for the trainer
"""
import numpy as np
import pytest
import torch


@pytest.fixture
def generator():
    """Return a seeded torch generator."""
    g = torch.Generator()
    g.manual_seed(1234)
    return g


@pytest.fixture
def rng():
    """Return a seeded numpy generator."""
    return np.random.default_rng(1234)


@pytest.fixture
def neuro_settings(settings):
    """Return Django settings with a fresh copy of NEUROEVOLUTION to edit."""
    settings.NEUROEVOLUTION = dict(settings.NEUROEVOLUTION)
    return settings
