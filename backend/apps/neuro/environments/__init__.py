"""
Environments the trainer evaluates controllers against.

This module provides:
- BaseEnvironment: observe / actuate / advance / score contract
- FollowTargetEnvironment: point masses that must reach a target
"""
from .base import BaseEnvironment
from .follow import FollowTargetEnvironment

__all__ = [
    'BaseEnvironment',
    'FollowTargetEnvironment',
]
