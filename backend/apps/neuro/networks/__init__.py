"""
Controller network infrastructure.

This module provides:
- Network: fixed three-layer network with in-place parameter operators
- Activation functions (rational tanh approximation and exact tanh)
- Preset topologies
"""
from .activations import ACTIVATIONS, get_activation, tanh_approx, tanh_exact
from .network import Network, PARAMETER_RANGE
from .topologies import PRESETS, Topology, follow_topology

__all__ = [
    # Network
    'Network',
    'PARAMETER_RANGE',

    # Activations
    'ACTIVATIONS',
    'get_activation',
    'tanh_approx',
    'tanh_exact',

    # Topologies
    'Topology',
    'PRESETS',
    'follow_topology',
]
