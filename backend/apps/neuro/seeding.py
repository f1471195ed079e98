"""
Reproducible random streams.

Every stochastic decision in a run is drawn from a generator whose seed
is derived from (run seed, stream, ...keys). Derived seeds do not depend
on the order in which individuals are processed, so a parallel fan-out
produces the same parameters as a sequential one.
"""
from typing import Optional

import numpy as np
import torch

# Stream identifiers
STREAM_INIT = 0
STREAM_UPDATE = 1
STREAM_ENVIRONMENT = 2


def fresh_entropy() -> int:
    """Return a new run seed drawn from the OS."""
    return int(np.random.SeedSequence().entropy)


def derive_seed(root: int, *keys: int) -> int:
    """
    Derive a 63-bit seed from a root seed and a path of integer keys.

    Args:
        root: Run seed (any non-negative integer).
        keys: Stream id followed by e.g. generation and individual id.

    Returns:
        Seed suitable for torch.Generator.manual_seed.
    """
    sequence = np.random.SeedSequence([root, *keys])
    return int(sequence.generate_state(1, dtype=np.uint64)[0] >> np.uint64(1))


def make_generator(seed: Optional[int] = None) -> torch.Generator:
    """Create a CPU torch generator, seeded from the OS when seed is None."""
    generator = torch.Generator()
    if seed is None:
        generator.seed()
    else:
        generator.manual_seed(seed)
    return generator
