"""
Error taxonomy for the neuroevolution core.

- ShapeMismatch: operator across networks of different topology.
  Fatal to that operation only; the trainer skips and logs it.
- Uninitialized: a network was used before it was configured.
  Indicates a lifecycle bug and always propagates.
- DegenerateScore: an individual produced a NaN/infinite fitness.
  Recovered locally by recording the worst possible score.
"""


class NeuroError(Exception):
    """Base class for neuroevolution errors."""


class ShapeMismatch(NeuroError, ValueError):
    """Raised when two networks (or a network and a vector) disagree on shape."""

    def __init__(self, message: str, expected=None, actual=None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class Uninitialized(NeuroError, RuntimeError):
    """Raised when a network is stepped or mutated before configure()."""


class DegenerateScore(NeuroError, ArithmeticError):
    """Raised by environments that cannot produce a finite score."""

    def __init__(self, individual_id: int, score: float = float('nan')):
        super().__init__(f"Individual {individual_id} produced a degenerate score: {score}")
        self.individual_id = individual_id
        self.score = score
