"""
Preset topologies for controller networks.

A topology is the triple of layer sizes (input, hidden, output). The
presets mirror the configurations the controllers are usually trained
with; anything else can be built with Topology directly or parsed from
its 'L0-L1-L2' string form.
"""
from numbers import Integral
from typing import Dict, NamedTuple


class Topology(NamedTuple):
    """Layer sizes of a three-layer network."""
    layer0: int
    layer1: int
    layer2: int

    def validate(self) -> 'Topology':
        """
        Check that every layer has at least one unit.

        Returns:
            self, for chaining.

        Raises:
            ValueError: If any layer size is not a positive integer.
        """
        for name, size in zip(self._fields, self):
            if isinstance(size, bool) or not isinstance(size, Integral) or size <= 0:
                raise ValueError(f"{name} must be a positive integer, got {size!r}")
        return self

    @property
    def num_params(self) -> int:
        """Total number of biases and weights."""
        l0, l1, l2 = self
        return l0 + l1 + l2 + l1 * l0 + l2 * l1

    def __str__(self) -> str:
        return f"{self.layer0}-{self.layer1}-{self.layer2}"

    @classmethod
    def parse(cls, text: str) -> 'Topology':
        """
        Parse a topology from its 'L0-L1-L2' string form.

        Raises:
            ValueError: If the string is malformed.
        """
        parts = text.strip().split('-')
        if len(parts) != 3:
            raise ValueError(f"Topology must look like '6-24-3', got {text!r}")
        try:
            sizes = [int(part) for part in parts]
        except ValueError:
            raise ValueError(f"Topology must look like '6-24-3', got {text!r}") from None
        return cls(*sizes).validate()


def follow_topology(hidden_size: int = 24, brake: bool = False) -> Topology:
    """
    Topology for the follow-the-target task.

    Inputs are the agent position and the target position; outputs are
    a 3D force and, optionally, a braking scalar.

    Args:
        hidden_size: Number of hidden units.
        brake: If True, add a fourth output used as a brake.
    """
    return Topology(6, hidden_size, 4 if brake else 3).validate()


PRESETS: Dict[str, Topology] = {
    'tiny': Topology(1, 1, 1),
    'small': Topology(4, 8, 6),
    'wide': Topology(8, 128, 1),
    'follow': follow_topology(),
    'follow_brake': follow_topology(brake=True),
    'stress': Topology(1024, 1024, 1),
}
