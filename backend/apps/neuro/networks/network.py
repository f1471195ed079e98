"""
Fixed-topology three-layer controller network.

The network owns eight flat float32 buffers:
- bias0[L0], bias1[L1], bias2[L2]
- weights10[L1 * L0] (row i feeds hidden unit i), weights21[L2 * L1]
- state0[L0], state1[L1], state2[L2] (activations, rewritten every step)

Biases are applied per connection: every source activation has its own
layer bias added before it is multiplied by the weight, and the
destination unit's bias is added once to the weighted sum. This is not
the textbook form and trained controllers depend on it.

All operators work in place. Cross-network operators (lerp_towards,
evolve) only read the source network's buffers.
"""
from typing import Iterator, Optional, Sequence, Tuple, Union

import numpy as np
import torch

from ..exceptions import ShapeMismatch, Uninitialized
from .activations import get_activation
from .topologies import Topology

PARAMETER_RANGE = 0.5

ArrayLike = Union[Sequence[float], np.ndarray, torch.Tensor]


class Network:
    """
    Three-layer feedforward network trained by evolution.

    Attributes:
        layer0, layer1, layer2: Layer sizes (0 until configured).
        activation_name: Name of the activation in ACTIVATIONS.
        generator: Random source used when an operator is called
                   without an explicit generator.

    Example:
        net = Network(6, 24, 3, seed=7)
        net.randomize()
        net.set_inputs(observation)
        net.step()
        force = net.state2[:3]
    """

    PARAMETER_NAMES = ('bias0', 'bias1', 'bias2', 'weights10', 'weights21')
    STATE_NAMES = ('state0', 'state1', 'state2')

    def __init__(
        self,
        layer0: Optional[int] = None,
        layer1: Optional[int] = None,
        layer2: Optional[int] = None,
        activation: str = 'tanh_approx',
        seed: Optional[int] = None,
    ):
        """
        Create a network, configuring it if all layer sizes are given.

        Args:
            layer0: Input layer size.
            layer1: Hidden layer size.
            layer2: Output layer size.
            activation: Activation name ('tanh_approx' or 'tanh').
            seed: Seed for the owned generator. None seeds from the OS.
        """
        self.activation_name = activation
        self._activation = get_activation(activation)

        self.generator = torch.Generator()
        if seed is None:
            self.generator.seed()
        else:
            self.generator.manual_seed(seed)

        self.layer0 = 0
        self.layer1 = 0
        self.layer2 = 0

        self.bias0 = self.bias1 = self.bias2 = None
        self.state0 = self.state1 = self.state2 = None
        self.weights10 = self.weights21 = None

        sizes = (layer0, layer1, layer2)
        if all(size is not None for size in sizes):
            self.configure(*sizes)
        elif any(size is not None for size in sizes):
            raise ValueError("Either all three layer sizes or none must be given")

    def __repr__(self) -> str:
        if not self.is_configured:
            return 'Network(unconfigured)'
        return f'Network({self.topology}, activation={self.activation_name!r})'

    # Lifecycle

    @property
    def is_configured(self) -> bool:
        return self.bias0 is not None

    @property
    def topology(self) -> Topology:
        return Topology(self.layer0, self.layer1, self.layer2)

    def configure(self, layer0: int, layer1: int, layer2: int) -> None:
        """
        Set the topology and allocate zero-filled buffers.

        Any previously held buffers (and references to them) are
        invalidated.

        Raises:
            ValueError: If a layer size is not a positive integer.
        """
        topology = Topology(layer0, layer1, layer2).validate()
        self.layer0, self.layer1, self.layer2 = (int(size) for size in topology)
        self.reset()

    def reset(self) -> None:
        """
        Reallocate all eight buffers, zero-filled, for the current topology.

        Raises:
            Uninitialized: If no topology was ever configured.
        """
        if not (self.layer0 and self.layer1 and self.layer2):
            raise Uninitialized("Network.reset() called before configure()")

        l0, l1, l2 = self.layer0, self.layer1, self.layer2

        self.bias0 = torch.zeros(l0, dtype=torch.float32)
        self.bias1 = torch.zeros(l1, dtype=torch.float32)
        self.bias2 = torch.zeros(l2, dtype=torch.float32)

        self.state0 = torch.zeros(l0, dtype=torch.float32)
        self.state1 = torch.zeros(l1, dtype=torch.float32)
        self.state2 = torch.zeros(l2, dtype=torch.float32)

        # [h0: w0..wn], [h1: w0..wn], ...
        self.weights10 = torch.zeros(l1 * l0, dtype=torch.float32)
        self.weights21 = torch.zeros(l2 * l1, dtype=torch.float32)

    def _require_configured(self, operation: str) -> None:
        if not self.is_configured:
            raise Uninitialized(f"Network.{operation}() called before configure()")

    def check_compatible(self, other: 'Network') -> None:
        """
        Ensure another network has the same topology.

        Raises:
            Uninitialized: If either network is unconfigured.
            ShapeMismatch: If the topologies differ.
        """
        self._require_configured('check_compatible')
        if not other.is_configured:
            raise Uninitialized("Source network has not been configured")
        if self.topology != other.topology:
            raise ShapeMismatch(
                f"Topology mismatch: {self.topology} vs {other.topology}",
                expected=self.topology,
                actual=other.topology,
            )

    # Introspection

    def parameters(self) -> Iterator[Tuple[str, torch.Tensor]]:
        """Yield (name, tensor) for every bias and weight buffer, in a fixed order."""
        self._require_configured('parameters')
        for name in self.PARAMETER_NAMES:
            yield name, getattr(self, name)

    def num_params(self) -> int:
        """Total number of trainable parameters."""
        return self.topology.num_params

    def clone(self) -> 'Network':
        """
        Create a deep copy with its own buffers.

        The copy gets its own generator, seeded by one draw from this
        network's generator. Cloning therefore advances this network's
        random state, and the two never share a stream.
        """
        seed = int(torch.randint(0, 2 ** 62, (1,), generator=self.generator).item())
        twin = Network(activation=self.activation_name, seed=seed)
        if not self.is_configured:
            return twin

        twin.configure(*self.topology)
        for name in self.PARAMETER_NAMES + self.STATE_NAMES:
            getattr(twin, name).copy_(getattr(self, name))
        return twin

    # Inputs

    def set_inputs(self, values: ArrayLike) -> None:
        """
        Copy an observation into state0.

        Raises:
            ShapeMismatch: If the observation length is not layer0.
        """
        self._require_configured('set_inputs')
        inputs = torch.as_tensor(values, dtype=torch.float32).reshape(-1)
        if inputs.numel() != self.layer0:
            raise ShapeMismatch(
                f"Expected {self.layer0} inputs, got {inputs.numel()}",
                expected=self.layer0,
                actual=inputs.numel(),
            )
        self.state0.copy_(inputs)

    def randomize_inputs(self, generator: Optional[torch.Generator] = None) -> None:
        """Fill state0 with uniform draws in [0, 1). Standalone mode only."""
        self._require_configured('randomize_inputs')
        self.state0.uniform_(0.0, 1.0, generator=generator or self.generator)

    # Forward pass

    def step(self) -> None:
        """
        Run the forward pass: state0 -> state1 -> state2.

        The two layers run in sequence; layer 2 reads the state1 just
        written by layer 1.

        Raises:
            Uninitialized: If the network was never configured.
        """
        self._require_configured('step')

        # layer 1 (hidden)
        weights10 = self.weights10.view(self.layer1, self.layer0)
        hidden = self.bias1 + torch.mv(weights10, self.state0 + self.bias0)
        self.state1.copy_(self._activation(hidden))

        # layer 2 (output)
        weights21 = self.weights21.view(self.layer2, self.layer1)
        output = self.bias2 + torch.mv(weights21, self.state1 + self.bias1)
        self.state2.copy_(self._activation(output))

    # Parameter operators

    def randomize(self, generator: Optional[torch.Generator] = None) -> None:
        """Draw every bias and weight uniformly from [-0.5, 0.5)."""
        self._require_configured('randomize')
        generator = generator or self.generator
        for _, param in self.parameters():
            param.uniform_(-PARAMETER_RANGE, PARAMETER_RANGE, generator=generator)

    def lerp_towards(self, source: 'Network', t: float) -> None:
        """
        Interpolate every parameter towards the source network.

        p = p * (1 - t) + source.p * t, so t=0 keeps the parameters and
        t=1 copies the source exactly.

        Args:
            source: Donor network (read only).
            t: Interpolation factor in [0, 1].

        Raises:
            ShapeMismatch: If the topologies differ.
        """
        self.check_compatible(source)
        _check_rate('t', t)
        for (_, param), (_, donor) in zip(self.parameters(), source.parameters()):
            param.mul_(1.0 - t).add_(donor * t)

    def mutate(self, rate: float, generator: Optional[torch.Generator] = None) -> None:
        """
        Replace parameters with fresh uniform draws.

        Each parameter is independently replaced, with probability `rate`,
        by a new value from [-0.5, 0.5); otherwise it is kept.

        Args:
            rate: Per-parameter replacement probability in [0, 1].
            generator: Random source (defaults to the owned one).
        """
        self._require_configured('mutate')
        _check_rate('rate', rate)
        generator = generator or self.generator
        for _, param in self.parameters():
            fresh = torch.empty_like(param).uniform_(
                -PARAMETER_RANGE, PARAMETER_RANGE, generator=generator
            )
            mask = torch.rand(param.shape, generator=generator) < rate
            param.copy_(torch.where(mask, fresh, param))

    def evolve(
        self,
        source: 'Network',
        rate: float,
        generator: Optional[torch.Generator] = None,
    ) -> None:
        """
        Crossover: copy parameters verbatim from the source network.

        Each parameter is independently copied, with probability `rate`,
        from the source; otherwise it is kept.

        Args:
            source: Donor network (read only).
            rate: Per-parameter copy probability in [0, 1].
            generator: Random source (defaults to the owned one).

        Raises:
            ShapeMismatch: If the topologies differ.
        """
        self.check_compatible(source)
        _check_rate('rate', rate)
        generator = generator or self.generator
        for (_, param), (_, donor) in zip(self.parameters(), source.parameters()):
            mask = torch.rand(param.shape, generator=generator) < rate
            param.copy_(torch.where(mask, donor, param))

    # Debugging

    def generate_color(self) -> Tuple[float, float, float, float]:
        """
        Summarise each layer's biases as one colour channel.

        Returns:
            (r, g, b, a) where r/g/b are the mean of bias + 0.5 for
            layers 0/1/2 and a is 1.0.
        """
        self._require_configured('generate_color')
        r = float((self.bias0 + PARAMETER_RANGE).mean())
        g = float((self.bias1 + PARAMETER_RANGE).mean())
        b = float((self.bias2 + PARAMETER_RANGE).mean())
        return r, g, b, 1.0


def _check_rate(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be in [0, 1], got {value}")
