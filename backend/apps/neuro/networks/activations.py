"""
Activation functions for controller networks.

The default activation is a rational approximation of tanh taken from
Lambert's continued fraction, truncated after the 13th term. It avoids a
transcendental call and is accurate to about 1e-4 on [-5, 5]. Outside that
range it drifts above 1 (it grows like x / 28), so it should only be used
where pre-activations stay moderate, which is the case for the small
uniform parameter ranges used here.

Reference:
    https://varietyofsound.wordpress.com/2011/02/14/efficient-tanh-computation-using-lamberts-continued-fraction/
"""
from typing import Callable, Dict

import torch

Activation = Callable[[torch.Tensor], torch.Tensor]


def tanh_approx(x: torch.Tensor) -> torch.Tensor:
    """
    Degree (7, 6) rational approximation of tanh.

    Odd by construction: the numerator is x times a polynomial in x^2 and
    the denominator is a polynomial in x^2, so tanh_approx(-x) is exactly
    -tanh_approx(x).

    Args:
        x: Input tensor (any shape).

    Returns:
        Tensor of the same shape and dtype.
    """
    x2 = x * x
    numerator = (((x2 + 378.0) * x2 + 17325.0) * x2 + 135135.0) * x
    denominator = ((28.0 * x2 + 3150.0) * x2 + 62370.0) * x2 + 135135.0
    return numerator / denominator


def tanh_exact(x: torch.Tensor) -> torch.Tensor:
    """Exact hyperbolic tangent."""
    return torch.tanh(x)


ACTIVATIONS: Dict[str, Activation] = {
    'tanh_approx': tanh_approx,
    'tanh': tanh_exact,
}


def get_activation(name: str) -> Activation:
    """
    Look up an activation function by name.

    Raises:
        ValueError: If the name is not registered.
    """
    try:
        return ACTIVATIONS[name]
    except KeyError:
        raise ValueError(
            f"Unknown activation: {name}. Choose from {sorted(ACTIVATIONS)}"
        ) from None
