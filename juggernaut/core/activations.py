"""Activation functions for Juggernaut.

An activation is a pair of scalar functions, ``evaluate`` and ``derivative``,
applied to every element of a layer's output. ``derivative`` is expressed in
terms of the *activated* value ``y = evaluate(x)``, which is what layers cache
during the forward pass.

The built-ins also accept whole numpy arrays and set ``vectorized`` so layers
can evaluate them in one call; any other activation is called once per element.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Dict, Iterable, Protocol

import numpy as np

from .matrix import Matrix
from .types import Scalar


class Activation(Protocol):
    """Protocol implemented by activation functions."""

    name: str

    def evaluate(self, x: float) -> float:
        """Return the activation of the raw weighted sum ``x``."""

    def derivative(self, y: float) -> float:
        """Return the slope of the activation given its output ``y``."""


def _elementwise(activation: Activation, fn, values: Matrix) -> Matrix:
    if getattr(activation, "vectorized", False):
        return values.apply(fn)
    return values.map(fn)


def activate(activation: Activation, raw: Matrix) -> Matrix:
    return _elementwise(activation, activation.evaluate, raw)


def slope(activation: Activation, activated: Matrix) -> Matrix:
    return _elementwise(activation, activation.derivative, activated)


@dataclass(frozen=True)
class Sigmoid:
    """Logistic sigmoid ``1 / (1 + e^-x)``."""

    name: str = "sigmoid"
    vectorized: ClassVar[bool] = True

    def evaluate(self, x: Scalar) -> Scalar:
        # tanh form avoids overflow in exp for large |x|
        return 0.5 * (1.0 + np.tanh(0.5 * np.asarray(x, dtype=np.float64)))

    def derivative(self, y: Scalar) -> Scalar:
        return y * (1.0 - y)


@dataclass(frozen=True)
class HyperbolicTangent:
    name: str = "tanh"
    vectorized: ClassVar[bool] = True

    def evaluate(self, x: Scalar) -> Scalar:
        return np.tanh(x)

    def derivative(self, y: Scalar) -> Scalar:
        return 1.0 - np.square(y)


@dataclass(frozen=True)
class Identity:
    name: str = "identity"
    vectorized: ClassVar[bool] = True

    def evaluate(self, x: Scalar) -> Scalar:
        return np.asarray(x, dtype=np.float64) * 1.0

    def derivative(self, y: Scalar) -> Scalar:
        return np.ones_like(y, dtype=np.float64)


@dataclass(frozen=True)
class RectifiedLinearUnit:
    """ReLU; the output is positive exactly where the input was."""

    name: str = "relu"
    vectorized: ClassVar[bool] = True

    def evaluate(self, x: Scalar) -> Scalar:
        return np.maximum(x, 0.0)

    def derivative(self, y: Scalar) -> Scalar:
        return np.heaviside(y, 0.0)


class ActivationRegistry:
    """Central registry of activation functions addressable by name."""

    def __init__(self) -> None:
        self._registry: Dict[str, Activation] = {}

    def register(self, activation: Activation, *aliases: str) -> None:
        for key in (activation.name, *aliases):
            self._registry[key] = activation

    def get(self, name: str) -> Activation:
        key = name.lower()
        if key not in self._registry:
            available = ", ".join(self.names())
            raise KeyError(f"Unknown activation {name!r}. Available activations: {available}")
        return self._registry[key]

    def names(self) -> Iterable[str]:
        return sorted(self._registry)


REGISTRY = ActivationRegistry()
REGISTRY.register(Sigmoid(), "logistic")
REGISTRY.register(HyperbolicTangent(), "hyperbolic_tangent")
REGISTRY.register(Identity(), "linear")
REGISTRY.register(RectifiedLinearUnit(), "rectified_linear_unit")

__all__ = [
    "Activation",
    "Sigmoid",
    "HyperbolicTangent",
    "Identity",
    "RectifiedLinearUnit",
    "ActivationRegistry",
    "activate",
    "slope",
    "REGISTRY",
]
