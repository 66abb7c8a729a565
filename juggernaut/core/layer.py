"""A single fully-connected layer."""

from __future__ import annotations

import numpy as np

from .activations import Activation, activate
from .errors import ConfigurationError, ShapeError
from .matrix import Matrix


class NeuralLayer:
    """Weight matrix of shape ``(inputs, neurons)`` plus per-pass caches.

    ``raw``, ``activated`` and ``delta`` hold the values computed during the
    most recent forward/backward pass and are ``None`` until then.
    """

    def __init__(self, neurons: int, inputs: int, rng: np.random.Generator | None = None) -> None:
        if neurons < 1 or inputs < 1:
            raise ConfigurationError(
                f"A layer needs at least one neuron and one input, got neurons={neurons} inputs={inputs}"
            )
        self.weights = Matrix.random(inputs, neurons, rng=rng)
        self.raw: Matrix | None = None
        self.activated: Matrix | None = None
        self.delta: Matrix | None = None

    @property
    def neurons(self) -> int:
        return self.weights.cols()

    @property
    def inputs(self) -> int:
        return self.weights.rows()

    def forward(self, inputs: Matrix, activation: Activation) -> Matrix:
        if inputs.cols() != self.inputs:
            raise ShapeError(f"Layer expects {self.inputs} inputs but received {inputs.cols()}")
        self.raw = inputs.dot(self.weights)
        self.activated = activate(activation, self.raw)
        return self.activated

    def adjust(self, inputs: Matrix, delta: Matrix, learning_rate: float) -> None:
        """Gradient-descent step for ``delta = error * f'(y)``.

        ``error`` is ``expected - predicted``, i.e. the negated loss gradient,
        so the step adds ``learning_rate * inputs.T @ delta``.
        """

        step = inputs.transpose().dot(delta)
        if step.shape != self.weights.shape:
            raise ShapeError(f"Weight update {step.shape} does not match weights {self.weights.shape}")
        self.delta = delta
        self.weights = self.weights.add(step.scale(learning_rate))

    def reset_cache(self) -> None:
        self.raw = None
        self.activated = None
        self.delta = None

    def __repr__(self) -> str:
        return f"NeuralLayer(neurons={self.neurons}, inputs={self.inputs})"


__all__ = ["NeuralLayer"]
