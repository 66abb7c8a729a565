"""Feed-forward network with backpropagation training."""

from __future__ import annotations

from typing import Iterable, List, Mapping, MutableSequence, Sequence

import numpy as np

from .activations import REGISTRY as ACTIVATION_REGISTRY
from .activations import Activation, slope
from .errors import ConfigurationError, ShapeError
from .layer import NeuralLayer
from .losses import REGISTRY as LOSS_REGISTRY
from .losses import Loss
from .matrix import Matrix
from .types import Array, Sample

DEFAULT_LEARNING_RATE = 1.0


def _widths(values: Iterable[Sequence[float]]) -> set[int]:
    return {len(v) for v in values}


class NeuralNetwork:
    """An ordered stack of :class:`NeuralLayer` trained on a fixed dataset.

    Layer 0 is nearest the input. Shapes are validated when layers are added
    and again before training, so inconsistent configurations fail before any
    arithmetic happens.
    """

    def __init__(
        self,
        dataset: Iterable[Sample],
        activation: Activation | str,
        learning_rate: float = DEFAULT_LEARNING_RATE,
        loss: Loss | str = "mse",
        callbacks: Sequence[object] | None = None,
    ) -> None:
        self.dataset: List[Sample] = list(dataset)
        if isinstance(activation, str):
            activation = ACTIVATION_REGISTRY.get(activation)
        self.activation = activation
        if not np.isfinite(learning_rate) or learning_rate <= 0:
            raise ConfigurationError(f"learning_rate must be positive, got {learning_rate}")
        self.learning_rate = float(learning_rate)
        self.loss_fn = LOSS_REGISTRY.get(loss) if isinstance(loss, str) else loss
        self.callbacks = list(callbacks or [])
        self._layers: MutableSequence[NeuralLayer] = []

        input_widths = _widths(s.inputs for s in self.dataset)
        expected_widths = _widths(s.expected for s in self.dataset)
        if len(input_widths) > 1:
            raise ConfigurationError(f"Samples have inconsistent input widths: {sorted(input_widths)}")
        if len(expected_widths) > 1:
            raise ConfigurationError(f"Samples have inconsistent expected widths: {sorted(expected_widths)}")

    # ------------------------------------------------------------------
    # Construction

    @property
    def layers(self) -> Sequence[NeuralLayer]:
        return tuple(self._layers)

    def add_layer(self, layer: NeuralLayer) -> "NeuralNetwork":
        if self._layers:
            previous = self._layers[-1]
            if layer.inputs != previous.neurons:
                raise ShapeError(
                    f"Layer {len(self._layers)} expects {layer.inputs} inputs but the "
                    f"previous layer has {previous.neurons} neurons"
                )
        elif self.dataset and layer.inputs != len(self.dataset[0].inputs):
            raise ShapeError(
                f"First layer expects {layer.inputs} inputs but samples have "
                f"{len(self.dataset[0].inputs)}"
            )
        self._layers.append(layer)
        return self

    def __iadd__(self, layer: NeuralLayer) -> "NeuralNetwork":
        return self.add_layer(layer)

    def __len__(self) -> int:
        return len(self._layers)

    # ------------------------------------------------------------------
    # Inference

    def forward(self, samples: Iterable[Sample | Sequence[float]]) -> List[List[float]]:
        """Return one output vector per sample, in input order."""

        self._require_layers()
        outputs: List[List[float]] = []
        for sample in samples:
            output = self._propagate(self._input_matrix(sample))
            outputs.append(output.row(0))
        return outputs

    def loss(self, samples: Iterable[Sample] | None = None) -> float:
        """Mean loss of the current weights over ``samples`` (default: dataset)."""

        self._require_layers()
        samples = self.dataset if samples is None else list(samples)
        if not samples:
            raise ConfigurationError("Cannot compute a loss over zero samples")
        values = []
        for sample in samples:
            output = self._propagate(self._input_matrix(sample))
            value, _ = self.loss_fn(output.to_array(), self._target(sample, output))
            values.append(value)
        return float(np.mean(values))

    # ------------------------------------------------------------------
    # Training

    def train(self, epochs: int) -> None:
        """Run ``epochs`` full passes of per-sample backpropagation."""

        if epochs < 0:
            raise ValueError(f"epochs must be non-negative, got {epochs}")
        self._require_trainable()
        for epoch in range(1, epochs + 1):
            losses = [self._train_sample(sample) for sample in self.dataset]
            self._emit_epoch(epoch, {"loss": float(np.mean(losses))})

    def _train_sample(self, sample: Sample) -> float:
        inputs = self._input_matrix(sample)
        output = self._propagate(inputs)
        loss_value, grad = self.loss_fn(output.to_array(), self._target(sample, output))
        error = Matrix(-grad)

        deltas: List[Matrix] = [error.hadamard(slope(self.activation, output))]
        for idx in reversed(range(len(self._layers) - 1)):
            layer = self._layers[idx]
            following = self._layers[idx + 1]
            delta = deltas[0].dot(following.weights.transpose())
            deltas.insert(0, delta.hadamard(slope(self.activation, layer.activated)))

        layer_input = inputs
        for layer, delta in zip(self._layers, deltas):
            activated = layer.activated
            layer.adjust(layer_input, delta, self.learning_rate)
            layer_input = activated
        return loss_value

    # ------------------------------------------------------------------
    # Checkpoints

    def state_dict(self) -> Mapping[str, Array]:
        return {f"W{idx}": layer.weights.to_array() for idx, layer in enumerate(self._layers)}

    def load_state_dict(self, state: Mapping[str, Array]) -> None:
        for idx, layer in enumerate(self._layers):
            key = f"W{idx}"
            if key not in state:
                raise KeyError(f"Missing weight {key} in state dict")
            weights = Matrix(np.asarray(state[key]))
            if weights.shape != layer.weights.shape:
                raise ShapeError(f"Weight {key} has shape {weights.shape}, expected {layer.weights.shape}")
            layer.weights = weights
            layer.reset_cache()

    # ------------------------------------------------------------------
    # Internal helpers

    def _propagate(self, inputs: Matrix) -> Matrix:
        x = inputs
        for layer in self._layers:
            x = layer.forward(x, self.activation)
        return x

    def _input_matrix(self, sample: Sample | Sequence[float]) -> Matrix:
        values = sample.inputs if isinstance(sample, Sample) else tuple(float(v) for v in sample)
        expected = self._layers[0].inputs
        if len(values) != expected:
            raise ShapeError(f"Network expects {expected} inputs but sample has {len(values)}")
        return Matrix([values])

    @staticmethod
    def _target(sample: Sample, output: Matrix) -> Array:
        if len(sample.expected) != output.cols():
            raise ShapeError(
                f"Network produces {output.cols()} outputs but sample expects {len(sample.expected)}"
            )
        return np.array([sample.expected], dtype=np.float64)

    def _require_layers(self) -> None:
        if not self._layers:
            raise ConfigurationError("Network has no layers")

    def _require_trainable(self) -> None:
        self._require_layers()
        if not self.dataset:
            raise ConfigurationError("Cannot train on an empty dataset")
        outputs = self._layers[-1].neurons
        expected = len(self.dataset[0].expected)
        if outputs != expected:
            raise ConfigurationError(
                f"Final layer has {outputs} neurons but samples expect {expected} outputs"
            )

    def _emit_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)


__all__ = ["DEFAULT_LEARNING_RATE", "NeuralNetwork"]
