"""Loss registry used for training error signals and loss reporting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable

import numpy as np

from .types import Array

LossFn = Callable[[Array, Array], tuple[float, Array]]


@dataclass(frozen=True)
class Loss:
    """Loss wrapper returning both the scalar loss and dL/dy."""

    name: str
    fn: LossFn

    def __call__(self, predictions: Array, targets: Array) -> tuple[float, Array]:
        return self.fn(predictions, targets)


class LossRegistry:
    """Central registry for loss functions."""

    def __init__(self) -> None:
        self._registry: Dict[str, Loss] = {}

    def register(self, name: str, fn: LossFn) -> None:
        self._registry[name] = Loss(name, fn)

    def get(self, name: str) -> Loss:
        if name not in self._registry:
            available = ", ".join(self.names())
            raise KeyError(f"Unknown loss {name!r}. Available losses: {available}")
        return self._registry[name]

    def names(self) -> Iterable[str]:
        return sorted(self._registry)


REGISTRY = LossRegistry()


def _mse(pred: Array, target: Array) -> tuple[float, Array]:
    # reported value is the mean squared error; the returned gradient is that of
    # 0.5 * sum((pred - target)^2), which keeps error == expected - predicted
    diff = pred - target
    loss = float(np.mean(np.square(diff)))
    return loss, diff


def _mae(pred: Array, target: Array) -> tuple[float, Array]:
    diff = pred - target
    loss = float(np.mean(np.abs(diff)))
    return loss, np.sign(diff)


def _huber(pred: Array, target: Array, delta: float = 1.0) -> tuple[float, Array]:
    diff = pred - target
    abs_diff = np.abs(diff)
    quadratic = np.minimum(abs_diff, delta)
    linear = abs_diff - quadratic
    loss = float(np.mean(0.5 * quadratic**2 + delta * linear))
    grad = np.where(abs_diff <= delta, diff, delta * np.sign(diff))
    return loss, grad


REGISTRY.register("mse", _mse)
REGISTRY.register("mae", _mae)
REGISTRY.register("huber", _huber)

__all__ = ["Loss", "LossRegistry", "REGISTRY"]
