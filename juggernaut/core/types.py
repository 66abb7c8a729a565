"""Core typing contracts for Juggernaut."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence, Tuple, Union

import numpy as np

Array = np.ndarray
Scalar = Union[float, Array]


def _as_floats(values: Sequence[float]) -> Tuple[float, ...]:
    return tuple(float(v) for v in values)


@dataclass(frozen=True)
class Sample:
    """A training pair of an input vector and its expected output vector."""

    inputs: Tuple[float, ...]
    expected: Tuple[float, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "inputs", _as_floats(self.inputs))
        object.__setattr__(self, "expected", _as_floats(self.expected))


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`juggernaut.training.pipelines.run_pipeline`."""

    epochs: int
    metrics_path: str
    manifest_path: str
    summary_path: str = ""
    checkpoint_path: str = ""
    predictions: Tuple[Tuple[float, ...], ...] = ()


__all__ = ["Array", "Scalar", "Sample", "RunResult"]
