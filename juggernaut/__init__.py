"""Juggernaut public API."""

from .core import activations  # noqa: F401
from .core.activations import Activation, HyperbolicTangent, Identity, RectifiedLinearUnit, Sigmoid
from .core.errors import ConfigurationError, JuggernautError, ShapeError
from .core.layer import NeuralLayer
from .core.matrix import Matrix, seed
from .core.network import NeuralNetwork
from .core.types import RunResult, Sample
from .training.pipelines import load_config, load_preset, presets, run_pipeline

__all__ = [
    "Activation",
    "ConfigurationError",
    "HyperbolicTangent",
    "Identity",
    "JuggernautError",
    "Matrix",
    "NeuralLayer",
    "NeuralNetwork",
    "RectifiedLinearUnit",
    "RunResult",
    "Sample",
    "ShapeError",
    "Sigmoid",
    "activations",
    "load_config",
    "load_preset",
    "presets",
    "run_pipeline",
    "seed",
]
