"""Core numerical primitives for Juggernaut."""

from . import activations, errors, layer, losses, matrix, network, types

__all__ = ["activations", "errors", "layer", "losses", "matrix", "network", "types"]
