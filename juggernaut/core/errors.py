"""Exception hierarchy for Juggernaut."""

from __future__ import annotations


class JuggernautError(Exception):
    """Base class for errors raised by Juggernaut."""


class ShapeError(JuggernautError, ValueError):
    """Raised when matrix or layer dimensions are incompatible."""


class ConfigurationError(JuggernautError, ValueError):
    """Raised when a network, layer or dataset is degenerate or inconsistent."""


__all__ = ["JuggernautError", "ShapeError", "ConfigurationError"]
