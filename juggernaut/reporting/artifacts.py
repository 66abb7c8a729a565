"""Run artifact helpers."""

from __future__ import annotations

import json
import platform
import subprocess
import time
from pathlib import Path
from typing import Mapping

import numpy as np

from ..core.network import NeuralNetwork


def _git_sha() -> str:
    try:
        out = subprocess.check_output(["git", "rev-parse", "HEAD"], stderr=subprocess.DEVNULL)
        return out.decode().strip()
    except (OSError, subprocess.CalledProcessError):  # pragma: no cover - git may be unavailable in tests
        return "unknown"


def describe_network(network: NeuralNetwork) -> Mapping[str, object]:
    return {
        "layers": [[layer.neurons, layer.inputs] for layer in network.layers],
        "activation": network.activation.name,
        "loss": network.loss_fn.name,
        "learning_rate": network.learning_rate,
        "parameters": sum(layer.neurons * layer.inputs for layer in network.layers),
        "samples": len(network.dataset),
    }


def write_manifest(
    path: str | Path,
    *,
    config: Mapping[str, object],
    network: NeuralNetwork,
) -> str:
    """Write a manifest JSON file capturing reproducibility metadata."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    manifest = {
        "git_sha": _git_sha(),
        "generated_at": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        "config": config,
        "network": describe_network(network),
        "environment": {
            "python": platform.python_version(),
            "numpy": np.__version__,
        },
    }
    path.write_text(json.dumps(manifest, indent=2))
    return str(path)


__all__ = ["describe_network", "write_manifest"]
