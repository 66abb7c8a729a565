"""Config-driven training runs."""

from .pipelines import build_network, load_config, load_preset, presets, run_pipeline

__all__ = ["build_network", "load_config", "load_preset", "presets", "run_pipeline"]
