"""Config-driven training runs for Juggernaut networks."""

from __future__ import annotations

import json
import time
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Mapping, Sequence

import numpy as np

from ..core.layer import NeuralLayer
from ..core.network import DEFAULT_LEARNING_RATE, NeuralNetwork
from ..core.types import Array, RunResult, Sample
from ..reporting.artifacts import write_manifest
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from ..reporting.summary import write_summary

_REQUIRED_SECTIONS = {"data", "model", "train"}

_PRESETS: Dict[str, Mapping[str, object]] = {
    "first-input": {
        "data": {
            "samples": [
                [[0.0, 0.0, 1.0], [0.0]],
                [[0.0, 1.0, 1.0], [0.0]],
                [[1.0, 0.0, 1.0], [1.0]],
                [[1.0, 1.0, 1.0], [1.0]],
            ],
        },
        "model": {"layers": [[2, 3], [1, 2]], "activation": "sigmoid"},
        "train": {
            "epochs": 10000,
            "learning_rate": DEFAULT_LEARNING_RATE,
            "loss": "mse",
            "seed": 0,
            "run_dir": "runs/first-input",
            "enable_plots": False,
        },
        "predict": {"samples": [[1.0, 0.0, 1.0]]},
    },
    "xor-tanh": {
        "data": {
            "samples": [
                [[0.0, 0.0, 1.0], [0.0]],
                [[0.0, 1.0, 1.0], [1.0]],
                [[1.0, 0.0, 1.0], [1.0]],
                [[1.0, 1.0, 1.0], [0.0]],
            ],
        },
        "model": {"layers": [[4, 3], [1, 4]], "activation": "tanh"},
        "train": {
            "epochs": 2000,
            "learning_rate": 0.1,
            "loss": "mse",
            "seed": 3,
            "run_dir": "runs/xor-tanh",
            "enable_plots": False,
        },
    },
}


def _read_config_file(path: Path) -> Mapping[str, object]:
    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load configs in YAML format") from exc
        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ValueError(f"Unsupported config file type: {path.suffix}")

    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return data


def _check_sections(config: Mapping[str, object], origin: str) -> None:
    missing = _REQUIRED_SECTIONS - set(config)
    if missing:
        raise KeyError(f"{origin} is missing required sections: {', '.join(sorted(missing))}")


def load_config(path: str | Path) -> Mapping[str, object]:
    """Load a JSON or YAML run config."""

    path = Path(path)
    data = _read_config_file(path)
    _check_sections(data, f"Config {path.name}")
    return json.loads(json.dumps(data))


def presets() -> Mapping[str, Mapping[str, object]]:
    return {name: deepcopy(cfg) for name, cfg in _PRESETS.items()}


def load_preset(name: str) -> Mapping[str, object]:
    try:
        return deepcopy(_PRESETS[name])
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def build_samples(entries: Sequence[object]) -> List[Sample]:
    """Turn ``[inputs, expected]`` pairs or mappings into :class:`Sample` objects."""

    samples: List[Sample] = []
    for entry in entries:
        if isinstance(entry, Sample):
            samples.append(entry)
        elif isinstance(entry, Mapping):
            samples.append(Sample(entry["inputs"], entry.get("expected", ())))
        else:
            inputs, expected = entry  # type: ignore[misc]
            samples.append(Sample(inputs, expected))
    return samples


def build_network(
    config: Mapping[str, object],
    callbacks: Sequence[object] | None = None,
) -> NeuralNetwork:
    """Construct an untrained network from ``config``.

    Layer weights are drawn from a generator seeded with ``train.seed`` so
    two builds of the same config start from identical weights.
    """

    _check_sections(config, "Config")
    data_cfg = dict(config["data"])  # type: ignore[arg-type]
    model_cfg = dict(config["model"])  # type: ignore[arg-type]
    train_cfg = dict(config["train"])  # type: ignore[arg-type]

    rng = np.random.default_rng(int(train_cfg.get("seed", 0)))
    network = NeuralNetwork(
        build_samples(data_cfg.get("samples", [])),
        str(model_cfg.get("activation", "sigmoid")),
        learning_rate=float(train_cfg.get("learning_rate", DEFAULT_LEARNING_RATE)),
        loss=str(train_cfg.get("loss", "mse")),
        callbacks=callbacks,
    )
    for neurons, inputs in model_cfg.get("layers", []):
        network.add_layer(NeuralLayer(int(neurons), int(inputs), rng=rng))
    return network


def save_checkpoint(path: str | Path, state: Mapping[str, Array]) -> str:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as handle:
        np.savez_compressed(handle, **dict(state))
    return str(path)


def load_checkpoint(path: str | Path) -> Mapping[str, Array]:
    with np.load(Path(path)) as archive:
        return {name: archive[name].copy() for name in archive.files}


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    """Train a network described by ``config`` and write its run artifacts."""

    _check_sections(config, "Config")
    train_cfg = dict(config["train"])  # type: ignore[arg-type]
    epochs = int(train_cfg.get("epochs", 1))
    seed = int(train_cfg.get("seed", 0))
    run_dir = _resolve_run_dir(train_cfg)
    run_dir.mkdir(parents=True, exist_ok=True)

    jsonl = JsonlSink(run_dir / "metrics.jsonl", run=run_dir.name, seed=seed)
    csv_sink = CsvSink(run_dir / "metrics.csv")
    plots = PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)))
    network = build_network(config, callbacks=[jsonl, csv_sink, plots])

    _print_startup_summary(network, epochs=epochs, seed=seed)
    network.train(epochs)
    plots.close()

    checkpoint = save_checkpoint(run_dir / "weights.npz", network.state_dict())
    safe_config = json.loads(json.dumps(config))
    manifest = write_manifest(run_dir / "manifest.json", config=safe_config, network=network)
    summary_tail = int(train_cfg.get("summary_tail", 32))
    summary_path = write_summary(jsonl.path, run_dir / "summary.json", tail=summary_tail)
    (run_dir / "config.json").write_text(json.dumps(safe_config, indent=2))

    predictions: tuple[tuple[float, ...], ...] = ()
    predict_cfg = config.get("predict")
    if isinstance(predict_cfg, Mapping) and predict_cfg.get("samples"):
        outputs = network.forward(predict_cfg["samples"])  # type: ignore[arg-type]
        predictions = tuple(tuple(row) for row in outputs)
        (run_dir / "predictions.json").write_text(json.dumps([list(p) for p in predictions], indent=2))

    return RunResult(
        epochs=epochs,
        metrics_path=str(jsonl.path),
        manifest_path=manifest,
        summary_path=summary_path,
        checkpoint_path=checkpoint,
        predictions=predictions,
    )


def _resolve_run_dir(train_cfg: Mapping[str, object]) -> Path:
    if "run_dir" in train_cfg:
        return Path(str(train_cfg["run_dir"]))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp


def _print_startup_summary(network: NeuralNetwork, *, epochs: int, seed: int) -> None:
    dims = [layer.inputs for layer in network.layers[:1]] + [layer.neurons for layer in network.layers]
    print("=== Juggernaut run ===")
    print(f"Samples       : {len(network.dataset)}")
    print(f"Dimensions    : {dims}")
    print(f"Activation    : {network.activation.name}")
    print(f"Loss          : {network.loss_fn.name}")
    print(f"Learning rate : {network.learning_rate}")
    print(f"Epochs        : {epochs}")
    print(f"Seed          : {seed}")
    print("======================")


__all__ = [
    "build_network",
    "build_samples",
    "load_checkpoint",
    "load_config",
    "load_preset",
    "presets",
    "run_pipeline",
    "save_checkpoint",
]
