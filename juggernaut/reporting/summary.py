"""Deterministic summaries of training metric logs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Mapping, Sequence

import numpy as np


def compute_auc(points: Sequence[float]) -> float:
    """Return the area under ``points`` along an implicit epoch axis."""

    if len(points) < 2:
        return 0.0
    y = np.asarray(points, dtype=np.float64)
    # trapezoid rule with unit spacing
    return float(np.sum((y[1:] + y[:-1]) * 0.5))


def _extract_numeric(records: Iterable[Mapping[str, object]]) -> Mapping[str, list[float]]:
    metrics: dict[str, list[float]] = {}
    for record in records:
        for key, value in record.items():
            if key in {"epoch", "seed"}:
                continue
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                metrics.setdefault(key, []).append(float(value))
    return metrics


def summarise(records: Sequence[Mapping[str, object]], tail: int = 32) -> Mapping[str, object]:
    tail_window = min(tail, len(records))
    summary_metrics: dict[str, Mapping[str, float]] = {}
    for name, values in _extract_numeric(records).items():
        arr = np.asarray(values, dtype=np.float64)
        summary_metrics[name] = {
            "first": float(arr[0]),
            "last": float(arr[-1]),
            "min": float(np.min(arr)),
            "max": float(np.max(arr)),
            "mean": float(np.mean(arr)),
            "tail_auc": compute_auc(arr[-tail_window:].tolist()) if tail_window else 0.0,
        }
    return {
        "version": 1,
        "records": len(records),
        "tail_window": tail_window,
        "metrics": summary_metrics,
    }


def write_summary(metrics_jsonl: str | Path, out_summary_json: str | Path, *, tail: int = 32) -> str:
    """Write a deterministic summary for ``metrics_jsonl``."""

    metrics_path = Path(metrics_jsonl)
    out_path = Path(out_summary_json)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    records: list[Mapping[str, object]] = []
    if metrics_path.exists():
        for line in metrics_path.read_text().splitlines():
            line = line.strip()
            if line:
                records.append(json.loads(line))

    out_path.write_text(json.dumps(summarise(records, tail), sort_keys=True, indent=2))
    return str(out_path)


__all__ = ["compute_auc", "summarise", "write_summary"]
