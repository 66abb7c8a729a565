import json
from pathlib import Path

import numpy as np

from juggernaut.training import pipelines


def _config(tmp_path, name="run"):
    config = pipelines.load_preset("first-input")
    config["train"]["epochs"] = 200
    config["train"]["run_dir"] = str(tmp_path / name)
    return config


def test_pipeline_produces_artifacts(tmp_path, capsys):
    config = _config(tmp_path)
    result = pipelines.run_pipeline(config)

    assert result.epochs == 200
    assert "Juggernaut run" in capsys.readouterr().out

    metrics = [
        json.loads(line)
        for line in Path(result.metrics_path).read_text().splitlines()
        if line
    ]
    assert [entry["epoch"] for entry in metrics] == list(range(1, 201))
    assert all("loss" in entry for entry in metrics)
    assert metrics[0]["seed"] == 0

    manifest = json.loads(Path(result.manifest_path).read_text())
    assert manifest["config"]["train"]["epochs"] == 200
    assert manifest["network"]["layers"] == [[2, 3], [1, 2]]
    assert manifest["network"]["activation"] == "sigmoid"
    assert manifest["network"]["parameters"] == 8

    summary = json.loads(Path(result.summary_path).read_text())
    assert summary["records"] == 200
    assert summary["metrics"]["loss"]["last"] <= summary["metrics"]["loss"]["first"]

    run_dir = Path(config["train"]["run_dir"])
    assert (run_dir / "metrics.csv").exists()
    assert (run_dir / "config.json").exists()
    assert len(result.predictions) == 1
    assert json.loads((run_dir / "predictions.json").read_text()) == [list(result.predictions[0])]


def test_checkpoint_restores_predictions(tmp_path):
    config = _config(tmp_path)
    result = pipelines.run_pipeline(config)

    restored = pipelines.build_network(config)
    restored.load_state_dict(pipelines.load_checkpoint(result.checkpoint_path))
    outputs = restored.forward(config["predict"]["samples"])
    assert tuple(tuple(row) for row in outputs) == result.predictions

    untrained = pipelines.build_network(config)
    state = untrained.state_dict()
    trained = pipelines.load_checkpoint(result.checkpoint_path)
    assert set(state) == set(trained) == {"W0", "W1"}
    assert not np.array_equal(state["W0"], trained["W0"])


def test_pipeline_determinism(tmp_path):
    first = pipelines.run_pipeline(_config(tmp_path, "run"))
    second = pipelines.run_pipeline(_config(tmp_path, "run"))
    assert Path(first.metrics_path).read_text() == Path(second.metrics_path).read_text()
    assert Path(first.summary_path).read_bytes() == Path(second.summary_path).read_bytes()
    assert first.predictions == second.predictions
