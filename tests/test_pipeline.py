from __future__ import annotations

import json

import pytest
import yaml

from juggernaut.core.errors import ShapeError
from juggernaut.core.types import Sample
from juggernaut.reporting.summary import compute_auc
from juggernaut.training import pipelines


def test_presets_are_isolated_copies():
    names = set(pipelines.presets())
    assert {"first-input", "xor-tanh"} <= names
    preset = pipelines.load_preset("first-input")
    preset["train"]["epochs"] = 1
    assert pipelines.load_preset("first-input")["train"]["epochs"] != 1
    with pytest.raises(KeyError):
        pipelines.load_preset("missing")


def test_build_samples_accepts_pairs_and_mappings():
    samples = pipelines.build_samples(
        [[[0, 1], [1]], {"inputs": [1, 0], "expected": [0]}, Sample([1, 1], [1])]
    )
    assert samples[0] == Sample((0.0, 1.0), (1.0,))
    assert samples[1].expected == (0.0,)
    assert samples[2].inputs == (1.0, 1.0)


def test_build_network_validates_layer_chain():
    config = pipelines.load_preset("first-input")
    config["model"]["layers"] = [[2, 3], [1, 3]]
    with pytest.raises(ShapeError):
        pipelines.build_network(config)


def test_build_network_is_seeded():
    config = pipelines.load_preset("xor-tanh")
    first = pipelines.build_network(config).state_dict()
    second = pipelines.build_network(config).state_dict()
    assert all((first[k] == second[k]).all() for k in first)
    assert pipelines.build_network(config).activation.name == "tanh"


def test_load_config_json_and_yaml(tmp_path):
    config = pipelines.load_preset("first-input")
    json_path = tmp_path / "run.json"
    json_path.write_text(json.dumps(config))
    assert pipelines.load_config(json_path) == json.loads(json.dumps(config))

    yaml_path = tmp_path / "run.yaml"
    yaml_path.write_text(yaml.safe_dump(config))
    loaded = pipelines.load_config(yaml_path)
    assert loaded["model"]["layers"] == [[2, 3], [1, 2]]


def test_load_config_rejects_incomplete_or_unknown_files(tmp_path):
    partial = tmp_path / "partial.json"
    partial.write_text(json.dumps({"model": {}}))
    with pytest.raises(KeyError, match="data, train"):
        pipelines.load_config(partial)

    other = tmp_path / "run.toml"
    other.write_text("")
    with pytest.raises(ValueError):
        pipelines.load_config(other)


def test_compute_auc():
    assert compute_auc([]) == 0.0
    assert compute_auc([1.0, 1.0, 1.0]) == pytest.approx(2.0)
    assert compute_auc([2.0, 0.0]) == pytest.approx(1.0)


def test_plot_adapter_writes_loss_curve(tmp_path):
    pytest.importorskip("matplotlib")
    config = pipelines.load_preset("first-input")
    config["train"].update({"epochs": 5, "run_dir": str(tmp_path / "plots"), "enable_plots": True})
    pipelines.run_pipeline(config)
    assert (tmp_path / "plots" / "loss.png").exists()
