import math

import numpy as np
import pytest

from juggernaut.core.activations import (
    REGISTRY,
    HyperbolicTangent,
    Identity,
    RectifiedLinearUnit,
    Sigmoid,
    activate,
    slope,
)
from juggernaut.core.matrix import Matrix


def test_sigmoid_midpoint_and_limits() -> None:
    sigmoid = Sigmoid()
    assert sigmoid.evaluate(0.0) == 0.5
    assert sigmoid.evaluate(50.0) == pytest.approx(1.0)
    assert sigmoid.evaluate(-50.0) == pytest.approx(0.0, abs=1e-12)
    assert np.isfinite(sigmoid.evaluate(-1000.0))
    assert sigmoid.evaluate(2.0) == pytest.approx(1.0 / (1.0 + np.exp(-2.0)))


@pytest.mark.parametrize("x", [-3.0, -0.5, 0.0, 0.7, 4.0])
def test_sigmoid_derivative_uses_activated_value(x: float) -> None:
    sigmoid = Sigmoid()
    s = sigmoid.evaluate(x)
    assert sigmoid.derivative(s) == pytest.approx(s * (1.0 - s))


@pytest.mark.parametrize(
    "activation", [Sigmoid(), HyperbolicTangent(), Identity(), RectifiedLinearUnit()]
)
def test_derivative_matches_numeric_slope(activation) -> None:
    eps = 1e-6
    for x in (-1.3, -0.2, 0.4, 2.1):
        numeric = (activation.evaluate(x + eps) - activation.evaluate(x - eps)) / (2 * eps)
        assert activation.derivative(activation.evaluate(x)) == pytest.approx(numeric, abs=1e-6)


def test_activation_applies_elementwise_to_matrices() -> None:
    raw = Matrix([[0.0, 1.0], [-1.0, 2.0]])
    activated = raw.apply(Sigmoid().evaluate)
    assert activated.shape == raw.shape
    assert activated.get(0, 0) == 0.5
    assert activated.get(1, 1) == pytest.approx(Sigmoid().evaluate(2.0))


def test_registry_lookup() -> None:
    assert isinstance(REGISTRY.get("sigmoid"), Sigmoid)
    assert isinstance(REGISTRY.get("TANH"), HyperbolicTangent)
    assert isinstance(REGISTRY.get("linear"), Identity)
    assert "relu" in REGISTRY.names()
    with pytest.raises(KeyError, match="Available activations"):
        REGISTRY.get("softsign")


class ScalarSigmoid:
    """Logistic sigmoid written against plain floats only."""

    name = "scalar-sigmoid"

    def evaluate(self, x: float) -> float:
        return 1.0 / (1.0 + math.exp(-x))

    def derivative(self, y: float) -> float:
        return y * (1.0 - y)


class LeakyStep:
    name = "leaky-step"

    def evaluate(self, x: float) -> float:
        return x if x > 0 else 0.01 * x

    def derivative(self, y: float) -> float:
        return 1.0 if y > 0 else 0.01


def test_scalar_activation_is_applied_per_element() -> None:
    raw = Matrix([[0.0, 1.0], [-1.0, 2.0]])
    activated = activate(ScalarSigmoid(), raw)
    assert activated.allclose(activate(Sigmoid(), raw), tol=1e-12)

    leaky = activate(LeakyStep(), raw)
    assert leaky == Matrix([[0.0, 1.0], [-0.01, 2.0]])
    assert slope(LeakyStep(), leaky) == Matrix([[0.01, 1.0], [0.01, 1.0]])


def test_builtin_activations_take_the_array_path() -> None:
    raw = Matrix([[-2.0, 0.5, 3.0]])
    for activation in (Sigmoid(), HyperbolicTangent(), Identity(), RectifiedLinearUnit()):
        expected = raw.map(lambda x: float(activation.evaluate(x)))
        assert activate(activation, raw).allclose(expected, tol=1e-12)
