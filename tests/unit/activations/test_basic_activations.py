"""
Unit tests for basic activation functions.
"""

import math

import pytest

from kittener.activations.basic_activations import (
    identity_activation,
    sigmoid_activation,
    steepened_sigmoid_activation,
    tanh_activation,
    relu_activation,
    activations,
    activation_codes,
)


class TestActivationsDictionary:
    """Test the lookup tables."""

    def test_every_activation_has_a_code(self):
        assert set(activations) == set(activation_codes)

    def test_codes_are_three_letters(self):
        for code in activation_codes.values():
            assert len(code) == 3

    def test_dictionary_functions_callable(self):
        for name, func in activations.items():
            assert callable(func), f"{name} is not callable"


class TestSigmoid:
    """Test the logistic activation used by hidden and output nodes."""

    def test_zero(self):
        assert sigmoid_activation(0.0) == 0.5

    @pytest.mark.parametrize("z", [-3.0, -0.5, 0.7, 2.0])
    def test_matches_formula(self, z):
        assert sigmoid_activation(z) == pytest.approx(1.0 / (1.0 + math.exp(-z)))

    def test_saturates_without_overflow(self):
        assert sigmoid_activation(-1000.0) == pytest.approx(0.0)
        assert sigmoid_activation(1000.0) == pytest.approx(1.0)

    def test_returns_python_float(self):
        assert type(sigmoid_activation(1.0)) is float

    def test_steepened_is_steeper(self):
        assert steepened_sigmoid_activation(0.5) > sigmoid_activation(0.5)
        assert steepened_sigmoid_activation(0.5) == pytest.approx(sigmoid_activation(2.45))


class TestOtherActivations:

    def test_identity(self):
        assert identity_activation(-2.5) == -2.5

    def test_tanh(self):
        assert tanh_activation(0.3) == pytest.approx(math.tanh(0.3))

    def test_relu(self):
        assert relu_activation(-1.0) == 0.0
        assert relu_activation(1.5) == 1.5
