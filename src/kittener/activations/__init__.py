"""
Activations Package

This package provides the activation functions applied by hidden and output nodes.

Exported:
    activations:      Dictionary mapping activation function names to functions
    activation_codes: Dictionary mapping activation function names to 3-letter codes
    Individual activation functions: identity_activation, sigmoid_activation,
                                     steepened_sigmoid_activation, tanh_activation,
                                     relu_activation
"""

from kittener.activations.basic_activations import (
    activations,
    activation_codes,
    identity_activation,
    sigmoid_activation,
    steepened_sigmoid_activation,
    tanh_activation,
    relu_activation
)

__all__ = [
    'activations',
    'activation_codes',
    'identity_activation',
    'sigmoid_activation',
    'steepened_sigmoid_activation',
    'tanh_activation',
    'relu_activation'
]
