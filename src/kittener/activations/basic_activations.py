import numpy as np

def identity_activation(z):
    return z

def sigmoid_activation(z):
    # Logistic curve 1 / (1 + e^-z); exp overflow for very negative z saturates to 0
    with np.errstate(over='ignore'):
        return float(1.0 / (1.0 + np.exp(-z)))

def steepened_sigmoid_activation(z):
    # Steepened variant from the original NEAT paper
    return sigmoid_activation(4.9 * z)

def tanh_activation(z):
    return float(np.tanh(z))

def relu_activation(z):
    return max(0.0, z)

activations = {
    "identity"          : identity_activation,
    "sigmoid"           : sigmoid_activation,
    "steepened_sigmoid" : steepened_sigmoid_activation,
    "tanh"              : tanh_activation,
    "relu"              : relu_activation,
    }

# 3-letter identifiers for each activation function
activation_codes = {
    "identity"          : "IDN",
    "sigmoid"           : "SIG",
    "steepened_sigmoid" : "SSG",
    "tanh"              : "TNH",
    "relu"              : "RLU",
    }
