"""
feature_ablation.two_layer
==========================
Two-layer feed-forward network trained by online backpropagation.

The network has ``n_hidden`` tanh units fed by the bias-augmented input
vector and one tanh output unit fed by the hidden outputs plus a constant
1 (the output bias, stored as the last hidden-to-output weight).

For an input ``x`` with label ``y`` the forward pass is::

    h = tanh(W · x)
    o = tanh(v[-1] + Σ_j v[j] · h[j])

and one backward step computes, from the *same* pre-update weights::

    δ     = (y − o) · (1 − o²)
    v'[j] = v[j] + η · h[j] · δ          v'[-1] = v[-1] + η · δ
    W'[j,k] = W[j,k] + η · x[k] · (1 − h[j]²) · v[j] · δ

The new weights replace the old ones together once the step is done.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from sklearn.utils.validation import check_is_fitted

from .base import Classifier
from .data import DataSet, Example


__all__ = ["NetworkWeights", "TwoLayerNetwork"]


@dataclass(frozen=True, eq=False)
class NetworkWeights:
    """Immutable snapshot of the network's weights.

    Attributes
    ----------
    input_weights : np.ndarray, shape (n_hidden, n_inputs)
        Input-to-hidden weights; the last input column is the bias feature.
    inner_weights : np.ndarray, shape (n_hidden + 1,)
        Hidden-to-output weights; the last entry is the output bias.
    """

    input_weights: np.ndarray
    inner_weights: np.ndarray

    @classmethod
    def random(cls, n_hidden: int, n_inputs: int, rng: np.random.Generator) -> "NetworkWeights":
        """Weights drawn independently from U[-1, 1)."""
        return cls(
            input_weights=rng.uniform(-1.0, 1.0, size=(n_hidden, n_inputs)),
            inner_weights=rng.uniform(-1.0, 1.0, size=n_hidden + 1),
        )

    def forward(self, x: np.ndarray) -> tuple[np.ndarray, float]:
        """Hidden outputs and network output for input vector ``x``."""
        hidden = np.tanh(self.input_weights @ x)
        output = np.tanh(self.inner_weights[-1] + hidden @ self.inner_weights[:-1])
        return hidden, float(output)

    def backpropagate(self, x: np.ndarray, label: float, eta: float) -> "NetworkWeights":
        """Weights after one online gradient step on ``(x, label)``."""
        hidden, output = self.forward(x)
        delta = (label - output) * (1.0 - output ** 2)

        old_inner = self.inner_weights
        new_inner = old_inner.copy()
        new_inner[:-1] += eta * hidden * delta
        new_inner[-1] += eta * delta

        hidden_delta = (1.0 - hidden ** 2) * old_inner[:-1] * delta
        new_input = self.input_weights + eta * np.outer(hidden_delta, x)

        return NetworkWeights(input_weights=new_input, inner_weights=new_inner)


class TwoLayerNetwork(Classifier):
    """One hidden layer of tanh units plus a tanh output unit.

    Parameters
    ----------
    n_hidden : int
        Number of hidden units.
    eta : float, default=0.1
        Learning rate.
    iterations : int, default=200
        Number of passes over the training examples.
    random_state : None, int or numpy.random.Generator, optional
        Source for weight initialization and per-epoch shuffles.

    Attributes
    ----------
    training_data_ : DataSet
        Bias-augmented copy of the last training set.
    feature_indices_ : list of int
        Feature index of each input column, bias column last.
    bias_index_ : int
        Feature index of the constant bias input.
    weights_ : NetworkWeights
        Weights after the last training run.
    """

    def __init__(self, n_hidden: int, eta: float = 0.1, iterations: int = 200,
                 random_state=None):
        self.n_hidden     = n_hidden
        self.eta          = eta
        self.iterations   = iterations
        self.random_state = random_state

    def set_eta(self, eta: float) -> None:
        self.eta = eta

    def set_iterations(self, iterations: int) -> None:
        self.iterations = iterations

    # ------------------------------------------------------------------
    # Classifier API
    # ------------------------------------------------------------------

    def train(self, data: DataSet) -> None:
        """Initialize random weights and run online backpropagation."""
        if self.n_hidden < 1:
            raise ValueError("n_hidden must be >= 1.")
        if self.iterations < 0:
            raise ValueError("iterations must be >= 0.")
        rng = np.random.default_rng(self.random_state)

        augmented = data.with_bias()
        self.training_data_ = augmented
        self.bias_index_ = augmented.bias_index
        self.feature_indices_ = sorted(augmented.all_feature_indices)
        self.columns_ = {index: col for col, index in enumerate(self.feature_indices_)}

        samples = [(self._input_vector(e), e.label) for e in augmented]
        weights = NetworkWeights.random(self.n_hidden, len(self.feature_indices_), rng)

        for _ in range(self.iterations):
            rng.shuffle(samples)
            for x, label in samples:
                weights = weights.backpropagate(x, label, self.eta)

        self.weights_ = weights

    def classify(self, example: Example) -> float:
        return 1.0 if self._output(example) > 0 else -1.0

    def confidence(self, example: Example) -> float:
        return abs(self._output(example))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _output(self, example: Example) -> float:
        check_is_fitted(self, "weights_")
        example = self.training_data_.add_bias_feature(example)
        _, output = self.weights_.forward(self._input_vector(example))
        return output

    def _input_vector(self, example: Example) -> np.ndarray:
        x = np.zeros(len(self.columns_))
        for index, value in example.items():
            col = self.columns_.get(index)
            if col is not None:
                x[col] = value
        return x
