"""
feature_ablation.gradient_descent
=================================
Linear classifier trained by per-example stochastic gradient descent.

For an example with label ``y`` and signed distance from the hyperplane
``d = b + Σ w_i x_i`` (over the example's active features only), one step
updates every active weight and the bias::

    w_i ← w_i + η · ( L(y, d, x_i) − R(w_i) )
    b   ← b   + η · ( L(y, d, 1)   − R(b)   )

with the surrogate-loss correction ``L`` and regularization correction
``R``:

=============  =====================================
exponential    L = y · x · exp(−y · d)
hinge          L = y · x  if y · d < 1, else 0
none           R = 0
L1             R = λ · sign(w),  sign(0) = +1
L2             R = λ · w
=============  =====================================

Weights of features the example does not carry are left alone, so they
only shrink under regularization when a later example touches them.
"""

from __future__ import annotations

import math

import numpy as np
from sklearn.utils.validation import check_is_fitted

from .base import Classifier
from .data import DataSet, Example


__all__ = [
    "EXPONENTIAL_LOSS",
    "GradientDescentClassifier",
    "HINGE_LOSS",
    "L1_REGULARIZATION",
    "L2_REGULARIZATION",
    "NO_REGULARIZATION",
]


# surrogate losses
EXPONENTIAL_LOSS = 0
HINGE_LOSS = 1

# regularizers
NO_REGULARIZATION = 0
L1_REGULARIZATION = 1
L2_REGULARIZATION = 2

_LOSSES = (EXPONENTIAL_LOSS, HINGE_LOSS)
_REGULARIZATIONS = (NO_REGULARIZATION, L1_REGULARIZATION, L2_REGULARIZATION)

# bound on the exponent of the exponential loss
_MAX_EXPONENT = 500.0


def distance_from_hyperplane(
    example: Example, weights: dict[int, float], bias: float
) -> float:
    """Bias plus the weighted sum of the example's active features.

    Features without a weight contribute nothing.
    """
    total = bias
    for index, value in example.items():
        total += weights.get(index, 0.0) * value
    return total


class GradientDescentClassifier(Classifier):
    """Linear ±1 classifier trained by stochastic gradient descent.

    Parameters
    ----------
    loss : int, default=HINGE_LOSS
        ``EXPONENTIAL_LOSS`` or ``HINGE_LOSS``.
    regularization : int, default=NO_REGULARIZATION
        ``NO_REGULARIZATION``, ``L1_REGULARIZATION`` or ``L2_REGULARIZATION``.
    lambda_ : float, default=0.1
        Regularization strength λ.
    eta : float, default=0.1
        Learning rate η.
    iterations : int, default=10
        Number of passes over the training examples.
    random_state : None, int or numpy.random.Generator, optional
        Source for the per-epoch shuffles.  ``None`` leaves training
        unseeded.

    Attributes
    ----------
    weights_ : dict of int to float
        One weight per feature index of the training dataset.
    bias_ : float
        Intercept.
    """

    EXPONENTIAL_LOSS = EXPONENTIAL_LOSS
    HINGE_LOSS = HINGE_LOSS
    NO_REGULARIZATION = NO_REGULARIZATION
    L1_REGULARIZATION = L1_REGULARIZATION
    L2_REGULARIZATION = L2_REGULARIZATION

    def __init__(
        self,
        loss: int = HINGE_LOSS,
        regularization: int = NO_REGULARIZATION,
        lambda_: float = 0.1,
        eta: float = 0.1,
        iterations: int = 10,
        random_state=None,
    ):
        self.loss           = loss
        self.regularization = regularization
        self.lambda_        = lambda_
        self.eta            = eta
        self.iterations     = iterations
        self.random_state   = random_state

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def set_loss(self, loss: int) -> None:
        """Select the surrogate loss; unknown values are ignored."""
        if loss in _LOSSES:
            self.loss = loss

    def set_regularization(self, regularization: int) -> None:
        """Select the regularizer; unknown values are ignored."""
        if regularization in _REGULARIZATIONS:
            self.regularization = regularization

    def set_lambda(self, lambda_: float) -> None:
        self.lambda_ = lambda_

    def set_eta(self, eta: float) -> None:
        self.eta = eta

    def set_iterations(self, iterations: int) -> None:
        self.iterations = iterations

    # ------------------------------------------------------------------
    # Classifier API
    # ------------------------------------------------------------------

    def train(self, data: DataSet) -> None:
        """Fit fresh weights to ``data`` by stochastic gradient descent."""
        self._validate_params()
        rng = np.random.default_rng(self.random_state)

        weights = dict.fromkeys(data.all_feature_indices, 0.0)
        bias = 0.0
        training = list(data.examples)

        for _ in range(self.iterations):
            rng.shuffle(training)
            for example in training:
                bias = self._step(example, weights, bias)

        self.weights_ = weights
        self.bias_ = bias

    def classify(self, example: Example) -> float:
        distance = self._distance(example)
        if distance > 0:
            return 1.0
        if distance < 0:
            return -1.0
        return 0.0

    def confidence(self, example: Example) -> float:
        return abs(self._distance(example))

    # ------------------------------------------------------------------
    # Gradient step
    # ------------------------------------------------------------------

    def _step(self, example: Example, weights: dict[int, float], bias: float) -> float:
        """Update ``weights`` in place for one example and return the new bias."""
        label = example.label
        distance = distance_from_hyperplane(example, weights, bias)

        for index, value in example.items():
            old = weights[index]
            weights[index] = old + self.eta * (
                self._loss_correction(label, distance, value)
                - self._regularization_correction(old)
            )

        return bias + self.eta * (
            self._loss_correction(label, distance, 1.0)
            - self._regularization_correction(bias)
        )

    def _loss_correction(self, label: float, distance: float, value: float) -> float:
        if self.loss == EXPONENTIAL_LOSS:
            exponent = min(max(-label * distance, -_MAX_EXPONENT), _MAX_EXPONENT)
            return label * value * math.exp(exponent)
        if label * distance < 1:
            return label * value
        return 0.0

    def _regularization_correction(self, weight: float) -> float:
        if self.regularization == NO_REGULARIZATION:
            return 0.0
        if self.regularization == L1_REGULARIZATION:
            return -self.lambda_ if weight < 0 else self.lambda_
        return self.lambda_ * weight

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _distance(self, example: Example) -> float:
        check_is_fitted(self, "weights_")
        return distance_from_hyperplane(example, self.weights_, self.bias_)

    def _validate_params(self):
        if self.loss not in _LOSSES:
            raise ValueError(f"Unknown loss {self.loss!r}; expected one of {_LOSSES}.")
        if self.regularization not in _REGULARIZATIONS:
            raise ValueError(
                f"Unknown regularization {self.regularization!r}; "
                f"expected one of {_REGULARIZATIONS}."
            )
        if self.iterations < 0:
            raise ValueError("iterations must be >= 0.")

    def __str__(self):
        if not hasattr(self, "weights_"):
            return repr(self)
        return " ".join(
            f"{index}:{self.weights_[index]}" for index in sorted(self.weights_)
        )
