"""
feature_ablation.base
=====================
The classifier capability shared by every model in the package.

A classifier learns from a :class:`~feature_ablation.data.DataSet` with
``train`` and then answers, per example, ``classify`` (a label) and
``confidence`` (a non-negative score).  Every classifier is also a
scikit-learn estimator, so it can be cloned, have its parameters
inspected, or be fitted on dense arrays with ``fit``/``predict``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import numpy as np
from sklearn.base import BaseEstimator, ClassifierMixin, clone
from sklearn.utils.validation import check_is_fitted

from .data import DataSet, Example


__all__ = ["Classifier", "SklearnClassifier"]


def _examples_from_rows(X) -> list[Example]:
    X_arr = np.asarray(X, dtype=float)
    if X_arr.ndim != 2:
        raise ValueError(f"X must be 2-dimensional, got shape {X_arr.shape}.")
    return [
        Example(0.0, {int(j): row[j] for j in np.flatnonzero(row)})
        for row in X_arr
    ]


class Classifier(ClassifierMixin, BaseEstimator, ABC):
    """Binary classifier over ±1 labels.

    Subclasses implement :meth:`train`, :meth:`classify` and
    :meth:`confidence`.  The array-based :meth:`fit` and :meth:`predict`
    are thin wrappers around them.
    """

    @abstractmethod
    def train(self, data: DataSet) -> None:
        """Learn from ``data``, discarding anything learned before."""

    @abstractmethod
    def classify(self, example: Example) -> float:
        """Predicted label for ``example``."""

    @abstractmethod
    def confidence(self, example: Example) -> float:
        """Non-negative confidence in the prediction for ``example``."""

    # ------------------------------------------------------------------
    # sklearn API
    # ------------------------------------------------------------------

    def fit(self, X: np.ndarray, y: np.ndarray) -> "Classifier":
        """Train on a dense matrix and ±1 labels.

        Column ``j`` of ``X`` is feature index ``j``.

        Returns
        -------
        self
        """
        self.train(DataSet.from_arrays(X, y))
        self.classes_ = np.array([-1.0, 1.0])
        return self

    def predict(self, X: np.ndarray) -> np.ndarray:
        """Classify each row of ``X``."""
        return np.array([self.classify(e) for e in _examples_from_rows(X)])


class SklearnClassifier(Classifier):
    """Expose a scikit-learn classifier through the classifier capability.

    This is how decision trees, k-nearest-neighbour models and other
    off-the-shelf estimators take part in cross-validation and ablation.

    Parameters
    ----------
    estimator : sklearn classifier
        Template estimator.  It is cloned on every ``train`` so repeated
        training never accumulates state.

    Attributes
    ----------
    estimator_ : sklearn classifier
        The fitted clone.
    feature_indices_ : list of int
        Feature index of each column the clone was fitted on.

    Examples
    --------
    >>> from sklearn.tree import DecisionTreeClassifier
    >>> tree = SklearnClassifier(DecisionTreeClassifier(max_depth=3))
    >>> tree.train(data)                                   # doctest: +SKIP
    >>> tree.classify(data.examples[0])                    # doctest: +SKIP
    1.0
    """

    def __init__(self, estimator: Any = None):
        self.estimator = estimator

    def train(self, data: DataSet) -> None:
        if self.estimator is None:
            raise ValueError("SklearnClassifier needs an estimator to train.")
        self.feature_indices_ = sorted(data.all_feature_indices)
        X, y = data.to_arrays(self.feature_indices_)
        self.estimator_ = clone(self.estimator).fit(X, y)

    def _row(self, example: Example) -> np.ndarray:
        return np.array([[example.get_feature(i) for i in self.feature_indices_]])

    def classify(self, example: Example) -> float:
        check_is_fitted(self, "estimator_")
        return float(self.estimator_.predict(self._row(example))[0])

    def confidence(self, example: Example) -> float:
        check_is_fitted(self, "estimator_")
        if not hasattr(self.estimator_, "predict_proba"):
            return 1.0
        return float(self.estimator_.predict_proba(self._row(example))[0].max())
