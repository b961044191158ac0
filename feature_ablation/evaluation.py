"""
feature_ablation.evaluation
===========================
Cross-validated accuracy of classifiers, before and after feature removal.

The building block is :func:`test_n_fold`, which trains one classifier on
every training split of a :class:`~feature_ablation.data.CrossValidationSet`
and scores exact label matches on the held-out fold.  The helpers on top
of it average repeated runs and trace how accuracy changes as a
preprocessor removes features one at a time.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .base import Classifier
from .data import CrossValidationSet, DataSet, DataSetSplit


__all__ = [
    "accuracies_for_preprocessor",
    "accuracy_for_classifier",
    "accuracy_on_split",
    "accuracy_table",
    "average_list",
    "test_n_fold",
]


def accuracy_on_split(classifier: Classifier, split: DataSetSplit) -> float:
    """Train on ``split.train`` and return accuracy on ``split.test``.

    An empty test split scores 0.0.
    """
    classifier.train(split.train)
    test = split.test.examples
    if not test:
        return 0.0
    correct = sum(1 for e in test if classifier.classify(e) == e.label)
    return correct / len(test)


def test_n_fold(cvs: CrossValidationSet, classifier: Classifier, n_folds: int) -> np.ndarray:
    """Accuracy of ``classifier`` on each of the first ``n_folds`` folds.

    The same classifier instance is retrained for every fold.

    Returns
    -------
    np.ndarray, shape (n_folds,)
    """
    return np.array(
        [accuracy_on_split(classifier, cvs.get_validation_set(i)) for i in range(n_folds)],
        dtype=float,
    )


def average_list(values: Sequence[float]) -> float:
    """Arithmetic mean of ``values``."""
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        raise ValueError("Cannot average an empty list.")
    return float(arr.mean())


def accuracy_for_classifier(
    classifier: Classifier,
    data: DataSet,
    iterations_to_avg: int = 1,
    n_folds: int = 10,
    random_state=None,
) -> float:
    """Mean n-fold accuracy, averaged over ``iterations_to_avg`` repetitions.

    All repetitions share one fold partition; they differ only through the
    classifier's own randomness.
    """
    if iterations_to_avg < 1:
        raise ValueError("iterations_to_avg must be >= 1.")
    cvs = CrossValidationSet(data, n_folds, random_state=random_state)
    return average_list(
        [average_list(test_n_fold(cvs, classifier, n_folds)) for _ in range(iterations_to_avg)]
    )


def accuracies_for_preprocessor(
    preprocessor,
    classifier: Classifier,
    data: DataSet,
    iterations_to_avg: int = 1,
    n_folds: int = 10,
    n_features: int = 6,
    random_state=None,
) -> np.ndarray:
    """Accuracy as ``preprocessor`` removes features one at a time.

    Entry 0 is the accuracy on ``data`` itself; entry ``i`` the accuracy
    after ``i`` successive ``preprocess_train(·, 1)`` calls.  The
    preprocessor is handed ``classifier`` first, so an ablation study
    ranks features with the model being evaluated.

    Returns
    -------
    np.ndarray, shape (n_features,)
    """
    if n_features < 1:
        raise ValueError("n_features must be >= 1.")
    accuracies = np.zeros(n_features)
    accuracies[0] = accuracy_for_classifier(
        classifier, data, iterations_to_avg, n_folds, random_state
    )

    preprocessor.set_classifier(classifier)
    reduced = data
    for i in range(1, n_features):
        reduced = preprocessor.preprocess_train(reduced, 1)
        accuracies[i] = accuracy_for_classifier(
            classifier, reduced, iterations_to_avg, n_folds, random_state
        )
    return accuracies


def accuracy_table(
    preprocessors: Sequence,
    classifiers: Sequence[Classifier],
    data: DataSet,
    iterations_to_avg: int = 1,
    n_folds: int = 10,
    n_features: int = 6,
    random_state=None,
    verbose: int = 0,
) -> np.ndarray:
    """:func:`accuracies_for_preprocessor` for every classifier/preprocessor pair.

    Returns
    -------
    np.ndarray, shape (n_classifiers, n_preprocessors, n_features)
    """
    table = np.zeros((len(classifiers), len(preprocessors), n_features))
    for c, classifier in enumerate(classifiers):
        for p, preprocessor in enumerate(preprocessors):
            table[c, p] = accuracies_for_preprocessor(
                preprocessor, classifier, data,
                iterations_to_avg, n_folds, n_features, random_state,
            )
            if verbose >= 1:
                print(
                    f"[accuracy_table] {type(classifier).__name__} / "
                    f"{type(preprocessor).__name__}: "
                    + ", ".join(f"{a:.4f}" for a in table[c, p])
                )
    return table
