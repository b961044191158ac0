"""
feature_ablation.preprocess
===========================
Feature-selection preprocessors that discard ``n`` features from a dataset.

Every preprocessor follows the same two-call protocol:

    pp = TrainingErrorPreprocessor()
    train_reduced = pp.preprocess_train(train, n=3)
    test_reduced  = pp.preprocess_test(test)

``preprocess_train`` decides which features to drop and remembers the
decision; ``preprocess_test`` applies exactly the same removal to other
data.  The variants differ only in how they choose:

* :class:`RandomPreprocessor` picks ``n`` features uniformly at random.
* :class:`TrainingErrorPreprocessor` scores each feature by the training
  error of a one-split decision stump and drops the ``n`` worst.
* :class:`AblationPreprocessor` scores each feature by the cross-validated
  error of a classifier trained without it and drops the ``n`` whose
  absence hurts least.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from sklearn.exceptions import NotFittedError
from sklearn.tree import DecisionTreeClassifier

from .base import Classifier, SklearnClassifier
from .data import CrossValidationSet, DataSet, Example
from .evaluation import average_list, test_n_fold


__all__ = [
    "AblationPreprocessor",
    "DataPreprocessor",
    "RandomPreprocessor",
    "TrainingErrorPreprocessor",
]


class DataPreprocessor:
    """Base class: validation, bookkeeping and the reduced copies.

    Subclasses implement :meth:`_choose_unwanted`, returning the ``n``
    feature indices to drop in removal order.

    Parameters
    ----------
    verbose : int, default=0
        Verbosity level (0 = silent, 1 = one line per call, 2 = per feature).

    Attributes
    ----------
    unwanted_features_ : list of int
        Features removed by the last ``preprocess_train``, in removal order.
    usable_features_ : dict of int to str
        Features kept by the last ``preprocess_train``, index -> name.
    """

    def __init__(self, verbose: int = 0):
        self.verbose = verbose

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def preprocess_train(self, data: DataSet, n: int) -> DataSet:
        """Choose ``n`` features to discard and return ``data`` without them.

        Parameters
        ----------
        data : DataSet
            Training data.
        n : int
            Number of features to remove; must be less than the number of
            features in ``data``.

        Returns
        -------
        DataSet
            Reduced copy of ``data``.
        """
        self._validate_params(data, n)

        unwanted = list(self._choose_unwanted(data, n))
        dropped = set(unwanted)
        self.unwanted_features_ = unwanted
        self.usable_features_ = {
            i: name for i, name in data.feature_map.items() if i not in dropped
        }

        if self.verbose >= 1:
            print(
                f"[{type(self).__name__}] removed {n} of "
                f"{len(data.feature_map)} features: {unwanted}"
            )
        return data.copy_with_features(unwanted)

    def preprocess_test(self, data: DataSet) -> DataSet:
        """Remove the features dropped by the last ``preprocess_train``.

        The result is laid over the training feature space: its feature map
        is ``usable_features_`` whatever features ``data`` registered.
        """
        if not hasattr(self, "unwanted_features_"):
            raise NotFittedError(
                f"This {type(self).__name__} instance has not been trained yet; "
                f"call preprocess_train first."
            )
        reduced = data.copy_with_features(self.unwanted_features_)
        reduced.feature_map = dict(self.usable_features_)
        return reduced

    def set_classifier(self, classifier: Classifier) -> None:
        """Evaluator for preprocessors that rank features by retraining.

        Preprocessors that do not train classifiers keep it but never use it.
        """
        self.classifier = classifier

    def summary(self) -> str:
        """Return a human-readable summary of the last ``preprocess_train``."""
        if not hasattr(self, "unwanted_features_"):
            raise NotFittedError(f"This {type(self).__name__} instance has not been trained yet.")
        lines = [
            f"{type(self).__name__} – last reduction",
            f"  features removed       : {len(self.unwanted_features_)}",
            f"  features kept          : {len(self.usable_features_)}",
            f"  removed (in order)     : {self.unwanted_features_}",
        ]
        badness = getattr(self, "badness_", None)
        if badness is not None:
            for index in self.unwanted_features_:
                lines.append(f"  badness[{index:>4}]          : {badness[index]:.4f}")
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _choose_unwanted(self, data: DataSet, n: int) -> list[int]:
        raise NotImplementedError

    def _validate_params(self, data: DataSet, n: int):
        n_features = len(data.feature_map)
        if n < 0:
            raise ValueError(f"Number of features to remove must be >= 0, got {n}.")
        if n >= n_features:
            raise ValueError(
                f"Trying to remove {n} features, but the data has only "
                f"{n_features}; at least one feature must remain."
            )


class _RankingPreprocessor(DataPreprocessor):
    """Scores every feature with an error rate and drops ``n`` by rank.

    Subclasses implement :meth:`_feature_badness`.  With ``drop_highest``
    the highest-scoring features go first, otherwise the lowest.

    Attributes
    ----------
    badness_ : dict of int to float
        Score of every feature from the last ``preprocess_train``.
    """

    drop_highest = True

    def _choose_unwanted(self, data: DataSet, n: int) -> list[int]:
        badness = {}
        for index in sorted(data.feature_map):
            badness[index] = self._feature_badness(data, index)
            if self.verbose >= 2:
                print(
                    f"  [{type(self).__name__}] feature {index} "
                    f"({data.feature_map[index]}): badness={badness[index]:.4f}"
                )
        self.badness_ = badness
        # stable: ties keep ascending feature index
        ranked = sorted(badness, key=lambda i: badness[i], reverse=self.drop_highest)
        return ranked[:n]

    def _feature_badness(self, data: DataSet, index: int) -> float:
        raise NotImplementedError


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------

class RandomPreprocessor(DataPreprocessor):
    """Discard ``n`` features chosen uniformly at random, without replacement.

    Parameters
    ----------
    random_state : None, int or numpy.random.Generator, optional
        Source for the choice.  ``None`` leaves it unseeded.
    verbose : int, default=0
    """

    def __init__(self, random_state=None, verbose: int = 0):
        super().__init__(verbose=verbose)
        self.random_state = random_state

    def _choose_unwanted(self, data: DataSet, n: int) -> list[int]:
        rng = np.random.default_rng(self.random_state)
        candidates = sorted(data.feature_map)
        picked = rng.choice(len(candidates), size=n, replace=False)
        return [candidates[p] for p in picked]


class TrainingErrorPreprocessor(_RankingPreprocessor):
    """Rank features by the training error of a one-split decision stump.

    For each feature the training examples are split in two: those whose
    value for the feature equals ``left_branch`` and all others.  Each
    side predicts its majority label, and the feature's badness is the
    fraction of examples the stump gets wrong::

        badness = 1 − (majority count left + majority count right) / n

    Parameters
    ----------
    left_branch : float, default=1.0
        Feature value that sends an example to the left side.  Absent
        features read as 0.
    verbose : int, default=0

    Examples
    --------
    >>> pp = TrainingErrorPreprocessor()
    >>> reduced = pp.preprocess_train(data, 1)             # doctest: +SKIP
    >>> pp.badness_                                        # doctest: +SKIP
    {0: 0.0, 1: 0.5}
    """

    def __init__(self, left_branch: float = 1.0, verbose: int = 0):
        super().__init__(verbose=verbose)
        self.left_branch = left_branch

    def _feature_badness(self, data: DataSet, index: int) -> float:
        if not data.examples:
            return 0.0
        left, right = self._split(data.examples, index)
        correct = majority_label(left)[1] + majority_label(right)[1]
        return 1.0 - correct / len(data.examples)

    def _split(self, examples: list[Example], index: int):
        left, right = [], []
        for e in examples:
            if e.get_feature(index) == self.left_branch:
                left.append(e)
            else:
                right.append(e)
        return left, right


def majority_label(examples: list[Example]) -> tuple[float | None, int]:
    """Most frequent label among ``examples`` and how many carry it.

    Labels are scanned in the order they first appear; a later label only
    takes over with a strictly greater count, so the first-seen label wins
    a tie.  An empty list gives ``(None, 0)``.
    """
    counts: dict[float, int] = {}
    for e in examples:
        counts[e.label] = counts.get(e.label, 0) + 1

    best_label, best_count = None, 0
    for label, count in counts.items():
        if count > best_count:
            best_label, best_count = label, count
    return best_label, best_count


class AblationPreprocessor(_RankingPreprocessor):
    """Rank features by how well a classifier does without each of them.

    For every feature, a copy of the data without that single feature is
    evaluated with ``n_folds``-fold cross-validation; the badness is the
    ablation error ``1 − mean accuracy``.  The features with the *lowest*
    ablation error, whose absence costs the classifier least, are dropped
    first.

    This costs ``n_features × n_folds`` classifier trainings per call.

    Parameters
    ----------
    classifier : Classifier, optional
        Evaluator.  If ``None``, a decision tree
        (``SklearnClassifier(DecisionTreeClassifier())``) is created on
        first use and kept.
    n_folds : int, default=10
        Cross-validation folds per feature.
    random_state : None, int or numpy.random.Generator, optional
        Source for the fold partitions.
    verbose : int, default=0

    Examples
    --------
    >>> from feature_ablation import GradientDescentClassifier
    >>> pp = AblationPreprocessor(n_folds=5)
    >>> reduced = pp.preprocess_train(data, 2, GradientDescentClassifier())   # doctest: +SKIP
    """

    drop_highest = False

    def __init__(
        self,
        classifier: Any = None,
        n_folds: int = 10,
        random_state=None,
        verbose: int = 0,
    ):
        super().__init__(verbose=verbose)
        self.classifier   = classifier
        self.n_folds      = n_folds
        self.random_state = random_state

    def preprocess_train(self, data: DataSet, n: int, classifier: Classifier | None = None) -> DataSet:
        """Like :meth:`DataPreprocessor.preprocess_train`.

        If ``classifier`` is given it becomes the evaluator for this and
        later calls.
        """
        if classifier is not None:
            self.set_classifier(classifier)
        return super().preprocess_train(data, n)

    def _choose_unwanted(self, data: DataSet, n: int) -> list[int]:
        if self.classifier is None:
            self.classifier = SklearnClassifier(DecisionTreeClassifier())
        self._rng = np.random.default_rng(self.random_state)
        return super()._choose_unwanted(data, n)

    def _feature_badness(self, data: DataSet, index: int) -> float:
        ablated = data.copy_with_features([index])
        cvs = CrossValidationSet(ablated, self.n_folds, random_state=self._rng)
        return 1.0 - average_list(test_n_fold(cvs, self.classifier, self.n_folds))

    def _validate_params(self, data: DataSet, n: int):
        super()._validate_params(data, n)
        if self.n_folds < 1:
            raise ValueError("n_folds must be >= 1.")
