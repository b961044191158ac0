"""
feature_ablation.data
=====================
Sparse in-memory examples, datasets and cross-validation folds.

An :class:`Example` stores only its non-zero features as a mapping
``feature index -> value``; any index it does not store reads as 0.  A
:class:`DataSet` is an ordered list of examples plus a mapping from
feature index to feature name, which defines the full feature-index set
the classifiers learn over.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Mapping, NamedTuple, Sequence

import numpy as np


__all__ = ["CrossValidationSet", "DataSet", "DataSetSplit", "Example"]


BIAS_FEATURE_NAME = "bias"


class Example:
    """One labelled data point with sparse real-valued features.

    Parameters
    ----------
    label : float
        Class label, -1.0 or +1.0.
    features : mapping of int to float, optional
        Active features.  Indices that are not present are implicitly 0.
    """

    def __init__(self, label: float, features: Mapping[int, float] | None = None):
        self.label = float(label)
        self._features: dict[int, float] = {
            int(i): float(v) for i, v in (features or {}).items()
        }

    @property
    def feature_set(self) -> set[int]:
        """Indices of the features this example actually stores."""
        return set(self._features)

    def get_feature(self, index: int) -> float:
        return self._features.get(index, 0.0)

    def items(self):
        return self._features.items()

    def copy(self) -> "Example":
        return Example(self.label, self._features)

    def without_features(self, indices: Iterable[int]) -> "Example":
        """Copy of this example with ``indices`` dropped from its active set."""
        dropped = set(indices)
        return Example(
            self.label,
            {i: v for i, v in self._features.items() if i not in dropped},
        )

    def with_feature(self, index: int, value: float) -> "Example":
        features = dict(self._features)
        features[index] = value
        return Example(self.label, features)

    def __eq__(self, other):
        if not isinstance(other, Example):
            return NotImplemented
        return self.label == other.label and self._features == other._features

    def __repr__(self):
        return f"Example(label={self.label}, features={self._features})"


class DataSetSplit(NamedTuple):
    """A train/test partition of a dataset."""

    train: "DataSet"
    test: "DataSet"


class DataSet:
    """Ordered collection of examples over a known feature-index set.

    Parameters
    ----------
    feature_map : mapping of int to str, optional
        Feature index -> feature name.  Its keys are the dataset's full
        feature-index set.
    examples : iterable of Example, optional
        Initial examples, added in order.

    Attributes
    ----------
    bias_index : int or None
        Index of the constant bias feature when this dataset was built by
        :meth:`with_bias`, else ``None``.
    """

    def __init__(
        self,
        feature_map: Mapping[int, str] | None = None,
        examples: Iterable[Example] | None = None,
    ):
        self.feature_map: dict[int, str] = dict(feature_map or {})
        self.examples: list[Example] = []
        self.bias_index: int | None = None
        for example in examples or ():
            self.add_example(example)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_arrays(
        cls,
        X: np.ndarray,
        y: np.ndarray,
        feature_names: Sequence[str] | None = None,
    ) -> "DataSet":
        """Build a sparse dataset from a dense matrix and ±1 labels.

        Zero entries of ``X`` are not stored; column ``j`` becomes feature
        index ``j``.

        Parameters
        ----------
        X : array-like, shape (n_samples, n_features)
        y : array-like, shape (n_samples,)
            Labels, each -1 or +1.
        feature_names : sequence of str, optional
            Names for the columns.  Defaults to ``x0``, ``x1``, ...
        """
        X_arr = np.asarray(X, dtype=float)
        y_arr = np.asarray(y, dtype=float)
        if X_arr.ndim != 2:
            raise ValueError(f"X must be 2-dimensional, got shape {X_arr.shape}.")
        if len(X_arr) != len(y_arr):
            raise ValueError(
                f"X and y have inconsistent lengths ({len(X_arr)} != {len(y_arr)})."
            )
        bad = set(np.unique(y_arr).tolist()) - {-1.0, 1.0}
        if bad:
            raise ValueError(f"Labels must be -1 or +1, got {sorted(bad)}.")

        n_features = X_arr.shape[1]
        if feature_names is None:
            feature_names = [f"x{j}" for j in range(n_features)]
        if len(feature_names) != n_features:
            raise ValueError(
                f"Expected {n_features} feature names, got {len(feature_names)}."
            )

        data = cls(dict(enumerate(feature_names)))
        for row, label in zip(X_arr, y_arr):
            nonzero = np.flatnonzero(row)
            data.add_example(Example(label, {int(j): row[j] for j in nonzero}))
        return data

    def add_example(self, example: Example) -> None:
        for index in example.feature_set:
            self.feature_map.setdefault(index, str(index))
        self.examples.append(example)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def all_feature_indices(self) -> set[int]:
        return set(self.feature_map)

    @property
    def labels(self) -> np.ndarray:
        return np.array([e.label for e in self.examples], dtype=float)

    def __len__(self) -> int:
        return len(self.examples)

    def __iter__(self) -> Iterator[Example]:
        return iter(self.examples)

    def to_arrays(
        self, feature_indices: Sequence[int] | None = None
    ) -> tuple[np.ndarray, np.ndarray]:
        """Dense ``(X, y)`` with one column per feature index.

        Columns follow ``feature_indices`` when given, otherwise ascending
        feature index.
        """
        if feature_indices is None:
            feature_indices = sorted(self.feature_map)
        X = np.array(
            [[e.get_feature(i) for i in feature_indices] for e in self.examples],
            dtype=float,
        ).reshape(len(self.examples), len(feature_indices))
        return X, self.labels

    # ------------------------------------------------------------------
    # Derived copies
    # ------------------------------------------------------------------

    def copy_with_features(self, unwanted: Iterable[int]) -> "DataSet":
        """Copy of the dataset with the ``unwanted`` feature indices removed.

        Removed indices disappear from the feature map and from the active
        set of every example.
        """
        dropped = set(unwanted)
        reduced = DataSet(
            {i: name for i, name in self.feature_map.items() if i not in dropped}
        )
        reduced.examples = [e.without_features(dropped) for e in self.examples]
        if self.bias_index is not None and self.bias_index not in dropped:
            reduced.bias_index = self.bias_index
        return reduced

    def with_bias(self) -> "DataSet":
        """Copy where every example carries a constant feature equal to 1."""
        bias_index = max(self.feature_map, default=-1) + 1
        augmented = DataSet(self.feature_map)
        augmented.feature_map[bias_index] = BIAS_FEATURE_NAME
        augmented.bias_index = bias_index
        augmented.examples = [e.with_feature(bias_index, 1.0) for e in self.examples]
        return augmented

    def add_bias_feature(self, example: Example) -> Example:
        """Apply this dataset's bias augmentation to an outside example."""
        if self.bias_index is None:
            raise ValueError("Dataset has no bias feature; build it with with_bias().")
        return example.with_feature(self.bias_index, 1.0)

    def subset(self, positions: Iterable[int]) -> "DataSet":
        """Dataset with the examples at ``positions``, same feature map."""
        part = DataSet(self.feature_map)
        part.examples = [self.examples[p] for p in positions]
        part.bias_index = self.bias_index
        return part

    def __repr__(self):
        return (
            f"DataSet(n_examples={len(self.examples)}, "
            f"n_features={len(self.feature_map)})"
        )


class CrossValidationSet:
    """Fixed partition of a dataset into ``n_folds`` cross-validation folds.

    Example positions are permuted once, then cut into ``n_folds`` nearly
    equal consecutive blocks.  With more folds than examples some folds
    are empty.

    Parameters
    ----------
    data : DataSet
    n_folds : int
        Number of folds, at least 1.
    random_state : None, int or numpy.random.Generator, optional
        Source for the permutation.  ``None`` draws from fresh OS entropy.
    """

    def __init__(self, data: DataSet, n_folds: int, random_state=None):
        if n_folds < 1:
            raise ValueError(f"n_folds must be >= 1, got {n_folds}.")
        self.data = data
        self.n_folds = n_folds
        rng = np.random.default_rng(random_state)
        order = rng.permutation(len(data))
        self.folds: list[np.ndarray] = np.array_split(order, n_folds)

    def get_validation_set(self, fold: int) -> DataSetSplit:
        """Split with fold ``fold`` held out for testing."""
        if not 0 <= fold < self.n_folds:
            raise IndexError(f"fold {fold} out of range for {self.n_folds} folds.")
        test_positions = self.folds[fold]
        train_positions = np.concatenate(
            [f for k, f in enumerate(self.folds) if k != fold] or [np.array([], dtype=int)]
        )
        return DataSetSplit(
            train=self.data.subset(train_positions.tolist()),
            test=self.data.subset(test_positions.tolist()),
        )
