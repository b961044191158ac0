"""
Example 2 – Comparing Preprocessors Across Classifiers
=======================================================
Demonstrates:
  * Binary 0/1 features where a few columns carry the label
  * All three preprocessors removing one feature at a time
  * Gradient descent, a two-layer network, a decision tree and k-NN
    evaluated with the same cross-validation harness
"""

import numpy as np
from sklearn.neighbors import KNeighborsClassifier
from sklearn.tree import DecisionTreeClassifier

from feature_ablation import (
    AblationPreprocessor,
    DataSet,
    GradientDescentClassifier,
    RandomPreprocessor,
    SklearnClassifier,
    TrainingErrorPreprocessor,
    TwoLayerNetwork,
    accuracy_table,
)
from feature_ablation.plot import plot_accuracy_curves

# ---------------------------------------------------------------------------
# 1. Synthetic data: label = majority vote of features 0-2, plus noise
# ---------------------------------------------------------------------------
rng = np.random.default_rng(0)
X = rng.integers(0, 2, (200, 10)).astype(float)
y = np.where(X[:, :3].sum(axis=1) >= 2, 1.0, -1.0)
data = DataSet.from_arrays(X, y)

print(f"Dataset: {len(data)} samples, {len(data.feature_map)} binary features\n")

# ---------------------------------------------------------------------------
# 2. Accuracy while removing up to 7 features
# ---------------------------------------------------------------------------
classifiers = [
    GradientDescentClassifier(iterations=10, random_state=0),
    TwoLayerNetwork(5, iterations=30, random_state=0),
    SklearnClassifier(DecisionTreeClassifier(random_state=0)),
    SklearnClassifier(KNeighborsClassifier(n_neighbors=5)),
]
preprocessors = [
    RandomPreprocessor(random_state=0),
    TrainingErrorPreprocessor(),
    AblationPreprocessor(n_folds=5, random_state=0),
]

table = accuracy_table(
    preprocessors, classifiers, data,
    iterations_to_avg=1, n_folds=5, n_features=8, random_state=0, verbose=1,
)

# ---------------------------------------------------------------------------
# 3. Visualise the decision tree's curves
# ---------------------------------------------------------------------------
plot_accuracy_curves(
    {type(pp).__name__: table[2, p] for p, pp in enumerate(preprocessors)},
    title="Decision tree – accuracy vs. features removed",
    save_path="example2_curves.png",
)
print("\nPlot saved: example2_curves.png")
