"""
Example 1 – Breast Cancer (Binary Classification)
==================================================
Dataset : Wisconsin Breast Cancer (30 features, 2 classes, 569 samples)
Task    : Drop the 20 features a linear model misses least (ablation study)
Model   : GradientDescentClassifier (hinge loss, L2) with 5-fold CV per feature
"""

import numpy as np
from sklearn.datasets import load_breast_cancer
from sklearn.model_selection import train_test_split
from sklearn.preprocessing import StandardScaler

from feature_ablation import (
    AblationPreprocessor,
    DataSet,
    GradientDescentClassifier,
    HINGE_LOSS,
    L2_REGULARIZATION,
)
from feature_ablation.plot import plot_badness_ranking

# ---------------------------------------------------------------------------
# 1. Load data
# ---------------------------------------------------------------------------
X, y = load_breast_cancer(return_X_y=True)
feature_names = load_breast_cancer().feature_names.tolist()
y = np.where(y == 1, 1.0, -1.0)

X_train, X_test, y_train, y_test = train_test_split(
    X, y, test_size=0.2, random_state=42, stratify=y,
)
scaler  = StandardScaler().fit(X_train)
train   = DataSet.from_arrays(scaler.transform(X_train), y_train, feature_names)
test    = DataSet.from_arrays(scaler.transform(X_test),  y_test,  feature_names)

print(f"Dataset: {X.shape[0]} samples, {X.shape[1]} features, 2 classes")

# ---------------------------------------------------------------------------
# 2. Ablation study
# ---------------------------------------------------------------------------
clf = GradientDescentClassifier(
    loss=HINGE_LOSS,
    regularization=L2_REGULARIZATION,
    lambda_=0.01,
    eta=0.01,
    iterations=20,
    random_state=0,
)
selector = AblationPreprocessor(clf, n_folds=5, random_state=0, verbose=1)
train_red = selector.preprocess_train(train, 20)
test_red  = selector.preprocess_test(test)
print()
print(selector.summary())

# ---------------------------------------------------------------------------
# 3. Evaluate on held-out test set
# ---------------------------------------------------------------------------
for name, (tr, te) in [("all features", (train, test)), ("kept features", (train_red, test_red))]:
    clf.train(tr)
    acc = np.mean([clf.classify(e) == e.label for e in te])
    print(f"Test accuracy ({name}, {len(tr.feature_map)}): {acc:.4f}")

# ---------------------------------------------------------------------------
# 4. Visualise
# ---------------------------------------------------------------------------
plot_badness_ranking(
    selector.badness_,
    removed=selector.unwanted_features_,
    feature_names=train.feature_map,
    top_n=30,
    title="Breast Cancer – ablation error per feature",
    save_path="example1_ablation.png",
)
print("Plot saved: example1_ablation.png")
