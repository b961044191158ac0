"""
feature_ablation
================
Gradient-descent and two-layer network classifiers, plus feature-selection
preprocessors that decide which features to discard by retraining.

Classifiers
-----------
All classifiers share one capability: ``train(dataset)``,
``classify(example)`` and ``confidence(example)``.  Labels are ±1.

**GradientDescentClassifier**
    Linear model trained by per-example stochastic gradient descent with
    an exponential or hinge surrogate loss and no, L1 or L2
    regularization.

**TwoLayerNetwork**
    One hidden layer of tanh units and a tanh output unit, trained by
    online backpropagation.

**SklearnClassifier**
    Wraps any scikit-learn classifier (decision tree, k-NN, ...) so it
    can be evaluated and used for ablation like the others.

Feature selection
-----------------
``preprocess_train(data, n)`` removes ``n`` features and remembers which;
``preprocess_test(data)`` removes the same ones from other data.

**RandomPreprocessor**        – ``n`` features at random.
**TrainingErrorPreprocessor** – the ``n`` features whose decision stump
                                has the highest training error.
**AblationPreprocessor**      – the ``n`` features whose removal gives the
                                best cross-validated accuracy.

Public API
----------
Example, DataSet, CrossValidationSet   – sparse data containers
GradientDescentClassifier, TwoLayerNetwork, SklearnClassifier
RandomPreprocessor, TrainingErrorPreprocessor, AblationPreprocessor
test_n_fold, average_list             – cross-validated accuracy
"""

from .base import Classifier, SklearnClassifier
from .data import CrossValidationSet, DataSet, DataSetSplit, Example
from .evaluation import (
    accuracies_for_preprocessor,
    accuracy_for_classifier,
    accuracy_table,
    average_list,
    test_n_fold,
)
from .gradient_descent import (
    EXPONENTIAL_LOSS,
    HINGE_LOSS,
    L1_REGULARIZATION,
    L2_REGULARIZATION,
    NO_REGULARIZATION,
    GradientDescentClassifier,
)
from .preprocess import (
    AblationPreprocessor,
    DataPreprocessor,
    RandomPreprocessor,
    TrainingErrorPreprocessor,
)
from .two_layer import TwoLayerNetwork

__all__ = [
    "AblationPreprocessor",
    "Classifier",
    "CrossValidationSet",
    "DataPreprocessor",
    "DataSet",
    "DataSetSplit",
    "EXPONENTIAL_LOSS",
    "Example",
    "GradientDescentClassifier",
    "HINGE_LOSS",
    "L1_REGULARIZATION",
    "L2_REGULARIZATION",
    "NO_REGULARIZATION",
    "RandomPreprocessor",
    "SklearnClassifier",
    "TrainingErrorPreprocessor",
    "TwoLayerNetwork",
    "accuracies_for_preprocessor",
    "accuracy_for_classifier",
    "accuracy_table",
    "average_list",
    "test_n_fold",
]

__version__ = "0.1.0"
