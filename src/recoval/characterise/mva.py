"""Binary classifiers used to tell track-like from shower-like candidates.

Each classifier wraps a scikit-learn estimator. A trained model can either
be fitted in place or loaded from a file produced by :meth:`MvaBase.save`.
"""

from abc import ABC, abstractmethod

import joblib
import numpy as np
from sklearn.ensemble import AdaBoostClassifier
from sklearn.svm import SVC
from sklearn.tree import DecisionTreeClassifier

from recoval.utils.logger import logger

__all__ = ["BoostedDecisionTree", "SupportVectorMachine"]


class MvaBase(ABC):
    """Base class of all track/shower classifiers.

    Attributes
    ----------
    name : str
        Name of the classifier as specified in the configuration
    model : object
        Underlying scikit-learn estimator
    """

    name = None

    def __init__(self, model_path=None, **kwargs):
        """Builds the underlying estimator or loads a trained one.

        Parameters
        ----------
        model_path : str, optional
            Path to a trained model. If not provided, an untrained estimator
            is built from the keyword arguments.
        **kwargs : dict, optional
            Estimator hyperparameters
        """
        if model_path is not None:
            assert not kwargs, (
                "Cannot specify hyperparameters when loading a trained "
                f"model: {list(kwargs.keys())}."
            )
            logger.info("Loading %s model from %s.", self.name, model_path)
            self.model = joblib.load(model_path)
        else:
            self.model = self.build(**kwargs)

    @abstractmethod
    def build(self, **kwargs):
        """Builds an untrained estimator.

        Returns
        -------
        object
            Scikit-learn classifier
        """
        raise NotImplementedError

    def fit(self, features, labels):
        """Trains the classifier.

        Parameters
        ----------
        features : np.ndarray
            (N, F) Feature vectors
        labels : np.ndarray
            (N) Boolean labels (`True` for track-like examples)

        Returns
        -------
        MvaBase
            The trained classifier
        """
        features = np.asarray(features, dtype=np.float64)
        labels = np.asarray(labels, dtype=np.int64)
        self.model.fit(features, labels)

        return self

    def save(self, model_path):
        """Stores the trained estimator to file.

        Parameters
        ----------
        model_path : str
            Output path
        """
        joblib.dump(self.model, model_path)

    def classify(self, features):
        """Classifies one feature vector.

        Parameters
        ----------
        features : np.ndarray
            (F) Feature vector

        Returns
        -------
        bool
            `True` if the feature vector is classified as track-like
        """
        features = np.asarray(features, dtype=np.float64).reshape(1, -1)

        return bool(self.model.predict(features)[0] == 1)

    def calculate_probability(self, features):
        """Computes the track-like probability of one feature vector.

        Parameters
        ----------
        features : np.ndarray
            (F) Feature vector

        Returns
        -------
        float
            Probability that the feature vector is track-like
        """
        classes = list(self.model.classes_)
        if 1 not in classes:
            return 0.0

        features = np.asarray(features, dtype=np.float64).reshape(1, -1)
        probs = self.model.predict_proba(features)[0]

        return float(probs[classes.index(1)])


class BoostedDecisionTree(MvaBase):
    """Adaptive boosted decision tree classifier."""

    name = "bdt"
    aliases = ("adaboost",)

    def build(self, n_estimators=100, max_depth=3, learning_rate=1.0, seed=None):
        """Builds an untrained boosted decision tree.

        Parameters
        ----------
        n_estimators : int, default 100
            Number of boosting rounds
        max_depth : int, default 3
            Maximum depth of each weak learner
        learning_rate : float, default 1.0
            Weight applied to each weak learner
        seed : int, optional
            Random seed

        Returns
        -------
        AdaBoostClassifier
            Boosted decision tree
        """
        return AdaBoostClassifier(
            estimator=DecisionTreeClassifier(max_depth=max_depth),
            n_estimators=n_estimators,
            learning_rate=learning_rate,
            random_state=seed,
        )


class SupportVectorMachine(MvaBase):
    """Support vector machine classifier with calibrated probabilities."""

    name = "svm"

    def build(self, kernel="rbf", c=1.0, gamma="scale", seed=None):
        """Builds an untrained support vector machine.

        Parameters
        ----------
        kernel : str, default 'rbf'
            Kernel function
        c : float, default 1.0
            Regularization parameter
        gamma : Union[str, float], default 'scale'
            Kernel coefficient
        seed : int, optional
            Random seed used by the probability calibration

        Returns
        -------
        SVC
            Support vector machine
        """
        return SVC(kernel=kernel, C=c, gamma=gamma, probability=True, random_state=seed)
