"""Tests for the track/shower classifiers."""

import os

import numpy as np
import pytest

from recoval.characterise import (
    BoostedDecisionTree,
    SupportVectorMachine,
    classifier_factory,
)


@pytest.fixture(name="training_set")
def fixture_training_set():
    """Generates two well separated clusters of feature vectors."""
    rng = np.random.default_rng(seed=0)
    tracks = rng.normal(loc=5.0, scale=0.5, size=(40, 2))
    showers = rng.normal(loc=-5.0, scale=0.5, size=(40, 2))
    features = np.vstack([tracks, showers])
    labels = np.array([True] * 40 + [False] * 40)

    return features, labels


class TestClassifiers:
    """Test the classifier wrappers."""

    @pytest.mark.parametrize("cls", [BoostedDecisionTree, SupportVectorMachine])
    def test_fit_classify(self, cls, training_set):
        """Trained classifiers separate the two clusters."""
        classifier = cls(seed=0).fit(*training_set)
        assert classifier.classify([5.0, 5.0])
        assert not classifier.classify([-5.0, -5.0])

        prob_track = classifier.calculate_probability([5.0, 5.0])
        prob_shower = classifier.calculate_probability([-5.0, -5.0])
        assert 0.0 <= prob_shower < 0.5 < prob_track <= 1.0

    def test_single_class(self):
        """Without track examples, the track probability is zero."""
        classifier = BoostedDecisionTree()
        classifier.model.classes_ = np.array([0])
        assert classifier.calculate_probability([1.0]) == 0.0

    def test_save_load(self, tmp_path, training_set):
        """Trained models can be stored and loaded back."""
        model_path = os.path.join(tmp_path, "bdt.joblib")
        BoostedDecisionTree(seed=0).fit(*training_set).save(model_path)

        classifier = classifier_factory({"name": "bdt", "model_path": model_path})
        assert classifier.classify([5.0, 5.0])

    def test_load_with_hyperparameters(self, tmp_path):
        """Hyperparameters cannot be specified for a trained model."""
        with pytest.raises(AssertionError):
            BoostedDecisionTree(model_path=os.path.join(tmp_path, "m"), n_estimators=3)

    def test_factory(self):
        """Classifiers are built from their name."""
        assert isinstance(classifier_factory("svm"), SupportVectorMachine)
        with pytest.warns(DeprecationWarning):
            classifier = classifier_factory("adaboost")
        assert isinstance(classifier, BoostedDecisionTree)
