"""Tests for the name-based lookup helpers."""

import pytest

from recoval.characterise import mva
from recoval.truth import criteria
from recoval.utils.factory import fetch, instantiate, module_dict


class TestModuleDict:
    """Test the registration of the public objects of a module."""

    def test_names(self):
        """Classes are registered under their name and aliases."""
        classes = module_dict(mva)
        assert classes["bdt"] is mva.BoostedDecisionTree
        assert classes["adaboost"] is mva.BoostedDecisionTree
        assert classes["SupportVectorMachine"] is mva.SupportVectorMachine
        assert "MvaBase" not in classes

    def test_prefix(self):
        """Prefixed names are also registered without their prefix."""
        functions = module_dict(criteria, prefix="is_")
        assert functions["cosmic_ray"] is criteria.is_cosmic_ray
        assert functions["is_cosmic_ray"] is criteria.is_cosmic_ray
        assert "cosmic_ray" not in module_dict(criteria)

    def test_fetch(self):
        """Unknown names raise a ValueError, aliases are deprecated."""
        classes = module_dict(mva)
        assert fetch(classes, "svm") is mva.SupportVectorMachine
        with pytest.warns(DeprecationWarning):
            assert fetch(classes, "adaboost") is mva.BoostedDecisionTree
        with pytest.raises(ValueError, match="Classifier not recognized"):
            fetch(classes, "random_forest", "classifier")


class TestInstantiate:
    """Test the instantiation from configuration blocks."""

    def test_keyword_arguments(self):
        """Classes are instantiated with their keyword arguments."""
        classes = module_dict(mva)
        bdt = instantiate(classes, {"name": "bdt", "n_estimators": 7})
        assert bdt.model.n_estimators == 7

        svm = instantiate(classes, {"name": "svm", "kwargs": {"c": 2.0}})
        assert svm.model.C == 2.0

    def test_unknown(self):
        """Unknown class names raise a ValueError."""
        with pytest.raises(ValueError):
            instantiate(module_dict(mva), "random_forest")

    def test_missing_name(self):
        """The configuration block must name the class."""
        with pytest.raises(AssertionError):
            instantiate(module_dict(mva), {"n_estimators": 7})

    def test_ambiguous(self):
        """Arguments cannot be provided twice."""
        with pytest.raises(AssertionError):
            instantiate(
                module_dict(mva),
                {"name": "bdt", "seed": 1, "kwargs": {"seed": 2}},
            )

    def test_bad_argument(self):
        """Unexpected keyword arguments are reported and raised."""
        with pytest.raises(TypeError):
            instantiate(module_dict(mva), {"name": "bdt", "depth": 3})
