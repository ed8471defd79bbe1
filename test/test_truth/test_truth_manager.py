"""Tests for the truth-matching manager."""

import pytest

from recoval.config import ConfigValidationError, load_config
from recoval.truth import TruthMatchManager


class TestManagerConfig:
    """Test the validation of the manager configuration."""

    def test_default(self):
        """The default configuration runs a single neutrino pass."""
        manager = TruthMatchManager()
        assert list(manager.selections) == ["neutrino"]
        assert not manager.fold_candidate_hierarchy

    def test_yaml(self):
        """The manager can be configured from a YAML block."""
        cfg = load_config(
            """
truth_match:
  parameters:
    min_primary_good_hits: 10
  selections:
    neutrino: beam_neutrino_final_state
    cosmic:
      criteria: cosmic_ray
      parameters:
        min_primary_good_views: 3
"""
        )
        manager = TruthMatchManager(cfg["truth_match"])
        _, neutrino_params = manager.selections["neutrino"]
        _, cosmic_params = manager.selections["cosmic"]
        assert neutrino_params.min_primary_good_hits == 10
        assert cosmic_params.min_primary_good_hits == 10
        assert cosmic_params.min_primary_good_views == 3

    def test_config_file(self, tmp_path):
        """The manager can be built from a configuration file."""
        (tmp_path / "base.yaml").write_text(
            "truth_match:\n  selections:\n    cosmic: cosmic_ray\n"
        )
        cfg_path = tmp_path / "main.yaml"
        cfg_path.write_text(
            "include: base.yaml\n"
            "truth_match.parameters.min_primary_good_views: 3\n"
        )
        manager = TruthMatchManager.from_config_file(str(cfg_path))
        assert list(manager.selections) == ["cosmic"]
        _, parameters = manager.selections["cosmic"]
        assert parameters.min_primary_good_views == 3

        with pytest.raises(ConfigValidationError):
            TruthMatchManager.from_config_file(str(cfg_path), "characterise")

    @pytest.mark.parametrize(
        "cfg",
        [
            [],
            {"unknown": 1},
            {"parameters": {"min_primary_good_hits": -1}},
            {"parameters": {"max_photon_propagation": "far"}},
            {"selections": {}},
            {"selections": {"neutrino": {"parameters": {}}}},
            {"selections": {"neutrino": "dark_matter"}},
            {"selections": {"neutrino": {"criteria": "primary", "cut": 1}}},
            {"fold_candidate_hierarchy": "yes"},
        ],
    )
    def test_invalid(self, cfg):
        """Invalid configurations are rejected at construction."""
        with pytest.raises(ConfigValidationError):
            TruthMatchManager(cfg)


class TestManagerCall:
    """Test the data products of the manager."""

    def test_products(self, event, candidates):
        """All the data products are produced."""
        manager = TruthMatchManager(
            {
                "selections": {
                    "neutrino": "beam_neutrino_final_state",
                    "cosmic": "cosmic_ray",
                }
            }
        )
        result = manager(event["particles"], event["hits"], candidates)

        assert sorted(result["mc_to_hits"]["neutrino"]) == [1, 2, 3]
        assert list(result["mc_to_hits"]["cosmic"]) == [6]
        assert result["hit_to_mc"][event["shared_hit"]] == 1
        assert len(result["candidate_to_hits"][4]) == 30
        assert result["candidate_to_mc"].counts(4) == {6: 30}
        assert result["mc_to_candidate"].counts(1, by="candidate") == {0: 32}

    def test_folded_candidates(self, event, candidates):
        """The candidate hierarchy can be folded."""
        manager = TruthMatchManager({"fold_candidate_hierarchy": True})
        result = manager(event["particles"], event["hits"], candidates)
        assert result["candidate_to_mc"].counts(0) == {1: 32, 2: 3}

    def test_empty(self):
        """Empty events give empty products."""
        result = TruthMatchManager()([], [], [])
        assert len(result["mc_to_hits"]["neutrino"]) == 0
        assert result["hit_to_mc"] == {}
        assert len(result["candidate_to_mc"]) == 0
        assert len(result["mc_to_candidate"]) == 0
