"""Test suite for the event data structures."""

import numpy as np
import pytest

from recoval.data import CaloHit, MCParticle, RecoCandidate
from recoval.utils.globals import VIEW_3D, VIEW_U, VIEW_W


class TestMCParticle:
    """Test the simulated particle data structure."""

    def test_defaults(self):
        """Array attributes get independent default values."""
        first, second = MCParticle(id=0), MCParticle(id=1)
        assert len(first.children_ids) == 0
        assert first.children_ids is not second.children_ids
        assert np.all(np.isinf(first.position))

    def test_kinematics(self):
        """Momentum norm and travel distance are computed from vectors."""
        particle = MCParticle(
            id=0,
            momentum=[3.0, 4.0, 0.0],
            position=[0.0, 0.0, 0.0],
            end_position=[0.0, 0.0, 2.0],
        )
        assert particle.p == pytest.approx(5.0)
        assert particle.distance_travel == pytest.approx(2.0)

    def test_undefined_kinematics(self):
        """Undefined vectors give zero momentum and travel distance."""
        particle = MCParticle(id=0)
        assert particle.p == 0.0
        assert particle.distance_travel == 0.0

    def test_fixed_length(self):
        """Fixed-length attributes must have the right size."""
        with pytest.raises(AssertionError):
            MCParticle(id=0, position=[0.0, 1.0])

    def test_equality(self):
        """Particles with identical attributes are equal."""
        first = MCParticle(id=0, pdg_code=13, children_ids=[1, 2])
        second = MCParticle(id=0, pdg_code=13, children_ids=[1, 2])
        third = MCParticle(id=0, pdg_code=13, children_ids=[1])
        assert first == second
        assert first != third


class TestCaloHit:
    """Test the detector hit data structure."""

    def test_contributions(self):
        """Contributions are cast to the expected types."""
        hit = CaloHit(id=0, view=VIEW_W, mc_ids=[1, 2], mc_weights=[1, 2])
        assert hit.mc_ids.dtype == np.int64
        assert hit.mc_weights.dtype == np.float64

    def test_no_contribution(self):
        """Hits may have no contribution at all."""
        hit = CaloHit(id=0)
        assert len(hit.mc_ids) == 0

    def test_view_name(self):
        """View names are parsed into view values."""
        assert CaloHit(id=0, view="w").view == VIEW_W
        assert CaloHit(id=0, view="THREE_D").view == VIEW_3D
        with pytest.raises(ValueError):
            CaloHit(id=0, view="x")


class TestRecoCandidate:
    """Test the reconstructed candidate data structure."""

    def test_hit_ids(self):
        """Hit indexes are fetched per view."""
        candidate = RecoCandidate(
            id=0, hit_ids_u=[0, 1], hit_ids_w=[5], hit_ids_3d=[9]
        )
        np.testing.assert_array_equal(candidate.get_hit_ids(), [0, 1, 5])
        np.testing.assert_array_equal(candidate.get_hit_ids(VIEW_3D), [9])
        hit_ids = candidate.get_hit_ids([VIEW_W, VIEW_U])
        np.testing.assert_array_equal(hit_ids, [5, 0, 1])
        assert candidate.num_hits_2d == 3

    def test_unknown_view(self):
        """Unknown views are rejected."""
        with pytest.raises(AssertionError):
            RecoCandidate(id=0).get_hit_ids(7)

    def test_str(self):
        """The string representation reports the number of 2D hits."""
        assert "num_hits_2d=0" in str(RecoCandidate(id=0))
