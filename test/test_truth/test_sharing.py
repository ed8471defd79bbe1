"""Tests for the hit sharing between candidates and targets."""

import numpy as np
import pytest

from recoval.data import ContributionMap, RecoCandidate
from recoval.truth import (
    get_candidate_to_reconstructable_hits,
    get_hit_sharing_maps,
    merge_contribution_maps,
    select_reconstructable_particles,
)


@pytest.fixture(name="targets")
def fixture_targets(event):
    """Selects the neutrino targets of the toy event."""
    return select_reconstructable_particles(event["particles"], event["hits"])


class TestReconstructableHits:
    """Test the collection of the reconstructable hits of candidates."""

    def test_no_folding(self, candidates, targets, event):
        """Only the hits attributed to a target are kept."""
        candidate_to_hits = get_candidate_to_reconstructable_hits(candidates, targets)
        np.testing.assert_array_equal(candidate_to_hits[0], event["muon_hits"])
        assert len(candidate_to_hits[1]) == 12
        assert len(candidate_to_hits[2]) == 3
        assert len(candidate_to_hits[3]) == 16
        assert len(candidate_to_hits[4]) == 0

    def test_folding(self, candidates, targets):
        """With folding, the hits of daughter candidates are included."""
        candidate_to_hits = get_candidate_to_reconstructable_hits(
            candidates, targets, fold_back_hierarchy=True
        )
        assert len(candidate_to_hits[0]) == 35
        assert len(candidate_to_hits[2]) == 3

    def test_several_maps(self, candidates, targets, event):
        """Hits attributed in any of the maps are reconstructable."""
        cosmic = select_reconstructable_particles(
            event["particles"], event["hits"], criteria="cosmic_ray"
        )
        candidate_to_hits = get_candidate_to_reconstructable_hits(
            candidates, [targets, cosmic]
        )
        assert len(candidate_to_hits[4]) == 30

    def test_three_d_hits_ignored(self, targets):
        """Three-dimensional hits are not reconstructable 2D hits."""
        candidate = RecoCandidate(id=0, hit_ids_3d=[0, 1, 2])
        candidate_to_hits = get_candidate_to_reconstructable_hits([candidate], targets)
        assert len(candidate_to_hits[0]) == 0

    def test_duplicate_candidates(self, targets):
        """Duplicate candidate indexes are rejected."""
        with pytest.raises(AssertionError):
            get_candidate_to_reconstructable_hits(
                [RecoCandidate(id=0), RecoCandidate(id=0)], targets
            )


class TestSharingMaps:
    """Test the bipartite sharing maps."""

    def test_split_target(self):
        """A target split between two candidates shares 8 and 2 hits."""
        targets = ContributionMap.from_lists({7: range(10)})
        candidate_to_hits = {0: range(8), 1: range(8, 10)}
        candidate_to_targets, target_to_candidates = get_hit_sharing_maps(
            candidate_to_hits, targets
        )
        assert candidate_to_targets.counts(0) == {7: 8}
        assert candidate_to_targets.counts(1) == {7: 2}
        records = target_to_candidates[7]
        assert [(r.candidate_id, r.num_shared) for r in records] == [(0, 8), (1, 2)]

    def test_toy_event(self, candidates, targets):
        """Candidates share their hits with the targets they cover."""
        candidate_to_hits = get_candidate_to_reconstructable_hits(candidates, targets)
        candidate_to_targets, target_to_candidates = get_hit_sharing_maps(
            candidate_to_hits, targets
        )
        assert candidate_to_targets.counts(0) == {1: 32}
        assert candidate_to_targets.counts(3) == {3: 16}
        assert candidate_to_targets[4] == []
        assert target_to_candidates.counts(2, by="candidate") == {1: 12, 2: 3}

    def test_folded_ordering(self, candidates, targets):
        """Records are sorted by shared count, then by candidate index."""
        candidate_to_hits = get_candidate_to_reconstructable_hits(
            candidates, targets, fold_back_hierarchy=True
        )
        _, target_to_candidates = get_hit_sharing_maps(candidate_to_hits, targets)
        records = target_to_candidates[2]
        assert [r.candidate_id for r in records] == [1, 0, 2]
        assert [r.num_shared for r in records] == [12, 3, 3]

    def test_every_key_present(self):
        """Candidates and targets without overlap still get an entry."""
        targets = ContributionMap.from_lists({0: [0, 1], 1: [5]})
        candidate_to_targets, target_to_candidates = get_hit_sharing_maps(
            {3: [0], 4: [9]}, targets
        )
        assert set(candidate_to_targets) == {3, 4}
        assert set(target_to_candidates) == {0, 1}
        assert candidate_to_targets[4] == []
        assert target_to_candidates[1] == []

    def test_duality(self, candidates, targets):
        """Both maps hold the same counts for every pair."""
        candidate_to_hits = get_candidate_to_reconstructable_hits(
            candidates, targets, fold_back_hierarchy=True
        )
        candidate_to_targets, target_to_candidates = get_hit_sharing_maps(
            candidate_to_hits, targets
        )
        forward = {
            (r.candidate_id, r.target_id): r.num_shared
            for records in candidate_to_targets.values()
            for r in records
        }
        backward = {
            (r.candidate_id, r.target_id): r.num_shared
            for records in target_to_candidates.values()
            for r in records
        }
        assert forward == backward
        assert all(n > 0 for n in forward.values())

    def test_shared_hits(self, candidates, targets):
        """Records hold the indexes of the shared hits."""
        candidate_to_hits = get_candidate_to_reconstructable_hits(candidates, targets)
        candidate_to_targets, _ = get_hit_sharing_maps(candidate_to_hits, targets)
        record = candidate_to_targets[2][0]
        np.testing.assert_array_equal(record.hit_ids, [32, 33, 34])

    def test_merged_targets(self):
        """A target present in several maps is merged by union."""
        first = ContributionMap.from_lists({0: [0, 1]})
        second = ContributionMap.from_lists({0: [1, 2], 1: [3]})
        merged = merge_contribution_maps([first, second])
        np.testing.assert_array_equal(merged[0], [0, 1, 2])

        candidate_to_targets, _ = get_hit_sharing_maps(
            {0: [0, 1, 2, 3]}, [first, second]
        )
        assert candidate_to_targets.counts(0) == {0: 3, 1: 1}

    def test_empty(self):
        """Empty inputs give empty maps."""
        candidate_to_targets, target_to_candidates = get_hit_sharing_maps({}, [])
        assert len(candidate_to_targets) == 0
        assert len(target_to_candidates) == 0
