"""Test suite for the truth-matching data products."""

import numpy as np

from recoval.data import ContributionMap, HitSharingMap, HitSharingRecord


class TestContributionMap:
    """Test the contribution map container."""

    def test_sorted_unique(self):
        """Hit indexes are stored as sorted, unique integer arrays."""
        contribution_map = ContributionMap()
        contribution_map[2] = [5, 1, 5, 3]
        np.testing.assert_array_equal(contribution_map[2], [1, 3, 5])
        assert contribution_map[2].dtype == np.int64

    def test_counts(self):
        """The map reports its number of hits and their union."""
        contribution_map = ContributionMap.from_lists({0: [0, 1], 1: [4]})
        assert contribution_map.num_hits == 3
        np.testing.assert_array_equal(contribution_map.hit_ids, [0, 1, 4])
        assert len(ContributionMap().hit_ids) == 0


class TestHitSharing:
    """Test the hit sharing records."""

    def test_record(self):
        """Records count their shared hits."""
        record = HitSharingRecord(0, 3, np.array([1, 2]))
        assert record.num_shared == 2
        assert "num_shared=2" in repr(record)

    def test_counts(self):
        """Sharing maps can be summarized by counterpart."""
        record = HitSharingRecord(0, 3, np.array([1, 2]))
        sharing_map = HitSharingMap({0: [record]})
        assert sharing_map.counts(0) == {3: 2}
        assert sharing_map.counts(0, by="candidate") == {0: 2}
        assert sharing_map.counts(1) == {}
