"""Named data structures produced by the truth-matching engine."""

from dataclasses import dataclass

import numpy as np

__all__ = ["ContributionMap", "HitSharingRecord", "HitSharingMap"]


class ContributionMap(dict):
    """Mapping from an object index to the indexes of the hits attributed to it.

    Keys are particle (or candidate) indexes, values are sorted arrays of
    unique hit indexes. Maps produced by the truth selection are partitions:
    each hit index appears under at most one key.
    """

    def __setitem__(self, key, value):
        """Stores a set of hit indexes as a sorted, unique integer array.

        Parameters
        ----------
        key : int
            Index of the object the hits are attributed to
        value : array_like
            Indexes of the hits
        """
        value = np.unique(np.asarray(value, dtype=np.int64))
        super().__setitem__(int(key), value)

    @property
    def num_hits(self):
        """Total number of hits across all the buckets of the map.

        Returns
        -------
        int
            Number of attributed hits
        """
        return int(sum(len(v) for v in self.values()))

    @property
    def hit_ids(self):
        """Union of the hit indexes across all the buckets of the map.

        Returns
        -------
        np.ndarray
            Sorted, unique hit indexes
        """
        if len(self) == 0:
            return np.empty(0, dtype=np.int64)

        return np.unique(np.concatenate(list(self.values())))

    @classmethod
    def from_lists(cls, index_dict):
        """Builds a contribution map from lists of hit indexes.

        Parameters
        ----------
        index_dict : Dict[int, List[int]]
            Mapping from object index to hit indexes

        Returns
        -------
        ContributionMap
            Contribution map
        """
        contribution_map = cls()
        for key, index in index_dict.items():
            contribution_map[key] = index

        return contribution_map


@dataclass(eq=False)
class HitSharingRecord:
    """Set of hits shared between a reconstructed candidate and a target.

    Attributes
    ----------
    candidate_id : int
        Index of the reconstructed candidate
    target_id : int
        Index of the target (reconstructable true particle)
    hit_ids : np.ndarray
        Sorted indexes of the hits shared by the candidate and the target
    """

    candidate_id: int
    target_id: int
    hit_ids: np.ndarray

    @property
    def num_shared(self):
        """Number of hits shared by the candidate and the target.

        Returns
        -------
        int
            Number of shared hits
        """
        return len(self.hit_ids)

    def __repr__(self):
        """Compact representation of the pair and its shared hit count."""
        return (
            f"HitSharingRecord(candidate_id={self.candidate_id}, "
            f"target_id={self.target_id}, num_shared={self.num_shared})"
        )


class HitSharingMap(dict):
    """Mapping from an object index to its list of :class:`HitSharingRecord`.

    The same records are shared by the candidate -> target map and the
    target -> candidate map built in one pass.
    """

    def counts(self, key, by="target"):
        """Returns the shared hit counts of one entry as a dictionary.

        Parameters
        ----------
        key : int
            Index of the entry to fetch
        by : str, default 'target'
            Index of the records to use as key, one of 'target' or 'candidate'

        Returns
        -------
        Dict[int, int]
            Mapping from counterpart index to number of shared hits
        """
        assert by in ("target", "candidate"), (
            f"Counterpart type not recognized: {by}. Must be one of "
            "'target' or 'candidate'."
        )
        attr = f"{by}_id"

        return {getattr(r, attr): r.num_shared for r in self.get(key, [])}
