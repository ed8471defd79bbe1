"""Hit sharing between reconstructed candidates and reconstructable targets.

Builds the bipartite maps which record, for each (candidate, target) pair,
the hits they have in common. Both maps are filled from the same pairwise
computation and hold the same :class:`HitSharingRecord` instances, so the
count for (C, T) in one map always equals the count for (T, C) in the other.
"""

import numpy as np

from recoval.data import ContributionMap, HitSharingMap, HitSharingRecord
from recoval.utils.globals import VIEWS_2D
from recoval.utils.match import overlap_count, pack_index, shared_index

__all__ = [
    "merge_contribution_maps",
    "get_candidate_to_reconstructable_hits",
    "get_hit_sharing_maps",
]


def _as_map_list(target_maps):
    """Wraps a single contribution map into a list of maps."""
    if isinstance(target_maps, dict):
        return [target_maps]

    return list(target_maps)


def merge_contribution_maps(target_maps):
    """Merges several contribution maps by union.

    A target which appears in several maps is attributed the union of its
    hits across these maps.

    Parameters
    ----------
    target_maps : Union[ContributionMap, List[ContributionMap]]
        One or more mappings from target index to hit indexes

    Returns
    -------
    ContributionMap
        Merged mapping
    """
    merged = ContributionMap()
    for target_map in _as_map_list(target_maps):
        for target_id, hit_ids in target_map.items():
            if target_id in merged:
                merged[target_id] = np.union1d(merged[target_id], hit_ids)
            else:
                merged[target_id] = hit_ids

    return merged


def _get_downstream_candidates(candidate, candidate_dict):
    """Collects a candidate and all the candidates downstream of it.

    Parameters
    ----------
    candidate : RecoCandidate
        Top candidate
    candidate_dict : Dict[int, RecoCandidate]
        Mapping from candidate index to candidate

    Returns
    -------
    List[RecoCandidate]
        Candidate and its descendants
    """
    downstream, visited = [], set()
    stack = [candidate]
    while stack:
        current = stack.pop()
        if current.id in visited:
            continue
        visited.add(current.id)
        downstream.append(current)
        for child_id in current.children_ids[::-1]:
            child = candidate_dict.get(int(child_id))
            if child is not None:
                stack.append(child)

    return downstream


def get_candidate_to_reconstructable_hits(
    candidates, target_maps, fold_back_hierarchy=False
):
    """Collects the reconstructable 2D hits of each candidate.

    Reconstructable hits are the hits of a candidate which are attributed to
    a selected target in at least one of the provided contribution maps.

    Parameters
    ----------
    candidates : List[RecoCandidate]
        (C) List of reconstructed candidates
    target_maps : Union[ContributionMap, List[ContributionMap]]
        One or more mappings from selected target index to its hits
    fold_back_hierarchy : bool, default False
        If `True`, the hits of all the candidates downstream of a candidate
        are attributed to it as well

    Returns
    -------
    ContributionMap
        Mapping from candidate index to its reconstructable hits
    """
    reconstructable_ids = merge_contribution_maps(target_maps).hit_ids

    candidate_dict = {}
    for candidate in candidates:
        assert (
            candidate.id not in candidate_dict
        ), f"Duplicate candidate index: {candidate.id}."
        candidate_dict[candidate.id] = candidate

    candidate_to_hits = ContributionMap()
    for candidate in candidates:
        if fold_back_hierarchy:
            members = _get_downstream_candidates(candidate, candidate_dict)
        else:
            members = [candidate]

        hit_ids = np.concatenate([c.get_hit_ids(VIEWS_2D) for c in members])
        candidate_to_hits[candidate.id] = np.intersect1d(
            hit_ids, reconstructable_ids
        )

    return candidate_to_hits


def get_hit_sharing_maps(candidate_to_hits, target_maps):
    """Builds the candidate -> target and target -> candidate sharing maps.

    Every candidate and every target gets an entry. Only pairs which share
    at least one hit produce a record. Records are sorted by decreasing
    number of shared hits, then by increasing counterpart index.

    Parameters
    ----------
    candidate_to_hits : Dict[int, np.ndarray]
        Mapping from candidate index to its reconstructable hits
    target_maps : Union[ContributionMap, List[ContributionMap]]
        One or more mappings from selected target index to its hits

    Returns
    -------
    candidate_to_targets : HitSharingMap
        Mapping from candidate index to its sharing records
    target_to_candidates : HitSharingMap
        Mapping from target index to its sharing records
    """
    # Bring both sides to sorted, unique index arrays
    targets = merge_contribution_maps(target_maps)
    candidate_hits = ContributionMap.from_lists(candidate_to_hits)

    candidate_ids = sorted(candidate_hits)
    target_ids = sorted(targets)

    candidate_to_targets = HitSharingMap({c: [] for c in candidate_ids})
    target_to_candidates = HitSharingMap({t: [] for t in target_ids})

    # Count the hits shared by each (candidate, target) pair
    index_x, offsets_x = pack_index([candidate_hits[c] for c in candidate_ids])
    index_y, offsets_y = pack_index([targets[t] for t in target_ids])
    counts = overlap_count(index_x, offsets_x, index_y, offsets_y)

    # Store a single record per overlapping pair in both maps
    for i, j in zip(*np.nonzero(counts)):
        candidate_id, target_id = candidate_ids[i], target_ids[j]
        hit_ids = shared_index(candidate_hits[candidate_id], targets[target_id])
        record = HitSharingRecord(candidate_id, target_id, hit_ids)
        candidate_to_targets[candidate_id].append(record)
        target_to_candidates[target_id].append(record)

    for records in candidate_to_targets.values():
        records.sort(key=lambda r: (-r.num_shared, r.target_id))
    for records in target_to_candidates.values():
        records.sort(key=lambda r: (-r.num_shared, r.candidate_id))

    return candidate_to_targets, target_to_candidates
