"""Attribution of detector hits to the simulated particles which produced them.

A hit can receive energy from several particles. The functions in this
module resolve the dominant contributor of each hit, optionally fold it back
onto a target particle (typically its primary), and apply the hit quality
selections which define "good" hits:

- :func:`select_hits` drops hits whose energy cannot be credited to their
  primary (downstream of a neutron, or of a photon which travelled too far);
- :func:`select_good_hits` drops hits for which no single target carries a
  large enough fraction of the deposited weight.
"""

from collections import defaultdict

import numpy as np

from recoval.data import CaloHit, ContributionMap
from recoval.utils.globals import ELECTRON_PDG, NEUTRON_PDG, PHOTON_PDG
from recoval.utils.logger import logger

__all__ = [
    "get_particle_weights",
    "get_main_particle_id",
    "get_main_particle_id_for_hits",
    "get_neutrino_weight",
    "get_neutrino_fraction",
    "is_neutrino_induced_hits",
    "match_hits_to_particles",
    "passes_propagation_check",
    "select_hits",
    "select_good_hits",
]

# Folded weight sums below this value are considered empty
WEIGHT_EPSILON = float(np.finfo(np.float32).eps)


def get_particle_weights(hit):
    """Aggregates the particle contributions recorded on a hit.

    Parameters
    ----------
    hit : CaloHit
        Input hit

    Returns
    -------
    mc_ids : np.ndarray
        (M) Sorted, unique indexes of the contributing particles
    mc_weights : np.ndarray
        (M) Summed weight of each contributing particle
    """
    if len(hit.mc_ids) == 0:
        return np.empty(0, dtype=np.int64), np.empty(0, dtype=np.float64)

    mc_ids, inverse = np.unique(hit.mc_ids, return_inverse=True)
    mc_weights = np.bincount(
        inverse.ravel(), weights=hit.mc_weights, minlength=len(mc_ids)
    )

    return mc_ids.astype(np.int64), mc_weights


def _main_id(mc_ids, mc_weights):
    """Picks the particle with the largest positive weight.

    Ties are resolved in favor of the lowest particle index, which is the
    first occurrence in the sorted index array.

    Parameters
    ----------
    mc_ids : np.ndarray
        (M) Sorted, unique particle indexes
    mc_weights : np.ndarray
        (M) Weight of each particle

    Returns
    -------
    int
        Index of the main particle, `None` if there is no positive weight
    """
    if len(mc_ids) == 0:
        return None

    best = np.argmax(mc_weights)
    if mc_weights[best] <= 0.0:
        return None

    return int(mc_ids[best])


def get_main_particle_id(hit):
    """Finds the particle which contributed the largest weight to a hit.

    Parameters
    ----------
    hit : CaloHit
        Input hit

    Returns
    -------
    int
        Index of the main particle, `None` if it cannot be resolved
    """
    return _main_id(*get_particle_weights(hit))


def get_main_particle_id_for_hits(hits):
    """Finds the particle which contributed the largest total weight to a
    collection of hits.

    Parameters
    ----------
    hits : List[CaloHit]
        Input hits (e.g. all the hits of a reconstructed candidate)

    Returns
    -------
    int
        Index of the main particle, `None` if it cannot be resolved
    """
    weights = defaultdict(float)
    for hit in hits:
        for mc_id, weight in zip(*get_particle_weights(hit)):
            weights[int(mc_id)] += weight

    if len(weights) == 0:
        return None

    mc_ids = np.array(sorted(weights), dtype=np.int64)
    mc_weights = np.array([weights[i] for i in mc_ids], dtype=np.float64)

    return _main_id(mc_ids, mc_weights)


def _as_hit_list(hits):
    """Wraps a single hit into a list of hits."""
    if isinstance(hits, CaloHit):
        return [hits]

    return hits


def get_neutrino_weight(hits, hierarchy):
    """Sums the weight of the neutrino-induced contributions to hits.

    Parameters
    ----------
    hits : Union[CaloHit, List[CaloHit]]
        Input hit or hits (e.g. all the hits of a reconstructed candidate)
    hierarchy : ParticleHierarchy
        Simulated particle hierarchy of the event

    Returns
    -------
    neutrino_weight : float
        Summed weight of the contributions of neutrino-induced particles
    total_weight : float
        Summed weight of all the contributions
    """
    neutrino_weight, total_weight = 0.0, 0.0
    for hit in _as_hit_list(hits):
        for mc_id, weight in zip(*get_particle_weights(hit)):
            particle = hierarchy.get(int(mc_id))
            if particle is not None and hierarchy.is_neutrino_induced(particle):
                neutrino_weight += weight
            total_weight += weight

    return neutrino_weight, total_weight


def get_neutrino_fraction(hits, hierarchy):
    """Computes the fraction of the weight of hits which is neutrino-induced.

    Parameters
    ----------
    hits : Union[CaloHit, List[CaloHit]]
        Input hit or hits
    hierarchy : ParticleHierarchy
        Simulated particle hierarchy of the event

    Returns
    -------
    float
        Neutrino-induced weight fraction, 0 if the hits carry no weight
    """
    neutrino_weight, total_weight = get_neutrino_weight(hits, hierarchy)
    if total_weight <= 0.0:
        return 0.0

    return neutrino_weight / total_weight


def is_neutrino_induced_hits(hits, hierarchy, min_fraction=0.0):
    """Checks whether hits are the product of a neutrino interaction.

    Parameters
    ----------
    hits : Union[CaloHit, List[CaloHit]]
        Input hit or hits
    hierarchy : ParticleHierarchy
        Simulated particle hierarchy of the event
    min_fraction : float, default 0.0
        Neutrino-induced weight fraction which must be exceeded

    Returns
    -------
    bool
        `True` if the neutrino-induced fraction is above `min_fraction`
    """
    return get_neutrino_fraction(hits, hierarchy) > min_fraction


def match_hits_to_particles(hits, target_map=None):
    """Matches each hit to its main particle (or to the target it folds to).

    Hits whose main particle cannot be resolved are skipped. If a non-empty
    `target_map` is provided, the main particle of each hit is replaced by
    its target, and hits whose main particle has no target are skipped.

    Parameters
    ----------
    hits : List[CaloHit]
        (H) List of hits
    target_map : Dict[int, int], optional
        Mapping from particle index to target index (e.g. its primary)

    Returns
    -------
    hit_to_target : Dict[int, int]
        Mapping from hit index to target index
    target_to_hits : ContributionMap
        Mapping from target index to the indexes of its hits
    """
    hit_to_target = {}
    target_hits = defaultdict(list)
    for hit in hits:
        main_id = get_main_particle_id(hit)
        if main_id is None:
            logger.debug("No main particle for hit %d, skipping.", hit.id)
            continue

        target_id = main_id
        if target_map:
            if main_id not in target_map:
                continue
            target_id = target_map[main_id]

        hit_to_target[hit.id] = target_id
        target_hits[target_id].append(hit.id)

    return hit_to_target, ContributionMap.from_lists(target_hits)


def passes_propagation_check(
    hierarchy, primary, hit_particle, max_photon_propagation
):
    """Checks that the depositions of a particle can be credited to its primary.

    Navigates from the primary down to the particle which deposited energy in
    a hit. The path must not go through a neutron. Unless the primary is
    itself a photon or an electron, it must not go through a photon which
    travelled further than `max_photon_propagation` before converting.

    Parameters
    ----------
    hierarchy : ParticleHierarchy
        Hierarchy of the event particles
    primary : MCParticle
        Primary particle the hit is credited to
    hit_particle : MCParticle
        Particle which deposited energy in the hit
    max_photon_propagation : float
        Maximum photon propagation distance in cm

    Returns
    -------
    bool
        `True` if there is a valid path from the primary to the hit particle
    """
    check_photons = primary.pdg_code != PHOTON_PDG and (
        abs(primary.pdg_code) != ELECTRON_PDG
    )

    visited = set()
    stack = [(primary, 0)]
    while stack:
        current, depth = stack.pop()
        if current.id in visited or depth > hierarchy.max_depth:
            continue
        visited.add(current.id)

        if abs(current.pdg_code) == NEUTRON_PDG:
            continue

        if (
            check_photons
            and current.pdg_code == PHOTON_PDG
            and current.distance_travel > max_photon_propagation
        ):
            continue

        if current.id == hit_particle.id:
            return True

        for child in reversed(hierarchy.get_children(current)):
            stack.append((child, depth + 1))

    return False


def select_hits(
    hits,
    hierarchy,
    target_map,
    select_input_hits=True,
    max_photon_propagation=2.5,
    input_hit_ids=None,
):
    """Selects the hits which belong to reconstructable regions of the event.

    Parameters
    ----------
    hits : List[CaloHit]
        (H) List of hits
    hierarchy : ParticleHierarchy
        Hierarchy of the event particles
    target_map : Dict[int, int]
        Mapping from particle index to target index
    select_input_hits : bool, default True
        If `False`, all the input hits are selected as is
    max_photon_propagation : float, default 2.5
        Maximum photon propagation distance in cm
    input_hit_ids : array_like, optional
        If provided, restricts the input hits to this subset of hit indexes

    Returns
    -------
    List[CaloHit]
        Selected hits, in input order
    """
    if input_hit_ids is not None:
        input_hit_ids = set(np.asarray(input_hit_ids, dtype=np.int64).tolist())
        hits = [hit for hit in hits if hit.id in input_hit_ids]

    if not select_input_hits:
        return list(hits)

    selected_hits = []
    for hit in hits:
        main_id = get_main_particle_id(hit)
        if main_id is None or main_id not in target_map:
            continue

        # With folding on or off, the primary is needed to review the hierarchy
        hit_particle = hierarchy.get(main_id)
        if hit_particle is None:
            continue
        primary = hierarchy.get_primary(hit_particle)
        if passes_propagation_check(
            hierarchy, primary, hit_particle, max_photon_propagation
        ):
            selected_hits.append(hit)

    return selected_hits


def select_good_hits(
    hits, target_map, select_input_hits=True, min_hit_sharing_fraction=0.9
):
    """Selects the hits which are unambiguously attributed to one target.

    The particle contributions of each hit are folded onto their targets.
    The hit is good if the target with the largest folded weight carries at
    least `min_hit_sharing_fraction` of the total folded weight.

    Parameters
    ----------
    hits : List[CaloHit]
        (H) List of hits (typically already passed through :func:`select_hits`)
    target_map : Dict[int, int]
        Mapping from particle index to target index
    select_input_hits : bool, default True
        If `False`, all the input hits are selected as is
    min_hit_sharing_fraction : float, default 0.9
        Minimum fraction of the hit weight carried by its main target

    Returns
    -------
    List[CaloHit]
        Good hits, in input order
    """
    if not select_input_hits:
        return list(hits)

    good_hits = []
    for hit in hits:
        target_weights = defaultdict(float)
        for mc_id, weight in zip(*get_particle_weights(hit)):
            target_id = target_map.get(int(mc_id))
            if target_id is not None:
                target_weights[target_id] += weight

        if len(target_weights) == 0:
            continue

        target_ids = sorted(target_weights)
        weights = np.array([target_weights[t] for t in target_ids])
        best_weight, weight_sum = weights.max(), weights.sum()
        if best_weight <= 0.0 or weight_sum < WEIGHT_EPSILON:
            continue

        if best_weight / weight_sum < min_hit_sharing_fraction:
            continue

        good_hits.append(hit)

    return good_hits
