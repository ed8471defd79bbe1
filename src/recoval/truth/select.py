"""Selection of the reconstructable true particles of an event.

A true particle is reconstructable if it satisfies a selection criterion
(e.g. it is a neutrino final-state primary) and if enough good hits are
attributed to it, spread across enough detector views. The resulting
:class:`ContributionMap` is the ground truth against which reconstructed
candidates are scored.
"""

from collections import Counter

from recoval.config import PrimaryParameters
from recoval.data import ContributionMap
from recoval.utils.globals import VIEWS_2D

from .factories import criteria_factory
from .hierarchy import ParticleHierarchy
from .provenance import match_hits_to_particles, select_good_hits, select_hits

__all__ = [
    "select_reconstructable_particles",
    "select_particles_matching_criteria",
    "select_particles_by_hit_count",
    "get_target_map",
]


def get_target_map(hierarchy, fold_back_hierarchy=True):
    """Builds the relation which maps each particle onto its target.

    Parameters
    ----------
    hierarchy : ParticleHierarchy
        Hierarchy of the event particles
    fold_back_hierarchy : bool, default True
        If `True`, particles map onto their primary, otherwise onto themselves

    Returns
    -------
    Dict[int, int]
        Mapping from particle index to target index
    """
    if fold_back_hierarchy:
        return hierarchy.primary_map()

    return hierarchy.self_map()


def select_reconstructable_particles(
    particles,
    hits,
    parameters=None,
    criteria="beam_neutrino_final_state",
    input_hit_ids=None,
):
    """Selects the reconstructable particles which match a criterion.

    Parameters
    ----------
    particles : Union[List[MCParticle], ParticleHierarchy]
        (P) List of simulated particles, or their indexed hierarchy
    hits : List[CaloHit]
        (H) List of detector hits
    parameters : Union[PrimaryParameters, dict], optional
        Reconstructability parameters (default values if not specified)
    criteria : Union[str, callable], default 'beam_neutrino_final_state'
        Function of (particle, hierarchy) which returns whether a particle
        is a valid target, or the name of a registered criterion
    input_hit_ids : array_like, optional
        Restricts the hits considered to this subset of hit indexes

    Returns
    -------
    ContributionMap
        Mapping from selected target particle index to its good hits
    """
    # Parse the parameters and the criterion
    if parameters is None:
        parameters = PrimaryParameters()
    elif isinstance(parameters, dict):
        parameters = PrimaryParameters.from_config(parameters)
    criteria = criteria_factory(criteria)

    # Index the particles, build the relation between particles and targets
    hierarchy = particles
    if not isinstance(hierarchy, ParticleHierarchy):
        hierarchy = ParticleHierarchy(particles)
    target_map = get_target_map(hierarchy, parameters.fold_back_hierarchy)

    # Remove non-reconstructable hits (e.g. those downstream of a neutron)
    selected_hits = select_hits(
        hits,
        hierarchy,
        target_map,
        parameters.select_input_hits,
        parameters.max_photon_propagation,
        input_hit_ids,
    )

    # Attribute each selected hit to its target
    _, target_to_hits = match_hits_to_particles(selected_hits, target_map)

    # Restrict the targets to those matching the criterion
    if parameters.fold_back_hierarchy:
        candidate_targets = hierarchy.get_primary_list()
    else:
        candidate_targets = list(hierarchy)
    targets = select_particles_matching_criteria(candidate_targets, criteria, hierarchy)

    # Ensure the targets have enough good hits to be reconstructed
    return select_particles_by_hit_count(
        targets, target_to_hits, hits, target_map, parameters
    )


def select_particles_matching_criteria(particles, criteria, hierarchy):
    """Selects the particles which match a given criterion.

    Parameters
    ----------
    particles : List[MCParticle]
        Input particles
    criteria : callable
        Function of (particle, hierarchy) which returns a boolean
    hierarchy : ParticleHierarchy
        Hierarchy the particles belong to

    Returns
    -------
    List[MCParticle]
        Particles which match the criterion, in input order
    """
    return [p for p in particles if criteria(p, hierarchy)]


def select_particles_by_hit_count(
    targets, target_to_hits, hits, target_map, parameters
):
    """Applies the good hit count requirements to candidate targets.

    Parameters
    ----------
    targets : List[MCParticle]
        Candidate target particles
    target_to_hits : ContributionMap
        Mapping from target index to the indexes of its selected hits
    hits : List[CaloHit]
        List of detector hits the indexes refer to
    target_map : Dict[int, int]
        Mapping from particle index to target index
    parameters : PrimaryParameters
        Reconstructability parameters

    Returns
    -------
    ContributionMap
        Mapping from selected target index to its good hits
    """
    hit_dict = {hit.id: hit for hit in hits}

    selected = ContributionMap()
    for target in targets:
        if target.id not in target_to_hits:
            continue

        # Remove shared hits where the target carries too small a fraction
        target_hits = [hit_dict[i] for i in target_to_hits[target.id]]
        good_hits = select_good_hits(
            target_hits,
            target_map,
            parameters.select_input_hits,
            parameters.min_hit_sharing_fraction,
        )

        if len(good_hits) < parameters.min_primary_good_hits:
            continue

        view_counts = Counter(hit.view for hit in good_hits)
        num_good_views = sum(
            view_counts[view] >= parameters.min_hits_for_good_view
            for view in VIEWS_2D
        )
        if num_good_views < parameters.min_primary_good_views:
            continue

        selected[target.id] = [hit.id for hit in good_hits]

    return selected
