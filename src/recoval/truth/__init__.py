"""Truth-matching engine.

Main Entry Points
-----------------
select_reconstructable_particles : Build the reconstructable target map
get_hit_sharing_maps : Share candidate hits with targets
TruthMatchManager : Run the full matching on one event
"""

from .hierarchy import ParticleHierarchy
from .manager import TruthMatchManager
from .provenance import (
    get_main_particle_id,
    get_main_particle_id_for_hits,
    get_neutrino_fraction,
    get_neutrino_weight,
    is_neutrino_induced_hits,
    match_hits_to_particles,
    select_good_hits,
    select_hits,
)
from .select import (
    get_target_map,
    select_particles_by_hit_count,
    select_particles_matching_criteria,
    select_reconstructable_particles,
)
from .sharing import (
    get_candidate_to_reconstructable_hits,
    get_hit_sharing_maps,
    merge_contribution_maps,
)

__all__ = [
    "ParticleHierarchy",
    "TruthMatchManager",
    "get_main_particle_id",
    "get_main_particle_id_for_hits",
    "get_neutrino_fraction",
    "get_neutrino_weight",
    "is_neutrino_induced_hits",
    "match_hits_to_particles",
    "select_good_hits",
    "select_hits",
    "get_target_map",
    "select_particles_by_hit_count",
    "select_particles_matching_criteria",
    "select_reconstructable_particles",
    "get_candidate_to_reconstructable_hits",
    "get_hit_sharing_maps",
    "merge_contribution_maps",
]
