"""Derives the true track/shower nature of reconstructed candidates.

The labels produced here are used to build the training examples of the
track/shower classifiers.
"""

from dataclasses import dataclass

import numpy as np

from recoval.config import PrimaryParameters
from recoval.data import ContributionMap
from recoval.data.base import DataBase
from recoval.truth.hierarchy import ParticleHierarchy
from recoval.truth.provenance import (
    get_main_particle_id_for_hits,
    match_hits_to_particles,
)
from recoval.truth.select import select_reconstructable_particles
from recoval.truth.sharing import (
    get_candidate_to_reconstructable_hits,
    get_hit_sharing_maps,
)
from recoval.utils.globals import SHOWER_PDGS, VIEWS_2D

__all__ = ["TrackLabel", "derive_track_label", "is_shower_pdg"]


@dataclass(eq=False)
class TrackLabel(DataBase):
    """True nature of a reconstructed candidate.

    Attributes
    ----------
    is_track : bool
        Whether the candidate is truly track-like
    pdg_code : int
        PDG code of the best matched particle (0 if there is none)
    completeness : float
        Fraction of the hits of the best matched target shared with the
        candidate (-1 if unknown)
    purity : float
        Fraction of the reconstructable hits of the candidate shared with
        the best matched target (-1 if unknown)
    vertex : np.ndarray
        (3) Creation vertex of the best matched particle
    shower_probability : float
        Fraction of the candidate hits which belong to shower-like
        primaries (-1 if unknown)
    mischaracterised : bool
        Whether the shared-hit and per-hit estimates disagree
    """

    is_track: bool = False
    pdg_code: int = 0
    completeness: float = -1.0
    purity: float = -1.0
    vertex: np.ndarray = None
    shower_probability: float = -1.0
    mischaracterised: bool = False

    # Fixed-length attributes
    _fixed_length_attrs = (("vertex", 3),)

    @property
    def is_valid(self):
        """Whether the label could be attached to a true particle.

        Returns
        -------
        bool
            `True` if a main particle was found for the candidate
        """
        return self.pdg_code != 0


def is_shower_pdg(pdg_code):
    """Checks whether a PDG code belongs to a shower-like particle.

    Parameters
    ----------
    pdg_code : int
        PDG code

    Returns
    -------
    bool
        `True` for photons and electrons
    """
    return abs(pdg_code) in SHOWER_PDGS


def derive_track_label(
    candidate,
    particles,
    hits,
    parameters=None,
    criteria="beam_neutrino_final_state",
    apply_reconstructability_checks=True,
    candidates=None,
):
    """Derives the true track/shower label of a reconstructed candidate.

    With reconstructability checks, the candidate is matched against the
    reconstructable targets of the event and is track-like if at least half
    of the hits it shares with them belong to track-like targets. When the
    hierarchy is folded back, the hits of the candidates downstream of the
    candidate are attributed to it. Without checks, the main particle of the
    candidate decides.

    Parameters
    ----------
    candidate : RecoCandidate
        Reconstructed candidate
    particles : Union[List[MCParticle], ParticleHierarchy]
        Simulated particles of the event
    hits : List[CaloHit]
        Detector hits of the event
    parameters : Union[PrimaryParameters, dict], optional
        Reconstructability parameters
    criteria : Union[str, callable], default 'beam_neutrino_final_state'
        Target selection criterion
    apply_reconstructability_checks : bool, default True
        Whether to match the candidate against reconstructable targets
    candidates : List[RecoCandidate], optional
        All the reconstructed candidates of the event, used to resolve the
        candidates downstream of `candidate`

    Returns
    -------
    TrackLabel
        True nature of the candidate
    """
    if parameters is None:
        parameters = PrimaryParameters()
    elif isinstance(parameters, dict):
        parameters = PrimaryParameters.from_config(parameters)

    hierarchy = particles
    if not isinstance(hierarchy, ParticleHierarchy):
        hierarchy = ParticleHierarchy(particles)

    hit_dict = {hit.id: hit for hit in hits}
    candidate_hits = [
        hit_dict[i] for i in candidate.get_hit_ids(VIEWS_2D) if i in hit_dict
    ]

    if not apply_reconstructability_checks:
        main_id = get_main_particle_id_for_hits(candidate_hits)
        main_particle = hierarchy.get(main_id) if main_id is not None else None
        if main_particle is None:
            return TrackLabel()

        return TrackLabel(
            is_track=not is_shower_pdg(main_particle.pdg_code),
            pdg_code=main_particle.pdg_code,
            vertex=main_particle.position,
        )

    # Share the reconstructable hits of the candidate with the targets
    target_to_hits = select_reconstructable_particles(
        hierarchy, hits, parameters, criteria
    )
    if candidates is None:
        candidates = [candidate]
    assert any(c.id == candidate.id for c in candidates), (
        f"Candidate {candidate.id} is missing from the list of candidates."
    )
    all_candidate_to_hits = get_candidate_to_reconstructable_hits(
        candidates, target_to_hits, parameters.fold_back_hierarchy
    )
    candidate_to_hits = ContributionMap()
    candidate_to_hits[candidate.id] = all_candidate_to_hits[candidate.id]
    candidate_to_targets, _ = get_hit_sharing_maps(candidate_to_hits, target_to_hits)

    # Count the shared hits which belong to track-like and shower-like targets
    records = candidate_to_targets[candidate.id]
    num_track, num_shower = 0, 0
    for record in records:
        if is_shower_pdg(hierarchy.get(record.target_id).pdg_code):
            num_shower += record.num_shared
        else:
            num_track += record.num_shared

    num_shared = num_track + num_shower
    track_ratio = num_track / num_shared if num_shared > 0 else 0.0
    is_track = track_ratio >= 0.5

    # Records are sorted by decreasing number of shared hits
    label = TrackLabel(is_track=is_track)
    if len(records):
        best = records[0]
        best_particle = hierarchy.get(best.target_id)
        num_target = len(target_to_hits[best.target_id])
        num_candidate = len(candidate_to_hits[candidate.id])
        label.pdg_code = best_particle.pdg_code
        label.vertex = np.asarray(best_particle.position, dtype=np.float32)
        label.completeness = best.num_shared / num_target if num_target else 0.0
        label.purity = best.num_shared / num_candidate if num_candidate else 0.0

    # Fraction of the candidate hits which belong to a shower-like primary
    hit_to_primary, _ = match_hits_to_particles(
        candidate_hits, hierarchy.primary_map()
    )
    if len(hit_to_primary):
        primaries = [hierarchy.get(p) for p in hit_to_primary.values()]
        num_shower_hits = sum(
            p is not None and is_shower_pdg(p.pdg_code) for p in primaries
        )
        label.shower_probability = num_shower_hits / len(hit_to_primary)
    else:
        label.shower_probability = 1.0

    label.mischaracterised = (label.shower_probability < 0.5 and not is_track) or (
        label.shower_probability > 0.5 and is_track
    )

    return label
