"""Sets up fixtures general to the entire test suite of this package.

This file is read during the collection phase of pytest when running anything
inside this directory. It provides builders for simulated particles, hits and
reconstructed candidates, as well as a small neutrino event.
"""

import numpy as np
import pytest

from recoval.data import CaloHit, MCParticle, RecoCandidate
from recoval.utils.globals import (
    NUANCE_BEAM_PARTICLE,
    NUANCE_COSMIC_RAY,
    VIEW_U,
    VIEW_V,
    VIEW_W,
)


def build_particle(
    id,
    pdg_code,
    parent_id=-1,
    children_ids=(),
    nuance_code=NUANCE_BEAM_PARTICLE,
    momentum=(0.0, 0.0, 100.0),
    position=(0.0, 0.0, 0.0),
    end_position=(0.0, 0.0, 1.0),
    energy=100.0,
):
    """Builds a simulated particle with sensible defaults."""
    return MCParticle(
        id=id,
        pdg_code=pdg_code,
        nuance_code=nuance_code,
        energy=energy,
        momentum=momentum,
        position=position,
        end_position=end_position,
        parent_id=parent_id,
        children_ids=list(children_ids),
    )


class HitBuilder:
    """Builds hits with consecutive indexes."""

    def __init__(self):
        self.hits = []

    def add(self, mc_ids, view, count=1, weights=None):
        """Adds `count` hits in one view, all with the same contributions.

        Parameters
        ----------
        mc_ids : Union[int, List[int]]
            Contributing particle(s)
        view : int
            View of the hits
        count : int, default 1
            Number of hits to add
        weights : List[float], optional
            Weight of each contribution (1 for each by default)

        Returns
        -------
        List[int]
            Indexes of the added hits
        """
        mc_ids = np.atleast_1d(mc_ids)
        if weights is None:
            weights = np.ones(len(mc_ids))

        ids = []
        for _ in range(count):
            hit_id = len(self.hits)
            self.hits.append(
                CaloHit(
                    id=hit_id,
                    position=[float(hit_id), 0.0],
                    energy=1.0,
                    view=view,
                    mc_ids=mc_ids,
                    mc_weights=weights,
                )
            )
            ids.append(hit_id)

        return ids

    def add_views(self, mc_id, counts):
        """Adds single-contribution hits in several views.

        Parameters
        ----------
        mc_id : int
            Contributing particle
        counts : Tuple[int, int, int]
            Number of hits in the U, V and W views

        Returns
        -------
        Dict[int, List[int]]
            Indexes of the added hits in each view
        """
        return {
            view: self.add(mc_id, view, count)
            for view, count in zip((VIEW_U, VIEW_V, VIEW_W), counts)
        }


@pytest.fixture(name="hit_builder")
def fixture_hit_builder():
    """Provides an empty hit builder."""
    return HitBuilder()


@pytest.fixture(name="particle_builder")
def fixture_particle_builder():
    """Provides the particle builder function."""
    return build_particle


@pytest.fixture(name="event")
def fixture_event():
    """Builds a small neutrino interaction overlaid with a cosmic muon.

    Particles:
      - 0: muon neutrino (beam)
      - 1: muon from the neutrino, with a delta ray (4)
      - 2: proton from the neutrino
      - 3: photon from the neutrino, which converts into an electron (5)
      - 6: cosmic muon
      - 7: neutron from the neutrino, which knocks out a proton (8)

    Hits:
      - muon: 10 hits per view, delta ray: 2 W hits
      - proton: 6 U, 6 V and 3 W hits
      - photon electron: 8 U and 8 V hits
      - neutron proton: 5 hits per view
      - cosmic muon: 10 hits per view
      - one W hit evenly shared between the muon and the proton

    Returns
    -------
    dict
        Particles, hits and the hit indexes of each particle
    """
    particles = [
        build_particle(0, 14, children_ids=(1, 2, 3, 7), energy=1000.0),
        build_particle(1, 13, 0, (4,), momentum=(0.0, 0.0, 800.0)),
        build_particle(2, 2212, 0, momentum=(0.0, 0.0, 300.0)),
        build_particle(
            3, 22, 0, (5,), momentum=(0.0, 100.0, 0.0), end_position=(0, 30, 0)
        ),
        build_particle(4, 11, 1, momentum=(0.0, 0.0, 5.0)),
        build_particle(5, 11, 3, momentum=(0.0, 90.0, 0.0)),
        build_particle(
            6,
            13,
            nuance_code=NUANCE_COSMIC_RAY,
            momentum=(0.0, -2000.0, 0.0),
        ),
        build_particle(7, 2112, 0, (8,), momentum=(50.0, 0.0, 0.0)),
        build_particle(8, 2212, 7, momentum=(40.0, 0.0, 0.0)),
    ]

    builder = HitBuilder()
    ids = {}
    ids[1] = builder.add_views(1, (10, 10, 10))
    ids[4] = builder.add_views(4, (0, 0, 2))
    ids[2] = builder.add_views(2, (6, 6, 3))
    ids[5] = builder.add_views(5, (8, 8, 0))
    ids[8] = builder.add_views(8, (5, 5, 5))
    ids[6] = builder.add_views(6, (10, 10, 10))
    shared = builder.add([1, 2], VIEW_W, weights=[0.5, 0.5])

    def flat(particle_id):
        return sorted(i for v in ids[particle_id].values() for i in v)

    return {
        "particles": particles,
        "hits": builder.hits,
        "muon_hits": flat(1) + flat(4),
        "proton_hits": flat(2),
        "photon_hits": flat(5),
        "neutron_hits": flat(8),
        "cosmic_hits": flat(6),
        "shared_hit": shared[0],
    }


@pytest.fixture(name="candidates")
def fixture_candidates(event):
    """Builds reconstructed candidates for the neutrino event.

    Candidates:
      - 0: the full muon, including the shared hit
      - 1: the proton, with 3 of its U hits missing
      - 2: the missing proton hits, daughter of the muon candidate
      - 3: the photon shower
      - 4: the cosmic muon

    Returns
    -------
    List[RecoCandidate]
        Reconstructed candidates
    """
    hits = event["hits"]

    def split(hit_ids):
        views = {VIEW_U: [], VIEW_V: [], VIEW_W: []}
        for i in hit_ids:
            views[hits[i].view].append(i)
        return views[VIEW_U], views[VIEW_V], views[VIEW_W]

    def build(id, hit_ids, pdg_code=13, parent_id=-1, children_ids=()):
        u, v, w = split(hit_ids)
        return RecoCandidate(
            id=id,
            pdg_code=pdg_code,
            hit_ids_u=u,
            hit_ids_v=v,
            hit_ids_w=w,
            parent_id=parent_id,
            children_ids=list(children_ids),
        )

    proton_hits = event["proton_hits"]
    return [
        build(0, event["muon_hits"] + [event["shared_hit"]], children_ids=(2,)),
        build(1, proton_hits[3:]),
        build(2, proton_hits[:3], parent_id=0),
        build(3, event["photon_hits"], pdg_code=11),
        build(4, event["cosmic_hits"]),
    ]
