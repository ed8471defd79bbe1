"""Simulated particle hierarchy navigation.

The :class:`ParticleHierarchy` arena indexes the particles of one event by
their `id` and resolves parent/children links without holding references
between particles. It provides the vocabulary used throughout the matching
engine: neutrino, neutrino-induced, visible and primary particles.
"""

from recoval.utils.globals import NEUTRINO_PDGS, NUANCE_UNKNOWN, VISIBLE_PDGS
from recoval.utils.logger import logger

__all__ = ["ParticleHierarchy"]


class ParticleHierarchy:
    """Index-addressed arena of simulated particles.

    Parent and children links are stored as particle indexes. Links which
    point to a particle absent from the list are treated as broken. Upward
    walks are bounded by the number of particles, which protects against
    malformed (cyclic) parent links.
    """

    def __init__(self, particles):
        """Index the particles of one event.

        Parameters
        ----------
        particles : List[MCParticle]
            (P) List of simulated particles
        """
        self.particles = list(particles)
        self._index = {}
        for i, p in enumerate(self.particles):
            assert p.id not in self._index, f"Duplicate particle index: {p.id}."
            self._index[p.id] = i

        # Children are resolved from both the children and the parent links
        self._children_ids = {p.id: [] for p in self.particles}
        for p in self.particles:
            for child_id in p.children_ids:
                child_id = int(child_id)
                if child_id in self._index and child_id != p.id:
                    if child_id not in self._children_ids[p.id]:
                        self._children_ids[p.id].append(child_id)
        for p in self.particles:
            if p.parent_id in self._index and p.parent_id != p.id:
                if p.id not in self._children_ids[p.parent_id]:
                    self._children_ids[p.parent_id].append(p.id)

        # A legitimate walk never visits more nodes than there are particles
        self.max_depth = len(self.particles) + 1

        # Memoized relations
        self._primary_ids = {}
        self._primary_map = None

    def __len__(self):
        """Number of particles in the arena."""
        return len(self.particles)

    def __iter__(self):
        """Iterates over the particles in their input order."""
        return iter(self.particles)

    def __contains__(self, particle_id):
        """Checks whether a particle index is known to the arena."""
        return particle_id in self._index

    def get(self, particle_id):
        """Fetches a particle from its index.

        Parameters
        ----------
        particle_id : int
            Particle index

        Returns
        -------
        MCParticle
            Particle object, or `None` if the index is not known
        """
        i = self._index.get(particle_id)
        if i is None:
            return None

        return self.particles[i]

    def get_parent(self, particle):
        """Fetches the direct parent of a particle.

        Parameters
        ----------
        particle : MCParticle
            Input particle

        Returns
        -------
        MCParticle
            Parent particle, or `None` if there is none (or it is not known)
        """
        if particle.parent_id < 0 or particle.parent_id == particle.id:
            return None

        return self.get(particle.parent_id)

    def get_children(self, particle):
        """Fetches the direct children of a particle.

        A particle is a child if it is listed in the `children_ids` of the
        input particle or if its `parent_id` points to the input particle.

        Parameters
        ----------
        particle : MCParticle
            Input particle

        Returns
        -------
        List[MCParticle]
            Children particles which are known to the arena
        """
        child_ids = self._children_ids.get(particle.id, [])

        return [self.get(i) for i in child_ids]

    @staticmethod
    def is_neutrino(particle):
        """Whether a particle is a neutrino or an antineutrino.

        Parameters
        ----------
        particle : MCParticle
            Input particle

        Returns
        -------
        bool
            `True` if the particle is a neutrino
        """
        return abs(particle.pdg_code) in NEUTRINO_PDGS

    @staticmethod
    def is_visible(particle):
        """Whether a particle is visible (i.e. long-lived charged particle or
        photon).

        Parameters
        ----------
        particle : MCParticle
            Input particle

        Returns
        -------
        bool
            `True` if the particle leaves visible depositions
        """
        return abs(particle.pdg_code) in VISIBLE_PDGS

    def is_neutrino_final_state(self, particle):
        """Whether a particle was directly produced by a neutrino interaction.

        Parameters
        ----------
        particle : MCParticle
            Input particle

        Returns
        -------
        bool
            `True` if the parent of the particle is a neutrino
        """
        parent = self.get_parent(particle)

        return parent is not None and self.is_neutrino(parent)

    def is_neutrino_induced(self, particle):
        """Whether a particle was produced, directly or transitively, by the
        interaction of a neutrino.

        Parameters
        ----------
        particle : MCParticle
            Input particle

        Returns
        -------
        bool
            `True` if there is a neutrino in the ancestry of the particle
        """
        return self.get_parent_neutrino(particle) is not None

    def get_parent_neutrino(self, particle):
        """Walks up the ancestry of a particle until a neutrino is found.

        Parameters
        ----------
        particle : MCParticle
            Input particle

        Returns
        -------
        MCParticle
            Neutrino ancestor (the particle itself if it is a neutrino), or
            `None` if there is no neutrino in the ancestry
        """
        current = particle
        for _ in range(self.max_depth):
            if self.is_neutrino(current):
                return current

            parent = self.get_parent(current)
            if parent is None:
                return None
            current = parent

        logger.warning(
            "Ancestry of particle %d exceeds the maximum depth, "
            "parent links are likely cyclic.",
            particle.id,
        )

        return None

    def get_parent_neutrino_pdg(self, particle):
        """Returns the PDG code of the neutrino a particle originates from.

        Parameters
        ----------
        particle : MCParticle
            Input particle

        Returns
        -------
        int
            PDG code of the parent neutrino, 0 if there is none
        """
        neutrino = self.get_parent_neutrino(particle)

        return neutrino.pdg_code if neutrino is not None else 0

    def get_primary(self, particle):
        """Finds the topmost ancestor of a particle which is not a neutrino.

        The walk goes up while the parent exists and is not a neutrino. If a
        parent link is broken mid-chain, or if the walk exceeds the maximum
        depth, the particle is its own primary.

        Parameters
        ----------
        particle : MCParticle
            Input particle

        Returns
        -------
        MCParticle
            Primary particle
        """
        # Check the cache first
        if particle.id in self._primary_ids:
            return self.get(self._primary_ids[particle.id])

        primary = particle
        current = particle
        for _ in range(self.max_depth):
            if current.parent_id < 0 or current.parent_id == current.id:
                primary = current
                break

            parent = self.get(current.parent_id)
            if parent is None:
                logger.debug(
                    "Parent %d of particle %d is missing, particle %d is "
                    "its own primary.",
                    current.parent_id,
                    current.id,
                    particle.id,
                )
                primary = particle
                break

            if self.is_neutrino(parent):
                primary = current
                break

            current = parent

        else:
            logger.warning(
                "Ancestry of particle %d exceeds the maximum depth, "
                "parent links are likely cyclic.",
                particle.id,
            )
            primary = particle

        self._primary_ids[particle.id] = primary.id

        return primary

    def is_primary(self, particle):
        """Whether a particle is the primary of its own hierarchy.

        Parameters
        ----------
        particle : MCParticle
            Input particle

        Returns
        -------
        bool
            `True` if the particle is not a neutrino and is its own primary
        """
        if self.is_neutrino(particle):
            return False

        return self.get_primary(particle) is particle

    def primary_map(self):
        """Maps each particle index onto the index of its primary.

        Neutrinos are not included in the map.

        Returns
        -------
        Dict[int, int]
            Mapping from particle index to primary index
        """
        if self._primary_map is None:
            self._primary_map = {}
            for p in self.particles:
                if not self.is_neutrino(p):
                    self._primary_map[p.id] = self.get_primary(p).id

        return dict(self._primary_map)

    def self_map(self):
        """Maps each particle index onto itself.

        Used in place of :meth:`primary_map` when hits must be attributed to
        the particle which deposited them rather than to its primary.

        Returns
        -------
        Dict[int, int]
            Identity mapping for all particle indexes
        """
        return {p.id: p.id for p in self.particles}

    def get_primary_list(self):
        """Returns the primary particles, sorted by decreasing momentum.

        Returns
        -------
        List[MCParticle]
            Primary particles
        """
        primaries = [p for p in self.particles if self.is_primary(p)]

        return sorted(primaries, key=lambda p: (-p.p, p.id))

    def get_neutrino_list(self):
        """Returns the parentless neutrinos, sorted by decreasing energy.

        Returns
        -------
        List[MCParticle]
            Neutrinos at the top of a hierarchy
        """
        neutrinos = [
            p
            for p in self.particles
            if self.is_neutrino(p) and self.get_parent(p) is None
        ]

        return sorted(neutrinos, key=lambda p: (-p.energy, p.id))

    def select_true_neutrinos(self):
        """Returns the parentless neutrinos which carry an interaction code.

        Neutrinos with an unknown interaction code are not considered when
        evaluating the reconstruction performance.

        Returns
        -------
        List[MCParticle]
            Neutrinos to use in performance metrics, sorted by decreasing
            energy
        """
        return [
            p for p in self.get_neutrino_list() if p.nuance_code != NUANCE_UNKNOWN
        ]
