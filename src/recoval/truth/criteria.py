"""Selection criteria which decide whether a true particle is a valid target.

Each criterion is a function of the particle and of the
:class:`ParticleHierarchy` it belongs to, which returns whether the particle
qualifies as a selection root.
"""

from recoval.utils.globals import BEAM_NUANCES, NUANCE_COSMIC_RAY, NUANCE_UNKNOWN

__all__ = [
    "is_beam_neutrino_final_state",
    "is_beam_particle",
    "is_cosmic_ray",
    "is_neutrino_induced",
    "is_primary",
]


def is_beam_neutrino_final_state(particle, hierarchy):
    """Whether a particle is a primary produced by a neutrino interaction.

    Parameters
    ----------
    particle : MCParticle
        Input particle
    hierarchy : ParticleHierarchy
        Hierarchy the particle belongs to

    Returns
    -------
    bool
        `True` if the particle is a neutrino final-state primary
    """
    return hierarchy.is_primary(particle) and hierarchy.is_neutrino_final_state(
        particle
    )


def is_beam_particle(particle, hierarchy):
    """Whether a particle is a primary beam (or test beam) particle.

    Parameters
    ----------
    particle : MCParticle
        Input particle
    hierarchy : ParticleHierarchy
        Hierarchy the particle belongs to

    Returns
    -------
    bool
        `True` if the particle is a primary beam particle
    """
    return hierarchy.is_primary(particle) and particle.nuance_code in BEAM_NUANCES


def is_cosmic_ray(particle, hierarchy):
    """Whether a particle is a primary cosmic ray.

    Primaries without a known creation process which do not come from a
    neutrino interaction are considered cosmic rays.

    Parameters
    ----------
    particle : MCParticle
        Input particle
    hierarchy : ParticleHierarchy
        Hierarchy the particle belongs to

    Returns
    -------
    bool
        `True` if the particle is a primary cosmic ray
    """
    if not hierarchy.is_primary(particle):
        return False

    nuance = particle.nuance_code

    return nuance == NUANCE_COSMIC_RAY or (
        nuance == NUANCE_UNKNOWN
        and not is_beam_neutrino_final_state(particle, hierarchy)
    )


def is_neutrino_induced(particle, hierarchy):
    """Whether a (non-neutrino) particle originates from a neutrino.

    Parameters
    ----------
    particle : MCParticle
        Input particle
    hierarchy : ParticleHierarchy
        Hierarchy the particle belongs to

    Returns
    -------
    bool
        `True` if the particle has a neutrino ancestor
    """
    return not hierarchy.is_neutrino(particle) and hierarchy.is_neutrino_induced(
        particle
    )


def is_primary(particle, hierarchy):
    """Whether a particle is a primary, irrespective of its origin."""
    return hierarchy.is_primary(particle)
