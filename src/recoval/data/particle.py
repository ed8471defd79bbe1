"""Module with a data class object which represents a true particle."""

from dataclasses import dataclass

import numpy as np

from recoval.utils.globals import INVAL_ID, NUANCE_UNKNOWN

from .base import DataBase

__all__ = ["MCParticle"]


@dataclass(eq=False)
class MCParticle(DataBase):
    """Simulated particle information.

    The particle does not own its relatives: parents and children are
    referred to by their index in the event particle list.

    Attributes
    ----------
    id : int
        Index of the particle in the list of particles of the event
    pdg_code : int
        PDG code of the particle
    nuance_code : int
        Code of the process which created the particle (2000/2001 for beam
        particles, 3000 for cosmic rays, 0 if unknown)
    energy : float
        Initial energy of the particle in MeV
    momentum : np.ndarray
        (3) Initial momentum of the particle in MeV/c
    position : np.ndarray
        (3) Location of the creation vertex of the particle in cm
    end_position : np.ndarray
        (3) Location where the particle stopped or was destroyed in cm
    parent_id : int
        Index of the parent particle (-1 if the particle has no parent)
    children_ids : np.ndarray
        (C) Indexes of the particles created by this particle
    """

    id: int = INVAL_ID
    pdg_code: int = 0
    nuance_code: int = NUANCE_UNKNOWN
    energy: float = -1.0
    momentum: np.ndarray = None
    position: np.ndarray = None
    end_position: np.ndarray = None
    parent_id: int = INVAL_ID
    children_ids: np.ndarray = None

    # Fixed-length attributes
    _fixed_length_attrs = (
        ("momentum", 3),
        ("position", 3),
        ("end_position", 3),
    )

    # Variable-length attributes
    _var_length_attrs = (("children_ids", np.int64),)

    def __str__(self):
        """Human-readable string representation of the particle object.

        Returns
        -------
        str
            Basic information about the particle properties
        """
        return (
            f"MCParticle(id={self.id:<3} | pdg_code={self.pdg_code:<5} "
            f"| parent_id={self.parent_id:<3} "
            f"| num_children={len(self.children_ids)})"
        )

    @property
    def p(self):
        """Computes the magnitude of the initial momentum.

        Returns
        -------
        float
            Norm of the initial momentum vector
        """
        if np.any(np.isinf(self.momentum)):
            return 0.0

        return float(np.linalg.norm(self.momentum))

    @property
    def distance_travel(self):
        """Computes the distance between the creation and end points.

        Returns
        -------
        float
            Distance travelled by the particle in cm. If either point is
            undefined, returns 0.
        """
        if np.any(np.isinf(self.position)) or np.any(np.isinf(self.end_position)):
            return 0.0

        return float(np.linalg.norm(self.end_position - self.position))
