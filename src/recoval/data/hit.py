"""Module with a data class object which represents a detector hit."""

from dataclasses import dataclass

import numpy as np

from recoval.utils.enums import enum_factory
from recoval.utils.globals import INVAL_ID, VIEW_U

from .base import DataBase

__all__ = ["CaloHit"]


@dataclass(eq=False)
class CaloHit(DataBase):
    """Detector hit information.

    A hit may receive energy from several simulated particles. Each of these
    contributions is recorded as a (particle index, weight) pair by the
    simulation/digitization stage.

    Attributes
    ----------
    id : int
        Index of the hit in the list of hits of the event
    position : np.ndarray
        (2) Projected position of the hit in its view (drift, wire) in cm
    energy : float
        Deposited energy in the hit
    view : int
        Detector view the hit was recorded in (see :class:`ViewEnum`). A view
        name (`u`, `v`, `w`, `three_d`) is parsed into its value
    mc_ids : np.ndarray
        (M) Indexes of the particles which contributed to the hit
    mc_weights : np.ndarray
        (M) Weight of each particle contribution
    """

    id: int = INVAL_ID
    position: np.ndarray = None
    energy: float = 0.0
    view: int = VIEW_U
    mc_ids: np.ndarray = None
    mc_weights: np.ndarray = None

    # Fixed-length attributes
    _fixed_length_attrs = (("position", 2),)

    # Variable-length attributes
    _var_length_attrs = (("mc_ids", np.int64), ("mc_weights", np.float64))

    def __post_init__(self):
        """Parses the view name and checks that the contribution arrays are
        aligned."""
        super().__post_init__()
        if isinstance(self.view, str):
            self.view = enum_factory("view", self.view)
        assert len(self.mc_ids) == len(self.mc_weights), (
            "There must be exactly one weight per contributing particle, "
            f"got {len(self.mc_ids)} particles and {len(self.mc_weights)} weights."
        )

    def __str__(self):
        """Human-readable string representation of the hit object.

        Returns
        -------
        str
            Basic information about the hit properties
        """
        return (
            f"CaloHit(id={self.id:<5} | view={self.view} "
            f"| num_contributions={len(self.mc_ids)})"
        )
