"""Module with a data class object which represents a reconstructed
particle-flow candidate."""

from dataclasses import dataclass

import numpy as np

from recoval.utils.globals import INVAL_ID, VIEW_3D, VIEW_U, VIEW_V, VIEW_W, VIEWS_2D

from .base import DataBase

__all__ = ["RecoCandidate"]


@dataclass(eq=False)
class RecoCandidate(DataBase):
    """Reconstructed candidate information.

    The candidate only refers to its hits through their index in the event
    hit list, one index array per view.

    Attributes
    ----------
    id : int
        Index of the candidate in the list of candidates of the event
    pdg_code : int
        Reconstructed particle hypothesis (13 for track-like, 11 for
        shower-like candidates)
    hit_ids_u : np.ndarray
        (N_u) Indexes of the hits of the candidate in the U view
    hit_ids_v : np.ndarray
        (N_v) Indexes of the hits of the candidate in the V view
    hit_ids_w : np.ndarray
        (N_w) Indexes of the hits of the candidate in the W view
    hit_ids_3d : np.ndarray
        (N_3d) Indexes of the three-dimensional hits of the candidate
    parent_id : int
        Index of the parent candidate (-1 if the candidate has no parent)
    children_ids : np.ndarray
        (C) Indexes of the daughter candidates
    is_3d : bool
        Whether the candidate has been matched across views
    track_score : float
        Track-likeness score assigned by the characterisation algorithm
    """

    id: int = INVAL_ID
    pdg_code: int = 0
    hit_ids_u: np.ndarray = None
    hit_ids_v: np.ndarray = None
    hit_ids_w: np.ndarray = None
    hit_ids_3d: np.ndarray = None
    parent_id: int = INVAL_ID
    children_ids: np.ndarray = None
    is_3d: bool = True
    track_score: float = -1.0

    # Variable-length attributes
    _var_length_attrs = (
        ("hit_ids_u", np.int64),
        ("hit_ids_v", np.int64),
        ("hit_ids_w", np.int64),
        ("hit_ids_3d", np.int64),
        ("children_ids", np.int64),
    )

    # Map between view values and hit index attributes
    _view_attrs = {
        VIEW_U: "hit_ids_u",
        VIEW_V: "hit_ids_v",
        VIEW_W: "hit_ids_w",
        VIEW_3D: "hit_ids_3d",
    }

    def __str__(self):
        """Human-readable string representation of the candidate object.

        Returns
        -------
        str
            Basic information about the candidate properties
        """
        return (
            f"RecoCandidate(id={self.id:<3} | pdg_code={self.pdg_code:<3} "
            f"| num_hits_2d={self.num_hits_2d})"
        )

    def get_hit_ids(self, views=VIEWS_2D):
        """Returns the indexes of the hits of the candidate in some views.

        Parameters
        ----------
        views : Union[int, List[int]], default (U, V, W)
            View or views to fetch the hits from

        Returns
        -------
        np.ndarray
            Concatenated hit indexes, in the order of the requested views
        """
        if np.isscalar(views):
            views = [views]

        index_list = []
        for view in views:
            assert view in self._view_attrs, f"View not recognized: {view}."
            index_list.append(getattr(self, self._view_attrs[view]))

        if len(index_list) == 0:
            return np.empty(0, dtype=np.int64)

        return np.concatenate(index_list).astype(np.int64)

    @property
    def num_hits_2d(self):
        """Number of hits of the candidate across the 2D views.

        Returns
        -------
        int
            Total number of U, V and W hits
        """
        return len(self.hit_ids_u) + len(self.hit_ids_v) + len(self.hit_ids_w)
