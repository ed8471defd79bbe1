"""Validated parameter sets which steer the truth-matching engine."""

import math
from dataclasses import asdict, dataclass, fields

import numpy as np

from .errors import ConfigValidationError

__all__ = ["PrimaryParameters"]


@dataclass(frozen=True)
class PrimaryParameters:
    """Parameters which decide when a true particle is reconstructable.

    Attributes
    ----------
    min_primary_good_hits : int
        Minimum number of good hits associated with a target particle
    min_hits_for_good_view : int
        Minimum number of good hits in a view for it to count as a good view
    min_primary_good_views : int
        Minimum number of good views for a target particle
    select_input_hits : bool
        If `True`, apply the hit quality selections (propagation distance and
        sharing fraction) to the input hits. If `False`, every input hit is
        accepted as is.
    max_photon_propagation : float
        Maximum distance (cm) a photon may travel before its depositions
        stop being credited to its primary
    min_hit_sharing_fraction : float
        Minimum fraction of the hit weight carried by its main target
    fold_back_hierarchy : bool
        If `True`, hits are attributed to the primary of the particle which
        deposited them. If `False`, to the particle itself.
    """

    min_primary_good_hits: int = 15
    min_hits_for_good_view: int = 5
    min_primary_good_views: int = 2
    select_input_hits: bool = True
    max_photon_propagation: float = 2.5
    min_hit_sharing_fraction: float = 0.9
    fold_back_hierarchy: bool = True

    # Parameters which must be non-negative integers
    _count_attrs = (
        "min_primary_good_hits",
        "min_hits_for_good_view",
        "min_primary_good_views",
    )

    # Parameters which must be booleans
    _bool_attrs = ("select_input_hits", "fold_back_hierarchy")

    def __post_init__(self):
        """Checks that all the parameters are within their valid domain."""
        for attr in self._count_attrs:
            value = getattr(self, attr)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ConfigValidationError(
                    f"`{attr}` must be an integer, got {value!r}."
                )
            if value < 0:
                raise ConfigValidationError(
                    f"`{attr}` must be non-negative, got {value}."
                )

        for attr in self._bool_attrs:
            value = getattr(self, attr)
            if not isinstance(value, (bool, np.bool_)):
                raise ConfigValidationError(
                    f"`{attr}` must be a boolean, got {value!r}."
                )

        propagation = self._as_float("max_photon_propagation")
        if propagation < 0.0:
            raise ConfigValidationError(
                f"`max_photon_propagation` must be non-negative, got {propagation}."
            )

        fraction = self._as_float("min_hit_sharing_fraction")
        if not 0.0 <= fraction <= 1.0:
            raise ConfigValidationError(
                f"`min_hit_sharing_fraction` must be in [0, 1], got {fraction}."
            )

    def _as_float(self, attr):
        """Fetches a floating point parameter, checks it is a finite number.

        Parameters
        ----------
        attr : str
            Name of the parameter

        Returns
        -------
        float
            Value of the parameter
        """
        value = getattr(self, attr)
        if isinstance(value, bool) or not isinstance(value, (int, float, np.number)):
            raise ConfigValidationError(f"`{attr}` must be a number, got {value!r}.")
        if math.isnan(value):
            raise ConfigValidationError(f"`{attr}` must not be NaN.")

        return float(value)

    @classmethod
    def from_config(cls, cfg=None):
        """Builds a parameter set from a configuration dictionary.

        Parameters
        ----------
        cfg : dict, optional
            Configuration block. Missing keys take their default values.

        Returns
        -------
        PrimaryParameters
            Validated parameter set
        """
        cfg = cfg or {}
        if not isinstance(cfg, dict):
            raise ConfigValidationError(
                f"Parameter block must be a dictionary, got {type(cfg).__name__}."
            )

        valid_keys = [f.name for f in fields(cls)]
        unknown = set(cfg) - set(valid_keys)
        if len(unknown):
            raise ConfigValidationError(
                f"Parameters not recognized: {sorted(unknown)}. Must be "
                f"among {valid_keys}."
            )

        return cls(**cfg)

    def as_dict(self):
        """Returns the parameters as a dictionary of (key, value) pairs.

        Returns
        -------
        dict
            Dictionary of parameter names and their values
        """
        return asdict(self)
