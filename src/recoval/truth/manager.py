"""Manages the truth-matching of one event at a time."""

from copy import deepcopy

from recoval.config import (
    ConfigValidationError,
    PrimaryParameters,
    load_config_file,
)
from recoval.utils.logger import logger

from .factories import criteria_factory
from .hierarchy import ParticleHierarchy
from .provenance import match_hits_to_particles
from .select import select_reconstructable_particles
from .sharing import get_candidate_to_reconstructable_hits, get_hit_sharing_maps

__all__ = ["TruthMatchManager"]


class TruthMatchManager:
    """Manager in charge of matching reconstructed candidates to the truth.

    It validates its configuration once and then processes events. The
    configuration block is structured as follows:

    .. code-block:: yaml

        truth_match:
          parameters:
            min_primary_good_hits: 15
            min_hits_for_good_view: 5
          selections:
            neutrino: beam_neutrino_final_state
            cosmic:
              criteria: cosmic_ray
              parameters:
                fold_back_hierarchy: false
          fold_candidate_hierarchy: false

    Each selection pass builds its own map of reconstructable targets. The
    candidates are then matched against the union of all the passes.
    """

    # Keys allowed at the top level of the configuration block
    _valid_keys = ("parameters", "selections", "fold_candidate_hierarchy")

    # Keys allowed in a selection pass block
    _valid_selection_keys = ("criteria", "parameters")

    def __init__(self, cfg=None):
        """Initialize the truth-matching manager.

        Parameters
        ----------
        cfg : dict, optional
            Truth-matching configuration. If not provided, a single pass
            selects beam neutrino final-state particles with default
            parameters.
        """
        cfg = deepcopy(cfg) if cfg is not None else {}
        if not isinstance(cfg, dict):
            raise ConfigValidationError(
                "Truth-matching configuration must be a dictionary, "
                f"got {type(cfg).__name__}."
            )

        unknown = set(cfg) - set(self._valid_keys)
        if len(unknown):
            raise ConfigValidationError(
                f"Truth-matching keys not recognized: {sorted(unknown)}. "
                f"Must be among {list(self._valid_keys)}."
            )

        # Parse the parameters shared by all selection passes
        base = PrimaryParameters.from_config(cfg.get("parameters", None))

        # Parse the selection passes
        selections = cfg.get(
            "selections", {"neutrino": "beam_neutrino_final_state"}
        )
        if not isinstance(selections, dict) or not len(selections):
            raise ConfigValidationError(
                "Must provide at least one selection pass as a dictionary."
            )

        self.selections = {}
        for name, sel_cfg in selections.items():
            self.selections[name] = self._parse_selection(name, sel_cfg, base)

        self.fold_candidate_hierarchy = cfg.get("fold_candidate_hierarchy", False)
        if not isinstance(self.fold_candidate_hierarchy, bool):
            raise ConfigValidationError(
                "`fold_candidate_hierarchy` must be a boolean, "
                f"got {self.fold_candidate_hierarchy!r}."
            )

    @classmethod
    def from_config_file(cls, cfg_path, block="truth_match"):
        """Builds the manager from a YAML configuration file.

        Parameters
        ----------
        cfg_path : str
            Path to the configuration file
        block : str, default 'truth_match'
            Name of the truth-matching block in the file

        Returns
        -------
        TruthMatchManager
            Configured manager
        """
        cfg = load_config_file(cfg_path)
        if block not in cfg:
            raise ConfigValidationError(
                f"No `{block}` block in the configuration file {cfg_path}."
            )

        return cls(cfg[block])

    @classmethod
    def _parse_selection(cls, name, sel_cfg, base):
        """Parses the configuration of one selection pass.

        Parameters
        ----------
        name : str
            Name of the selection pass
        sel_cfg : Union[str, dict]
            Name of the criterion or selection pass configuration
        base : PrimaryParameters
            Parameters shared by all the passes

        Returns
        -------
        criteria : callable
            Selection criterion
        parameters : PrimaryParameters
            Parameters of the pass
        """
        if isinstance(sel_cfg, str):
            sel_cfg = {"criteria": sel_cfg}
        if not isinstance(sel_cfg, dict) or "criteria" not in sel_cfg:
            raise ConfigValidationError(
                f"Selection pass `{name}` must name a `criteria`."
            )

        unknown = set(sel_cfg) - set(cls._valid_selection_keys)
        if len(unknown):
            raise ConfigValidationError(
                f"Selection pass `{name}` keys not recognized: {sorted(unknown)}."
            )

        if not isinstance(sel_cfg["criteria"], str):
            raise ConfigValidationError(
                f"Selection pass `{name}` criteria must be a name, "
                f"got {sel_cfg['criteria']!r}."
            )
        try:
            criteria = criteria_factory(sel_cfg["criteria"])
        except ValueError as err:
            raise ConfigValidationError(str(err)) from err

        overrides = sel_cfg.get("parameters", None) or {}
        if not isinstance(overrides, dict):
            raise ConfigValidationError(
                f"Selection pass `{name}` parameters must be a dictionary."
            )
        parameters = PrimaryParameters.from_config({**base.as_dict(), **overrides})

        return criteria, parameters

    def __call__(self, particles, hits, candidates, input_hit_ids=None):
        """Matches the candidates of one event to its true particles.

        Parameters
        ----------
        particles : List[MCParticle]
            (P) List of simulated particles
        hits : List[CaloHit]
            (H) List of detector hits
        candidates : List[RecoCandidate]
            (C) List of reconstructed candidates
        input_hit_ids : array_like, optional
            Restricts the hits considered to this subset of hit indexes

        Returns
        -------
        dict
            Dictionary of truth-matching data products
              - mc_to_hits: reconstructable targets of each selection pass
              - hit_to_mc: main particle of each hit
              - candidate_to_hits: reconstructable hits of each candidate
              - candidate_to_mc: candidate -> target sharing records
              - mc_to_candidate: target -> candidate sharing records
        """
        hierarchy = ParticleHierarchy(particles)

        # Run each selection pass
        mc_to_hits = {}
        for name, (criteria, parameters) in self.selections.items():
            mc_to_hits[name] = select_reconstructable_particles(
                hierarchy, hits, parameters, criteria, input_hit_ids
            )

        # Record the raw provenance of each hit
        hit_to_mc, _ = match_hits_to_particles(hits)

        # Share the candidate hits with the targets of all passes
        target_maps = list(mc_to_hits.values())
        candidate_to_hits = get_candidate_to_reconstructable_hits(
            candidates, target_maps, self.fold_candidate_hierarchy
        )
        candidate_to_mc, mc_to_candidate = get_hit_sharing_maps(
            candidate_to_hits, target_maps
        )

        summary = ", ".join(f"{k}: {len(v)}" for k, v in mc_to_hits.items())
        logger.info(
            "Matched %d candidates to reconstructable targets (%s).",
            len(candidates),
            summary,
        )

        return {
            "mc_to_hits": mc_to_hits,
            "hit_to_mc": hit_to_mc,
            "candidate_to_hits": candidate_to_hits,
            "candidate_to_mc": candidate_to_mc,
            "mc_to_candidate": mc_to_candidate,
        }
