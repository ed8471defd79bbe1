"""Track/shower characterisation of reconstructed candidates."""

import numpy as np

from recoval.config import (
    ConfigValidationError,
    PrimaryParameters,
    load_config_file,
)
from recoval.io import CSVWriter
from recoval.truth.hierarchy import ParticleHierarchy
from recoval.truth.provenance import get_main_particle_id_for_hits
from recoval.utils.globals import MUON_PDG
from recoval.utils.logger import logger

from .factories import classifier_factory
from .label import derive_track_label, is_shower_pdg
from .mva import MvaBase

__all__ = ["TrackShowerCharacteriser"]


class TrackShowerCharacteriser:
    """Decides whether reconstructed candidates are clear tracks.

    In classification mode, the decision is made by a trained classifier
    from a feature vector. In training mode, the true label of the candidate
    is derived from the simulation and written out as a training example.
    Single-view clusters of hits can be characterised in the same way.

    Typical configuration should look like:

    .. code-block:: yaml

        characterise:
          classifier:
            name: bdt
            model_path: bdt.joblib
          classifier_no_charge_info:
            name: bdt
            model_path: bdt_no_charge_info.joblib
          min_probability_cut: 0.5
    """

    # Suffix of the training file which holds candidates without W-view hits
    no_charge_suffix = "_no_charge_info"

    def __init__(
        self,
        classifier=None,
        classifier_no_charge_info=None,
        use_three_d_information=True,
        enable_probability=True,
        min_probability_cut=0.5,
        min_hits_cut=5,
        training_mode=False,
        training_output_file=None,
        overwrite=False,
        apply_reconstructability_checks=False,
        test_beam_mode=False,
        apply_fiducial_cut=False,
        fiducial_lower=None,
        fiducial_upper=None,
        parameters=None,
    ):
        """Initialize the characterisation algorithm.

        Parameters
        ----------
        classifier : Union[MvaBase, str, dict], optional
            Classifier (or classifier configuration) used in classification
            mode
        classifier_no_charge_info : Union[MvaBase, str, dict], optional
            Classifier used for candidates without W-view hits
        use_three_d_information : bool, default True
            If `True`, use the dedicated classifier for candidates without
            W-view hits
        enable_probability : bool, default True
            If `True`, cut on the classifier probability and store it as the
            track score of the candidate
        min_probability_cut : float, default 0.5
            Minimum track probability for a clear track
        min_hits_cut : int, default 5
            Minimum number of hits for a single-view cluster to be a clear
            track
        training_mode : bool, default False
            If `True`, derive true labels and write training examples
        training_output_file : str, optional
            Base name of the training example files (required in training
            mode)
        overwrite : bool, default False
            If `True`, overwrite existing training example files
        apply_reconstructability_checks : bool, default False
            If `True`, derive labels from the reconstructable targets
        test_beam_mode : bool, default False
            If `True`, targets are beam particles rather than neutrino
            final-state particles
        apply_fiducial_cut : bool, default False
            If `True`, only write examples whose true vertex lies within the
            fiducial box
        fiducial_lower : List[float], optional
            (3) Lower bounds of the fiducial box
        fiducial_upper : List[float], optional
            (3) Upper bounds of the fiducial box
        parameters : Union[PrimaryParameters, dict], optional
            Reconstructability parameters used to derive the labels
        """
        self.use_three_d_information = use_three_d_information
        self.enable_probability = enable_probability
        self.min_probability_cut = min_probability_cut
        self.min_hits_cut = min_hits_cut
        self.training_mode = training_mode
        self.apply_reconstructability_checks = apply_reconstructability_checks
        self.criteria = (
            "beam_particle" if test_beam_mode else "beam_neutrino_final_state"
        )

        if parameters is None or isinstance(parameters, PrimaryParameters):
            self.parameters = parameters or PrimaryParameters()
        else:
            self.parameters = PrimaryParameters.from_config(parameters)

        # Store the fiducial box
        self.apply_fiducial_cut = apply_fiducial_cut
        lower = fiducial_lower if fiducial_lower is not None else [-np.inf] * 3
        upper = fiducial_upper if fiducial_upper is not None else [np.inf] * 3
        self.fiducial_lower = np.asarray(lower, dtype=np.float64)
        self.fiducial_upper = np.asarray(upper, dtype=np.float64)
        if self.fiducial_lower.shape != (3,) or self.fiducial_upper.shape != (3,):
            raise ConfigValidationError("The fiducial bounds must be of length 3.")

        # In training mode, prepare the output; otherwise, load the classifiers
        self.classifier, self.classifier_no_charge_info = None, None
        if training_mode:
            if training_output_file is None:
                raise ConfigValidationError(
                    "Must provide `training_output_file` in training mode."
                )
            self.training_output_file = training_output_file
            self.overwrite = overwrite
            self.writers = {}

        else:
            if classifier is None:
                raise ConfigValidationError(
                    "Must provide a `classifier` in classification mode."
                )
            self.classifier = self.load_classifier(classifier)
            if use_three_d_information:
                if classifier_no_charge_info is None:
                    raise ConfigValidationError(
                        "Must provide a `classifier_no_charge_info` in "
                        "classification mode when using 3D information."
                    )
                self.classifier_no_charge_info = self.load_classifier(
                    classifier_no_charge_info
                )

    @classmethod
    def from_config_file(cls, cfg_path, block="characterise"):
        """Builds the characterisation algorithm from a YAML file.

        Parameters
        ----------
        cfg_path : str
            Path to the configuration file
        block : str, default 'characterise'
            Name of the characterisation block in the file

        Returns
        -------
        TrackShowerCharacteriser
            Configured algorithm
        """
        cfg = load_config_file(cfg_path)
        if not isinstance(cfg.get(block, None), dict):
            raise ConfigValidationError(
                f"No `{block}` block in the configuration file {cfg_path}."
            )

        return cls(**cfg[block])

    @staticmethod
    def load_classifier(classifier):
        """Builds a classifier from its configuration, if needed.

        Parameters
        ----------
        classifier : Union[MvaBase, str, dict]
            Classifier or classifier configuration

        Returns
        -------
        MvaBase
            Classifier
        """
        if isinstance(classifier, MvaBase):
            return classifier

        return classifier_factory(classifier)

    def passes_fiducial_cut(self, vertex):
        """Checks whether a vertex lies within the fiducial box.

        Parameters
        ----------
        vertex : np.ndarray
            (3) Vertex position

        Returns
        -------
        bool
            `True` if the vertex is contained in the box (edges included)
        """
        vertex = np.asarray(vertex, dtype=np.float64)

        return bool(
            np.all(self.fiducial_lower <= vertex)
            and np.all(vertex <= self.fiducial_upper)
        )

    def has_charge_info(self, candidate):
        """Checks whether the charge features of a candidate are available.

        Charge features are only computed from W-view hits.

        Parameters
        ----------
        candidate : RecoCandidate
            Reconstructed candidate

        Returns
        -------
        bool
            `True` if the candidate has W-view hits
        """
        return len(candidate.hit_ids_w) > 0

    def write_example(self, features, is_track, charge_info=True):
        """Appends one training example to the relevant file.

        Parameters
        ----------
        features : np.ndarray
            (F) Feature vector
        is_track : bool
            True label of the example
        charge_info : bool, default True
            Whether the features include charge information
        """
        suffix = "" if charge_info else self.no_charge_suffix
        if suffix not in self.writers:
            file_name = f"{self.training_output_file}{suffix}.csv"
            self.writers[suffix] = CSVWriter(file_name, overwrite=self.overwrite)

        record = {f"feature_{i}": float(f) for i, f in enumerate(features)}
        record["is_track"] = int(is_track)
        self.writers[suffix].append(record)

    def is_clear_track(
        self, candidate, features, particles=None, hits=None, candidates=None
    ):
        """Decides whether a candidate is a clear track.

        Parameters
        ----------
        candidate : RecoCandidate
            Reconstructed candidate. Its track score is updated when
            probabilities are enabled.
        features : array_like
            (F) Feature vector of the candidate. Missing features are
            represented by `None` or NaN.
        particles : List[MCParticle], optional
            Simulated particles of the event (required in training mode)
        hits : List[CaloHit], optional
            Detector hits of the event (required in training mode)
        candidates : List[RecoCandidate], optional
            All the reconstructed candidates of the event. In training mode,
            the hits of the candidates downstream of `candidate` are then
            attributed to it when the hierarchy is folded back.

        Returns
        -------
        bool
            `True` if the candidate is a clear track
        """
        # Candidates which are not matched across views use their hypothesis
        if not candidate.is_3d:
            return self._fallback(candidate)

        features = self._as_features(features)
        charge_info = self.has_charge_info(candidate)

        if self.training_mode:
            assert particles is not None and hits is not None, (
                "Must provide the particles and the hits of the event "
                "in training mode."
            )
            label = derive_track_label(
                candidate,
                particles,
                hits,
                self.parameters,
                self.criteria,
                self.apply_reconstructability_checks,
                candidates,
            )
            if label.is_valid and not label.mischaracterised:
                if not self.apply_fiducial_cut or self.passes_fiducial_cut(
                    label.vertex
                ):
                    self.write_example(features, label.is_track, charge_info)

            return label.is_track

        if not np.all(np.isfinite(features)):
            logger.debug(
                "Candidate %d has uninitialized features, falling back "
                "on its particle hypothesis.",
                candidate.id,
            )
            return self._fallback(candidate)

        classifier = self.classifier
        if self.use_three_d_information and not charge_info:
            classifier = self.classifier_no_charge_info

        if not self.enable_probability:
            return classifier.classify(features)

        score = classifier.calculate_probability(features)
        candidate.track_score = score

        return score >= self.min_probability_cut

    def is_clear_cluster(self, cluster_hits, features, particles=None):
        """Decides whether a single-view cluster of hits is a clear track.

        Parameters
        ----------
        cluster_hits : List[CaloHit]
            Hits which make up the cluster
        features : array_like
            (F) Feature vector of the cluster
        particles : List[MCParticle], optional
            Simulated particles of the event (required in training mode)

        Returns
        -------
        bool
            `True` if the cluster is a clear track
        """
        if len(cluster_hits) < self.min_hits_cut:
            return False

        features = self._as_features(features)

        if self.training_mode:
            assert (
                particles is not None
            ), "Must provide the particles of the event in training mode."
            hierarchy = particles
            if not isinstance(hierarchy, ParticleHierarchy):
                hierarchy = ParticleHierarchy(particles)

            main_id = get_main_particle_id_for_hits(cluster_hits)
            main_particle = hierarchy.get(main_id) if main_id is not None else None
            is_track = main_particle is not None and not is_shower_pdg(
                main_particle.pdg_code
            )
            self.write_example(features, is_track)

            return is_track

        if not self.enable_probability:
            return self.classifier.classify(features)

        score = self.classifier.calculate_probability(features)

        return score > self.min_probability_cut

    @staticmethod
    def _as_features(features):
        """Casts a feature vector to an array, missing features become NaN."""
        return np.array(
            [np.nan if f is None else f for f in features], dtype=np.float64
        )

    def _fallback(self, candidate):
        """Decides on a candidate from its particle hypothesis alone.

        Parameters
        ----------
        candidate : RecoCandidate
            Reconstructed candidate

        Returns
        -------
        bool
            `True` if the candidate was reconstructed as a muon
        """
        if self.enable_probability:
            candidate.track_score = -1.0

        return candidate.pdg_code == MUON_PDG
