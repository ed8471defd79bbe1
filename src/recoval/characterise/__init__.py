"""Track/shower characterisation of reconstructed candidates.

Main Entry Points
-----------------
TrackShowerCharacteriser : Decide whether candidates are clear tracks
derive_track_label : Derive the true label of a candidate
classifier_factory : Build a classifier from its configuration
"""

from .characteriser import TrackShowerCharacteriser
from .factories import classifier_factory
from .label import TrackLabel, derive_track_label
from .mva import BoostedDecisionTree, MvaBase, SupportVectorMachine

__all__ = [
    "TrackShowerCharacteriser",
    "classifier_factory",
    "TrackLabel",
    "derive_track_label",
    "MvaBase",
    "BoostedDecisionTree",
    "SupportVectorMachine",
]
