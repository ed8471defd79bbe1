"""Data structures consumed and produced by the truth-matching engine.

- :class:`MCParticle`: simulated particle, linked to its relatives by index
- :class:`CaloHit`: detector hit with its particle contributions
- :class:`RecoCandidate`: reconstructed candidate with per-view hit indexes
- :class:`ContributionMap`: object index -> attributed hit indexes
- :class:`HitSharingRecord`/:class:`HitSharingMap`: candidate/target overlaps
"""

from .candidate import RecoCandidate
from .hit import CaloHit
from .particle import MCParticle
from .truth import ContributionMap, HitSharingMap, HitSharingRecord
