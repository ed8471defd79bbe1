"""Top-level module of the reconstruction validation toolkit."""

from .version import __version__

# Import main workflow entry points
from .truth import TruthMatchManager, select_reconstructable_particles
from .config import PrimaryParameters, load_config_file

# Import commonly used data structures
from .data import CaloHit, MCParticle, RecoCandidate
