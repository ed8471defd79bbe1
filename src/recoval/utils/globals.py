"""Constants shared across the project."""

# Invalid identifier
INVAL_ID = -1

# Detector views, as stored in the hit `view` attribute
VIEW_U = 0
VIEW_V = 1
VIEW_W = 2
VIEW_3D = 3

# Two-dimensional readout views
VIEWS_2D = (VIEW_U, VIEW_V, VIEW_W)

# PDG codes
PHOTON_PDG = 22
ELECTRON_PDG = 11
MUON_PDG = 13
PION_PDG = 211
KAON_PDG = 321
PROTON_PDG = 2212
NEUTRON_PDG = 2112
SIGMA_MINUS_PDG = 3112
SIGMA_PLUS_PDG = 3222
HYPERON_MINUS_PDG = 3312

# Absolute PDG codes of neutrinos
NEUTRINO_PDGS = (12, 14, 16)

# Absolute PDG codes of long-lived particles which leave visible depositions
VISIBLE_PDGS = (
    ELECTRON_PDG,
    MUON_PDG,
    PHOTON_PDG,
    PION_PDG,
    KAON_PDG,
    PROTON_PDG,
    SIGMA_MINUS_PDG,
    SIGMA_PLUS_PDG,
    HYPERON_MINUS_PDG,
)

# Absolute PDG codes of particles which produce shower-like depositions
SHOWER_PDGS = (ELECTRON_PDG, PHOTON_PDG)

# Interaction (nuance) codes of non-neutrino sources
NUANCE_UNKNOWN = 0
NUANCE_BEAM_PARTICLE = 2000
NUANCE_TEST_BEAM_PARTICLE = 2001
NUANCE_COSMIC_RAY = 3000

BEAM_NUANCES = (NUANCE_BEAM_PARTICLE, NUANCE_TEST_BEAM_PARTICLE)
