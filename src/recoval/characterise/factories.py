"""Construct a track/shower classifier from its configuration."""

from recoval.utils.factory import instantiate, module_dict

from . import mva

# Build a dictionary of available classifiers
CLASSIFIER_DICT = module_dict(mva)


def classifier_factory(cfg):
    """Instantiates a track/shower classifier from a configuration dictionary.

    Parameters
    ----------
    cfg : Union[str, dict]
        Name of the classifier or classifier configuration

    Returns
    -------
    MvaBase
        Instantiated classifier
    """
    return instantiate(CLASSIFIER_DICT, cfg, "classifier")
