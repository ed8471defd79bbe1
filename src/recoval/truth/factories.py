"""Fetch a selection criterion from its name."""

from recoval.utils.factory import fetch, module_dict

from . import criteria

# Criteria are registered with and without their `is_` prefix
CRITERIA_DICT = module_dict(criteria, prefix="is_")


def criteria_factory(name):
    """Fetches a selection criterion from its name.

    Criteria can be referred to with or without their `is_` prefix, e.g.
    `beam_neutrino_final_state` or `is_beam_neutrino_final_state`.

    Parameters
    ----------
    name : Union[str, callable]
        Name of the criterion. If a callable is provided, it is returned as is.

    Returns
    -------
    callable
        Function of (particle, hierarchy) which returns a boolean
    """
    if callable(name):
        return name

    return fetch(CRITERIA_DICT, name, "selection criterion")
