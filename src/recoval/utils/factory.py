"""Name-based lookup of the configurable components of the package.

Selection criteria and classifiers are referred to by name in configuration
blocks. The helpers below register the public objects of a module under
their names and build them from a YAML block.
"""

from copy import deepcopy
from warnings import warn

from .logger import logger

__all__ = ["module_dict", "fetch", "instantiate"]


def module_dict(module, prefix=None):
    """Maps the names of the public objects of a module onto the objects.

    An object is registered under its attribute name and, if it defines one,
    under its short `name`. Deprecated `aliases` are registered too.

    Parameters
    ----------
    module : module
        Module from which to fetch the objects (restricted to `__all__`)
    prefix : str, optional
        If specified, objects whose name starts with it are also registered
        without it (e.g. `is_cosmic_ray` as `cosmic_ray`)

    Returns
    -------
    dict
        Dictionary which maps acceptable names to objects
    """
    names = {}
    for obj_name in module.__all__:
        obj = getattr(module, obj_name)
        names[obj_name] = obj
        if prefix is not None and obj_name.startswith(prefix):
            names[obj_name[len(prefix) :]] = obj

        short_name = getattr(obj, "name", None)
        if isinstance(short_name, str) and len(short_name):
            names[short_name] = obj

        for alias in getattr(obj, "aliases", ()):
            names[alias] = obj

    return names


def fetch(module_dict, name, kind="object"):
    """Fetches an object from its name.

    Parameters
    ----------
    module_dict : dict
        Dictionary which maps names to objects
    name : str
        Name of the object
    kind : str, default 'object'
        Kind of object, used in error messages

    Returns
    -------
    object
        Registered object
    """
    if name not in module_dict:
        raise ValueError(
            f"{kind.capitalize()} not recognized: {name}. Must be one of "
            f"{list(module_dict.keys())}."
        )

    obj = module_dict[name]
    if name in getattr(obj, "aliases", ()):
        warn(
            f"This name ({name}) is deprecated. Use {obj.name} instead.",
            DeprecationWarning,
        )

    return obj


def instantiate(module_dict, cfg, kind="object", **kwargs):
    """Builds an object from a configuration block.

    The block can be a bare name or a dictionary which provides the name
    under `name` and the keyword arguments either at the top level or under
    `kwargs`:

    .. code-block:: yaml

        classifier:
          name: bdt
          n_estimators: 200

    Parameters
    ----------
    module_dict : dict
        Dictionary which maps names to classes
    cfg : Union[str, dict]
        Name of the class or configuration block
    kind : str, default 'object'
        Kind of object, used in error messages
    **kwargs : dict, optional
        Additional keyword arguments to pass to the class

    Returns
    -------
    object
        Instantiated object
    """
    config = {"name": cfg} if isinstance(cfg, str) else deepcopy(cfg)
    assert "name" in config, f"Could not find the name of the {kind} under `name`."

    cls = fetch(module_dict, config.pop("name"), kind)

    # Keyword arguments may be provided at the top level or under `kwargs`
    cls_kwargs = dict(config.pop("kwargs", {}), **kwargs)
    for key in config:
        assert key not in cls_kwargs, (
            f"The keyword argument {key} is provided "
            "at the top level and under `kwargs`. Ambiguous."
        )
    cls_kwargs.update(config)

    try:
        return cls(**cls_kwargs)

    except TypeError:
        logger.error(
            "Failed to instantiate %s with these arguments: %s",
            cls.__name__,
            cls_kwargs,
        )
        raise
