"""Loads the YAML configuration of the truth-matching and characterisation
tools.

A configuration file may be assembled from several files:

- `include: base.yaml` (or a list of files) merges other files underneath
  the current one, in order;
- `key: !include block.yaml` inserts the content of a file as a block;
- dotted keys such as `truth_match.parameters.min_primary_good_hits: 10`
  override a single nested value once all the includes are merged.

Included paths are resolved relative to the including file.
"""

import os
import re
from copy import deepcopy

import yaml

from .errors import ConfigCycleError, ConfigIncludeError, ConfigValidationError

__all__ = ["load_config", "load_config_file"]

# Keys which address a nested value, e.g. `truth_match.parameters.x`
DOTTED_KEY = re.compile(r"^\w+(\.\w+)+$")


class ConfigLoader(yaml.SafeLoader):
    """YAML loader which resolves the `!include` tag.

    The loader keeps track of the chain of files being loaded so that
    circular includes are reported rather than followed.
    """

    def __init__(self, stream, root_dir, include_stack=()):
        """Initialize the loader.

        Parameters
        ----------
        stream : Union[str, _io.TextIOWrapper]
            YAML string or open configuration file
        root_dir : str
            Directory in which to look for included files
        include_stack : Tuple[str], optional
            Files currently being loaded, outermost first
        """
        self.root_dir = root_dir
        self.include_stack = tuple(include_stack)
        super().__init__(stream)

    def include(self, node):
        """Loads the file named by an `!include` node.

        Parameters
        ----------
        node : yaml.Node
            Scalar node which holds the relative path of the file

        Returns
        -------
        object
            Resolved content of the included file
        """
        path = os.path.join(self.root_dir, self.construct_scalar(node))

        return _load_path(path, self.include_stack)


ConfigLoader.add_constructor("!include", ConfigLoader.include)


def _parse(stream, root_dir, include_stack):
    """Parses a YAML stream with the include-aware loader."""
    loader = ConfigLoader(stream, root_dir, include_stack)
    try:
        return loader.get_single_data()
    finally:
        loader.dispose()


def _load_path(path, include_stack):
    """Loads a configuration file, following its includes.

    Parameters
    ----------
    path : str
        Path to the file
    include_stack : Tuple[str]
        Files currently being loaded, outermost first

    Returns
    -------
    dict
        Resolved configuration
    """
    path = os.path.abspath(path)
    if path in include_stack:
        raise ConfigCycleError(list(include_stack) + [path])
    if not os.path.isfile(path):
        raise ConfigIncludeError(f"Configuration file not found: {path}")

    include_stack = tuple(include_stack) + (path,)
    root_dir = os.path.dirname(path)
    with open(path, "r", encoding="utf-8") as f:
        raw = _parse(f, root_dir, include_stack)

    return _resolve(raw, root_dir, include_stack)


def _merge(base, update):
    """Merges two configuration blocks, `update` taking precedence.

    Parameters
    ----------
    base : dict
        Base block (left untouched)
    update : dict
        Block whose values take precedence

    Returns
    -------
    dict
        Merged block
    """
    merged = deepcopy(base)
    for key, value in update.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value

    return merged


def _override(config, key_path, value):
    """Sets the nested value addressed by a dotted key in place.

    Parameters
    ----------
    config : dict
        Configuration to modify
    key_path : str
        Dotted path to the value
    value : object
        New value
    """
    *parents, leaf = key_path.split(".")
    block = config
    for key in parents:
        block = block.setdefault(key, {})
        if not isinstance(block, dict):
            raise ConfigValidationError(
                f"Cannot override `{key_path}`: `{key}` is not a block."
            )
    block[leaf] = value


def _resolve(raw, root_dir, include_stack):
    """Applies the top-level includes and the dotted overrides of a
    configuration.

    Parameters
    ----------
    raw : dict
        Configuration as parsed from YAML
    root_dir : str
        Directory in which to look for included files
    include_stack : Tuple[str]
        Files currently being loaded, outermost first

    Returns
    -------
    dict
        Resolved configuration
    """
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        return raw

    includes = raw.get("include", [])
    if isinstance(includes, str):
        includes = [includes]
    elif not isinstance(includes, list):
        raise ConfigIncludeError(
            "`include` must be a file name or a list of file names, "
            f"got {type(includes).__name__}."
        )

    config = {}
    for name in includes:
        included = _load_path(os.path.join(root_dir, name), include_stack)
        config = _merge(config, included)

    overrides = {}
    body = {}
    for key, value in raw.items():
        if key == "include":
            continue
        if isinstance(key, str) and DOTTED_KEY.match(key):
            overrides[key] = value
        else:
            body[key] = value

    config = _merge(config, body)
    for key_path, value in overrides.items():
        _override(config, key_path, value)

    return config


def load_config(config_string, root_dir=None):
    """Loads a configuration from a YAML string.

    Parameters
    ----------
    config_string : str
        YAML configuration string
    root_dir : str, optional
        Directory in which to resolve included files (defaults to the
        current working directory)

    Returns
    -------
    dict
        Resolved configuration
    """
    root_dir = os.path.abspath(root_dir if root_dir is not None else os.getcwd())
    raw = _parse(config_string, root_dir, ())

    return _resolve(raw, root_dir, ())


def load_config_file(cfg_path):
    """Loads a configuration file.

    Parameters
    ----------
    cfg_path : str
        Path to the configuration file

    Returns
    -------
    dict
        Resolved configuration
    """
    return _load_path(cfg_path, ())
