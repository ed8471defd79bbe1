"""Module with a parent class of all data structures."""

from dataclasses import asdict, dataclass

import numpy as np


@dataclass(eq=False)
class DataBase:
    """Base class of all data structures.

    Defines basic methods shared by all data structures.
    """

    # Fixed-length attributes as (key, size) or (key, (size, dtype)) pairs
    _fixed_length_attrs = ()

    # Variable-length attributes as (key, dtype) pairs
    _var_length_attrs = ()

    # Attributes that must never be stored to file
    _skip_attrs = ()

    def __post_init__(self):
        """Immediately called after building the class attributes.

        Gives default values to array-like attributes and casts the provided
        ones to the expected type. If a default value was provided in the
        attribute definition, all instances of this class would point to the
        same memory location.
        """
        # Provide default values to the variable-length array attributes
        for attr, dtype in self._var_length_attrs:
            if getattr(self, attr) is None:
                setattr(self, attr, np.empty(0, dtype=dtype))
            else:
                setattr(self, attr, np.asarray(getattr(self, attr), dtype=dtype))

        # Provide default values to the fixed-length array attributes
        for attr, size in self._fixed_length_attrs:
            if not isinstance(size, tuple):
                dtype = np.float32
            else:
                size, dtype = size
            if getattr(self, attr) is None:
                setattr(self, attr, np.full(size, -np.inf, dtype=dtype))
            else:
                value = np.asarray(getattr(self, attr), dtype=dtype)
                assert value.shape == (size,), (
                    f"`{attr}` must be of length {size}, got shape {value.shape}."
                )
                setattr(self, attr, value)

    def __eq__(self, other):
        """Checks that all attributes of two class instances are the same.

        This overloads the default dataclass `__eq__` method to include an
        appopriate check for vector (numpy) attributes.

        Parameters
        ----------
        other : obj
            Other instance of the same object class

        Returns
        -------
        bool
            `True` if all attributes of both objects are identical
        """
        # Check that the two objects belong to the same class
        if self.__class__ != other.__class__:
            return False

        # Check that all base attributes are identical
        for k, v in self.__dict__.items():
            if np.isscalar(v) or v is None:
                # For scalars, regular comparison will do
                if getattr(other, k) != v:
                    return False

            else:
                # For vectors, compare all elements
                v_other = getattr(other, k)
                if v.shape != v_other.shape or (v_other != v).any():
                    return False

        return True

    __hash__ = object.__hash__

    def as_dict(self):
        """Returns the data class as dictionary of (key, value) pairs.

        Returns
        -------
        dict
            Dictionary of attribute names and their values
        """
        return {k: v for k, v in asdict(self).items() if k not in self._skip_attrs}
