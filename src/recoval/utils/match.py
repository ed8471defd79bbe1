"""Functions to count the overlaps between sets of hit indexes.

Index sets are represented as sorted, unique `np.int64` arrays. Lists of
such sets are packed into a flat index array and an offset array (CSR
layout) before being handed to the numba kernels.
"""

import numba as nb
import numpy as np

__all__ = ["pack_index", "overlap_count", "intersection_size", "shared_index"]


def pack_index(index_list):
    """Packs a list of index arrays into a flat array and offsets.

    Parameters
    ----------
    index_list : List[np.ndarray]
        (N) List of sorted, unique index arrays

    Returns
    -------
    index : np.ndarray
        (M) Concatenated indexes
    offsets : np.ndarray
        (N + 1) Boundaries of each index set in the concatenated array
    """
    offsets = np.zeros(len(index_list) + 1, dtype=np.int64)
    if len(index_list) == 0:
        return np.empty(0, dtype=np.int64), offsets

    offsets[1:] = np.cumsum([len(index) for index in index_list])
    index = np.concatenate(
        [np.asarray(index, dtype=np.int64) for index in index_list]
    ).astype(np.int64)

    return index, offsets


@nb.njit(cache=True)
def intersection_size(index_x: nb.int64[:], index_y: nb.int64[:]) -> nb.int64:
    """Counts the number of elements shared by two sorted index sets.

    Parameters
    ----------
    index_x : np.ndarray
        (N) Sorted, unique indexes
    index_y : np.ndarray
        (M) Sorted, unique indexes

    Returns
    -------
    int
        Number of shared indexes
    """
    i, j, count = 0, 0, 0
    while i < len(index_x) and j < len(index_y):
        if index_x[i] < index_y[j]:
            i += 1
        elif index_x[i] > index_y[j]:
            j += 1
        else:
            count += 1
            i += 1
            j += 1

    return count


@nb.njit(cache=True, parallel=True)
def overlap_count(
    index_x: nb.int64[:],
    offsets_x: nb.int64[:],
    index_y: nb.int64[:],
    offsets_y: nb.int64[:],
) -> nb.int64[:, :]:
    """Computes a set overlap matrix by overlap count.

    Parameters
    ----------
    index_x : np.ndarray
        Packed indexes of the (N) objects to match
    offsets_x : np.ndarray
        (N + 1) Offsets of each object in `index_x`
    index_y : np.ndarray
        Packed indexes of the (M) objects to be matched to
    offsets_y : np.ndarray
        (M + 1) Offsets of each object in `index_y`

    Returns
    -------
    np.ndarray
        (N, M) Overlap count matrix
    """
    num_x, num_y = len(offsets_x) - 1, len(offsets_y) - 1
    overlap_matrix = np.zeros((num_x, num_y), dtype=np.int64)
    for i in nb.prange(num_x):
        px = index_x[offsets_x[i] : offsets_x[i + 1]]
        if len(px):
            for j in range(num_y):
                py = index_y[offsets_y[j] : offsets_y[j + 1]]
                if len(py):
                    if px[-1] < py[0] or py[-1] < px[0]:
                        continue
                    overlap_matrix[i, j] = intersection_size(px, py)

    return overlap_matrix


def shared_index(index_x, index_y):
    """Returns the indexes shared by two sorted, unique index sets.

    Parameters
    ----------
    index_x : np.ndarray
        (N) Sorted, unique indexes
    index_y : np.ndarray
        (M) Sorted, unique indexes

    Returns
    -------
    np.ndarray
        Sorted shared indexes
    """
    return np.intersect1d(index_x, index_y, assume_unique=True).astype(np.int64)
