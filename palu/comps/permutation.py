import numpy as np


def check_permutation(perm, m):
    """
    Return perm as an int ndarray, after verifying that it is a
    permutation of range(m).
    """
    perm = np.asarray(perm)
    if perm.ndim != 1 or perm.size != m:
        raise ValueError(f'Expected a pivot vector of length {m}, got shape {perm.shape}.')
    if perm.size > 0 and not np.issubdtype(perm.dtype, np.integer):
        raise ValueError(f'Pivot vectors must have integer dtype, not {perm.dtype}.')
    perm = perm.astype(np.intp, copy=False)
    seen = np.zeros(m, dtype=bool)
    in_range = np.logical_and(perm >= 0, perm < m)
    if not np.all(in_range):
        raise ValueError('Pivot vector has entries outside of [0, m).')
    seen[perm] = True
    if not np.all(seen):
        raise ValueError('Pivot vector is not a permutation: it has repeated entries.')
    return perm


def permutation_sign(perm):
    """
    Return the sign (+1 or -1) of the permutation "perm".

    A permutation that decomposes into cycles of lengths c_1, ..., c_r can
    be written as sum_i (c_i - 1) transpositions, so its parity is the
    parity of len(perm) - r. Counting indices with perm[i] != i does NOT
    give the parity in general; e.g., [1, 2, 0] moves three indices but
    is an even permutation.
    """
    perm = np.asarray(perm)
    m = perm.size
    visited = np.zeros(m, dtype=bool)
    num_cycles = 0
    for start in range(m):
        if visited[start]:
            continue
        num_cycles += 1
        i = start
        while not visited[i]:
            visited[i] = True
            i = perm[i]
    return 1 if (m - num_cycles) % 2 == 0 else -1


def swaps_to_permutation(ipiv, m):
    """
    Convert a LAPACK-style sequence of row interchanges into a permutation.

    Row i was interchanged with row ipiv[i] (0-based) at step i, for
    i = 0, ..., ipiv.size - 1. Return (perm, num_swaps) where
    A[perm, :] is the row-permuted matrix and num_swaps counts the steps
    with ipiv[i] != i.
    """
    perm = np.arange(m)
    num_swaps = 0
    for i, p in enumerate(ipiv):
        if p != i:
            perm[i], perm[p] = perm[p], perm[i]
            num_swaps += 1
    return perm, num_swaps


def permutation_matrix(perm):
    """Return the matrix P with P[i, perm[i]] = 1, so that P @ A == A[perm, :]."""
    perm = np.asarray(perm)
    m = perm.size
    P = np.zeros((m, m))
    P[np.arange(m), perm] = 1.0
    return P
