"""
One-call routines built on LU decompositions with partial pivoting.

Each routine factors its input once. Callers who need several solves with
the same matrix should call factorize(A) once and reuse the returned LU
object instead.
"""
import numpy as np
from palu.dense import DenseMatrix
from palu.comps.pivoting import LU1, LU2


def _factorizer(zero_tol, overwrite_a, check_finite, lapack):
    if lapack:
        return LU2(zero_tol, overwrite_a, check_finite)
    return LU1(zero_tol, overwrite_a, check_finite)


def factorize(A, zero_tol=0.0, overwrite_a=False, check_finite=True, lapack=False):
    """
    Return the LU decomposition with partial pivoting of A.

    Parameters
    ----------
    A : Union[DenseMatrix, ndarray]
        m-by-n matrix to factor, with m >= 1 and n >= 1.

    zero_tol : float
        Pivots p with abs(p) <= zero_tol mark the matrix as singular.

    overwrite_a : bool
        Allow the factorization to use A's storage as its workspace.

    check_finite : bool
        Reject matrices that contain infs or NaNs.

    lapack : bool
        Use LAPACK's getrf (LU2) instead of the elimination in LU1.

    Returns
    -------
    lu : LU
    """
    alg = _factorizer(zero_tol, overwrite_a, check_finite, lapack)
    lu, _ = alg(A, logging=False)
    return lu


def solve(A, b, check_finite=True, lapack=False):
    """
    Return the solution of A @ x = b for square, nonsingular A.
    b may be a vector (1-D) or have several columns (2-D). b is not modified.
    """
    lu = factorize(A, check_finite=check_finite, lapack=lapack)
    if isinstance(b, DenseMatrix) or np.ndim(b) == 2:
        return lu.solve(b, None).to_ndarray()
    x = np.array(b, dtype=np.float64)
    return lu.solve(x)


def det(A, check_finite=True, lapack=False):
    """Return the determinant of the square matrix A."""
    return factorize(A, check_finite=check_finite, lapack=lapack).det()


def inv(A, check_finite=True, lapack=False):
    """Return the inverse of the square, nonsingular matrix A, as an ndarray."""
    return factorize(A, check_finite=check_finite, lapack=lapack).inverse().to_ndarray()
