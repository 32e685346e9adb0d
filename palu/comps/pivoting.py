import time
import warnings
import numpy as np
import scipy.linalg as la
from palu.dense import DenseMatrix, from_array
from palu.comps.lu import LU
from palu.comps.logging import FactorLog
from palu.comps.permutation import swaps_to_permutation
from palu.utils.errors import DimensionMismatchError
import palu.utils.misc as misc


class LUFactorizer:
    """Factor general m-by-n matrices as A[piv, :] = L @ U by partial pivoting."""

    TEMPLATE_DOC_STR = \
    """
    Compute the LU decomposition with partial pivoting of an m-by-n matrix A.
    %s
    Parameters
    ----------
    A : Union[DenseMatrix, ndarray]
        Real matrix to factor; m >= 1 and n >= 1. Rectangular matrices in
        either orientation are accepted. A is left untouched unless this
        factorizer was created with overwrite_a=True.

    logging : bool
        If True, record the time spent on each phase of the factorization.

    Returns
    -------
    lu : LU
        The decomposition. Factoring never fails because of singularity;
        if some pivot is (numerically) zero then lu.is_singular() is True
        and a LinAlgWarning is raised.

    log : FactorLog
        Pivoting information, and runtime information if logging=True.
    %s
    """

    INTERFACE_FIELDS = ("", "")

    DOC_STR = TEMPLATE_DOC_STR % INTERFACE_FIELDS

    def __init__(self, zero_tol=0.0, overwrite_a=False, check_finite=True):
        """
        Parameters
        ----------
        zero_tol : float
            A pivot p is treated as zero when abs(p) <= zero_tol. The default
            only treats exact zeros as zero pivots.

        overwrite_a : bool
            Allow the factorizer to use the input's storage as its workspace.

        check_finite : bool
            Reject inputs that contain infs or NaNs.
        """
        if not zero_tol >= 0:
            raise ValueError(f'zero_tol must be nonnegative, not {zero_tol}.')
        self.zero_tol = zero_tol
        self.overwrite_a = overwrite_a
        self.check_finite = check_finite

    @misc.set_docstring(DOC_STR)
    def __call__(self, A, logging=False):
        raise NotImplementedError()


def dim_checks(A):
    if isinstance(A, DenseMatrix):
        shape = A.shape
    else:
        shape = np.shape(A)
    if len(shape) != 2:
        raise DimensionMismatchError(f'Expected a 2-D matrix, got shape {shape}.')
    if shape[0] < 1 or shape[1] < 1:
        raise DimensionMismatchError(f'Cannot factor an empty matrix of shape {shape}.')
    return shape


def value_checks(arr, check_finite):
    if np.iscomplexobj(arr):
        raise ValueError('Complex matrices are not supported.')
    if check_finite and not np.all(np.isfinite(arr)):
        raise ValueError('array must not contain infs or NaNs')
    pass


def warn_if_singular(zero_pivots, zero_tol):
    if len(zero_pivots) > 0:
        j = zero_pivots[0]
        if zero_tol == 0:
            msg = f'Diagonal number {j} is exactly zero. Singular matrix.'
        else:
            msg = f'Diagonal number {j} is at most {zero_tol} in absolute value. Singular matrix.'
        warnings.warn(msg, la.LinAlgWarning, stacklevel=3)
    pass


class LU1(LUFactorizer):
    """
    Gaussian elimination with partial pivoting, written in the outer-product
    form. At step j, the row with the largest absolute value in column j
    (on or below the diagonal; the first such row in case of ties) is
    swapped into position j. The entries below the pivot are then scaled
    into multipliers and a rank-one update is applied to the trailing
    submatrix.

    The pivot sign is tracked by counting the row interchanges as they
    happen. Columns with a zero pivot are skipped (no update is applied),
    so a packed factorization is available even for singular matrices.
    """

    INTERFACE_FIELDS = (
    """
    This implementation runs the elimination in Python over a DenseMatrix,
    one rank-one update of the trailing submatrix per column.
    """,
    ""
    )

    CALL_DOC = LUFactorizer.TEMPLATE_DOC_STR % INTERFACE_FIELDS

    @misc.set_docstring(CALL_DOC)
    def __call__(self, A, logging=False):
        m, n = dim_checks(A)
        log = FactorLog()
        quick_time = time.time if logging else lambda: 0

        arr = A.to_ndarray() if isinstance(A, DenseMatrix) else np.asarray(A)
        value_checks(arr, self.check_finite)

        tic = quick_time()
        W = from_array(A, copy=not self.overwrite_a)
        log.time_copy = quick_time() - tic

        tic = quick_time()
        piv = np.arange(m)
        pivsign = 1
        num_swaps = 0
        zero_pivots = []
        for j in range(min(m, n)):
            # Find pivot and exchange if necessary
            p = j + int(np.argmax(np.abs(W.get(slice(j, m), j))))
            if p != j:
                W.swap_rows(p, j)
                piv[p], piv[j] = piv[j], piv[p]
                pivsign = -pivsign
                num_swaps += 1
            pivot = W.get(j, j)
            if abs(pivot) <= self.zero_tol:
                zero_pivots.append(j)
                continue
            # Compute multipliers and eliminate j-th column
            below = slice(j + 1, m)
            right = slice(j + 1, n)
            W.div(below, j, pivot)
            if j + 1 < n:
                W.sub(below, right, np.outer(W.get(below, j), W.get(j, right)))
        log.time_factor = quick_time() - tic

        log.wrap_up(num_swaps, zero_pivots)
        warn_if_singular(zero_pivots, self.zero_tol)
        return LU(W, piv, log.singular, pivsign), log


class LU2(LUFactorizer):
    """
    LU decomposition with partial pivoting by LAPACK's getrf, called
    through scipy.linalg.get_lapack_funcs. This is the routine behind
    scipy.linalg.lu_factor, called directly so that rectangular matrices
    are handled the same way on every scipy version.

    LAPACK reports the pivoting as a sequence of row interchanges
    (row i was swapped with row ipiv[i] at step i). That sequence is
    converted into a permutation vector, and the pivot sign is the parity
    of the number of actual interchanges.
    """

    INTERFACE_FIELDS = (
    """
    This implementation uses (possibly blocked) LAPACK routines. It is
    much faster than LU1 for all but tiny matrices.
    """,
    """
    Notes
    -----
    FactorLog.time_copy is always zero here: any copy of A is made inside
    the LAPACK wrapper and is counted in FactorLog.time_factor.
    """
    )

    CALL_DOC = LUFactorizer.TEMPLATE_DOC_STR % INTERFACE_FIELDS

    @misc.set_docstring(CALL_DOC)
    def __call__(self, A, logging=False):
        m, n = dim_checks(A)
        log = FactorLog()
        quick_time = time.time if logging else lambda: 0

        arr = A.to_ndarray() if isinstance(A, DenseMatrix) else np.asarray(A)
        value_checks(arr, self.check_finite)

        tic = quick_time()
        arr = np.asarray(arr, dtype=np.float64)
        getrf, = la.get_lapack_funcs(('getrf',), (arr,))
        packed, ipiv, info = getrf(arr, overwrite_a=self.overwrite_a)
        if info < 0:
            raise ValueError(f'illegal value in {-info}-th argument of internal getrf')
        # info > 0 flags an exactly zero pivot; zero_tol decides below.
        log.time_factor = quick_time() - tic

        piv, num_swaps = swaps_to_permutation(ipiv, m)
        pivsign = -1 if num_swaps % 2 else 1
        diag = np.abs(np.diag(packed))
        zero_pivots = np.flatnonzero(diag <= self.zero_tol).tolist()
        log.wrap_up(num_swaps, zero_pivots)
        warn_if_singular(zero_pivots, self.zero_tol)
        packed = from_array(np.asarray(packed, dtype=np.float64))
        return LU(packed, piv, log.singular, pivsign), log
