import numpy as np
from palu.dense import DenseMatrix, Layout, zeros, from_array
from palu.comps.permutation import check_permutation, permutation_sign
from palu.utils.errors import DimensionMismatchError, AliasingError, \
    SingularMatrixError, not_square_msg


class LU:
    """
    For an m-by-n matrix A, the LU decomposition with partial pivoting is
    a unit lower triangular matrix L, an upper triangular matrix U, and a
    permutation vector piv of length m, so that A[piv, :] = L @ U. With
    k = min(m, n), L is m-by-k and U is k-by-n.

    The decomposition always exists, even if A is singular. Its primary
    use is solving square systems of linear equations when A is
    nonsingular. It can also be used to compute the determinant and the
    inverse of a square matrix.

    L and U are kept in a single m-by-n packed matrix: entries strictly
    below the diagonal are the multipliers of L (whose unit diagonal is not
    stored), and entries on and above the diagonal are U. Objects of this
    class never write to the packed matrix, so one LU object can serve
    any number of solves.

    Parameters
    ----------
    lu : Union[DenseMatrix, ndarray]
        Packed LU matrix. Ownership passes to the new object; callers
        should not modify it afterwards.

    piv : array_like
        Pivot vector; a permutation of range(m).

    singular : bool
        True if some pivot was numerically zero during elimination.

    pivsign : Union[None, int]
        +1 if an even number of row interchanges was performed, -1 if odd.
        If None, it is the parity of the permutation piv (computed from
        its cycle decomposition).
    """

    def __init__(self, lu, piv, singular, pivsign=None):
        lu = from_array(lu)
        piv = check_permutation(piv, lu.n_rows).copy()
        piv.setflags(write=False)
        if pivsign is None:
            pivsign = permutation_sign(piv)
        elif pivsign not in (1, -1):
            raise ValueError(f'pivsign must be +1 or -1, not {pivsign}.')
        self._lu = lu
        self._piv = piv
        self._pivsign = int(pivsign)
        self._singular = bool(singular)

    @property
    def shape(self):
        return self._lu.shape

    @property
    def pivsign(self):
        return self._pivsign

    def is_singular(self):
        """Return True if the factored matrix is singular."""
        return self._singular

    def packed(self):
        """Return a copy of the packed LU matrix."""
        return self._lu.copy()

    def pivot(self):
        """Return the (read-only) pivot permutation vector."""
        return self._piv

    def lower_factor(self, layout=Layout.ColMajor):
        """Return the m-by-min(m, n) unit lower triangular factor L."""
        m, n = self.shape
        k = min(m, n)
        L = zeros(m, k, layout)
        for i in range(m):
            if i < k:
                L.set(i, i, 1.0)
            stop = min(i, k)
            L.set(i, slice(0, stop), self._lu.get(i, slice(0, stop)))
        return L

    def upper_factor(self, layout=Layout.ColMajor):
        """Return the min(m, n)-by-n upper triangular factor U."""
        m, n = self.shape
        k = min(m, n)
        U = zeros(k, n, layout)
        for i in range(k):
            U.set(i, slice(i, n), self._lu.get(i, slice(i, n)))
        return U

    def det(self):
        """Return the determinant of the (square) factored matrix."""
        self._check_square()
        d = float(self._pivsign)
        for j in range(self.shape[1]):
            d *= self._lu.get(j, j)
        return d

    def inverse(self, layout=Layout.ColMajor):
        """
        Return the inverse of the (square) factored matrix. For a pseudo
        inverse, use a rank-revealing factorization instead.

        Raises
        ------
        DimensionMismatchError
            If the factored matrix is not square.

        SingularMatrixError
            If the factored matrix is singular.
        """
        self._check_square()
        self._check_nonsingular()
        n = self.shape[0]
        inv = zeros(n, n, layout)
        # Right-hand side P @ I, already reordered by the pivots.
        for i in range(n):
            inv.set(i, self._piv[i], 1.0)
        self._substitute(inv)
        return inv

    def solve(self, b, x=None):
        """
        Solve A @ x = b, or A @ X = B for a matrix right-hand side.

        Vector right-hand sides (1-D ndarrays):
            solve(b) overwrites b with the solution and returns b.
            solve(b, x) writes the solution into x and returns x.

        Matrix right-hand sides (DenseMatrix or 2-D ndarray):
            solve(B, X) writes the solution into X and returns X. X must
            not be B and must not share memory with B. If X is None, a new
            column-major DenseMatrix is allocated and returned.

        All dimension, aliasing and singularity checks happen before any
        output is written.

        Raises
        ------
        DimensionMismatchError
            If the factored matrix is not square, or the shapes of b and x
            don't agree with it.

        AliasingError
            If a matrix right-hand side and its output are the same object.

        SingularMatrixError
            If the factored matrix is singular.
        """
        if isinstance(b, DenseMatrix) or np.ndim(b) == 2:
            return self._solve_matrix(b, x)
        if x is None:
            self._check_writable(b)
            self._solve_vector(b, b)
            return b
        self._check_writable(x)
        self._solve_vector(np.asarray(b, dtype=np.float64), x)
        return x

    def _solve_vector(self, b, x):
        m, n = self.shape
        self._check_square()
        if b.ndim != 1 or b.size != m:
            msg = f'Row dimensions do not agree: A is {m} x {n}, but b has shape {b.shape}.'
            raise DimensionMismatchError(msg)
        if x.shape != b.shape:
            raise DimensionMismatchError(f'b and x dimensions do not agree: {b.shape} vs {x.shape}.')
        self._check_nonsingular()

        lu = self._lu
        # b[piv] is a copy, so x may alias b.
        x[:] = b[self._piv]
        # Solve L @ y = b[piv]
        for k in range(n):
            x[k + 1:n] -= x[k] * lu.get(slice(k + 1, n), k)
        # Solve U @ x = y
        for k in range(n - 1, -1, -1):
            x[k] /= lu.get(k, k)
            x[:k] -= x[k] * lu.get(slice(0, k), k)
        pass

    def _solve_matrix(self, B, X):
        m, n = self.shape
        self._check_square()
        if X is B:
            raise AliasingError('B and X should not be the same object.')
        B_mat = from_array(B)
        X_arr = None
        if X is None:
            X_mat = zeros(B_mat.n_rows, B_mat.n_cols)
        elif isinstance(X, DenseMatrix):
            X_mat = X
        else:
            self._check_writable(X)
            X_arr = X
            X_mat = from_array(X)
        if X_mat.shares_memory(B_mat) or (X_arr is not None and np.may_share_memory(X_arr, B_mat.buff)):
            raise AliasingError('B and X should not share memory.')
        if X_mat.shape != B_mat.shape:
            raise DimensionMismatchError(f'B and X dimensions do not agree: {B_mat.shape} vs {X_mat.shape}.')
        if B_mat.n_rows != m:
            msg = f'Row dimensions do not agree: A is {m} x {n}, but B is {B_mat.n_rows} x {B_mat.n_cols}.'
            raise DimensionMismatchError(msg)
        self._check_nonsingular()

        # Copy the right-hand side with pivoting
        all_cols = slice(None)
        for i in range(m):
            X_mat.set(i, all_cols, B_mat.get(self._piv[i], all_cols))
        self._substitute(X_mat)
        if X_arr is not None and not np.may_share_memory(X_arr, X_mat.buff):
            np.copyto(X_arr, X_mat.to_ndarray())
        return X_mat if X_arr is None else X_arr

    def _substitute(self, X):
        """
        Overwrite X with the solution of A @ X = B, where on entry the rows
        of X hold B[piv, :].
        """
        m, n = self.shape
        if X.n_rows != m:
            msg = f'Row dimensions do not agree: A is {m} x {n}, but B is {X.n_rows} x {X.n_cols}.'
            raise DimensionMismatchError(msg)
        self._check_nonsingular()

        lu = self._lu
        cols = slice(None)
        # Solve L @ Y = B[piv, :]
        for k in range(n):
            for i in range(k + 1, n):
                X.sub(i, cols, X.get(k, cols) * lu.get(i, k))
        # Solve U @ X = Y
        for k in range(n - 1, -1, -1):
            X.div(k, cols, lu.get(k, k))
            for i in range(k):
                X.sub(i, cols, X.get(k, cols) * lu.get(i, k))
        pass

    def _check_square(self):
        m, n = self.shape
        if m != n:
            raise DimensionMismatchError(not_square_msg(m, n))

    def _check_nonsingular(self):
        if self._singular:
            raise SingularMatrixError('Matrix is singular.')

    @staticmethod
    def _check_writable(x):
        if not isinstance(x, np.ndarray):
            raise ValueError(f'The solution is written in place, so it must be an ndarray, not {type(x)}.')
        if not np.issubdtype(x.dtype, np.floating):
            raise ValueError(f'The solution is written in place, so it needs a floating dtype, not {x.dtype}.')
        if not x.flags.writeable:
            raise ValueError('The solution is written in place, but the array is read-only.')

    def __repr__(self):
        m, n = self.shape
        return f'LU(shape=({m}, {n}), pivsign={self._pivsign}, singular={self._singular})'
