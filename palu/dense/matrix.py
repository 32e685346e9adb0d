from typing import Optional, Union
import numpy as np
from palu.dense.enums import Layout
from palu.dense.helpers import to_2d_array, required_size, write_back
from palu.utils.errors import DimensionMismatchError


"""
DenseMatrix is the storage that every factorization and solve in palu
reads and writes. It is a flat float64 buffer plus the metadata needed to
interpret that buffer as an (n_rows, n_cols) matrix, in the spirit of a
BLAS/LAPACK (ptr, ld, layout) triple.

Coordinate accessors accept ints or slices. Slices let the LU routines
update whole row segments through the same in-place interface that scalar
updates go through.
"""

Index = Union[int, slice]


class DenseMatrix:

    def __init__(self,
                 n_rows: int,
                 n_cols: int,
                 buff: Optional[np.ndarray] = None,
                 layout: Layout = Layout.ColMajor,
                 ld: Optional[int] = None):
        """
        When layout == Layout.ColMajor we have
            A[i, j] == buff[i + ld * j],
        otherwise
            A[i, j] == buff[i * ld + j].

        If buff is None then a zero-initialized buffer is allocated.
        A buffer that's passed in is used as-is (no copy is made).
        """
        if ld is None:
            ld = max(n_rows if layout == Layout.ColMajor else n_cols, 1)
        self.n_rows = n_rows
        self.n_cols = n_cols
        self.layout = layout
        self.ld = ld
        if buff is None:
            buff = np.zeros(required_size(n_rows, n_cols, ld, layout))
        self.buff = buff
        self.state_check()
        self._view = to_2d_array(self.buff, n_rows, n_cols, ld, layout)
        pass

    def state_check(self):
        if self.n_rows < 0 or self.n_cols < 0:
            msg = f'Invalid shape ({self.n_rows}, {self.n_cols}).'
            raise DimensionMismatchError(msg)
        min_ld = self.n_rows if self.layout == Layout.ColMajor else self.n_cols
        if self.ld < max(min_ld, 1):
            raise ValueError(f'Leading dimension {self.ld} is smaller than {min_ld}.')
        assert isinstance(self.buff, np.ndarray)
        assert self.buff.ndim == 1
        assert self.buff.dtype == np.float64
        need = required_size(self.n_rows, self.n_cols, self.ld, self.layout)
        if self.buff.size < need:
            msg = f"""
            A buffer of size {self.buff.size} is too small to hold a
            {self.n_rows} x {self.n_cols} matrix with ld={self.ld}
            ({need} entries are required).
            """
            raise ValueError(msg)

    @property
    def shape(self):
        return self.n_rows, self.n_cols

    def nrows(self):
        return self.n_rows

    def ncols(self):
        return self.n_cols

    def get(self, i: Index, j: Index):
        return self._view[i, j]

    def set(self, i: Index, j: Index, x):
        self._view[i, j] = x

    def add(self, i: Index, j: Index, x):
        self._view[i, j] += x

    def sub(self, i: Index, j: Index, x):
        self._view[i, j] -= x

    def mul(self, i: Index, j: Index, x):
        self._view[i, j] *= x

    def div(self, i: Index, j: Index, x):
        self._view[i, j] /= x

    def swap_rows(self, i: int, k: int):
        if i != k:
            self._view[[i, k], :] = self._view[[k, i], :]

    def to_ndarray(self):
        """Return a writable 2-D view of this matrix's buffer."""
        return self._view

    def copy(self):
        """Return a deep copy that has the same layout and a compact buffer."""
        out = DenseMatrix(self.n_rows, self.n_cols, layout=self.layout)
        out._view[:, :] = self._view
        return out

    def shares_memory(self, other):
        if isinstance(other, DenseMatrix):
            other = other.buff
        return np.may_share_memory(self.buff, other)

    def __array__(self, dtype=None, copy=None):
        arr = self._view
        if dtype is not None:
            arr = arr.astype(dtype, copy=False)
        if copy:
            arr = arr.copy()
        return arr

    def __repr__(self):
        return f'DenseMatrix({self.n_rows}, {self.n_cols}, layout={self.layout.name})\n{self._view}'


def zeros(n_rows, n_cols, layout=Layout.ColMajor):
    return DenseMatrix(n_rows, n_cols, layout=layout)


def eye(n, layout=Layout.ColMajor):
    I = zeros(n, n, layout)
    for i in range(n):
        I.set(i, i, 1.0)
    return I


def from_array(A, copy=False):
    """
    Wrap a 2-D array_like as a DenseMatrix.

    A C-contiguous float64 ndarray is wrapped as a row-major matrix and an
    F-contiguous one as a column-major matrix, in both cases without copying
    (unless copy=True). Anything else is copied into column-major storage.
    DenseMatrix inputs are returned as-is, or deep-copied if copy=True.
    """
    if isinstance(A, DenseMatrix):
        return A.copy() if copy else A
    A = np.asarray(A)
    if A.ndim != 2:
        raise DimensionMismatchError(f'Expected a 2-D array, but A.ndim == {A.ndim}.')
    n_rows, n_cols = A.shape
    if A.dtype == np.float64 and not copy:
        if A.flags.c_contiguous:
            buff = A.reshape(-1, order='C')
            return DenseMatrix(n_rows, n_cols, buff, Layout.RowMajor, max(n_cols, 1))
        if A.flags.f_contiguous:
            buff = A.reshape(-1, order='F')
            return DenseMatrix(n_rows, n_cols, buff, Layout.ColMajor, max(n_rows, 1))
    ld = max(n_rows, 1)
    buff = np.empty(ld * n_cols)
    write_back(A.astype(np.float64, copy=False), buff, n_cols, n_rows, ld, Layout.ColMajor)
    return DenseMatrix(n_rows, n_cols, buff, Layout.ColMajor, ld)
