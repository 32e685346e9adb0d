import numpy as np


class DimensionMismatchError(ValueError):
    """Operand shapes are incompatible with the requested operation."""
    pass


class AliasingError(ValueError):
    """An output buffer is the same object as (or shares memory with) an input."""
    pass


class SingularMatrixError(np.linalg.LinAlgError):
    """A solve or inverse was requested from a singular LU decomposition."""
    pass


def not_square_msg(n_rows, n_cols):
    return f'Matrix is not square: {n_rows} x {n_cols}'
