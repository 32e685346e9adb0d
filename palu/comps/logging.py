import numpy as np


class FactorLog:
    """
    Log runtime and pivoting information from a call to an LUFactorizer.

    Attributes
    ----------
    time_copy : float
        time to form the working copy of the input matrix. This is zero
        when the factorizer was allowed to overwrite its input.

    time_factor : float
        time spent in the elimination itself.

    num_swaps : int
        number of physical row interchanges performed. The pivot sign of
        the factorization is (-1)**num_swaps.

    zero_pivots : ndarray
        zero_pivots[i] is the index of a column whose pivot was numerically
        zero. The factorization is singular iff this array is nonempty.

    Notes
    -----
    Timings are only measured when the factorizer is called with
    logging=True. The counts are recorded regardless.
    """

    def __init__(self):
        self.time_copy = 0.0
        self.time_factor = 0.0
        self.num_swaps = 0
        self.zero_pivots = np.zeros(0, dtype=int)

    @property
    def time_total(self):
        return self.time_copy + self.time_factor

    @property
    def singular(self):
        return self.zero_pivots.size > 0

    def wrap_up(self, num_swaps, zero_pivots):
        """
        Populate self.num_swaps and self.zero_pivots.

        Parameters
        ----------
        num_swaps : int
            number of row interchanges performed during elimination.

        zero_pivots : list
            column indices of the zero pivots, in increasing order.
        """
        self.num_swaps = int(num_swaps)
        self.zero_pivots = np.array(zero_pivots, dtype=int)
        pass

    def __repr__(self):
        return (f'FactorLog(time_copy={self.time_copy:.3g}, time_factor={self.time_factor:.3g}, '
                f'num_swaps={self.num_swaps}, zero_pivots={self.zero_pivots.tolist()})')
