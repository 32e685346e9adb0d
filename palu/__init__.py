import palu.dense as dense
import palu.comps as comps
import palu.drivers as drivers
import palu.utils as utils

__version__ = '0.1.0'

from palu.dense import Layout, DenseMatrix, zeros, eye, from_array
from palu.comps.lu import LU
from palu.comps.logging import FactorLog
from palu.comps.pivoting import LUFactorizer, LU1, LU2
from palu.drivers.lu import factorize, solve, det, inv
from palu.utils.errors import DimensionMismatchError, AliasingError, SingularMatrixError
