from palu.comps.lu import LU
from palu.comps.logging import FactorLog
from palu.comps.pivoting import LUFactorizer, LU1, LU2
