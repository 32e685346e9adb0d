from palu.dense.enums import Layout
from palu.dense.matrix import DenseMatrix, zeros, eye, from_array
