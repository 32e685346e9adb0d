from palu.utils.errors import DimensionMismatchError, AliasingError, SingularMatrixError
