from palu.drivers.lu import factorize, solve, det, inv
