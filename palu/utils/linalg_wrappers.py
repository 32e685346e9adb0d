import numpy as np
import scipy.linalg as la


def plu(M):
    """
    Factor M[piv, :] = L @ U with scipy. Return (piv, L, U), where L is
    m-by-k and U is k-by-n for k = min(M.shape).
    """
    P, L, U = la.lu(M)
    # scipy returns M = P @ L @ U, so M[piv, :] = (P.T @ M).
    piv = np.argmax(P, axis=0)
    return piv, L, U


def reference_det(M):
    return la.det(M, check_finite=False)


def reference_inv(M):
    return la.inv(M, check_finite=False)


def reference_solve(M, b):
    return la.solve(M, b, check_finite=False)


def relative_residual(A, x, b):
    """Return ||A @ x - b|| / (||A|| ||x|| + ||b||), in the Frobenius norm."""
    A, x, b = np.asarray(A), np.asarray(x), np.asarray(b)
    num = la.norm(A @ x - b)
    den = la.norm(A) * la.norm(x) + la.norm(b)
    return num / den if den > 0 else num
