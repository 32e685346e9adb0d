import unittest
import warnings
import numpy as np
import scipy.linalg as la
from palu.comps.pivoting import LU1, LU2
from palu.comps.lu import LU
from palu.dense import DenseMatrix, Layout, from_array
from palu.utils.errors import DimensionMismatchError
import palu.utils.linalg_wrappers as ulaw
import palu.tests.matmakers as matmakers


def run_reconstruction_test(tester, alg, A, tol):
    lu, log = alg(A)
    A = np.asarray(A)
    piv = lu.pivot()
    L = lu.lower_factor().to_ndarray()
    U = lu.upper_factor().to_ndarray()
    k = min(A.shape)
    tester.assertEqual(L.shape, (A.shape[0], k))
    tester.assertEqual(U.shape, (k, A.shape[1]))
    tester.assertTrue(np.allclose(np.tril(L), L))
    tester.assertTrue(np.allclose(np.triu(U), U))
    np.testing.assert_array_equal(np.diag(L), np.ones(k))
    err = la.norm(L @ U - A[piv, :]) / la.norm(A)
    tester.assertLessEqual(err, tol)
    # multipliers are bounded by one under partial pivoting
    tester.assertLessEqual(np.max(np.abs(L)), 1.0 + 1e-12)
    tester.assertEqual(lu.pivsign, (-1) ** log.num_swaps)
    return lu, log


class TestLUFactorizer(unittest.TestCase):

    SHAPES = [(1, 1), (5, 5), (8, 3), (3, 8), (1, 4), (4, 1), (20, 20)]

    def _test_reconstruction(self, alg):
        rng = np.random.default_rng(0)
        for (m, n) in self.SHAPES:
            A = rng.standard_normal((m, n))
            run_reconstruction_test(self, alg, A, 1e-13)
            run_reconstruction_test(self, alg, np.asfortranarray(A), 1e-13)
            run_reconstruction_test(self, alg, from_array(A, copy=True), 1e-13)

    def _test_worked_example(self, alg):
        A = np.array([[4.0, 3.0], [6.0, 3.0]])
        lu, log = alg(A)
        np.testing.assert_array_equal(lu.pivot(), [1, 0])
        self.assertEqual(lu.pivsign, -1)
        self.assertEqual(log.num_swaps, 1)
        packed = lu.packed().to_ndarray()
        np.testing.assert_allclose(packed, [[6.0, 3.0], [2.0 / 3.0, 1.0]],
                                   rtol=1e-14, atol=1e-14)
        self.assertAlmostEqual(lu.det(), -6.0, places=13)
        x = lu.solve(np.array([1.0, 1.0]))
        np.testing.assert_allclose(x, [0.0, 1.0 / 3.0], atol=1e-14)
        np.testing.assert_allclose(A @ x, [1.0, 1.0], rtol=1e-14)

    def _test_swap_tracked_sign(self, alg):
        # A 3-cycle, reached by two row interchanges.
        A = np.array([[0.0, 0.0, 1.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
        lu, log = alg(A)
        self.assertEqual(log.num_swaps, 2)
        self.assertEqual(lu.pivsign, 1)
        np.testing.assert_array_equal(lu.pivot(), [1, 2, 0])
        self.assertEqual(lu.det(), 1.0)
        self.assertEqual(lu.det(), round(la.det(A)))

    def _test_singular(self, alg):
        A = matmakers.with_zero_row(5, 2, np.random.default_rng(1))
        with self.assertWarns(la.LinAlgWarning):
            lu, log = alg(A)
        self.assertTrue(lu.is_singular())
        self.assertTrue(log.singular)
        np.testing.assert_array_equal(log.zero_pivots, [4])
        self.assertEqual(lu.det(), 0.0)
        # A packed factorization still exists.
        L = lu.lower_factor().to_ndarray()
        U = lu.upper_factor().to_ndarray()
        np.testing.assert_allclose(L @ U, A[lu.pivot(), :], atol=1e-13)

    def _test_input_untouched(self, alg):
        rng = np.random.default_rng(2)
        A = rng.standard_normal((6, 6))
        A0 = A.copy()
        alg(A)
        np.testing.assert_array_equal(A, A0)
        D = from_array(A0, copy=True)
        alg(D)
        np.testing.assert_array_equal(D.to_ndarray(), A0)

    def _test_bad_inputs(self, alg):
        with self.assertRaises(DimensionMismatchError):
            alg(np.zeros((0, 3)))
        with self.assertRaises(DimensionMismatchError):
            alg(np.ones(3))
        with self.assertRaises(ValueError):
            alg(np.array([[1.0, np.nan], [0.0, 1.0]]))
        with self.assertRaises(ValueError):
            alg(np.array([[1.0, np.inf], [0.0, 1.0]]))
        with self.assertRaises(ValueError):
            alg(np.eye(2) * 1j)

    def test_lu1(self):
        alg = LU1()
        self._test_reconstruction(alg)
        self._test_worked_example(alg)
        self._test_swap_tracked_sign(alg)
        self._test_singular(alg)
        self._test_input_untouched(alg)
        self._test_bad_inputs(alg)

    def test_lu2(self):
        alg = LU2()
        self._test_reconstruction(alg)
        self._test_worked_example(alg)
        self._test_swap_tracked_sign(alg)
        self._test_singular(alg)
        self._test_input_untouched(alg)
        self._test_bad_inputs(alg)

    def test_lu1_matches_lapack(self):
        rng = np.random.default_rng(3)
        for (m, n) in self.SHAPES:
            A = rng.standard_normal((m, n))
            lu1, _ = LU1()(A)
            lu2, _ = LU2()(A)
            np.testing.assert_array_equal(lu1.pivot(), lu2.pivot())
            self.assertEqual(lu1.pivsign, lu2.pivsign)
            np.testing.assert_allclose(lu1.packed().to_ndarray(),
                                       lu2.packed().to_ndarray(), atol=1e-12)
            piv, L, U = ulaw.plu(A)
            np.testing.assert_array_equal(lu1.pivot(), piv)

    def test_tie_break(self):
        A = np.array([[1.0, 2.0], [-1.0, 3.0]])
        lu, log = LU1()(A)
        np.testing.assert_array_equal(lu.pivot(), [0, 1])
        self.assertEqual(log.num_swaps, 0)
        self.assertEqual(lu.pivsign, 1)

    def test_overwrite_a(self):
        rng = np.random.default_rng(4)
        A = from_array(rng.standard_normal((4, 4)), copy=True)
        A0 = A.to_ndarray().copy()
        lu, _ = LU1(overwrite_a=True)(A)
        np.testing.assert_allclose(A.to_ndarray(), lu.packed().to_ndarray())
        self.assertFalse(np.allclose(A.to_ndarray(), A0))

    def test_zero_tol(self):
        A = np.array([[1e-20, 0.0], [0.0, 1.0]])
        with warnings.catch_warnings():
            warnings.simplefilter('error')
            lu, log = LU1()(A)
        self.assertFalse(lu.is_singular())
        with self.assertWarns(la.LinAlgWarning):
            lu, log = LU1(zero_tol=1e-15)(A)
        self.assertTrue(lu.is_singular())
        np.testing.assert_array_equal(log.zero_pivots, [0])
        with self.assertRaises(ValueError):
            LU1(zero_tol=-1.0)

    def test_check_finite_disabled(self):
        A = np.array([[1.0, np.nan], [0.0, 1.0]])
        lu, _ = LU1(check_finite=False)(A)
        self.assertTrue(np.isnan(lu.det()))

    def test_logging(self):
        A = matmakers.well_conditioned(10, np.random.default_rng(5))
        lu, log = LU1()(A, logging=True)
        self.assertGreaterEqual(log.time_factor, 0.0)
        self.assertGreaterEqual(log.time_total, log.time_factor)
        self.assertFalse(log.singular)
        self.assertEqual(log.zero_pivots.size, 0)
        _, log = LU1()(A, logging=False)
        self.assertEqual(log.time_total, 0.0)

    def test_layout_independent(self):
        A = matmakers.simple_mat(7, 5, scale=2, rng=6)
        results = []
        for layout in [Layout.ColMajor, Layout.RowMajor]:
            D = DenseMatrix(7, 5, layout=layout)
            D.set(slice(None), slice(None), A)
            lu, _ = LU1()(D)
            results.append(lu)
        np.testing.assert_array_equal(results[0].pivot(), results[1].pivot())
        np.testing.assert_array_equal(results[0].packed().to_ndarray(),
                                      results[1].packed().to_ndarray())

    def test_returns_lu(self):
        lu, _ = LU2()(np.eye(3))
        self.assertIsInstance(lu, LU)
        self.assertEqual(lu.det(), 1.0)
