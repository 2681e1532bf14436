import os
import shutil
import tempfile
import unittest

import numpy as np
import fitsio

from skymcmc import *

class PsrfTest(unittest.TestCase):
    def test_hand_computed(self):
        chains = [np.array([[0.], [1.], [2.]]),
                  np.array([[1.], [2.], [3.]])]
        # B = 1.5, W = 1, Vhat = 2/3 + 1/2 * 1.5
        np.testing.assert_allclose(potential_scale_reduction_factor(chains),
                                   [2. / 3. + 0.75])

    def test_iid_chains(self):
        rng = np.random.default_rng(0)
        chains = [rng.standard_normal((2000, 3)) for i in range(4)]
        psrf = potential_scale_reduction_factor(chains)
        self.assertEqual(psrf.shape, (3,))
        self.assertTrue(np.all(np.abs(psrf - 1.) < 0.05))

    def test_separated_chains(self):
        rng = np.random.default_rng(1)
        chains = [rng.standard_normal((500, 2)) + 10. * i for i in range(3)]
        psrf = potential_scale_reduction_factor(chains)
        self.assertTrue(np.all(psrf > 1.5))

    def test_zero_variance(self):
        # identical constant chains: 0 / 0
        chains = [np.ones((10, 2)) for i in range(3)]
        psrf = potential_scale_reduction_factor(chains)
        self.assertTrue(np.all(np.isnan(psrf)))
        # constant but different chains: B > 0, W = 0
        chains = [np.ones((10, 2)) * i for i in range(3)]
        psrf = potential_scale_reduction_factor(chains)
        self.assertTrue(np.all(np.isinf(psrf)))

    def test_one_parameter_chains(self):
        rng = np.random.default_rng(3)
        chains = [rng.standard_normal(500) for i in range(3)]
        psrf = potential_scale_reduction_factor(chains)
        self.assertEqual(psrf.shape, (1,))
        np.testing.assert_allclose(
            psrf, potential_scale_reduction_factor(
                [c[:, np.newaxis] for c in chains]))
        self.assertTrue(abs(psrf[0] - 1.) < 0.05)

    def test_invalid(self):
        self.assertRaises(ValueError, potential_scale_reduction_factor,
                          [np.zeros((10, 2))])
        self.assertRaises(ValueError, potential_scale_reduction_factor,
                          [np.zeros((10, 2)), np.zeros((9, 2))])
        self.assertRaises(ValueError, potential_scale_reduction_factor,
                          [np.zeros((1, 2)), np.zeros((1, 2))])


class SummaryTest(unittest.TestCase):
    def setUp(self):
        rng = np.random.default_rng(2)
        self.chains = [rng.standard_normal((20, 7)) for i in range(3)]
        self.logprobs = [rng.standard_normal(20) for i in range(3)]

    def test_table(self):
        T = chains_to_table(self.chains, self.logprobs, star_param_names)
        self.assertEqual(len(T), 60)
        self.assertEqual(list(T.dtype.names),
                         star_param_names + ['lls', 'chain'])
        np.testing.assert_array_equal(T.lnr[20:40], self.chains[1][:, 0])
        np.testing.assert_array_equal(T.lls[40:], self.logprobs[2])
        self.assertEqual(list(np.unique(T.chain)), [1, 2, 3])
        self.assertRaises(ValueError, chains_to_table, self.chains,
                          self.logprobs, ['a', 'b'])

    def test_star_row(self):
        samples = np.zeros((4, 7))
        samples[:, 0] = np.log([1., 2., 3., 4.])
        samples[:, 5] = [1., 2., 3., 4.]
        row = samples_to_catalog_row(samples, is_star=True)
        self.assertTrue(row['is_star'])
        self.assertAlmostEqual(row['reference_band_flux_nmgy'], 2.5)
        self.assertAlmostEqual(row['right_ascension_deg'], 2.5)
        self.assertEqual(row['color_log_ratio_gr'], 0.)
        self.assertTrue(np.isnan(row['minor_major_axis_ratio']))

    def test_galaxy_row(self):
        samples = np.zeros((2, 11))
        samples[:, 8] = [0.4, 0.6]
        samples[:, 9] = np.pi / 2.
        row = samples_to_catalog_row(samples, is_star=False, objid='g1')
        self.assertFalse(row['is_star'])
        self.assertEqual(row['objid'], 'g1')
        self.assertAlmostEqual(row['minor_major_axis_ratio'], 0.5)
        self.assertAlmostEqual(row['angle_deg'], 90.)

    def test_truth_row(self):
        fluxes = colors_to_fluxes(np.log(20.), [1., .5, .2, .1])
        ce = CatalogEntry([3., 4.], True, fluxes, fluxes * 2., objid='s1')
        row = catalog_entry_to_catalog_row(ce)
        self.assertEqual(row['objid'], 's1')
        self.assertAlmostEqual(row['reference_band_flux_nmgy'], 20.)
        self.assertAlmostEqual(row['color_log_ratio_gr'], .5)
        self.assertAlmostEqual(row['declination_deg'], 4.)
        self.assertTrue(np.isnan(row['color_log_ratio_gr_stderr']))
        self.assertTrue(np.isnan(row['angle_deg']))
        # same columns as a posterior summary
        post = samples_to_catalog_row(np.zeros((3, 7)), is_star=True)
        self.assertEqual(sorted(row.keys()), sorted(post.keys()))

        gal = CatalogEntry([3., 4.], False, fluxes, fluxes * 2.,
                           gal_frac_dev=.3, gal_ab=.6, gal_angle=np.pi / 4.,
                           gal_scale=2.)
        row = catalog_entry_to_catalog_row(gal, objid='g1')
        self.assertEqual(row['objid'], 'g1')
        self.assertFalse(row['is_star'])
        self.assertAlmostEqual(row['reference_band_flux_nmgy'], 40.)
        self.assertAlmostEqual(row['angle_deg'], 45.)
        self.assertAlmostEqual(row['minor_major_axis_ratio'], .6)

    def test_write_chains(self):
        T = chains_to_table(self.chains, self.logprobs, star_param_names)
        tempdir = tempfile.mkdtemp()
        try:
            fn = os.path.join(tempdir, 'chains.fits')
            write_chains(fn, T)
            R = read_chains(fn)
            self.assertEqual(len(R), 60)
            np.testing.assert_allclose(R['lls'], T.lls)
            np.testing.assert_array_equal(R['chain'], T.chain)
            F = fitsio.read(fn)
            self.assertEqual(list(F.dtype.names), list(T.dtype.names))
        finally:
            shutil.rmtree(tempdir)


if __name__ == '__main__':
    unittest.main()
