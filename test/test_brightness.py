import doctest
import unittest

import numpy as np

import skymcmc.brightness
from skymcmc.brightness import *


class BrightnessTest(unittest.TestCase):
    def test_colors_to_fluxes(self):
        f = colors_to_fluxes(np.log(10.), [-1., 0., 1., 2.])
        e = np.exp(1.)
        np.testing.assert_allclose(f, [10. * e, 10., 10., 10. * e,
                                       10. * e**3])

    def test_flat_colors(self):
        np.testing.assert_allclose(colors_to_fluxes(np.log(3.), np.zeros(4)),
                                   3. * np.ones(5))

    def test_fluxes_to_colors(self):
        lnr, colors = fluxes_to_colors([1., 2., 4., 4., 8.])
        self.assertAlmostEqual(lnr, np.log(4.))
        np.testing.assert_allclose(colors, np.log([2., 2., 1., 2.]))
        np.testing.assert_allclose(colors_to_fluxes(lnr, colors),
                                   [1., 2., 4., 4., 8.])
        self.assertRaises(ValueError, fluxes_to_colors, [1., 0., 1., 1., 1.])

    def test_bad_colors(self):
        self.assertRaises(ValueError, colors_to_fluxes, 0., [1., 2.])

    def test_bands(self):
        self.assertEqual(band_index('r'), REFERENCE_BAND)
        self.assertEqual(band_index(4), 4)
        self.assertEqual(BANDS[REFERENCE_BAND], 'r')
        self.assertRaises(ValueError, band_index, 'y')
        self.assertRaises(ValueError, band_index, 5)

    def test_mags(self):
        self.assertAlmostEqual(mag_to_nanomaggies(22.5), 1.)
        self.assertAlmostEqual(mag_to_nanomaggies(20.), 10.)
        self.assertAlmostEqual(nanomaggies_to_mag(100.), 17.5)

    def test_doctests(self):
        failures, _ = doctest.testmod(skymcmc.brightness)
        self.assertEqual(failures, 0)


if __name__ == '__main__':
    unittest.main()
