import unittest

import numpy as np

from skymcmc import *


def gaussian_lnpdf(th):
    return -0.5 * np.sum(np.asarray(th)**2)


def synthetic_star_image(flux=100., pos=(50., 50.)):
    psf = NCircularGaussianPSF([1.5], [1.])
    img = Image(pixels=np.zeros((101, 101)), band='r', psf=psf,
                sky=ConstantSky(1.), nelec_per_nmgy=10.)
    fluxes = colors_to_fluxes(np.log(flux), construct_prior().star.color_mean[0])
    ce = CatalogEntry(pos, True, fluxes, fluxes)
    img.pixels = render_image(img, [ce])
    return img, ce


class MultiChainTest(unittest.TestCase):
    def test_chains(self):
        res = run_multi_chain_mcmc(gaussian_lnpdf, np.zeros(7), num_chains=4,
                                   num_samples=200, num_warmup=50, seed=1,
                                   print_skip=0)
        self.assertEqual(len(res.chains), 4)
        self.assertEqual(len(res.logprobs), 4)
        for c, l in zip(res.chains, res.logprobs):
            self.assertEqual(c.shape, (200, 7))
            self.assertEqual(l.shape, (200,))
        # after chains 3 and 4
        self.assertEqual(len(res.psrfs), 2)
        self.assertEqual(res.psrfs[-1].shape, (7,))
        np.testing.assert_allclose(
            res.psrfs[-1], potential_scale_reduction_factor(res.chains))
        np.testing.assert_allclose(
            res.psrfs[0], potential_scale_reduction_factor(res.chains[:3]))

    def test_two_chains_no_psrf(self):
        res = run_multi_chain_mcmc(gaussian_lnpdf, np.zeros(2), num_chains=2,
                                   num_samples=20, num_warmup=5, seed=0)
        self.assertEqual(res.psrfs, [])

    def test_seeded(self):
        kw = dict(num_chains=3, num_samples=50, num_warmup=10, seed=5)
        a = run_multi_chain_mcmc(gaussian_lnpdf, np.zeros(2), **kw)
        b = run_multi_chain_mcmc(gaussian_lnpdf, np.zeros(2), **kw)
        for ca, cb in zip(a.chains, b.chains):
            np.testing.assert_array_equal(ca, cb)
        # chains are independent
        self.assertFalse(np.array_equal(a.chains[0], a.chains[1]))

    def test_init(self):
        starts = []
        def init(th0, rng):
            starts.append(th0 + 1.)
            return th0 + 1.
        run_multi_chain_mcmc(gaussian_lnpdf, np.zeros(2), num_chains=2,
                             num_samples=5, num_warmup=5, init=init, seed=0)
        self.assertEqual(len(starts), 2)

    def test_process_pool(self):
        kw = dict(num_chains=3, num_samples=50, num_warmup=10, seed=3)
        serial = run_multi_chain_mcmc(gaussian_lnpdf, np.zeros(2), **kw)
        parallel = run_multi_chain_mcmc(gaussian_lnpdf, np.zeros(2),
                                        threads=2, **kw)
        for cs, cp in zip(serial.chains, parallel.chains):
            np.testing.assert_array_equal(cs, cp)
        np.testing.assert_array_equal(serial.psrfs[0], parallel.psrfs[0])

    def test_single_sample_chains(self):
        res = run_multi_chain_mcmc(gaussian_lnpdf, np.zeros(7), num_chains=3,
                                   num_samples=1, num_warmup=5, seed=0)
        self.assertEqual(len(res.chains), 3)
        self.assertEqual(res.chains[0].shape, (1, 7))
        self.assertEqual(len(res.psrfs), 1)
        self.assertEqual(res.psrfs[0].shape, (7,))
        self.assertTrue(np.all(np.isnan(res.psrfs[0])))

    def test_default_init_short_state(self):
        res = run_multi_chain_mcmc(gaussian_lnpdf, np.zeros(1), num_chains=3,
                                   num_samples=20, num_warmup=5, seed=2)
        self.assertEqual(res.chains[0].shape, (20, 1))
        self.assertEqual(res.psrfs[0].shape, (1,))

    def test_bad_args(self):
        self.assertRaises(ValueError, run_multi_chain_mcmc, gaussian_lnpdf,
                          np.zeros(2), num_chains=0)


class SingleStarTest(unittest.TestCase):
    def test_recovers_flux(self):
        img, ce = synthetic_star_image()
        patch = SkyPatch.around(img, (50, 50), 12)
        res = run_single_star_mcmc([ce], [img], [patch], num_chains=3,
                                   num_warmup=500, num_samples=1000, seed=42)
        self.assertEqual(len(res.chains), 3)
        self.assertEqual(res.chains[0].shape, (1000, 7))
        samples = np.vstack(res.chains)
        flux = np.exp(np.mean(samples[:, 0]))
        self.assertTrue(abs(flux - 100.) < 5., flux)
        self.assertEqual(len(res.psrfs), 1)
        # the brightness dimension mixes
        self.assertTrue(res.psrfs[0][0] < 1.2, res.psrfs[0])

    def test_galaxy_runs(self):
        psf = NCircularGaussianPSF([1.5], [1.])
        img = Image(pixels=np.zeros((41, 41)), band='r', psf=psf,
                    sky=ConstantSky(1.), nelec_per_nmgy=10.)
        fluxes = colors_to_fluxes(np.log(50.),
                                  construct_prior().galaxy.color_mean[0])
        ce = CatalogEntry([20., 20.], False, fluxes, fluxes,
                          gal_frac_dev=0.5, gal_ab=0.7, gal_angle=0.3,
                          gal_scale=1.5)
        img.pixels = render_image(img, [ce])
        res = run_single_galaxy_mcmc([ce], [img], num_chains=3,
                                     num_warmup=20, num_samples=30, seed=0,
                                     chain_prop_scale=.01)
        self.assertEqual(res.chains[0].shape, (30, 11))
        for c in res.chains:
            self.assertTrue(np.all((c[:, 8] > 0) & (c[:, 8] <= 1)))
            self.assertTrue(np.all((c[:, 7] >= 0) & (c[:, 7] <= 1)))
            self.assertTrue(np.all(c[:, 10] > 0))

    def test_no_sources(self):
        img, ce = synthetic_star_image()
        self.assertRaises(ValueError, run_single_star_mcmc, [], [img])


if __name__ == '__main__':
    unittest.main()
