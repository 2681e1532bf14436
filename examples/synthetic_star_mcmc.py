'''
Samples the parameters of a single star rendered (noiselessly, or
with Poisson noise) onto a synthetic r-band image, and prints a
posterior summary.

    python examples/synthetic_star_mcmc.py --flux 100 --chains 5 -o chains.fits
'''
import logging
import optparse
import sys

import numpy as np

from skymcmc import (Image, NCircularGaussianPSF, ConstantSky, CatalogEntry,
                     SkyPatch, colors_to_fluxes, construct_prior,
                     render_image, run_single_star_mcmc, chains_to_table,
                     samples_to_catalog_row, catalog_entry_to_catalog_row,
                     poisson_sample, write_chains, star_param_names,
                     DEFAULT_MCMC_ARGS)


def main():
    parser = optparse.OptionParser()
    parser.add_option('--flux', type=float, default=100.,
                      help='r-band flux (nanomaggies), default %default')
    parser.add_option('--size', type=int, default=101,
                      help='Image size (pixels), default %default')
    parser.add_option('--sky', type=float, default=1.,
                      help='Sky level (nanomaggies/pixel), default %default')
    parser.add_option('--gain', type=float, default=10.,
                      help='Electrons per nanomaggy, default %default')
    parser.add_option('--psf-sigma', dest='psf_sigma', type=float,
                      default=1.5, help='PSF sigma (pixels)')
    parser.add_option('--radius', type=int, default=12,
                      help='Patch half-width (pixels), default %default')
    parser.add_option('--noise', action='store_true', default=False,
                      help='Add Poisson noise to the image?')
    parser.add_option('--chains', type=int,
                      default=DEFAULT_MCMC_ARGS['num_chains'])
    parser.add_option('--samples', type=int,
                      default=DEFAULT_MCMC_ARGS['num_samples'])
    parser.add_option('--warmup', type=int,
                      default=DEFAULT_MCMC_ARGS['num_warmup'])
    parser.add_option('--threads', type=int, default=1,
                      help='Run chains in this many processes')
    parser.add_option('--seed', type=int, default=None)
    parser.add_option('-o', '--output', dest='output', default=None,
                      help='Write chains to this FITS table')
    parser.add_option('-v', '--verbose', dest='verbose', action='count',
                      default=0, help='Make more verbose')
    opt, args = parser.parse_args()

    if opt.verbose == 0:
        lvl = logging.INFO
    else:
        lvl = logging.DEBUG
    logging.basicConfig(level=lvl, format='%(message)s', stream=sys.stdout)

    rng = np.random.default_rng(opt.seed)
    c = opt.size // 2
    psf = NCircularGaussianPSF([opt.psf_sigma], [1.])
    img = Image(pixels=np.zeros((opt.size, opt.size)), band='r', psf=psf,
                sky=ConstantSky(opt.sky), nelec_per_nmgy=opt.gain,
                name='synthetic')
    fluxes = colors_to_fluxes(np.log(opt.flux),
                              construct_prior().star.color_mean[0])
    truth = CatalogEntry([c, c], True, fluxes, fluxes, objid='truth')
    img.pixels = render_image(img, [truth])
    if opt.noise:
        img.pixels = poisson_sample(img.pixels, rng=rng)

    patch = SkyPatch.around(img, (c, c), opt.radius)
    res = run_single_star_mcmc([truth], [img], [patch],
                               num_chains=opt.chains,
                               num_samples=opt.samples,
                               num_warmup=opt.warmup,
                               threads=opt.threads, seed=opt.seed)

    row = samples_to_catalog_row(np.vstack(res.chains), is_star=True)
    true_row = catalog_entry_to_catalog_row(truth)
    print('  %-32s %10s %10s' % ('', 'truth', 'posterior'))
    for k in ['reference_band_flux_nmgy', 'log_reference_band_flux_stderr',
              'color_log_ratio_ug', 'color_log_ratio_gr',
              'color_log_ratio_ri', 'color_log_ratio_iz']:
        print('  %-32s %10.4f %10.4f' % (k, true_row[k], row[k]))
    if len(res.psrfs):
        print('PSRF:', dict(zip(star_param_names,
                                np.round(res.psrfs[-1], 3))))

    if opt.output is not None:
        T = chains_to_table(res.chains, res.logprobs, star_param_names)
        write_chains(opt.output, T)
    return 0


if __name__ == '__main__':
    sys.exit(main())
