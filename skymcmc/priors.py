'''
This file is part of the skymcmc project.
Licensed under the GPLv2; see the file COPYING for details.

`priors.py`
===========

Prior log-densities over source parameters.

Each source type (star, galaxy) has its own `SourcePrior`:

* log reference (r-band) flux: Normal(r_mean, r_sd)
* the four color log-ratios: a mixture of multivariate Gaussians
* galaxies only: frac_dev ~ Uniform[0, 1], ab ~ Beta on (0, 1],
  angle flat, scale (half-light radius, pixels) ~ LogNormal.

Every function here returns -inf for parameters outside the prior's
support; none of them raises for out-of-support values.
'''
import numpy as np
from scipy import stats
from scipy.special import logsumexp

__all__ = ['SourcePrior', 'PriorParams', 'construct_prior',
           'color_logprior', 'position_logprior', 'shape_logprior']


class SourcePrior(object):
    '''
    Prior parameters for one source type.

    *color_mean* is (K, 4), *color_cov* is (K, 4, 4) and
    *color_weights* is (K,); weights are normalized.
    '''

    def __init__(self, r_mean, r_sd, color_weights, color_mean, color_cov,
                 ab_alpha=1.5, ab_beta=1., scale_logmean=np.log(2.),
                 scale_logsd=.8):
        self.r_mean = float(r_mean)
        self.r_sd = float(r_sd)
        if self.r_sd <= 0:
            raise ValueError('SourcePrior: r_sd must be > 0')
        w = np.asarray(color_weights, dtype=float)
        if np.any(w < 0) or w.sum() <= 0:
            raise ValueError('SourcePrior: color weights must be '
                             'non-negative and not all zero')
        self.color_weights = w / w.sum()
        self.color_mean = np.atleast_2d(np.asarray(color_mean, dtype=float))
        self.color_cov = np.asarray(color_cov, dtype=float).reshape(
            (len(self.color_weights), 4, 4))
        if self.color_mean.shape != (len(self.color_weights), 4):
            raise ValueError('SourcePrior: color_mean must be (K, 4)')
        self.ab_alpha = float(ab_alpha)
        self.ab_beta = float(ab_beta)
        self.scale_logmean = float(scale_logmean)
        self.scale_logsd = float(scale_logsd)

        self._brightness = stats.norm(loc=self.r_mean, scale=self.r_sd)
        self._colors = [stats.multivariate_normal(mean=m, cov=c)
                        for m, c in zip(self.color_mean, self.color_cov)]
        self._logweights = np.log(self.color_weights)
        self._ab = stats.beta(self.ab_alpha, self.ab_beta)
        self._scale = stats.lognorm(s=self.scale_logsd,
                                    scale=np.exp(self.scale_logmean))

    def __str__(self):
        return ('SourcePrior: lnr ~ N(%.3f, %.3f), %i color components' %
                (self.r_mean, self.r_sd, len(self.color_weights)))

    def brightness_logpdf(self, lnr):
        return float(self._brightness.logpdf(lnr))

    def colors_logpdf(self, colors):
        lps = [lw + c.logpdf(colors)
               for lw, c in zip(self._logweights, self._colors)]
        return float(logsumexp(lps))

    def ab_logpdf(self, ab):
        return float(self._ab.logpdf(ab))

    def scale_logpdf(self, scale):
        return float(self._scale.logpdf(scale))


class PriorParams(object):
    ''' The priors for both source types. '''

    def __init__(self, star, galaxy):
        self.star = star
        self.galaxy = galaxy

    def get(self, is_star):
        return self.star if is_star else self.galaxy


# MAGIC -- default prior values.  Broad on brightness; colors from a
# two-component mixture loosely matching SDSS stellar-locus and
# galaxy colors in natural-log flux-ratio units.
def construct_prior():
    '''
    Returns the default `PriorParams`.
    '''
    star = SourcePrior(
        r_mean=np.log(10.), r_sd=2.5,
        color_weights=[0.6, 0.4],
        color_mean=[[1.4, 0.5, 0.2, 0.1],
                    [2.0, 0.9, 0.35, 0.2]],
        color_cov=[np.diag([0.5, 0.3, 0.2, 0.2]) ** 2,
                   np.diag([0.6, 0.4, 0.3, 0.3]) ** 2])
    galaxy = SourcePrior(
        r_mean=np.log(5.), r_sd=2.5,
        color_weights=[0.5, 0.5],
        color_mean=[[1.2, 0.8, 0.4, 0.3],
                    [1.8, 1.1, 0.5, 0.35]],
        color_cov=[np.diag([0.6, 0.4, 0.3, 0.3]) ** 2,
                   np.diag([0.6, 0.4, 0.3, 0.3]) ** 2],
        ab_alpha=1.5, ab_beta=1.,
        scale_logmean=np.log(2.), scale_logsd=.8)
    return PriorParams(star, galaxy)


def color_logprior(brightness, colors, prior, is_star):
    '''
    Log prior density of log reference flux *brightness* and the four
    *colors* for a star (*is_star* True) or galaxy.
    '''
    sp = prior.get(is_star)
    colors = np.asarray(colors, dtype=float)
    if not (np.isfinite(brightness) and np.all(np.isfinite(colors))):
        return -np.inf
    return sp.brightness_logpdf(brightness) + sp.colors_logpdf(colors)


def position_logprior(pos, center, sigma):
    ''' Isotropic Gaussian on position, centered on *center*. '''
    pos = np.asarray(pos, dtype=float)
    if not np.all(np.isfinite(pos)):
        return -np.inf
    return float(np.sum(stats.norm.logpdf(pos, loc=center, scale=sigma)))


def shape_logprior(frac_dev, ab, angle, scale, prior):
    '''
    Log prior of galaxy shape (*prior* is the galaxy `SourcePrior`).

    -inf unless frac_dev in [0, 1], ab in (0, 1] and scale > 0.
    '''
    if not (np.isfinite(frac_dev) and np.isfinite(ab) and
            np.isfinite(angle) and np.isfinite(scale)):
        return -np.inf
    if frac_dev < 0. or frac_dev > 1.:
        return -np.inf
    if ab <= 0. or ab > 1.:
        return -np.inf
    if scale <= 0.:
        return -np.inf
    # frac_dev uniform, angle flat: both contribute zero.
    return prior.ab_logpdf(ab) + prior.scale_logpdf(scale)
