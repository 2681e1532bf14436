'''
This file is part of the skymcmc project.
Licensed under the GPLv2; see the file COPYING for details.

`likelihood.py`
===============

Log posterior densities of a single source's parameter vector given
a set of observed images.

A star's parameter vector is

    [lnr, cug, cgr, cri, ciz, ra, dec]

(log r-band flux, the four color log-ratios and the world position);
a galaxy appends

    [gdev, gaxis, gangle, gscale]

(de Vaucouleurs weight, minor/major axis ratio, position angle in
radians, half-light radius in pixels).

The Poisson log-likelihood is computed up to the additive constant
-sum(log(data!)), which does not depend on the parameters.  Values are
therefore comparable between parameter settings for a fixed data set,
but not across data sets; use `poisson_lnpdf` for normalized values.
'''
import logging

import numpy as np
from scipy import stats

from skymcmc.brightness import colors_to_fluxes, fluxes_to_colors
from skymcmc.catalog import CatalogEntry
from skymcmc.patch import SkyPatch
from skymcmc.priors import (construct_prior, color_logprior,
                            position_logprior, shape_logprior)
from skymcmc.render import render_patch, NumericDegeneracyError

__all__ = ['star_param_names', 'galaxy_param_names',
           'poisson_loglike', 'poisson_lnpdf', 'poisson_sample',
           'state_to_catalog_entry', 'catalog_entry_to_state',
           'extract_star_state', 'extract_galaxy_state',
           'SourceLogPdf', 'StarLogPdf', 'GalaxyLogPdf',
           'make_star_logpdf', 'make_galaxy_logpdf']

logger = logging.getLogger('skymcmc.likelihood')
def logverb(*args):
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(' '.join(map(str, args)))

star_param_names = ['lnr', 'cug', 'cgr', 'cri', 'ciz', 'ra', 'dec']
galaxy_param_names = star_param_names + ['gdev', 'gaxis', 'gangle', 'gscale']

# Shape written into star catalog entries; never rendered.
_STAR_GAL_SHAPE = (.1, .7, np.pi / 4., 4.)


def poisson_loglike(data, rate):
    '''
    sum(data * log(rate) - rate), omitting log(data!).

    Raises NumericDegeneracyError if any rate is not positive and
    finite.
    '''
    rate = np.asarray(rate)
    if not np.all(rate > 0) or not np.all(np.isfinite(rate)):
        bad = np.flatnonzero(~(rate > 0) | ~np.isfinite(rate))
        raise NumericDegeneracyError(
            'poisson_loglike: %i non-positive or non-finite rates '
            '(first at flat index %i, value %r)' %
            (len(bad), bad[0], rate.flat[bad[0]]))
    return float(np.sum(data * np.log(rate) - rate))


def poisson_lnpdf(data, lam):
    '''
    Normalized Poisson log probability of *data* (rounded to integer
    counts) given rate *lam*, elementwise.
    '''
    return stats.poisson.logpmf(np.round(data), lam)


def poisson_sample(lam, rng=None):
    '''
    Elementwise Poisson draws (as floats) for an array of rates: a
    noisy realization of an expected-rate image.
    '''
    rng = np.random.default_rng(rng)
    return rng.poisson(np.asarray(lam, dtype=float)).astype(float)


def state_to_catalog_entry(state, is_star, fixed_pos=None):
    '''
    Builds the `CatalogEntry` described by parameter vector *state*.
    The position is taken from *fixed_pos* if given, otherwise from
    the state's (ra, dec).
    '''
    state = np.asarray(state, dtype=float)
    fluxes = colors_to_fluxes(state[0], state[1:5])
    pos = state[5:7] if fixed_pos is None else fixed_pos
    if is_star:
        shape = _STAR_GAL_SHAPE
    else:
        shape = state[7:11]
    return CatalogEntry(pos, is_star, fluxes, fluxes, *shape)


def catalog_entry_to_state(entry, is_star=None):
    '''
    The parameter vector of *entry*, as a star or galaxy according to
    *is_star* (default: the entry's own type).
    '''
    if is_star is None:
        is_star = entry.is_star
    fluxes = entry.star_fluxes if is_star else entry.gal_fluxes
    lnr, colors = fluxes_to_colors(fluxes)
    state = np.concatenate([[lnr], colors, entry.pos])
    if not is_star:
        state = np.concatenate([state, [entry.gal_frac_dev, entry.gal_ab,
                                        entry.gal_angle, entry.gal_scale]])
    return state


def extract_star_state(entry):
    return catalog_entry_to_state(entry, is_star=True)


def extract_galaxy_state(entry):
    return catalog_entry_to_state(entry, is_star=False)


class SourceLogPdf(object):
    '''
    Log posterior of one source over a set of images.

    Callable: ``logpdf(state) -> float``.  The prior is evaluated
    first; a -inf prior is returned as-is without rendering.

    Args:
      * *images*: list of :class:`skymcmc.image.Image`
      * *patches*: None, or a list parallel to *images* of
        :class:`skymcmc.patch.SkyPatch` (None entries mean the whole
        image)
      * *fixed_pos*: world position at which the source is rendered
      * *prior*: :class:`skymcmc.priors.PriorParams`; default
        `construct_prior()`
      * *fit_position*: render at the state's (ra, dec) instead, with
        an isotropic Gaussian prior of width *position_sigma* around
        *fixed_pos*.  Otherwise (ra, dec) do not enter the density.

    Only pixels in each patch's active bitmap contribute.  Each
    instance owns one render buffer per image, reused across calls.
    '''
    is_star = None
    param_names = None

    def __init__(self, images, patches, fixed_pos, prior=None,
                 fit_position=False, position_sigma=1e-4):
        if prior is None:
            prior = construct_prior()
        if patches is None:
            patches = [None] * len(images)
        if len(patches) != len(images):
            raise ValueError('Got %i patches for %i images' %
                             (len(patches), len(images)))
        self.images = list(images)
        self.patches = [SkyPatch.fromImage(img) if p is None else p
                        for img, p in zip(self.images, patches)]
        self.fixed_pos = np.array(fixed_pos, dtype=float)
        self.prior = prior
        self.fit_position = fit_position
        self.position_sigma = position_sigma

        self.data = [p.getData(img)
                     for img, p in zip(self.images, self.patches)]
        self.masks = [p.active_pixel_bitmap for p in self.patches]
        self.buffers = [np.empty(p.shape) for p in self.patches]

    def __str__(self):
        return '%s over %i images' % (self.__class__.__name__,
                                      len(self.images))

    def _check_state(self, state):
        state = np.asarray(state, dtype=float)
        if state.shape != (len(self.param_names),):
            raise ValueError('%s: expected %i parameters, got shape %s' %
                             (self.__class__.__name__,
                              len(self.param_names), str(state.shape)))
        return state

    def logprior(self, state):
        state = self._check_state(state)
        lp = color_logprior(state[0], state[1:5], self.prior, self.is_star)
        if self.fit_position:
            lp += position_logprior(state[5:7], self.fixed_pos,
                                    self.position_sigma)
        return lp

    def render(self, state):
        '''
        Renders *state* into this object's buffers; returns them.
        '''
        state = self._check_state(state)
        pos = None if self.fit_position else self.fixed_pos
        ce = state_to_catalog_entry(state, self.is_star, fixed_pos=pos)
        for img, patch, buf in zip(self.images, self.patches, self.buffers):
            render_patch(img, patch, [ce], out=buf)
        return self.buffers

    def loglike(self, state):
        ll = 0.
        for mod, dat, mask in zip(self.render(state), self.data, self.masks):
            ll += poisson_loglike(dat[mask], mod[mask])
        return ll

    def __call__(self, state):
        lp = self.logprior(state)
        # also catches nan
        if not lp > -np.inf:
            logverb('Prior is', lp, 'for state', state)
            return -np.inf
        return self.loglike(state) + lp


class StarLogPdf(SourceLogPdf):
    is_star = True
    param_names = star_param_names


class GalaxyLogPdf(SourceLogPdf):
    is_star = False
    param_names = galaxy_param_names

    def logprior(self, state):
        state = self._check_state(state)
        lp = shape_logprior(state[7], state[8], state[9], state[10],
                            self.prior.galaxy)
        if not lp > -np.inf:
            return -np.inf
        return lp + super(GalaxyLogPdf, self).logprior(state)


def make_star_logpdf(images, patches, fixed_pos, prior=None,
                     fit_position=False, position_sigma=1e-4):
    '''
    Returns (star_logpdf, star_logprior) over the 7 star parameters.
    See `SourceLogPdf` for the arguments.
    '''
    lnpdf = StarLogPdf(images, patches, fixed_pos, prior=prior,
                       fit_position=fit_position,
                       position_sigma=position_sigma)
    return lnpdf, lnpdf.logprior


def make_galaxy_logpdf(images, patches, fixed_pos, prior=None,
                       fit_position=False, position_sigma=1e-4):
    '''
    Returns (galaxy_logpdf, galaxy_logprior) over the 11 galaxy
    parameters.
    '''
    lnpdf = GalaxyLogPdf(images, patches, fixed_pos, prior=prior,
                         fit_position=fit_position,
                         position_sigma=position_sigma)
    return lnpdf, lnpdf.logprior
