'''
This file is part of the skymcmc project.
Licensed under the GPLv2; see the file COPYING for details.

`render.py`
===========

Expected-photon-rate images of stars and galaxies.

Everything here works on plain numpy pixel buffers indexed
[row, col].  A source is drawn as a sum of 2-D Gaussians: one per PSF
component for a star, and (profile components) x (PSF components)
for a galaxy, where the convolution of two Gaussians is done
analytically by adding covariances.  Each Gaussian is evaluated only
within a square window around its mean.
'''
import logging

import numpy as np

from skymcmc.mixture_profiles import galaxy_prototypes, get_bvn_cov
from skymcmc.patch import SkyPatch

__all__ = ['NumericDegeneracyError', 'GAUSSIAN_RADIUS',
           'get_gaussian_window', 'write_gaussian',
           'write_star_unit_flux', 'write_galaxy_unit_flux',
           'render_patch', 'render_image', 'render_images']

logger = logging.getLogger('skymcmc.render')
def logverb(*args):
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(' '.join(map(str, args)))

# MAGIC -- half-width (pixels) of the window in which each Gaussian is
# evaluated; it is taken to be negligible beyond.
GAUSSIAN_RADIUS = 50


class NumericDegeneracyError(FloatingPointError):
    '''
    A covariance that cannot be inverted, or an expected rate that is
    not positive: a modeling or configuration bug, not a rejectable
    parameter setting.
    '''
    pass


def get_gaussian_window(mean, H, W, radius=GAUSSIAN_RADIUS):
    '''
    Returns (row slice, col slice) of the square window of half-width
    *radius* centered on round(*mean*), clipped to an (H, W) buffer.
    Either slice may be empty.
    '''
    hm = int(np.round(mean[0]))
    wm = int(np.round(mean[1]))
    h0 = min(max(0, hm - radius), H)
    h1 = max(min(H, hm + radius + 1), h0)
    w0 = min(max(0, wm - radius), W)
    w1 = max(min(W, wm + radius + 1), w0)
    return slice(h0, h1), slice(w0, w1)


def write_gaussian(the_mean, the_cov, intensity, pixels,
                   radius=GAUSSIAN_RADIUS):
    '''
    Adds a 2-D Gaussian bump of total mass *intensity*, centered at
    *the_mean* (row, col) with covariance *the_cov*, into *pixels*
    (in place), evaluating only within *radius* pixels of the mean.

    Returns *pixels*.

    Raises NumericDegeneracyError if the covariance is not a finite,
    symmetric positive-definite matrix.
    '''
    the_mean = np.asarray(the_mean, dtype=float)
    the_cov = np.asarray(the_cov, dtype=float)
    if not (np.all(np.isfinite(the_mean)) and np.all(np.isfinite(the_cov))):
        raise NumericDegeneracyError(
            'write_gaussian: non-finite mean %s or covariance %s' %
            (the_mean.tolist(), the_cov.tolist()))
    a, b, c, d = the_cov.ravel()
    det = a * d - b * c
    if not (a > 0 and det > 0) or not np.isclose(b, c, rtol=1e-8, atol=0):
        raise NumericDegeneracyError(
            'write_gaussian: covariance is not positive definite: %s' %
            the_cov.tolist())
    try:
        the_precision = np.linalg.inv(the_cov)
    except np.linalg.LinAlgError as e:
        raise NumericDegeneracyError(
            'write_gaussian: singular covariance %s' %
            the_cov.tolist()) from e
    norm = np.sqrt(np.linalg.det(the_precision)) / (2. * np.pi)
    if not np.isfinite(norm):
        raise NumericDegeneracyError(
            'write_gaussian: degenerate covariance %s' % the_cov.tolist())

    H, W = pixels.shape
    hslc, wslc = get_gaussian_window(the_mean, H, W, radius)
    if hslc.start == hslc.stop or wslc.start == wslc.stop:
        return pixels

    dy = the_mean[0] - np.arange(hslc.start, hslc.stop)[:, np.newaxis]
    dx = the_mean[1] - np.arange(wslc.start, wslc.stop)[np.newaxis, :]
    ypy = (the_precision[0, 0] * dy**2 +
           (the_precision[0, 1] + the_precision[1, 0]) * dy * dx +
           the_precision[1, 1] * dx**2)
    pixels[hslc, wslc] += (intensity * norm) * np.exp(-0.5 * ypy)
    return pixels


def _pixel_center(pos, wcs, offset):
    # WCS gives (x, y); buffers want (row, col).
    x, y = wcs.positionToPixel(pos)
    return np.array([y, x], dtype=float) - np.asarray(offset, dtype=float)


def write_star_unit_flux(pos, psf, wcs, iota, pixels,
                         offset=(0., 0.), flux=1.):
    '''
    Adds a star at world position *pos* to *pixels*: one Gaussian per
    PSF component.  Defaults to unit flux.

    *offset* is the (row, col) of pixels[0,0] in the image.
    '''
    center = _pixel_center(pos, wcs, offset)
    for comp in psf:
        write_gaussian(center + comp.xiBar, comp.tauBar,
                       flux * iota * comp.alphaBar, pixels)
    return pixels


def write_galaxy_unit_flux(pos, psf, wcs, iota, gal_frac_dev, gal_ab,
                           gal_angle, gal_scale, pixels,
                           offset=(0., 0.), flux=1.):
    '''
    Adds a galaxy to *pixels*: the (dev, exp) profile mixtures,
    weighted (frac_dev, 1 - frac_dev), each squished by the galaxy's
    shape covariance and convolved with every PSF component.
    Defaults to unit flux.
    '''
    center = _pixel_center(pos, wcs, offset)
    e_devs = (gal_frac_dev, 1. - gal_frac_dev)
    XiXi = get_bvn_cov(gal_ab, gal_angle, gal_scale)
    for e_dev, proto in zip(e_devs, galaxy_prototypes):
        # A zero-weight profile contributes nothing.
        if e_dev == 0.:
            continue
        for gproto in proto:
            for comp in psf:
                the_cov = comp.tauBar + gproto.nuBar * XiXi
                intensity = (flux * iota * comp.alphaBar * e_dev *
                             gproto.etaBar)
                write_gaussian(center + comp.xiBar, the_cov, intensity,
                               pixels)
    return pixels


def render_patch(img, patch, sources, out=None):
    '''
    Generates the expected-rate model of *sources* (CatalogEntry or
    source-model objects) on *patch* of image *img*: flat sky
    (sky level * iota) plus each source's flux in the image's band.

    If *out* is given (an array of the patch's shape) it is
    overwritten and returned, so callers can reuse one buffer across
    evaluations.
    '''
    iota = img.getIota()
    if out is None:
        out = np.empty(patch.shape, dtype=float)
    elif out.shape != patch.shape:
        raise ValueError('render_patch: output buffer shape %s != patch '
                         'shape %s' % (str(out.shape), str(patch.shape)))
    out.fill(0.)
    img.getSky().addTo(out, scale=iota)
    offset = patch.bitmap_offset
    logverb('render_patch:', patch, 'with', len(sources), 'sources')
    for src in sources:
        src.toSourceModel().renderInto(out, img, offset)
    return out


def render_image(img, sources, out=None):
    ''' Renders *sources* over the whole of *img*. '''
    return render_patch(img, SkyPatch.fromImage(img), sources, out=out)


def render_images(images, patches, sources):
    '''
    One expected-rate buffer per image; *patches* may be None (whole
    images) or a list parallel to *images* (None entries allowed).
    '''
    if patches is None:
        patches = [None] * len(images)
    mods = []
    for img, patch in zip(images, patches):
        if patch is None:
            mods.append(render_image(img, sources))
        else:
            mods.append(render_patch(img, patch, sources))
    return mods
