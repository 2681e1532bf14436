'''
Fluxes in the five SDSS bands, and the (log reference flux, colors)
parameterization the sampler works in.

Fluxes are in nanomaggies.  The reference band is r; the four colors
are the log flux ratios u-g, g-r, r-i, i-z:

    color[b] = log(flux[b+1]) - log(flux[b])
'''
import numpy as np

__all__ = ['BANDS', 'NBANDS', 'REFERENCE_BAND', 'band_index',
           'colors_to_fluxes', 'fluxes_to_colors',
           'nanomaggies_to_mag', 'mag_to_nanomaggies']

BANDS = 'ugriz'
NBANDS = len(BANDS)
# r
REFERENCE_BAND = 2


def band_index(band):
    '''
    Returns the integer band index for a band name ('u'..'z') or an
    integer index in [0, 5).
    '''
    if isinstance(band, str):
        if len(band) != 1 or band not in BANDS:
            raise ValueError('Unknown band "%s"; expected one of %s' %
                             (band, BANDS))
        return BANDS.index(band)
    b = int(band)
    if b < 0 or b >= NBANDS:
        raise ValueError('Band index %i out of range [0, %i)' % (b, NBANDS))
    return b


def colors_to_fluxes(log_ref_flux, colors):
    '''
    Converts log reference (r-band) flux and the four color log-ratios
    into a length-5 vector of fluxes: the reference flux scaled by the
    exponentiated cumulative sum of colors outward from r.

    >>> np.round(colors_to_fluxes(np.log(10.), [-1., 0., 1., 2.]), 4)
    array([ 27.1828,  10.    ,  10.    ,  27.1828, 200.8554])
    '''
    colors = np.asarray(colors, dtype=float)
    if colors.shape != (NBANDS - 1,):
        raise ValueError('Expected %i colors, got shape %s' %
                         (NBANDS - 1, str(colors.shape)))
    rb = REFERENCE_BAND
    logf = np.empty(NBANDS)
    logf[rb] = log_ref_flux
    # redward of r: add colors
    logf[rb + 1:] = log_ref_flux + np.cumsum(colors[rb:])
    # blueward of r: subtract colors
    logf[:rb] = log_ref_flux - np.cumsum(colors[:rb][::-1])[::-1]
    return np.exp(logf)


def fluxes_to_colors(fluxes):
    '''
    Inverse of `colors_to_fluxes`: returns (log_ref_flux, colors).
    Fluxes must be positive.
    '''
    fluxes = np.asarray(fluxes, dtype=float)
    if np.any(fluxes <= 0):
        raise ValueError('fluxes_to_colors: fluxes must be > 0: %s' %
                         str(fluxes))
    logf = np.log(fluxes)
    return logf[REFERENCE_BAND], np.diff(logf)


def mag_to_nanomaggies(mag):
    return 10. ** ((mag - 22.5) / -2.5)


def nanomaggies_to_mag(nmgy):
    return -2.5 * (np.log10(nmgy) - 9)
