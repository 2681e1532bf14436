'''
This file is part of the skymcmc project.
Licensed under the GPLv2; see the file COPYING for details.

`diagnostics.py`
================

Convergence diagnostics and summaries of MCMC chains.
'''
import logging

import numpy as np

from skymcmc.brightness import BANDS, REFERENCE_BAND, fluxes_to_colors

__all__ = ['potential_scale_reduction_factor', 'chains_to_table',
           'samples_to_catalog_row', 'catalog_entry_to_catalog_row',
           'write_chains', 'read_chains']

logger = logging.getLogger('skymcmc.diagnostics')


def potential_scale_reduction_factor(chains):
    '''
    Gelman-Rubin potential scale reduction factor, per dimension, for
    M >= 2 chains each of shape (N, D), or (N,) for one parameter:

        B    = N/(M-1) * sum_m (mean_m - grand mean)^2
        W    = mean_m var_m                (sample variances)
        Vhat = (N-1)/N * W + (M+1)/(N*M) * B
        PSRF = Vhat / W

    Values near 1 indicate good mixing.

    A dimension with W == 0 (every chain constant) gives inf, or nan
    if the chains also agree (B == 0); no exception is raised.
    '''
    chains = [np.asarray(c, dtype=float) for c in chains]
    # a 1-D chain is N samples of one parameter
    chains = [c.reshape(-1, 1) if c.ndim == 1 else c for c in chains]
    M = len(chains)
    if M < 2:
        raise ValueError('PSRF needs at least 2 chains, got %i' % M)
    N, D = chains[0].shape
    for c in chains:
        if c.shape != (N, D):
            raise ValueError('PSRF: chains must all have shape %s, got %s' %
                             (str((N, D)), str(c.shape)))
    if N < 2:
        raise ValueError('PSRF needs at least 2 samples per chain')

    means = np.array([c.mean(axis=0) for c in chains])
    variances = np.array([c.var(axis=0, ddof=1) for c in chains])
    gmu = means.mean(axis=0)

    B = float(N) / (M - 1.) * np.sum((means - gmu)**2, axis=0)
    W = variances.mean(axis=0)
    Vhat = (N - 1.) / N * W + (M + 1.) / (N * M) * B
    with np.errstate(divide='ignore', invalid='ignore'):
        psrf = Vhat / W
    if np.any(W == 0):
        logger.warning('PSRF: zero within-chain variance in dimension(s) %s',
                       np.flatnonzero(W == 0).tolist())
    return psrf


def chains_to_table(chains, logprobs, colnames):
    '''
    Stacks *chains* (list of (N_c, D) arrays) into a numpy record
    array with one column per name in *colnames*, plus `lls` (the
    log-probability trace) and `chain` (1-based chain index).
    '''
    samples = np.vstack(chains)
    if samples.shape[1] != len(colnames):
        raise ValueError('Got %i column names for %i parameters' %
                         (len(colnames), samples.shape[1]))
    lls = np.hstack(logprobs)
    chain_id = np.hstack([np.zeros(len(c), np.int32) + (i + 1)
                          for i, c in enumerate(chains)])
    cols = [samples[:, i] for i in range(samples.shape[1])]
    return np.rec.fromarrays(cols + [lls, chain_id],
                             names=list(colnames) + ['lls', 'chain'])


def samples_to_catalog_row(samples, is_star=True, objid='mcmc'):
    '''
    Posterior summary of star (7 columns) or galaxy (11 columns)
    samples: means of reference-band flux, color log-ratios, position
    and shape, and standard deviations of log flux and colors.

    Returns a dict; galaxy-only fields are nan for stars.
    '''
    samples = np.atleast_2d(np.asarray(samples, dtype=float))
    lnr = samples[:, 0]
    colors = samples[:, 1:5]
    row = dict(objid=objid,
               is_star=bool(is_star),
               right_ascension_deg=np.mean(samples[:, 5]),
               declination_deg=np.mean(samples[:, 6]),
               reference_band_flux_nmgy=np.mean(np.exp(lnr)),
               log_reference_band_flux_stderr=np.std(lnr))
    for i in range(len(BANDS) - 1):
        name = 'color_log_ratio_%s%s' % (BANDS[i], BANDS[i + 1])
        row[name] = np.mean(colors[:, i])
        row[name + '_stderr'] = np.std(colors[:, i])
    if is_star:
        gal = [np.nan] * 4
    else:
        gal = [np.mean(samples[:, 7]), np.mean(samples[:, 8]),
               np.rad2deg(np.mean(samples[:, 9])), np.mean(samples[:, 10])]
    (row['de_vaucouleurs_mixture_weight'], row['minor_major_axis_ratio'],
     row['angle_deg'], row['half_light_radius_px']) = gal
    row['reference_band'] = BANDS[REFERENCE_BAND]
    return row


def catalog_entry_to_catalog_row(entry, objid=None):
    '''
    The row `samples_to_catalog_row` would give for a catalog entry
    known exactly: its fluxes and shape, with nan standard errors.
    For comparing a posterior summary against the truth.
    '''
    if objid is None:
        objid = entry.objid
    lnr, colors = fluxes_to_colors(entry.getFluxes())
    row = dict(objid=objid,
               is_star=entry.is_star,
               right_ascension_deg=entry.pos[0],
               declination_deg=entry.pos[1],
               reference_band_flux_nmgy=np.exp(lnr),
               log_reference_band_flux_stderr=np.nan)
    for i in range(len(BANDS) - 1):
        name = 'color_log_ratio_%s%s' % (BANDS[i], BANDS[i + 1])
        row[name] = colors[i]
        row[name + '_stderr'] = np.nan
    if entry.is_star:
        gal = [np.nan] * 4
    else:
        gal = [entry.gal_frac_dev, entry.gal_ab,
               np.rad2deg(entry.gal_angle), entry.gal_scale]
    (row['de_vaucouleurs_mixture_weight'], row['minor_major_axis_ratio'],
     row['angle_deg'], row['half_light_radius_px']) = gal
    row['reference_band'] = BANDS[REFERENCE_BAND]
    return row


def write_chains(filename, table, header=None):
    '''
    Writes a `chains_to_table` record array to a FITS binary table,
    overwriting *filename*.
    '''
    import fitsio
    fitsio.write(filename, table, header=header, clobber=True)
    logger.info('Wrote %i samples to %s', len(table), filename)


def read_chains(filename):
    import fitsio
    return fitsio.read(filename)
