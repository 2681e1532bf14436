'''
This file is part of the skymcmc project.
Licensed under the GPLv2; see the file COPYING for details.

`driver.py`
===========

Runs several independent Metropolis-Hastings chains for one source
and reports the potential scale reduction factor as chains complete.

Chains share only read-only inputs (images, PSFs, priors); each one
gets its own seed, spawned from a single `numpy.random.SeedSequence`,
so a run is reproducible from *seed* and gives the same chains
whether they are run serially or in a process pool.
'''
import logging
from collections import namedtuple
import concurrent.futures as cf

import numpy as np

from skymcmc.diagnostics import potential_scale_reduction_factor
from skymcmc.likelihood import (make_star_logpdf, make_galaxy_logpdf,
                                extract_star_state, extract_galaxy_state)
from skymcmc.mcmc import run_mh_sampler_with_warmup, init_star_params

__all__ = ['ChainsResult', 'DEFAULT_MCMC_ARGS', 'run_multi_chain_mcmc',
           'run_single_star_mcmc', 'run_single_galaxy_mcmc']

logger = logging.getLogger('skymcmc.driver')
def logmsg(*args):
    logger.info(' '.join(map(str, args)))

ChainsResult = namedtuple('ChainsResult', ['chains', 'logprobs', 'psrfs'])

DEFAULT_MCMC_ARGS = dict(num_chains=5,
                         num_samples=1000,
                         num_warmup=200,
                         warmup_prop_scale=.1,
                         chain_prop_scale=.05,
                         print_skip=250)


def _run_chain(lnpdf, th0, init, seed, chain_index, num_samples, num_warmup,
               kwargs):
    rng = np.random.default_rng(seed)
    if init is None:
        th = init_star_params(th0, rng=rng)
    else:
        th = init(th0, rng)
    logmsg('---- chain', chain_index + 1, '----')
    samples, lls = run_mh_sampler_with_warmup(lnpdf, th, num_samples,
                                              num_warmup, keep_warmup=True,
                                              rng=rng, **kwargs)
    thlast = samples[-1, :]
    logmsg(' chain', chain_index + 1, 'final log posterior', lls[-1],
           'at', thlast)
    return samples[num_warmup:, :], lls[num_warmup:]


def run_multi_chain_mcmc(lnpdf, th0, num_chains=5, num_samples=1000,
                         num_warmup=200, warmup_prop_scale=.1,
                         chain_prop_scale=.05, print_skip=250, init=None,
                         threads=None, seed=None, callback=None):
    '''
    Runs *num_chains* chains of `run_mh_sampler_with_warmup` on
    *lnpdf*, each from its own perturbation of *th0*, and keeps the
    post-warmup samples.

    Args:
      * *init*: ``init(th0, rng) -> th`` chain starting point; default
        `skymcmc.mcmc.init_star_params`
      * *threads*: if > 1, run chains in a process pool of that size;
        *lnpdf*, *init* and *callback* must then be picklable
      * *seed*: int or None, seeds all chains
      * *callback*: sampler progress hook, see
        `skymcmc.mcmc.run_mh_sampler`

    Returns `ChainsResult(chains, logprobs, psrfs)`: lists of
    (num_samples, D) arrays and num_samples-vectors, and the PSRF
    vectors computed over the first c chains for c = 3 ... num_chains
    (all nan, with a warning, if num_samples < 2).
    '''
    if num_chains < 1:
        raise ValueError('num_chains must be >= 1')
    seeds = np.random.SeedSequence(seed).spawn(num_chains)
    kwargs = dict(print_skip=print_skip,
                  warmup_prop_scale=warmup_prop_scale,
                  chain_prop_scale=chain_prop_scale,
                  callback=callback)
    args = [(lnpdf, th0, init, s, c, num_samples, num_warmup, kwargs)
            for c, s in enumerate(seeds)]

    chains, logprobs, psrfs = [], [], []

    def collect(result):
        samples, lls = result
        chains.append(samples)
        logprobs.append(lls)
        # report PSRF from the third chain on
        if len(chains) > 2:
            if len(samples) < 2:
                logger.warning('PSRF undefined with %i sample(s) per chain',
                               len(samples))
                psrf = np.full(samples.shape[1], np.nan)
            else:
                psrf = potential_scale_reduction_factor(chains)
            psrfs.append(psrf)
            logmsg(' potential scale red factor (%i chains):' % len(chains),
                   np.round(psrf, 4))

    if threads is not None and threads > 1:
        logmsg('Running', num_chains, 'chains in', threads, 'processes')
        with cf.ProcessPoolExecutor(max_workers=int(threads)) as ex:
            futs = [ex.submit(_run_chain, *a) for a in args]
            # results in chain order
            for f in futs:
                collect(f.result())
    else:
        for a in args:
            collect(_run_chain(*a))

    return ChainsResult(chains, logprobs, psrfs)


def _run_single_source_mcmc(make_logpdf, extract_state, sources, images,
                            patches, prior, fit_position, mcmc_args):
    if len(sources) == 0:
        raise ValueError('No sources given')
    ce = sources[0]
    lnpdf, lnprior = make_logpdf(images, patches, ce.pos, prior=prior,
                                 fit_position=fit_position)
    state = extract_state(ce)
    logmsg(' initial log posterior:', lnpdf(state))
    logmsg(' initial log prior:', lnprior(state))

    args = DEFAULT_MCMC_ARGS.copy()
    args.update(mcmc_args)
    logmsg('--- chain prop scale:', args['chain_prop_scale'])
    return run_multi_chain_mcmc(lnpdf, state, **args)


def run_single_star_mcmc(sources, images, patches=None, prior=None,
                         fit_position=False, **kwargs):
    '''
    Samples the star parameters of the first catalog entry in
    *sources* given *images* (and optional *patches*).  Extra keyword
    arguments go to `run_multi_chain_mcmc`, overriding
    `DEFAULT_MCMC_ARGS`.
    '''
    return _run_single_source_mcmc(make_star_logpdf, extract_star_state,
                                   sources, images, patches, prior,
                                   fit_position, kwargs)


def run_single_galaxy_mcmc(sources, images, patches=None, prior=None,
                           fit_position=False, **kwargs):
    '''
    As `run_single_star_mcmc`, over the 11 galaxy parameters.
    '''
    return _run_single_source_mcmc(make_galaxy_logpdf, extract_galaxy_state,
                                   sources, images, patches, prior,
                                   fit_position, kwargs)
