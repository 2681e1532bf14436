'''
This file is part of the skymcmc project.
Licensed under the GPLv2; see the file COPYING for details.

`mcmc.py`
=========

Random-walk Metropolis-Hastings with a warmup phase.

The sampler owns its current state explicitly and calls the
log-density as a pure function of the parameter vector.  Every
iteration records the current state (the proposal if accepted, else
the previous state) and its log-density; no burn-in is trimmed here.
'''
import logging
from collections import namedtuple

import numpy as np

__all__ = ['SamplerError', 'MHChain', 'run_mh_sampler',
           'run_mh_sampler_with_warmup', 'compute_proposal_scale',
           'init_star_params']

logger = logging.getLogger('skymcmc.mcmc')
def logverb(*args):
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(' '.join(map(str, args)))
def logmsg(*args):
    logger.info(' '.join(map(str, args)))


class SamplerError(RuntimeError):
    '''
    The log-density raised inside a chain.  Carries the *iteration*
    (0-based; -1 for the initial state), the offending parameter
    vector *state* and the sampler *phase* ('warmup' or 'sample').
    The underlying exception is chained as __cause__.
    '''

    def __init__(self, msg, iteration=None, state=None, phase=None):
        super(SamplerError, self).__init__(msg)
        self.iteration = iteration
        self.state = state
        self.phase = phase

    def __reduce__(self):
        return (SamplerError, (self.args[0], self.iteration, self.state,
                               self.phase))


MHChain = namedtuple('MHChain', ['samples', 'lnprobs'])


def _evaluate(lnpdf, th, iteration, phase):
    try:
        return float(lnpdf(th))
    except Exception as e:
        raise SamplerError('log-density failed at %s iteration %i: %s' %
                           (phase, iteration, e),
                           iteration=iteration, state=np.array(th),
                           phase=phase) from e


def run_mh_sampler(lnpdf, th0, N, prop_scale, print_skip=100, rng=None,
                   callback=None, phase='sample'):
    '''
    Runs *N* iterations of Metropolis-Hastings from *th0*, proposing

        th' = th + prop_scale * Normal(0, I)

    and accepting iff log(U(0,1)) < lnpdf(th') - lnpdf(th).  A
    proposal with -inf log-density is always rejected.

    Args:
      * *prop_scale*: scalar or per-dimension proposal std deviation
      * *print_skip*: report progress every this many iterations
        (0 or None: never)
      * *rng*: numpy Generator, seed, or None
      * *callback*: called as ``callback(info)`` when progress is
        reported and once at the end, where *info* is a dict with
        keys phase, iteration, lnprob, naccept, acceptance.

    Returns `MHChain(samples, lnprobs)`: an (N, D) array and an
    N-vector.

    Raises `SamplerError` if *lnpdf* raises.
    '''
    rng = np.random.default_rng(rng)
    thcurr = np.array(th0, dtype=float).ravel()
    D = len(thcurr)
    prop_scale = np.broadcast_to(np.asarray(prop_scale, dtype=float), (D,))

    samples = np.zeros((N, D))
    lnprobs = np.zeros(N)
    naccept = 0

    llcurr = _evaluate(lnpdf, thcurr, -1, phase)
    if not llcurr > -np.inf:
        logger.warning('%s: initial state has log-density %s', phase, llcurr)

    def report(i):
        info = dict(phase=phase, iteration=i, lnprob=llcurr,
                    naccept=naccept, acceptance=float(naccept) / max(i, 1))
        logmsg('  %s %6i : loglike %12.4f   acc. rat %.4f   num acc. %i' %
               (phase, i, llcurr, info['acceptance'], naccept))
        if callback is not None:
            callback(info)

    for i in range(N):
        if print_skip and i > 0 and i % print_skip == 0:
            report(i)

        thprop = thcurr + prop_scale * rng.standard_normal(D)
        llprop = _evaluate(lnpdf, thprop, i, phase)

        aratio = llprop - llcurr
        with np.errstate(divide='ignore'):
            lnu = np.log(rng.uniform())
        if lnu < aratio:
            naccept += 1
            thcurr = thprop
            llcurr = llprop

        samples[i, :] = thcurr
        lnprobs[i] = llcurr

    if N > 0:
        report(N)
    return MHChain(samples, lnprobs)


def run_mh_sampler_with_warmup(lnpdf, th0, num_samples, num_warmup,
                               print_skip=100, keep_warmup=False,
                               warmup_prop_scale=.1, chain_prop_scale=.05,
                               rng=None, callback=None):
    '''
    Runs *num_warmup* Metropolis-Hastings iterations from *th0* with
    proposal scale *warmup_prop_scale*, then *num_samples* more from
    the warmup's final state with *chain_prop_scale*.

    Returns `MHChain(samples, lnprobs)` for the sampling phase; with
    *keep_warmup* the warmup samples are stacked in front, giving
    num_warmup + num_samples rows.
    '''
    rng = np.random.default_rng(rng)
    th0 = np.array(th0, dtype=float).ravel()

    logmsg('warming up ....')
    wchain = run_mh_sampler(lnpdf, th0, num_warmup, warmup_prop_scale,
                            print_skip=print_skip, rng=rng,
                            callback=callback, phase='warmup')
    if num_warmup > 0:
        th0 = wchain.samples[-1, :]

    logmsg('running sampler ....')
    chain = run_mh_sampler(lnpdf, th0, num_samples, chain_prop_scale,
                           print_skip=print_skip, rng=rng,
                           callback=callback, phase='sample')

    if keep_warmup:
        return MHChain(np.vstack([wchain.samples, chain.samples]),
                       np.hstack([wchain.lnprobs, chain.lnprobs]))
    return chain


def compute_proposal_scale(lnpdf, th0, step=1e-4):
    '''
    Rudimentary proposal scale: numerically estimates the diagonal of
    the Hessian of *lnpdf* at *th0* by central differences, and
    returns 1/sqrt(|H_dd|).  Dimensions with zero curvature get inf.

    Captures the relative scale of the parameters, for choosing
    per-dimension proposal widths.
    '''
    th0 = np.array(th0, dtype=float).ravel()
    f0 = lnpdf(th0)
    D = len(th0)
    Hdiag = np.zeros(D)
    for d in range(D):
        the = th0.copy()
        the[d] += step
        fp = lnpdf(the)
        the[d] -= 2. * step
        fm = lnpdf(the)
        Hdiag[d] = (fp - 2. * f0 + fm) / step**2
    logverb('Hessian diagonal:', Hdiag)
    with np.errstate(divide='ignore'):
        return 1. / np.sqrt(np.abs(Hdiag))


def init_star_params(state, radec_scale=1e-5, flux_scale=.01, rng=None):
    '''
    A chain starting point near *state*: brightness and colors
    (the first five parameters) perturbed by *flux_scale* and the
    position (parameters 5 and 6) by *radec_scale* standard-normal
    noise.  Galaxy shape parameters, if present, are left alone;
    shorter vectors are perturbed as far as they go.
    '''
    rng = np.random.default_rng(rng)
    th0 = np.array(state, dtype=float).ravel()
    nflux = len(th0[:5])
    npos = len(th0[5:7])
    th0[:nflux] += flux_scale * rng.standard_normal(nflux)
    th0[5:5 + npos] += radec_scale * rng.standard_normal(npos)
    return th0
