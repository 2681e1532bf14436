'''
This file is part of the skymcmc project.
Licensed under the GPLv2; see the file COPYING for details.

`mixture_profiles.py`
=====================

Mixture-of-Gaussians approximations of the de Vaucouleurs and
exponential galaxy profiles, and the bivariate-normal shape
covariance used to squish and rotate them.

The amplitudes and variances are the Hogg & Lang (2013) "lux"
mixtures (8 components for dev, 6 for exp), in units of the
half-light radius.  Amplitudes are normalized to unit total flux.
'''
import numpy as np

__all__ = ['GalaxyComponent', 'galaxy_prototypes', 'dev_prototype',
           'exp_prototype', 'get_bvn_cov', 'DEV', 'EXP']

# index into galaxy_prototypes
DEV = 0
EXP = 1

_dev_amp = np.array([4.26347652e-02, 2.40127183e-01, 6.85907632e-01,
                     1.51937350e+00, 2.83627243e+00, 4.46467501e+00,
                     5.72440830e+00, 5.60989349e+00])
_dev_var = np.array([2.23759216e-04, 1.00220099e-03, 4.18731126e-03,
                     1.69432589e-02, 6.84850479e-02, 2.87207080e-01,
                     1.33320254e+00, 8.40215071e+00])

_exp_amp = np.array([2.34853813e-03, 3.07995260e-02, 2.23364214e-01,
                     1.17949102e+00, 4.33873750e+00, 5.99820770e+00])
_exp_var = np.array([1.20078965e-03, 8.84526493e-03, 3.91463084e-02,
                     1.39976817e-01, 4.60962500e-01, 1.50159566e+00])


class GalaxyComponent(object):
    '''
    One Gaussian of a galaxy profile mixture: weight *etaBar* and
    multiplier *nuBar* applied to the galaxy's shape covariance.
    '''
    __slots__ = ('etaBar', 'nuBar')

    def __init__(self, etaBar, nuBar):
        object.__setattr__(self, 'etaBar', float(etaBar))
        object.__setattr__(self, 'nuBar', float(nuBar))

    def __setattr__(self, name, val):
        raise AttributeError('GalaxyComponent is read-only')

    def __repr__(self):
        return 'GalaxyComponent(etaBar=%g, nuBar=%g)' % (self.etaBar,
                                                         self.nuBar)

    def __eq__(self, other):
        return (isinstance(other, GalaxyComponent) and
                self.etaBar == other.etaBar and self.nuBar == other.nuBar)

    def __hash__(self):
        return hash((self.etaBar, self.nuBar))


def _make_prototype(amp, var):
    return tuple(GalaxyComponent(a, v)
                 for a, v in zip(amp / amp.sum(), var))


dev_prototype = _make_prototype(_dev_amp, _dev_var)
exp_prototype = _make_prototype(_exp_amp, _exp_var)

# (dev, exp): the order matches the (frac_dev, 1 - frac_dev) weights.
galaxy_prototypes = (dev_prototype, exp_prototype)


def get_bvn_cov(ab, angle, scale):
    '''
    Returns the 2x2 covariance of a bivariate normal with minor/major
    axis ratio *ab* in (0, 1], major axis rotated by *angle* radians,
    and major-axis standard deviation *scale*:

        scale**2 * R diag(1, ab**2) R^T
    '''
    if not (scale > 0):
        raise ValueError('get_bvn_cov: scale must be > 0, got %r' % scale)
    if not (0. < ab <= 1.):
        raise ValueError('get_bvn_cov: axis ratio must be in (0,1], got %r'
                         % ab)
    cp = np.cos(angle)
    sp = np.sin(angle)
    ab_term = ab**2 - 1.
    scale2 = scale**2
    off = -scale2 * cp * sp * ab_term
    return np.array([[scale2 * (1. + ab_term * sp**2), off],
                     [off, scale2 * (1. + ab_term * cp**2)]])
