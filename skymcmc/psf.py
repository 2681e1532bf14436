'''
This file is part of the skymcmc project.
Licensed under the GPLv2; see the file COPYING for details.

`psf.py`
========

Mixture-of-Gaussians point-spread functions.

A PSF is an ordered sequence of `PsfComponent` objects, each a
weighted 2-D Gaussian in pixel (row, col) space.  PSFs are supplied
by the I/O layer per image and are never modified by the renderer.
'''
import numpy as np

__all__ = ['PsfComponent', 'GaussianMixturePSF', 'NCircularGaussianPSF']


def _readonly(a, shape):
    a = np.array(a, dtype=float).reshape(shape)
    a.setflags(write=False)
    return a


class PsfComponent(object):
    '''
    A single PSF Gaussian: weight *alphaBar*, mean offset *xiBar*
    (2-vector, pixels) and covariance *tauBar* (2x2, pixels^2).
    '''
    __slots__ = ('alphaBar', 'xiBar', 'tauBar')

    def __init__(self, alphaBar, xiBar, tauBar):
        object.__setattr__(self, 'alphaBar', float(alphaBar))
        object.__setattr__(self, 'xiBar', _readonly(xiBar, (2,)))
        object.__setattr__(self, 'tauBar', _readonly(tauBar, (2, 2)))

    def __setattr__(self, name, val):
        raise AttributeError('PsfComponent is read-only')

    def __repr__(self):
        return ('PsfComponent(alphaBar=%g, xiBar=%s, tauBar=%s)' %
                (self.alphaBar, self.xiBar.tolist(), self.tauBar.tolist()))

    def __eq__(self, other):
        return (isinstance(other, PsfComponent) and
                self.alphaBar == other.alphaBar and
                np.array_equal(self.xiBar, other.xiBar) and
                np.array_equal(self.tauBar, other.tauBar))

    def __hash__(self):
        return hash((self.alphaBar, tuple(self.xiBar),
                     tuple(self.tauBar.ravel())))


class GaussianMixturePSF(object):
    '''
    A PSF model that is a mixture of general 2-D Gaussians
    (characterized by amplitude, mean, covariance).
    '''

    def __init__(self, amp, mean, var):
        '''
        GaussianMixturePSF(amp, mean, var)

        amp:  np array (size K) of Gaussian amplitudes
        mean: np array (size K,2) of means
        var:  np array (size K,2,2) of variances
        '''
        amp = np.atleast_1d(np.asarray(amp, dtype=float))
        K = len(amp)
        mean = np.asarray(mean, dtype=float).reshape((K, 2))
        var = np.asarray(var, dtype=float).reshape((K, 2, 2))
        self.components = tuple(PsfComponent(a, m, v)
                                for a, m, v in zip(amp, mean, var))

    @classmethod
    def fromComponents(clazz, components):
        psf = clazz.__new__(clazz)
        psf.components = tuple(components)
        return psf

    def __str__(self):
        return ('GaussianMixturePSF: amps=' +
                str(tuple(c.alphaBar for c in self.components)))

    def __repr__(self):
        return 'GaussianMixturePSF(%r)' % (self.components,)

    def __len__(self):
        return len(self.components)

    def __iter__(self):
        return iter(self.components)

    def __getitem__(self, k):
        return self.components[k]

    def getComponents(self):
        return self.components

    def getTotalWeight(self):
        return sum(c.alphaBar for c in self.components)


class NCircularGaussianPSF(GaussianMixturePSF):
    '''
    A PSF model using N concentric, circular Gaussians.
    '''

    def __init__(self, sigmas, weights):
        '''
        sigmas: (list of floats) standard deviations of the components

        weights: (list of floats) relative weights of the components;
        normalized so that the total mass of the PSF is 1.0.

        eg,   NCircularGaussianPSF([1.5, 4.0], [0.8, 0.2])
        '''
        assert(len(sigmas) == len(weights))
        sigmas = np.asarray(sigmas, dtype=float)
        weights = np.asarray(weights, dtype=float)
        self.sigmas = sigmas
        K = len(sigmas)
        var = np.zeros((K, 2, 2))
        var[:, 0, 0] = var[:, 1, 1] = sigmas**2
        super(NCircularGaussianPSF, self).__init__(
            weights / weights.sum(), np.zeros((K, 2)), var)

    def __str__(self):
        return ('NCircularGaussianPSF: sigmas [ ' +
                ', '.join(['%.3f' % s for s in self.sigmas]) +
                ' ], weights [ ' +
                ', '.join(['%.3f' % c.alphaBar for c in self.components]) +
                ' ]')
