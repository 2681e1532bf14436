import numpy as np

from skymcmc.wcs import NullWCS
from skymcmc.sky import ConstantSky
from skymcmc.brightness import band_index

__all__ = ['Image']


class Image(object):
    '''
    An observed image plus its calibration information: pixels (in
    electron counts), band, WCS, PSF, sky and the nanomaggies ->
    electrons gain.  Images are treated as read-only inputs by the
    renderer and the likelihood.
    '''

    def __init__(self, pixels=None, band=2, wcs=None, psf=None, sky=None,
                 nelec_per_nmgy=1., name=None):
        '''
        Args:
          * *pixels*: numpy array (H,W): observed counts
          * *band*: band index (0..4) or name ('u','g','r','i','z')
          * *wcs*: object with positionToPixel(pos) -> (x, y)
          * *psf*: a :class:`skymcmc.psf.GaussianMixturePSF`
          * *sky*: a :class:`skymcmc.sky.ConstantSky`
          * *nelec_per_nmgy*: scalar or per-row array of gains

        If *wcs* is not given, assumes pixel space.

        If *sky* is not given, assumes zero sky.
        '''
        self.pixels = np.asarray(pixels, dtype=float)
        if self.pixels.ndim != 2:
            raise ValueError('Image pixels must be 2-D, got shape %s' %
                             str(self.pixels.shape))
        self.band = band_index(band)
        if wcs is None:
            wcs = NullWCS()
        if sky is None:
            sky = ConstantSky(0.)
        self.wcs = wcs
        self.psf = psf
        self.sky = sky
        self.nelec_per_nmgy = np.atleast_1d(
            np.asarray(nelec_per_nmgy, dtype=float))
        self.name = name

    def __str__(self):
        return 'Image ' + str(self.name)

    @property
    def shape(self):
        return self.pixels.shape

    @property
    def H(self):
        return self.pixels.shape[0]

    @property
    def W(self):
        return self.pixels.shape[1]

    def getIota(self):
        ''' Median electrons-per-nanomaggy gain (a scalar). '''
        return float(np.median(self.nelec_per_nmgy))

    def getImage(self):
        return self.pixels

    def getPsf(self):
        return self.psf

    def getWcs(self):
        return self.wcs

    def getSky(self):
        return self.sky

    def getBand(self):
        return self.band
