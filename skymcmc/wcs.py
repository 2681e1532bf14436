'''
World-coordinate transforms.  The real projection lives in the I/O
layer; the renderer only needs *positionToPixel*, treated as a black
box returning (x, y) = (col, row).
'''
import numpy as np

__all__ = ['NullWCS', 'AffineWcs']


class NullWCS(object):
    '''
    The "identity" WCS -- useful when you are using raw pixel
    positions rather than RA,Decs.  Positions are (x, y).
    '''

    def __init__(self, dx=0., dy=0.):
        self.dx = dx
        self.dy = dy

    def __str__(self):
        return 'NullWCS: dx,dy %g,%g' % (self.dx, self.dy)

    def positionToPixel(self, pos):
        return pos[0] + self.dx, pos[1] + self.dy

    def pixelToPosition(self, x, y):
        return np.array([x - self.dx, y - self.dy])


class AffineWcs(object):
    '''
    A linearized WCS: (ra, dec) degrees to (x, y) pixels through a CD
    matrix about a reference point,

        (ra - crval0) * cos(dec0), dec - crval1 = CD (pix - crpix)

    Good enough across the few-arcminute patches the sampler renders.
    '''

    def __init__(self, crval, crpix, cd):
        self.crval = np.array(crval, dtype=float)
        self.crpix = np.array(crpix, dtype=float)
        self.cd = np.array(cd, dtype=float).reshape((2, 2))
        self.cdinv = np.linalg.inv(self.cd)
        self.cosdec = np.cos(np.deg2rad(self.crval[1]))

    def __str__(self):
        return ('AffineWcs: crval (%.5f, %.5f), crpix (%.1f, %.1f)' %
                (tuple(self.crval) + tuple(self.crpix)))

    def pixel_scale(self):
        ''' arcsec / pixel '''
        return np.sqrt(np.abs(np.linalg.det(self.cd))) * 3600.

    def positionToPixel(self, pos):
        dra = (pos[0] - self.crval[0]) * self.cosdec
        ddec = pos[1] - self.crval[1]
        x, y = np.dot(self.cdinv, [dra, ddec]) + self.crpix
        return x, y

    def pixelToPosition(self, x, y):
        dra, ddec = np.dot(self.cd, [x - self.crpix[0], y - self.crpix[1]])
        return np.array([self.crval[0] + dra / self.cosdec,
                         self.crval[1] + ddec])
