'''
This file is part of the skymcmc project.
Licensed under the GPLv2; see the file COPYING for details.

`catalog.py`
============

Catalog entries and the star / galaxy source models they describe.

A `CatalogEntry` is the denormalized record produced by the catalog
readers: world position, an is-star flag, star and galaxy flux
vectors, and galaxy shape.  For rendering it is converted to a tagged
source model, `Star` or `Galaxy`, each of which knows how to write
itself onto a pixel buffer.
'''
import numpy as np

from skymcmc.brightness import NBANDS
from skymcmc.render import write_star_unit_flux, write_galaxy_unit_flux

__all__ = ['CatalogEntry', 'Star', 'Galaxy', 'STAR', 'GALAXY']

STAR = 'star'
GALAXY = 'galaxy'


def _fluxes(f):
    f = np.array(f, dtype=float).reshape(-1)
    if len(f) != NBANDS:
        raise ValueError('Expected %i fluxes, got %i' % (NBANDS, len(f)))
    return f


class Star(object):
    '''
    A point source: position and one flux per band.
    '''
    kind = STAR

    def __init__(self, pos, fluxes):
        self.pos = np.array(pos, dtype=float)
        self.fluxes = _fluxes(fluxes)

    def __str__(self):
        return 'Star at %s with fluxes %s' % (
            tuple(self.pos), tuple(np.round(self.fluxes, 4)))

    __repr__ = __str__

    def getFlux(self, band):
        return self.fluxes[band]

    def toSourceModel(self):
        return self

    def renderInto(self, pixels, image, offset, flux=None):
        if flux is None:
            flux = self.getFlux(image.band)
        write_star_unit_flux(self.pos, image.psf, image.wcs,
                             image.getIota(), pixels,
                             offset=offset, flux=flux)
        return pixels


class Galaxy(Star):
    '''
    A two-profile galaxy: a *frac_dev* : (1 - *frac_dev*) mixture of
    de Vaucouleurs and exponential profiles sharing one elliptical
    shape (axis ratio *ab*, position angle *angle* in radians,
    half-light radius *scale* in pixels).
    '''
    kind = GALAXY

    def __init__(self, pos, fluxes, frac_dev, ab, angle, scale):
        super(Galaxy, self).__init__(pos, fluxes)
        self.frac_dev = float(frac_dev)
        self.ab = float(ab)
        self.angle = float(angle)
        self.scale = float(scale)

    def __str__(self):
        return ('Galaxy at %s with fluxes %s, frac_dev=%.3f, ab=%.3f, '
                'angle=%.3f, scale=%.3f' % (
                    tuple(self.pos), tuple(np.round(self.fluxes, 4)),
                    self.frac_dev, self.ab, self.angle, self.scale))

    __repr__ = __str__

    def renderInto(self, pixels, image, offset, flux=None):
        if flux is None:
            flux = self.getFlux(image.band)
        write_galaxy_unit_flux(self.pos, image.psf, image.wcs,
                               image.getIota(),
                               self.frac_dev, self.ab, self.angle,
                               self.scale, pixels,
                               offset=offset, flux=flux)
        return pixels


class CatalogEntry(object):
    '''
    Denormalized source description, as read from a catalog.

    Both flux vectors are kept whatever the type; `is_star` selects
    which one (and which model) is used.
    '''

    def __init__(self, pos, is_star, star_fluxes, gal_fluxes,
                 gal_frac_dev=0.5, gal_ab=1., gal_angle=0., gal_scale=1.,
                 objid=''):
        self.pos = np.array(pos, dtype=float)
        self.is_star = bool(is_star)
        self.star_fluxes = _fluxes(star_fluxes)
        self.gal_fluxes = _fluxes(gal_fluxes)
        self.gal_frac_dev = float(gal_frac_dev)
        self.gal_ab = float(gal_ab)
        self.gal_angle = float(gal_angle)
        self.gal_scale = float(gal_scale)
        self.objid = objid

    def __str__(self):
        return 'CatalogEntry(%s): %s' % (self.objid, self.toSourceModel())

    __repr__ = __str__

    @property
    def kind(self):
        return STAR if self.is_star else GALAXY

    def getFluxes(self):
        return self.star_fluxes if self.is_star else self.gal_fluxes

    def toSourceModel(self):
        if self.is_star:
            return Star(self.pos, self.star_fluxes)
        return Galaxy(self.pos, self.gal_fluxes, self.gal_frac_dev,
                      self.gal_ab, self.gal_angle, self.gal_scale)

    @staticmethod
    def fromSourceModel(src, objid=''):
        if src.kind == STAR:
            return CatalogEntry(src.pos, True, src.fluxes, src.fluxes,
                                objid=objid)
        return CatalogEntry(src.pos, False, src.fluxes, src.fluxes,
                            gal_frac_dev=src.frac_dev, gal_ab=src.ab,
                            gal_angle=src.angle, gal_scale=src.scale,
                            objid=objid)
