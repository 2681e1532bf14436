import numpy as np


class ConstantSky(object):
    '''
    A simple constant sky level across the whole image.

    The sky level is specified in nanomaggies per pixel; the renderer
    multiplies by the image's iota to get the expected electron rate.
    '''

    def __init__(self, val=0.):
        self.val = float(val)

    def __str__(self):
        return 'ConstantSky: %g' % self.val

    def __repr__(self):
        return 'ConstantSky(%r)' % self.val

    def getConstant(self):
        return self.val

    def addTo(self, img, scale=1.):
        if self.val == 0:
            return
        img += (self.val * scale)


class GridSky(ConstantSky):
    '''
    A per-pixel sky map.  Rendering uses a flat background taken from
    the map's first pixel, as the flat-sky renderer requires; the map
    itself is kept for callers that want it.
    '''

    def __init__(self, grid):
        self.grid = np.asarray(grid, dtype=float)
        super(GridSky, self).__init__(self.grid[0, 0])

    def __str__(self):
        return 'GridSky: %s, level %g' % (str(self.grid.shape), self.val)
