import numpy as np

__all__ = ['SkyPatch']


class SkyPatch(object):
    '''
    A rectangular region of an image within which a source is
    rendered.  The patch knows its offset in the larger image:
    *bitmap_offset* is the (row, col) of the patch's pixel [0, 0] in
    the parent image, and *active_pixel_bitmap* (H x W, bool) defines
    its extent and which pixels take part in the likelihood.
    '''

    def __init__(self, bitmap_offset, active_pixel_bitmap):
        self.bitmap_offset = np.array(bitmap_offset, dtype=int).reshape(2)
        self.active_pixel_bitmap = np.asarray(active_pixel_bitmap,
                                              dtype=bool)
        if self.active_pixel_bitmap.ndim != 2:
            raise ValueError('SkyPatch bitmap must be 2-D')

    @classmethod
    def fromImage(clazz, image):
        ''' A patch covering the whole of *image*. '''
        return clazz((0, 0), np.ones(image.shape, bool))

    @classmethod
    def around(clazz, image, center, radius):
        '''
        A square patch of half-width *radius* pixels centered on pixel
        (row, col) *center*, clipped to the image bounds.
        '''
        H, W = image.shape
        r = int(np.ceil(radius))
        ch = int(np.round(center[0]))
        cw = int(np.round(center[1]))
        y0, y1 = max(0, ch - r), min(H, ch + r + 1)
        x0, x1 = max(0, cw - r), min(W, cw + r + 1)
        if y0 >= y1 or x0 >= x1:
            raise ValueError('SkyPatch.around: patch centered at %s does '
                             'not overlap the image' % (tuple(center),))
        return clazz((y0, x0), np.ones((y1 - y0, x1 - x0), bool))

    def __str__(self):
        (H, W) = self.shape
        return 'SkyPatch: origin (%i,%i) size (%i x %i)' % (
            self.x0, self.y0, W, H)

    __repr__ = __str__

    @property
    def shape(self):
        return self.active_pixel_bitmap.shape

    @property
    def y0(self):
        return int(self.bitmap_offset[0])

    @property
    def x0(self):
        return int(self.bitmap_offset[1])

    def getExtent(self):
        ''' Return (x0, x1, y0, y1) '''
        (h, w) = self.shape
        return (self.x0, self.x0 + w, self.y0, self.y0 + h)

    def getSlice(self):
        (ph, pw) = self.shape
        return (slice(self.y0, self.y0 + ph),
                slice(self.x0, self.x0 + pw))

    def getData(self, image):
        '''
        Returns the observed pixels of *image* under this patch.  The
        patch must lie within the image.
        '''
        (ph, pw) = self.shape
        (H, W) = image.shape
        if (self.x0 < 0 or self.y0 < 0 or
            self.x0 + pw > W or self.y0 + ph > H):
            raise ValueError('%s extends outside %s of shape %s' %
                             (self, image, image.shape))
        return image.getImage()[self.getSlice()]
