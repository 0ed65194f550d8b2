'''
The image description that the chunk compilers fill in and the PNG writer
consumes at the end.
'''
from collections import namedtuple
from enum import Flag

from .png import PNGColorType, PNGInterlaceType


Token = namedtuple('Token', ['text', 'line', 'quoted'])


class ColorMask(Flag):
    '''Bits of the PNG color type as they are expressed into the IHDR specification'''
    NONE    = 0
    PALETTE = 1 << 0
    COLOR   = 1 << 1
    ALPHA   = 1 << 2


class Valid(Flag):
    '''Which optional properties of the image have been set'''
    NONE = 0
    gAMA = 1 << 0
    cHRM = 1 << 1
    sRGB = 1 << 2
    PLTE = 1 << 3


# values used by png_set_sRGB_gAMA_and_cHRM()
SRGB_GAMMA = 0.45455
SRGB_CHROMATICITIES = {
    'white': (0.3127, 0.3290),
    'red':   (0.6400, 0.3300),
    'green': (0.3000, 0.6000),
    'blue':  (0.1500, 0.0600),
}


class ImageDescription(object):
    '''Mutable accumulator for everything the source says about the image.'''

    def __init__(self):
        self.width = 0
        self.height = 0
        self.bit_depth = 8
        self.color_type = ColorMask.NONE
        self.interlace = PNGInterlaceType.NONE
        self.gamma = 0.0
        self.x_white = self.y_white = 0.0
        self.x_red = self.y_red = 0.0
        self.x_green = self.y_green = 0.0
        self.x_blue = self.y_blue = 0.0
        self.palette = []
        self.srgb_intent = None
        self.valid = Valid.NONE

    def __repr__(self):
        return '<%s(%dx%dx%d, color_type=%r, valid=%r)>' % (
            self.__class__.__name__,
            self.width,
            self.height,
            self.bit_depth,
            self.color_type,
            self.valid,
        )

    def set_chromaticity(self, name, x, y):
        setattr(self, 'x_%s' % name, x)
        setattr(self, 'y_%s' % name, y)

    @property
    def chromaticities(self):
        return (
            self.x_white, self.y_white,
            self.x_red, self.y_red,
            self.x_green, self.y_green,
            self.x_blue, self.y_blue,
        )

    @property
    def channels(self):
        channels = 3 if self.color_type & ColorMask.COLOR else 1

        if self.color_type & ColorMask.ALPHA:
            channels += 1

        return channels

    @property
    def sample_size(self):
        '''Size in bits of one pixel as written into an IMAGE block.

        Palette images always use one byte per index, whatever the bit depth.'''
        if self.color_type & ColorMask.PALETTE:
            return 8

        return self.bit_depth * self.channels

    @property
    def pixel_size(self):
        '''Bytes per pixel in the decoded IMAGE data: samples smaller
        than a byte are given one per byte and packed by the writer.'''
        return max(1, self.sample_size // 8)

    @property
    def png_color_type(self) -> PNGColorType:
        value = self.color_type.value
        if self.color_type & ColorMask.PALETTE:
            value |= ColorMask.COLOR.value

        return PNGColorType(value)
