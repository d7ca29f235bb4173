import numpy as np
from PIL import Image

from .Containers.Jj1File import Jj1File
from .Primitives.ByteCursor import ByteCursor
from .Primitives.Palette import PALETTE_ENTRY_COUNT, palette_from_bytes

## A planet of the older family (PLANET.nnn), shown when choosing a world.
## The file holds two unknown bytes, the planet's name (preceded by its
## length), a palette, and a 64x55 image that is stored as it is.
class Planet(Jj1File):
    IMAGE_WIDTH = 64
    IMAGE_HEIGHT = 55
    HEADER_SUBSTREAM_INDEX = 0
    IMAGE_SUBSTREAM_INDEX = 1
    RAW_SUBSTREAM_INDICES = frozenset((HEADER_SUBSTREAM_INDEX, IMAGE_SUBSTREAM_INDEX))

    def _parse_header(self):
        cursor = ByteCursor(self.data)
        cursor.skip(2)
        name_length = cursor.uint8()
        self.name = cursor.string(name_length)
        self.palette: np.ndarray = palette_from_bytes(cursor.read(PALETTE_ENTRY_COUNT * 3), bits_per_channel = 6)

        self.substream_sizes[self.HEADER_SUBSTREAM_INDEX] = cursor.position
        self.substream_sizes[self.IMAGE_SUBSTREAM_INDEX] = self.IMAGE_WIDTH * self.IMAGE_HEIGHT

    def get_image(self) -> Image.Image:
        pixels = np.frombuffer(self.get_substream(self.IMAGE_SUBSTREAM_INDEX), dtype = np.uint8)
        return Image.fromarray(self.palette[pixels.reshape(self.IMAGE_HEIGHT, self.IMAGE_WIDTH)], 'RGB')

    def get_preview(self) -> Image.Image:
        return self.get_image()
