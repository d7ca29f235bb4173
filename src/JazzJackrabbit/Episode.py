import os
from typing import Optional

import numpy as np
from PIL import Image

from . import global_variables
from .Containers.Jj2File import Jj2File, build_substream_table
from .Primitives.ByteCursor import ByteCursor
from .Primitives.Palette import DEFAULT_PALETTE_FILENAME, JCS_BLUE, load_jasc_palette, verify_palette
from .Exceptions import TruncatedInput

## An episode (.j2e), which names a set of levels and holds the images
## shown when choosing it. The 212-byte header contains:
##  - 0x00: The header size, position in the episode list, registered flag,
##          and an unknown value (each 32 bits).
##  - 0x10: The 128-byte episode name.
##  - 0x90: The 32-byte filename of the first level.
##  - 0xb0: The dimensions of the illustration, 8 unknown bytes, and the
##          dimensions of the title.
##  - 0xc8: The compressed sizes of Data1 through Data3.
## The uncompressed sizes are not stored; each substream is an image:
##  - Data1: The illustration.
##  - Data2: The title.
##  - Data3: The title as shown when it is not selected.
class Episode(Jj2File):
    HEADER_SIZE = 212
    MINIMUM_HEADER_SIZE = HEADER_SIZE
    NAME_LENGTH = 128
    LEVEL_FILENAME_LENGTH = 32

    ## \param[in] palette - The palette to draw the images with. When not provided,
    ##            the default palette is read from the resource folder when first needed.
    def __init__(self, filepath: str = None, stream = None, palette = None, resource_folder: str = None):
        self.resource_folder = resource_folder if resource_folder is not None else global_variables.resource_folder
        self._palette: Optional[np.ndarray] = verify_palette(palette) if palette is not None else None
        super().__init__(filepath, stream)

    def _parse_header(self):
        header = ByteCursor(self.data[:self.HEADER_SIZE])
        self.header_size = header.uint32()
        self.position = header.uint32()
        self.is_registered = header.uint32() != 0
        header.skip(4)
        self.name = header.string(self.NAME_LENGTH)
        self.first_level_filename = header.string(self.LEVEL_FILENAME_LENGTH)
        self.width = header.uint32()
        self.height = header.uint32()
        header.skip(8)
        self.title_width = header.uint32()
        self.title_height = header.uint32()

        # READ THE SUBSTREAM SIZES.
        illustration_size = self.width * self.height
        title_size = self.title_width * self.title_height
        compressed_sizes = header.uint32(3)
        uncompressed_sizes = (illustration_size, title_size, title_size)
        self.substream_table = build_substream_table(zip(compressed_sizes, uncompressed_sizes), self.HEADER_SIZE)

    @property
    def palette(self) -> np.ndarray:
        if self._palette is None:
            self._palette = load_jasc_palette(os.path.join(self.resource_folder, DEFAULT_PALETTE_FILENAME))
        return self._palette

    @property
    def display_name(self) -> str:
        return self.clean_text(self.name)

    def get_image_illustration(self) -> Image.Image:
        return self._render_image(1, self.width, self.height)

    def get_image_title(self) -> Image.Image:
        return self._render_image(2, self.title_width, self.title_height)

    def get_image_title_dark(self) -> Image.Image:
        return self._render_image(3, self.title_width, self.title_height)

    def get_preview(self) -> Image.Image:
        return self.get_image_illustration()

    ## Draws one of the images. Palette index 0 shows the background colour
    ## the level editor uses.
    def _render_image(self, substream_index: int, width: int, height: int) -> Image.Image:
        pixels = self.get_substream(substream_index)
        if len(pixels) < width * height:
            raise TruncatedInput(f'Image Data{substream_index} of {self.description} is {len(pixels)} bytes, but {width}x{height} pixels are needed.')
        indices = np.frombuffer(pixels, dtype = np.uint8, count = width * height).reshape(height, width)
        image = self.palette[indices]
        image[indices == 0] = JCS_BLUE
        return Image.fromarray(image, 'RGB')
