from typing import Optional, Sequence, Tuple

import numpy as np
from PIL import Image
from asset_extraction_framework.Asset.Image import RectangularBitmap

from ..Primitives.ByteCursor import ByteCursor
from ..Primitives.Palette import apply_palette
from ..Exceptions import OutOfBounds, TruncatedSpriteData

# Frame images store their width with the high bit used as a flag.
WIDTH_FLAG = 0x8000
# Pixels recoloured through a look-up table are drawn slightly translucent.
LOOKUP_TABLE_ALPHA = 191

## Decodes a frame image from an animation library.
## The image starts with its width and height (16 bits each), followed by
## control bytes that each describe part of a row:
##  - Above 128: the next (control - 128) bytes are pixels.
##  - Below 128: that many pixels are skipped (left transparent).
##  - Exactly 128: the row ends.
## Decoding finishes when every row has ended.
## \return The width, the height, and a (height, width) array of palette indices.
##         Pixels that are never written are index 0.
def decode_frame(raw: bytes) -> Tuple[int, int, np.ndarray]:
    # READ THE DIMENSIONS.
    cursor = ByteCursor(raw)
    try:
        width = cursor.uint16() & ~WIDTH_FLAG
        height = cursor.uint16()
    except OutOfBounds as error:
        raise TruncatedSpriteData(f'Frame image is only {len(raw)} bytes, too short for its dimensions.') from error

    # READ THE ROWS.
    pixel_grid = np.zeros((height, width), dtype = np.uint8)
    x = y = 0
    try:
        while y < height:
            control_byte = cursor.uint8()
            if control_byte > 0x80:
                pixel_count = control_byte - 0x80
                pixels = cursor.read(pixel_count)
                # Pixels past the right edge are discarded.
                visible_pixel_count = max(0, min(pixel_count, width - x))
                pixel_grid[y, x:x + visible_pixel_count] = np.frombuffer(pixels[:visible_pixel_count], dtype = np.uint8)
                x += pixel_count
            elif control_byte < 0x80:
                x += control_byte
            else:
                x = 0
                y += 1
    except OutOfBounds as error:
        raise TruncatedSpriteData(f'Frame image data ended after {y} of {height} rows.') from error

    return width, height, pixel_grid

## Converts decoded palette indices into an RGBA image. Index 0 is transparent.
## \param[in] lookup_table - When provided, each nonzero index is replaced by
##            lookup_table[(index >> 3) & 15] and drawn slightly translucent.
##            This recolours gems, for instance.
def render_pixel_grid(pixel_grid: np.ndarray, palette: np.ndarray, lookup_table: Optional[Sequence[int]] = None) -> Image.Image:
    if lookup_table is None:
        return Image.fromarray(apply_palette(pixel_grid, palette), 'RGBA')

    mapped_indices = np.asarray(lookup_table, dtype = np.uint8)[(pixel_grid >> 3) & 0x0f]
    mapped_indices = np.where(pixel_grid > 0, mapped_indices, 0).astype(np.uint8)
    rgba = apply_palette(mapped_indices, palette)
    rgba[mapped_indices > 0, 3] = LOOKUP_TABLE_ALPHA
    return Image.fromarray(rgba, 'RGBA')

## A rendered image with the reference points the game uses to position it.
## Both plain animation frames and sprites assembled from several frames
## are represented this way.
class Sprite(RectangularBitmap):
    def __init__(self, image: Image.Image, hotspot_x: int = 0, hotspot_y: int = 0, coldspot_x: int = 0, coldspot_y: int = 0, gunspot_x: int = 0, gunspot_y: int = 0):
        super().__init__()
        self.name = None
        self._exportable_image = image
        self._width, self._height = image.size
        # The hotspot is the point drawn at the object's position, relative
        # to the top left corner. It is usually negative.
        self.hotspot_x = hotspot_x
        self.hotspot_y = hotspot_y
        # The coldspot is where the object touches the ground.
        self.coldspot_x = coldspot_x
        self.coldspot_y = coldspot_y
        self.gunspot_x = gunspot_x
        self.gunspot_y = gunspot_y
        # The palette indices this sprite was rendered from, when it was
        # rendered from a single frame.
        self.pixel_grid: Optional[np.ndarray] = None

    @property
    def image(self) -> Image.Image:
        return self._exportable_image

    ## Replaces the image, keeping the reference points.
    @image.setter
    def image(self, image: Image.Image):
        self._exportable_image = image
        self._width, self._height = image.size

    ## \return A sprite with a copy of this image and the same reference points.
    def copy(self) -> 'Sprite':
        duplicate = Sprite(self.image.copy(), self.hotspot_x, self.hotspot_y, self.coldspot_x, self.coldspot_y, self.gunspot_x, self.gunspot_y)
        duplicate.name = self.name
        duplicate.pixel_grid = self.pixel_grid
        return duplicate
