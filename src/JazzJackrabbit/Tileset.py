from typing import List, Optional

import numpy as np
from PIL import Image

from .Containers.Jj2File import Jj2File
from .Primitives.ByteCursor import ByteCursor
from .Primitives.Palette import JCS_BLUE, PALETTE_ENTRY_COUNT, palette_from_bytes, verify_palette
from .Assets.Canvas import flatten
from .Exceptions import OutOfBounds, TruncatedInput

TILE_SIZE = 32
TILE_PIXEL_COUNT = TILE_SIZE * TILE_SIZE
TILE_MASK_SIZE_IN_BYTES = TILE_PIXEL_COUNT // 8
# Tileset images are laid out this many tiles wide.
TILES_PER_ROW = 10
# Tiles drawn with these palette indices are see-through.
TRANSPARENT_INDICES = (0, 1)

## The per-tile tables of a tileset, stored in Data1.
class TilesetSettings:
    def __init__(self, cursor: ByteCursor, max_tiles: int):
        # The palette entries have a pad byte after the RGB values.
        self.palette: np.ndarray = palette_from_bytes(cursor.read(PALETTE_ENTRY_COUNT * 4), has_entry_alignment = True)
        self.tile_count: int = cursor.uint32()
        self.tile_opaque: List[bool] = cursor.boolean(max_tiles)
        self.tile_unknown1: List[bool] = cursor.boolean(max_tiles)
        # Offsets of 0 mean the tile is empty.
        self.tile_image_offsets: List[int] = cursor.uint32(max_tiles)
        self.tile_unknown2: List[int] = cursor.uint32(max_tiles)
        self.tile_transparency_offsets: List[int] = cursor.uint32(max_tiles)
        self.tile_unknown3: List[int] = cursor.uint32(max_tiles)
        self.tile_mask_offsets: List[int] = cursor.uint32(max_tiles)
        self.tile_flipped_mask_offsets: List[int] = cursor.uint32(max_tiles)

## A tileset (.j2t), which holds the 32x32 tiles levels are built from.
## The substreams are:
##  - Data1: The palette and the per-tile tables (see TilesetSettings).
##  - Data2: Tile images, 1024 palette indices per tile.
##  - Data3: Transparency masks.
##  - Data4: Collision masks, 128 bytes per tile, one bit per pixel.
class Tileset(Jj2File):
    MAGIC_NUMBER = b'TILE'
    VERSION_TSF = 513
    VERSION_123 = 512

    def __init__(self, filepath: str = None, stream = None):
        self._settings: Optional[TilesetSettings] = None
        super().__init__(filepath, stream)

    ## The largest number of tiles this version supports.
    @property
    def max_tiles(self) -> int:
        return 4096 if self.version == self.VERSION_TSF else 1024

    @property
    def settings(self) -> TilesetSettings:
        if self._settings is None:
            try:
                self._settings = TilesetSettings(ByteCursor(self.get_substream(1)), self.max_tiles)
            except OutOfBounds as error:
                raise TruncatedInput(f'The tile tables of {self.description} end early: {error}') from error
        return self._settings

    @property
    def tile_count(self) -> int:
        return self.settings.tile_count

    @property
    def palette(self) -> np.ndarray:
        return self.settings.palette

    ## Replaces the palette the tiles are drawn with.
    ## \param[in] palette - 256 RGB entries.
    def load_palette(self, palette):
        self.settings.palette = verify_palette(palette)

    ## \return A (tile count, 32, 32) array of palette indices, row by row.
    ##         Empty tiles are all zero.
    def get_tile_pixels(self) -> np.ndarray:
        tile_pixels = np.zeros((self.tile_count, TILE_SIZE, TILE_SIZE), dtype = np.uint8)
        image_data = self.get_substream(2)
        for tile_index, offset in enumerate(self.settings.tile_image_offsets[:self.tile_count]):
            if offset == 0:
                continue
            tile_data = image_data[offset:offset + TILE_PIXEL_COUNT]
            if len(tile_data) != TILE_PIXEL_COUNT:
                raise TruncatedInput(f'Image of tile {tile_index} at 0x{offset:x} runs past the end of Data2 in {self.description}.')
            tile_pixels[tile_index] = np.frombuffer(tile_data, dtype = np.uint8).reshape(TILE_SIZE, TILE_SIZE)
        return tile_pixels

    ## \param[in] palette - The palette to draw with, instead of the tileset's own.
    ## \return A (tile count, 32, 32, 4) array of RGBA tiles.
    def get_tile_images(self, palette = None) -> np.ndarray:
        palette = self.palette if palette is None else verify_palette(palette)
        tile_pixels = self.get_tile_pixels()
        tile_images = np.zeros((*tile_pixels.shape, 4), dtype = np.uint8)
        tile_images[..., :3] = palette[tile_pixels]
        tile_images[..., 3] = np.where(np.isin(tile_pixels, TRANSPARENT_INDICES), 0, 0xff)
        return tile_images

    ## \return A (tile count, 32, 32) array that is True where the tile is solid.
    def get_tile_masks(self) -> np.ndarray:
        tile_masks = np.zeros((self.tile_count, TILE_SIZE, TILE_SIZE), dtype = bool)
        mask_data = self.get_substream(4)
        for tile_index, offset in enumerate(self.settings.tile_mask_offsets[:self.tile_count]):
            if offset == 0:
                continue
            tile_data = mask_data[offset:offset + TILE_MASK_SIZE_IN_BYTES]
            if len(tile_data) != TILE_MASK_SIZE_IN_BYTES:
                raise TruncatedInput(f'Mask of tile {tile_index} at 0x{offset:x} runs past the end of Data4 in {self.description}.')
            # The lowest bit of each byte is the leftmost of its eight pixels.
            mask_bits = np.unpackbits(np.frombuffer(tile_data, dtype = np.uint8), bitorder = 'little')
            tile_masks[tile_index] = mask_bits.reshape(TILE_SIZE, TILE_SIZE).astype(bool)
        return tile_masks

    ## \return The tiles laid out ten to a row, with transparent pixels.
    def get_image(self) -> Image.Image:
        return Image.fromarray(arrange_tiles(self.get_tile_images()), 'RGBA')

    ## \return The collision masks laid out ten to a row, in black on the
    ##         background colour the level editor uses.
    def get_image_mask(self) -> Image.Image:
        tile_masks = arrange_tiles(self.get_tile_masks())
        image = np.empty((*tile_masks.shape, 3), dtype = np.uint8)
        image[...] = JCS_BLUE
        image[tile_masks] = (0, 0, 0)
        return Image.fromarray(image, 'RGB')

    ## \return The tiles on the background colour the level editor uses.
    def get_preview(self) -> Image.Image:
        return flatten(self.get_image(), JCS_BLUE)

## Lays out tiles in rows of ten, like the level editor shows them.
## \param[in] tiles - An array of tiles, each 32x32 (with any number of channels).
## \return A single array holding every tile.
def arrange_tiles(tiles: np.ndarray) -> np.ndarray:
    tile_count = len(tiles)
    row_count = -(-tile_count // TILES_PER_ROW)
    arranged_shape = (row_count * TILE_SIZE, TILES_PER_ROW * TILE_SIZE, *tiles.shape[3:])
    arranged = np.zeros(arranged_shape, dtype = tiles.dtype)
    for tile_index in range(tile_count):
        x = (tile_index % TILES_PER_ROW) * TILE_SIZE
        y = (tile_index // TILES_PER_ROW) * TILE_SIZE
        arranged[y:y + TILE_SIZE, x:x + TILE_SIZE] = tiles[tile_index]
    return arranged
