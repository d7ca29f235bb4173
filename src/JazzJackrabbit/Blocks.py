import numpy as np
from PIL import Image

from .Containers.Jj1File import Jj1File
from .Primitives.ByteCursor import ByteCursor
from .Primitives.Palette import JCS_BLUE, apply_palette, palette_from_bytes
from .Primitives.RunLength import decode_run_length
from .Assets.Canvas import flatten
from .Tileset import TILE_PIXEL_COUNT, TILE_SIZE, arrange_tiles

## A set of tiles for levels of the older family (BLOCKS.nnn).
## The file starts with three run-length blocks, each a palette. Then come
## sections of tiles, each introduced by "ok" and holding 60 run-length
## blocks of one tile each. All the tiles together are read as substream 3.
class Blocks(Jj1File):
    PALETTE_COUNT = 3
    TILE_SECTION_MARKER = b'ok'
    TILES_PER_SECTION = 60
    TILE_SUBSTREAM_INDEX = 3
    # This palette index is see-through.
    TRANSPARENT_INDEX = 127

    def _parse_header(self):
        cursor = ByteCursor(self.data)
        # READ THE PALETTES.
        for index in range(self.PALETTE_COUNT):
            self.substream_sizes[index] = self.skip_run_length_block(cursor)

        # READ THE TILES.
        tile_data = bytearray()
        while (cursor.remaining > 1) and (cursor.peek(len(self.TILE_SECTION_MARKER)) == self.TILE_SECTION_MARKER):
            cursor.skip(len(self.TILE_SECTION_MARKER))
            for _ in range(self.TILES_PER_SECTION):
                tile_data += decode_run_length(cursor)
        self._substreams[self.TILE_SUBSTREAM_INDEX] = bytes(tile_data)

    @property
    def tile_count(self) -> int:
        return len(self.get_substream(self.TILE_SUBSTREAM_INDEX)) // TILE_PIXEL_COUNT

    ## \param[in] index - Which of the three palettes to read. The first is the
    ##            palette of the tiles; levels draw their backgrounds with the others.
    ## \return The palette, with the transparent entry replaced by the
    ##         background colour the level editor uses.
    def get_palette(self, index: int = 0) -> np.ndarray:
        if not (0 <= index < self.PALETTE_COUNT):
            raise ValueError(f'Substream {index} is not a palette; palettes are substreams 0 to {self.PALETTE_COUNT - 1}.')
        palette = palette_from_bytes(self.get_substream(index), bits_per_channel = 6)
        palette[self.TRANSPARENT_INDEX] = JCS_BLUE
        return palette

    ## \return A (tile count, 32, 32) array of palette indices.
    def get_tile_pixels(self) -> np.ndarray:
        tile_data = self.get_substream(self.TILE_SUBSTREAM_INDEX)
        pixel_count = self.tile_count * TILE_PIXEL_COUNT
        return np.frombuffer(tile_data[:pixel_count], dtype = np.uint8).reshape(self.tile_count, TILE_SIZE, TILE_SIZE)

    ## \return A (tile count, 32, 32, 4) array of RGBA tiles.
    def get_tile_images(self) -> np.ndarray:
        return apply_palette(self.get_tile_pixels(), self.get_palette(0), transparent_index = self.TRANSPARENT_INDEX)

    ## \return The tiles laid out ten to a row, with transparent pixels.
    def get_image(self) -> Image.Image:
        return Image.fromarray(arrange_tiles(self.get_tile_images()), 'RGBA')

    def get_preview(self) -> Image.Image:
        return flatten(self.get_image(), JCS_BLUE)
