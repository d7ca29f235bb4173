import os
from typing import Optional

import numpy as np
from PIL import Image

from .Containers.Jj1File import Jj1File
from .Primitives.ByteCursor import ByteCursor
from .Blocks import Blocks
from .Tileset import TILE_SIZE

## A level of the older family (LEVELn.nnn).
## After a 39-byte signature come substreams 1 through 16. Most are run-length
## blocks, but a few are raw blobs of a fixed size. The substreams used here:
##  - 1: The tile map, a tile byte and an event byte for each tile, column by column.
##  - 14: Level properties, starting with the type of background.
## After the substreams come the level number and world number (both
## obfuscated with XOR), 9 unknown bytes, and the number of the blocks file.
class LegacyLevel(Jj1File):
    SIGNATURE_SIZE = 39
    MINIMUM_HEADER_SIZE = SIGNATURE_SIZE
    RAW_SUBSTREAM_SIZES = {0: SIGNATURE_SIZE, 9: 598, 11: 4, 14: 25, 16: 3}
    RAW_SUBSTREAM_INDICES = frozenset(RAW_SUBSTREAM_SIZES)
    LAST_SUBSTREAM_INDEX = 16
    LEVEL_NUMBER_KEY = 210
    WORLD_NUMBER_KEY = 4
    # This blocks number means the blocks file is numbered after the world.
    WORLD_BLOCKS_NUMBER = '999'
    MAP_SUBSTREAM_INDEX = 1
    PROPERTIES_SUBSTREAM_INDEX = 14
    MAP_WIDTH = 256
    MAP_HEIGHT = 64
    # Tiles with events at or above this have a dark background.
    DARK_BACKGROUND_EVENT = 128
    DARK_BACKGROUND_COLOR_INDEX = 31
    # Backgrounds of these types are gradients through the second and third palettes.
    GRADIENT_BACKGROUND_TYPES = frozenset((2, 3, 4, 5, 6, 7, 10, 11))
    SOLID_BACKGROUND_COLOR_INDEX = 42
    # Gradients are stretched to about this multiple of their height, which
    # roughly matches their parallax scrolling in the game.
    GRADIENT_STRETCH = 3

    def __init__(self, filepath: str = None, stream = None):
        self.blocks: Optional[Blocks] = None
        super().__init__(filepath, stream)

    def _parse_header(self):
        cursor = ByteCursor(self.data)
        # FIND THE SUBSTREAMS.
        self.substream_sizes[0] = self.SIGNATURE_SIZE
        cursor.seek(self.SIGNATURE_SIZE)
        for index in range(1, self.LAST_SUBSTREAM_INDEX + 1):
            if index in self.RAW_SUBSTREAM_SIZES:
                self.substream_sizes[index] = self.RAW_SUBSTREAM_SIZES[index]
                cursor.skip(self.substream_sizes[index])
            else:
                self.substream_sizes[index] = self.skip_run_length_block(cursor)

        # READ THE LEVEL SETTINGS.
        self.level_number = cursor.uint8() ^ self.LEVEL_NUMBER_KEY
        self.world_number = cursor.uint8() ^ self.WORLD_NUMBER_KEY
        cursor.skip(9)
        blocks_number = cursor.string(3)
        self.blocks_number = f'{self.world_number:03d}' if blocks_number == self.WORLD_BLOCKS_NUMBER else blocks_number

    @property
    def background_type(self) -> int:
        return self.get_substream(self.PROPERTIES_SUBSTREAM_INDEX)[0]

    ## Reads the blocks file the level is built from.
    ## \param[in] path - The blocks file. When not provided, the blocks file the
    ##            level names is found next to the level.
    def load_blocks(self, path: str = None):
        if path is None:
            path = self._find_blocks_file()
        if (path is None) or not os.path.isfile(path):
            raise FileNotFoundError(f'Blocks file {path or f"BLOCKS.{self.blocks_number}"} for {self.description} was not found.')
        self.blocks = Blocks(path)

    def _find_blocks_file(self) -> Optional[str]:
        level_directory = os.path.dirname(self.filepath) if self.filepath is not None else '.'
        blocks_filename = f'BLOCKS.{self.blocks_number}'
        # Names of the original files differ in case between releases.
        for filename in sorted(os.listdir(level_directory or '.')):
            if filename.lower() == blocks_filename.lower():
                return os.path.join(level_directory, filename)
        return None

    ## Draws the whole level on its background.
    def get_image(self) -> Image.Image:
        if self.blocks is None:
            self.load_blocks()
        width = self.MAP_WIDTH * TILE_SIZE
        height = self.MAP_HEIGHT * TILE_SIZE
        image = self._draw_background(width, height)
        pixels = np.array(image)

        # DRAW THE TILES.
        # Tiles are stored column by column.
        palette = self.blocks.get_palette(0)
        dark_background_color = palette[self.DARK_BACKGROUND_COLOR_INDEX]
        tile_images = self.blocks.get_tile_images()
        tile_map = self.get_substream(self.MAP_SUBSTREAM_INDEX)
        for map_index in range(min(len(tile_map) // 2, self.MAP_WIDTH * self.MAP_HEIGHT)):
            tile_index = tile_map[map_index * 2]
            event = tile_map[map_index * 2 + 1]
            x = (map_index // self.MAP_HEIGHT) * TILE_SIZE
            y = (map_index % self.MAP_HEIGHT) * TILE_SIZE
            tile_region = pixels[y:y + TILE_SIZE, x:x + TILE_SIZE]
            if event >= self.DARK_BACKGROUND_EVENT:
                tile_region[...] = dark_background_color
            if tile_index < len(tile_images):
                tile_image = tile_images[tile_index]
                is_opaque = tile_image[..., 3] > 0
                tile_region[is_opaque] = tile_image[..., :3][is_opaque]
        return Image.fromarray(pixels, 'RGB')

    ## Draws the background the level shows behind its tiles. Not every kind
    ## of background is drawn; those that are not are shown as a solid colour.
    def _draw_background(self, width: int, height: int) -> Image.Image:
        first_palette = self.blocks.get_palette(1)
        if self.background_type not in self.GRADIENT_BACKGROUND_TYPES:
            return Image.new('RGB', (width, height), tuple(int(channel) for channel in first_palette[self.SOLID_BACKGROUND_COLOR_INDEX]))

        # BUILD THE GRADIENT.
        # The two palettes are drawn one after the other, without the transparent entry,
        # and overlap by one row. Then the gradient repeats.
        first_colors = np.delete(first_palette, Blocks.TRANSPARENT_INDEX, axis = 0)
        second_colors = np.delete(self.blocks.get_palette(2), Blocks.TRANSPARENT_INDEX, axis = 0)
        gradient = np.zeros((2 * (len(first_colors) + len(second_colors) - 2), 3), dtype = np.uint8)
        gradient[:len(first_colors)] = first_colors
        second_start = len(first_colors) - 1
        gradient[second_start:second_start + len(second_colors)] = second_colors
        repeat_start = second_start + len(second_colors) - 1
        repeat_length = min(repeat_start - 1, len(gradient) - repeat_start)
        gradient[repeat_start:repeat_start + repeat_length] = gradient[:repeat_length]

        # STRETCH THE GRADIENT.
        # It is drawn a pixel higher to line up with the game.
        gradient_image = Image.fromarray(gradient.reshape(-1, 1, 3), 'RGB')
        stretched_gradient = gradient_image.resize((width, len(gradient) * self.GRADIENT_STRETCH), Image.BILINEAR)
        background = Image.new('RGB', (width, height))
        background.paste(stretched_gradient, (0, -1))
        return background

    def get_preview(self) -> Image.Image:
        return self.get_image()
