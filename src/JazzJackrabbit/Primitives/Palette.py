import io
from typing import Optional

import numpy as np
from asset_extraction_framework.Asset.Palette import RgbPalette

# The background colour the level editor shows behind transparent pixels.
JCS_BLUE = (87, 0, 203)
PALETTE_ENTRY_COUNT = 0x100
# The palette used when a file needs one but none is provided, read from the resource folder.
DEFAULT_PALETTE_FILENAME = 'Jazz2.pal'

## Converts palette entries stored in a file into a palette array.
## \param[in] raw - The stored entries, each 3 bytes (RGB) or 4 bytes (RGB plus a pad byte).
## \param[in] has_entry_alignment - True when each entry has the pad byte.
## \param[in] bits_per_channel - 6 for the older file family, whose channels range from 0 to 63.
## \return A (256, 3) array of RGB colours. Missing entries are black.
def palette_from_bytes(raw: bytes, has_entry_alignment: bool = False, bits_per_channel: int = 8) -> np.ndarray:
    entry_size = 4 if has_entry_alignment else 3
    entry_count = min(len(raw) // entry_size, PALETTE_ENTRY_COUNT)
    rgb_palette = RgbPalette(io.BytesIO(raw), has_entry_alignment, total_palette_entries = entry_count)
    palette = np.zeros((PALETTE_ENTRY_COUNT, 3), dtype = np.uint8)
    palette[:entry_count] = np.frombuffer(bytes(rgb_palette.raw_rgb_bytes()), dtype = np.uint8).reshape(-1, 3)
    if bits_per_channel == 6:
        palette = (palette & 0x3f) << 2
    return palette

## Reads a palette saved in the JASC-PAL text format, which looks like this:
##  JASC-PAL
##  0100
##  256
##  0 0 0
##  ...
## \param[in] filepath - The palette file. A missing file raises FileNotFoundError.
def load_jasc_palette(filepath: str) -> np.ndarray:
    with open(filepath, 'r') as palette_file:
        lines = palette_file.read().split('\n')
    FIRST_COLOR_LINE_INDEX = 3
    if len(lines) < FIRST_COLOR_LINE_INDEX + PALETTE_ENTRY_COUNT:
        raise ValueError(f'Palette file {filepath} is not a valid JASC-format palette.')

    palette = np.zeros((PALETTE_ENTRY_COUNT, 3), dtype = np.uint8)
    for index in range(PALETTE_ENTRY_COUNT):
        red, green, blue = (int(channel) for channel in lines[FIRST_COLOR_LINE_INDEX + index].split()[:3])
        palette[index] = (red, green, blue)
    return palette

## Ensures a palette supplied by client code has 256 RGB entries.
## \return The palette as a (256, 3) array.
def verify_palette(palette) -> np.ndarray:
    palette = np.asarray(palette, dtype = np.uint8)
    if palette.shape != (PALETTE_ENTRY_COUNT, 3):
        raise ValueError(f'Palette must have {PALETTE_ENTRY_COUNT} entries of 3 colour values, but has shape {palette.shape}.')
    return palette

## Looks up a grid of palette indices.
## \param[in] indices - A (height, width) array of palette indices.
## \param[in] transparent_index - Pixels with this index get zero alpha.
##            When None, every pixel is opaque.
## \return A (height, width, 4) RGBA array.
def apply_palette(indices: np.ndarray, palette: np.ndarray, transparent_index: Optional[int] = 0) -> np.ndarray:
    rgba = np.zeros((*indices.shape, 4), dtype = np.uint8)
    rgba[..., :3] = palette[indices]
    rgba[..., 3] = 0xff
    if transparent_index is not None:
        rgba[indices == transparent_index, 3] = 0
    return rgba
