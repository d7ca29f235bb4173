from typing import Optional, Tuple

import numpy as np
from PIL import Image

# A fully transparent pixel.
TRANSPARENT = (0, 0, 0, 0)

## \return A new RGBA image, transparent unless a fill colour is given.
def new_canvas(width: int, height: int, fill_color: Optional[Tuple[int, ...]] = None) -> Image.Image:
    if fill_color is None:
        fill_color = TRANSPARENT
    elif len(fill_color) == 3:
        fill_color = (*fill_color, 0xff)
    return Image.new('RGBA', (max(0, int(width)), max(0, int(height))), fill_color)

## Draws one image over another, respecting the alpha of both.
## Parts of the source that fall outside the destination are clipped,
## including when the position is negative.
## \param[in,out] destination - The image to draw on.
## \param[in] source - The image to draw.
## \param[in] x, y - Where the top left corner of the source goes.
## \param[in] opacity - A percentage applied to the source's alpha.
def paste(destination: Image.Image, source: Image.Image, x: int, y: int, opacity: int = 100):
    x, y = int(x), int(y)
    # CLIP THE SOURCE.
    source_left = max(0, -x)
    source_top = max(0, -y)
    source_right = min(source.width, destination.width - x)
    source_bottom = min(source.height, destination.height - y)
    if (source_left >= source_right) or (source_top >= source_bottom):
        return
    clipped_source = source.convert('RGBA').crop((source_left, source_top, source_right, source_bottom))

    # APPLY THE OPACITY.
    if opacity < 100:
        pixels = np.array(clipped_source)
        pixels[..., 3] = (pixels[..., 3].astype(np.uint16) * max(0, opacity) // 100).astype(np.uint8)
        clipped_source = Image.fromarray(pixels, 'RGBA')

    destination.alpha_composite(clipped_source, dest = (x + source_left, y + source_top))

## \return The image drawn on an opaque background colour.
def flatten(image: Image.Image, background_color: Tuple[int, int, int]) -> Image.Image:
    background = new_canvas(image.width, image.height, background_color)
    paste(background, image, 0, 0)
    return background
