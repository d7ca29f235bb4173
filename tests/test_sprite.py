import struct

import numpy as np
import pytest
from PIL import Image

from JazzJackrabbit.Assets.Canvas import flatten, new_canvas, paste
from JazzJackrabbit.Assets.Sprite import LOOKUP_TABLE_ALPHA, Sprite, decode_frame, render_pixel_grid
from JazzJackrabbit.Primitives.Palette import apply_palette, palette_from_bytes, verify_palette
from JazzJackrabbit.Exceptions import TruncatedSpriteData

from builders import frame_image, sample_palette

def test_decode_frame():
    pixel_rows = [
        [0, 5, 5, 0],
        [7, 0, 0, 8],
        [0, 0, 0, 0]]
    width, height, pixel_grid = decode_frame(frame_image(pixel_rows))
    assert (width, height) == (4, 3)
    assert pixel_grid.tolist() == pixel_rows

def test_width_flag_is_ignored():
    encoded = struct.pack('<HH', 0x8000 | 2, 1) + b'\x82\x01\x02\x80'
    width, height, pixel_grid = decode_frame(encoded)
    assert (width, height) == (2, 1)
    assert pixel_grid.tolist() == [[1, 2]]

def test_pixels_past_the_right_edge_are_discarded():
    encoded = struct.pack('<HH', 2, 1) + b'\x01\x83\x09\x09\x09\x80'
    _, _, pixel_grid = decode_frame(encoded)
    assert pixel_grid.tolist() == [[0, 9]]

def test_truncated_frames():
    with pytest.raises(TruncatedSpriteData):
        decode_frame(b'\x02\x00')
    # Only one of the two rows ends.
    with pytest.raises(TruncatedSpriteData):
        decode_frame(struct.pack('<HH', 1, 2) + b'\x81\x01\x80')

def test_render_pixel_grid():
    palette = sample_palette()
    image = render_pixel_grid(np.array([[0, 200]], dtype = np.uint8), palette)
    assert image.mode == 'RGBA'
    assert image.getpixel((0, 0))[3] == 0
    assert image.getpixel((1, 0)) == (200, 55, 100, 255)

def test_render_with_a_lookup_table():
    palette = sample_palette()
    lookup_table = list(range(100, 116))
    # Index 25 becomes lookup_table[(25 >> 3) & 15] = lookup_table[3].
    image = render_pixel_grid(np.array([[0, 25]], dtype = np.uint8), palette, lookup_table)
    assert image.getpixel((0, 0))[3] == 0
    assert image.getpixel((1, 0)) == (103, 152, 51, LOOKUP_TABLE_ALPHA)

def test_sprite_keeps_its_reference_points():
    sprite = Sprite(Image.new('RGBA', (10, 6)), hotspot_x = -5, hotspot_y = -6, coldspot_y = -1)
    assert (sprite.width, sprite.height) == (10, 6)
    duplicate = sprite.copy()
    assert (duplicate.hotspot_x, duplicate.hotspot_y, duplicate.coldspot_y) == (-5, -6, -1)
    assert duplicate.image is not sprite.image

    sprite.image = Image.new('RGBA', (3, 4))
    assert (sprite.width, sprite.height) == (3, 4)
    assert sprite.hotspot_x == -5

def test_paste_clips_to_the_destination():
    canvas = new_canvas(4, 4)
    paste(canvas, Image.new('RGBA', (3, 3), (255, 0, 0, 255)), -1, 2)
    pixels = np.array(canvas)
    assert pixels[2:4, 0:2, 0].tolist() == [[255, 255], [255, 255]]
    assert pixels[0:2, :, 3].sum() == 0
    assert pixels[:, 2:, 3].sum() == 0

    # Sources entirely outside the destination are ignored.
    paste(canvas, Image.new('RGBA', (3, 3), (0, 255, 0, 255)), 10, 10)

def test_paste_with_opacity():
    canvas = new_canvas(1, 1, (0, 0, 0))
    paste(canvas, Image.new('RGBA', (1, 1), (200, 200, 200, 255)), 0, 0, opacity = 50)
    red, _, _, alpha = canvas.getpixel((0, 0))
    assert alpha == 255
    assert 95 <= red <= 105

def test_flatten():
    image = Image.new('RGBA', (2, 1))
    image.putpixel((1, 0), (10, 20, 30, 255))
    flattened = flatten(image, (87, 0, 203))
    assert flattened.getpixel((0, 0)) == (87, 0, 203, 255)
    assert flattened.getpixel((1, 0)) == (10, 20, 30, 255)

def test_palettes():
    raw = bytes((1, 2, 3, 0, 4, 5, 6, 0))
    palette = palette_from_bytes(raw, has_entry_alignment = True)
    assert palette.shape == (256, 3)
    assert palette[1].tolist() == [4, 5, 6]
    # Missing entries are black.
    assert palette[2].tolist() == [0, 0, 0]

    palette = palette_from_bytes(bytes((63, 1, 0)), bits_per_channel = 6)
    assert palette[0].tolist() == [252, 4, 0]

    with pytest.raises(ValueError):
        verify_palette(np.zeros((16, 3)))

def test_apply_palette():
    palette = sample_palette()
    rgba = apply_palette(np.array([[0, 1], [127, 2]], dtype = np.uint8), palette, transparent_index = 127)
    assert rgba[0, 0].tolist() == [0, 255, 0, 255]
    assert rgba[1, 0, 3] == 0
    assert apply_palette(np.array([[0]], dtype = np.uint8), palette, transparent_index = None)[0, 0, 3] == 255

if __name__ == "__main__":
    pytest.main()
