import struct
import zlib

import numpy as np
import pytest

from JazzJackrabbit.Level import Level
from JazzJackrabbit.Mlle import MlleData, read_mlle_data

from builders import level_file, mlle_data, sample_palette, simple_layers, tileset

WORDS = [(0, 0, 0, 0), (1, 1, 1, 1), (2, 0, 0, 0)]
WORD_MAP = [1, 0, 2, 0]

def solid_tile(color_index: int) -> np.ndarray:
    return np.full((32, 32), color_index, dtype = np.uint8)

def create_level(directory, **mlle_settings) -> Level:
    (directory / 'Test.j2t').write_bytes(tileset([solid_tile(5), solid_tile(9)]))
    level_path = directory / 'Test.j2l'
    level_path.write_bytes(level_file(simple_layers(4, 4), WORDS, [WORD_MAP], trailing_data = mlle_data(**mlle_settings)))
    level = Level(str(level_path), resource_folder = str(directory))
    level.load_adjacent_folder(str(directory))
    return level

def test_reads_the_mlle_data():
    mlle = read_mlle_data(mlle_data(), 0)
    assert mlle.version == 0x104
    assert mlle.palette is None
    assert mlle.layer_count == 8
    assert [entry.source_layer_index for entry in mlle.layer_order] == list(range(8))
    assert mlle.layer_order[3].name == 'Layer 4'
    assert mlle.layer_order[3].has_tiles
    assert mlle.weapons == {}
    assert mlle.get_crate_redirects() == {}

def test_levels_without_mlle_data():
    assert read_mlle_data(b'', 0) is None

def test_unreadable_mlle_data_is_ignored(capsys):
    assert read_mlle_data(b'DATA' + bytes(12), 0) is None
    assert read_mlle_data(b'MLLE' + struct.pack('<III', 0x200, 0, 0), 0) is None
    assert read_mlle_data(b'MLLE' + struct.pack('<I', 0x104), 0) is None

    # The body is shorter than the settings it must hold.
    body = zlib.compress(bytes(5))
    assert read_mlle_data(b'MLLE' + struct.pack('<III', 0x104, len(body), 5) + body, 0) is None
    # The body has another size than declared.
    assert read_mlle_data(b'MLLE' + struct.pack('<III', 0x104, len(body), 6) + body, 0) is None
    # The body is not compressed.
    assert read_mlle_data(b'MLLE' + struct.pack('<III', 0x104, 5, 5) + bytes(5), 0) is None

    output = capsys.readouterr().out
    assert output.count('WARNING:') == 6

def test_palette_replaces_the_tileset_palette(tmp_path):
    palette = sample_palette()
    palette[5] = (1, 2, 3)
    level = create_level(tmp_path, palette = palette)
    assert level.get_image(draw_events = False).getpixel((0, 0)) == (1, 2, 3, 255)

def test_sprite_remapping(tmp_path):
    remapping = list(range(255, -1, -1))
    level = create_level(tmp_path, sprite_remapping = {4: remapping})
    # The paddles have two animations.
    assert level.palette_remapping[(72, 4)] == remapping
    assert level.palette_remapping[(72, 5)] == remapping
    assert len(level.palette_remapping) == 2

def test_layers_are_reordered(tmp_path):
    layer_order = [(3, 'Sprites')] + [(index, f'Layer {index}') for index in (1, 2, 0, 4, 5, 6, 7)]
    level = create_level(tmp_path, layer_order = layer_order)
    assert level.layers[1].is_sprite_layer
    assert level.layers[1].name == 'Sprites'
    assert level.sprite_layer is level.layers[1]
    assert [tile.tile_index for tile in level.get_map(1)[:4]] == [1, 1, 1, 1]
    assert level.get_map(4) == []
    assert level.get_image(draw_events = False).getpixel((0, 0)) == (*sample_palette()[5], 255)

def test_layers_are_imported_from_extra_level_files(tmp_path):
    extra_level = level_file(simple_layers(4, 4), [(0, 0, 0, 0), (2, 2, 2, 2)], [[1, 1, 1, 1]])
    (tmp_path / 'Test-MLLE-Data-1.j2l').write_bytes(extra_level)
    layer_order = [(index, f'Layer {index + 1}') for index in range(8)] + [(None, f'Imported {index + 1}') for index in range(8)]
    level = create_level(tmp_path, layer_order = layer_order)
    assert len(level.layers) == 16
    assert level.layers[12].name == 'Imported 4'
    assert not level.layers[12].is_sprite_layer
    assert level.sprite_layer is level.layers[4]
    assert [tile.tile_index for tile in level.get_map(12)[:4]] == [2, 2, 2, 2]

def test_missing_extra_level_files_keep_the_standard_layers(tmp_path, capsys):
    layer_order = [(index, f'Layer {index + 1}') for index in range(8)] + [(None, f'Imported {index + 1}') for index in range(8)]
    level = create_level(tmp_path, layer_order = layer_order)
    assert len(level.layers) == 8
    assert 'WARNING:' in capsys.readouterr().out
    assert level.sprite_layer is level.layers[4]

def test_extra_tilesets_start_on_a_new_row(tmp_path):
    (tmp_path / 'Extra.j2t').write_bytes(tileset([solid_tile(33), solid_tile(34)]))
    # Tile 2 of the extra tileset is its second solid tile.
    level = create_level(tmp_path, extra_tilesets = [('Extra.j2t', 2, 1)])
    level.load_tileset()
    assert len(level.tile_images) == 11
    assert level.tile_images[10, 0, 0].tolist() == [*sample_palette()[34], 255]
    assert not level.tile_images[3:10, ..., 3].any()

def test_missing_extra_tilesets_are_left_empty(tmp_path, capsys):
    level = create_level(tmp_path, extra_tilesets = [('Missing.j2t', 1, 1)])
    level.load_tileset()
    assert len(level.tile_images) == 3
    assert 'WARNING:' in capsys.readouterr().out

def test_edited_tiles(tmp_path):
    level = create_level(tmp_path, edited_tile_images = [(1, 77), (20, 78)], edited_tile_masks = [(2, True)])
    level.load_tileset()
    assert level.tile_images[1, 0, 0].tolist() == [*sample_palette()[77], 255]
    assert len(level.tile_images) == 21
    assert level.tile_images[20, 31, 31].tolist() == [*sample_palette()[78], 255]
    assert level.tile_masks[2].all()
    assert level.get_image(draw_events = False).getpixel((0, 0)) == (*sample_palette()[77], 255)

def test_custom_gun_crates(tmp_path):
    level = create_level(tmp_path, version = 0x105, weapon_crates = (60, 0, 0))
    assert level.mlle.version == 0x105
    assert level.mlle.weapons[7].crate_event_code == 60
    assert level.mlle.weapons[8].crate_event_code is None
    assert level.mlle.weapons[8].spread == 'gun8'
    assert level.mlle.get_crate_redirects() == {60: 300}
    assert level.get_event_resolver().resolve_redirect(60) == 300

def test_recolorable_sprites_depend_on_the_version():
    assert len(MlleData.RECOLORABLE_SPRITES + MlleData.RECOLORABLE_SPRITES_105) == 20
    remapping = list(range(256))
    mlle = read_mlle_data(mlle_data(version = 0x105, sprite_remapping = {12: remapping}), 0)
    # Recolourable sprite 12 is the fruit platform.
    assert mlle.sprite_remapping == {(48, 0): remapping, (48, 1): remapping}

if __name__ == "__main__":
    pytest.main()
