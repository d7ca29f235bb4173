## Builds small data files in memory, so the readers can be tested
## without the game's own files.

import struct
import zlib

import numpy as np

COPYRIGHT_NOTICE = b'                      Jazz Jackrabbit 2 Data File\r\n\r\n         Retail distribution of this data is prohibited without\r\n             written permission from Epic MegaGames, Inc.\r\n\r\n\x1a'
JJ2_HEADER_SIZE = 262
MAX_TILES_123 = 1024

## \return A palette where every entry is distinct: (i, 255 - i, i // 2).
def sample_palette() -> np.ndarray:
    indices = np.arange(256, dtype = np.uint16)
    return np.stack((indices, 255 - indices, indices // 2), axis = 1).astype(np.uint8)

## Writes a palette in the JASC-PAL text format.
def write_jasc_palette(filepath: str, palette: np.ndarray):
    lines = ['JASC-PAL', '0100', '256'] + [f'{r} {g} {b}' for r, g, b in palette]
    with open(filepath, 'w') as palette_file:
        palette_file.write('\n'.join(lines) + '\n')

## Encodes bytes as a run-length block, with its length prefix. Runs of three or
## more equal bytes are repeated; everything else is copied literally. The last
## byte is always stored with the terminating control byte.
def run_length_block(data: bytes) -> bytes:
    encoded = bytearray()
    literal = bytearray()

    def flush_literal():
        if literal:
            encoded.append(len(literal))
            encoded.extend(literal)
            literal.clear()

    body = data[:-1]
    index = 0
    while index < len(body):
        run_length = 1
        while (index + run_length < len(body)) and (body[index + run_length] == body[index]) and (run_length < 0x7f):
            run_length += 1
        if run_length >= 3:
            flush_literal()
            encoded.extend((0x80 | run_length, body[index]))
            index += run_length
        else:
            literal.append(body[index])
            index += 1
            if len(literal) == 0x7f:
                flush_literal()
    flush_literal()
    if data:
        encoded.extend((0x00, data[-1]))
    return struct.pack('<H', len(encoded)) + bytes(encoded)

## \return A file with the shared 262-byte header followed by the compressed substreams.
def jj2_file(magic_number: bytes, substreams, version: int, name: bytes = b'Test file', trailing_data: bytes = b'') -> bytes:
    compressed_substreams = [zlib.compress(substream) for substream in substreams]
    header = bytearray(JJ2_HEADER_SIZE)
    header[:len(COPYRIGHT_NOTICE)] = COPYRIGHT_NOTICE
    header[180:184] = magic_number
    header[188:188 + len(name)] = name
    struct.pack_into('<H', header, 220, version)
    struct.pack_into('<I', header, 222, JJ2_HEADER_SIZE + sum(len(data) for data in compressed_substreams))
    for index, (compressed, uncompressed) in enumerate(zip(compressed_substreams, substreams)):
        struct.pack_into('<II', header, 230 + index * 8, len(compressed), len(uncompressed))
    return bytes(header) + b''.join(compressed_substreams) + trailing_data

## Encodes a frame image. Zero pixels are skipped, the rest are copied.
## \param[in] pixel_rows - The palette index of each pixel, row by row.
def frame_image(pixel_rows) -> bytes:
    height = len(pixel_rows)
    width = len(pixel_rows[0]) if height else 0
    encoded = bytearray(struct.pack('<HH', width, height))
    for row in pixel_rows:
        x = 0
        while x < width:
            if row[x] == 0:
                skip_start = x
                while (x < width) and (row[x] == 0):
                    x += 1
                encoded.append(x - skip_start)
            else:
                copy_start = x
                while (x < width) and (row[x] != 0):
                    x += 1
                encoded.append(0x80 + (x - copy_start))
                encoded.extend(row[copy_start:x])
        encoded.append(0x80)
    return bytes(encoded)

## One frame of an animation, for animation_library.
class Frame:
    def __init__(self, pixel_rows, hotspot = (0, 0), coldspot = (0, 0), gunspot = (0, 0)):
        self.pixel_rows = pixel_rows
        self.hotspot = hotspot
        self.coldspot = coldspot
        self.gunspot = gunspot

    @property
    def width(self) -> int:
        return len(self.pixel_rows[0]) if self.pixel_rows else 0

    @property
    def height(self) -> int:
        return len(self.pixel_rows)

## \return A solid frame of the given size and palette index.
def solid_frame(width: int, height: int, color_index: int, **kwargs) -> Frame:
    return Frame([[color_index] * width for _ in range(height)], **kwargs)

## \param[in] sets - For each set, a list of animations, each a list of Frames.
def animation_library(sets, version: int = 0x200) -> bytes:
    HEADER_SIZE = 28
    SET_HEADER_SIZE = 44
    set_blobs = []
    for animations in sets:
        animation_data = bytearray()
        frame_data = bytearray()
        image_data = bytearray()
        frame_count = 0
        for frames in animations:
            animation_data += struct.pack('<HHI', len(frames), 10, 0)
            for frame in frames:
                image_offset = len(image_data)
                image_data += frame_image(frame.pixel_rows)
                frame_data += struct.pack(
                    '<HHhhhhhhII', frame.width, frame.height, *frame.coldspot, *frame.hotspot, *frame.gunspot, image_offset, 0)
                frame_count += 1
        substreams = [bytes(animation_data), bytes(frame_data), bytes(image_data), b'']
        compressed_substreams = [zlib.compress(substream) for substream in substreams]
        set_header = bytearray(b'ANIM')
        set_header += struct.pack('<BBHI', len(animations), 0, frame_count, 0)
        for compressed, uncompressed in zip(compressed_substreams, substreams):
            set_header += struct.pack('<II', len(compressed), len(uncompressed))
        assert len(set_header) == SET_HEADER_SIZE
        set_blobs.append(bytes(set_header) + b''.join(compressed_substreams))

    header = bytearray(b'ALIB')
    header += struct.pack('<II', 0x00BEBA00, HEADER_SIZE + 4 * len(sets))
    header += struct.pack('<HH', version, 0x1808)
    header += struct.pack('<I', 0)
    header += struct.pack('<I', 0)
    header += struct.pack('<I', len(sets))
    offset = HEADER_SIZE + 4 * len(sets)
    for blob in set_blobs:
        header += struct.pack('<I', offset)
        offset += len(blob)
    return bytes(header) + b''.join(set_blobs)

## \param[in] tiles - The 32x32 palette indices of each tile after the empty tile 0.
## \param[in] masks - The 32x32 solidity of each of those tiles. Defaults to empty masks.
## \return A tileset (version 1.23, 1024 tiles at most) whose first tile is empty.
def tileset(tiles, masks = None, palette = None, version: int = 512) -> bytes:
    max_tiles = 4096 if version == 513 else MAX_TILES_123
    palette = sample_palette() if palette is None else palette
    masks = masks if masks is not None else [np.zeros((32, 32), dtype = bool) for _ in tiles]
    tile_count = len(tiles) + 1

    # BUILD THE TILE DATA.
    # The empty tile is stored first, at offset 0.
    image_data = bytearray(1024)
    mask_data = bytearray(128)
    image_offsets = [0] * max_tiles
    mask_offsets = [0] * max_tiles
    for tile_index, (tile, mask) in enumerate(zip(tiles, masks), start = 1):
        image_offsets[tile_index] = len(image_data)
        image_data += np.asarray(tile, dtype = np.uint8).tobytes()
        mask_offsets[tile_index] = len(mask_data)
        mask_data += np.packbits(np.asarray(mask, dtype = bool).reshape(-1), bitorder = 'little').tobytes()

    # BUILD THE SETTINGS.
    settings = bytearray()
    for red, green, blue in palette:
        settings += bytes((int(red), int(green), int(blue), 0))
    settings += struct.pack('<I', tile_count)
    settings += bytes(max_tiles) * 2
    settings += struct.pack(f'<{max_tiles}I', *image_offsets)
    settings += bytes(4 * max_tiles) * 2
    settings += bytes(4 * max_tiles)
    settings += struct.pack(f'<{max_tiles}I', *mask_offsets)
    settings += bytes(4 * max_tiles)
    return jj2_file(b'TILE', [bytes(settings), bytes(image_data), b'', bytes(mask_data)], version)

## The settings of one layer of a level, for level_file.
def layer(width: int = 0, height: int = 0, has_tiles: bool = False, properties: int = 0, real_width: int = None,
          speed_x: int = 65536, speed_y: int = 65536, texture_color = (0, 0, 0)) -> dict:
    return dict(
        width = width, height = height, has_tiles = has_tiles, properties = properties,
        real_width = width if real_width is None else real_width,
        speed_x = speed_x, speed_y = speed_y, texture_color = texture_color)

## \param[in] layers - The settings of the eight layers (see layer).
## \param[in] words - The dictionary, each word four tile codes.
## \param[in] word_maps - For each layer with tiles, in order, its word indices.
## \param[in] events - The packed event of each tile of the sprite layer.
## \param[in] animations - For each animated tile, the tile codes of its frames.
## \return A level (version 1.23).
def level_file(
        layers, words, word_maps, events = None, tileset_filename: str = 'Test.j2t', static_tile_count: int = MAX_TILES_123,
        animations = (), tile_types = None, trailing_data: bytes = b'', level_name: str = 'Test level') -> bytes:
    max_tiles = MAX_TILES_123
    sprite_layer = layers[3]
    events = events if events is not None else [0] * (sprite_layer['width'] * sprite_layer['height'])

    # BUILD THE SETTINGS.
    settings = bytearray(struct.pack('<HHHH', 0, 0, 0, 0))
    settings += struct.pack('<BBBH??I', 4, 100, 100, len(animations), False, False, 0)
    for text in (level_name, tileset_filename, '', '', '', ''):
        settings += text.encode('latin-1').ljust(32, b'\x00')
    settings += bytes(512 * 16)
    settings += struct.pack('<8I', *(layer_settings['properties'] for layer_settings in layers))
    settings += bytes(8)
    settings += struct.pack('<8?', *(layer_settings['has_tiles'] for layer_settings in layers))
    settings += struct.pack('<8I', *(layer_settings['width'] for layer_settings in layers))
    settings += struct.pack('<8I', *(layer_settings['real_width'] for layer_settings in layers))
    settings += struct.pack('<8I', *(layer_settings['height'] for layer_settings in layers))
    settings += struct.pack('<8i', *(-300 + 100 * index for index in range(8)))
    settings += bytes(8)
    settings += bytes(4 * 8) * 2
    settings += struct.pack('<8i', *(layer_settings['speed_x'] for layer_settings in layers))
    settings += struct.pack('<8i', *(layer_settings['speed_y'] for layer_settings in layers))
    settings += bytes(4 * 8) * 2
    settings += bytes(8)
    for layer_settings in layers:
        settings += bytes(layer_settings['texture_color'])
    settings += struct.pack('<H', static_tile_count)
    settings += bytes(4 * max_tiles)
    settings += bytes(max_tiles)
    tile_types = list(tile_types or [])
    settings += bytes(tile_types + [0] * (max_tiles - len(tile_types)))
    settings += bytes(max_tiles)
    for frames in animations:
        settings += struct.pack('<HHH?BB', 0, 0, 0, False, 10, len(frames))
        settings += struct.pack('<64H', *(list(frames) + [0] * (64 - len(frames))))

    # BUILD THE OTHER SUBSTREAMS.
    event_data = struct.pack(f'<{len(events)}I', *events)
    dictionary = b''.join(struct.pack('<4H', *word) for word in words)
    map_data = b''.join(struct.pack(f'<{len(word_map)}H', *word_map) for word_map in word_maps)
    return jj2_file(b'LEVL', [bytes(settings), event_data, dictionary, map_data], 514, trailing_data = trailing_data)

## \return The empty layer settings of a level whose sprite layer has the given size.
def simple_layers(width: int, height: int, **sprite_layer_settings):
    layers = [layer() for _ in range(8)]
    layers[3] = layer(width, height, has_tiles = True, **sprite_layer_settings)
    return layers

## \return The string with its length in 7-bit groups, most significant group first.
def string_7bit(text: str) -> bytes:
    encoded_text = text.encode('latin-1')
    length = len(encoded_text)
    groups = [length & 0x7f]
    length >>= 7
    while length:
        groups.insert(0, (length & 0x7f) | 0x80)
        length >>= 7
    return bytes(groups) + encoded_text

## One weapon of the MLLE weapon settings, for mlle_data.
def mlle_weapon(weapon_number: int, crate_event_code: int = 0, is_custom: bool = False, spread: int = 0) -> bytes:
    weapon = bytearray(struct.pack('<?iB?BBB', is_custom, 99, 1, True, 0, 0, 0))
    if weapon_number >= 7:
        weapon.append(crate_event_code)
    if is_custom:
        weapon += string_7bit('Custom weapon') + struct.pack('<i', 2) + b'\x01\x02'
    elif weapon_number == 8:
        weapon.append(spread)
    return bytes(weapon)

## \param[in] layer_order - For each layer, its (source layer index or None, name).
##            Defaults to the standard eight layers in order.
## \param[in] extra_tilesets - (filename, first tile, tile count) for each extra tileset.
## \param[in] edited_tile_images - (tile index, palette index) for each tile replaced by a solid colour.
## \param[in] edited_tile_masks - (tile index, solid) for each tile whose mask is replaced.
## \param[in] weapon_crates - The custom gun crate events of weapons 7 through 9.
## \return The MLLE data saved after the substreams of a level.
def mlle_data(
        version: int = 0x104, palette = None, sprite_remapping = None, extra_tilesets = (), layer_order = None,
        edited_tile_images = (), edited_tile_masks = (), weapon_crates = (0, 0, 0)) -> bytes:
    body = bytearray()
    # LEVEL SETTINGS.
    body += struct.pack('<??BB??iIfBiBf', False, True, 0, 0, False, False, 0, 0, 1.0, 0, 8, 0, 0x7fff)
    body += bytes(1) + bytes((0, 0, 0)) + bytes(1) + bytes((0, 0, 0))
    # PALETTE.
    if palette is None:
        body += b'\x00'
    else:
        body += b'\x01' + np.asarray(palette, dtype = np.uint8).tobytes()
    # SPRITE REMAPPING.
    recolorable_sprite_count = 20 if version >= 0x105 else 11
    sprite_remapping = sprite_remapping or {}
    for index in range(recolorable_sprite_count):
        if index in sprite_remapping:
            body += b'\x01' + bytes(sprite_remapping[index])
        else:
            body += b'\x00'
    # EXTRA TILESETS.
    body.append(len(extra_tilesets))
    for filename, tile_start, tile_count in extra_tilesets:
        body += string_7bit(filename) + struct.pack('<HH', tile_start, tile_count) + b'\x00'
    # LAYERS.
    if layer_order is None:
        layer_order = [(index, f'Layer {index + 1}') for index in range(8)]
    body += struct.pack('<I', len(layer_order))
    for source_layer_index, name in layer_order:
        body.append(0xff if source_layer_index is None else source_layer_index)
        body += string_7bit(name) + struct.pack('<?BBii', False, 0, 0, 0, 0)
    # EDITED TILES.
    body += struct.pack('<H', len(edited_tile_images))
    for tile_index, color_index in edited_tile_images:
        body += struct.pack('<H', tile_index) + bytes([color_index]) * 1024
    body += struct.pack('<H', len(edited_tile_masks))
    for tile_index, is_solid in edited_tile_masks:
        body += struct.pack('<H', tile_index) + bytes([1 if is_solid else 0]) * 1024
    # WEAPONS.
    if version >= 0x105:
        for weapon_number in range(1, 10):
            crate_event_code = weapon_crates[weapon_number - 7] if weapon_number >= 7 else 0
            body += mlle_weapon(weapon_number, crate_event_code)

    compressed_body = zlib.compress(bytes(body))
    return b'MLLE' + struct.pack('<III', version, len(compressed_body), len(body)) + compressed_body

## \return Palette data of the older family: 256 entries of three 6-bit channels.
def six_bit_palette(offset: int = 0) -> bytes:
    return b''.join(bytes(((index + offset) % 64, (index // 4) % 64, 63 - (index % 64))) for index in range(256))

## \param[in] tiles - The palette index of every pixel of each tile.
## \return A blocks file with three palettes and one section of 60 tiles.
def blocks_file(tiles, palettes = None) -> bytes:
    TRANSPARENT_INDEX = 127
    palettes = palettes if palettes is not None else [six_bit_palette(offset) for offset in range(3)]
    data = b''.join(run_length_block(palette) for palette in palettes)
    data += b'ok'
    for tile_index in range(60):
        tile = tiles[tile_index] if tile_index < len(tiles) else bytes([TRANSPARENT_INDEX]) * 1024
        data += run_length_block(bytes(tile))
    return data

## \return A planet file with the given name, a palette and an image of a single colour.
def planet_file(name: bytes, color_index: int) -> bytes:
    return b'\x00\x00' + bytes([len(name)]) + name + six_bit_palette() + bytes([color_index]) * (64 * 55)

## \param[in] tile_map - The (tile, event) of each tile, keyed by (column, row).
## \return A level of the older family.
def legacy_level_file(tile_map, level_number: int = 1, world_number: int = 0, blocks_number: bytes = b'000', background_type: int = 0) -> bytes:
    RAW_SUBSTREAM_SIZES = {9: 598, 11: 4, 14: 25, 16: 3}
    map_data = bytearray(256 * 64 * 2)
    for (column, row), (tile_index, event) in tile_map.items():
        map_index = column * 64 + row
        map_data[map_index * 2] = tile_index
        map_data[map_index * 2 + 1] = event

    data = bytearray(b'Jazz Jackrabbit level'.ljust(39, b'\x00'))
    for index in range(1, 17):
        if index == 1:
            data += run_length_block(bytes(map_data))
        elif index == 14:
            data += bytes([background_type]) + bytes(24)
        elif index in RAW_SUBSTREAM_SIZES:
            data += bytes(RAW_SUBSTREAM_SIZES[index])
        else:
            data += run_length_block(bytes(16))
    data += bytes((level_number ^ 210, world_number ^ 4)) + bytes(9) + blocks_number
    return bytes(data)

## \param[in] illustration, title, title_dark - Each image's palette indices, row by row.
## \return An episode whose images are the given ones.
def episode_file(name: bytes, illustration, title, title_dark, first_level: bytes = b'level1.j2l') -> bytes:
    images = [np.asarray(image, dtype = np.uint8) for image in (illustration, title, title_dark)]
    compressed_images = [zlib.compress(image.tobytes()) for image in images]
    header = bytearray(struct.pack('<IIII', 212, 0, 1, 0))
    header += name.ljust(128, b'\x00') + first_level.ljust(32, b'\x00')
    header += struct.pack('<II', images[0].shape[1], images[0].shape[0]) + bytes(8)
    header += struct.pack('<II', images[1].shape[1], images[1].shape[0])
    header += struct.pack('<3I', *(len(compressed) for compressed in compressed_images))
    return bytes(header) + b''.join(compressed_images)
