import zlib
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from .Primitives.ByteCursor import ByteCursor
from .Primitives.Palette import PALETTE_ENTRY_COUNT, palette_from_bytes
from .Exceptions import OutOfBounds, TruncatedInput

## A tileset whose tiles are appended to the level's own tileset.
@dataclass
class ExtraTileset:
    filename: str
    tile_start: int
    tile_count: int
    # Maps each palette index of the extra tileset to an index of the level
    # palette. When None, the indices are used as they are.
    palette_remapping: Optional[List[int]] = None

## One entry of the reordered layer list.
@dataclass
class LayerOrderEntry:
    # The index (0-7) of one of the level's own layers, or None for the next
    # layer imported from an extra layer file.
    source_layer_index: Optional[int]
    name: str
    has_tiles: bool
    sprite_mode: int
    sprite_param: int
    angle: int
    angle_multiplier: int

## A tile whose image or mask was edited in the level editor.
@dataclass
class EditedTile:
    tile_index: int
    # 1024 palette indices, row by row. For masks, nonzero pixels are solid.
    pixels: bytes

@dataclass
class WeaponSettings:
    is_custom: bool
    maximum: int
    comes_from_birds: bool
    comes_from_birds_powerup: bool
    comes_from_gun_crates: bool
    gems_lost: int
    gems_lost_powerup: int
    is_infinite: bool
    replenishes: bool
    # Some weapons can use an arbitrary event as their gun crate. That event is
    # drawn through one of the meta events starting at 300.
    crate_event_code: Optional[int] = None
    crate_meta_event_code: Optional[int] = None
    spread: Optional[str] = None
    gradual_aim: bool = False

## The extra level data that the MLLE level editor stores in Data5.
## The data starts with the magic number "MLLE", a version, and the
## compressed and uncompressed sizes of the zlib-compressed body.
class MlleData:
    MAGIC_NUMBER = b'MLLE'
    SUPPORTED_VERSIONS = (0x103, 0x104, 0x105)
    WEAPON_SETTINGS_VERSION = 0x105
    # The sprites that can be recoloured, in the order their remappings are stored.
    # Each entry lists the (set, animation) pairs drawn with the remapping; None
    # marks recolourable sprites that are never drawn here.
    RECOLORABLE_SPRITES = (
        ((72, 0),),  # Carrot bump
        ((72, 2),),  # 500 bump
        ((17, 0),),  # Carrotus pole
        ((28, 0),),  # Diamondus pole
        ((72, 4), (72, 5)),  # Paddles
        ((58, 0),),  # Jungle pole
        None,  # Leaf
        ((74, 0),),  # Psych pole
        ((84, 0),),  # Small tree
        None,  # Snow
        None)  # Rain
    RECOLORABLE_SPRITES_105 = (
        ((10, 0), (10, 1)),  # Boll platform
        ((48, 0), (48, 1)),  # Fruit platform
        ((51, 0), (51, 1)),  # Grass platform
        ((73, 0), (73, 1)),  # Pink platform
        ((87, 0), (87, 1)),  # Sonic platform
        ((95, 0), (95, 1)),  # Spike platform
        ((93, 0), (93, 1)),  # Spike boll
        ((93, 0), (93, 1)),  # 3D spike boll
        ((106, 1),))  # Swinging vine
    WEAPON_COUNT = 9
    # Weapons from this one onward can have a custom gun crate.
    FIRST_CUSTOM_CRATE_WEAPON = 7
    FIRST_META_EVENT_CODE = 300
    # Crate events at or below this are ordinary crates.
    LAST_BUILTIN_CRATE_EVENT_CODE = 32
    IMPORTED_LAYER_INDEX = 0xff

    ## Reads the body of the MLLE data.
    ## \param[in] body - The decompressed body.
    def __init__(self, version: int, body: bytes):
        self.version = version
        cursor = ByteCursor(body)
        try:
            self._read_level_settings(cursor)
            self._read_palette(cursor)
            self._read_sprite_remapping(cursor)
            self._read_extra_tilesets(cursor)
            self._read_layer_order(cursor)
            self.edited_tile_images: List[EditedTile] = self._read_edited_tiles(cursor)
            self.edited_tile_masks: List[EditedTile] = self._read_edited_tiles(cursor)
            self.weapons: Dict[int, WeaponSettings] = {}
            if version >= self.WEAPON_SETTINGS_VERSION:
                self._read_weapons(cursor)
        except OutOfBounds as error:
            raise TruncatedInput(f'MLLE data ends early: {error}') from error

    def _read_level_settings(self, cursor: ByteCursor):
        self.snow = cursor.boolean()
        self.snow_outdoors_only = not cursor.boolean()
        self.snow_intensity = cursor.uint8()
        self.snow_type = cursor.uint8()
        self.warps_transmute = cursor.boolean()
        self.delay_generated_crate_origins = cursor.boolean()
        self.echo = cursor.int32()
        self.darkness_color = cursor.uint32()
        self.water_change_speed = cursor.float32()
        self.water_interaction = cursor.uint8()
        self.water_layer = cursor.int32()
        self.water_lighting = cursor.uint8()
        self.water_level = cursor.float32()
        cursor.skip(1)
        self.water_gradient_start = tuple(cursor.uint8(3))
        cursor.skip(1)
        self.water_gradient_end = tuple(cursor.uint8(3))

    def _read_palette(self, cursor: ByteCursor):
        # When there is no palette, the tileset palette is used.
        self.palette: Optional[np.ndarray] = None
        has_palette = cursor.boolean()
        if has_palette:
            self.palette = palette_from_bytes(cursor.read(PALETTE_ENTRY_COUNT * 3))

    def _read_sprite_remapping(self, cursor: ByteCursor):
        self.sprite_remapping: Dict[Tuple[int, int], List[int]] = {}
        recolorable_sprites = self.RECOLORABLE_SPRITES
        if self.version >= self.WEAPON_SETTINGS_VERSION:
            recolorable_sprites += self.RECOLORABLE_SPRITES_105
        for animations in recolorable_sprites:
            is_recolored = cursor.boolean()
            if not is_recolored:
                continue
            remapping = cursor.uint8(PALETTE_ENTRY_COUNT)
            if animations is None:
                continue
            for set_and_animation in animations:
                self.sprite_remapping[set_and_animation] = remapping

    def _read_extra_tilesets(self, cursor: ByteCursor):
        self.extra_tilesets: List[ExtraTileset] = []
        extra_tileset_count = cursor.uint8()
        for _ in range(extra_tileset_count):
            extra_tileset = ExtraTileset(
                filename = cursor.string_7bit(),
                tile_start = cursor.uint16(),
                tile_count = cursor.uint16())
            has_palette = cursor.boolean()
            if has_palette:
                extra_tileset.palette_remapping = cursor.uint8(PALETTE_ENTRY_COUNT)
            self.extra_tilesets.append(extra_tileset)

    def _read_layer_order(self, cursor: ByteCursor):
        self.layer_order: List[LayerOrderEntry] = []
        self.layer_count = cursor.uint32()
        for _ in range(self.layer_count):
            layer_index = cursor.uint8()
            self.layer_order.append(LayerOrderEntry(
                source_layer_index = None if layer_index == self.IMPORTED_LAYER_INDEX else layer_index,
                name = cursor.string_7bit(),
                has_tiles = not cursor.boolean(),
                sprite_mode = cursor.uint8(),
                sprite_param = cursor.uint8(),
                angle = cursor.int32(),
                angle_multiplier = cursor.int32()))

    @staticmethod
    def _read_edited_tiles(cursor: ByteCursor) -> List[EditedTile]:
        TILE_PIXEL_COUNT = 32 * 32
        edited_tiles = []
        edited_tile_count = cursor.uint16()
        for _ in range(edited_tile_count):
            tile_index = cursor.uint16()
            edited_tiles.append(EditedTile(tile_index, cursor.read(TILE_PIXEL_COUNT)))
        return edited_tiles

    def _read_weapons(self, cursor: ByteCursor):
        for weapon_number in range(1, self.WEAPON_COUNT + 1):
            is_custom = cursor.boolean()
            maximum = cursor.int32()
            birds = cursor.uint8()
            comes_from_gun_crates = cursor.boolean()
            gems_lost = cursor.uint8()
            gems_lost_powerup = cursor.uint8()
            flags = cursor.uint8()
            weapon = WeaponSettings(
                is_custom = is_custom,
                maximum = maximum,
                comes_from_birds = birds != 0,
                comes_from_birds_powerup = birds == 2,
                comes_from_gun_crates = comes_from_gun_crates,
                gems_lost = gems_lost,
                gems_lost_powerup = gems_lost_powerup,
                is_infinite = (flags & 1) != 0,
                replenishes = (flags & 2) != 0)

            if weapon_number >= self.FIRST_CUSTOM_CRATE_WEAPON:
                crate_event_code = cursor.uint8()
                if crate_event_code > self.LAST_BUILTIN_CRATE_EVENT_CODE:
                    weapon.crate_event_code = crate_event_code
                    weapon.crate_meta_event_code = self.FIRST_META_EVENT_CODE + weapon_number - self.FIRST_CUSTOM_CRATE_WEAPON

            if weapon.is_custom:
                # The weapon's name and parameters are not used.
                cursor.string_7bit()
                parameters_size = cursor.int32()
                cursor.skip(parameters_size)
            elif weapon_number == 8:
                spread = cursor.uint8()
                weapon.spread = {0: 'gun8', 1: 'pepperspray'}.get(spread, 'normal')
                weapon.gradual_aim = (spread == 2)

            self.weapons[weapon_number] = weapon

    ## \return The events to redirect so that custom gun crates are drawn.
    def get_crate_redirects(self) -> Dict[int, int]:
        redirects = {}
        for weapon in self.weapons.values():
            if weapon.crate_event_code is not None:
                redirects[weapon.crate_event_code] = weapon.crate_meta_event_code
        return redirects

## Reads the MLLE data that follows the level's substreams.
## \param[in] data - The data of the whole level file.
## \param[in] offset - The position just after the last substream.
## \return The data, or None when the level has no MLLE data this reader supports.
def read_mlle_data(data: bytes, offset: int) -> Optional[MlleData]:
    MLLE_HEADER_SIZE = 16
    if len(data) < offset + len(MlleData.MAGIC_NUMBER) + 1:
        return None

    # READ THE HEADER.
    cursor = ByteCursor(data)
    cursor.seek(offset)
    magic_number = cursor.read(len(MlleData.MAGIC_NUMBER))
    if magic_number != MlleData.MAGIC_NUMBER:
        print(f'WARNING: Data5 has magic number {magic_number}, not MLLE data. Ignoring it.')
        return None
    if cursor.remaining < MLLE_HEADER_SIZE - len(MlleData.MAGIC_NUMBER):
        print('WARNING: MLLE data header is incomplete. Ignoring it.')
        return None
    version = cursor.uint32()
    if version not in MlleData.SUPPORTED_VERSIONS:
        print(f'WARNING: MLLE data version 0x{version:x} is not supported. Ignoring it.')
        return None
    compressed_size = cursor.uint32()
    uncompressed_size = cursor.uint32()

    # DECOMPRESS THE BODY.
    compressed_body = data[cursor.position:cursor.position + compressed_size]
    try:
        body = zlib.decompress(compressed_body)
    except zlib.error as error:
        print(f'WARNING: Could not decompress MLLE data: {error}. Ignoring it.')
        return None
    if len(body) != uncompressed_size:
        print(f'WARNING: MLLE data is {len(body)} bytes, expected {uncompressed_size} bytes. Ignoring it.')
        return None
    try:
        return MlleData(version, body)
    except TruncatedInput as error:
        print(f'WARNING: {error}. Ignoring the MLLE data.')
        return None
