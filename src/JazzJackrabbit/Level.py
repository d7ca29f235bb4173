import math
import os
import random
import re
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
from PIL import Image, ImageOps

from . import global_variables
from .Containers.Jj2File import Jj2File
from .Primitives.ByteCursor import ByteCursor
from .Primitives.Palette import verify_palette
from .Assets.Canvas import new_canvas, paste
from .Assets.Events import EVENT_CODE_MASK, EVENT_PARAMETERS_SHIFT, EventResolver, get_event_parameter
from .Assets.TileDictionary import TILES_PER_WORD, TileReference, build_dictionary, expand_map, inflate_map
from .Mlle import MlleData, read_mlle_data
from .Tileset import TILE_SIZE, TILES_PER_ROW, Tileset
from .Exceptions import CorruptHeader, DecompressionMismatch, JazzFileError, OutOfBounds, TruncatedInput

# A region of a level in pixels: (left, top, right, bottom).
Box = Tuple[int, int, int, int]

## The flags stored in the properties of each layer.
class LayerProperty:
    TILE_WIDTH = 1
    TILE_HEIGHT = 2
    LIMIT_VISIBLE_REGION = 4
    TEXTURE_MODE = 8
    TEXTURE_STARS = 16

## One of the animated tiles of a level.
@dataclass
class TileAnimation:
    frame_wait: int
    random_wait: int
    ping_pong_wait: int
    ping_pong: bool
    speed: int
    # The tile codes of the frames, which can themselves be flipped.
    frames: List[int]

## A layer of tiles. Levels have eight, drawn from the back (8) to the front (1).
@dataclass
class Layer:
    properties: int
    layer_type: int
    # Whether the layer is drawn. A layer can store tiles but be hidden.
    has_tiles: bool
    width: int
    real_width: int
    height: int
    z: int
    detail: int
    wave_x: int
    wave_y: int
    speed_x: int
    speed_y: int
    auto_speed_x: int
    auto_speed_y: int
    texture_mode: int
    texture_color: Tuple[int, int, int]
    # Whether the level stores a word map for this layer.
    stores_tiles: bool = False
    # Where the layer's word indices start in Data4.
    word_offset: int = 0
    is_sprite_layer: bool = False
    name: str = ''
    # The inflated map, kept once read so layers can be reordered or imported
    # from other levels after their words are resolved.
    tile_map: Optional[List[TileReference]] = field(default = None, repr = False)

    @property
    def tile_width(self) -> bool:
        return (self.properties & LayerProperty.TILE_WIDTH) != 0

    @property
    def tile_height(self) -> bool:
        return (self.properties & LayerProperty.TILE_HEIGHT) != 0

    @property
    def is_textured(self) -> bool:
        return (self.properties & LayerProperty.TEXTURE_MODE) != 0

    ## The width of the stored map, which for layers that tile horizontally
    ## can be wider than the width shown in the level editor.
    @property
    def map_width(self) -> int:
        return self.real_width if self.tile_width else self.width

    ## Maps are stored in whole words, so each row is padded to a multiple of four tiles.
    @property
    def row_width(self) -> int:
        return -(-self.map_width // TILES_PER_WORD) * TILES_PER_WORD

    @property
    def word_count(self) -> int:
        return (self.row_width // TILES_PER_WORD) * self.height

## The level settings stored in Data1.
class LevelSettings:
    LAYER_COUNT = 8
    HELP_STRING_COUNT = 16
    HELP_STRING_LENGTH = 512
    FILENAME_LENGTH = 32
    MAXIMUM_ANIMATION_FRAMES = 64

    def __init__(self, cursor: ByteCursor, max_tiles: int):
        # READ THE GENERAL SETTINGS.
        self.camera_x = cursor.uint16()
        cursor.skip(2)
        self.camera_y = cursor.uint16()
        cursor.skip(2)
        self.editor_layer = cursor.uint8() & 0x0f
        self.minimum_light = cursor.uint8()
        self.starting_light = cursor.uint8()
        self.animation_count = cursor.uint16()
        self.vertical_split = cursor.boolean()
        self.is_multiplayer = cursor.boolean()
        self.buffer_size = cursor.uint32()
        self.level_name = cursor.string(self.FILENAME_LENGTH)
        self.tileset_filename = cursor.string(self.FILENAME_LENGTH)
        self.bonus_level = cursor.string(self.FILENAME_LENGTH)
        self.next_level = cursor.string(self.FILENAME_LENGTH)
        self.secret_level = cursor.string(self.FILENAME_LENGTH)
        self.music_filename = cursor.string(self.FILENAME_LENGTH)
        self.help_strings = cursor.string(self.HELP_STRING_LENGTH, self.HELP_STRING_COUNT)

        # READ THE LAYERS.
        # Each property of the layers is stored as an array with an entry for each layer.
        layer_count = self.LAYER_COUNT
        properties = cursor.uint32(layer_count)
        layer_types = cursor.uint8(layer_count)
        has_tiles = cursor.boolean(layer_count)
        widths = cursor.uint32(layer_count)
        real_widths = cursor.uint32(layer_count)
        heights = cursor.uint32(layer_count)
        z_values = cursor.int32(layer_count)
        details = cursor.uint8(layer_count)
        waves_x = cursor.int32(layer_count)
        waves_y = cursor.int32(layer_count)
        speeds_x = cursor.int32(layer_count)
        speeds_y = cursor.int32(layer_count)
        auto_speeds_x = cursor.int32(layer_count)
        auto_speeds_y = cursor.int32(layer_count)
        texture_modes = cursor.uint8(layer_count)
        texture_colors = cursor.raw(3, layer_count)
        self.layers: List[Layer] = []
        word_offset = 0
        for index in range(layer_count):
            layer = Layer(
                properties = properties[index],
                layer_type = layer_types[index],
                has_tiles = has_tiles[index],
                width = widths[index],
                real_width = real_widths[index],
                height = heights[index],
                z = z_values[index],
                detail = details[index],
                wave_x = waves_x[index],
                wave_y = waves_y[index],
                speed_x = speeds_x[index],
                speed_y = speeds_y[index],
                auto_speed_x = auto_speeds_x[index],
                auto_speed_y = auto_speeds_y[index],
                texture_mode = texture_modes[index],
                texture_color = tuple(texture_colors[index]),
                stores_tiles = has_tiles[index],
                name = f'Layer {index + 1}')
            # Only layers with tiles have a map in Data4.
            if layer.stores_tiles:
                layer.word_offset = word_offset
                word_offset += layer.word_count * 2
            self.layers.append(layer)

        # READ THE TILE TABLES.
        self.static_tile_count = cursor.uint16()
        self.tile_events = cursor.uint32(max_tiles)
        self.tile_flipped = cursor.boolean(max_tiles)
        self.tile_types = cursor.uint8(max_tiles)
        self.tile_used = cursor.uint8(max_tiles)

        # READ THE ANIMATIONS.
        self.animations: List[TileAnimation] = []
        for _ in range(self.animation_count):
            frame_wait = cursor.uint16()
            random_wait = cursor.uint16()
            ping_pong_wait = cursor.uint16()
            ping_pong = cursor.boolean()
            speed = cursor.uint8()
            frame_count = cursor.uint8()
            frames = cursor.uint16(self.MAXIMUM_ANIMATION_FRAMES)
            self.animations.append(TileAnimation(frame_wait, random_wait, ping_pong_wait, ping_pong, speed, frames[:frame_count]))

## A level (.j2l). The substreams are:
##  - Data1: The level settings (see LevelSettings).
##  - Data2: The events, one 32-bit value per tile of the sprite layer.
##  - Data3: The word dictionary; each word is four tile codes.
##  - Data4: The word maps of the layers that have tiles.
## Levels saved with the MLLE editor have additional data after Data4.
##
## Levels rely on other files: the tileset they are built from, and
## optionally a script and extra tilesets and layers. These are found
## among the adjacent files, which are registered with load_adjacent.
class Level(Jj2File):
    MAGIC_NUMBER = b'LEVL'
    VERSION_TSF = 515
    VERSION_123 = 514
    SUPPORTED_VERSIONS = (VERSION_123, VERSION_TSF)
    # The file extensions of the files levels can refer to.
    ADJACENT_EXTENSIONS = ('.j2t', '.j2l', '.j2as', '.asc')
    SCRIPT_EXTENSION = '.j2as'
    # The layer the player and the events are on.
    SPRITE_LAYER_ID = 4
    # Layers with this speed scroll along with the sprite layer.
    SPRITE_LAYER_SPEED = 65536
    # Events are drawn within this distance around the requested region.
    EVENT_MARGIN = 64
    # Pickups bob up and down; this is their offset for each column.
    PICKUP_BOB_OFFSETS = (0, -3, -6, -3)
    GENERATOR_EVENT_CODE = 216
    HORIZONTAL_SPRING_EVENT_CODES = frozenset((91, 92, 93))
    START_POSITION_EVENT_CODES = frozenset((29, 30, 31, 32))
    DEFAULT_START_POSITION = (96, 32)
    # Events only appear at these difficulties: normal and multiplayer-only.
    DRAWN_DIFFICULTIES = (0, 3)
    TRANSLUCENT_TILE_OPACITY = 66
    # The resolution the textured background is drawn at before it is resized.
    TEXTURED_BACKGROUND_SIZE = (1600, 1200)
    # Backgrounds whose opposite edges differ more than this on average do not tile.
    STRETCH_EDGE_THRESHOLD = 100
    # The default visible box of levels whose sprite layer is empty.
    DEFAULT_VISIBLE_SIZE = (800, 600)
    VISIBLE_BOX_MARGIN = 64
    # Tiles are treated as extending this far right when finding the visible box.
    VISIBLE_BOX_TILE_EXTENT = 128

    # Custom weapons from scripts that can be drawn, keyed by how scripts refer
    # to them. Each weapon has three events in a row: its ammo, its ammo
    # crate and its powerup.
    SUPPORTED_WEAPONS = {
        'BubbleGun': 530,
        'LaserBlaster': 580,
        'FlashBang': 560,
        'ArcaneWeapons::MeteorGun': 610,
        'ArcaneWeapons::CosmicDuster': 540,
        'ArcaneWeapons::MortarLauncher': 620,
        'ArcaneWeapons::NailGun': 630,
        'ArcaneWeapons::TornadoGun': 670,
        'ArcaneWeapons::LightningRod': 590,
        'ArcaneWeapons::SanguineSpear': 660,
        'ArcaneWeapons::FusionCannon': 570,
        'SzmolWeaponPack::AutoTurret': 790,
        'SzmolWeaponPack::DischargeGun': 550,
        'SzmolWeaponPack::LockOnMissile': 600,
        'SzmolWeaponPack::PetrolBomb': 640,
        'SzmolWeaponPack::MeleeSword': 650,
        'SmokeWopens::ElektrekShield': 760,
        'SmokeWopens::ZeusArtillery': 770,
        'SmokeWopens::PhoenixGun': 780,
        'se::EnergyBlasterMLLEWrapper': 520,
        'se::FireworkMLLEWrapper': 510,
        'se::RollerMLLEWrapper': 500,
        'se::MiniMirvMLLEWrapper': 810,
        'energyBlast': 520,
        'firework': 510,
        'roller': 500,
        'miniMirv': 810,
        'WeaponVMega::Boomerang': 680,
        'WeaponVMega::Burrower': 690,
        'WeaponVMega::IceCloud': 700,
        'WeaponVMega::Pathfinder': 710,
        'WeaponVMega::Backfire': 720,
        'WeaponVMega::Crackerjack': 730,
        'WeaponVMega::GravityWell': 740,
        'WeaponVMega::Voranj': 750,
        'WeaponVMega::Meteor': 800,
    }
    MLLE_WEAPON_ARRAY_PATTERN = re.compile(r'array<MLLEWeaponApply@> = \{([^}]+)\}')
    SCRIPT_WEAPON_PATTERN = re.compile(r'se::([^.]+)\.setAsWeapon\(([0-9]+)')
    WEAPON_COUNT = 9
    # The ammo, ammo crate and powerup events of each standard weapon, which a
    # custom weapon in its place takes over. The blaster has no ammo. The
    # crates of the last three weapons are meta events.
    WEAPON_EVENT_CODES = (
        (None, None, 131),
        (34, 54, 132),
        (33, 53, 133),
        (35, 55, 134),
        (36, 56, 135),
        (37, 57, 136),
        (38, 300, 219),
        (39, 301, 220),
        (40, 302, 221))

    ## \param[in] resource_folder - Where the default palette and animation libraries are.
    ## \param[in] pixel_budget - The largest number of pixels a preview can have.
    ## \param[in] random_generator - Used for the random parts of rendering: the
    ##            start position previews centre on, and textured backgrounds.
    def __init__(
            self, filepath: str = None, stream = None, resource_folder: str = None,
            pixel_budget: int = None, random_generator: random.Random = None):
        self.resource_folder = resource_folder if resource_folder is not None else global_variables.resource_folder
        self.pixel_budget = pixel_budget if pixel_budget is not None else global_variables.pixel_budget
        self._random = random_generator if random_generator is not None else random.Random()
        # Maps the lowercase names of adjacent files to their paths.
        self._adjacent_files: Dict[str, str] = {}
        self._settings: Optional[LevelSettings] = None
        self._words = None
        self._event_resolver: Optional[EventResolver] = None
        self._layers: Dict[int, Layer] = {}
        self._mlle: Optional[MlleData] = None
        self._palette_remapping: Dict[Tuple[int, int], Sequence[int]] = {}
        self._script_redirects: Dict[int, int] = {}
        self.tileset: Optional[Tileset] = None
        self.palette: Optional[np.ndarray] = None
        self.tile_images: Optional[np.ndarray] = None
        self.tile_masks: Optional[np.ndarray] = None
        super().__init__(filepath, stream)

    def _parse_header(self):
        super()._parse_header()
        if self.version not in self.SUPPORTED_VERSIONS:
            raise CorruptHeader(f'{self.description} has version {self.version}, expected one of {self.SUPPORTED_VERSIONS}.')

    ## The largest number of tiles the tileset of this level can have.
    @property
    def max_tiles(self) -> int:
        return 4096 if self.version == self.VERSION_TSF else 1024

    ## The level settings. Reading them also applies the level's MLLE data
    ## and the event redirects from its script.
    @property
    def settings(self) -> LevelSettings:
        self._load_settings()
        return self._settings

    def _load_settings(self):
        if self._settings is not None:
            return
        try:
            self._settings = LevelSettings(ByteCursor(self.get_substream(1)), self.max_tiles)
        except OutOfBounds as error:
            raise TruncatedInput(f'The settings of {self.description} end early: {error}') from error
        self._layers = {layer_id: layer for layer_id, layer in enumerate(self._settings.layers, start = 1)}
        self._layers[self.SPRITE_LAYER_ID].is_sprite_layer = True
        self._load_mlle()
        self._load_script()

    ## The layers in drawing order, front first, keyed by their number starting from 1.
    @property
    def layers(self) -> Dict[int, Layer]:
        self._load_settings()
        return self._layers

    ## The extra data the MLLE editor saved, or None when there is none.
    @property
    def mlle(self) -> Optional[MlleData]:
        self._load_settings()
        return self._mlle

    ## Recolours particular animations, keyed by (set, animation).
    @property
    def palette_remapping(self) -> Dict[Tuple[int, int], Sequence[int]]:
        self._load_settings()
        return self._palette_remapping

    ## Events redirected by custom weapons in the level's script.
    @property
    def script_redirects(self) -> Dict[int, int]:
        self._load_settings()
        return self._script_redirects

    @property
    def display_name(self) -> str:
        return self.clean_text(self.settings.level_name)

    ## The layer events are placed on.
    @property
    def sprite_layer(self) -> Layer:
        for layer in self.layers.values():
            if layer.is_sprite_layer:
                return layer
        raise CorruptHeader(f'{self.description} has no sprite layer.')

    ## The words of the level, each four tiles, with animated tiles resolved
    ## to their first frame.
    @property
    def words(self):
        if self._words is None:
            settings = self.settings
            animation_frames = [animation.frames[0] if animation.frames else 0 for animation in settings.animations]
            self._words = build_dictionary(
                self.get_substream(3), self.max_tiles, settings.static_tile_count, animation_frames, settings.tile_types)
        return self._words

    ## \param[in] layer_id - The number of the layer, starting from 1.
    ## \return The tiles of the layer, row by row. Rows are padded to a multiple of four tiles.
    def get_map(self, layer_id: int) -> List[TileReference]:
        if layer_id not in self.layers:
            raise ValueError(f'{self.description} has no layer {layer_id}; it has layers {sorted(self.layers)}.')
        return self._get_layer_map(self.layers[layer_id])

    def _get_layer_map(self, layer: Layer) -> List[TileReference]:
        if layer.tile_map is not None:
            return layer.tile_map
        if not layer.stores_tiles:
            layer.tile_map = []
            return layer.tile_map

        # READ THE WORD INDICES.
        map_data = self.get_substream(4)
        word_data = map_data[layer.word_offset:layer.word_offset + layer.word_count * 2]
        if len(word_data) != layer.word_count * 2:
            raise TruncatedInput(f'The map of {layer.name} runs past the end of Data4 in {self.description}.')
        word_indices = np.frombuffer(word_data, dtype = '<u2').tolist()

        # INFLATE THE MAP.
        tile_map = inflate_map(word_indices, self.words)
        if not tile_map:
            raise CorruptHeader(f'{layer.name} of {self.description} is marked as having tiles but has none.')
        layer.tile_map = tile_map
        return layer.tile_map

    ## Registers files the level can refer to, like its tileset.
    ## \param[in] paths - Each entry is a path, or a (path, canonical name) pair
    ##            when the file is stored under a different name than the level knows it by.
    def load_adjacent(self, paths: Iterable[Union[str, Tuple[str, str]]]):
        for entry in paths:
            if isinstance(entry, (tuple, list)):
                path, canonical_name = entry
            else:
                path = canonical_name = entry
            if not os.path.isfile(path):
                raise FileNotFoundError(f'Adjacent file {path} does not exist.')
            self._adjacent_files[self._normalize_filename(canonical_name)] = path

    ## Registers every file in a folder the level can refer to.
    def load_adjacent_folder(self, folder_path: str):
        adjacent_paths = []
        for filename in sorted(os.listdir(folder_path)):
            path = os.path.join(folder_path, filename)
            if os.path.isfile(path) and filename.lower().endswith(self.ADJACENT_EXTENSIONS):
                adjacent_paths.append(path)
        self.load_adjacent(adjacent_paths)

    ## \return The path of the adjacent file with the given name, or None if it
    ##         was not registered. Names are matched without regard to case.
    def find_adjacent(self, filename: str) -> Optional[str]:
        return self._adjacent_files.get(self._normalize_filename(filename))

    @staticmethod
    def _normalize_filename(filename: str) -> str:
        # Levels store names with folders from both kinds of systems.
        filename = filename.replace('\x00', '').replace('\\', '/')
        return filename.split('/')[-1].strip().lower()

    ## \return The filename the level is known by, without its extension,
    ##         or None for levels read from memory.
    @property
    def base_filename(self) -> Optional[str]:
        if self.filepath is None:
            return None
        return os.path.splitext(os.path.basename(self.filepath))[0]

    ## Reads the extra data the MLLE editor saves. Problems with it are reported
    ## and the level is drawn as if it had none.
    def _load_mlle(self):
        self._mlle = read_mlle_data(self.data, self.substreams_end_pointer)
        if self._mlle is None:
            return

        # REMAP THE SPRITE PALETTES.
        self._palette_remapping = dict(self._mlle.sprite_remapping)

        # REORDER THE LAYERS.
        # Layers beyond the first eight are read from extra level files, eight to a file.
        imported_layers = []
        extra_layer_count = self.mlle.layer_count - LevelSettings.LAYER_COUNT
        if extra_layer_count > 0:
            try:
                imported_layers = self._import_layers(-(-extra_layer_count // LevelSettings.LAYER_COUNT))
            except (FileNotFoundError, CorruptHeader, DecompressionMismatch, TruncatedInput) as error:
                print(f'WARNING: Could not read the extra layers of {self.description}: {error}. Keeping the standard layers.')
                return

        original_layers = list(self.layers.values())
        reordered_layers = {}
        for layer_id, entry in enumerate(self.mlle.layer_order, start = 1):
            if entry.source_layer_index is None:
                if not imported_layers:
                    print(f'WARNING: MLLE data of {self.description} refers to more extra layers than there are. Keeping the standard layers.')
                    return
                source_layer = imported_layers.pop(0)
            elif entry.source_layer_index < len(original_layers):
                source_layer = original_layers[entry.source_layer_index]
                # Maps are read before the layers move, since they are located by the original order.
                self._get_layer_map(source_layer)
            else:
                print(f'WARNING: MLLE data of {self.description} refers to layer {entry.source_layer_index}, which does not exist. Keeping the standard layers.')
                return
            reordered_layers[layer_id] = replace(source_layer, name = entry.name, has_tiles = entry.has_tiles)
        self._layers = reordered_layers

    ## Reads layers from the extra level files the MLLE editor saves alongside the level.
    ## \param[in] file_count - The number of extra files, each with eight layers.
    def _import_layers(self, file_count: int) -> List[Layer]:
        imported_layers = []
        for file_number in range(1, file_count + 1):
            filename = f'{self.base_filename}-MLLE-Data-{file_number}.j2l'
            path = self.find_adjacent(filename)
            if path is None:
                raise FileNotFoundError(f'Extra layer file {filename} was not found next to the level.')
            extra_level = Level(path, resource_folder = self.resource_folder)
            for layer_id, layer in extra_level.layers.items():
                extra_level.get_map(layer_id)
                imported_layers.append(replace(layer, is_sprite_layer = False))
        return imported_layers

    ## Reads the custom weapons that the level's script sets up, so their
    ## pickups are drawn with their own sprites.
    def _load_script(self):
        if self.base_filename is None:
            return
        script_path = self.find_adjacent(self.base_filename + self.SCRIPT_EXTENSION)
        if script_path is None:
            return
        with open(script_path, 'r', encoding = 'latin-1') as script_file:
            script = script_file.read()
        self._script_redirects = self.get_script_redirects(script)

    ## \param[in] script - The text of a level script.
    ## \return The events to redirect to draw the custom weapons the script sets up.
    @classmethod
    def get_script_redirects(cls, script: str) -> Dict[int, int]:
        # FIND THE WEAPONS SET UP THROUGH MLLE.
        # These are listed in an array with an entry for each weapon, which is
        # "null" where the standard weapon is kept.
        weapons: Dict[int, str] = {}
        weapon_array = cls.MLLE_WEAPON_ARRAY_PATTERN.search(script)
        if weapon_array:
            definitions = weapon_array.group(1).split(',')
            for weapon_index, definition in enumerate(definitions[:cls.WEAPON_COUNT]):
                definition = definition.strip()
                if definition == 'null':
                    continue
                weapon_name = re.split(r'::Weapon|\(\)', definition)[0]
                if weapon_name in cls.SUPPORTED_WEAPONS:
                    weapons[weapon_index] = weapon_name

        # FIND THE WEAPONS SET UP DIRECTLY.
        for weapon_name, weapon_number in cls.SCRIPT_WEAPON_PATTERN.findall(script):
            weapon_index = int(weapon_number) - 1
            if (0 <= weapon_index < cls.WEAPON_COUNT) and (weapon_name in cls.SUPPORTED_WEAPONS):
                weapons[weapon_index] = weapon_name

        # REDIRECT THE EVENTS OF THE WEAPONS THEY REPLACE.
        redirects = {}
        for weapon_index, weapon_name in weapons.items():
            first_event_code = cls.SUPPORTED_WEAPONS[weapon_name]
            for offset, from_code in enumerate(cls.WEAPON_EVENT_CODES[weapon_index]):
                if from_code is not None:
                    redirects[from_code] = first_event_code + offset
        return redirects

    ## Reads the tileset the level is built from, and the tile images and
    ## masks the level is drawn with, including any the MLLE editor added.
    ## \param[in] path - The tileset to use. When not provided, the tileset the
    ##            level names is found among the adjacent files or next to the level.
    ## \param[in] palette - The palette to draw the tiles with, instead of the tileset's own.
    def load_tileset(self, path: str = None, palette = None):
        settings = self.settings
        if path is None:
            path = self.find_adjacent(settings.tileset_filename)
            if path is None:
                level_directory = os.path.dirname(self.filepath) if self.filepath is not None else ''
                path = os.path.join(level_directory, self._normalize_filename(settings.tileset_filename))
        if not os.path.isfile(path):
            raise FileNotFoundError(f'Tileset {path} for {self.description} was not found.')

        # READ THE TILES.
        tileset = Tileset(path)
        if palette is None and self.mlle is not None:
            palette = self.mlle.palette
        if palette is not None:
            tileset.load_palette(verify_palette(palette))
        tile_images = tileset.get_tile_images()
        tile_masks = tileset.get_tile_masks()
        self.tileset = tileset
        self.palette = tileset.palette
        self._event_resolver = None

        # ADD THE TILES FROM THE MLLE DATA.
        if self.mlle is not None:
            tile_images, tile_masks = self._add_extra_tiles(tile_images, tile_masks)
            tile_images, tile_masks = self._apply_edited_tiles(tile_images, tile_masks)
        self.tile_images = tile_images
        self.tile_masks = tile_masks

    ## Appends the tiles of extra tilesets. They start at the first
    ## row after the level's own tiles, as the level editor shows them.
    def _add_extra_tiles(self, tile_images: np.ndarray, tile_masks: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        next_tile_index = -(-len(tile_images) // TILES_PER_ROW) * TILES_PER_ROW
        for extra_tileset in self.mlle.extra_tilesets:
            first_tile_index = next_tile_index
            next_tile_index += extra_tileset.tile_count
            path = self.find_adjacent(extra_tileset.filename)
            if path is None:
                print(f'WARNING: Extra tileset {extra_tileset.filename} of {self.description} was not found. Its tiles are left empty.')
                continue

            tileset = Tileset(path)
            palette = self.palette
            if extra_tileset.palette_remapping is not None:
                palette = self.palette[np.array(extra_tileset.palette_remapping)]
            extra_images = tileset.get_tile_images(palette)
            extra_masks = tileset.get_tile_masks()
            tile_images, tile_masks = self._grow_tiles(tile_images, tile_masks, next_tile_index)
            for offset in range(extra_tileset.tile_count):
                source_index = extra_tileset.tile_start + offset
                if source_index >= len(extra_images):
                    break
                tile_images[first_tile_index + offset] = extra_images[source_index]
                tile_masks[first_tile_index + offset] = extra_masks[source_index]
        return tile_images, tile_masks

    ## Replaces the tiles edited in the level editor.
    def _apply_edited_tiles(self, tile_images: np.ndarray, tile_masks: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        for edited_tile in self.mlle.edited_tile_images:
            tile_images, tile_masks = self._grow_tiles(tile_images, tile_masks, edited_tile.tile_index + 1)
            pixels = np.frombuffer(edited_tile.pixels, dtype = np.uint8).reshape(TILE_SIZE, TILE_SIZE)
            tile_image = np.zeros((TILE_SIZE, TILE_SIZE, 4), dtype = np.uint8)
            tile_image[..., :3] = self.palette[pixels]
            tile_image[..., 3] = np.where(pixels == 0, 0, 0xff)
            tile_images[edited_tile.tile_index] = tile_image
        for edited_tile in self.mlle.edited_tile_masks:
            tile_images, tile_masks = self._grow_tiles(tile_images, tile_masks, edited_tile.tile_index + 1)
            pixels = np.frombuffer(edited_tile.pixels, dtype = np.uint8).reshape(TILE_SIZE, TILE_SIZE)
            tile_masks[edited_tile.tile_index] = pixels != 0
        return tile_images, tile_masks

    @staticmethod
    def _grow_tiles(tile_images: np.ndarray, tile_masks: np.ndarray, tile_count: int) -> Tuple[np.ndarray, np.ndarray]:
        missing_tile_count = tile_count - len(tile_images)
        if missing_tile_count <= 0:
            return tile_images, tile_masks
        tile_images = np.concatenate((tile_images, np.zeros((missing_tile_count, *tile_images.shape[1:]), dtype = tile_images.dtype)))
        tile_masks = np.concatenate((tile_masks, np.zeros((missing_tile_count, *tile_masks.shape[1:]), dtype = tile_masks.dtype)))
        return tile_images, tile_masks

    ## The resolver that draws the events of this level, with the redirects
    ## of the level's custom weapons applied.
    def get_event_resolver(self) -> EventResolver:
        if self._event_resolver is None:
            if self.palette is None:
                self.load_tileset()
            resolver = EventResolver(
                self.palette, self.resource_folder, self.palette_remapping, random_generator = self._random)
            if self.mlle is not None:
                for from_code, to_code in self.mlle.get_crate_redirects().items():
                    resolver.redirect(from_code, to_code)
            for from_code, to_code in self.script_redirects.items():
                resolver.redirect(from_code, to_code)
            self._event_resolver = resolver
        return self._event_resolver

    ## Draws the level.
    ## \param[in] layer_ids - The layers to draw, back to front. By default every layer is drawn.
    ## \param[in] draw_events - Whether to draw the events on the sprite layer.
    ## \param[in] box - The region to draw, in pixels. By default the whole sprite layer is drawn.
    ## \return The image of the region.
    def get_image(self, layer_ids: Sequence[int] = None, draw_events: bool = True, box: Box = None) -> Image.Image:
        sprite_layer = self.sprite_layer
        if box is None:
            box = (0, 0, sprite_layer.width * TILE_SIZE, sprite_layer.height * TILE_SIZE)
        left, top, right, bottom = (int(coordinate) for coordinate in box)
        if (left > right) or (top > bottom) or (min(left, top) < 0):
            raise ValueError(f'Cannot draw region {box}; it must have its top left corner at or after the origin.')
        pixel_count = (right - left) * (bottom - top)
        if pixel_count > self.pixel_budget:
            raise ValueError(f'Drawing {right - left}x{bottom - top} pixels exceeds the budget of {self.pixel_budget} pixels.')
        box = (left, top, right, bottom)
        if self.tile_images is None:
            self.load_tileset()

        # DRAW THE LAYERS.
        # JJ2 decides how to draw backgrounds from their settings, so this follows
        # its rules to show what a player would see.
        canvas = new_canvas(right - left, bottom - top, (0, 0, 0))
        if layer_ids is None:
            layer_ids = sorted(self.layers, reverse = True)
        has_drawn_a_layer = False
        has_drawn_sprite_layer = False
        for layer_id in dict.fromkeys(layer_ids):
            if layer_id not in self.layers:
                raise ValueError(f'{self.description} has no layer {layer_id}.')
            layer = self.layers[layer_id]
            if not layer.has_tiles:
                continue

            if layer.is_textured and not has_drawn_sprite_layer:
                self._draw_textured_background(layer, canvas)
                has_drawn_a_layer = True
                continue

            scrolls_with_sprites = (layer.speed_x == self.SPRITE_LAYER_SPEED) and (layer.speed_y == self.SPRITE_LAYER_SPEED)
            is_tiling = layer.tile_width and layer.tile_height and not (has_drawn_sprite_layer and layer.speed_x == 0 and layer.speed_y == 0)
            if has_drawn_a_layer and not scrolls_with_sprites and not is_tiling:
                continue
            if not has_drawn_a_layer and ((layer.width != layer.height) or (layer.width > 8)):
                self._draw_stretched_layer(layer, canvas, box)
            else:
                self._draw_layer(layer, canvas, box)
            has_drawn_a_layer = True

            if layer.is_sprite_layer:
                has_drawn_sprite_layer = True
                if draw_events:
                    self._draw_events(canvas, box)
        return canvas

    ## Draws a layer onto the canvas.
    ## \param[in] expand - Whether layers that tile but are smaller than the sprite
    ##            layer are repeated to cover it.
    def _draw_layer(self, layer: Layer, canvas: Image.Image, box: Box, expand: bool = True):
        tile_map = self._get_layer_map(layer)
        if not tile_map:
            return
        map_width = layer.row_width
        map_height = len(tile_map) // map_width

        # REPEAT SMALL TILING LAYERS.
        if expand:
            sprite_layer = self.sprite_layer
            horizontal_expansion = 0
            vertical_expansion = 0
            if layer.tile_width and (layer.map_width < sprite_layer.width) and (layer.speed_x != self.SPRITE_LAYER_SPEED):
                horizontal_expansion = (sprite_layer.width - layer.map_width) / 2
            if layer.tile_height and (layer.height < sprite_layer.height) and (layer.speed_y != self.SPRITE_LAYER_SPEED):
                vertical_expansion = (sprite_layer.height - layer.height) / 2
            if horizontal_expansion or vertical_expansion:
                top, bottom = math.floor(vertical_expansion), math.ceil(vertical_expansion)
                left, right = math.floor(horizontal_expansion), math.ceil(horizontal_expansion)
                tile_map = expand_map(tile_map, map_width, map_height, top, right, bottom, left)
                map_width += left + right
                map_height += top + bottom

        layer_image = Image.fromarray(self._draw_tiles(tile_map, map_width, box), 'RGBA')
        paste(canvas, layer_image, 0, 0)

    ## \return The RGBA pixels of the given region of a map.
    def _draw_tiles(self, tile_map: Sequence[TileReference], map_width: int, box: Box) -> np.ndarray:
        left, top, right, bottom = box
        pixels = np.zeros((bottom - top, right - left, 4), dtype = np.uint8)
        if map_width == 0:
            return pixels
        map_height = len(tile_map) // map_width
        first_column, last_column = max(0, left // TILE_SIZE), min(map_width, -(-right // TILE_SIZE))
        first_row, last_row = max(0, top // TILE_SIZE), min(map_height, -(-bottom // TILE_SIZE))
        tile_images = {}
        for row in range(first_row, last_row):
            for column in range(first_column, last_column):
                tile = tile_map[row * map_width + column]
                if (tile.tile_index == 0) or tile.invisible or (tile.tile_index >= len(self.tile_images)):
                    continue
                if tile not in tile_images:
                    tile_images[tile] = self._get_tile_image(tile)
                blit(pixels, tile_images[tile], column * TILE_SIZE - left, row * TILE_SIZE - top)
        return pixels

    ## \return The RGBA pixels of a tile, flipped and faded as the tile reference says.
    def _get_tile_image(self, tile: TileReference) -> np.ndarray:
        tile_image = self.tile_images[tile.tile_index]
        if tile.horizontal_flip:
            tile_image = tile_image[:, ::-1]
        if tile.vertical_flip:
            tile_image = tile_image[::-1]
        if tile.translucent:
            tile_image = tile_image.copy()
            tile_image[..., 3] = (tile_image[..., 3].astype(np.uint16) * self.TRANSLUCENT_TILE_OPACITY // 100).astype(np.uint8)
        return tile_image

    ## \return The whole layer, drawn opaquely on black.
    def _draw_layer_texture(self, layer: Layer) -> np.ndarray:
        tile_map = self._get_layer_map(layer)
        texture = self._draw_tiles(tile_map, layer.row_width, (0, 0, layer.width * TILE_SIZE, layer.height * TILE_SIZE))
        alpha = texture[..., 3:4].astype(np.uint16)
        return (texture[..., :3].astype(np.uint16) * alpha // 0xff).astype(np.uint8)

    ## Draws the "warp horizon" effect JJ2 uses for layers in texture mode:
    ## the layer is projected onto a floor and a ceiling that meet at a
    ## horizon faded into the layer's fade colour.
    def _draw_textured_background(self, layer: Layer, canvas: Image.Image):
        texture = self._draw_layer_texture(layer)
        texture_height, texture_width = texture.shape[:2]
        if (texture_width == 0) or (texture_height == 0) or (canvas.width == 0) or (canvas.height == 0):
            return

        # PROJECT THE TEXTURE.
        screen_width, screen_height = self.TEXTURED_BACKGROUND_SIZE
        offset = self._random.randint(0, texture_width)
        distance_from_middle = np.arange(screen_height) - (screen_height / 2)
        reference = 60 / (np.abs(distance_from_middle) + 8)
        texture_y = texture_height * reference * distance_from_middle / 8
        texture_x = texture_width * (reference[:, np.newaxis] * (np.arange(screen_width) - (screen_width / 2))) / 256 + offset
        texture_rows = np.abs(texture_y).astype(np.int64) % texture_height
        texture_columns = np.abs(texture_x).astype(np.int64) % texture_width
        screen = texture[texture_rows[:, np.newaxis], texture_columns].astype(np.float64)

        # FADE TOWARDS THE HORIZON.
        fade_start = screen_height // 4
        fade_end = screen_height - fade_start
        fade_step = math.pi / (fade_end - fade_start)
        fade = np.sin(fade_step * np.arange(1, fade_end - fade_start + 1))[:, np.newaxis, np.newaxis]
        fade_color = np.array(layer.texture_color, dtype = np.float64)
        screen[fade_start:fade_end] = screen[fade_start:fade_end] * (1 - fade) + fade_color * fade

        screen_image = Image.fromarray(screen.astype(np.uint8), 'RGB')
        paste(canvas, screen_image.resize(canvas.size, Image.BILINEAR), 0, 0)

    ## Draws a background layer that does not tile so that it covers the canvas.
    ## Layers that do tile are drawn as usual.
    def _draw_stretched_layer(self, layer: Layer, canvas: Image.Image, box: Box):
        texture = self._draw_layer_texture(layer)
        texture_height, texture_width = texture.shape[:2]
        if (texture_width == 0) or (texture_height == 0) or (canvas.width == 0) or (canvas.height == 0):
            return

        # CHECK WHETHER THE LAYER TILES.
        # A tiling layer has similar colours along its opposite edges.
        signed_texture = texture.astype(np.int32)
        vertical_differences = np.abs(signed_texture[0] - signed_texture[-1]).sum(axis = 1)
        horizontal_differences = np.abs(signed_texture[:, 0] - signed_texture[:, -1]).sum(axis = 1)
        average_difference = np.concatenate((vertical_differences, horizontal_differences)).mean()
        if average_difference < self.STRETCH_EDGE_THRESHOLD:
            self._draw_layer(layer, canvas, box, expand = False)
            return

        # STRETCH THE LAYER.
        # The proportions of the layer are kept, so some of it can be cut off.
        texture_ratio = texture_width / texture_height
        canvas_ratio = canvas.width / canvas.height
        if canvas_ratio > texture_ratio:
            paste_width = canvas.width
            paste_height = canvas.width / texture_ratio
            paste_x, paste_y = 0, -(paste_height - canvas.height) / 2
        else:
            paste_width = canvas.height * texture_ratio
            paste_height = canvas.height
            paste_x, paste_y = -(paste_width - canvas.width) / 2, 0
        stretched_texture = Image.fromarray(texture, 'RGB').resize((max(1, int(paste_width)), max(1, int(paste_height))), Image.BILINEAR)
        paste(canvas, stretched_texture, int(paste_x), int(paste_y))

    ## \return True if the sprite layer is solid at the given pixel. Everything
    ##         outside the layer counts as solid.
    def _is_solid(self, x: int, y: int) -> bool:
        sprite_layer = self.sprite_layer
        if (x < 0) or (y < 0) or (x >= sprite_layer.width * TILE_SIZE) or (y >= sprite_layer.height * TILE_SIZE):
            return True
        tile_map = self._get_layer_map(sprite_layer)
        tile_map_index = (y // TILE_SIZE) * sprite_layer.row_width + (x // TILE_SIZE)
        if tile_map_index >= len(tile_map):
            return False
        tile = tile_map[tile_map_index]
        if (tile.tile_index == 0) or tile.invisible or (tile.tile_index >= len(self.tile_masks)):
            return False
        tile_x = x % TILE_SIZE
        tile_y = y % TILE_SIZE
        if tile.horizontal_flip:
            tile_x = TILE_SIZE - 1 - tile_x
        if tile.vertical_flip:
            tile_y = TILE_SIZE - 1 - tile_y
        return bool(self.tile_masks[tile.tile_index, tile_y, tile_x])

    ## Draws the events of the sprite layer.
    def _draw_events(self, canvas: Image.Image, box: Box):
        resolver = self.get_event_resolver()
        sprite_layer = self.sprite_layer
        left, top, right, bottom = box
        margin = self.EVENT_MARGIN
        sprite_layer_height_in_pixels = sprite_layer.height * TILE_SIZE
        events = ByteCursor(self.get_substream(2))
        for tile_number in range(sprite_layer.width * sprite_layer.height):
            tile_x = tile_number % sprite_layer.width
            tile_y = tile_number // sprite_layer.width
            # The real position is the position in the level, which gravity
            # needs. The position in the image is relative to the drawn region.
            real_x = tile_x * TILE_SIZE
            real_y = tile_y * TILE_SIZE
            if (real_x < left - margin) or (real_x > right + margin) or (real_y < top - margin):
                continue
            if real_y + margin > bottom:
                break

            # READ THE EVENT.
            if (tile_number + 1) * 4 > events.length:
                break
            events.seek(tile_number * 4)
            packed_event = events.uint32()
            event_code = packed_event & EVENT_CODE_MASK
            if event_code == 0:
                continue
            if event_code == self.GENERATOR_EVENT_CODE:
                # Generators are drawn as the event they generate.
                event_code = get_event_parameter(packed_event >> EVENT_PARAMETERS_SHIFT, 0, 8)
                packed_event = event_code
            if not resolver.is_visible(event_code):
                continue

            on_ground = self._is_solid(real_x, max(0, real_y + 48))
            try:
                event = resolver.get_event(packed_event, on_ground)
            except JazzFileError as error:
                print(f'WARNING: Skipping event {event_code} at tile ({tile_x}, {tile_y}): {error}')
                continue
            if event.difficulty not in self.DRAWN_DIFFICULTIES:
                continue

            sprite = event.sprite
            x = real_x - left
            y = real_y - top
            flip_x = event.flip_x

            # BOB PICKUPS.
            if event.is_pickup:
                y += self.PICKUP_BOB_OFFSETS[tile_x % len(self.PICKUP_BOB_OFFSETS)]
                # Alternate facing in a checkerboard pattern.
                if (tile_x - tile_y) % 2 == 0:
                    flip_x = True

            # FACE HORIZONTAL SPRINGS AWAY FROM THE NEAREST WALL.
            if event_code in self.HORIZONTAL_SPRING_EVENT_CODES:
                check_x = real_x + 16
                distance_left = 0
                while not self._is_solid(check_x, real_y) and distance_left < TILE_SIZE:
                    check_x -= 1
                    distance_left += 1
                check_x += distance_left
                distance_right = 0
                while not self._is_solid(check_x, real_y) and distance_right < TILE_SIZE:
                    check_x += 1
                    distance_right += 1
                if distance_left > distance_right:
                    flip_x = True
                    x += sprite.width + 10

            # APPLY GRAVITY.
            if event.feels_gravity:
                test_x = min(sprite_layer.width * TILE_SIZE, max(real_x - sprite.coldspot_x, 0))
                while (real_y < sprite_layer_height_in_pixels) and not self._is_solid(test_x, real_y):
                    real_y += 1
                reference_point = sprite.hotspot_y if event.use_hotspot else sprite.coldspot_y
                if reference_point != 0:
                    real_y += reference_point
                else:
                    real_y -= sprite.height
                y = real_y - top
            elif event.is_pickup or event.always_adjust:
                # Floating events are centred on their tile.
                x += 16 + sprite.hotspot_x
                y += 16 + sprite.hotspot_y

            # DRAW THE EVENT.
            image = sprite.image
            if flip_x:
                image = ImageOps.mirror(image)
            if event.flip_y:
                image = ImageOps.flip(image)
            paste(canvas, image, x + event.offset_x, y + event.offset_y, event.opacity)

    ## \return The region of the sprite layer that has tiles, with a margin around it.
    def get_visible_box(self) -> Box:
        sprite_layer = self.sprite_layer
        layer_width_in_pixels = sprite_layer.width * TILE_SIZE
        layer_height_in_pixels = sprite_layer.height * TILE_SIZE
        tile_map = self._get_layer_map(sprite_layer)

        # FIND THE TILES.
        start_x = start_y = None
        end_x = end_y = 0
        row_width = sprite_layer.row_width
        for tile_map_index, tile in enumerate(tile_map):
            column = tile_map_index % row_width
            if (tile.tile_index == 0) or (column >= sprite_layer.width):
                continue
            x = column * TILE_SIZE
            y = (tile_map_index // row_width) * TILE_SIZE
            start_x = x if start_x is None else min(start_x, x)
            start_y = y if start_y is None else min(start_y, y)
            end_x = max(end_x, x + self.VISIBLE_BOX_TILE_EXTENT)
            end_y = max(end_y, y + TILE_SIZE)

        if start_x is None:
            default_width, default_height = self.DEFAULT_VISIBLE_SIZE
            return (0, 0, min(default_width, layer_width_in_pixels), min(default_height, layer_height_in_pixels))
        margin = self.VISIBLE_BOX_MARGIN
        return (
            max(0, start_x - margin),
            max(0, start_y - margin),
            min(layer_width_in_pixels, end_x + margin),
            min(layer_height_in_pixels, end_y + margin))

    ## \return The position of one of the start positions in the level, chosen at random,
    ##         or a position near the top left if the level has none.
    def get_start_pos(self) -> Tuple[int, int]:
        sprite_layer = self.sprite_layer
        positions = []
        events = ByteCursor(self.get_substream(2))
        tile_count = min(sprite_layer.width * sprite_layer.height, events.length // 4)
        for tile_number in range(tile_count):
            event_code = events.uint32() & EVENT_CODE_MASK
            if event_code in self.START_POSITION_EVENT_CODES:
                positions.append(((tile_number % sprite_layer.width) * TILE_SIZE, (tile_number // sprite_layer.width) * TILE_SIZE))
        if not positions:
            return self.DEFAULT_START_POSITION
        return self._random.choice(positions)

    ## Draws the populated part of the level. When that has more pixels than
    ## the budget allows, a region around a start position is drawn instead.
    def get_preview(self) -> Image.Image:
        left, top, right, bottom = self.get_visible_box()
        width = right - left
        height = bottom - top
        if width * height > self.pixel_budget:
            start_x, start_y = self.get_start_pos()
            ratio = height / width
            optimal_width = min(width, math.floor(math.sqrt(self.pixel_budget / ratio)))
            optimal_height = min(height, math.floor(optimal_width * ratio))
            left, right = centered_span(start_x, optimal_width, left, right)
            top, bottom = centered_span(start_y, optimal_height, top, bottom)
        return self.get_image(box = (left, top, right, bottom)).convert('RGB')

## \return The (start, end) of a span with the given length, centred on the given
##         position as far as the bounds allow.
def centered_span(center: int, length: int, lower_bound: int, upper_bound: int) -> Tuple[int, int]:
    start = center - length // 2
    start = max(lower_bound, min(start, upper_bound - length))
    return start, start + length

## Copies pixels into an array, clipping those that fall outside it.
## \param[in,out] destination - The array to copy into.
## \param[in] source - The pixels to copy.
## \param[in] x, y - Where the top left corner of the source goes.
def blit(destination: np.ndarray, source: np.ndarray, x: int, y: int):
    source_left = max(0, -x)
    source_top = max(0, -y)
    source_right = min(source.shape[1], destination.shape[1] - x)
    source_bottom = min(source.shape[0], destination.shape[0] - y)
    if (source_left >= source_right) or (source_top >= source_bottom):
        return
    destination[y + source_top:y + source_bottom, x + source_left:x + source_right] = \
        source[source_top:source_bottom, source_left:source_right]
