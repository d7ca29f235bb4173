from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from ..Primitives.ByteCursor import ByteCursor
from ..Exceptions import AnimationResolutionOverflow, DimensionMismatch, UnknownWordIndex

# Set on tile codes for tiles drawn upside down. Unlike the horizontal flip bit,
# which is the bit just above the largest tile index, this bit does not
# depend on the version of the file.
VERTICAL_FLIP_BIT = 0x2000
# Animated tiles resolve to the first frame of their animation. That frame
# must itself be a static tile, so resolution never goes deeper than this.
MAXIMUM_ANIMATION_DEPTH = 1
TILES_PER_WORD = 4
WORD_SIZE_IN_BYTES = TILES_PER_WORD * 2

## Tile types from the level settings that change how a tile is drawn.
class TileType:
    NORMAL = 0
    TRANSLUCENT = 1
    INVISIBLE = 3

## One tile in a layer, as an index into the tileset plus how to draw it.
@dataclass(frozen = True)
class TileReference:
    tile_index: int
    horizontal_flip: bool = False
    vertical_flip: bool = False
    is_animated: bool = False
    translucent: bool = False
    invisible: bool = False

## Four tile references, which levels store as a unit to save space.
DictionaryWord = Tuple[TileReference, TileReference, TileReference, TileReference]

## Resolves a tile code as stored in a level.
## \param[in] raw - The 16-bit tile code.
## \param[in] max_tiles - The largest number of tiles a tileset can have in this
##            file version (1024 or 4096). This is also the horizontal flip bit.
## \param[in] static_tile_count - Tile indices at or above this refer to animations.
##            Defaults to max_tiles, in which case no tile is animated.
## \param[in] animation_frames - For each animation, the tile code of its first frame.
## \param[in] depth - How many animations have been resolved to reach this code.
def parse_tile_code(
        raw: int, max_tiles: int, static_tile_count: Optional[int] = None,
        animation_frames: Sequence[int] = (), depth: int = 0) -> TileReference:
    if static_tile_count is None:
        static_tile_count = max_tiles

    # READ THE FLIP BITS.
    # These must be read before the modulus removes them.
    horizontal_flip = (raw & max_tiles) != 0
    vertical_flip = (raw & VERTICAL_FLIP_BIT) != 0
    tile_index = raw % max_tiles
    if tile_index < static_tile_count:
        return TileReference(tile_index, horizontal_flip, vertical_flip)

    # RESOLVE THE ANIMATION.
    animation_index = tile_index - static_tile_count
    if depth >= MAXIMUM_ANIMATION_DEPTH:
        raise AnimationResolutionOverflow(
            f'Tile code 0x{raw:04x} refers to animation {animation_index} from inside another animation.')
    if animation_index >= len(animation_frames):
        raise AnimationResolutionOverflow(
            f'Tile code 0x{raw:04x} refers to animation {animation_index}, but only {len(animation_frames)} animations are defined.')
    first_frame = parse_tile_code(animation_frames[animation_index], max_tiles, static_tile_count, animation_frames, depth + 1)
    # The flips of the animated tile itself apply, not those of its frame.
    return TileReference(first_frame.tile_index, horizontal_flip, vertical_flip, is_animated = True)

## Reads the word dictionary of a level. Bytes left over after the
## last complete word are ignored.
## \param[in] tile_types - The type of each tile index, which marks tiles
##            as translucent or invisible. Indices past its end are normal tiles.
def build_dictionary(
        raw_bytes: bytes, max_tiles: int, static_tile_count: Optional[int] = None,
        animation_frames: Sequence[int] = (), tile_types: Sequence[int] = ()) -> List[DictionaryWord]:
    dictionary = []
    cursor = ByteCursor(raw_bytes)
    while cursor.remaining >= WORD_SIZE_IN_BYTES:
        word = []
        for tile_code in cursor.uint16(TILES_PER_WORD):
            tile = parse_tile_code(tile_code, max_tiles, static_tile_count, animation_frames)
            tile_type = tile_types[tile.tile_index] if tile.tile_index < len(tile_types) else TileType.NORMAL
            word.append(replace(
                tile,
                translucent = (tile_type == TileType.TRANSLUCENT),
                invisible = (tile_type == TileType.INVISIBLE)))
        dictionary.append(tuple(word))
    return dictionary

## Replaces each word index with the four tiles of that word.
## \return The tiles, always four times as many as there are word indices.
def inflate_map(word_indices: Sequence[int], dictionary: Sequence[DictionaryWord]) -> List[TileReference]:
    tiles = []
    for word_index in word_indices:
        if not (0 <= word_index < len(dictionary)):
            raise UnknownWordIndex(f'Word {word_index} is not in the dictionary, which has {len(dictionary)} words.')
        tiles.extend(dictionary[word_index])
    return tiles

## Repeats a row-major map in each direction, so a small tiling layer can
## cover a larger area. Added columns and rows wrap around, so the expanded
## map reads as if the original repeated forever in every direction.
## \param[in] tile_map - The map, row by row.
## \param[in] width, height - The dimensions of the map.
## \param[in] top, right, bottom, left - How many rows or columns to add on each side.
## \return The expanded map, row by row, with (left + width + right) columns
##         and (top + height + bottom) rows.
def expand_map(tile_map: Sequence, width: int, height: int, top: int = 0, right: int = 0, bottom: int = 0, left: int = 0) -> list:
    if width * height != len(tile_map):
        raise DimensionMismatch(f'Cannot expand map: {width}x{height} does not match its {len(tile_map)} entries.')
    if min(top, right, bottom, left) < 0:
        raise ValueError(f'Cannot expand a map by a negative amount (top {top}, right {right}, bottom {bottom}, left {left}).')
    if (width == 0) or (height == 0):
        if top or right or bottom or left:
            raise DimensionMismatch(f'Cannot repeat an empty {width}x{height} map.')
        return []

    expanded_map = []
    for y in range(-top, height + bottom):
        row_start = (y % height) * width
        for x in range(-left, width + right):
            expanded_map.append(tile_map[row_start + (x % width)])
    return expanded_map
