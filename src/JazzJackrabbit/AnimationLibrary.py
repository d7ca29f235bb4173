import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image

from . import global_variables
from .Containers.Jj2File import Jj2File, SubstreamEntry, build_substream_table, inflate_substream
from .Primitives.ByteCursor import ByteCursor
from .Primitives.Palette import DEFAULT_PALETTE_FILENAME, JCS_BLUE, load_jasc_palette, verify_palette
from .Assets.Canvas import new_canvas, paste
from .Assets.Sprite import Sprite, decode_frame, render_pixel_grid
from .Exceptions import CorruptHeader, MissingAnimationFrame, OutOfBounds

## The playback settings of one animation.
@dataclass(frozen = True)
class AnimationInfo:
    frame_count: int
    frames_per_second: int
    # The position of the animation's first frame among all the frames in its set.
    first_frame_index: int

## The dimensions and reference points of one frame.
class FrameInfo:
    SIZE_IN_BYTES = 24

    def __init__(self, cursor: ByteCursor):
        self.width = cursor.uint16()
        self.height = cursor.uint16()
        self.coldspot_x = cursor.int16()
        self.coldspot_y = cursor.int16()
        self.hotspot_x = cursor.int16()
        self.hotspot_y = cursor.int16()
        self.gunspot_x = cursor.int16()
        self.gunspot_y = cursor.int16()
        # Both offsets are relative to the start of Data3.
        self.image_offset = cursor.uint32()
        self.mask_offset = cursor.uint32()

## A set of animations. Each set has its own four substreams:
##  - Data1: The frame count and speed of each animation.
##  - Data2: The dimensions and reference points of each frame.
##  - Data3: The frame images.
##  - Data4: Sound samples.
class AnimationSet:
    SIGNATURE = b'ANIM'
    HEADER_SIZE = 44
    ANIMATION_INFO_SIZE_IN_BYTES = 8

    ## Reads the set header at the cursor's position.
    def __init__(self, cursor: ByteCursor, index: int, data: bytes):
        self.index = index
        self._data = data
        header_start_pointer = cursor.position
        signature = cursor.read(len(self.SIGNATURE))
        if signature != self.SIGNATURE:
            raise CorruptHeader(f'Animation set {index} at 0x{header_start_pointer:x} has signature {signature}, expected {self.SIGNATURE}.')
        self.animation_count = cursor.uint8()
        self.sample_count = cursor.uint8()
        self.frame_count = cursor.uint16()
        self.prior_sample_count = cursor.uint32()
        substream_sizes = [(cursor.uint32(), cursor.uint32()) for _ in range(4)]
        self.substream_table: Dict[int, SubstreamEntry] = build_substream_table(substream_sizes, header_start_pointer + self.HEADER_SIZE)
        self._substreams: Dict[int, bytes] = {}

    def get_substream(self, index: int) -> bytes:
        if index not in self._substreams:
            if index not in self.substream_table:
                raise ValueError(f'Cannot read substream Data{index} of animation set {self.index}.')
            self._substreams[index] = inflate_substream(self._data, self.substream_table[index], f'Data{index} of set {self.index}')
        return self._substreams[index]

    ## \return The settings of the given animation in this set.
    def get_animation_info(self, animation_index: int) -> AnimationInfo:
        animation_data = ByteCursor(self.get_substream(1))
        animation_info_end_pointer = (animation_index + 1) * self.ANIMATION_INFO_SIZE_IN_BYTES
        if (animation_index < 0) or (animation_info_end_pointer > animation_data.length):
            raise MissingAnimationFrame(f'Animation set {self.index} has no animation {animation_index}.')

        first_frame_index = 0
        for preceding_animation_index in range(animation_index):
            animation_data.seek(preceding_animation_index * self.ANIMATION_INFO_SIZE_IN_BYTES)
            first_frame_index += animation_data.uint16()
        animation_data.seek(animation_index * self.ANIMATION_INFO_SIZE_IN_BYTES)
        frame_count = animation_data.uint16()
        frames_per_second = animation_data.uint16()
        return AnimationInfo(frame_count, frames_per_second, first_frame_index)

## An animation library (.j2a), which holds the sprites of every object in the game.
## The header contains:
##  - 0x00: The magic number "ALIB".
##  - 0x0c: The version.
##  - 0x18: The number of sets, followed by the position of each set.
class AnimationLibrary(Jj2File):
    MAGIC_NUMBER = b'ALIB'
    MINIMUM_HEADER_SIZE = 28
    VERSION_OFFSET = 12
    SET_COUNT_OFFSET = 24
    # Animation previews are laid out in rows no wider than this.
    PREVIEW_WIDTH = 480
    CRATE_LIBRARY_FILENAME = 'crate.j2a'
    MONITOR_LIBRARY_FILENAME = 'Plus.j2a'
    CRATE_EMBLEM_SIZE = (13, 13)
    CRATE_EMBLEM_POSITION = (6, 7)
    MONITOR_EMBLEM_SIZE = (12, 14)
    MONITOR_EMBLEM_POSITION = (3, 4)
    # Crate emblems lose the pixels brighter than this (as a sum of the channels).
    CRATE_EMBLEM_WHITE_THRESHOLD = 750

    ## \param[in] palette - The palette to draw frames with. When not provided,
    ##            the default palette is read from the resource folder when first needed.
    ## \param[in] resource_folder - Where the default palette and the crate and monitor
    ##            libraries are found. Defaults to the configured resource folder.
    def __init__(self, filepath: str = None, stream = None, palette = None, resource_folder: str = None):
        self.sets: List[AnimationSet] = []
        self.resource_folder = resource_folder if resource_folder is not None else global_variables.resource_folder
        self._palette: Optional[np.ndarray] = verify_palette(palette) if palette is not None else None
        # Some levels recolour particular animations. Each entry maps every
        # palette index to the index it should be drawn with.
        self.palette_remapping: Dict[Tuple[int, int], Sequence[int]] = {}
        self._companion_libraries: Dict[str, 'AnimationLibrary'] = {}
        super().__init__(filepath, stream)

    def _parse_header(self):
        cursor = ByteCursor(self.data)
        magic_number = cursor.read(len(self.MAGIC_NUMBER))
        if magic_number != self.MAGIC_NUMBER:
            raise CorruptHeader(f'{self.description} has magic number {magic_number}, expected {self.MAGIC_NUMBER}.')
        cursor.seek(self.VERSION_OFFSET)
        self.version = cursor.uint16()

        # READ THE SETS.
        cursor.seek(self.SET_COUNT_OFFSET)
        set_count = cursor.uint32()
        set_offsets = [cursor.uint32() for _ in range(set_count)]
        for set_index, set_offset in enumerate(set_offsets):
            cursor.seek(set_offset)
            self.sets.append(AnimationSet(cursor, set_index, self.data))

    @property
    def palette(self) -> np.ndarray:
        if self._palette is None:
            self._palette = load_jasc_palette(os.path.join(self.resource_folder, DEFAULT_PALETTE_FILENAME))
        return self._palette

    ## Sets the palette remapping for particular animations.
    ## \param[in] remapping - Maps (set, animation) to a list of 256 palette indices.
    def load_remapping(self, remapping: Dict[Tuple[int, int], Sequence[int]]):
        self.palette_remapping = dict(remapping)

    def get_set(self, set_index: int) -> AnimationSet:
        if not (0 <= set_index < len(self.sets)):
            raise MissingAnimationFrame(f'Set {set_index} does not exist in {self.description}, which has {len(self.sets)} sets.')
        return self.sets[set_index]

    def get_animation_info(self, set_index: int, animation_index: int) -> AnimationInfo:
        return self.get_set(set_index).get_animation_info(animation_index)

    ## Draws one frame of an animation.
    ## \param[in] palette - The palette to draw with, instead of the library's palette.
    ## \param[in] lookup_table - Recolours the frame; see render_pixel_grid.
    def get_frame(self, set_index: int, animation_index: int, frame_index: int = 0, palette = None, lookup_table: Optional[Sequence[int]] = None) -> Sprite:
        # FIND THE FRAME.
        animation_set = self.get_set(set_index)
        animation_info = animation_set.get_animation_info(animation_index)
        if not (0 <= frame_index < animation_info.frame_count):
            raise MissingAnimationFrame(
                f'Animation {animation_index} of set {set_index} has {animation_info.frame_count} frames, so frame {frame_index} does not exist.')
        frame_data = ByteCursor(animation_set.get_substream(2))
        try:
            frame_data.seek((animation_info.first_frame_index + frame_index) * FrameInfo.SIZE_IN_BYTES)
            frame_info = FrameInfo(frame_data)
        except OutOfBounds as error:
            raise MissingAnimationFrame(f'Frame {frame_index} of animation {animation_index} in set {set_index} is not stored: {error}') from error

        # DRAW THE FRAME.
        palette = self._get_remapped_palette(set_index, animation_index, self.palette if palette is None else palette)
        image_data = animation_set.get_substream(3)[frame_info.image_offset:]
        _, _, pixel_grid = decode_frame(image_data)
        sprite = Sprite(
            render_pixel_grid(pixel_grid, palette, lookup_table),
            frame_info.hotspot_x, frame_info.hotspot_y,
            frame_info.coldspot_x, frame_info.coldspot_y,
            frame_info.gunspot_x, frame_info.gunspot_y)
        sprite.pixel_grid = pixel_grid
        return sprite

    ## Draws a frame shrunk onto the side of a wooden crate. Light
    ## pixels of the frame are removed and the rest are darkened.
    def get_frame_as_crate(self, set_index: int, animation_index: int, frame_index: int = 0, palette = None, lookup_table: Optional[Sequence[int]] = None) -> Sprite:
        crate = self._get_companion_library(self.CRATE_LIBRARY_FILENAME).get_frame(0, 0, 0, palette, lookup_table)
        emblem_source = self.get_frame(set_index, animation_index, frame_index, palette, lookup_table)

        # RECOLOUR THE EMBLEM.
        emblem = np.array(emblem_source.image.resize(self.CRATE_EMBLEM_SIZE, Image.BILINEAR))
        opaque_pixels = emblem[..., 3] == 0xff
        white_pixels = opaque_pixels & (emblem[..., :3].astype(np.uint16).sum(axis = 2) > self.CRATE_EMBLEM_WHITE_THRESHOLD)
        dark_pixels = opaque_pixels & ~white_pixels
        emblem[dark_pixels, :3] = (emblem[dark_pixels, :3].astype(np.uint16) * 16 // 0xff).astype(np.uint8)
        emblem[white_pixels, 3] = 0

        paste(crate.image, Image.fromarray(emblem, 'RGBA'), *self.CRATE_EMBLEM_POSITION)
        return crate

    ## Draws a frame shrunk onto the screen of a monitor.
    def get_frame_as_monitor(self, set_index: int, animation_index: int, frame_index: int = 0, palette = None, lookup_table: Optional[Sequence[int]] = None) -> Sprite:
        MONITOR_SET_INDEX = 2
        MONITOR_ANIMATION_INDEX = 4
        monitor = self._get_companion_library(self.MONITOR_LIBRARY_FILENAME).get_frame(MONITOR_SET_INDEX, MONITOR_ANIMATION_INDEX, 0, palette, lookup_table)
        emblem_source = self.get_frame(set_index, animation_index, frame_index, palette, lookup_table)
        emblem = emblem_source.image.resize(self.MONITOR_EMBLEM_SIZE, Image.BILINEAR)
        paste(monitor.image, emblem, *self.MONITOR_EMBLEM_POSITION)
        return monitor

    ## Draws the first frame of every animation, in rows, on the
    ## background colour the level editor uses.
    def get_preview(self) -> Image.Image:
        # DRAW THE FRAMES.
        frames = []
        for set_index, animation_set in enumerate(self.sets):
            for animation_index in range(animation_set.animation_count):
                try:
                    frames.append(self.get_frame(set_index, animation_index))
                except MissingAnimationFrame:
                    # Some animations have no frames.
                    continue

        # LAY OUT THE ROWS.
        rows = [[]]
        row_width = 0
        for frame in frames:
            if rows[-1] and (row_width + frame.width > self.PREVIEW_WIDTH):
                rows.append([])
                row_width = 0
            rows[-1].append(frame)
            row_width += frame.width
        preview_width = self.PREVIEW_WIDTH if len(rows) > 1 else sum(frame.width for frame in rows[0])
        row_heights = [max((frame.height for frame in row), default = 0) for row in rows]

        # DRAW THE PREVIEW.
        preview = new_canvas(max(1, preview_width), max(1, sum(row_heights)), JCS_BLUE)
        y = 0
        for row, row_height in zip(rows, row_heights):
            x = 0
            for frame in row:
                paste(preview, frame.image, x, y)
                x += frame.width
            y += row_height
        return preview

    def _get_remapped_palette(self, set_index: int, animation_index: int, palette: np.ndarray) -> np.ndarray:
        remapping = self.palette_remapping.get((set_index, animation_index))
        if remapping is None:
            return palette
        return palette[np.asarray(remapping, dtype = np.uint8)]

    def _get_companion_library(self, filename: str) -> 'AnimationLibrary':
        if filename not in self._companion_libraries:
            filepath = os.path.join(self.resource_folder, filename)
            if not os.path.isfile(filepath):
                raise MissingAnimationFrame(f'Animation library {filepath} not found.')
            self._companion_libraries[filename] = AnimationLibrary(filepath, palette = self._palette, resource_folder = self.resource_folder)
        return self._companion_libraries[filename]
