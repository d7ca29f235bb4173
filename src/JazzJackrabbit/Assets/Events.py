import math
import os
import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Optional, Sequence, Tuple

from PIL import ImageOps

from .. import global_variables
from ..AnimationLibrary import AnimationLibrary
from .Canvas import new_canvas, paste
from .EventTable import EVENT_TABLE, EventDescriptor
from .Sprite import Sprite
from ..Primitives.Palette import verify_palette
from ..Exceptions import MissingAnimationFrame, RedirectCycle, UnknownEventCode

# The packed value of an event holds the event code in its low byte
# and the event's parameters above bit 12.
EVENT_CODE_MASK = 0xff
EVENT_PARAMETERS_SHIFT = 12
# The output of these events depends on more than their packed value
# (where they stand, or chance), so they are never cached.
UNCACHED_EVENT_CODES = frozenset((29, 30, 31, 32, 85, 86, 87, 91, 92, 93))
# Opacities above 100 select a draw mode instead.
CRATE_OPACITY = 200
MONITOR_OPACITY = 300

class DrawMode(IntEnum):
    NORMAL = 1
    CRATE = 2
    MONITOR = 4

## Everything needed to draw one event in a level.
@dataclass
class ResolvedEvent:
    code: int
    sprite: Optional[Sprite] = None
    feels_gravity: bool = False
    is_pickup: bool = False
    # When true, the hotspot rather than the coldspot positions the sprite.
    use_hotspot: bool = True
    # When true, the sprite is positioned by its hotspot even when floating.
    always_adjust: bool = False
    # A percentage; the level shows through below 100.
    opacity: int = 100
    draw_mode: DrawMode = DrawMode.NORMAL
    offset_x: int = 0
    offset_y: int = 0
    flip_x: bool = False
    flip_y: bool = False
    # 0 is normal, 1 is easy, 2 is hard, and 3 is multiplayer only.
    difficulty: int = 0

## \return The bit field of the given length at the given offset.
def get_event_parameter(value: int, offset: int, length: int) -> int:
    return (value >> offset) & ((1 << length) - 1)

## Builds the sprites for events, using the animation libraries that hold them.
##
## Most events are drawn as one frame of an animation, but some are drawn
## as a composite of several frames the way the game itself draws them.
## Results are cached by packed event value, so identical events are only
## built once.
class EventResolver:
    PLATFORM_EVENT_CODES = frozenset((209, 210, 211, 212, 213, 214, 215, 223))
    SPIKE_BOLL_EVENT_CODES = frozenset((215, 223))
    SPRING_EVENT_CODES = frozenset((85, 86, 87))
    HORIZONTAL_SPRING_EVENT_CODES = frozenset((91, 92, 93))
    START_POSITION_EVENT_CODES = frozenset((29, 30, 31, 32))
    GEM_EVENT_CODES = frozenset((63, 64, 65, 66, 67, 97, 98, 99))
    FLOAT_LIZARD_EVENT_CODES = frozenset((183, 250))
    MULTIPLAYER_START_EVENT_CODE = 31
    BRIDGE_EVENT_CODE = 153
    GEM_RING_EVENT_CODE = 192
    RED_GEM_EVENT_CODE = 63
    CTF_BASE_EVENT_CODE = 244

    # The characters a multiplayer start position can show.
    MULTIPLAYER_START_SET_IDS = (55, 89, 61)
    # Idle animations of the characters, on the ground and in the air.
    GROUNDED_START_ANIMATION_IDS = (6, 10, 14, 15, 30, 34)
    AIRBORNE_START_ANIMATION_IDS = (11, 12, 25, 27, 51, 60)
    # Gems are drawn green through this table, which shifting turns into other colours.
    GEM_LOOKUP_TABLE = (
        23, 23, 22, 21, 20, 19, 18, 17, 16, 15, 16, 15, 15, 16, 15, 15,
        15, 15, 15, 15, 15, 15, 15, 15, 15, 15, 15, 15, 15, 0, 0, 0)
    GEM_COLOR_SHIFTS = {63: 32, 67: 32, 97: 32, 65: 16, 99: 16, 66: 72}

    ## \param[in] palette - The palette sprites are drawn with.
    ## \param[in] resource_folder - Where animation libraries are found.
    ##            Defaults to the configured resource folder.
    ## \param[in] palette_remapping - Recolours particular animations; see AnimationLibrary.load_remapping.
    ## \param[in] libraries - Animation libraries that are already loaded, keyed by filename.
    ## \param[in] random_generator - Chooses the poses of start positions.
    def __init__(
            self, palette, resource_folder: str = None, palette_remapping: Dict[Tuple[int, int], Sequence[int]] = None,
            libraries: Dict[str, object] = None, random_generator: random.Random = None):
        self.palette = verify_palette(palette)
        self.resource_folder = resource_folder if resource_folder is not None else global_variables.resource_folder
        self.palette_remapping = dict(palette_remapping or {})
        self._libraries = dict(libraries or {})
        self._random = random_generator if random_generator is not None else random.Random()
        self._redirects: Dict[int, int] = {}
        self._cache: Dict[int, ResolvedEvent] = {}

    ## \return The animation library with the given filename, loading it when first requested.
    def get_library(self, filename: str):
        if filename not in self._libraries:
            filepath = os.path.join(self.resource_folder, filename)
            if not os.path.isfile(filepath):
                raise MissingAnimationFrame(f'Animation library {filepath} not found.')
            library = AnimationLibrary(filepath, palette = self.palette, resource_folder = self.resource_folder)
            library.load_remapping(self.palette_remapping)
            self._libraries[filename] = library
        return self._libraries[filename]

    ## Draws every event with the given code as if it had another code.
    def redirect(self, from_code: int, to_code: int):
        self._redirects[from_code] = to_code
        # Events already built might have used the old mapping.
        self._cache.clear()

    ## Follows redirects from the given code until reaching a code that is not redirected.
    ## \return The code to draw.
    def resolve_redirect(self, code: int) -> int:
        visited_codes = set()
        while code in self._redirects:
            if code in visited_codes:
                raise RedirectCycle(f'Event {code} redirects back to itself through {sorted(visited_codes)}.')
            visited_codes.add(code)
            code = self._redirects[code]

        if code not in EVENT_TABLE:
            raise UnknownEventCode(f'Event {code} is unknown.')
        return code

    ## \return True if events with this code can be drawn.
    def is_visible(self, code: int) -> bool:
        return code in EVENT_TABLE

    ## Builds, or recalls, an event's sprite and how to draw it.
    ## \param[in] packed - The event code and its parameters, as stored in a level.
    ## \param[in] on_ground - True when the event rests on something solid.
    def get_event(self, packed: int, on_ground: bool = False) -> ResolvedEvent:
        code = self.resolve_redirect(packed & EVENT_CODE_MASK)
        cacheable = code not in UNCACHED_EVENT_CODES
        if cacheable and (packed in self._cache):
            return self._cache[packed]

        # APPLY THE DEFAULTS.
        descriptor = EVENT_TABLE[code]
        event = ResolvedEvent(
            code = code,
            feels_gravity = descriptor.feels_gravity,
            is_pickup = descriptor.is_pickup,
            use_hotspot = descriptor.use_hotspot_for_gravity,
            always_adjust = descriptor.always_adjust_position,
            opacity = descriptor.opacity_or_draw_mode,
            difficulty = get_event_parameter(packed, 8, 2))
        if event.opacity > 100:
            if event.opacity == CRATE_OPACITY:
                event.draw_mode = DrawMode.CRATE
            elif event.opacity == MONITOR_OPACITY:
                event.draw_mode = DrawMode.MONITOR
            event.opacity = 100

        # BUILD THE SPRITE.
        parameters = packed >> EVENT_PARAMETERS_SHIFT
        event.sprite = self._build_sprite(event, descriptor, parameters, on_ground)
        if cacheable:
            self._cache[packed] = event
        return event

    ## Builds the sprite of an event, adjusting the event's placement where the
    ## sprite is a composite.
    def _build_sprite(self, event: ResolvedEvent, descriptor: EventDescriptor, parameters: int, on_ground: bool) -> Sprite:
        library = self.get_library(descriptor.library)
        set_id = descriptor.set_id
        animation_id = descriptor.animation_id
        frame_id = 0
        lookup_table = None
        code = event.code

        if code in self.PLATFORM_EVENT_CODES:
            return self._build_swinging_platform(event, library, set_id, parameters)

        elif code == self.CTF_BASE_EVENT_CODE:
            return self._build_ctf_base(event, library, set_id, parameters)

        elif code in self.SPRING_EVENT_CODES:
            # Springs on the ceiling point down.
            if get_event_parameter(parameters, 0, 1) != 0:
                event.feels_gravity = False
                event.flip_y = True

        elif code in self.HORIZONTAL_SPRING_EVENT_CODES:
            event.offset_y = -1

        elif code == self.BRIDGE_EVENT_CODE:
            bridge_tile_count = get_event_parameter(parameters, 0, 4)
            if bridge_tile_count != 0:
                return self._build_bridge(event, library, set_id, animation_id, parameters)

        elif code in self.START_POSITION_EVENT_CODES:
            event.flip_x = self._random.randint(0, 4) < 2
            if code == self.MULTIPLAYER_START_EVENT_CODE:
                set_id = self._random.choice(self.MULTIPLAYER_START_SET_IDS)
            if on_ground:
                animation_id = self._random.choice(self.GROUNDED_START_ANIMATION_IDS)
                event.feels_gravity = True
            else:
                animation_id = self._random.choice(self.AIRBORNE_START_ANIMATION_IDS)

        elif code in self.GEM_EVENT_CODES:
            shift = self.GEM_COLOR_SHIFTS.get(code, 0)
            lookup_table = [index + shift if index > 15 else index for index in self.GEM_LOOKUP_TABLE]

        elif code == self.GEM_RING_EVENT_CODE:
            ring_event_code = get_event_parameter(parameters, 10, 8) or self.RED_GEM_EVENT_CODE
            ring_event_code = self.resolve_redirect(ring_event_code)
            # A ring of rings is drawn as a plain sprite.
            if ring_event_code != self.GEM_RING_EVENT_CODE:
                return self._build_gem_ring(ring_event_code, parameters)

        elif code == 128:
            # Moths come in several colours.
            moth_type = get_event_parameter(parameters, 0, 3)
            animation_id = {1: 1, 5: 1, 2: 0, 6: 0, 3: 2, 7: 2}.get(moth_type, 3)

        elif code == 129:
            # Steam.
            frame_id = 5

        elif code == 110:
            # Caterpillar.
            event.flip_x = True

        elif code == 195:
            # Uterus.
            sprite = library.get_frame(set_id, animation_id, frame_id)
            rotated_image = sprite.image.rotate(-90, expand = True)
            return Sprite(rotated_image, -(rotated_image.width // 2), -(rotated_image.height // 2))

        elif code == 237:
            return self._build_bee_boy(library, set_id)

        elif code == 235:
            event.flip_x = True
            return self._build_bolly(library, set_id)

        elif code in self.FLOAT_LIZARD_EVENT_CODES:
            event.offset_x += 3
            return self._build_float_lizard(library, set_id)

        # DRAW A SINGLE FRAME.
        if event.draw_mode == DrawMode.CRATE:
            return library.get_frame_as_crate(set_id, animation_id, frame_id, self.palette, lookup_table)
        elif event.draw_mode == DrawMode.MONITOR:
            return library.get_frame_as_monitor(set_id, animation_id, frame_id, self.palette, lookup_table)
        return library.get_frame(set_id, animation_id, frame_id, self.palette, lookup_table)

    ## Draws a platform hanging from a chain, or a spiked ball on a chain.
    ## The chain length is a parameter; the chain is drawn upwards from the platform.
    def _build_swinging_platform(self, event: ResolvedEvent, library, set_id: int, parameters: int) -> Sprite:
        chain_length = get_event_parameter(parameters, 8, 4)
        is_spike_boll = event.code in self.SPIKE_BOLL_EVENT_CODES
        platform = library.get_frame(set_id, 0, 0)
        chain = library.get_frame(set_id, 0, 1)
        # Metal chains overlap; other chain sprites do not.
        chain_overlap = 2 if (is_spike_boll or event.code == 210) else 0
        link_height = chain.height - chain_overlap

        # SIZE THE SPRITE.
        if chain_length > 0:
            if not is_spike_boll:
                event.offset_y += 11
            height = (link_height * 2) + (link_height * max(0, chain_length - 2)) + platform.height
        else:
            height = platform.height
        canvas = new_canvas(platform.width, height)

        # DRAW THE CHAIN AND PLATFORM.
        platform_y = height - platform.height
        if is_spike_boll:
            paste(canvas, platform.image, 0, platform_y)
        y = platform_y - platform.hotspot_y + chain.hotspot_y
        x = abs(platform.hotspot_x) - abs(chain.hotspot_x)
        for _ in range(chain_length + 1):
            paste(canvas, chain.image, x, y)
            y -= link_height
        if not is_spike_boll:
            paste(canvas, platform.image, 0, platform_y)

        event.offset_x -= 11
        return Sprite(canvas)

    ## Draws a capture-the-flag base from its machine, flag and the two characters beside it.
    def _build_ctf_base(self, event: ResolvedEvent, library, set_id: int, parameters: int) -> Sprite:
        team = get_event_parameter(parameters, 0, 1)
        is_flipped = get_event_parameter(parameters, 1, 1) == 0
        frame_id = 1 if team > 0 else 0

        machine = library.get_frame(set_id, 1, frame_id)
        eva = library.get_frame(set_id, 5, 0)
        flag = library.get_frame(set_id, 7 if team > 0 else 3, 0)
        beepboop = library.get_frame(set_id, 2, 0)
        # Eva always faces away from the base.
        eva_image = ImageOps.mirror(eva.image)
        # The flag keeps its original direction.
        flag_image = ImageOps.mirror(flag.image) if is_flipped else flag.image

        canvas = new_canvas(130, 101)
        paste(canvas, machine.image, 45, 0)
        paste(canvas, eva_image, 0, 40)
        paste(canvas, beepboop.image, 102, 42)
        paste(canvas, flag_image, 33 if is_flipped else 78, 54)

        sprite = Sprite(
            canvas,
            hotspot_x = -(machine.width + machine.hotspot_x) - 12,
            hotspot_y = machine.hotspot_y,
            coldspot_x = -(machine.width + machine.coldspot_x) - 12,
            coldspot_y = machine.coldspot_y)
        event.offset_x += sprite.hotspot_x
        event.flip_x = is_flipped
        return sprite

    ## Draws a bridge by repeating its segments up to its length.
    ## The last segment is cut off where the bridge ends.
    def _build_bridge(self, event: ResolvedEvent, library, set_id: int, animation_id: int, parameters: int) -> Sprite:
        TILE_SIZE = 32
        SEGMENT_TOP = 10
        length = get_event_parameter(parameters, 0, 4) * TILE_SIZE
        bridge_type = min(6, get_event_parameter(parameters, 4, 3))
        segment_animation_id = animation_id + bridge_type
        frame_count = library.get_animation_info(set_id, segment_animation_id).frame_count

        canvas = new_canvas(length, TILE_SIZE)
        x = 0
        frame_id = 0
        while x < length:
            segment = library.get_frame(set_id, segment_animation_id, frame_id)
            paste(canvas, segment.image, x, SEGMENT_TOP + segment.hotspot_y)
            # Zero-width segments would never fill the bridge.
            x += max(1, segment.width)
            frame_id = (frame_id + 1) % frame_count

        event.offset_x -= 1
        return Sprite(canvas)

    ## Draws copies of another event's sprite in a circle, each rotated to face outward.
    def _build_gem_ring(self, ring_event_code: int, parameters: int) -> Sprite:
        RING_SIZE = 256
        RADIUS = 45
        # This starting angle, in radians, closely matches the game.
        STARTING_ANGLE = 25
        copy_count = get_event_parameter(parameters, 0, 5) or 8
        ring_sprite = self.get_event(ring_event_code).sprite

        # LEAVE ROOM TO ROTATE.
        rotatable = new_canvas(ring_sprite.width * 2, ring_sprite.height * 2)
        paste(rotatable, ring_sprite.image, ring_sprite.width // 2, ring_sprite.height // 2)

        # DRAW THE RING.
        canvas = new_canvas(RING_SIZE, RING_SIZE)
        angle = STARTING_ANGLE
        angle_step = math.radians(360 / copy_count)
        for _ in range(copy_count):
            x_offset = math.cos(angle) * RADIUS
            y_offset = math.tan(angle) * x_offset
            rotated_image = rotatable.rotate(int(math.degrees(angle) - 90) % 360, expand = True)
            x = (RING_SIZE / 2) + x_offset - (rotated_image.width / 2)
            y = (RING_SIZE / 2) - y_offset - (rotated_image.height / 2)
            paste(canvas, rotated_image, int(x), int(y))
            angle += angle_step

        return Sprite(canvas, -(RING_SIZE // 2), -(RING_SIZE // 2))

    ## Draws a swarm of bees.
    def _build_bee_boy(self, library, set_id: int) -> Sprite:
        boy = library.get_frame(set_id, 0, 0)
        yob = ImageOps.mirror(boy.image)
        canvas = new_canvas(3 * 32, 2 * 32)
        for image, x, y in ((boy.image, 26, 19), (yob, 62, 23), (boy.image, 18, 52), (yob, 44, 47), (boy.image, 61, 43)):
            paste(canvas, image, x, y)
        return Sprite(canvas, -48, -48)

    ## Draws the Bolly boss from its top, bottom and gun. The chain is not drawn.
    def _build_bolly(self, library, set_id: int) -> Sprite:
        top = library.get_frame(set_id, 3, 0)
        bottom = library.get_frame(set_id, 2, 0)
        gun = library.get_frame(set_id, 6, 0)

        canvas = new_canvas(max(top.width, bottom.width), top.height + bottom.height)
        paste(canvas, top.image, abs(bottom.hotspot_x) - abs(top.hotspot_x), 0)
        paste(canvas, bottom.image, 0, top.height)
        paste(canvas, gun.image, 17, top.height + 14)
        return Sprite(canvas)

    ## Draws a lizard hanging from its copter.
    def _build_float_lizard(self, library, set_id: int) -> Sprite:
        LIZARD_TOP = 23
        copter = library.get_frame(set_id, 3, 0)
        lizard = library.get_frame(set_id, 2, 0)

        canvas = new_canvas(lizard.width, copter.height + lizard.height)
        paste(canvas, copter.image, abs(lizard.hotspot_x - copter.hotspot_x), 0)
        paste(canvas, lizard.image, 0, LIZARD_TOP)
        return Sprite(canvas, copter.hotspot_x, copter.hotspot_y)
