import random
from types import SimpleNamespace

import pytest
from PIL import Image

from JazzJackrabbit.Assets.EventTable import EVENT_TABLE
from JazzJackrabbit.Assets.Events import DrawMode, EventResolver, get_event_parameter
from JazzJackrabbit.Assets.Sprite import Sprite
from JazzJackrabbit.Exceptions import MissingAnimationFrame, RedirectCycle, UnknownEventCode

from builders import sample_palette

## Stands in for an animation library. Every frame is a solid 10x8 image,
## and the calls made to draw them are recorded.
class FakeLibrary:
    FRAME_SIZE = (10, 8)

    def __init__(self, frame_count: int = 3):
        self.frame_count = frame_count
        self.requests = []

    def get_frame(self, set_index, animation_index, frame_index = 0, palette = None, lookup_table = None):
        self.requests.append(('frame', set_index, animation_index, frame_index, lookup_table))
        return Sprite(Image.new('RGBA', self.FRAME_SIZE, (255, 0, 0, 255)), hotspot_x = -5, hotspot_y = -8)

    def get_animation_info(self, set_index, animation_index):
        return SimpleNamespace(frame_count = self.frame_count)

    def get_frame_as_crate(self, set_index, animation_index, frame_index = 0, palette = None, lookup_table = None):
        self.requests.append(('crate', set_index, animation_index, frame_index, lookup_table))
        return Sprite(Image.new('RGBA', (32, 32)))

    def get_frame_as_monitor(self, set_index, animation_index, frame_index = 0, palette = None, lookup_table = None):
        self.requests.append(('monitor', set_index, animation_index, frame_index, lookup_table))
        return Sprite(Image.new('RGBA', (24, 24)))

def create_resolver(library = None, **kwargs) -> EventResolver:
    library = library if library is not None else FakeLibrary()
    libraries = {filename: library for filename in {descriptor.library for descriptor in EVENT_TABLE.values()}}
    return EventResolver(sample_palette(), resource_folder = '/nonexistent', libraries = libraries, **kwargs)

def test_event_table_entries_are_complete():
    for code, descriptor in EVENT_TABLE.items():
        assert 0 < code
        assert descriptor.library.endswith('.j2a')
        assert descriptor.opacity_or_draw_mode in range(0, 101) or descriptor.opacity_or_draw_mode in (200, 300)
        assert descriptor.display_name

def test_get_event_parameter():
    packed = 0b1011_0110
    assert get_event_parameter(packed, 0, 2) == 0b10
    assert get_event_parameter(packed, 4, 4) == 0b1011

def test_plain_event_uses_its_table_entry():
    library = FakeLibrary()
    resolver = create_resolver(library)
    event = resolver.get_event(63)
    descriptor = EVENT_TABLE[63]
    assert event.code == 63
    assert event.is_pickup == descriptor.is_pickup
    assert event.draw_mode == DrawMode.NORMAL
    assert event.opacity == 100
    assert event.sprite.width == 10
    # Gems are recoloured through a look-up table.
    _, set_index, animation_index, _, lookup_table = library.requests[-1]
    assert (set_index, animation_index) == (descriptor.set_id, descriptor.animation_id)
    assert lookup_table is not None

def test_events_are_cached_by_packed_value():
    library = FakeLibrary()
    resolver = create_resolver(library)
    first = resolver.get_event(34)
    assert resolver.get_event(34) is first
    assert len(library.requests) == 1
    # Different parameters are a different event.
    assert resolver.get_event(34 | (1 << 12)) is not first

def test_start_positions_are_not_cached():
    resolver = create_resolver(random_generator = random.Random(5))
    assert resolver.get_event(29) is not resolver.get_event(29)

def test_difficulty():
    resolver = create_resolver()
    assert resolver.get_event(34 | (2 << 8)).difficulty == 2

def test_unknown_event_code():
    resolver = create_resolver()
    assert not resolver.is_visible(255)
    with pytest.raises(UnknownEventCode):
        resolver.get_event(255)

def test_redirects_are_followed():
    library = FakeLibrary()
    resolver = create_resolver(library)
    resolver.redirect(34, 35)
    resolver.redirect(35, 36)
    assert resolver.resolve_redirect(34) == 36
    assert resolver.get_event(34).code == 36

def test_redirect_clears_the_cache():
    resolver = create_resolver()
    event = resolver.get_event(34)
    resolver.redirect(34, 33)
    assert resolver.get_event(34).code == 33
    assert resolver.get_event(34) is not event

def test_redirect_cycle():
    resolver = create_resolver()
    resolver.redirect(34, 35)
    resolver.redirect(35, 34)
    with pytest.raises(RedirectCycle):
        resolver.get_event(34)

    resolver = create_resolver()
    resolver.redirect(40, 40)
    with pytest.raises(RedirectCycle):
        resolver.resolve_redirect(40)

def test_redirect_to_unknown_event():
    resolver = create_resolver()
    resolver.redirect(34, 255)
    with pytest.raises(UnknownEventCode):
        resolver.get_event(34)

def test_crates_and_monitors():
    library = FakeLibrary()
    resolver = create_resolver(library)
    # Custom weapons reach their crates and monitors through redirects.
    resolver.redirect(34, 771)
    event = resolver.get_event(34)
    assert event.code == 771
    assert event.draw_mode == DrawMode.CRATE
    assert event.opacity == 100
    assert library.requests[-1][0] == 'crate'

    resolver.redirect(35, 772)
    event = resolver.get_event(35)
    assert event.draw_mode == DrawMode.MONITOR
    assert library.requests[-1][0] == 'monitor'

def test_ceiling_springs_point_down():
    resolver = create_resolver()
    event = resolver.get_event(85 | (1 << 12))
    assert event.flip_y
    assert not event.feels_gravity
    floor_spring = resolver.get_event(85)
    assert not floor_spring.flip_y
    assert floor_spring.feels_gravity

def test_bridge_is_as_long_as_its_parameter():
    resolver = create_resolver(FakeLibrary(frame_count = 2))
    event = resolver.get_event(153 | (5 << 12))
    assert (event.sprite.width, event.sprite.height) == (5 * 32, 32)
    assert event.offset_x == -1

def test_swinging_platform_includes_its_chain():
    resolver = create_resolver()
    platform = resolver.get_event(209)
    assert platform.sprite.height == 8
    long_platform = resolver.get_event(209 | (4 << 20))
    # Two full links plus two more, above the platform.
    assert long_platform.sprite.height == 8 * 4 + 8
    assert long_platform.offset_y == 11

def test_gem_ring_is_drawn_from_another_event():
    resolver = create_resolver()
    event = resolver.get_event(192)
    assert (event.sprite.width, event.sprite.height) == (256, 256)
    assert (event.sprite.hotspot_x, event.sprite.hotspot_y) == (-128, -128)

## Frames much wider than they are tall, so a ring drawn from them shows
## whether each copy is centred on its point of the ring.
class WideFrameLibrary(FakeLibrary):
    FRAME_SIZE = (40, 8)

def test_gem_ring_copies_are_centred_on_the_ring():
    resolver = create_resolver(WideFrameLibrary())
    ring = resolver.get_event(192).sprite.image
    bounding_box = ring.getbbox()
    assert bounding_box is not None
    left, top, right, bottom = bounding_box
    assert abs((left + right) / 2 - 128) <= 2
    assert abs((top + bottom) / 2 - 128) <= 2
    # The copies sit on the ring, so its middle is empty.
    assert ring.getpixel((128, 128))[3] == 0

def test_ctf_base_is_a_composite():
    resolver = create_resolver()
    event = resolver.get_event(244)
    assert (event.sprite.width, event.sprite.height) == (130, 101)

def test_missing_library():
    resolver = EventResolver(sample_palette(), resource_folder = '/nonexistent')
    with pytest.raises(MissingAnimationFrame):
        resolver.get_event(34)

def test_palette_must_have_256_entries():
    with pytest.raises(ValueError):
        EventResolver([(0, 0, 0)] * 16)

if __name__ == "__main__":
    pytest.main()
