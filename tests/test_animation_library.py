import numpy as np
import pytest

from JazzJackrabbit.AnimationLibrary import AnimationLibrary
from JazzJackrabbit.Assets.Events import EventResolver
from JazzJackrabbit.Primitives.Palette import JCS_BLUE
from JazzJackrabbit.Exceptions import CorruptHeader, MissingAnimationFrame

from builders import Frame, animation_library, sample_palette, solid_frame, write_jasc_palette

def create_library(**kwargs) -> AnimationLibrary:
    sets = [
        # Set 0: one animation of two frames, and one animation without frames.
        [
            [solid_frame(4, 3, 10, hotspot = (-2, -3)), Frame([[0, 20], [20, 0]], coldspot = (1, 1))],
            [],
        ],
        # Set 1: one animation of one frame.
        [
            [solid_frame(6, 2, 30)],
        ],
    ]
    return AnimationLibrary.from_bytes(animation_library(sets), palette = sample_palette(), **kwargs)

def test_reads_the_sets():
    library = create_library()
    assert library.version == 0x200
    assert len(library.sets) == 2
    assert library.sets[0].animation_count == 2
    assert library.sets[0].frame_count == 2

def test_animation_info():
    library = create_library()
    info = library.get_animation_info(0, 0)
    assert info.frame_count == 2
    assert info.frames_per_second == 10
    assert info.first_frame_index == 0
    assert library.get_animation_info(0, 1).first_frame_index == 2
    with pytest.raises(MissingAnimationFrame):
        library.get_animation_info(0, 2)

def test_get_frame():
    library = create_library()
    palette = sample_palette()
    frame = library.get_frame(0, 0, 0)
    assert (frame.width, frame.height) == (4, 3)
    assert (frame.hotspot_x, frame.hotspot_y) == (-2, -3)
    assert frame.image.getpixel((0, 0)) == (*palette[10], 255)

    frame = library.get_frame(0, 0, 1)
    assert (frame.coldspot_x, frame.coldspot_y) == (1, 1)
    assert frame.pixel_grid.tolist() == [[0, 20], [20, 0]]
    assert frame.image.getpixel((0, 0))[3] == 0
    assert frame.image.getpixel((1, 0)) == (*palette[20], 255)

    # Frames are counted from the start of the set.
    frame = library.get_frame(1, 0, 0)
    assert frame.image.getpixel((5, 1)) == (*palette[30], 255)

def test_missing_frames():
    library = create_library()
    with pytest.raises(MissingAnimationFrame):
        library.get_frame(0, 0, 2)
    with pytest.raises(MissingAnimationFrame):
        library.get_frame(0, 1, 0)
    with pytest.raises(MissingAnimationFrame):
        library.get_frame(2, 0, 0)

def test_palette_remapping():
    library = create_library()
    remapping = list(range(256))
    remapping[10] = 200
    library.load_remapping({(0, 0): remapping})
    frame = library.get_frame(0, 0, 0)
    assert frame.image.getpixel((0, 0)) == (*sample_palette()[200], 255)
    # Other animations are not remapped.
    assert library.get_frame(1, 0, 0).image.getpixel((0, 0)) == (*sample_palette()[30], 255)

def test_default_palette_is_read_from_the_resource_folder(tmp_path):
    palette = np.zeros((256, 3), dtype = np.uint8)
    palette[10] = (1, 2, 3)
    write_jasc_palette(str(tmp_path / 'Jazz2.pal'), palette)
    library = AnimationLibrary.from_bytes(animation_library([[[solid_frame(1, 1, 10)]]]), resource_folder = str(tmp_path))
    assert library.get_frame(0, 0, 0).image.getpixel((0, 0)) == (1, 2, 3, 255)

def test_frame_as_crate(tmp_path):
    (tmp_path / 'crate.j2a').write_bytes(animation_library([[[solid_frame(32, 32, 50)]]]))
    library = create_library(resource_folder = str(tmp_path))
    crate = library.get_frame_as_crate(0, 0, 0)
    assert (crate.width, crate.height) == (32, 32)
    # The emblem is darkened where it covers the crate.
    emblem_pixel = crate.image.getpixel((12, 13))
    crate_pixel = crate.image.getpixel((0, 0))
    assert emblem_pixel != crate_pixel
    assert crate_pixel == (*sample_palette()[50], 255)

def test_frame_as_monitor(tmp_path):
    (tmp_path / 'Plus.j2a').write_bytes(animation_library([[], [], [[]] * 4 + [[solid_frame(20, 24, 60)]]]))
    library = create_library(resource_folder = str(tmp_path))
    monitor = library.get_frame_as_monitor(1, 0, 0)
    assert (monitor.width, monitor.height) == (20, 24)
    assert monitor.image.getpixel((8, 10)) == (*sample_palette()[30], 255)
    assert monitor.image.getpixel((0, 0)) == (*sample_palette()[60], 255)

def test_missing_companion_library(tmp_path):
    library = create_library(resource_folder = str(tmp_path))
    with pytest.raises(MissingAnimationFrame):
        library.get_frame_as_crate(0, 0, 0)

def test_preview_shows_the_first_frame_of_each_animation():
    preview = create_library().get_preview()
    # The animation without frames is left out.
    assert preview.size == (4 + 6, 3)
    assert preview.getpixel((9, 1)) == (*sample_palette()[30], 255)
    assert preview.getpixel((5, 2)) == (*JCS_BLUE, 255)

def test_wrong_magic_number():
    data = bytearray(animation_library([]))
    data[:4] = b'BILA'
    with pytest.raises(CorruptHeader):
        AnimationLibrary.from_bytes(bytes(data))

def test_resolver_loads_libraries_from_the_resource_folder(tmp_path):
    # Set 0, animation 25 is the bouncer ammo.
    (tmp_path / 'Anims.j2a').write_bytes(animation_library([[[]] * 25 + [[solid_frame(5, 5, 40)]]]))
    resolver = EventResolver(sample_palette(), resource_folder = str(tmp_path))
    event = resolver.get_event(34)
    assert (event.sprite.width, event.sprite.height) == (5, 5)
    assert event.sprite.image.getpixel((2, 2)) == (*sample_palette()[40], 255)

if __name__ == "__main__":
    pytest.main()
