import struct

import numpy as np
import pytest

from JazzJackrabbit.Episode import Episode
from JazzJackrabbit.Primitives.Palette import JCS_BLUE
from JazzJackrabbit.Exceptions import CorruptHeader, DecompressionMismatch

from builders import episode_file, sample_palette, write_jasc_palette

ILLUSTRATION = [
    [0, 7, 7, 0],
    [8, 8, 8, 8]]
TITLE = [[1, 2, 3]]
TITLE_DARK = [[4, 5, 6]]

def create_episode(**kwargs) -> Episode:
    data = episode_file(b'#Formerly |a @Prince', ILLUSTRATION, TITLE, TITLE_DARK)
    return Episode.from_bytes(data, **kwargs)

def test_reads_the_header():
    episode = create_episode(palette = sample_palette())
    assert episode.name == '#Formerly |a @Prince'
    assert episode.display_name == 'Formerly a  Prince'
    assert episode.first_level_filename == 'level1.j2l'
    assert episode.is_registered
    assert (episode.width, episode.height) == (4, 2)
    assert (episode.title_width, episode.title_height) == (3, 1)

def test_images():
    palette = sample_palette()
    episode = create_episode(palette = palette)
    illustration = episode.get_image_illustration()
    assert illustration.size == (4, 2)
    # Index 0 shows the background colour of the level editor.
    assert illustration.getpixel((0, 0)) == JCS_BLUE
    assert illustration.getpixel((1, 0)) == tuple(palette[7])
    assert episode.get_image_title().getpixel((2, 0)) == tuple(palette[3])
    assert episode.get_image_title_dark().getpixel((0, 0)) == tuple(palette[4])
    assert episode.get_preview().size == (4, 2)

def test_default_palette_is_read_from_the_resource_folder(tmp_path):
    palette = np.zeros((256, 3), dtype = np.uint8)
    palette[8] = (10, 20, 30)
    write_jasc_palette(str(tmp_path / 'Jazz2.pal'), palette)
    episode = create_episode(resource_folder = str(tmp_path))
    assert episode.get_image_illustration().getpixel((0, 1)) == (10, 20, 30)

def test_image_sizes_must_match_the_header():
    data = bytearray(episode_file(b'Episode', ILLUSTRATION, TITLE, TITLE_DARK))
    # Declare a taller illustration than the one stored.
    struct.pack_into('<II', data, 0xb0, 4, 3)
    episode = Episode.from_bytes(bytes(data), palette = sample_palette())
    with pytest.raises(DecompressionMismatch):
        episode.get_image_illustration()

def test_truncated_header():
    with pytest.raises(CorruptHeader):
        Episode.from_bytes(bytes(100))

if __name__ == "__main__":
    pytest.main()
