import zlib
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

from asset_extraction_framework.Asserts import assert_equal

from .ContainerFile import ContainerFile
from ..Primitives.ByteCursor import ByteCursor
from ..Exceptions import CorruptHeader, DecompressionMismatch, TruncatedInput

## The location of one zlib-compressed substream.
@dataclass(frozen = True)
class SubstreamEntry:
    compressed_size: int
    uncompressed_size: int
    # The absolute position of the compressed data in the file.
    offset: int

## Lays out substreams that are stored back to back.
## \param[in] sizes - The (compressed, uncompressed) size of each substream, in order.
## \param[in] first_offset - The position where the first substream starts.
## \param[in] first_index - The index of the first substream.
## \return The entries, keyed by substream index.
def build_substream_table(sizes: Iterable[Tuple[int, int]], first_offset: int, first_index: int = 1) -> Dict[int, SubstreamEntry]:
    substream_table = {}
    offset = first_offset
    for index, (compressed_size, uncompressed_size) in enumerate(sizes, start = first_index):
        substream_table[index] = SubstreamEntry(compressed_size, uncompressed_size, offset)
        offset += compressed_size
    return substream_table

## Decompresses one substream and verifies it has exactly the declared size.
## \param[in] data - The data of the whole file.
## \param[in] label - Identifies the substream in error messages.
def inflate_substream(data: bytes, entry: SubstreamEntry, label: str) -> bytes:
    # READ THE COMPRESSED DATA.
    compressed_end_pointer = entry.offset + entry.compressed_size
    if compressed_end_pointer > len(data):
        raise TruncatedInput(
            f'Substream {label} occupies 0x{entry.offset:x}-0x{compressed_end_pointer:x}, but the file is only 0x{len(data):x} bytes.')
    compressed_data = data[entry.offset:compressed_end_pointer]

    # DECOMPRESS IT.
    try:
        uncompressed_data = zlib.decompress(compressed_data)
    except zlib.error as error:
        raise DecompressionMismatch(f'Could not decompress substream {label}: {error}') from error
    if len(uncompressed_data) != entry.uncompressed_size:
        raise DecompressionMismatch(
            f'Substream {label} is {len(uncompressed_data)} bytes uncompressed, but the header declares {entry.uncompressed_size} bytes.')
    return uncompressed_data

## A file from the newer family (levels, tilesets, episodes, animation libraries),
## whose substreams are each compressed with zlib.
##
## Levels and tilesets share a 262-byte header:
##  - 0x000: Copyright notice, which mentions the publisher.
##  - 0x0b4: A four-character magic number.
##  - 0x0bc: The 32-byte title.
##  - 0x0dc: The version.
##  - 0x0e6: The compressed and uncompressed sizes of Data1 through Data4.
## Formats with a different header override the header parser.
class Jj2File(ContainerFile):
    HEADER_SIZE = 262
    MINIMUM_HEADER_SIZE = HEADER_SIZE
    SUBSTREAM_COUNT = 4
    COPYRIGHT_LENGTH = 180
    COPYRIGHT_SIGNATURE = b'MegaGames'
    MAGIC_NUMBER_OFFSET = 180
    # Each file type that uses the shared header defines its own.
    MAGIC_NUMBER: Optional[bytes] = None
    NAME_OFFSET = 188
    NAME_LENGTH = 32
    VERSION_OFFSET = 220
    SUBSTREAM_SIZES_OFFSET = 230

    def __init__(self, filepath: str = None, stream = None):
        self.substream_table: Dict[int, SubstreamEntry] = {}
        super().__init__(filepath, stream)

    def _parse_header(self):
        header = ByteCursor(self.data[:self.HEADER_SIZE])
        self._verify_signature(header)

        # READ THE TITLE AND VERSION.
        header.seek(self.NAME_OFFSET)
        self.name = header.string(self.NAME_LENGTH)
        header.seek(self.VERSION_OFFSET)
        self.version = header.uint16()

        # READ THE SUBSTREAM SIZES.
        header.seek(self.SUBSTREAM_SIZES_OFFSET)
        substream_sizes = [(header.uint32(), header.uint32()) for _ in range(self.SUBSTREAM_COUNT)]
        self.substream_table = build_substream_table(substream_sizes, self.HEADER_SIZE)

    def _verify_signature(self, header: ByteCursor):
        copyright_notice = header.peek(self.COPYRIGHT_LENGTH)
        if self.COPYRIGHT_SIGNATURE not in copyright_notice:
            raise CorruptHeader(f'{self.description} does not have the expected copyright notice.')

        if self.MAGIC_NUMBER is not None:
            header.seek(self.MAGIC_NUMBER_OFFSET)
            magic_number = header.read(len(self.MAGIC_NUMBER))
            try:
                assert_equal(magic_number, self.MAGIC_NUMBER, 'magic number')
            except AssertionError as error:
                raise CorruptHeader(f'{self.description}: {error}') from error

    def _extract_substream(self, index: int) -> bytes:
        if index not in self.substream_table:
            raise ValueError(f'Cannot read substream Data{index}; {self.description} has substreams {sorted(self.substream_table)}.')
        return inflate_substream(self.data, self.substream_table[index], f'Data{index}')

    ## \return The position just after the last declared substream.
    @property
    def substreams_end_pointer(self) -> int:
        return self.HEADER_SIZE + sum(entry.compressed_size for entry in self.substream_table.values())

    ## Removes the formatting codes the game uses in titles and level names.
    ## "#" and "|" change the text colour, and "@" starts a new line.
    @staticmethod
    def clean_text(text: str) -> str:
        return text.replace('#', '').replace('|', '').replace('@', ' ')
