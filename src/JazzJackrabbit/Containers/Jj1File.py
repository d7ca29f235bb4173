from typing import Dict, FrozenSet

from .ContainerFile import ContainerFile
from ..Primitives.ByteCursor import ByteCursor
from ..Primitives.RunLength import decode_run_length
from ..Exceptions import TruncatedInput

## A file from the older family (tile blocks, levels, planets).
## Substreams follow each other directly, so a substream's position is the
## total stored size of the substreams before it. Most substreams are
## run-length blocks, but some file types also store fixed-size raw blobs.
class Jj1File(ContainerFile):
    # The indices of substreams that are stored as-is.
    RAW_SUBSTREAM_INDICES: FrozenSet[int] = frozenset()

    def __init__(self, filepath: str = None, stream = None):
        # The stored size of each substream, including any length prefix.
        # Header parsers fill this in as they walk the file.
        self.substream_sizes: Dict[int, int] = {}
        super().__init__(filepath, stream)

    ## \return The position where the given substream is stored.
    def substream_offset(self, index: int) -> int:
        return sum(self.substream_sizes[preceding_index] for preceding_index in range(index))

    def _extract_substream(self, index: int) -> bytes:
        if index not in self.substream_sizes:
            raise ValueError(f'Cannot read substream {index}; {self.description} has substreams {sorted(self.substream_sizes)}.')

        # READ THE STORED DATA.
        offset = self.substream_offset(index)
        end_pointer = offset + self.substream_sizes[index]
        if end_pointer > len(self.data):
            raise TruncatedInput(f'Substream {index} ends at 0x{end_pointer:x}, past the end of {self.description}.')
        stored_data = self.data[offset:end_pointer]

        # DECODE THE DATA.
        if index in self.RAW_SUBSTREAM_INDICES:
            return stored_data
        return decode_run_length(ByteCursor(stored_data))

    ## Reads the length prefix of the run-length block at the cursor and
    ## skips the whole block.
    ## \return The stored size of the block, including its length prefix.
    @staticmethod
    def skip_run_length_block(cursor: ByteCursor) -> int:
        RUN_LENGTH_PREFIX_SIZE = 2
        encoded_length = cursor.uint16()
        cursor.skip(encoded_length)
        return encoded_length + RUN_LENGTH_PREFIX_SIZE
