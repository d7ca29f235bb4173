import io
from typing import Callable, List, Optional, Union

import self_documenting_struct as struct

from ..Exceptions import OutOfBounds

## Reads little-endian values from an immutable byte buffer, either sequentially
## or at arbitrary positions. Every read that would move past the end of the
## buffer raises OutOfBounds and leaves the position where it was.
##
## Reads that accept a count return a single value when the count is one
## and a list of values when the count is larger, so client code like this
## reads naturally:
##  layer_widths = cursor.uint32(8)
class ByteCursor:
    # The characters removed from both ends of trimmed strings.
    TRIMMED_CHARACTERS = ' \t\n\r\x00\x0b'
    # The number of bytes of context displayed before the position in error hexdumps.
    HEXDUMP_CONTEXT_LENGTH = 0x20

    def __init__(self, buffer: bytes = b''):
        self.load(buffer)

    ## Replaces the buffer and rewinds to its start.
    def load(self, buffer: bytes):
        self._buffer = bytes(buffer)
        self._stream = io.BytesIO(self._buffer)
        # The last value (or list of values) read. Flag-dependent reads
        # often need the value that was read just before them.
        self.last = None

    @property
    def position(self) -> int:
        return self._stream.tell()

    @property
    def length(self) -> int:
        return len(self._buffer)

    @property
    def remaining(self) -> int:
        return self.length - self.position

    @property
    def at_end(self) -> bool:
        return self.position >= self.length

    ## Moves to an absolute position. Seeking to exactly the end of the buffer is allowed.
    def seek(self, offset: int):
        if (offset < 0) or (offset > self.length):
            raise self._error(OutOfBounds, f'Cannot seek to 0x{offset:x} in a buffer of 0x{self.length:x} bytes.')
        self._stream.seek(offset)

    ## Moves relative to the current position. The count can be negative.
    def skip(self, count: int):
        self.seek(self.position + count)

    ## \return The next bytes in the buffer, without moving the cursor.
    def peek(self, length: int) -> bytes:
        self._ensure_available(length)
        return self._buffer[self.position:self.position + length]

    ## Reads the given number of bytes exactly as they are stored.
    def read(self, length: int) -> bytes:
        self._ensure_available(length)
        return self._stream.read(length)

    def uint8(self, count: int = 1) -> Union[int, List[int]]:
        return self._read_values(1, count, lambda: struct.unpack.uint8(self._stream))

    def int8(self, count: int = 1) -> Union[int, List[int]]:
        return self._read_values(1, count, lambda: struct.unpack.raw('<b', self._stream.read(1))[0])

    def uint16(self, count: int = 1) -> Union[int, List[int]]:
        return self._read_values(2, count, lambda: struct.unpack.uint16_le(self._stream))

    def int16(self, count: int = 1) -> Union[int, List[int]]:
        return self._read_values(2, count, lambda: struct.unpack.int16_le(self._stream))

    def uint32(self, count: int = 1) -> Union[int, List[int]]:
        return self._read_values(4, count, lambda: struct.unpack.uint32_le(self._stream))

    def int32(self, count: int = 1) -> Union[int, List[int]]:
        return self._read_values(4, count, lambda: struct.unpack.raw('<i', self._stream.read(4))[0])

    def float32(self, count: int = 1) -> Union[float, List[float]]:
        return self._read_values(4, count, lambda: struct.unpack.raw('<f', self._stream.read(4))[0])

    ## Reads bytes that are true when they are nonzero.
    def boolean(self, count: int = 1) -> Union[bool, List[bool]]:
        return self._read_values(1, count, lambda: struct.unpack.uint8(self._stream) != 0)

    ## Reads one or more strings.
    ## \param[in] length - The length of each string in bytes. When None, each
    ##            string extends to (and consumes) the next NUL byte.
    ## \param[in] trim - When True, whitespace and NULs are removed from both ends.
    ## \return The strings decoded one byte per character.
    def string(self, length: Optional[int] = None, count: int = 1, trim: bool = True) -> Union[str, List[str]]:
        self._verify_count(count)
        starting_position = self.position
        strings = []
        try:
            for _ in range(count):
                if length is None:
                    # FIND THE TERMINATOR.
                    terminator_position = self._buffer.find(b'\x00', self.position)
                    if terminator_position == -1:
                        raise self._error(OutOfBounds, f'No NUL terminator after 0x{self.position:x}.')
                    raw_string = self._stream.read(terminator_position - self.position)
                    self._stream.read(1)
                else:
                    raw_string = self.read(length)
                decoded_string = raw_string.decode('latin-1')
                strings.append(decoded_string.strip(self.TRIMMED_CHARACTERS) if trim else decoded_string)
        except OutOfBounds:
            self._stream.seek(starting_position)
            raise

        self.last = strings[0] if count == 1 else strings
        return self.last

    ## Reads a string preceded by its length in 7-bit groups, most significant
    ## group first. A set high bit means another group follows.
    def string_7bit(self, trim: bool = True) -> str:
        starting_position = self.position
        try:
            length = 0
            while True:
                length_byte = self.uint8()
                length |= (length_byte & 0x7f)
                if length_byte >= 0x80:
                    length <<= 7
                else:
                    break
            return self.string(length, trim = trim)
        except OutOfBounds:
            self._stream.seek(starting_position)
            raise

    ## Reads one or more fixed-length byte strings without trimming them.
    def raw(self, length: int, count: int = 1) -> Union[bytes, List[bytes]]:
        return self._read_values(length, count, lambda: self._stream.read(length))

    def _read_values(self, size: int, count: int, read_value: Callable):
        self._verify_count(count)
        self._ensure_available(size * count)
        values = [read_value() for _ in range(count)]
        self.last = values[0] if count == 1 else values
        return self.last

    def _verify_count(self, count: int):
        if count < 1:
            raise ValueError(f'Cannot read {count} values; at least one value must be read.')

    def _ensure_available(self, length: int):
        if length < 0:
            raise ValueError(f'Cannot read a negative number of bytes ({length}).')
        if length > self.remaining:
            raise self._error(OutOfBounds,
                f'Need {length} bytes at 0x{self.position:x}, but only {self.remaining} remain in a buffer of {self.length} bytes.')

    ## Creates an error that includes a hexdump of the data around the
    ## current position, when there is enough data before it to show.
    def _error(self, error_class, message: str):
        if self.position >= self.HEXDUMP_CONTEXT_LENGTH:
            return error_class(message, self._stream)
        return error_class(message)
