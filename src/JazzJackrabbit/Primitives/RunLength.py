from .ByteCursor import ByteCursor
from ..Exceptions import OutOfBounds, TruncatedInput

## Decodes one run-length block from the older file family.
## The block starts with a 16-bit count of encoded bytes, followed by runs that
## each start with a control byte:
##  - High bit set: the low 7 bits are a repeat count for the single byte that follows.
##  - Nonzero otherwise: that many literal bytes follow.
##  - Zero: exactly one literal byte follows, and the block ends there.
## The cursor is left just after the last byte consumed, so consecutive
## blocks can be decoded from the same cursor.
## \param[in,out] cursor - A cursor positioned at the block's length prefix.
## \return The decoded bytes.
def decode_run_length(cursor: ByteCursor) -> bytes:
    # READ THE BLOCK LENGTH.
    encoded_length = cursor.uint16()
    block_end_pointer = cursor.position + encoded_length

    # DECODE THE RUNS.
    decoded_bytes = bytearray()
    try:
        while cursor.position < block_end_pointer:
            control_byte = cursor.uint8()
            if control_byte & 0x80:
                # REPEAT THE NEXT BYTE.
                repeat_count = control_byte & 0x7f
                decoded_bytes += cursor.read(1) * repeat_count
            elif control_byte > 0:
                # COPY THE LITERAL BYTES.
                decoded_bytes += cursor.read(control_byte)
            else:
                # COPY THE LAST BYTE.
                decoded_bytes += cursor.read(1)
                break
    except OutOfBounds as error:
        raise TruncatedInput(f'Run-length block declared {encoded_length} bytes but the data ended at 0x{cursor.position:x}: {error}') from error

    return bytes(decoded_bytes)
