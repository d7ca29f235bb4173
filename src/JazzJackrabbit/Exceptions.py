from asset_extraction_framework.Exceptions import BinaryParsingError

## The base for every error raised while decoding Jazz Jackrabbit files.
## Inheriting from BinaryParsingError gives a hexdump of the surrounding
## data whenever a stream is provided with the error.
class JazzFileError(BinaryParsingError):
    pass

## DEFINE STREAM ERRORS.
# A read or seek would move the cursor outside the buffer.
class OutOfBounds(JazzFileError):
    pass

# Encoded data ended before decoding could finish.
class TruncatedInput(JazzFileError):
    pass

## DEFINE CONTAINER ERRORS.
class CorruptHeader(JazzFileError):
    pass

class DecompressionMismatch(JazzFileError):
    pass

## DEFINE TILE MAP ERRORS.
class UnknownWordIndex(JazzFileError):
    pass

class DimensionMismatch(JazzFileError):
    pass

class AnimationResolutionOverflow(JazzFileError):
    pass

## DEFINE SPRITE ERRORS.
class TruncatedSpriteData(JazzFileError):
    pass

class MissingAnimationFrame(JazzFileError):
    pass

## DEFINE EVENT ERRORS.
class UnknownEventCode(JazzFileError):
    pass

class RedirectCycle(JazzFileError):
    pass
