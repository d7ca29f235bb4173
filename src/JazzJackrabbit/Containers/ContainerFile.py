import io
import os
from abc import ABC, abstractmethod
from typing import Dict, Optional

from PIL import Image

from asset_extraction_framework.File import File

from ..Assets.Sprite import Sprite
from ..Exceptions import CorruptHeader, OutOfBounds, TruncatedInput

## A Jazz Jackrabbit data file whose contents are split into substreams:
## numbered sections of the file that are stored compressed and located
## through sizes declared in the file header.
##
## The whole file is read into memory once. Each substream is decompressed
## the first time it is requested and kept for the lifetime of the file,
## since files are never modified after they are loaded.
class ContainerFile(File, ABC):
    # Files shorter than this cannot hold a complete header.
    MINIMUM_HEADER_SIZE = 0

    def __init__(self, filepath: str = None, stream = None):
        # VERIFY THE FILE IS NOT EMPTY.
        # Empty files cannot be mapped into memory, so they must be caught
        # before the file is opened.
        if filepath is not None:
            file_size = os.path.getsize(filepath)
            if file_size < max(1, self.MINIMUM_HEADER_SIZE):
                raise CorruptHeader(f'{filepath} is {file_size} bytes, but its header alone needs {max(1, self.MINIMUM_HEADER_SIZE)} bytes.')
        super().__init__(filepath, stream)
        self.stream.seek(0)
        self.data: bytes = bytes(self.stream.read())
        # The title of the file as stored in its header, for the formats that have one.
        self.name: Optional[str] = None
        self.version: Optional[int] = None
        self._substreams: Dict[int, bytes] = {}

        # VERIFY THE HEADER IS PRESENT.
        if len(self.data) < self.MINIMUM_HEADER_SIZE:
            raise CorruptHeader(f'{self.description} is {len(self.data)} bytes, but its header alone needs {self.MINIMUM_HEADER_SIZE} bytes.')

        # READ THE HEADER.
        try:
            self._parse_header()
        except (OutOfBounds, TruncatedInput) as error:
            raise CorruptHeader(f'The header of {self.description} ends early: {error}') from error

    ## Creates a file from bytes already in memory rather than from the filesystem.
    @classmethod
    def from_bytes(cls, data: bytes, **kwargs):
        return cls(stream = io.BytesIO(data), **kwargs)

    ## \return The decompressed data of the given substream.
    def get_substream(self, index: int) -> bytes:
        if index not in self._substreams:
            self._substreams[index] = self._extract_substream(index)
        return self._substreams[index]

    ## \return A short description of the file for messages.
    @property
    def description(self) -> str:
        if self.filepath is not None:
            return self.filepath
        return f'{type(self).__name__} in memory'

    ## \return The name exported files should have.
    @property
    def export_name(self) -> str:
        if self.filepath is not None:
            return self.filename
        return self.name or type(self).__name__

    ## Writes a preview image of the file, named after the file.
    ## \param[in] root_directory_path - The directory where the preview should be written.
    ## \param[in] command_line_arguments - All the command-line arguments provided to the
    ##            script that invoked this function.
    def export(self, root_directory_path: str, command_line_arguments):
        preview = Sprite(self.get_preview())
        preview.name = self.export_name
        preview.export(root_directory_path, command_line_arguments)

    ## \return An image showing the contents of the file.
    @abstractmethod
    def get_preview(self) -> Image.Image:
        pass

    @abstractmethod
    def _parse_header(self):
        pass

    @abstractmethod
    def _extract_substream(self, index: int) -> bytes:
        pass
