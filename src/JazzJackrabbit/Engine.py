#! python3

## This program reads the data files of Jazz Jackrabbit 2 and its predecessor
## and exports a preview image of each one.
## Overall Design:
##  - Each file format has its own class, which reads the file's header when
##    the file is opened. The rest of the file is only decoded when it is needed
##    to draw something.
##  - Levels draw their tiles from a tileset and their events from animation
##    libraries. Tilesets (and scripts, and so on) are looked up among the files
##    next to the level; animation libraries and the default palette are read
##    from the resource folder.
##  - The preview of each file is exported as a bitmap.

from typing import List
import os

from asset_extraction_framework.CommandLine import CommandLineArguments
from asset_extraction_framework.Application import Application
from asset_extraction_framework.Exceptions import BinaryParsingError

from JazzJackrabbit import global_variables
from JazzJackrabbit.AnimationLibrary import AnimationLibrary
from JazzJackrabbit.Blocks import Blocks
from JazzJackrabbit.Episode import Episode
from JazzJackrabbit.LegacyLevel import LegacyLevel
from JazzJackrabbit.Level import Level
from JazzJackrabbit.Planet import Planet
from JazzJackrabbit.Tileset import Tileset

class JazzJackrabbitEngine(Application):
    # The files are read in this order. The older family's files have
    # three-digit extensions.
    FILE_TYPES = (
        (r'blocks\.\d+$', Blocks),
        (r'level\d*\.\d+$', LegacyLevel),
        (r'planet\.\d+$', Planet),
        (r'.*\.j2a$', AnimationLibrary),
        (r'.*\.j2t$', Tileset),
        (r'.*\.j2e$', Episode),
        (r'.*\.j2l$', Level),
    )

    def __init__(self, application_name: str):
        super().__init__(application_name)
        self.files = []

    def process(self, input_paths: List[str]):
        # FIND THE FILES.
        matched_files = []
        for filename_regex, file_type in self.FILE_TYPES:
            for filepath in self.find_matching_files(input_paths, filename_regex, case_sensitive = False):
                matched_files.append((filepath, file_type))
        if len(matched_files) == 0:
            print('ERROR: No Jazz Jackrabbit files were found in the input path(s).')
            exit(1)

        # READ THE FILES.
        # A file that cannot be read does not stop the others from being read.
        for filepath, file_type in matched_files:
            print(f'INFO: Processing {filepath}')
            try:
                file = self.open_file(filepath, file_type)
            except BinaryParsingError as error:
                print(f'WARNING: Could not read {filepath}: {error}')
                continue
            self.files.append(file)

    @staticmethod
    def open_file(filepath: str, file_type):
        if file_type is Level:
            level = Level(filepath, resource_folder = global_variables.resource_folder, pixel_budget = global_variables.pixel_budget)
            # Levels find their tilesets and scripts among the files next to them.
            level.load_adjacent_folder(os.path.dirname(filepath) or '.')
            return level
        elif file_type in (AnimationLibrary, Episode):
            return file_type(filepath, resource_folder = global_variables.resource_folder)
        return file_type(filepath)

    def export_assets(self, command_line_arguments):
        application_export_subdirectory: str = os.path.join(command_line_arguments.export, self.application_name)
        os.makedirs(application_export_subdirectory, exist_ok = True)
        for file in self.files:
            print(f'INFO: Exporting preview of {file.filepath}')
            try:
                file.export(application_export_subdirectory, command_line_arguments)
            except (BinaryParsingError, FileNotFoundError) as error:
                print(f'WARNING: Could not export {file.filepath}: {error}')

def main(raw_command_line: List[str] = None):
    # PARSE THE COMMAND-LINE ARGUMENTS.
    APPLICATION_NAME = 'Jazz Jackrabbit'
    APPLICATION_DESCRIPTION = (
        'Supports the animation libraries (.j2a), tilesets (.j2t), episodes (.j2e) and levels (.j2l) of Jazz Jackrabbit 2,'
        '\nand the blocks, levels and planets of the original Jazz Jackrabbit.')
    command_line = CommandLineArguments(APPLICATION_NAME, APPLICATION_DESCRIPTION)
    command_line.argument_parser.add_argument(
        '--resources', default = None,
        help = 'The folder with Jazz2.pal and the animation libraries (Anims.j2a and so on) that levels need to draw their events.')
    command_line.argument_parser.add_argument(
        '--pixel-budget', type = int, default = None,
        help = 'The largest number of pixels a level preview can have. Larger levels are cropped around a start position.')
    command_line_arguments = command_line.parse(raw_command_line)
    if command_line_arguments.resources is not None:
        global_variables.resource_folder = command_line_arguments.resources
    if command_line_arguments.pixel_budget is not None:
        global_variables.pixel_budget = command_line_arguments.pixel_budget

    # PARSE THE ASSETS.
    jazz_jackrabbit_engine = JazzJackrabbitEngine(APPLICATION_NAME)
    jazz_jackrabbit_engine.process(command_line_arguments.input)

    # EXPORT THE ASSETS, IF REQUESTED.
    if command_line_arguments.export:
        jazz_jackrabbit_engine.export_assets(command_line_arguments)

if __name__ == '__main__':
    main()
