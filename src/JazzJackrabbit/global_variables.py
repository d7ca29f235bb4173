import os

# The folder holding the files levels and animation libraries rely on
# but do not contain: the default palette (Jazz2.pal) and the animation
# libraries for crates and monitors. The command line can override this.
resource_folder = os.path.join(os.getcwd(), 'resources')

# The largest number of pixels a level preview can have. Larger levels
# are cropped around the player start position.
pixel_budget = 0x1000000
