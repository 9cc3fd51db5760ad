# Rooms Grid Style Definitions

# Cell marks
COLOR_CELL_EMPTY = (245, 245, 240)
COLOR_BLACK = (20, 20, 20)
COLOR_WHITE = (255, 255, 255)
COLOR_WHITE_MARKER = (90, 140, 200)  # Dot drawn on cells marked white

# Lines and Outlines
COLOR_GRID_LINES = (190, 190, 190)
COLOR_REGION_BORDER = (0, 0, 0)
GRID_LINE_WIDTH = 1
REGION_BORDER_WIDTH = 3

# Text
COLOR_TEXT_CLUE = (210, 50, 50)  # Readable on both filled and empty cells

# Messages
COLOR_MSG_SUCCESS = (60, 170, 80)
COLOR_MSG_ERROR = (220, 70, 70)

# Application
COLOR_BG = (30, 30, 30)
COLOR_SOLUTION_FRAME = (51, 51, 51)
