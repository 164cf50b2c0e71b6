"""
Global constants for Hidden Maze
"""

# Screen settings
CELL_SIZE = 36
FPS = 60
WALL_THICK = 3
MARGIN = 20

# HUD panel height
PANEL_H = 90

# Direction vectors (dx, dy, name) in carving order: up, right, down, left
DIRS = [
    (0, -1, 'up'),
    (1, 0, 'right'),
    (0, 1, 'down'),
    (-1, 0, 'left'),
]

# Direction to name mapping
DIR_NAMES = {(dx, dy): name for dx, dy, name in DIRS}

# Wall array kinds
WALL_HORIZONTAL = 'horizontal'
WALL_VERTICAL = 'vertical'

# Maze size bounds (cells per side)
MIN_MAZE_SIZE = 5
MAX_MAZE_SIZE = 30
DEFAULT_MAZE_SIZE = 15

# Vision
MIN_VIEW_RANGE = 1
MAX_VIEW_RANGE = 5
DEFAULT_VIEW_RANGE = 1  # 3x3 window

# View modes
VIEW_MODE_PERMANENT = 'permanent'
VIEW_MODE_INSTANT = 'instant'
DEFAULT_VIEW_MODE = VIEW_MODE_PERMANENT

# Fixed levels are seeded with level * FIXED_LEVEL_SEED_STEP
FIXED_LEVEL_SEED_STEP = 12345

# Player animation (presentation only)
PLAYER_MOVE_COOLDOWN_MS = 90
PLAYER_ANIM_SPEED = 12.0

# Save files
SAVE_DIR = "saves"
SAVE_VERSION = "1.0.0"
AUTOSAVE_SLOT = "autosave"
