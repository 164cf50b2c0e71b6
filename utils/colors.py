"""
Color palette for Hidden Maze
"""

# Background colors
COLOR_BG = (20, 22, 28)           # Main background
COLOR_MAZE_BG = (16, 18, 24)      # Maze area background
COLOR_PANEL_BG = (12, 14, 18)     # Panel background

# UI colors
COLOR_WALL = (230, 230, 230)      # Maze walls
COLOR_TEXT = (210, 210, 210)      # Normal text
COLOR_TEXT_HIGHLIGHT = (255, 230, 160)  # Highlighted text
COLOR_TEXT_DIM = (150, 150, 150)  # Dimmed text

# Entity colors
COLOR_PLAYER = (70, 140, 255)     # Player
COLOR_START = (90, 90, 160)       # Start cell
COLOR_GOAL = (60, 200, 120)       # Goal/Exit
COLOR_VISITED_CELL = (28, 32, 40) # Cells the player stepped on

# Path/hint colors
COLOR_HINT_PATH = (230, 210, 80)  # Solution path

# Fog of war
COLOR_FOG = (10, 12, 16)          # Unexplored overlay

# Menu colors
COLOR_MENU_OVERLAY = (10, 12, 16, 200)  # Pause / game over overlay (with alpha)
