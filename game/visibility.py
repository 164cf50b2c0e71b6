"""
Visibility system - fog of war with line of sight through maze walls
Optimized with Numba JIT compilation
"""

import logging
from enum import Enum

import numpy as np
from numba import njit

from utils.config import clamp_view_range
from utils.constants import DEFAULT_VIEW_RANGE, DEFAULT_VIEW_MODE
from utils.errors import SaveDataError
from utils.helpers import mask_to_cells, parse_cell, percent

logger = logging.getLogger(__name__)


class ViewMode(Enum):
    """Exploration memory modes"""
    PERMANENT = 'permanent'
    INSTANT = 'instant'


MODE_NAMES = {
    ViewMode.PERMANENT: "Permanent view",
    ViewMode.INSTANT: "Instant view",
}

MODE_DESCRIPTIONS = {
    ViewMode.PERMANENT: "Explored areas stay on screen for good. Suits players who like to plan.",
    ViewMode.INSTANT: "Only the current view window is shown and forgotten once you leave it. Harder and more immersive.",
}


def parse_view_mode(mode):
    """
    Convert 'permanent' / 'instant' (or a ViewMode) to ViewMode

    Raises:
        ValueError: for unknown modes
    """
    if isinstance(mode, ViewMode):
        return mode
    return ViewMode(mode)


# ========== NUMBA KERNELS ==========

@njit(cache=True)
def _can_step(horizontal, vertical, width, height, x, y, dx, dy):
    """Orthogonal single step test against the edge walls (out of bounds is walled)"""
    nx = x + dx
    ny = y + dy
    if x < 0 or x >= width or y < 0 or y >= height:
        return False
    if nx < 0 or nx >= width or ny < 0 or ny >= height:
        return False

    if dx == 1 and dy == 0:
        return not vertical[y, x + 1]
    if dx == -1 and dy == 0:
        return not vertical[y, x]
    if dx == 0 and dy == 1:
        return not horizontal[y + 1, x]
    if dx == 0 and dy == -1:
        return not horizontal[y, x]
    return False


@njit(cache=True)
def _line_of_sight(horizontal, vertical, width, height, x1, y1, x2, y2):
    """
    Bresenham walk from (x1, y1) to (x2, y2), every step checked against walls

    A diagonal step is blocked by the vertical wall it crosses horizontally.
    """
    dx = abs(x2 - x1)
    dy = abs(y2 - y1)
    sx = 1 if x1 < x2 else -1
    sy = 1 if y1 < y2 else -1
    err = dx - dy

    cx = x1
    cy = y1

    while True:
        if cx == x2 and cy == y2:
            return True

        nx = cx
        ny = cy
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            nx += sx
        if e2 < dx:
            err += dx
            ny += sy

        mx = nx - cx
        my = ny - cy

        # Diagonal steps are judged by their x component only, like a move
        if mx != 0:
            my = 0
        if not _can_step(horizontal, vertical, width, height, cx, cy, mx, my):
            return False

        cx = nx
        cy = ny


@njit(cache=True)
def _visible_area(horizontal, vertical, width, height, vx, vy, view_range):
    """Boolean (height, width) mask of cells in the square window with line of sight"""
    mask = np.zeros((height, width), dtype=np.bool_)

    for dy in range(-view_range, view_range + 1):
        for dx in range(-view_range, view_range + 1):
            cx = vx + dx
            cy = vy + dy
            if cx < 0 or cx >= width or cy < 0 or cy >= height:
                continue
            if _line_of_sight(horizontal, vertical, width, height, vx, vy, cx, cy):
                mask[cy, cx] = True

    return mask


class VisibilitySystem:
    """
    Fog of war bound to one maze grid

    Keeps the lit window, the explored cells (mode dependent) and the
    permanent history as boolean masks indexed [y, x].
    """
    def __init__(self, grid, mode=DEFAULT_VIEW_MODE, view_range=DEFAULT_VIEW_RANGE):
        """
        Args:
            grid: MazeGrid to look through
            mode: 'permanent' or 'instant' (or ViewMode)
            view_range: Window half-size, clamped to 1-5
        """
        self.mode = parse_view_mode(mode)
        self.view_range = clamp_view_range(view_range)
        self.cache = {}
        self.bind(grid)

    def bind(self, grid):
        """Attach to a grid, dropping all state of the previous one"""
        self.grid = grid
        shape = (grid.height, grid.width)
        self.visible = np.zeros(shape, dtype=np.bool_)
        self.explored = np.zeros(shape, dtype=np.bool_)
        self.permanent = np.zeros(shape, dtype=np.bool_)
        self.cache.clear()

    # ========== SETTINGS ==========

    def set_mode(self, mode):
        """
        Switch exploration mode; recorded cells are kept

        Returns:
            bool: False if the mode is not recognised
        """
        try:
            new_mode = parse_view_mode(mode)
        except ValueError:
            logger.error("Invalid view mode: %r", mode)
            return False

        self.mode = new_mode
        self.cache.clear()
        logger.info("View mode set to %s", self.mode_name)
        return True

    def set_view_range(self, view_range):
        """
        Set the window half-size (clamped to 1-5)

        Returns:
            int: The range in effect; unchanged when view_range is not an integer
        """
        if isinstance(view_range, bool) or not isinstance(view_range, int):
            logger.error("Invalid view range: %r", view_range)
            return self.view_range

        self.view_range = clamp_view_range(view_range)
        self.cache.clear()
        size = 2 * self.view_range + 1
        logger.info("View range set to %d (%dx%d window)", self.view_range, size, size)
        return self.view_range

    @property
    def mode_name(self):
        return MODE_NAMES[self.mode]

    @property
    def mode_description(self):
        return MODE_DESCRIPTIONS[self.mode]

    # ========== VISIBILITY ==========

    def has_line_of_sight(self, x1, y1, x2, y2):
        """Straight-line visibility between two cells; out of bounds never sees"""
        g = self.grid
        if not (g.in_bounds(x1, y1) and g.in_bounds(x2, y2)):
            return False
        return bool(_line_of_sight(g.horizontal, g.vertical, g.width, g.height,
                                   int(x1), int(y1), int(x2), int(y2)))

    def calculate_visible_area(self, viewer_x, viewer_y):
        """
        Visible window around the viewer (cached per position and range)

        Returns:
            numpy bool mask (height, width), a private copy
        """
        key = (viewer_x, viewer_y, self.view_range)
        cached = self.cache.get(key)
        if cached is not None:
            return cached.copy()

        g = self.grid
        mask = _visible_area(g.horizontal, g.vertical, g.width, g.height,
                             int(viewer_x), int(viewer_y), self.view_range)
        self.cache[key] = mask.copy()
        return mask

    def update(self, viewer_x, viewer_y, grid=None):
        """
        Recompute visibility for a viewer position

        Args:
            viewer_x, viewer_y: Viewer cell
            grid: Optional grid; a different grid rebinds the system

        Returns:
            set: (x, y) tuples currently visible
        """
        if grid is not None and grid is not self.grid:
            self.bind(grid)

        window = self.calculate_visible_area(viewer_x, viewer_y)

        if self.mode == ViewMode.PERMANENT:
            self.explored |= window
            self.permanent |= window
            self.visible = self.permanent.copy()
        else:
            self.explored = window.copy()
            self.visible = window

        return set(mask_to_cells(self.visible))

    # ========== QUERIES ==========

    def is_visible(self, x, y):
        """Check if cell is currently visible"""
        if not self.grid.in_bounds(x, y):
            return False
        return bool(self.visible[y, x])

    def is_explored(self, x, y):
        """Check if cell counts as explored in the current mode"""
        if not self.grid.in_bounds(x, y):
            return False
        return bool(self.explored[y, x])

    def visible_cells(self):
        return mask_to_cells(self.visible)

    def explored_cells(self):
        return mask_to_cells(self.explored)

    def permanent_cells(self):
        return mask_to_cells(self.permanent)

    @property
    def explored_count(self):
        return int(self.explored.sum())

    def exploration_rate(self, total_cells):
        """Explored share in percent; 0 when total_cells <= 0"""
        return percent(self.explored_count, total_cells)

    def get_state(self):
        """Summary counts for HUD / debugging"""
        return {
            'mode': self.mode.value,
            'view_range': self.view_range,
            'visible_cells': int(self.visible.sum()),
            'explored_cells': self.explored_count,
            'permanent_cells': int(self.permanent.sum()),
        }

    # ========== MUTATION ==========

    def reset(self):
        """Forget everything seen so far"""
        self.visible[:] = False
        self.explored[:] = False
        self.permanent[:] = False
        self.cache.clear()
        logger.info("Visibility reset")

    def add_explored_cell(self, x, y):
        """Mark a cell explored (and permanent in permanent mode)"""
        if not self.grid.in_bounds(x, y):
            return False
        self.explored[y, x] = True
        if self.mode == ViewMode.PERMANENT:
            self.permanent[y, x] = True
        return True

    def add_explored_cells(self, cells):
        for x, y in cells:
            self.add_explored_cell(x, y)

    def reveal_all(self):
        """Light the whole maze (debugging aid)"""
        self.visible[:] = True
        self.explored[:] = True
        if self.mode == ViewMode.PERMANENT:
            self.permanent[:] = True

    # ========== EXPORT / IMPORT ==========

    def export_state(self):
        return {
            'mode': self.mode.value,
            'view_range': self.view_range,
            'explored_cells': [list(c) for c in self.explored_cells()],
            'permanent_cells': [list(c) for c in self.permanent_cells()],
        }

    def _cells_to_mask(self, cells, field):
        if not isinstance(cells, (list, tuple)):
            raise SaveDataError(f"{field} must be a list of coordinates")

        mask = np.zeros((self.grid.height, self.grid.width), dtype=np.bool_)
        for raw in cells:
            try:
                x, y = parse_cell(raw)
            except ValueError as e:
                raise SaveDataError(f"{field}: {e}") from e
            if not self.grid.in_bounds(x, y):
                raise SaveDataError(f"{field}: cell {(x, y)} outside the maze")
            mask[y, x] = True
        return mask

    def import_state(self, data):
        """
        Restore exported state; nothing changes if validation fails

        Raises:
            SaveDataError: on missing or malformed fields
        """
        if not isinstance(data, dict):
            raise SaveDataError("visibility state must be a mapping")

        missing = [k for k in ('mode', 'view_range', 'explored_cells', 'permanent_cells') if k not in data]
        if missing:
            raise SaveDataError(f"visibility state is missing {', '.join(missing)}")

        try:
            mode = parse_view_mode(data['mode'])
        except ValueError as e:
            raise SaveDataError(f"unknown view mode {data['mode']!r}") from e

        view_range = data['view_range']
        if isinstance(view_range, bool) or not isinstance(view_range, int):
            raise SaveDataError(f"view_range must be an integer, got {view_range!r}")

        explored = self._cells_to_mask(data['explored_cells'], 'explored_cells')
        permanent = self._cells_to_mask(data['permanent_cells'], 'permanent_cells')

        self.mode = mode
        self.view_range = clamp_view_range(view_range)
        self.explored = explored
        self.permanent = permanent
        self.cache.clear()

        if self.mode == ViewMode.PERMANENT:
            self.visible = self.permanent.copy()
        else:
            self.visible = self.explored.copy()

        logger.info("Visibility state imported (%d explored cells)", self.explored_count)

    def __repr__(self):
        return f"VisibilitySystem(mode={self.mode.value}, view_range={self.view_range})"
