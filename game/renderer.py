"""
Renderer - draws the maze, fog of war, player and HUD with pygame
Reads the game loop through its public accessors only.
"""

import pygame

from utils.colors import (
    COLOR_BG, COLOR_MAZE_BG, COLOR_PANEL_BG, COLOR_WALL, COLOR_TEXT,
    COLOR_TEXT_HIGHLIGHT, COLOR_TEXT_DIM, COLOR_PLAYER, COLOR_START,
    COLOR_GOAL, COLOR_VISITED_CELL, COLOR_HINT_PATH, COLOR_FOG,
    COLOR_MENU_OVERLAY,
)
from utils.constants import CELL_SIZE, WALL_THICK, MARGIN, PANEL_H, PLAYER_ANIM_SPEED
from utils.helpers import format_time, lerp


def screen_size_for(maze):
    """Window size needed to show a maze plus the HUD panel"""
    width = maze.width * CELL_SIZE + MARGIN * 2
    height = maze.height * CELL_SIZE + MARGIN * 2 + PANEL_H
    return width, height


class PlayerAnimator:
    """
    Smoothly slides the drawn player towards the logical position

    Presentation only: the game loop never reads this position.
    """
    def __init__(self, x, y):
        self.x = float(x)
        self.y = float(y)

    def snap(self, x, y):
        self.x = float(x)
        self.y = float(y)

    def update(self, dt, target_x, target_y):
        t = min(1.0, dt * PLAYER_ANIM_SPEED)
        self.x = lerp(self.x, target_x, t)
        self.y = lerp(self.y, target_y, t)
        if abs(self.x - target_x) < 0.01 and abs(self.y - target_y) < 0.01:
            self.snap(target_x, target_y)


class MazeRenderer:
    """
    Draws one frame of a GameLoop
    """
    def __init__(self):
        self.font = pygame.font.SysFont("consolas", 16)
        self.big_font = pygame.font.SysFont("consolas", 32, bold=True)

    def _cell_rect(self, x, y, pad=0):
        return pygame.Rect(
            MARGIN + x * CELL_SIZE + pad,
            MARGIN + y * CELL_SIZE + pad,
            CELL_SIZE - pad * 2,
            CELL_SIZE - pad * 2,
        )

    def draw_cell(self, screen, x, y, color, pad=6):
        """Draw filled cell"""
        pygame.draw.rect(screen, color, self._cell_rect(x, y, pad), border_radius=6)

    def draw_walls(self, screen, game):
        """Draw the wall segments bordering at least one visible cell"""
        maze = game.maze

        for y in range(maze.height + 1):
            for x in range(maze.width):
                if not maze.horizontal[y, x]:
                    continue
                if game.is_cell_visible(x, y - 1) or game.is_cell_visible(x, y):
                    x0 = MARGIN + x * CELL_SIZE
                    y0 = MARGIN + y * CELL_SIZE
                    pygame.draw.line(screen, COLOR_WALL, (x0, y0), (x0 + CELL_SIZE, y0), WALL_THICK)

        for y in range(maze.height):
            for x in range(maze.width + 1):
                if not maze.vertical[y, x]:
                    continue
                if game.is_cell_visible(x - 1, y) or game.is_cell_visible(x, y):
                    x0 = MARGIN + x * CELL_SIZE
                    y0 = MARGIN + y * CELL_SIZE
                    pygame.draw.line(screen, COLOR_WALL, (x0, y0), (x0, y0 + CELL_SIZE), WALL_THICK)

    def draw_fog(self, screen, game):
        """Dark fog over unexplored cells, dimmed fog over remembered ones"""
        maze = game.maze
        fog = pygame.Surface((CELL_SIZE, CELL_SIZE))
        fog.fill(COLOR_FOG)
        dim = pygame.Surface((CELL_SIZE, CELL_SIZE), pygame.SRCALPHA)
        dim.fill((*COLOR_FOG[:3], 170))

        for y in range(maze.height):
            for x in range(maze.width):
                if game.is_cell_visible(x, y):
                    continue
                surface = dim if game.is_cell_explored(x, y) else fog
                screen.blit(surface, self._cell_rect(x, y).topleft)

    def draw_solution(self, screen, path):
        """Solution path as a polyline through cell centers (nothing if empty)"""
        if len(path) < 2:
            return
        points = [self._cell_rect(x, y).center for x, y in path]
        pygame.draw.lines(screen, COLOR_HINT_PATH, False, points, 3)

    def draw_panel(self, screen, game, message=None):
        """HUD with statistics and controls"""
        screen_w, screen_h = screen.get_size()
        panel_y = screen_h - PANEL_H
        pygame.draw.rect(screen, COLOR_PANEL_BG, (0, panel_y, screen_w, PANEL_H))

        stats = game.get_stats()
        state = game.get_game_state()
        visibility = game.visibility

        info_lines = [
            (f"Moves: {stats['moves']}  Time: {format_time(state['elapsed_seconds'])}  "
             f"Explored: {stats['explored']}/{stats['total']} ({stats['exploration_rate']}%)  "
             f"Efficiency: {stats['efficiency']}%", COLOR_TEXT),
            (f"View: {visibility.mode_name} (range {visibility.view_range})", COLOR_TEXT),
            ("Arrows/WASD: Move | P: Pause | R: Restart | V: View mode | [ ]: Range | "
             "H: Solution | F5/F9: Save/Load", COLOR_TEXT_DIM),
        ]
        if message:
            info_lines.append((message, COLOR_TEXT_HIGHLIGHT))

        for i, (line, color) in enumerate(info_lines):
            text = self.font.render(line, True, color)
            screen.blit(text, (10, panel_y + 8 + i * 20))

    def draw_overlay(self, screen, text):
        """Dim the maze and show a centered banner"""
        screen_w, screen_h = screen.get_size()
        overlay = pygame.Surface((screen_w, screen_h - PANEL_H), pygame.SRCALPHA)
        overlay.fill(COLOR_MENU_OVERLAY)
        screen.blit(overlay, (0, 0))

        banner = self.big_font.render(text, True, COLOR_TEXT_HIGHLIGHT)
        screen.blit(banner, (screen_w // 2 - banner.get_width() // 2,
                             (screen_h - PANEL_H) // 2 - banner.get_height() // 2))

    def render(self, screen, game, animator, message=None):
        """
        Draw a full frame

        Args:
            screen: Pygame screen
            game: GameLoop
            animator: PlayerAnimator holding the drawn player position
            message: Optional status line
        """
        maze = game.maze
        screen.fill(COLOR_BG)
        maze_rect = pygame.Rect(MARGIN, MARGIN, maze.width * CELL_SIZE, maze.height * CELL_SIZE)
        pygame.draw.rect(screen, COLOR_MAZE_BG, maze_rect)

        for y in range(maze.height):
            for x in range(maze.width):
                if game.is_cell_visited(x, y):
                    self.draw_cell(screen, x, y, COLOR_VISITED_CELL, pad=2)

        self.draw_cell(screen, maze.start[0], maze.start[1], COLOR_START)
        self.draw_cell(screen, maze.end[0], maze.end[1], COLOR_GOAL)

        if game.config.show_solution:
            self.draw_solution(screen, game.get_solution_path())

        player_rect = pygame.Rect(
            MARGIN + animator.x * CELL_SIZE + 8,
            MARGIN + animator.y * CELL_SIZE + 8,
            CELL_SIZE - 16,
            CELL_SIZE - 16,
        )
        pygame.draw.rect(screen, COLOR_PLAYER, player_rect, border_radius=8)

        self.draw_fog(screen, game)
        self.draw_walls(screen, game)
        self.draw_panel(screen, game, message)

        state = game.state
        if state.is_victory:
            self.draw_overlay(screen, "YOU WIN!")
        elif state.is_game_over:
            self.draw_overlay(screen, "GAME OVER")
        elif state.is_paused:
            self.draw_overlay(screen, "PAUSED")
