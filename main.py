"""
Hidden Maze - explore a fogged maze one step at a time
pygame front-end around the GameLoop core
"""

import argparse
import logging
import sys

import pygame

from game.game_loop import GameLoop
from game.events import GameEvent
from game.renderer import MazeRenderer, PlayerAnimator, screen_size_for
from game.save_manager import SaveManager
from game.visibility import ViewMode
from utils.config import GameConfig
from utils.constants import (
    FPS, PLAYER_MOVE_COOLDOWN_MS, DEFAULT_MAZE_SIZE, DEFAULT_VIEW_MODE,
    DEFAULT_VIEW_RANGE, MIN_MAZE_SIZE, MAX_MAZE_SIZE, SAVE_DIR, AUTOSAVE_SLOT,
    VIEW_MODE_PERMANENT, VIEW_MODE_INSTANT,
)
from utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

GAME_TITLE = "Hidden Maze"

MOVE_KEYS = (
    ((pygame.K_UP, pygame.K_w), (0, -1)),
    ((pygame.K_RIGHT, pygame.K_d), (1, 0)),
    ((pygame.K_DOWN, pygame.K_s), (0, 1)),
    ((pygame.K_LEFT, pygame.K_a), (-1, 0)),
)


class MazeGame:
    """
    Main game class
    """
    def __init__(self, game, save_manager):
        pygame.init()
        pygame.display.set_caption(GAME_TITLE)

        self.game = game
        self.save_manager = save_manager
        self.screen = pygame.display.set_mode(screen_size_for(game.maze))
        self.clock = pygame.time.Clock()
        self.renderer = MazeRenderer()
        self.animator = PlayerAnimator(*game.get_player_position())

        self.running = True
        self.last_move_time = 0
        self.message = None
        self.message_timer = 0.0

        self._subscribe()

    def _subscribe(self):
        events = self.game.events
        events.subscribe(GameEvent.GAME_START, self._on_game_start)
        events.subscribe(GameEvent.VICTORY, self._on_victory)
        events.subscribe(GameEvent.GAME_OVER, self._on_game_over)

    def _on_game_start(self, payload):
        self.screen = pygame.display.set_mode(screen_size_for(self.game.maze))
        self.animator.snap(*payload['start'])

    def _on_victory(self, payload):
        self._show_message(
            f"Solved in {payload['moves']} moves, {payload['elapsed_seconds']}s, "
            f"{payload['exploration_rate']}% explored. R: play again",
            duration=None,
        )

    def _on_game_over(self, payload):
        self._show_message(f"Game over after {payload['moves']} moves. R: restart", duration=None)

    def _show_message(self, text, duration=2.0):
        self.message = text
        self.message_timer = duration

    # ========== INPUT ==========

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                self._handle_keydown(event.key)

    def _handle_keydown(self, key):
        game = self.game
        if key == pygame.K_ESCAPE:
            self.running = False
        elif key == pygame.K_p:
            game.toggle_pause()
        elif key == pygame.K_r:
            game.restart()
            self.message = None
        elif key == pygame.K_v:
            mode = VIEW_MODE_INSTANT if game.visibility.mode == ViewMode.PERMANENT else VIEW_MODE_PERMANENT
            game.set_view_mode(mode)
            self._show_message(game.visibility.mode_description)
        elif key == pygame.K_LEFTBRACKET:
            game.set_view_range(game.visibility.view_range - 1)
        elif key == pygame.K_RIGHTBRACKET:
            game.set_view_range(game.visibility.view_range + 1)
        elif key == pygame.K_h:
            if game.config.show_solution:
                game.hide_solution()
            else:
                game.show_solution()
        elif key == pygame.K_SPACE:
            hint = game.get_hint()
            self._show_message(f"Try moving {hint}" if hint else "No hint available")
        elif key == pygame.K_F5:
            self._quick_save()
        elif key == pygame.K_F9:
            self._quick_load()

    def _handle_player_movement(self):
        """Held keys move the player once per cooldown"""
        now = pygame.time.get_ticks()
        if now - self.last_move_time < PLAYER_MOVE_COOLDOWN_MS:
            return

        keys = pygame.key.get_pressed()
        for key_codes, (dx, dy) in MOVE_KEYS:
            if any(keys[k] for k in key_codes):
                if self.game.move_player(dx, dy):
                    self.last_move_time = now
                break

    def _quick_save(self):
        if self.save_manager.save_game(self.game, AUTOSAVE_SLOT):
            self._show_message("Game saved!")
        else:
            self._show_message("Save failed!")

    def _quick_load(self):
        if self.save_manager.load_into(self.game, AUTOSAVE_SLOT):
            self.screen = pygame.display.set_mode(screen_size_for(self.game.maze))
            self.animator.snap(*self.game.get_player_position())
            self._show_message("Game loaded!")
        else:
            self._show_message("Could not load the saved game")

    # ========== LOOP ==========

    def update(self, dt):
        if self.message_timer is not None and self.message:
            self.message_timer -= dt
            if self.message_timer <= 0:
                self.message = None

        self._handle_player_movement()
        self.animator.update(dt, *self.game.get_player_position())

    def run(self):
        self.game.start()

        while self.running:
            dt = self.clock.tick(FPS) / 1000.0
            self.handle_events()
            self.update(dt)
            self.renderer.render(self.screen, self.game, self.animator, self.message)
            pygame.display.flip()

        pygame.quit()
        logger.info("Game closed.")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=GAME_TITLE)
    parser.add_argument("--size", type=int, default=DEFAULT_MAZE_SIZE,
                        help=f"maze side length ({MIN_MAZE_SIZE}-{MAX_MAZE_SIZE})")
    parser.add_argument("--view-mode", choices=[m.value for m in ViewMode], default=DEFAULT_VIEW_MODE)
    parser.add_argument("--view-range", type=int, default=DEFAULT_VIEW_RANGE)
    parser.add_argument("--level", type=int, default=None, help="play a reproducible fixed level")
    parser.add_argument("--seed", type=int, default=None, help="seed for random mazes")
    parser.add_argument("--save-dir", default=SAVE_DIR)
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--log-file", default=None)
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(getattr(logging, args.log_level.upper(), logging.INFO), args.log_file)

    config = GameConfig(maze_size=args.size, view_mode=args.view_mode, view_range=args.view_range)
    problems = config.validate()
    if problems:
        for problem in problems:
            logger.error(problem)
        return 2

    game = GameLoop(config, seed=args.seed, level=args.level)
    MazeGame(game, SaveManager(args.save_dir)).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
