"""
Save/Load System - Saves and loads game state to/from JSON
"""

import json
import logging
from datetime import datetime
from pathlib import Path

from utils.constants import SAVE_DIR, SAVE_VERSION, AUTOSAVE_SLOT
from utils.errors import SaveDataError

logger = logging.getLogger(__name__)


class SaveManager:
    """
    Manages game save and load operations

    Files hold GameLoop.export_state() plus a 'metadata' block.
    """
    def __init__(self, save_dir=SAVE_DIR):
        """
        Args:
            save_dir: Directory to store save files
        """
        self.save_dir = Path(save_dir)
        self.save_dir.mkdir(parents=True, exist_ok=True)
        self.current_slot = None

    def _slot_path(self, slot_name):
        return self.save_dir / f"{slot_name}.json"

    def save_game(self, game_loop, slot_name=AUTOSAVE_SLOT):
        """
        Save current game state

        Args:
            game_loop: GameLoop to export
            slot_name: Save slot name

        Returns:
            bool: True if save successful
        """
        save_data = game_loop.export_state()

        # Add metadata
        save_data['metadata'] = {
            'slot_name': slot_name,
            'timestamp': datetime.now().isoformat(),
            'version': SAVE_VERSION,
        }

        save_path = self._slot_path(slot_name)
        try:
            with open(save_path, 'w', encoding='utf-8') as f:
                json.dump(save_data, f, indent=2)
        except OSError as e:
            logger.error("Save failed for %s: %s", save_path, e)
            return False

        self.current_slot = slot_name
        logger.info("Game saved to %s", save_path)
        return True

    def load_game(self, slot_name=AUTOSAVE_SLOT):
        """
        Load game state from save file

        Args:
            slot_name: Save slot name

        Returns:
            dict: Save data or None if load failed
        """
        save_path = self._slot_path(slot_name)

        if not save_path.exists():
            logger.warning("Save file not found: %s", save_path)
            return None

        try:
            with open(save_path, 'r', encoding='utf-8') as f:
                save_data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Load failed for %s: %s", save_path, e)
            return None

        if not isinstance(save_data, dict):
            logger.error("Load failed for %s: top level is not an object", save_path)
            return None

        return save_data

    def restore_game(self, game_loop, save_data):
        """
        Restore game state from save data

        Args:
            game_loop: GameLoop to import into
            save_data: Loaded save data

        Returns:
            bool: True if restored; on False the game loop is unchanged
        """
        if save_data is None:
            return False

        try:
            game_loop.import_state(save_data)
        except SaveDataError as e:
            logger.error("Restore failed: %s", e)
            return False
        return True

    def load_into(self, game_loop, slot_name=AUTOSAVE_SLOT):
        """Load a slot and import it into game_loop"""
        restored = self.restore_game(game_loop, self.load_game(slot_name))
        if restored:
            self.current_slot = slot_name
        return restored

    def get_save_files(self):
        """
        Get list of available save files

        Returns:
            list: List of (slot_name, metadata) tuples
        """
        saves = []

        for save_file in sorted(self.save_dir.glob("*.json")):
            try:
                with open(save_file, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning("Skipping unreadable save %s: %s", save_file, e)
                continue

            metadata = data.get('metadata', {}) if isinstance(data, dict) else {}
            saves.append((save_file.stem, metadata))

        return saves

    def delete_save(self, slot_name):
        """
        Delete a save file

        Returns:
            bool: True if deleted successfully
        """
        save_path = self._slot_path(slot_name)
        if not save_path.exists():
            return False
        try:
            save_path.unlink()
        except OSError as e:
            logger.error("Could not delete %s: %s", save_path, e)
            return False
        return True

    def auto_save(self, game_loop):
        """Auto-save the game"""
        return self.save_game(game_loop, slot_name=AUTOSAVE_SLOT)
