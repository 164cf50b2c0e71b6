"""
Maze Module - wall grid, DFS generation and shortest paths
"""

from .maze_core import MazeGrid, bfs_shortest_path, reachable_cells
from .generator import generate, generate_seeded, generate_fixed_level

__all__ = ['MazeGrid', 'bfs_shortest_path', 'reachable_cells',
           'generate', 'generate_seeded', 'generate_fixed_level']
