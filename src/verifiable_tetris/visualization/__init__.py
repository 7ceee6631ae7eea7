"""Pygame front-end for Verifiable Tetris.

Only `palette` is imported eagerly; `renderer` and `human_play` need pygame.
"""

from .palette import PALETTE, color_for_value, hex_to_rgb

__all__ = ["PALETTE", "color_for_value", "hex_to_rgb"]
