from __future__ import annotations

from typing import Dict, Tuple

from verifiable_tetris.game.pieces import COLORS, TetrominoType

RGB = Tuple[int, int, int]

EMPTY_COLOR: RGB = (20, 20, 26)
UNKNOWN_COLOR: RGB = (200, 200, 200)


def hex_to_rgb(value: str) -> RGB:
    value = value.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


PALETTE: Dict[int, RGB] = {0: EMPTY_COLOR}
PALETTE.update({int(kind): hex_to_rgb(COLORS[kind]) for kind in TetrominoType})


def color_for_value(v: int) -> RGB:
    # Negative values mark the falling piece; same colour as when locked
    return PALETTE.get(abs(v), UNKNOWN_COLOR)
