from __future__ import annotations

from typing import Optional

import numpy as np
import pygame

from verifiable_tetris.game import GameSnapshot, TetrominoType

from .palette import color_for_value

BACKGROUND = (10, 10, 14)
GRID_BACKGROUND = (30, 30, 36)
TEXT_COLOR = (230, 230, 230)


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20, panel_cells: int = 6) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_cells = panel_cells
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, board_width: int, board_height: int) -> tuple[int, int]:
        width = self.margin * 3 + (board_width + self.panel_cells) * self.cell_size
        height = self.margin * 2 + board_height * self.cell_size
        return width, height

    def _font_or_default(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 26)
        return self._font

    def grid_surface(self, state: np.ndarray) -> pygame.Surface:
        h, w = state.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill(GRID_BACKGROUND)
        for y in range(h):
            for x in range(w):
                rect = pygame.Rect(
                    x * self.cell_size,
                    y * self.cell_size,
                    self.cell_size - 1,
                    self.cell_size - 1,
                )
                pygame.draw.rect(surf, color_for_value(int(state[y, x])), rect)
        return surf

    def _draw_panel(self, screen: pygame.Surface, snapshot: GameSnapshot, left: int, status: str) -> None:
        font = self._font_or_default()
        top = self.margin
        lines = [
            f"Score: {snapshot.score}",
            f"Level: {snapshot.level}",
            f"Lines: {snapshot.lines}",
            "Next:",
        ]
        for i, text in enumerate(lines):
            screen.blit(font.render(text, True, TEXT_COLOR), (left, top + i * 28))

        preview_top = top + len(lines) * 28 + 6
        if snapshot.next_piece is not None:
            for dy, row in enumerate(snapshot.next_piece.shape):
                for dx, cell in enumerate(row):
                    if not cell:
                        continue
                    rect = pygame.Rect(
                        left + dx * self.cell_size,
                        preview_top + dy * self.cell_size,
                        self.cell_size - 1,
                        self.cell_size - 1,
                    )
                    pygame.draw.rect(screen, color_for_value(int(TetrominoType[snapshot.next_piece.kind])), rect)

        if status:
            screen.blit(font.render(status, True, TEXT_COLOR), (left, preview_top + 3 * self.cell_size))

    def draw(self, screen: pygame.Surface, state: np.ndarray, snapshot: GameSnapshot, status: str = "") -> None:
        grid_surf = self.grid_surface(state)
        screen.fill(BACKGROUND)
        screen.blit(grid_surf, (self.margin, self.margin))
        self._draw_panel(screen, snapshot, self.margin * 2 + grid_surf.get_width(), status)
        pygame.display.flip()
