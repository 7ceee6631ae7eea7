from __future__ import annotations

import logging
import os
import time
from typing import Dict

import pygame

from verifiable_tetris.game import MoveType, VerifiableTetrisGame
from verifiable_tetris.ledger import MoveLedger
from .renderer import Renderer

logger = logging.getLogger(__name__)

KEY_TO_MOVE: Dict[int, MoveType] = {
    pygame.K_LEFT: MoveType.MOVE_LEFT,
    pygame.K_RIGHT: MoveType.MOVE_RIGHT,
    pygame.K_UP: MoveType.ROTATE,
    pygame.K_DOWN: MoveType.SOFT_DROP,
    pygame.K_SPACE: MoveType.HARD_DROP,
}


def export_ledger(ledger: MoveLedger, directory: str = ".") -> str:
    path = os.path.join(directory, f"tetris-ledger-{int(time.time() * 1000)}.json")
    with open(path, "w", encoding="utf-8") as f:
        f.write(ledger.export_snapshot())
    logger.info(f"Exported {len(ledger)} moves to {path}")
    return path


def describe_verification(ledger: MoveLedger) -> str:
    result = ledger.verify_all()
    if result.valid:
        return f"Verified {len(ledger)} moves"
    return f"Invalid at move {result.invalid_index} ({result.reason})"


def run() -> None:  # pragma: no cover
    logging.basicConfig(level=logging.INFO)
    pygame.init()
    try:
        clock = pygame.time.Clock()
        ledger = MoveLedger()
        game = VerifiableTetrisGame(ledger=ledger)
        renderer = Renderer(cell_size=28)

        screen = pygame.display.set_mode(renderer.window_size(game.grid.width, game.grid.height))
        pygame.display.set_caption("Verifiable Tetris")
        status = ""

        running = True
        while running:
            # Frame time drives gravity; the engine never reads the wall clock for it
            elapsed_ms = clock.tick(60)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_r:
                        game.restart()
                        status = ""
                    elif event.key == pygame.K_v:
                        status = describe_verification(ledger)
                    elif event.key == pygame.K_e:
                        export_ledger(ledger)
                        status = f"Exported {len(ledger)} moves"
                    else:
                        move = KEY_TO_MOVE.get(event.key)
                        if move is not None:
                            game.attempt_move(move)

            if not game.game_over:
                game.attempt_move(MoveType.AUTO_DROP, elapsed_ms)
            elif not status:
                status = "Game over - R restart, V verify, E export"

            renderer.draw(screen, game.get_state(), game.get_snapshot(), status)
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
