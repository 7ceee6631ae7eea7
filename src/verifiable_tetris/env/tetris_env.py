from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from verifiable_tetris.game import GameConfig, MoveType, VerifiableTetrisGame
from verifiable_tetris.ledger import MoveLedger
from verifiable_tetris.visualization.palette import color_for_value

# Action index -> player move; None is a no-op that only lets gravity run
ACTIONS: Tuple[Optional[MoveType], ...] = (
    None,
    MoveType.MOVE_LEFT,
    MoveType.MOVE_RIGHT,
    MoveType.ROTATE,
    MoveType.SOFT_DROP,
    MoveType.HARD_DROP,
)


class VirtualClock:
    """Millisecond clock advanced by the environment, one frame per step."""

    def __init__(self) -> None:
        self.now = 0

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += int(ms)


class VerifiableTetrisEnv(gym.Env):
    """Each step applies one player move and then one gravity tick of `frame_ms`.

    Every accepted move is appended to the game's ledger, so an episode can
    be exported and audited afterwards like a human game.
    """

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 10}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        frame_ms: int = 100,
        max_episode_steps: int = 10000,
    ) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self.clock = VirtualClock()
        self.ledger = MoveLedger()
        self.game = VerifiableTetrisGame(ledger=self.ledger, config=self.config, clock=self.clock)
        self.render_mode = render_mode
        self.frame_ms = int(frame_ms)
        self.max_episode_steps = int(max_episode_steps)

        h, w = self.config.height, self.config.width
        # Grid values: 0 empty, 1..7 locked piece colour, -1..-7 falling piece
        self.observation_space = spaces.Box(low=-7, high=7, shape=(h, w), dtype=np.int8)
        self.action_space = spaces.Discrete(len(ACTIONS))

        self._steps = 0

    def _get_obs(self) -> np.ndarray:
        return self.game.get_state().astype(np.int8)

    def _get_info(self) -> Dict[str, Any]:
        info: Dict[str, Any] = dict(self.game.get_game_stats())
        info["last_hash"] = self.ledger.last_hash
        return info

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.game.rng.seed(seed)
        self.game.restart()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        move = ACTIONS[int(action)]
        score_before = self.game.score

        accepted = False
        if move is not None:
            accepted = self.game.attempt_move(move).accepted
        self.clock.advance(self.frame_ms)
        self.game.attempt_move(MoveType.AUTO_DROP, self.frame_ms)

        self._steps += 1
        terminated = bool(self.game.game_over)
        truncated = self._steps >= self.max_episode_steps
        reward = float(self.game.score - score_before)

        info = self._get_info()
        info["accepted"] = accepted
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            grid = self.game.get_state()
            cell = 12
            h, w = grid.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color_for_value(int(grid[y, x]))
            return img
        # human rendering delegated to external UI; noop
        return None

    def close(self) -> None:
        pass
