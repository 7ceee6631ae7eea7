"""Gymnasium environment for Verifiable Tetris."""

from __future__ import annotations

from gymnasium.envs.registration import register

register(
    id="VerifiableTetris-v0",
    entry_point="verifiable_tetris.env.tetris_env:VerifiableTetrisEnv",
)

__all__ = ["VerifiableTetris-v0"]
