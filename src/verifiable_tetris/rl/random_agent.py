from __future__ import annotations

import logging
from typing import Optional

import gymnasium as gym

import verifiable_tetris.env  # noqa: F401
from verifiable_tetris.ledger import VerificationResult, audit_transitions


def run_random(steps: int = 200, seed: Optional[int] = None) -> VerificationResult:
    """Play random actions, then audit the ledger of the final episode."""
    env = gym.make("VerifiableTetris-v0")
    obs, info = env.reset(seed=seed)
    env.action_space.seed(seed)
    total_reward = 0.0
    for _ in range(steps):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            break

    ledger = env.unwrapped.ledger
    result = ledger.verify_all()
    if result.valid:
        result = audit_transitions(ledger.records)
    env.close()
    print(f"Random agent total reward: {total_reward:.2f}, moves recorded: {len(ledger)}, ledger valid: {result.valid}")
    return result


if __name__ == "__main__":  # pragma: no cover
    logging.basicConfig(level=logging.INFO)
    run_random()
