"""Shared pytest fixtures for the game and ledger tests."""

import os
import sys

import pytest

# Ensure src and tests are on path for imports
ROOT = os.path.dirname(os.path.dirname(__file__))
SRC = os.path.join(ROOT, "src")
TESTS = os.path.dirname(__file__)
for path in (SRC, TESTS):
    if path not in sys.path:
        sys.path.insert(0, path)

from helpers import FakeClock  # noqa: E402
from verifiable_tetris.game import GameConfig, VerifiableTetrisGame  # noqa: E402
from verifiable_tetris.ledger import MoveLedger  # noqa: E402


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ledger() -> MoveLedger:
    return MoveLedger()


@pytest.fixture
def game(ledger, clock) -> VerifiableTetrisGame:
    return VerifiableTetrisGame(ledger=ledger, config=GameConfig(random_seed=7), clock=clock)
