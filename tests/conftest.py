import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from delve.dungeon.floor import Floor  # noqa: E402
from delve.dungeon.tiles import Tile, TileGrid  # noqa: E402
from delve.game.engine import TurnEngine  # noqa: E402


def floor_from_ascii(rows, number=1, start=None):
    """Hand-built floor. Stairs default to the first '>' glyph, start to (1, 1)."""
    grid = TileGrid.from_ascii(rows)
    stairs = grid.positions_of(Tile.STAIRS)
    return Floor(
        number=number,
        grid=grid,
        rooms=[],
        start=start or (1, 1),
        stairs=stairs[0] if stairs else (0, 0),
        teleporters=grid.positions_of(Tile.TELEPORTER),
    )


@pytest.fixture
def engine():
    return TurnEngine(seed=1234)


@pytest.fixture
def staged(engine):
    """Install a hand-built floor into a fresh engine: staged(rows, start=(x, y))."""

    def _stage(rows, start=(1, 1), number=1):
        floor = floor_from_ascii(rows, number=number, start=start)
        engine.install_floor(floor, start)
        return engine

    return _stage
