from .tiles import Tile, TileGrid
from .rooms import Room
from .floor import Floor
from .generator import LevelGenerator

__all__ = ["Tile", "TileGrid", "Room", "Floor", "LevelGenerator"]
