from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from .entities import Direction


class Action(str, Enum):
    TURN_LEFT = "turn_left"
    TURN_RIGHT = "turn_right"
    MOVE_FORWARD = "move_forward"
    MOVE_BACKWARD = "move_backward"
    MOVE_NORTH = "move_north"
    MOVE_SOUTH = "move_south"
    MOVE_EAST = "move_east"
    MOVE_WEST = "move_west"
    WAIT = "wait"
    INTERACT = "interact"
    USE_ELEVATOR = "use_elevator"
    USE_TELEPORTER = "use_teleporter"
    USE_ITEM = "use_item"
    USE_SPECIAL = "use_special"
    RESTART = "restart"


# Absolute-direction moves; these also turn the player to face the move.
ABSOLUTE_MOVES: Dict[Action, Direction] = {
    Action.MOVE_NORTH: Direction.NORTH,
    Action.MOVE_SOUTH: Direction.SOUTH,
    Action.MOVE_EAST: Direction.EAST,
    Action.MOVE_WEST: Direction.WEST,
}

_ALIASES: Dict[str, Action] = {
    "n": Action.MOVE_NORTH,
    "s": Action.MOVE_SOUTH,
    "e": Action.MOVE_EAST,
    "w": Action.MOVE_WEST,
    "f": Action.MOVE_FORWARD,
    "b": Action.MOVE_BACKWARD,
    "l": Action.TURN_LEFT,
    "r": Action.TURN_RIGHT,
    "rest": Action.WAIT,
    ".": Action.WAIT,
    "i": Action.INTERACT,
    "elevator": Action.USE_ELEVATOR,
    "tele": Action.USE_TELEPORTER,
    "special": Action.USE_SPECIAL,
}


@dataclass(frozen=True)
class Command:
    """One discrete player input. ``slot`` is only meaningful for USE_ITEM (1-based)."""

    action: Action
    slot: int = 0

    @classmethod
    def use_item(cls, slot: int) -> "Command":
        return cls(Action.USE_ITEM, slot)

    @classmethod
    def parse(cls, token: str) -> Optional["Command"]:
        """Parse a short textual command such as ``n``, ``wait``, ``use_item:2`` or ``2``.

        Returns None for anything unrecognised.
        """
        token = token.strip().lower()
        if not token:
            return None
        if token.isdecimal():
            return cls.use_item(int(token))
        name, _, arg = token.partition(":")
        if name == Action.USE_ITEM.value or name == "use":
            return cls.use_item(int(arg)) if arg.isdecimal() else None
        if name in _ALIASES:
            return cls(_ALIASES[name])
        try:
            return cls(Action(name))
        except ValueError:
            return None


__all__ = ["Action", "Command", "ABSOLUTE_MOVES"]
