from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .. import events
from ..config import GameConfig
from ..dungeon.floor import Floor
from ..dungeon.tiles import Tile
from ..events import EventBus
from ..fov.visibility import VisibilityCalculator
from ..rng import RandomSource
from . import messages as text
from .combat import KillReward
from .entities import Inventory, Player
from .messages import MessageLog

logger = logging.getLogger(__name__)


@dataclass
class World:
    """Mutable game state owned by the TurnEngine.

    The player, inventory and message log live for the whole run; ``floor``
    and the visibility grids are replaced on every floor transition.
    """

    config: GameConfig
    rng: RandomSource
    player: Player
    floor: Floor
    inventory: Inventory
    visibility: VisibilityCalculator
    messages: MessageLog
    bus: Optional[EventBus] = None
    floor_number: int = 1
    has_key: bool = False
    game_over: bool = False
    victory: bool = False
    turn: int = 0
    # Messages emitted since the engine last drained them, oldest first.
    pending: List[str] = field(default_factory=list)

    @property
    def finished(self) -> bool:
        return self.game_over or self.victory

    def say(self, message: str) -> None:
        self.messages.add(message)
        self.pending.append(message)
        self.publish(events.MESSAGE, {"text": message})

    def publish(self, name: str, payload: Optional[dict] = None) -> None:
        if self.bus is not None:
            self.bus.publish(name, payload)

    def drain(self) -> List[str]:
        out = self.pending
        self.pending = []
        return out

    def tile_under_player(self) -> Tile:
        return self.floor.grid.get(self.player.x, self.player.y)

    def in_safe_room(self) -> bool:
        return self.tile_under_player() == Tile.SAFE_ROOM

    def refresh_visibility(self) -> None:
        self.visibility.recompute(self.player.pos, self.floor.grid)

    def record_kill(self, reward: KillReward) -> None:
        self.say(text.pick(self.rng, text.ENEMY_DEATH, name=reward.enemy, xp=reward.xp, gold=reward.gold))
        self.publish(events.ENEMY_KILLED, {"enemy": reward.enemy, "xp": reward.xp, "gold": reward.gold})
        for level_up in reward.level_ups:
            self.say(text.pick(self.rng, text.LEVEL_UP, level=level_up.to_level))
            self.publish(events.LEVEL_UP, {"level": level_up.to_level})

    def check_game_over(self) -> bool:
        if self.game_over or self.player.alive:
            return self.game_over
        self.game_over = True
        self.say(text.GAME_OVER)
        logger.info(
            "Game over on floor %d (level %d, gold %d)",
            self.floor_number,
            self.player.level,
            self.player.gold,
        )
        self.publish(
            events.GAME_OVER,
            {"floor": self.floor_number, "level": self.player.level, "gold": self.player.gold},
        )
        return True


__all__ = ["World"]
