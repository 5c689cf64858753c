"""Immutable views of the world for renderers and tests.

Nothing here aliases live state: grids are tuples of tuples and every entity
is copied into a frozen dataclass.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple

from ..dungeon.tiles import Tile
from .world import World

Point = Tuple[int, int]


@dataclass(frozen=True)
class WeaponView:
    name: str
    attack_bonus: int
    ability: str
    power: int
    cooldown: int
    max_cooldown: int


@dataclass(frozen=True)
class PlayerView:
    x: int
    y: int
    facing: str
    health: int
    max_health: int
    attack: int
    defense: int
    level: int
    xp: int
    gold: int
    weapon: Optional[WeaponView]


@dataclass(frozen=True)
class EnemyView:
    x: int
    y: int
    kind: str
    name: str
    health: int
    max_health: int
    stun_turns: int
    bleed_turns: int


@dataclass(frozen=True)
class ItemView:
    x: int
    y: int
    kind: str


@dataclass(frozen=True)
class TrapView:
    x: int
    y: int
    kind: str
    triggered: bool


@dataclass(frozen=True)
class SlotView:
    icon: str
    name: str
    kind: str
    quantity: int


@dataclass(frozen=True)
class WorldSnapshot:
    floor_number: int
    turn: int
    tiles: Tuple[Tuple[Tile, ...], ...]
    visible: Tuple[Tuple[bool, ...], ...]
    explored: Tuple[Tuple[bool, ...], ...]
    player: PlayerView
    enemies: Tuple[EnemyView, ...]
    items: Tuple[ItemView, ...]
    traps: Tuple[TrapView, ...]
    inventory: Tuple[SlotView, ...]
    messages: Tuple[str, ...]
    stairs: Point
    elevator: Optional[Point]
    teleporters: Tuple[Point, ...]
    locked_door: Optional[Point]
    has_key: bool
    game_over: bool
    victory: bool

    @property
    def width(self) -> int:
        return len(self.tiles[0]) if self.tiles else 0

    @property
    def height(self) -> int:
        return len(self.tiles)

    def tile(self, x: int, y: int) -> Tile:
        return self.tiles[y][x]

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly summary (grids are left out)."""
        data = asdict(self)
        for key in ("tiles", "visible", "explored"):
            data.pop(key)
        return data


def take_snapshot(world: World) -> WorldSnapshot:
    p = world.player
    weapon = None
    if p.weapon is not None:
        w = p.weapon
        weapon = WeaponView(w.name, w.attack_bonus, w.ability.value, w.power, w.cooldown, w.max_cooldown)
    floor = world.floor
    return WorldSnapshot(
        floor_number=world.floor_number,
        turn=world.turn,
        tiles=floor.grid.rows(),
        visible=tuple(tuple(row) for row in world.visibility.visible),
        explored=tuple(tuple(row) for row in world.visibility.explored),
        player=PlayerView(
            x=p.x,
            y=p.y,
            facing=p.facing.name,
            health=p.health,
            max_health=p.max_health,
            attack=p.attack,
            defense=p.defense,
            level=p.level,
            xp=p.xp,
            gold=p.gold,
            weapon=weapon,
        ),
        enemies=tuple(
            EnemyView(e.x, e.y, e.kind.value, e.name, e.health, e.max_health, e.stun_turns, e.bleed_turns)
            for e in floor.enemies
        ),
        items=tuple(ItemView(i.x, i.y, i.kind.value) for i in floor.items),
        traps=tuple(TrapView(t.x, t.y, t.kind.value, t.triggered) for t in floor.traps),
        inventory=tuple(SlotView(s.icon, s.name, s.kind.value, s.quantity) for s in world.inventory.slots),
        messages=world.messages.entries(),
        stairs=floor.stairs,
        elevator=floor.elevator,
        teleporters=tuple(floor.teleporters),
        locked_door=floor.locked_door,
        has_key=world.has_key,
        game_over=world.game_over,
        victory=world.victory,
    )


__all__ = [
    "WeaponView",
    "PlayerView",
    "EnemyView",
    "ItemView",
    "TrapView",
    "SlotView",
    "WorldSnapshot",
    "take_snapshot",
]
