from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

Point = Tuple[int, int]


class Direction(Enum):
    NORTH = (0, -1)
    EAST = (1, 0)
    SOUTH = (0, 1)
    WEST = (-1, 0)

    @property
    def delta(self) -> Point:
        return self.value

    @property
    def right(self) -> "Direction":
        return _CLOCKWISE[(_CLOCKWISE.index(self) + 1) % 4]

    @property
    def left(self) -> "Direction":
        return _CLOCKWISE[(_CLOCKWISE.index(self) - 1) % 4]

    @property
    def opposite(self) -> "Direction":
        return _CLOCKWISE[(_CLOCKWISE.index(self) + 2) % 4]


_CLOCKWISE = (Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST)


class EnemyKind(str, Enum):
    # Tier 1
    LOST_TEDDY = "lost_teddy"
    CRIB_SPIDER = "crib_spider"
    NIGHT_LIGHT = "night_light"
    # Tier 2
    SWING_CHILD = "swing_child"
    SANDBOX_THING = "sandbox_thing"
    CAROUSEL_HORSE = "carousel_horse"
    # Tier 3
    SUBSTITUTE_TEACHER = "substitute_teacher"
    HALL_MONITOR = "hall_monitor"
    LUNCH_LADY = "lunch_lady"
    # Tier 4
    WRONG_MOM = "wrong_mom"
    ATTIC_DWELLER = "attic_dweller"
    BASEMENT_FRIEND = "basement_friend"
    # Tier 5
    MIRROR_YOU = "mirror_you"
    THE_HOST = "the_host"
    YOUR_BEST_FRIEND = "your_best_friend"


class ItemKind(str, Enum):
    GOLD = "gold"
    HEALTH_POTION = "health_potion"
    WEAPON = "weapon"
    ARMOR = "armor"
    KEY = "key"


# Item kinds that can appear as random floor loot. Keys are placed only
# alongside a locked door.
LOOT_KINDS = (ItemKind.GOLD, ItemKind.HEALTH_POTION, ItemKind.WEAPON, ItemKind.ARMOR)


class TrapKind(str, Enum):
    SPIKE = "spike"
    POISON = "poison"
    FIRE = "fire"
    HUG = "hug"
    LULLABY = "lullaby"


class Ability(str, Enum):
    NONE = "none"
    BLEED = "bleed"
    STUN = "stun"
    LIFESTEAL = "lifesteal"
    AREA_DAMAGE = "area_damage"
    KNOCKBACK = "knockback"
    DOUBLE_DAMAGE = "double_damage"


@dataclass
class Weapon:
    """An equippable weapon with a flat attack bonus and a special ability.

    ``cooldown`` counts enemy-phases until the special can be used again and
    always stays within [0, max_cooldown].
    """

    name: str
    attack_bonus: int
    ability: Ability = Ability.NONE
    power: int = 0
    max_cooldown: int = 0
    description: str = ""
    cooldown: int = 0

    def __post_init__(self) -> None:
        if self.max_cooldown < 0 or self.power < 0:
            raise ValueError("max_cooldown and power must be >= 0")
        self.cooldown = max(0, min(self.cooldown, self.max_cooldown))

    @property
    def ready(self) -> bool:
        return self.ability is not Ability.NONE and self.cooldown == 0

    def tick(self) -> None:
        if self.cooldown > 0:
            self.cooldown -= 1

    def reset_cooldown(self) -> None:
        self.cooldown = self.max_cooldown


@dataclass
class Player:
    x: int = 0
    y: int = 0
    facing: Direction = Direction.NORTH
    health: int = 100
    max_health: int = 100
    attack: int = 10
    defense: int = 5
    level: int = 1
    xp: int = 0
    gold: int = 0
    weapon: Optional[Weapon] = None

    @property
    def pos(self) -> Point:
        return (self.x, self.y)

    @property
    def alive(self) -> bool:
        return self.health > 0

    def move_to(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def take_damage(self, amount: int) -> int:
        """Lose up to ``amount`` HP; returns the HP actually lost."""
        before = self.health
        self.health = max(0, self.health - amount)
        return before - self.health

    def heal(self, amount: int) -> int:
        """Gain up to ``amount`` HP without exceeding max_health; returns HP gained."""
        before = self.health
        self.health = min(self.max_health, self.health + amount)
        return self.health - before


@dataclass
class Enemy:
    x: int
    y: int
    kind: EnemyKind
    name: str
    health: int
    max_health: int
    attack: int
    defense: int
    xp_value: int
    attack_phrases: Tuple[str, ...] = ("attacks you",)
    stun_turns: int = 0
    bleed_damage: int = 0
    bleed_turns: int = 0

    @property
    def pos(self) -> Point:
        return (self.x, self.y)

    @property
    def alive(self) -> bool:
        return self.health > 0

    def move_to(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def take_damage(self, amount: int) -> int:
        before = self.health
        self.health = max(0, self.health - amount)
        return before - self.health


@dataclass
class Item:
    x: int
    y: int
    kind: ItemKind

    @property
    def pos(self) -> Point:
        return (self.x, self.y)


@dataclass
class Trap:
    x: int
    y: int
    kind: TrapKind
    damage: int
    triggered: bool = False

    @property
    def pos(self) -> Point:
        return (self.x, self.y)


@dataclass
class InventoryItem:
    """A stacking inventory slot (potions, the key)."""

    icon: str
    name: str
    kind: ItemKind
    quantity: int = 1


@dataclass
class Inventory:
    slots: List[InventoryItem] = field(default_factory=list)

    def find(self, kind: ItemKind) -> Optional[InventoryItem]:
        for slot in self.slots:
            if slot.kind is kind:
                return slot
        return None

    def count(self, kind: ItemKind) -> int:
        return sum(s.quantity for s in self.slots if s.kind is kind)

    def __len__(self) -> int:
        return len(self.slots)


__all__ = [
    "Direction",
    "EnemyKind",
    "ItemKind",
    "LOOT_KINDS",
    "TrapKind",
    "Ability",
    "Weapon",
    "Player",
    "Enemy",
    "Item",
    "Trap",
    "InventoryItem",
    "Inventory",
]
