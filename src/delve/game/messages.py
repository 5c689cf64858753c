"""Player-facing message log and the flavor text that fills it.

Flavor pools are plain tuples of ``str.format`` templates; ``pick`` chooses
one with the world's RandomSource so message selection stays reproducible.
"""
from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

from ..rng import RandomSource
from .entities import TrapKind

logger = logging.getLogger(__name__)


class MessageLog:
    """Append-only log, newest entry first, hard-capped at ``capacity``.

    Entries beyond the cap fall off the old end silently.
    """

    def __init__(self, capacity: int = 50) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._entries: List[str] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    def add(self, message: str) -> None:
        self._entries.insert(0, message)
        if len(self._entries) > self._capacity:
            dropped = len(self._entries) - self._capacity
            del self._entries[self._capacity:]
            logger.debug("MessageLog capacity exceeded, dropped=%d old entries", dropped)

    def latest(self) -> str:
        return self._entries[0] if self._entries else ""

    def entries(self) -> Tuple[str, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def pick(rng: RandomSource, pool: Sequence[str], **values) -> str:
    return rng.choice(pool).format(**values)


ENTRANCE = (
    "You wake up here. You don't remember coming in.",
    "The dungeon was expecting you. It made snacks.",
    "Welcome back. We missed you. We always miss you.",
    "Floor 1. The walls hum a lullaby you almost remember.",
    "You've been here before. You just don't remember leaving.",
)

STAIRS_HINT = "The stairs are waiting for you somewhere below."

PLAYER_ATTACK = (
    "You bonk the {name}. {damage} damage. It looks confused.",
    "You poke the {name} with intent. {damage} damage. It smiles anyway.",
    "The {name} accepts your {damage} damage like a present.",
    "You inflict {damage} friendship upon the {name}.",
    "The {name} takes {damage} damage and thanks you with its eyes.",
)

ENEMY_DEATH = (
    "The {name} stops moving. It is still smiling. +{xp} XP, +{gold} gold.",
    "The {name} sinks into the floor, waving. +{xp} XP, +{gold} gold.",
    "The {name} was never real. The {xp} XP and {gold} gold are.",
    "The {name} pops like a balloon. +{gold} gold and {xp} XP drift down.",
    "The {name} thanks you for letting it go. +{xp} XP, +{gold} gold.",
)

ENEMY_ATTACK = "The {name} {phrase}. (-{damage} HP)"

GOLD = (
    "You found {gold} gold. Each coin has your face on it.",
    "{gold} gold! It is warm and slightly damp.",
    "You collect {gold} gold. Its last owner won't need it.",
    "The floor coughs up {gold} gold for you. Good floor.",
)

POTION_PICKUP = (
    "You found Forbidden Juice. It's warm. Why is it warm?",
    "A juice box! The label says 'Drink Me' in your handwriting.",
    "You found a sippy cup of something. It sloshes eagerly.",
    "Mystery juice! It changes colour when you look away.",
)

HEAL = (
    "You drink the juice. It tastes like nostalgia. +{heal} HP.",
    "The juice whispers encouragement on the way down. +{heal} HP.",
    "It tastes like strawberries and static. +{heal} HP.",
    "You feel better. The juice is proud of you. +{heal} HP.",
)

POTION_FULL = "You're full. The juice is disappointed."

LEVEL_UP = (
    "You grew stronger! Level {level}! The dungeon noticed.",
    "Level {level}! Your cells rearranged themselves. Don't think about it.",
    "LEVEL {level}! Something in you woke up. It's hungry.",
    "Level {level}! The walls applaud with thousands of tiny hands.",
)

FLOOR_ARRIVAL = (
    "Floor {floor}. The stairs thanked you for using them.",
    "Floor {floor}. The floor above is already forgetting you.",
    "Floor {floor}. It smells like a birthday party.",
    "Welcome to Floor {floor}. Someone was just here. They looked like you.",
)

KEY_PICKUP = (
    "A key! It hums with purpose. Somewhere a door feels nervous.",
    "The key chose you. Or you chose it.",
    "Key acquired. Something locked wants to meet you.",
    "The key is warm. Someone was holding it recently.",
)

DOOR_UNLOCKED = (
    "The door accepts your offering and opens, reluctantly.",
    "Click. The lock is tired now.",
    "The door swings open. Something was waiting on the other side.",
)

DOOR_WALKTHROUGH = "The key dissolves. The door relents."

DOOR_LOCKED = (
    "The door won't budge. It knows you don't have the key.",
    "Locked. The door laughs at you.",
    "The lock stares at you. You don't have what it wants.",
)

DOOR_BLOCKED = "A locked door blocks your path. Find the key."

SECRET_REVEALED = "The wall was never real. You pass through."
SECRET_WHISPER = "The wall whispers secrets. It remembers your touch."

TELEPORT = (
    "Reality blinks. You're somewhere else now.",
    "The teleporter swallows you, then spits you out.",
    "Your atoms rearrange. Mostly correctly.",
    "The trip took no time at all. It felt like forever.",
)

TELEPORT_SICKNESS = "Teleportation sickness. (-{damage} HP)"

ELEVATOR_UP = "The elevator takes you UP {floors} floor(s). It smiles."
ELEVATOR_DOWN = "The elevator takes you DOWN {floors} floor(s). It giggles."

TILE_HINTS = {
    "stairs": "The stairs whisper your name. Interact to descend.",
    "elevator": "An elevator! Destination unknown.",
    "teleporter": "A teleporter hums beneath you.",
    "safe_room": "This room feels... safe? Nothing bad here. Promise.",
}

TRAPS = {
    TrapKind.SPIKE: "The floor gives you a sharp, pointy hug.",
    TrapKind.POISON: "Something blew you a kiss. It tasted like regret.",
    TrapKind.FIRE: "The floor loved you so much it got warm.",
    TrapKind.HUG: "Something invisible hugged you. It's still there.",
    TrapKind.LULLABY: "A lullaby plays. You forget how to be awake.",
}

REST = "You rest and recover {heal} HP."
REST_SAFE = "The safe room embraces you. +{heal} HP."
REST_FULL = "You wait..."
REST_SAFE_FULL = "You're at peace here. Full health."

NOTHING_HERE = "Nothing to interact with here."
NO_ELEVATOR = "No elevator here."
NO_TELEPORTER = "No teleporter here."
TELEPORT_BLOCKED = "Something is standing on the other teleporter."
EMPTY_SLOT = "Nothing in slot {slot}."
KEY_NOT_USABLE = "The key only works on a door."

NO_WEAPON = "You have nothing to swing."
NO_SPECIAL = "Your {weapon} has no special ability."
SPECIAL_COOLDOWN = "Your {weapon} needs {turns} more turn(s)."
SPECIAL_MISS = "Your {weapon} finds nothing to hit."

GAME_OVER = "You fell asleep. Forever. Restart to try again."
VICTORY = "You reached the bottom. There's nothing here. There never was."
TERMINAL_REJECT = "It's over. Restart to play again."

__all__ = ["MessageLog", "pick"]
