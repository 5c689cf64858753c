from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from ..rng import RandomSource
from .entities import Enemy, Player

logger = logging.getLogger(__name__)

Combatant = Union[Player, Enemy]


@dataclass(frozen=True)
class DamageResult:
    attacker: str
    defender: str
    damage: int
    defender_health: int
    killed: bool


@dataclass(frozen=True)
class LevelUpEvent:
    from_level: int
    to_level: int
    max_health: int
    attack: int
    defense: int


@dataclass(frozen=True)
class KillReward:
    enemy: str
    xp: int
    gold: int
    level_ups: Tuple[LevelUpEvent, ...] = ()


def roll_damage(attack: int, defense: int, rng: RandomSource) -> int:
    """Basic hit damage: attack minus defense with +/-2 jitter, never below 1."""
    return max(1, attack - defense + rng.randint(-2, 2))


def apply_level_ups(player: Player, xp_per_level: int = 100) -> List[LevelUpEvent]:
    """Spend banked XP on as many levels as it pays for.

    The threshold is ``level * xp_per_level`` for the level the player had
    when the award landed, and is paid out of ``player.xp`` once per level
    gained. Each level grants +10 max health (with a full heal), +2 attack
    and +1 defense.
    """
    events: List[LevelUpEvent] = []
    threshold = player.level * xp_per_level
    while player.xp >= threshold:
        player.xp -= threshold
        player.level += 1
        player.max_health += 10
        player.health = player.max_health
        player.attack += 2
        player.defense += 1
        events.append(
            LevelUpEvent(
                from_level=player.level - 1,
                to_level=player.level,
                max_health=player.max_health,
                attack=player.attack,
                defense=player.defense,
            )
        )
        logger.info("Player reached level %d", player.level)
    return events


def _label(combatant: Combatant) -> str:
    return combatant.name if isinstance(combatant, Enemy) else "player"


class CombatResolver:
    """Damage rolls and kill rewards for both sides of a melee exchange."""

    def __init__(self, rng: RandomSource, xp_per_level: int = 100) -> None:
        self.rng = rng
        self.xp_per_level = xp_per_level

    def roll_damage(self, attack: int, defense: int) -> int:
        return roll_damage(attack, defense, self.rng)

    def resolve(self, attacker: Combatant, defender: Combatant, floor_number: int = 1) -> DamageResult:
        """Roll a basic hit from ``attacker`` and apply it to ``defender``.

        Kill rewards are not granted here; callers pass a defeated enemy to
        ``award_kill``.
        """
        damage = self.roll_damage(attacker.attack, defender.defense)
        result = self.apply_damage(defender, damage, source=_label(attacker))
        logger.debug(
            "Floor %d: %s hits %s for %d (hp=%d)",
            floor_number,
            result.attacker,
            result.defender,
            damage,
            result.defender_health,
        )
        return result

    def apply_damage(self, defender: Combatant, amount: int, source: str = "effect") -> DamageResult:
        """Apply a fixed amount of damage (specials, bleed, traps)."""
        if amount < 0:
            raise ValueError("damage amount must be >= 0")
        defender.take_damage(amount)
        return DamageResult(
            attacker=source,
            defender=_label(defender),
            damage=amount,
            defender_health=defender.health,
            killed=not defender.alive,
        )

    def award_kill(
        self,
        player: Player,
        enemy: Enemy,
        enemies: List[Enemy],
        floor_number: int,
    ) -> Optional[KillReward]:
        """Remove a defeated enemy and pay out its XP and gold.

        Returns None when ``enemy`` is no longer in the live list, so an enemy
        is only ever rewarded once.
        """
        index = _index_of(enemies, enemy)
        if index is None:
            logger.debug("Ignoring duplicate kill for %s", enemy.name)
            return None
        del enemies[index]

        gold = self.rng.randint(1, 9) * floor_number
        player.xp += enemy.xp_value
        player.gold += gold
        level_ups = apply_level_ups(player, self.xp_per_level)
        logger.info(
            "Killed %s on floor %d: +%d xp, +%d gold", enemy.name, floor_number, enemy.xp_value, gold
        )
        return KillReward(enemy=enemy.name, xp=enemy.xp_value, gold=gold, level_ups=tuple(level_ups))


def _index_of(enemies: Sequence[Enemy], enemy: Enemy) -> Optional[int]:
    for i, candidate in enumerate(enemies):
        if candidate is enemy:
            return i
    return None


__all__ = [
    "DamageResult",
    "LevelUpEvent",
    "KillReward",
    "roll_damage",
    "apply_level_ups",
    "CombatResolver",
]
