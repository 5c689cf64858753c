"""Enemy content, keyed by kind.

Floors map onto five tiers of three enemy kinds each. Adding an enemy is a data
change: add an ``EnemyKind`` member, a row in ``ENEMY_STATS`` and the kind to a
tier in ``TIERS``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from .entities import Enemy, EnemyKind


@dataclass(frozen=True)
class EnemyStats:
    name: str
    health: int
    attack: int
    defense: int
    xp_value: int
    attack_phrases: Tuple[str, ...]


ENEMY_STATS: Dict[EnemyKind, EnemyStats] = {
    EnemyKind.LOST_TEDDY: EnemyStats(
        "Lost Teddy", 8, 3, 0, 5,
        ("squeezes you until something pops", "mumbles your birth weight", "sheds stuffing on your shoes"),
    ),
    EnemyKind.CRIB_SPIDER: EnemyStats(
        "Crib Spider", 6, 4, 0, 5,
        ("tucks you in far too tight", "hums in a pitch you forgot", "counts your fingers twice"),
    ),
    EnemyKind.NIGHT_LIGHT: EnemyStats(
        "Night Light", 10, 2, 1, 8,
        ("shows you the corner of the room", "flickers at you knowingly", "lights up something that was not there"),
    ),
    EnemyKind.SWING_CHILD: EnemyStats(
        "Swing Child", 15, 6, 2, 15,
        ("swings straight through you", "asks whether you remember them", "repeats a secret you never told"),
    ),
    EnemyKind.SANDBOX_THING: EnemyStats(
        "Sandbox Thing", 12, 7, 1, 12,
        ("buries a memory of yours", "builds a castle out of your teeth", "digs up what you hid"),
    ),
    EnemyKind.CAROUSEL_HORSE: EnemyStats(
        "Carousel Horse", 18, 5, 3, 18,
        ("gallops in circles around you", "plays a tune you once danced to", "keeps smiling"),
    ),
    EnemyKind.SUBSTITUTE_TEACHER: EnemyStats(
        "Substitute Teacher", 20, 8, 3, 25,
        ("calls you by your real name", "marks you absent", "assigns homework due yesterday"),
    ),
    EnemyKind.HALL_MONITOR: EnemyStats(
        "Hall Monitor", 22, 7, 4, 22,
        ("writes you up", "demands a pass you never had", "escorts you somewhere else"),
    ),
    EnemyKind.LUNCH_LADY: EnemyStats(
        "Lunch Lady", 25, 9, 2, 28,
        ("serves you a memory", "knows exactly what you want", "ladles something warm onto you"),
    ),
    EnemyKind.WRONG_MOM: EnemyStats(
        "Wrong Mom", 35, 12, 5, 40,
        ("calls you a name you almost recognise", "made your favourite dinner", "says it is time for bed"),
    ),
    EnemyKind.ATTIC_DWELLER: EnemyStats(
        "Attic Dweller", 30, 14, 4, 35,
        ("drops a photo album on you", "shows you the room you forgot", "wears your baby clothes"),
    ),
    EnemyKind.BASEMENT_FRIEND: EnemyStats(
        "Basement Friend", 40, 11, 6, 45,
        ("waited so long for you", "still has your toys", "never left"),
    ),
    EnemyKind.MIRROR_YOU: EnemyStats(
        "Mirror You", 60, 16, 8, 70,
        ("does what you were about to do", "apologises in advance", "has your face but not your eyes"),
    ),
    EnemyKind.THE_HOST: EnemyStats(
        "The Host", 70, 18, 7, 85,
        ("welcomes you home", "insists the party never ended", "offers you a permanent seat"),
    ),
    EnemyKind.YOUR_BEST_FRIEND: EnemyStats(
        "Your Best Friend", 100, 22, 10, 120,
        ("missed you so much it hurts", "wants to be together forever", "promises never to let go"),
    ),
}

TIERS: Dict[int, Tuple[EnemyKind, ...]] = {
    1: (EnemyKind.LOST_TEDDY, EnemyKind.CRIB_SPIDER, EnemyKind.NIGHT_LIGHT),
    2: (EnemyKind.SWING_CHILD, EnemyKind.SANDBOX_THING, EnemyKind.CAROUSEL_HORSE),
    3: (EnemyKind.SUBSTITUTE_TEACHER, EnemyKind.HALL_MONITOR, EnemyKind.LUNCH_LADY),
    4: (EnemyKind.WRONG_MOM, EnemyKind.ATTIC_DWELLER, EnemyKind.BASEMENT_FRIEND),
    5: (EnemyKind.MIRROR_YOU, EnemyKind.THE_HOST, EnemyKind.YOUR_BEST_FRIEND),
}


def tier_for_floor(floor_number: int) -> int:
    """Floors 1-2 are tier 1, 3-4 tier 2, ..., 9 and deeper tier 5."""
    return max(1, min(5, (floor_number + 1) // 2))


def kinds_for_floor(floor_number: int) -> Tuple[EnemyKind, ...]:
    return TIERS[tier_for_floor(floor_number)]


def create_enemy(kind: EnemyKind, x: int, y: int) -> Enemy:
    stats = ENEMY_STATS[kind]
    return Enemy(
        x=x,
        y=y,
        kind=kind,
        name=stats.name,
        health=stats.health,
        max_health=stats.health,
        attack=stats.attack,
        defense=stats.defense,
        xp_value=stats.xp_value,
        attack_phrases=stats.attack_phrases,
    )


__all__ = ["EnemyStats", "ENEMY_STATS", "TIERS", "tier_for_floor", "kinds_for_floor", "create_enemy"]
