"""Weapon and armor content, grouped by floor tier."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from ..rng import RandomSource
from .bestiary import tier_for_floor
from .entities import Ability, Weapon


@dataclass(frozen=True)
class WeaponTemplate:
    name: str
    attack_bonus: int
    ability: Ability
    power: int
    max_cooldown: int
    description: str

    def build(self) -> Weapon:
        return Weapon(
            name=self.name,
            attack_bonus=self.attack_bonus,
            ability=self.ability,
            power=self.power,
            max_cooldown=self.max_cooldown,
            description=self.description,
        )


@dataclass(frozen=True)
class ArmorTemplate:
    name: str
    defense_bonus: int
    description: str


WEAPONS: Dict[int, Tuple[WeaponTemplate, ...]] = {
    1: (
        WeaponTemplate("Baby Rattle of Doom", 3, Ability.STUN, 1, 3, "It rattles soothingly as it strikes."),
        WeaponTemplate("Teething Ring", 3, Ability.BLEED, 2, 4, "The bite marks on it are not yours."),
        WeaponTemplate("Mobile Star", 4, Ability.DOUBLE_DAMAGE, 2, 5, "It finally fell from above the crib."),
    ),
    2: (
        WeaponTemplate("Rusty Swing Chain", 5, Ability.KNOCKBACK, 2, 4, "Still carries the last child's momentum."),
        WeaponTemplate("Jump Rope of Binding", 5, Ability.STUN, 2, 5, "It ties itself around whatever it hits."),
        WeaponTemplate("Tetherball of Regret", 6, Ability.AREA_DAMAGE, 4, 6, "It always comes back around."),
        WeaponTemplate("Splinter Stick", 4, Ability.BLEED, 3, 4, "From the wooden playground they tore down."),
    ),
    3: (
        WeaponTemplate("Hall Pass", 7, Ability.KNOCKBACK, 3, 4, "Sends things anywhere. Anywhere."),
        WeaponTemplate("Detention Slip", 7, Ability.STUN, 2, 5, "Write a name on it and they stay."),
        WeaponTemplate("Safety Scissors", 8, Ability.BLEED, 4, 5, "They were never safe."),
        WeaponTemplate("Cafeteria Spork", 6, Ability.LIFESTEAL, 4, 4, "It has seen things."),
    ),
    4: (
        WeaponTemplate("Wooden Spoon", 9, Ability.DOUBLE_DAMAGE, 2, 5, "It still stings."),
        WeaponTemplate("Photo Album", 9, Ability.AREA_DAMAGE, 6, 6, "The faces blur when it lands."),
        WeaponTemplate("Attic Key", 10, Ability.KNOCKBACK, 3, 4, "Opens things that should stay shut."),
        WeaponTemplate("Family Recipe", 8, Ability.LIFESTEAL, 6, 5, "The secret ingredient is spite."),
    ),
    5: (
        WeaponTemplate("Mirror Shard", 12, Ability.BLEED, 6, 5, "Your reflection keeps swinging."),
        WeaponTemplate("Yesterday's Regret", 11, Ability.STUN, 3, 6, "Weaponised nostalgia."),
        WeaponTemplate("The Truth", 14, Ability.DOUBLE_DAMAGE, 3, 6, "Nobody can handle it."),
        WeaponTemplate("Goodbye Letter", 13, Ability.AREA_DAMAGE, 10, 7, "You never sent it. Until now."),
    ),
}

ARMOR: Dict[int, Tuple[ArmorTemplate, ...]] = {
    1: (
        ArmorTemplate("Swaddle of Protection", 2, "Wrapped too tight to escape."),
        ArmorTemplate("Blankie Shield", 2, "The monsters cannot see you under it."),
        ArmorTemplate("Onesie of Resilience", 3, "It grew with you."),
    ),
    2: (
        ArmorTemplate("Knee Pads of Experience", 3, "Scuffed by every fall."),
        ArmorTemplate("Helmet of Denial", 4, "The cracks are not real if you cannot see them."),
        ArmorTemplate("Jacket Left Behind", 3, "Someone is still looking for this."),
    ),
    3: (
        ArmorTemplate("Participation Trophy", 4, "You showed up."),
        ArmorTemplate("Locker Armor", 5, "The combination was your birthday."),
        ArmorTemplate("Yearbook Shield", 4, "Every signature is the same name."),
    ),
    4: (
        ArmorTemplate("Hand-Knit Sweater", 5, "Grandma made it."),
        ArmorTemplate("Dad's Old Coat", 6, "It still smells like him."),
        ArmorTemplate("Family Quilt", 5, "Some of the patches are missing."),
    ),
    5: (
        ArmorTemplate("Emotional Walls", 7, "You built these yourself."),
        ArmorTemplate("Skin of Your Past Self", 8, "It still fits. Barely."),
        ArmorTemplate("Armor of Acceptance", 9, "You finally stopped running."),
    ),
}


def weapon_for_floor(floor_number: int, rng: RandomSource) -> Weapon:
    return rng.choice(WEAPONS[tier_for_floor(floor_number)]).build()


def armor_for_floor(floor_number: int, rng: RandomSource) -> ArmorTemplate:
    return rng.choice(ARMOR[tier_for_floor(floor_number)])


__all__ = [
    "WeaponTemplate",
    "ArmorTemplate",
    "WEAPONS",
    "ARMOR",
    "weapon_for_floor",
    "armor_for_floor",
]
