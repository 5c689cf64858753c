from __future__ import annotations

import logging
from typing import Optional

from ..config import GameConfig
from . import messages as text
from .armory import armor_for_floor, weapon_for_floor
from .entities import Inventory, InventoryItem, Item, ItemKind, Player, Weapon
from .world import World

logger = logging.getLogger(__name__)

POTION_NAME = "Forbidden Juice"
POTION_ICON = "!"
KEY_NAME = "Rusty Key"
KEY_ICON = "K"


def starting_inventory(config: GameConfig) -> Inventory:
    inv = Inventory()
    if config.starting_potions > 0:
        inv.slots.append(
            InventoryItem(POTION_ICON, POTION_NAME, ItemKind.HEALTH_POTION, config.starting_potions)
        )
    return inv


def equip_weapon(player: Player, weapon: Weapon) -> None:
    """Swap in ``weapon``; the old weapon's bonus is removed before the new one is added."""
    if player.weapon is not None:
        player.attack -= player.weapon.attack_bonus
    player.weapon = weapon
    player.attack += weapon.attack_bonus


class InventorySystem:
    """Item pickup and inventory slot use."""

    def __init__(self, config: Optional[GameConfig] = None) -> None:
        self.config = config or GameConfig()

    def pickup(self, world: World, item: Item) -> None:
        floor = world.floor
        if item in floor.items:
            floor.items.remove(item)
        player = world.player
        rng = world.rng

        if item.kind is ItemKind.GOLD:
            gold = rng.randint(5, 19) * world.floor_number
            player.gold += gold
            world.say(text.pick(rng, text.GOLD, gold=gold))
        elif item.kind is ItemKind.HEALTH_POTION:
            stack = world.inventory.find(ItemKind.HEALTH_POTION)
            if stack is not None:
                stack.quantity += 1
            else:
                world.inventory.slots.append(
                    InventoryItem(POTION_ICON, POTION_NAME, ItemKind.HEALTH_POTION, 1)
                )
            world.say(text.pick(rng, text.POTION_PICKUP))
        elif item.kind is ItemKind.WEAPON:
            weapon = weapon_for_floor(world.floor_number, rng)
            equip_weapon(player, weapon)
            world.say(f"You found {weapon.name}! {weapon.description} ATK +{weapon.attack_bonus}")
        elif item.kind is ItemKind.ARMOR:
            armor = armor_for_floor(world.floor_number, rng)
            player.defense += armor.defense_bonus
            world.say(f"You found {armor.name}! {armor.description} DEF +{armor.defense_bonus}")
        elif item.kind is ItemKind.KEY:
            world.has_key = True
            floor.key_position = None
            if world.inventory.find(ItemKind.KEY) is None:
                world.inventory.slots.append(InventoryItem(KEY_ICON, KEY_NAME, ItemKind.KEY, 1))
            world.say(text.pick(rng, text.KEY_PICKUP))
        logger.debug("Picked up %s at %s", item.kind.value, item.pos)

    def use_slot(self, world: World, slot: int) -> bool:
        """Use the 1-based inventory ``slot``; returns True if a turn was spent."""
        slots = world.inventory.slots
        if slot < 1 or slot > len(slots):
            world.say(text.EMPTY_SLOT.format(slot=slot))
            return False
        entry = slots[slot - 1]

        if entry.kind is ItemKind.HEALTH_POTION:
            player = world.player
            if player.health >= player.max_health:
                world.say(text.POTION_FULL)
                return False
            heal = self.config.potion_base_heal + self.config.potion_heal_per_level * player.level
            player.heal(heal)
            world.say(text.pick(world.rng, text.HEAL, heal=heal))
            entry.quantity -= 1
            if entry.quantity <= 0:
                slots.remove(entry)
            return True

        if entry.kind is ItemKind.KEY:
            world.say(text.KEY_NOT_USABLE)
            return False

        world.say(f"The {entry.name} can't be used.")
        return False

    def consume_key(self, world: World) -> bool:
        """Spend the held key: clears ``has_key`` and removes one key entry."""
        if not world.has_key:
            return False
        world.has_key = False
        key = world.inventory.find(ItemKind.KEY)
        if key is not None:
            world.inventory.slots.remove(key)
        return True

    def discard_keys(self, world: World) -> None:
        world.has_key = False
        world.inventory.slots = [s for s in world.inventory.slots if s.kind is not ItemKind.KEY]


__all__ = ["InventorySystem", "starting_inventory", "equip_weapon", "POTION_NAME", "KEY_NAME"]
