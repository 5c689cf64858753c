from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from ..dungeon.tiles import Tile
from . import messages as text
from .combat import CombatResolver
from .entities import Ability, Enemy, Player
from .world import World

logger = logging.getLogger(__name__)

AREA_RADIUS = 2

# Tiles a knocked-back enemy cannot be pushed into.
_KNOCKBACK_BLOCKERS = frozenset({Tile.WALL, Tile.SECRET_WALL, Tile.LOCKED_DOOR})


class StatusEffectProcessor:
    """Per-enemy-phase bookkeeping for cooldowns, bleed and stun.

    Counters are decremented exactly once per phase and never go negative.
    """

    @staticmethod
    def tick_cooldown(player: Player) -> None:
        if player.weapon is not None:
            player.weapon.tick()

    @staticmethod
    def process_bleed(enemy: Enemy) -> int:
        """Apply one tick of bleed; returns the damage dealt."""
        if enemy.bleed_turns <= 0:
            return 0
        damage = enemy.bleed_damage
        enemy.take_damage(damage)
        enemy.bleed_turns -= 1
        if enemy.bleed_turns == 0:
            enemy.bleed_damage = 0
        return damage

    @staticmethod
    def consume_stun(enemy: Enemy) -> bool:
        """True if the enemy is stunned this phase (and uses up one stun turn)."""
        if enemy.stun_turns <= 0:
            return False
        enemy.stun_turns -= 1
        return True


class WeaponSpecials:
    """Resolves the equipped weapon's special ability.

    Every ability except AREA_DAMAGE targets the tile directly ahead of the
    player. A special that resolves always resets the cooldown and costs a
    turn, even when it hits nothing.
    """

    def __init__(self, combat: CombatResolver) -> None:
        self.combat = combat

    def use(self, world: World) -> bool:
        """Returns True when the special resolved and the turn is consumed."""
        player = world.player
        weapon = player.weapon
        if weapon is None:
            world.say(text.NO_WEAPON)
            return False
        if weapon.ability is Ability.NONE:
            world.say(text.NO_SPECIAL.format(weapon=weapon.name))
            return False
        if weapon.cooldown > 0:
            world.say(text.SPECIAL_COOLDOWN.format(weapon=weapon.name, turns=weapon.cooldown))
            return False

        if weapon.ability is Ability.AREA_DAMAGE:
            hit = self._area_damage(world, weapon.power)
        else:
            hit = self._targeted(world, weapon.ability, weapon.power)
        if not hit:
            world.say(text.SPECIAL_MISS.format(weapon=weapon.name))

        weapon.reset_cooldown()
        logger.debug("Special %s used (hit=%s); cooldown=%d", weapon.ability.value, hit, weapon.cooldown)
        return True

    # Target selection

    def _target_ahead(self, world: World) -> Optional[Enemy]:
        dx, dy = world.player.facing.delta
        return world.floor.enemy_at(world.player.x + dx, world.player.y + dy)

    def _area_targets(self, world: World) -> List[Enemy]:
        origin = world.player.pos
        return [
            e
            for e in world.floor.enemies
            if chebyshev(e.pos, origin) <= AREA_RADIUS and world.visibility.is_visible(e.x, e.y)
        ]

    # Abilities

    def _area_damage(self, world: World, power: int) -> bool:
        targets = self._area_targets(world)
        for enemy in targets:
            result = self.combat.apply_damage(enemy, power, source="player")
            world.say(f"A shockwave hits the {enemy.name} for {power}.")
            if result.killed:
                self._kill(world, enemy)
        return bool(targets)

    def _targeted(self, world: World, ability: Ability, power: int) -> bool:
        enemy = self._target_ahead(world)
        if enemy is None:
            return False
        player = world.player

        if ability is Ability.DOUBLE_DAMAGE:
            damage = max(power, player.attack * power - enemy.defense)
            self.combat.apply_damage(enemy, damage, source="player")
            world.say(f"A crushing blow! The {enemy.name} takes {damage} damage.")
        elif ability is Ability.LIFESTEAL:
            damage = self.combat.roll_damage(player.attack, enemy.defense) + power
            self.combat.apply_damage(enemy, damage, source="player")
            healed = player.heal(power)
            world.say(f"You drain the {enemy.name} for {damage} damage and heal {healed} HP.")
        elif ability is Ability.KNOCKBACK:
            result = self.combat.resolve(player, enemy, world.floor_number)
            world.say(text.pick(world.rng, text.PLAYER_ATTACK, name=enemy.name, damage=result.damage))
            if enemy.alive:
                self._apply_rider(world, enemy, ability, power)
        else:
            # Stun and bleed only set counters; bleed damage lands in the enemy phase.
            self._apply_rider(world, enemy, ability, power)

        if not enemy.alive:
            self._kill(world, enemy)
        return True

    def _apply_rider(self, world: World, enemy: Enemy, ability: Ability, power: int) -> None:
        if ability is Ability.STUN:
            enemy.stun_turns = power
            world.say(f"The {enemy.name} is stunned for {power} turn(s).")
        elif ability is Ability.BLEED:
            enemy.bleed_damage = power
            enemy.bleed_turns = power
            world.say(f"The {enemy.name} starts bleeding.")
        elif ability is Ability.KNOCKBACK:
            pushed = self._knockback(world, enemy, power)
            if pushed:
                world.say(f"The {enemy.name} is knocked back {pushed} tile(s).")

    def _knockback(self, world: World, enemy: Enemy, power: int) -> int:
        dx, dy = world.player.facing.delta
        grid = world.floor.grid
        pushed = 0
        for _ in range(power):
            nx, ny = enemy.x + dx, enemy.y + dy
            if not grid.in_bounds(nx, ny) or grid.tiles[ny][nx] in _KNOCKBACK_BLOCKERS:
                break
            if world.floor.enemy_at(nx, ny) is not None or (nx, ny) == world.player.pos:
                break
            enemy.move_to(nx, ny)
            pushed += 1
        return pushed

    def _kill(self, world: World, enemy: Enemy) -> None:
        reward = self.combat.award_kill(world.player, enemy, world.floor.enemies, world.floor_number)
        if reward is not None:
            world.record_kill(reward)


def chebyshev(a: Tuple[int, int], b: Tuple[int, int]) -> int:
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


__all__ = ["StatusEffectProcessor", "WeaponSpecials", "chebyshev", "AREA_RADIUS"]
