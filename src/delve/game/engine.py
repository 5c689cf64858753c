from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from .. import events
from ..config import GameConfig
from ..dungeon.floor import Floor
from ..dungeon.generator import LevelGenerator
from ..dungeon.tiles import Tile
from ..events import EventBus
from ..fov.visibility import VisibilityCalculator
from ..rng import RandomSource
from . import messages as text
from .combat import CombatResolver
from .commands import ABSOLUTE_MOVES, Action, Command
from .entities import Direction, Enemy, Player
from .inventory import InventorySystem, starting_inventory
from .messages import MessageLog
from .snapshot import WorldSnapshot, take_snapshot
from .status import StatusEffectProcessor, WeaponSpecials, chebyshev
from .world import World

logger = logging.getLogger(__name__)

# Tiles enemies never step onto.
_ENEMY_BLOCKERS = frozenset({Tile.WALL, Tile.SECRET_WALL, Tile.LOCKED_DOOR})

_TILE_HINTS = {
    Tile.STAIRS: "stairs",
    Tile.ELEVATOR: "elevator",
    Tile.TELEPORTER: "teleporter",
}

SAFE_ROOM_HINT_CHANCE = 30


@dataclass(frozen=True)
class Outcome:
    """Result of one ``TurnEngine.apply`` call.

    ``messages`` holds what was emitted during the call, oldest first.
    ``turn_consumed`` is True when the enemies got a phase.
    """

    messages: Tuple[str, ...] = ()
    turn_consumed: bool = False
    game_over: bool = False
    victory: bool = False
    floor_changed: bool = False


def _sign(v: int) -> int:
    return (v > 0) - (v < 0)


class TurnEngine:
    """Owns the world and advances it one player command at a time.

    ``apply`` never raises for a bad command; anything the player cannot do
    right now is a no-op with an explanatory message. Game Over and Victory
    are absorbing: only RESTART is accepted afterwards.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[RandomSource] = None,
        seed: Optional[int] = None,
        bus: Optional[EventBus] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rng = rng or RandomSource(seed)
        self.bus = bus
        self.generator = LevelGenerator(self.config)
        self.combat = CombatResolver(self.rng, self.config.xp_per_level)
        self.status = StatusEffectProcessor()
        self.specials = WeaponSpecials(self.combat)
        self.inventory = InventorySystem(self.config)
        self._floor_changed = False
        self._handlers: Dict[Action, Callable[[Command], bool]] = {
            Action.TURN_LEFT: self._turn_left,
            Action.TURN_RIGHT: self._turn_right,
            Action.MOVE_FORWARD: self._move_forward,
            Action.MOVE_BACKWARD: self._move_backward,
            Action.MOVE_NORTH: self._move_absolute,
            Action.MOVE_SOUTH: self._move_absolute,
            Action.MOVE_EAST: self._move_absolute,
            Action.MOVE_WEST: self._move_absolute,
            Action.WAIT: self._wait,
            Action.INTERACT: self._interact,
            Action.USE_ELEVATOR: self._use_elevator,
            Action.USE_TELEPORTER: self._use_teleporter,
            Action.USE_ITEM: self._use_item,
            Action.USE_SPECIAL: self._use_special,
        }
        self.world: World = self._new_world(1)

    # Lifecycle

    def _new_world(self, floor_number: int) -> World:
        cfg = self.config
        player = Player(
            health=cfg.player_health,
            max_health=cfg.player_health,
            attack=cfg.player_attack,
            defense=cfg.player_defense,
        )
        floor = self.generator.generate(floor_number, self.rng)
        player.move_to(*floor.start)
        world = World(
            config=cfg,
            rng=self.rng,
            player=player,
            floor=floor,
            inventory=starting_inventory(cfg),
            visibility=VisibilityCalculator(
                cfg.map_width, cfg.map_height, cfg.vision_radius, cfg.vision_step_degrees
            ),
            messages=MessageLog(cfg.message_log_capacity),
            bus=self.bus,
            floor_number=floor_number,
        )
        world.refresh_visibility()
        world.say(text.pick(self.rng, text.ENTRANCE))
        world.say(text.STAIRS_HINT)
        logger.info("New run started on floor %d at %s", floor_number, floor.start)
        return world

    def start(self, floor_number: int = 1) -> None:
        """Begin a fresh run on ``floor_number`` with a new player."""
        if not 1 <= floor_number <= self.config.max_floors:
            raise ValueError(f"floor_number must be within [1, {self.config.max_floors}]")
        self.world = self._new_world(floor_number)

    def restart(self, seed: Optional[int] = None) -> Outcome:
        """Start over on floor 1. A given ``seed`` reseeds the generator first."""
        if seed is not None:
            self.rng.reseed(seed)
        self.world = self._new_world(1)
        self.world.publish(events.RESTART, {"seed": seed})
        return Outcome(messages=tuple(self.world.drain()), floor_changed=True)

    def install_floor(self, floor: Floor, start: Optional[Tuple[int, int]] = None) -> None:
        """Replace the current floor with a prebuilt one (tools and tests)."""
        world = self.world
        world.floor = floor
        world.floor_number = floor.number
        world.player.move_to(*(start or floor.start))
        self._reset_visibility()

    def _reset_visibility(self) -> None:
        world = self.world
        grid = world.floor.grid
        if (grid.width, grid.height) != (world.visibility.width, world.visibility.height):
            world.visibility = VisibilityCalculator(
                grid.width, grid.height, self.config.vision_radius, self.config.vision_step_degrees
            )
        else:
            world.visibility.reset()
        world.refresh_visibility()

    def snapshot(self) -> WorldSnapshot:
        return take_snapshot(self.world)

    # Command surface

    def apply(self, command: Command) -> Outcome:
        world = self.world
        world.drain()
        self._floor_changed = False

        if command.action is Action.RESTART:
            return self.restart()

        if world.finished:
            world.say(text.TERMINAL_REJECT)
            return self._outcome(False)

        consumed = self._handlers[command.action](command)
        world = self.world
        if consumed and not world.finished:
            world.turn += 1
            self._enemy_phase()
            world.refresh_visibility()
        world.check_game_over()
        return self._outcome(consumed)

    def _outcome(self, consumed: bool) -> Outcome:
        world = self.world
        return Outcome(
            messages=tuple(world.drain()),
            turn_consumed=consumed,
            game_over=world.game_over,
            victory=world.victory,
            floor_changed=self._floor_changed,
        )

    # Facing and movement

    def _turn_left(self, command: Command) -> bool:
        self.world.player.facing = self.world.player.facing.left
        return False

    def _turn_right(self, command: Command) -> bool:
        self.world.player.facing = self.world.player.facing.right
        return False

    def _move_forward(self, command: Command) -> bool:
        return self._step(self.world.player.facing)

    def _move_backward(self, command: Command) -> bool:
        return self._step(self.world.player.facing.opposite)

    def _move_absolute(self, command: Command) -> bool:
        direction = ABSOLUTE_MOVES[command.action]
        self.world.player.facing = direction
        return self._step(direction)

    def _step(self, direction: Direction) -> bool:
        """Try to move one tile. Always costs a turn, even when blocked."""
        world = self.world
        floor = world.floor
        grid = floor.grid
        player = world.player
        dx, dy = direction.delta
        nx, ny = player.x + dx, player.y + dy

        if not grid.in_bounds(nx, ny):
            return True
        tile = grid.tiles[ny][nx]
        if tile == Tile.WALL:
            return True
        if tile == Tile.LOCKED_DOOR:
            if not world.has_key:
                world.say(text.DOOR_BLOCKED)
                return True
            self._unlock(nx, ny)
            world.say(text.DOOR_WALKTHROUGH)
        elif tile == Tile.SECRET_WALL:
            grid.set(nx, ny, Tile.FLOOR)
            world.say(text.SECRET_REVEALED)
            logger.debug("Secret wall revealed at (%d,%d)", nx, ny)

        enemy = floor.enemy_at(nx, ny)
        if enemy is not None:
            self._melee(enemy)
            return True

        player.move_to(nx, ny)
        item = floor.item_at(nx, ny)
        if item is not None:
            self.inventory.pickup(world, item)
        trap = floor.trap_at(nx, ny)
        if trap is not None and not trap.triggered:
            trap.triggered = True
            lost = player.take_damage(trap.damage)
            world.say(f"{text.TRAPS[trap.kind]} (-{lost} HP)")
            logger.debug("Trap %s at %s dealt %d", trap.kind.value, trap.pos, lost)
        self._tile_hint()
        return True

    def _unlock(self, x: int, y: int) -> None:
        floor = self.world.floor
        floor.grid.set(x, y, Tile.FLOOR)
        floor.locked_door = None
        self.inventory.consume_key(self.world)
        logger.debug("Locked door at (%d,%d) opened", x, y)

    def _tile_hint(self) -> None:
        world = self.world
        tile = world.tile_under_player()
        if tile in _TILE_HINTS:
            world.say(text.TILE_HINTS[_TILE_HINTS[tile]])
        elif tile == Tile.SAFE_ROOM and self.rng.chance(SAFE_ROOM_HINT_CHANCE):
            world.say(text.TILE_HINTS["safe_room"])

    def _melee(self, enemy: Enemy) -> None:
        world = self.world
        result = self.combat.resolve(world.player, enemy, world.floor_number)
        world.say(text.pick(self.rng, text.PLAYER_ATTACK, name=enemy.name, damage=result.damage))
        if result.killed:
            reward = self.combat.award_kill(world.player, enemy, world.floor.enemies, world.floor_number)
            if reward is not None:
                world.record_kill(reward)

    # Other actions

    def _wait(self, command: Command) -> bool:
        world = self.world
        player = world.player
        safe = world.in_safe_room()
        if player.health < player.max_health:
            amount = self.config.safe_room_rest_heal if safe else self.config.rest_heal
            healed = player.heal(amount)
            world.say((text.REST_SAFE if safe else text.REST).format(heal=healed))
        else:
            world.say(text.REST_SAFE_FULL if safe else text.REST_FULL)
        return True

    def _use_item(self, command: Command) -> bool:
        return self.inventory.use_slot(self.world, command.slot)

    def _use_special(self, command: Command) -> bool:
        return self.specials.use(self.world)

    def _interact(self, command: Command) -> bool:
        world = self.world
        tile = world.tile_under_player()
        if tile == Tile.STAIRS:
            return self._descend()
        if tile == Tile.ELEVATOR:
            return self._ride_elevator()
        if tile == Tile.TELEPORTER:
            return self._teleport()
        if tile == Tile.LOCKED_DOOR:
            if world.has_key:
                self._unlock(world.player.x, world.player.y)
                world.say(text.pick(self.rng, text.DOOR_UNLOCKED))
            else:
                world.say(text.pick(self.rng, text.DOOR_LOCKED))
            return False
        if tile == Tile.SECRET_WALL:
            world.say(text.SECRET_WHISPER)
            return False
        world.say(text.NOTHING_HERE)
        return False

    def _use_elevator(self, command: Command) -> bool:
        if self.world.tile_under_player() != Tile.ELEVATOR:
            self.world.say(text.NO_ELEVATOR)
            return False
        return self._ride_elevator()

    def _use_teleporter(self, command: Command) -> bool:
        if self.world.tile_under_player() != Tile.TELEPORTER:
            self.world.say(text.NO_TELEPORTER)
            return False
        return self._teleport()

    # Traversal

    def _teleport(self) -> bool:
        world = self.world
        player = world.player
        partner = world.floor.paired_teleporter(player.pos)
        if partner is None:
            world.say(text.NO_TELEPORTER)
            return False
        if world.floor.enemy_at(*partner) is not None:
            world.say(text.TELEPORT_BLOCKED)
            return False
        player.move_to(*partner)
        world.say(text.pick(self.rng, text.TELEPORT))
        if self.rng.chance(self.config.teleport_sickness_chance):
            lost = player.take_damage(self.rng.randint(1, 4))
            world.say(text.TELEPORT_SICKNESS.format(damage=lost))
        world.refresh_visibility()
        logger.debug("Teleported to %s", partner)
        return True

    def _descend(self) -> bool:
        target = self.world.floor_number + 1
        if target > self.config.max_floors:
            self._declare_victory()
            return False
        self._enter_floor(target)
        return True

    def _ride_elevator(self) -> bool:
        world = self.world
        floors = self.rng.randint(1, 3)
        going_up = world.floor_number > floors and self.rng.coin()
        if going_up:
            target = max(1, world.floor_number - floors)
            world.say(text.ELEVATOR_UP.format(floors=floors))
        else:
            target = world.floor_number + floors
            if target > self.config.max_floors:
                self._declare_victory()
                return False
            world.say(text.ELEVATOR_DOWN.format(floors=floors))
        self._enter_floor(target)
        return True

    def _enter_floor(self, number: int) -> None:
        world = self.world
        self.inventory.discard_keys(world)
        world.floor_number = number
        world.floor = self.generator.generate(number, self.rng)
        world.player.move_to(*world.floor.start)
        world.player.facing = Direction.NORTH
        self._reset_visibility()
        world.say(text.pick(self.rng, text.FLOOR_ARRIVAL, floor=number))
        world.publish(events.FLOOR_CHANGED, {"floor": number})
        self._floor_changed = True
        logger.info("Entered floor %d at %s", number, world.floor.start)

    def _declare_victory(self) -> None:
        world = self.world
        world.victory = True
        world.say(text.VICTORY)
        world.publish(
            events.VICTORY,
            {"floor": world.floor_number, "level": world.player.level, "gold": world.player.gold},
        )
        logger.info("Victory from floor %d", world.floor_number)

    # Enemy phase

    def _enemy_phase(self) -> None:
        world = self.world
        floor = world.floor
        self.status.tick_cooldown(world.player)
        # Enemies can die mid-phase; walk a copy and skip anything already removed.
        for enemy in list(floor.enemies):
            if not any(e is enemy for e in floor.enemies):
                continue
            bled = self.status.process_bleed(enemy)
            if bled:
                if world.visibility.is_visible(enemy.x, enemy.y):
                    world.say(f"The {enemy.name} bleeds for {bled}.")
                if not enemy.alive:
                    reward = self.combat.award_kill(world.player, enemy, floor.enemies, world.floor_number)
                    if reward is not None:
                        world.record_kill(reward)
                    continue
            if self.status.consume_stun(enemy):
                continue
            if not world.visibility.is_visible(enemy.x, enemy.y) or not world.player.alive:
                continue
            self._enemy_act(enemy)

    def _enemy_act(self, enemy: Enemy) -> None:
        world = self.world
        player = world.player
        if chebyshev(enemy.pos, player.pos) == 1:
            result = self.combat.resolve(enemy, player, world.floor_number)
            phrase = self.rng.choice(enemy.attack_phrases)
            world.say(text.ENEMY_ATTACK.format(name=enemy.name, phrase=phrase, damage=result.damage))
            return

        dx = _sign(player.x - enemy.x)
        dy = _sign(player.y - enemy.y)
        steps = [(dx, dy)]
        if dx != 0:
            steps.append((dx, 0))
        if dy != 0:
            steps.append((0, dy))
        for sx, sy in steps:
            nx, ny = enemy.x + sx, enemy.y + sy
            if self._enemy_can_enter(nx, ny):
                enemy.move_to(nx, ny)
                return

    def _enemy_can_enter(self, x: int, y: int) -> bool:
        world = self.world
        grid = world.floor.grid
        if not grid.in_bounds(x, y) or grid.tiles[y][x] in _ENEMY_BLOCKERS:
            return False
        if (x, y) == world.player.pos:
            return False
        return world.floor.enemy_at(x, y) is None


__all__ = ["Outcome", "TurnEngine"]
