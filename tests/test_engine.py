import pytest

from delve.config import GameConfig
from delve.dungeon.tiles import Tile
from delve.events import EventBus
from delve.game import messages as text
from delve.game.bestiary import create_enemy
from delve.game.commands import Action, Command
from delve.game.engine import TurnEngine
from delve.game.entities import Ability, Direction, EnemyKind, Item, ItemKind, Trap, TrapKind, Weapon
from delve.game.inventory import equip_weapon

CORRIDOR = [
    "#######",
    "#.....#",
    "#######",
]

ARENA = [
    "#########",
    "#.......#",
    "#.......#",
    "#.......#",
    "#.......#",
    "#.......#",
    "#########",
]

LONG_HALL = [
    "######################",
    "#....................#",
    "######################",
]


def cmd(action, slot=0):
    return Command(action, slot)


def add_enemy(engine, kind, x, y):
    enemy = create_enemy(kind, x, y)
    engine.world.floor.enemies.append(enemy)
    return enemy


class TestMovement:
    def test_locked_door_without_key_blocks(self, staged):
        engine = staged(["#####", "#.+.#", "#####"])
        outcome = engine.apply(cmd(Action.MOVE_EAST))

        assert outcome.turn_consumed
        assert engine.world.player.pos == (1, 1)
        assert engine.world.floor.grid.get(2, 1) == Tile.LOCKED_DOOR
        assert engine.world.inventory.count(ItemKind.HEALTH_POTION) == 2
        assert len(engine.world.inventory) == 1
        assert text.DOOR_BLOCKED in outcome.messages

    def test_locked_door_with_key_opens_for_good(self, staged):
        engine = staged(["#####", "#.+.#", "#####"])
        world = engine.world
        world.floor.locked_door = (2, 1)
        engine.inventory.pickup(world, Item(1, 1, ItemKind.KEY))

        engine.apply(cmd(Action.MOVE_EAST))

        assert world.player.pos == (2, 1)
        assert world.floor.grid.get(2, 1) == Tile.FLOOR
        assert world.floor.locked_door is None
        assert world.inventory.count(ItemKind.KEY) == 0
        assert not world.has_key

        engine.apply(cmd(Action.MOVE_WEST))
        engine.apply(cmd(Action.MOVE_EAST))
        assert world.floor.grid.get(2, 1) == Tile.FLOOR

    def test_secret_wall_reveals_and_lets_player_through(self, staged):
        engine = staged(["#####", "#.%.#", "#####"])
        outcome = engine.apply(cmd(Action.MOVE_EAST))
        assert engine.world.player.pos == (2, 1)
        assert engine.world.floor.grid.get(2, 1) == Tile.FLOOR
        assert text.SECRET_REVEALED in outcome.messages

    def test_bumping_a_wall_still_costs_a_turn(self, staged):
        engine = staged(CORRIDOR)
        outcome = engine.apply(cmd(Action.MOVE_NORTH))
        assert outcome.turn_consumed
        assert engine.world.turn == 1
        assert engine.world.player.pos == (1, 1)

    def test_turning_is_free_and_forward_follows_facing(self, staged):
        engine = staged(CORRIDOR)
        outcome = engine.apply(cmd(Action.TURN_RIGHT))
        assert not outcome.turn_consumed
        assert engine.world.player.facing is Direction.EAST
        assert engine.world.turn == 0

        engine.apply(cmd(Action.MOVE_FORWARD))
        engine.apply(cmd(Action.MOVE_FORWARD))
        assert engine.world.player.pos == (3, 1)

        engine.apply(cmd(Action.MOVE_BACKWARD))
        assert engine.world.player.pos == (2, 1)
        assert engine.world.player.facing is Direction.EAST

        engine.apply(cmd(Action.TURN_LEFT))
        assert engine.world.player.facing is Direction.NORTH

    def test_absolute_moves_turn_the_player(self, staged):
        engine = staged(ARENA)
        engine.apply(cmd(Action.MOVE_SOUTH))
        assert engine.world.player.facing is Direction.SOUTH
        assert engine.world.player.pos == (1, 2)

    def test_walking_onto_item_picks_it_up(self, staged):
        engine = staged(CORRIDOR)
        engine.world.floor.items.append(Item(2, 1, ItemKind.HEALTH_POTION))
        engine.apply(cmd(Action.MOVE_EAST))
        assert engine.world.floor.items == []
        assert engine.world.inventory.count(ItemKind.HEALTH_POTION) == 3

    def test_trap_fires_once(self, staged):
        engine = staged(CORRIDOR)
        trap = Trap(2, 1, TrapKind.SPIKE, damage=8)
        engine.world.floor.traps.append(trap)

        outcome = engine.apply(cmd(Action.MOVE_EAST))
        assert trap.triggered
        assert engine.world.player.health == 92
        assert any(m.startswith(text.TRAPS[TrapKind.SPIKE]) for m in outcome.messages)

        engine.apply(cmd(Action.MOVE_WEST))
        engine.apply(cmd(Action.MOVE_EAST))
        assert engine.world.player.health == 92


class TestCombat:
    def test_moving_into_enemy_attacks_instead(self, staged):
        engine = staged(CORRIDOR)
        enemy = add_enemy(engine, EnemyKind.YOUR_BEST_FRIEND, 2, 1)

        outcome = engine.apply(cmd(Action.MOVE_EAST))

        assert outcome.turn_consumed
        assert engine.world.player.pos == (1, 1)
        assert enemy.health < enemy.max_health
        # Adjacent and visible, so it hits back in the enemy phase.
        assert engine.world.player.health < 100

    def test_kill_pays_xp_and_gold(self, staged):
        bus = EventBus()
        kills = []
        bus.subscribe("enemy_killed", lambda e: kills.append(e.payload))
        engine = staged(CORRIDOR)
        engine.world.bus = bus
        engine.world.player.attack = 500
        add_enemy(engine, EnemyKind.LOST_TEDDY, 2, 1)

        engine.apply(cmd(Action.MOVE_EAST))

        assert engine.world.floor.enemies == []
        assert engine.world.player.xp == 5
        assert 1 <= engine.world.player.gold <= 9
        assert kills == [{"enemy": "Lost Teddy", "xp": 5, "gold": engine.world.player.gold}]

    def test_enemy_steps_diagonally_toward_player(self, staged):
        engine = staged(ARENA)
        enemy = add_enemy(engine, EnemyKind.LOST_TEDDY, 4, 4)
        engine.apply(cmd(Action.WAIT))
        assert enemy.pos == (3, 3)

    def test_enemy_falls_back_to_single_axis_step(self, staged):
        engine = staged(ARENA)
        rear = add_enemy(engine, EnemyKind.LOST_TEDDY, 4, 4)
        front = add_enemy(engine, EnemyKind.LOST_TEDDY, 3, 3)
        engine.apply(cmd(Action.WAIT))
        # The diagonal is taken by another enemy, so the x-only step is used.
        assert rear.pos == (3, 4)
        assert front.pos == (2, 2)

    def test_enemy_out_of_sight_does_not_act(self, staged):
        engine = staged(LONG_HALL)
        enemy = add_enemy(engine, EnemyKind.LOST_TEDDY, 18, 1)
        engine.apply(cmd(Action.WAIT))
        assert enemy.pos == (18, 1)

    def test_enemies_do_not_walk_through_locked_doors(self, staged):
        engine = staged(["#######", "#..+..#", "#######"])
        enemy = add_enemy(engine, EnemyKind.LOST_TEDDY, 4, 1)
        engine.apply(cmd(Action.WAIT))
        assert enemy.pos == (4, 1)

    def test_game_over_is_absorbing_until_restart(self, staged):
        engine = staged(CORRIDOR)
        engine.world.player.health = 1
        add_enemy(engine, EnemyKind.YOUR_BEST_FRIEND, 2, 1)

        outcome = engine.apply(cmd(Action.WAIT))
        assert outcome.game_over
        assert engine.world.player.health == 0

        rejected = engine.apply(cmd(Action.MOVE_WEST))
        assert not rejected.turn_consumed
        assert rejected.messages == (text.TERMINAL_REJECT,)
        assert engine.world.player.pos == (1, 1)

        restarted = engine.apply(cmd(Action.RESTART))
        assert restarted.floor_changed
        assert not restarted.game_over
        assert engine.world.floor_number == 1
        assert engine.world.player.health == 100
        assert engine.world.inventory.count(ItemKind.HEALTH_POTION) == 2


class TestSpecials:
    def test_stun_skips_exactly_two_phases(self, staged):
        engine = staged(CORRIDOR)
        player = engine.world.player
        player.facing = Direction.EAST
        equip_weapon(player, Weapon("Rattle", 3, Ability.STUN, power=2, max_cooldown=5))
        enemy = add_enemy(engine, EnemyKind.YOUR_BEST_FRIEND, 2, 1)

        first = engine.apply(cmd(Action.USE_SPECIAL))
        assert first.turn_consumed
        assert enemy.health == enemy.max_health
        assert enemy.stun_turns == 1
        assert player.health == 100

        engine.apply(cmd(Action.WAIT))
        assert player.health == 100
        assert enemy.stun_turns == 0

        engine.apply(cmd(Action.WAIT))
        assert player.health < 100

    def test_special_on_cooldown_is_rejected_without_a_turn(self, staged):
        engine = staged(CORRIDOR)
        equip_weapon(engine.world.player, Weapon("Rattle", 3, Ability.STUN, power=2, max_cooldown=5))

        engine.apply(cmd(Action.USE_SPECIAL))
        assert engine.world.player.weapon.cooldown == 4

        outcome = engine.apply(cmd(Action.USE_SPECIAL))
        assert not outcome.turn_consumed
        assert engine.world.turn == 1

    def test_special_without_target_still_resets_cooldown(self, staged):
        engine = staged(CORRIDOR)
        equip_weapon(engine.world.player, Weapon("Rattle", 3, Ability.STUN, power=2, max_cooldown=3))
        outcome = engine.apply(cmd(Action.USE_SPECIAL))
        assert outcome.turn_consumed
        assert text.SPECIAL_MISS.format(weapon="Rattle") in outcome.messages
        assert engine.world.player.weapon.cooldown == 2

    def test_no_weapon_means_no_special(self, staged):
        engine = staged(CORRIDOR)
        outcome = engine.apply(cmd(Action.USE_SPECIAL))
        assert not outcome.turn_consumed
        assert outcome.messages == (text.NO_WEAPON,)

    def test_bleed_kill_rewarded_once(self, staged):
        engine = staged(LONG_HALL)
        enemy = add_enemy(engine, EnemyKind.LOST_TEDDY, 18, 1)
        enemy.bleed_damage, enemy.bleed_turns = 4, 3

        engine.apply(cmd(Action.WAIT))
        assert enemy.health == 4
        engine.apply(cmd(Action.WAIT))
        assert engine.world.floor.enemies == []
        assert engine.world.player.xp == 5
        engine.apply(cmd(Action.WAIT))
        assert engine.world.player.xp == 5

    def test_bleed_special_ticks_then_kills_once(self, staged):
        engine = staged(CORRIDOR)
        player = engine.world.player
        player.facing = Direction.EAST
        equip_weapon(player, Weapon("Splinter", 0, Ability.BLEED, power=3, max_cooldown=9))
        enemy = add_enemy(engine, EnemyKind.CRIB_SPIDER, 2, 1)
        enemy.stun_turns = 4

        engine.apply(cmd(Action.USE_SPECIAL))
        # Counters are set with no base hit; the first tick lands in the same turn.
        assert enemy.bleed_damage == 3
        assert enemy.bleed_turns == 2
        assert enemy.health == 3
        assert player.xp == 0

        engine.apply(cmd(Action.WAIT))
        assert engine.world.floor.enemies == []
        assert player.xp == 5

        engine.apply(cmd(Action.WAIT))
        assert player.xp == 5

    def test_double_damage_formula(self, staged):
        engine = staged(CORRIDOR)
        player = engine.world.player
        player.facing = Direction.EAST
        equip_weapon(player, Weapon("Spoon", 0, Ability.DOUBLE_DAMAGE, power=2, max_cooldown=4))
        enemy = add_enemy(engine, EnemyKind.YOUR_BEST_FRIEND, 2, 1)

        engine.apply(cmd(Action.USE_SPECIAL))
        # 10 attack x 2 power - 10 defense
        assert enemy.health == enemy.max_health - 10

    def test_lifesteal_heals_player(self, staged):
        engine = staged(CORRIDOR)
        player = engine.world.player
        player.facing = Direction.EAST
        player.health = 50
        equip_weapon(player, Weapon("Spork", 0, Ability.LIFESTEAL, power=4, max_cooldown=4))
        enemy = add_enemy(engine, EnemyKind.YOUR_BEST_FRIEND, 2, 1)
        enemy.stun_turns = 1

        engine.apply(cmd(Action.USE_SPECIAL))
        assert player.health == 54
        assert enemy.health < enemy.max_health - 4

    def test_area_damage_hits_visible_enemies_within_two(self, staged):
        engine = staged(ARENA, start=(3, 3))
        equip_weapon(engine.world.player, Weapon("Album", 0, Ability.AREA_DAMAGE, power=4, max_cooldown=6))
        near = add_enemy(engine, EnemyKind.YOUR_BEST_FRIEND, 5, 5)
        far = add_enemy(engine, EnemyKind.YOUR_BEST_FRIEND, 7, 3)
        near.stun_turns = far.stun_turns = 1

        engine.apply(cmd(Action.USE_SPECIAL))
        assert near.health == near.max_health - 4
        assert far.health == far.max_health

    def test_knockback_stops_at_wall(self, staged):
        engine = staged(CORRIDOR)
        player = engine.world.player
        player.facing = Direction.EAST
        equip_weapon(player, Weapon("Chain", 0, Ability.KNOCKBACK, power=5, max_cooldown=4))
        enemy = add_enemy(engine, EnemyKind.YOUR_BEST_FRIEND, 2, 1)
        enemy.stun_turns = 1

        outcome = engine.apply(cmd(Action.USE_SPECIAL))
        assert enemy.pos == (5, 1)
        assert any("knocked back 3" in m for m in outcome.messages)


class TestTraversal:
    def test_stairs_descend_and_reset_per_floor_state(self, staged):
        engine = staged(["#####", "#.>.#", "#####"], start=(2, 1))
        world = engine.world
        world.player.facing = Direction.EAST
        engine.inventory.pickup(world, Item(2, 1, ItemKind.KEY))

        outcome = engine.apply(cmd(Action.INTERACT))

        assert outcome.floor_changed
        assert outcome.turn_consumed
        assert world.floor_number == 2
        assert world.player.pos == world.floor.start
        assert world.player.facing is Direction.NORTH
        assert not world.has_key
        assert world.inventory.count(ItemKind.KEY) == 0
        assert world.visibility.is_visible(*world.player.pos)

    def test_descending_past_last_floor_is_victory(self, staged):
        engine = staged(["#####", "#.>.#", "#####"], start=(2, 1), number=10)
        outcome = engine.apply(cmd(Action.INTERACT))

        assert outcome.victory
        assert not outcome.turn_consumed
        assert engine.world.floor_number == 10

        assert not engine.apply(cmd(Action.WAIT)).turn_consumed
        assert engine.apply(cmd(Action.RESTART)).floor_changed
        assert not engine.world.victory

    def test_elevator_from_first_floor_goes_down(self, staged):
        engine = staged(["#####", "#.E.#", "#####"], start=(2, 1))
        outcome = engine.apply(cmd(Action.USE_ELEVATOR))
        assert outcome.floor_changed
        assert engine.world.floor_number in (2, 3, 4)

    def test_elevator_shortcut_needs_elevator_tile(self, staged):
        engine = staged(CORRIDOR)
        outcome = engine.apply(cmd(Action.USE_ELEVATOR))
        assert not outcome.turn_consumed
        assert outcome.messages == (text.NO_ELEVATOR,)

    def test_elevator_overshoot_from_deep_floor(self):
        cfg = GameConfig(max_floors=2)
        outcomes = set()
        for seed in range(20):
            engine = TurnEngine(config=cfg, seed=seed)
            floor = engine.world.floor
            floor.grid.set(*floor.start, Tile.ELEVATOR)
            floor.number = 2
            engine.install_floor(floor)
            outcome = engine.apply(cmd(Action.INTERACT))
            outcomes.add("victory" if outcome.victory else engine.world.floor_number)
        assert "victory" in outcomes
        assert outcomes <= {"victory", 1}

    def test_teleporter_moves_to_partner(self, staged):
        engine = staged(["#######", "#T...T#", "#######"])
        outcome = engine.apply(cmd(Action.USE_TELEPORTER))
        assert outcome.turn_consumed
        assert engine.world.player.pos == (5, 1)
        assert engine.world.player.health >= 96

        engine.apply(cmd(Action.INTERACT))
        assert engine.world.player.pos == (1, 1)

    def test_teleporter_blocked_by_enemy(self, staged):
        engine = staged(["#######", "#T...T#", "#######"])
        add_enemy(engine, EnemyKind.LOST_TEDDY, 5, 1)
        outcome = engine.apply(cmd(Action.USE_TELEPORTER))
        assert not outcome.turn_consumed
        assert engine.world.player.pos == (1, 1)

    def test_interact_on_plain_floor(self, staged):
        engine = staged(CORRIDOR)
        outcome = engine.apply(cmd(Action.INTERACT))
        assert not outcome.turn_consumed
        assert outcome.messages == (text.NOTHING_HERE,)


class TestRestAndLog:
    def test_rest_heals_one(self, staged):
        engine = staged(CORRIDOR)
        engine.world.player.health = 50
        engine.apply(cmd(Action.WAIT))
        assert engine.world.player.health == 51

    def test_safe_room_rest_heals_five(self, staged):
        engine = staged(["#####", "#sss#", "#####"])
        engine.world.player.health = 50
        outcome = engine.apply(cmd(Action.WAIT))
        assert engine.world.player.health == 55
        assert text.REST_SAFE.format(heal=5) in outcome.messages

    def test_potion_via_command(self, staged):
        engine = staged(CORRIDOR)
        engine.world.player.health = 10
        outcome = engine.apply(Command.use_item(1))
        assert outcome.turn_consumed
        assert engine.world.player.health == 45

    def test_message_log_is_capped_newest_first(self, staged):
        engine = staged(CORRIDOR)
        for _ in range(60):
            engine.apply(cmd(Action.WAIT))
        engine.apply(cmd(Action.INTERACT))

        snap = engine.snapshot()
        assert len(snap.messages) == 50
        assert snap.messages[0] == text.NOTHING_HERE

    def test_outcome_messages_are_oldest_first(self, staged):
        engine = staged(["#####", "#.%+#", "#####"])
        engine.inventory.pickup(engine.world, Item(1, 1, ItemKind.KEY))
        engine.apply(cmd(Action.MOVE_EAST))
        outcome = engine.apply(cmd(Action.MOVE_EAST))
        assert outcome.messages[0] == text.DOOR_WALKTHROUGH


class TestSnapshotAndDeterminism:
    def test_snapshot_is_detached_from_world(self, staged):
        engine = staged(CORRIDOR)
        snap = engine.snapshot()
        engine.apply(cmd(Action.MOVE_EAST))

        assert snap.player.x == 1
        assert snap.tile(1, 1) == Tile.FLOOR
        assert isinstance(snap.tiles, tuple)
        with pytest.raises(AttributeError):
            snap.player.x = 5

    def test_same_seed_same_game(self):
        script = ["e", "e", "s", "wait", "n", "w", "i", "1", "special"]
        snaps = []
        for _ in range(2):
            engine = TurnEngine(seed=99)
            for token in script:
                engine.apply(Command.parse(token))
            snaps.append(engine.snapshot())
        assert snaps[0] == snaps[1]

    def test_floor_change_event_published(self, staged):
        engine = staged(["#####", "#.>.#", "#####"], start=(2, 1))
        bus = EventBus()
        floors = []
        bus.subscribe("floor_changed", lambda e: floors.append(e.payload["floor"]))
        engine.world.bus = bus
        engine.apply(cmd(Action.INTERACT))
        assert floors == [2]


def test_command_parsing():
    assert Command.parse("n") == Command(Action.MOVE_NORTH)
    assert Command.parse("3") == Command.use_item(3)
    assert Command.parse("use_item:2") == Command.use_item(2)
    assert Command.parse("restart") == Command(Action.RESTART)
    assert Command.parse("dance") is None


def test_command_parsing_rejects_non_ascii_digits():
    assert Command.parse("²") is None
    assert Command.parse("use:²") is None
    assert Command.parse("٣") == Command.use_item(3)
