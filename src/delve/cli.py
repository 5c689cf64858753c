from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from .config import GameConfig
from .dungeon.floor import Floor
from .dungeon.generator import LevelGenerator
from .game.commands import Command
from .game.engine import TurnEngine
from .game.entities import ItemKind
from .rng import RandomSource

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="delve", description="Generate and inspect dungeon floors")
    p.add_argument("--seed", type=int, default=None, help="RNG seed (omit for a random run)")
    p.add_argument("--floor", type=int, default=1, help="Floor number to generate")
    p.add_argument("--config", type=Path, default=None, help="YAML config file (defaults to $DELVE_CONFIG)")
    p.add_argument("--ascii", action="store_true", help="Print the floor as ASCII instead of JSON")
    p.add_argument(
        "--play",
        default=None,
        help="Comma-separated commands to run through the turn engine, e.g. 'n,n,e,wait,i,1'",
    )
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def summarize_floor(floor: Floor) -> Dict:
    """Serializable description of a generated floor, stable across runs with the same seed."""
    return {
        "floor": floor.number,
        "width": floor.grid.width,
        "height": floor.grid.height,
        "rooms": [[r.x, r.y, r.width, r.height] for r in floor.rooms],
        "start": list(floor.start),
        "stairs": list(floor.stairs),
        "elevator": list(floor.elevator) if floor.elevator else None,
        "teleporters": [list(t) for t in floor.teleporters],
        "locked_door": list(floor.locked_door) if floor.locked_door else None,
        "key": list(floor.key_position) if floor.key_position else None,
        "safe_room": list(floor.safe_room_center) if floor.safe_room_center else None,
        "enemies": len(floor.enemies),
        "items": len(floor.items),
        "traps": len(floor.traps),
        "signature": floor.grid.signature(),
    }


def render_ascii(floor: Floor, player: Optional[tuple] = None) -> str:
    rows = [list(r) for r in floor.grid.to_ascii()]
    for item in floor.items:
        rows[item.y][item.x] = "k" if item.kind is ItemKind.KEY else "*"
    for trap in floor.traps:
        rows[trap.y][trap.x] = "^"
    for enemy in floor.enemies:
        rows[enemy.y][enemy.x] = "m"
    px, py = player or floor.start
    rows[py][px] = "@"
    return "\n".join("".join(r) for r in rows)


def _play(engine: TurnEngine, script: str) -> Dict:
    log: List[Dict] = []
    for token in script.split(","):
        command = Command.parse(token)
        if command is None:
            logger.warning("Skipping unknown command %r", token)
            continue
        outcome = engine.apply(command)
        log.append(
            {
                "command": token.strip(),
                "turn_consumed": outcome.turn_consumed,
                "messages": list(outcome.messages),
            }
        )
        if outcome.game_over or outcome.victory:
            break
    return {"commands": log, "state": engine.snapshot().to_dict()}


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="[%(levelname)s] %(name)s: %(message)s",
    )

    config = GameConfig.load(args.config)
    if not 1 <= args.floor <= config.max_floors:
        logger.error("--floor must be within [1, %d]", config.max_floors)
        return 2

    if args.play is not None:
        engine = TurnEngine(config=config, seed=args.seed)
        engine.start(args.floor)
        result = _play(engine, args.play)
        if args.ascii:
            print(render_ascii(engine.world.floor, engine.world.player.pos))
        else:
            print(json.dumps(result, indent=2, sort_keys=True))
        return 0

    floor = LevelGenerator(config).generate(args.floor, RandomSource(args.seed))
    if args.ascii:
        print(render_ascii(floor))
    else:
        # JSON so it can be diffed across runs
        print(json.dumps(summarize_floor(floor), indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
