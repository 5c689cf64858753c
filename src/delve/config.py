from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DELVE_CONFIG"


@dataclass
class GameConfig:
    """Every tunable constant of the simulation.

    Defaults reproduce the classic rules. Values can be overridden from a YAML
    file whose top-level keys match the field names:

        map_width: 40
        max_floors: 5
        teleporter_chance: 100

    Percentages are integers in [0, 100]; a feature gate passes when a roll in
    [0, 100) is below the configured value.
    """

    # Map geometry
    map_width: int = 50
    map_height: int = 35
    max_floors: int = 10

    # Room generation
    max_rooms: int = 12
    room_min_size: int = 4
    room_max_size: int = 10
    spawn_attempts: int = 50
    secret_passage_attempts: int = 100

    # Vision
    vision_radius: int = 6
    vision_step_degrees: int = 2

    # Player
    player_health: int = 100
    player_attack: int = 10
    player_defense: int = 5
    starting_potions: int = 2
    rest_heal: int = 1
    safe_room_rest_heal: int = 5
    potion_base_heal: int = 30
    potion_heal_per_level: int = 5
    xp_per_level: int = 100

    # Traversal features (percent)
    elevator_chance: int = 50
    teleporter_chance: int = 40
    locked_door_chance: int = 60
    safe_room_base_chance: int = 30
    safe_room_chance_per_floor: int = 5
    secret_passage_chance: int = 25
    safe_room_max_size: int = 5
    teleport_sickness_chance: int = 15

    # UI-facing state
    message_log_capacity: int = 50

    def __post_init__(self) -> None:
        if self.map_width <= 0 or self.map_height <= 0:
            raise ValueError("map_width/map_height must be > 0")
        if self.max_rooms <= 0:
            raise ValueError("max_rooms must be > 0")
        if self.max_floors <= 0:
            raise ValueError("max_floors must be > 0")
        if self.room_min_size <= 0 or self.room_min_size > self.room_max_size:
            raise ValueError("room sizes must satisfy 0 < room_min_size <= room_max_size")
        if self.room_max_size + 3 > min(self.map_width, self.map_height):
            raise ValueError("room_max_size does not fit inside the map with a border")
        if self.vision_radius < 0:
            raise ValueError("vision_radius must be >= 0")
        if self.vision_step_degrees <= 0 or 360 % self.vision_step_degrees != 0:
            raise ValueError("vision_step_degrees must be a positive divisor of 360")
        if self.message_log_capacity <= 0:
            raise ValueError("message_log_capacity must be positive")
        if self.xp_per_level <= 0:
            raise ValueError("xp_per_level must be positive")
        for name in (
            "elevator_chance",
            "teleporter_chance",
            "locked_door_chance",
            "safe_room_base_chance",
            "secret_passage_chance",
            "teleport_sickness_chance",
        ):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"{name} must be within [0, 100], got {value}")

    def safe_room_chance(self, floor_number: int) -> int:
        return self.safe_room_base_chance + self.safe_room_chance_per_floor * floor_number

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameConfig":
        known = {f.name for f in dataclasses.fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in (data or {}).items():
            if key not in known:
                logger.warning("Ignoring unknown config key: %s", key)
                continue
            values[key] = int(value)
        return cls(**values)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "GameConfig":
        """Load configuration from YAML, falling back to defaults.

        When ``path`` is None the DELVE_CONFIG environment variable is
        consulted. An explicitly requested file that does not exist is an
        error; no file at all yields the defaults.
        """
        if path is None:
            env_path = os.environ.get(CONFIG_ENV_VAR)
            if not env_path:
                logger.debug("No config file given; using defaults")
                return cls()
            path = Path(env_path)
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Config file {path} must contain a mapping at the top level")
        cfg = cls.from_dict(raw)
        logger.info("Loaded config from %s", path)
        return cfg

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(dataclasses.asdict(self), f, sort_keys=False)
        logger.info("Saved config to %s", path)


__all__ = ["GameConfig", "CONFIG_ENV_VAR"]
