"""
Front-end configuration.

Defaults live in DEFAULT_CONFIG; a TOML file can override any of them:

    [general]
    clock_hz = 700
    strict_stack = true

    [display]
    scale = 10
    color = "amber"

    [keyboard]      # replaces the whole layout when present
    x = 0
    1 = 1
    ...
"""

from __future__ import annotations

import logging
import tomllib
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional, Union

from .constants import DEFAULT_CLOCK_HZ, DEFAULT_KEY_MAP, NUM_KEYS
from .errors import ConfigError

logger = logging.getLogger(__name__)

# Phosphor colour schemes (RGB)
PHOSPHOR_COLORS = {
    'green': (0, 255, 128),
    'amber': (255, 176, 0),
    'white': (220, 220, 220),
    'blue': (100, 180, 255),
}

DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    "general": {"clock_hz": DEFAULT_CLOCK_HZ, "strict_stack": False},
    "display": {"scale": 12, "color": "green", "bloom_strength": 0.55, "blur_radius": 1},
    "keyboard": dict(DEFAULT_KEY_MAP),
}


@dataclass
class EmulatorConfig:
    clock_hz: int = DEFAULT_CLOCK_HZ
    scale: int = 12
    color: str = 'green'
    bloom_strength: float = 0.55
    blur_radius: int = 1
    strict_stack: bool = False
    key_map: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_KEY_MAP))

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Raise ConfigError on values the emulator cannot run with"""
        for name in ("clock_hz", "scale", "blur_radius"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ConfigError(f"{name} must be an integer, got {value!r}")
        if not isinstance(self.bloom_strength, (int, float)) or isinstance(self.bloom_strength, bool):
            raise ConfigError(f"bloom_strength must be a number, got {self.bloom_strength!r}")
        if not isinstance(self.strict_stack, bool):
            raise ConfigError(f"strict_stack must be true or false, got {self.strict_stack!r}")
        if not isinstance(self.color, str):
            raise ConfigError(f"color must be a string, got {self.color!r}")
        if not isinstance(self.key_map, dict):
            raise ConfigError(f"keyboard must be a table, got {self.key_map!r}")

        if self.clock_hz <= 0:
            raise ConfigError(f"clock_hz must be positive, got {self.clock_hz}")
        if self.scale <= 0:
            raise ConfigError(f"scale must be positive, got {self.scale}")
        if self.color not in PHOSPHOR_COLORS:
            raise ConfigError(
                f"unknown color {self.color!r}, expected one of {', '.join(PHOSPHOR_COLORS)}"
            )
        if not 0.0 <= self.bloom_strength <= 1.0:
            raise ConfigError(f"bloom_strength must be within 0.0-1.0, got {self.bloom_strength}")
        if not 0 <= self.blur_radius <= 3:
            raise ConfigError(f"blur_radius must be within 0-3, got {self.blur_radius}")

        for name, index in self.key_map.items():
            if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < NUM_KEYS:
                raise ConfigError(f"key {name!r} maps to {index!r}, expected 0-15")
        missing = set(range(NUM_KEYS)) - set(self.key_map.values())
        if missing:
            raise ConfigError(
                "keyboard layout leaves keys unmapped: "
                + ", ".join(f"{k:X}" for k in sorted(missing))
            )

    @property
    def fg_color(self):
        return PHOSPHOR_COLORS[self.color]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Mapping[str, Any]]) -> EmulatorConfig:
        general = data.get("general", {})
        display = data.get("display", {})
        return cls(
            clock_hz=general["clock_hz"],
            strict_stack=general["strict_stack"],
            scale=display["scale"],
            color=display["color"],
            bloom_strength=display["bloom_strength"],
            blur_radius=display["blur_radius"],
            key_map={str(k).lower(): v for k, v in data["keyboard"].items()},
        )


def _deep_merge(
    target: MutableMapping[str, Any],
    overrides: Mapping[str, Any],
) -> MutableMapping[str, Any]:
    for key, value in overrides.items():
        if key == "keyboard" and isinstance(value, dict):
            target[key] = dict(value)
        elif isinstance(target.get(key), dict) and isinstance(value, dict):
            _deep_merge(target[key], value)
        else:
            target[key] = value
    return target


def _warn_unknown(overrides: Mapping[str, Any], defaults: Mapping[str, Any], prefix: str = ""):
    for key, value in overrides.items():
        if key not in defaults:
            logger.warning("Ignoring unknown config key %s%s", prefix, key)
        elif key != "keyboard" and isinstance(value, dict):
            _warn_unknown(value, defaults[key], f"{prefix}{key}.")


def load_config(path: Optional[Union[str, Path]] = None) -> EmulatorConfig:
    """Load a TOML config file over DEFAULT_CONFIG. No path means defaults."""
    data = deepcopy(DEFAULT_CONFIG)
    if path is None:
        return EmulatorConfig.from_mapping(data)

    try:
        with open(path, "rb") as f:
            overrides = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path}: {e}") from e

    for section in DEFAULT_CONFIG:
        if section in overrides and not isinstance(overrides[section], dict):
            raise ConfigError(f"{path}: [{section}] must be a table, got {overrides[section]!r}")
    _warn_unknown(overrides, DEFAULT_CONFIG)
    for key in list(overrides):
        if key not in DEFAULT_CONFIG:
            del overrides[key]
    _deep_merge(data, overrides)
    logger.debug("Loaded config from %s", path)
    return EmulatorConfig.from_mapping(data)
