from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from .exceptions import ConfigError
from .rng import Seed, coerce_seed

logger = logging.getLogger(__name__)

DEFAULT_DIFFICULTY = "medium"
ENV_PREFIX = "CATMAZE_"


@dataclass(frozen=True)
class DifficultyPreset:
    name: str
    maze_size: int
    monster_count: int

    def validate(self) -> None:
        if self.maze_size < 5 or self.maze_size % 2 == 0:
            raise ConfigError(f"difficulty '{self.name}': maze_size must be odd and >= 5, got {self.maze_size}")
        if self.monster_count < 0:
            raise ConfigError(f"difficulty '{self.name}': monster_count must be >= 0, got {self.monster_count}")


def _parse_presets(raw: Any, source: str) -> Dict[str, DifficultyPreset]:
    if not isinstance(raw, dict) or not raw:
        raise ConfigError(f"difficulty presets in {source} must be a non-empty mapping")
    presets: Dict[str, DifficultyPreset] = {}
    for name, body in raw.items():
        if not isinstance(body, dict):
            raise ConfigError(f"difficulty '{name}' in {source} must be a mapping")
        try:
            preset = DifficultyPreset(
                name=str(name).lower(),
                maze_size=int(body["maze_size"]),
                monster_count=int(body["monster_count"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigError(f"difficulty '{name}' in {source} is malformed: {exc}") from exc
        preset.validate()
        presets[preset.name] = preset
    return presets


def load_presets(path: Optional[Union[str, Path]] = None) -> Dict[str, DifficultyPreset]:
    """Load difficulty presets from YAML.

    If path is None, loads the embedded default resource at
    catmaze/data/difficulty.yaml.
    """
    if path is None:
        data = resources.files("catmaze.data").joinpath("difficulty.yaml").read_text(encoding="utf-8")
        source = "embedded difficulty.yaml"
    else:
        with open(path, "r", encoding="utf-8") as f:
            data = f.read()
        source = str(path)
    try:
        raw = yaml.safe_load(data)
    except yaml.YAMLError as exc:
        raise ConfigError(f"could not parse {source}: {exc}") from exc
    presets = _parse_presets(raw, source)
    logger.debug("Loaded %d difficulty presets from %s", len(presets), source)
    return presets


def resolve_difficulty(name: str, presets: Optional[Mapping[str, DifficultyPreset]] = None) -> DifficultyPreset:
    presets = presets if presets is not None else load_presets()
    key = str(name).strip().lower()
    if key not in presets:
        raise ConfigError(f"Unknown difficulty: {name!r} (expected one of {sorted(presets)})")
    return presets[key]


@dataclass
class Settings:
    """Runtime settings for a play session.

    Sources, lowest to highest precedence: defaults < YAML file < environment
    (``CATMAZE_DIFFICULTY``, ``CATMAZE_SEED``, ``CATMAZE_TICK_RATE``) <
    explicit overrides (CLI flags). The settings file path comes from the
    argument or ``CATMAZE_SETTINGS_FILE``.
    """

    difficulty: str = DEFAULT_DIFFICULTY
    seed: Seed = None
    tick_rate: float = 60.0

    def validate(self, presets: Optional[Mapping[str, DifficultyPreset]] = None) -> None:
        self.difficulty = resolve_difficulty(self.difficulty, presets).name
        try:
            self.tick_rate = float(self.tick_rate)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"tick_rate must be a number, got {self.tick_rate!r}") from exc
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, (int, str))):
            raise ConfigError(f"seed must be an int or a string, got {self.seed!r}")
        if self.tick_rate < 0:
            logger.warning("Negative tick_rate %s; using unthrottled loop", self.tick_rate)
            self.tick_rate = 0.0

    @classmethod
    def from_yaml_file(cls, path: Path) -> Dict[str, Any]:
        if not path.exists():
            logger.warning("Settings file not found: %s", path)
            return {}
        with path.open("r", encoding="utf-8") as f:
            try:
                doc = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigError(f"could not parse settings file {path}: {exc}") from exc
        if not isinstance(doc, dict):
            raise ConfigError(f"settings file {path} must contain a mapping")
        allowed = {f.name for f in fields(cls)}
        unknown = set(doc) - allowed
        if unknown:
            logger.warning("Ignoring unknown settings keys in %s: %s", path, sorted(unknown))
        return {k: v for k, v in doc.items() if k in allowed}

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        env = os.environ if env is None else env
        out: Dict[str, Any] = {}
        if env.get(ENV_PREFIX + "DIFFICULTY"):
            out["difficulty"] = env[ENV_PREFIX + "DIFFICULTY"]
        if env.get(ENV_PREFIX + "SEED"):
            out["seed"] = coerce_seed(env[ENV_PREFIX + "SEED"])
        if env.get(ENV_PREFIX + "TICK_RATE"):
            try:
                out["tick_rate"] = float(env[ENV_PREFIX + "TICK_RATE"])
            except ValueError:
                logger.error("Invalid env for %sTICK_RATE=%r", ENV_PREFIX, env[ENV_PREFIX + "TICK_RATE"])
        return out

    @classmethod
    def from_sources(
        cls,
        *,
        env: Optional[Mapping[str, str]] = None,
        file_path: Optional[Union[Path, str]] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> "Settings":
        env = os.environ if env is None else env
        data: Dict[str, Any] = {}
        if file_path is None and env.get(ENV_PREFIX + "SETTINGS_FILE"):
            file_path = env[ENV_PREFIX + "SETTINGS_FILE"]
        if file_path is not None:
            data.update(cls.from_yaml_file(Path(file_path).expanduser()))
        data.update(cls.from_env(env))
        data.update({k: v for k, v in (overrides or {}).items() if v is not None})
        settings = cls(**data)
        settings.validate()
        logger.debug("Settings resolved: %s", settings)
        return settings
