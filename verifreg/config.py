"""
verifreg configuration loader.

Layered config with clear precedence:
    1) Explicit overrides passed to `load()` (highest)
    2) Environment variables (VERIFREG_*)
    3) Config file (TOML or JSON)
    4) Built-in defaults (lowest)

Sections
--------
codec: { strict_trailing }
actor: { actor_id, codec }
log:   { level, format, file }

Everything is standard-library so it can be imported very early.
"""

from __future__ import annotations

import json
import os
import sys
import tomllib
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import ConfigError

# ------------------------------
# Defaults & helpers
# ------------------------------

VERIFREG_ACTOR_ID = 6
DAG_CBOR_CODEC = 0x71

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}
_LOG_FORMATS = {"json", "text", "auto"}


def _parse_bool(v: str) -> bool:
    s = v.strip().lower()
    if s in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if s in {"0", "false", "f", "no", "n", "off", ""}:
        return False
    raise ConfigError(f"expected a boolean, got {v!r}")


def _env_int(name: str) -> int:
    v = os.environ[name]
    try:
        return int(v, 0)
    except ValueError as e:
        raise ConfigError(f"{name} must be int, got {v!r}", variable=name) from e


# ------------------------------
# Typed configuration model
# ------------------------------


@dataclass
class CodecConfig:
    # Reject bytes left over after a decoded reply (lenient by default).
    strict_trailing: bool = False


@dataclass
class ActorConfig:
    actor_id: int = VERIFREG_ACTOR_ID
    codec: int = DAG_CBOR_CODEC


@dataclass
class LogConfig:
    level: str = "INFO"
    format: str = "auto"
    file: Optional[str] = None


@dataclass
class Config:
    codec: CodecConfig
    actor: ActorConfig
    log: LogConfig

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def defaults() -> Config:
    return Config(codec=CodecConfig(), actor=ActorConfig(), log=LogConfig())


# ------------------------------
# File loader (TOML / JSON)
# ------------------------------


def _load_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}", path=str(path))
    suffix = path.suffix.lower()
    with path.open("rb") as f:
        try:
            if suffix in {".toml", ".tml"}:
                return tomllib.load(f)
            if suffix == ".json":
                return json.load(f)
        except (tomllib.TOMLDecodeError, json.JSONDecodeError) as e:
            raise ConfigError(f"cannot parse {path}: {e}", path=str(path)) from e
    raise ConfigError(f"unsupported config format: {suffix}. Use .toml or .json", path=str(path))


def _merge_dict(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    """Nested dict merge: values in b override a."""
    out = dict(a)
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge_dict(out[k], v)
        else:
            out[k] = v
    return out


def _env_layer() -> Dict[str, Any]:
    env: Dict[str, Any] = {}
    if "VERIFREG_STRICT_TRAILING" in os.environ:
        env.setdefault("codec", {})["strict_trailing"] = _parse_bool(os.environ["VERIFREG_STRICT_TRAILING"])
    if "VERIFREG_ACTOR_ID" in os.environ:
        env.setdefault("actor", {})["actor_id"] = _env_int("VERIFREG_ACTOR_ID")
    if "VERIFREG_LOG_LEVEL" in os.environ:
        env.setdefault("log", {})["level"] = os.environ["VERIFREG_LOG_LEVEL"].strip()
    if "VERIFREG_LOG_FORMAT" in os.environ:
        env.setdefault("log", {})["format"] = os.environ["VERIFREG_LOG_FORMAT"].strip()
    if "VERIFREG_LOG_FILE" in os.environ:
        env.setdefault("log", {})["file"] = os.environ["VERIFREG_LOG_FILE"].strip() or None
    return env


# ------------------------------
# Main loader
# ------------------------------


def load(config_file: Optional[str | Path] = None, **overrides: Any) -> Config:
    """
    Load the codec configuration.

    Precedence: overrides > env > file > defaults.

    overrides are section dicts, e.g. ``load(codec={"strict_trailing": True})``.
    """
    base: Dict[str, Any] = defaults().to_dict()

    if config_file:
        base = _merge_dict(base, _load_file(Path(config_file).expanduser()))

    base = _merge_dict(base, _env_layer())

    if overrides:
        base = _merge_dict(base, overrides)

    try:
        strict = base["codec"]["strict_trailing"]
        cfg = Config(
            codec=CodecConfig(
                strict_trailing=_parse_bool(strict) if isinstance(strict, str) else bool(strict),
            ),
            actor=ActorConfig(
                actor_id=int(base["actor"]["actor_id"]),
                codec=int(base["actor"]["codec"]),
            ),
            log=LogConfig(
                level=str(base["log"]["level"]).upper(),
                format=str(base["log"]["format"]).lower(),
                file=base["log"].get("file") or None,
            ),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigError(f"invalid configuration: {e}") from e

    _validate_config(cfg)
    return cfg


def _validate_config(cfg: Config) -> None:
    if not 0 <= cfg.actor.actor_id <= 0xFFFFFFFFFFFFFFFF:
        raise ConfigError("actor.actor_id must be an unsigned 64-bit integer", actor_id=cfg.actor.actor_id)
    if cfg.actor.codec < 0:
        raise ConfigError("actor.codec must be non-negative", codec=cfg.actor.codec)
    if cfg.log.level not in _LOG_LEVELS:
        raise ConfigError(f"unknown log level {cfg.log.level!r}", level=cfg.log.level)
    if cfg.log.format not in _LOG_FORMATS:
        raise ConfigError(f"unknown log format {cfg.log.format!r}", format=cfg.log.format)


# ------------------------------
# CLI helper
# ------------------------------


def main(argv: List[str] | None = None) -> int:
    """
    CLI usage:

        python -m verifreg.config                      # defaults/env; print JSON
        python -m verifreg.config path/to/config.toml  # load file; print JSON
    """
    argv = list(argv if argv is not None else sys.argv[1:])
    path = argv[0] if argv else None
    try:
        cfg = load(path)
    except ConfigError as e:
        print(f"config error: {e}", file=sys.stderr)
        return 2
    print(json.dumps(cfg.to_dict(), indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
