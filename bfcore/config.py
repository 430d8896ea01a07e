"""
Virtual machine configuration.

A VMConfig is built once (defaults, then environment, then an optional
YAML/JSON config file, then command line overrides) and never mutated
afterwards; the interpreter only reads it.
"""

import json
import os
from dataclasses import dataclass, asdict, fields, replace
from typing import Any, Dict, Mapping, Optional

import yaml

from bfcore.errors import InvalidConfiguration

MIN_CELL_BITS = 1
MAX_CELL_BITS = 64

EOF_UNCHANGED = "unchanged"
EOF_ZERO = "zero"
EOF_MAX = "max"
EOF_HALT = "halt"
EOF_POLICIES = (EOF_UNCHANGED, EOF_ZERO, EOF_MAX, EOF_HALT)

# Environment variables consulted by config_from_env (a .env file works too)
ENV_VARS = {
    "cell_bits": "BF_CELL_SIZE",
    "cell_wrapping": "BF_CELL_WRAPPING",
    "initial_tape_size": "BF_TAPE_SIZE",
    "tape_wrapping": "BF_TAPE_WRAPPING",
    "dynamic_tape": "BF_DYNAMIC_TAPE",
    "debug_enabled": "BF_DEBUG",
    "eof_behavior": "BF_EOF",
    "step_limit": "BF_STEP_LIMIT",
}

_TRUE_WORDS = ("on", "1", "true", "yes", "enabled")
_FALSE_WORDS = ("off", "0", "false", "no", "disabled")


def parse_switch(value: Any, name: str = "value") -> bool:
    """Accept on/off style switches from files, env vars and the command line."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    text = str(value).strip().lower()
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise InvalidConfiguration(f'{name} must be "on" or "off", got {value!r}')


def _parse_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidConfiguration(f"{name} must be an integer, got {value!r}") from None


@dataclass(frozen=True)
class VMConfig:
    """Configuration parameters for one interpreter run."""
    cell_bits: int = 8
    cell_wrapping: bool = True
    initial_tape_size: int = 1
    dynamic_tape: bool = True
    tape_wrapping: bool = False
    debug_enabled: bool = False
    eof_behavior: str = EOF_UNCHANGED
    step_limit: Optional[int] = None  # None runs until the program ends

    def __post_init__(self):
        if isinstance(self.cell_bits, bool) or not isinstance(self.cell_bits, int):
            raise InvalidConfiguration(f"cell_bits must be an integer, got {self.cell_bits!r}")
        if not MIN_CELL_BITS <= self.cell_bits <= MAX_CELL_BITS:
            raise InvalidConfiguration(
                f"cell_bits must be a number between {MIN_CELL_BITS} and {MAX_CELL_BITS}, got {self.cell_bits}"
            )
        if isinstance(self.initial_tape_size, bool) or not isinstance(self.initial_tape_size, int):
            raise InvalidConfiguration(f"initial_tape_size must be an integer, got {self.initial_tape_size!r}")
        if self.initial_tape_size < 1:
            raise InvalidConfiguration(
                f"initial_tape_size must be at least 1, got {self.initial_tape_size}"
            )
        if self.eof_behavior not in EOF_POLICIES:
            raise InvalidConfiguration(
                f"eof_behavior must be one of {', '.join(EOF_POLICIES)}, got {self.eof_behavior!r}"
            )
        if self.step_limit is not None and (
            isinstance(self.step_limit, bool) or not isinstance(self.step_limit, int) or self.step_limit < 1
        ):
            raise InvalidConfiguration(f"step_limit must be a positive integer, got {self.step_limit!r}")

    @property
    def cell_max(self) -> int:
        """Largest value a cell can hold."""
        return (1 << self.cell_bits) - 1

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def merged(self, overrides: Mapping[str, Any]) -> "VMConfig":
        """Return a new config with the given (raw) overrides applied on top of this one."""
        return replace(self, **coerce_fields(overrides))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "VMConfig":
        return cls(**coerce_fields(data))


def coerce_fields(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert raw values (strings from env/CLI, YAML scalars) into typed config fields.

    Keys whose value is None are skipped so that "not given" never overrides.
    Unknown keys are rejected.
    """
    known = {f.name for f in fields(VMConfig)}
    out: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            raise InvalidConfiguration(f"unknown configuration key {key!r}")
        if value is None:
            continue
        if key in ("cell_bits", "initial_tape_size", "step_limit"):
            out[key] = _parse_int(value, key)
        elif key in ("cell_wrapping", "dynamic_tape", "tape_wrapping", "debug_enabled"):
            out[key] = parse_switch(value, key)
        elif key == "eof_behavior":
            out[key] = str(value).strip().lower()
    return out


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Collect raw overrides from BF_* environment variables."""
    environ = os.environ if environ is None else environ
    raw: Dict[str, Any] = {}
    for field_name, var in ENV_VARS.items():
        value = environ.get(var)
        if value is not None and value.strip() != "":
            raw[field_name] = value
    return raw


def load_config_file(path: str) -> Dict[str, Any]:
    """Load raw overrides from a YAML or JSON file (chosen by extension)."""
    try:
        with open(path, 'r') as f:
            if path.endswith(('.yml', '.yaml')):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except OSError as e:
        raise InvalidConfiguration(f"unable to read config file {path}: {e}") from e
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise InvalidConfiguration(f"unable to parse config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfiguration(f"config file {path} must contain a mapping")
    # Allow the settings to live under a top-level "vm" section
    if "vm" in data and isinstance(data["vm"], dict):
        data = data["vm"]
    return dict(data)


def build_config(file_path: Optional[str] = None,
                 overrides: Optional[Mapping[str, Any]] = None,
                 environ: Optional[Mapping[str, str]] = None) -> VMConfig:
    """Layer defaults < environment < config file < explicit overrides."""
    config = VMConfig().merged(config_from_env(environ))
    if file_path:
        config = config.merged(load_config_file(file_path))
    if overrides:
        config = config.merged(overrides)
    return config
