"""
config.py

Typed configuration loading and validation for catchsim.

Design goals
- Load at most one UTF-8 JSON config file
- Validate with pydantic (defaults included)
- Support environment variable overrides
- Running without any config file is allowed and yields defaults

Config file location
- If CATCHSIM_CONFIG_PATH is set, that file is used (and must exist).
- Otherwise catchsim searches these paths in order and uses the first one that exists:
  1) ./catchsim_config.json (current working directory)
  2) <user config dir>/catchsim/catchsim_config.json

Example config file (catchsim_config.json)
{
  "simulation": {
    "default_accuracy_percent": 100,
    "default_percent_combo": 100,
    "default_mods": ["HR"]
  },
  "output": {
    "format": "text",
    "attribute_padding": 15
  },
  "logging": {
    "level": "warning"
  }
}
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from platformdirs import user_config_dir
from pydantic import BaseModel, Field, ValidationError, field_validator


class SimulationConfig(BaseModel):
    default_accuracy_percent: float = Field(default=100.0, ge=0.0, le=100.0, description="Accuracy used when -a is omitted.")
    default_percent_combo: float = Field(default=100.0, ge=0.0, le=100.0, description="Percent of max combo used when -c is omitted.")
    default_mods: List[str] = Field(default_factory=list, description="Mod acronyms applied when -m is omitted.")

    @field_validator("default_mods")
    @classmethod
    def normalize_mods(cls, value: List[str]) -> List[str]:
        return [item.strip().upper() for item in value if item and item.strip()]


class OutputConfig(BaseModel):
    format: str = Field(default="text", description="text or json")
    attribute_padding: int = Field(default=15, ge=0, le=80, description="Name column width for text output.")

    @field_validator("format")
    @classmethod
    def validate_format(cls, value: str) -> str:
        normalized = (value or "").strip().lower()
        if normalized not in {"text", "json"}:
            raise ValueError("format must be one of: text, json")
        return normalized


class LoggingConfig(BaseModel):
    level: str = Field(default="warning", description="debug, info, warning, error")

    @field_validator("level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        normalized = (value or "").strip().lower()
        if normalized not in {"debug", "info", "warning", "error", "critical"}:
            raise ValueError("level must be one of: debug, info, warning, error, critical")
        return normalized


class AppConfig(BaseModel):
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _default_config_candidates() -> List[Path]:
    config_directory = Path(user_config_dir("catchsim", appauthor=False))
    return [
        Path.cwd() / "catchsim_config.json",
        config_directory / "catchsim_config.json",
    ]


def _resolve_config_path() -> Optional[Path]:
    explicit_path_text = os.environ.get("CATCHSIM_CONFIG_PATH", "").strip()
    if explicit_path_text:
        return Path(explicit_path_text)

    for candidate_path in _default_config_candidates():
        if candidate_path.exists():
            return candidate_path

    return None


def _read_json_file_utf8(config_path: Path) -> Dict[str, Any]:
    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except OSError as exception:
        raise OSError(f"Failed to read config file: {config_path}. Error: {exception}") from exception

    try:
        parsed = json.loads(raw_text)
    except json.JSONDecodeError as exception:
        raise ValueError(f"Config file is not valid JSON: {config_path}. Error: {exception}") from exception

    if not isinstance(parsed, dict):
        raise ValueError(f"Config file root must be a JSON object: {config_path}")

    return parsed


def _apply_environment_overrides(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Override variables:
    - CATCHSIM_DEFAULT_ACCURACY
    - CATCHSIM_DEFAULT_PERCENT_COMBO
    - CATCHSIM_OUTPUT_FORMAT
    - CATCHSIM_LOG_LEVEL
    """
    def ensure_nested(config_root: Dict[str, Any], section_name: str) -> Dict[str, Any]:
        section = config_root.get(section_name)
        if isinstance(section, dict):
            section = dict(section)
        else:
            section = {}
        config_root[section_name] = section
        return section

    updated_config = dict(config_dict)

    simulation_section = ensure_nested(updated_config, "simulation")
    output_section = ensure_nested(updated_config, "output")
    logging_section = ensure_nested(updated_config, "logging")

    def override_string(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "")
        if value_text.strip():
            target_dict[key_name] = value_text.strip()

    def override_float(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "").strip()
        if not value_text:
            return
        try:
            target_dict[key_name] = float(value_text)
        except ValueError:
            return

    override_float("CATCHSIM_DEFAULT_ACCURACY", simulation_section, "default_accuracy_percent")
    override_float("CATCHSIM_DEFAULT_PERCENT_COMBO", simulation_section, "default_percent_combo")
    override_string("CATCHSIM_OUTPUT_FORMAT", output_section, "format")
    override_string("CATCHSIM_LOG_LEVEL", logging_section, "level")

    return updated_config


def load_config(config_path: Optional[Path] = None) -> Tuple[AppConfig, Optional[Path]]:
    resolved_path = config_path if config_path is not None else _resolve_config_path()
    json_dict: Dict[str, Any] = {}
    if resolved_path is not None:
        json_dict = _read_json_file_utf8(resolved_path)
    json_dict = _apply_environment_overrides(json_dict)

    try:
        config = AppConfig.model_validate(json_dict)
    except ValidationError as exception:
        source_text = str(resolved_path) if resolved_path is not None else "defaults and environment"
        raise ValueError(f"Config validation failed for {source_text}:\n{exception}") from exception

    return config, resolved_path


@lru_cache(maxsize=1)
def get_config() -> Tuple[AppConfig, Optional[Path]]:
    return load_config()


def main() -> int:
    try:
        config, resolved_path = load_config()
    except Exception as exception:
        error_payload = {"ok": False, "error": str(exception)}
        print(json.dumps(error_payload, ensure_ascii=False, indent=2))
        return 2

    output_payload = {
        "ok": True,
        "config_path": str(resolved_path) if resolved_path is not None else None,
        "config": config.model_dump(),
    }
    print(json.dumps(output_payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
