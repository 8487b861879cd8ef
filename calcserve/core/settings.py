"""
Runtime settings.

Defaults live in policies/calculator.yaml. A different YAML file can be
selected with CALCSERVE_CONFIG, and each key can be overridden with a
CALCSERVE_<KEY> environment variable. The merged result is validated
against schemas/settings.schema.json.
"""

import json
import logging
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema
import yaml

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parents[1]
DEFAULT_CONFIG_PATH = BASE_DIR / "policies" / "calculator.yaml"
SCHEMA_PATH = BASE_DIR / "schemas" / "settings.schema.json"

ENV_PREFIX = "CALCSERVE_"
_INT_KEYS = ("max_expression_length", "port")


@dataclass
class Settings:
    """Validated runtime settings."""
    db_path: str = ".calc/calc.db"
    max_expression_length: int = 500
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _load_schema() -> Dict:
    with open(SCHEMA_PATH, "r") as f:
        return json.load(f)


def _env_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for key in Settings.__dataclass_fields__:
        raw = os.getenv(ENV_PREFIX + key.upper())
        if raw is None or raw.strip() == "":
            continue
        raw = raw.strip()
        if key in _INT_KEYS:
            try:
                overrides[key] = int(raw)
            except ValueError:
                raise ValueError(f"{ENV_PREFIX}{key.upper()} must be an integer, got {raw!r}")
        elif key == "log_level":
            overrides[key] = raw.upper()
        else:
            overrides[key] = raw
    return overrides


def load_settings(config_path: Optional[str] = None) -> Settings:
    """Load settings from YAML, apply environment overrides and validate."""
    if config_path is None:
        config_path = os.getenv(ENV_PREFIX + "CONFIG") or str(DEFAULT_CONFIG_PATH)
    path = Path(config_path)

    data: Dict[str, Any] = Settings().to_dict()
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Invalid settings in {path}: expected a mapping")
        data.update(loaded)
    else:
        logger.warning(f"Settings file {path} does not exist, using defaults")

    data.update(_env_overrides())

    try:
        jsonschema.validate(data, _load_schema())
    except jsonschema.ValidationError as e:
        raise ValueError(f"Invalid settings in {path}: {e.message}")

    return Settings(**data)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for process entry points."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
