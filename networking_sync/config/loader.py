from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import DEFAULT_RANGE, CredentialsConfig, SheetLocation, SyncConfig

"""Config loader.

Responsibilities:
- Load YAML config (config/sync.yml by default); a missing file means
  "configure everything through the environment"
- Apply environment overrides (env wins, .env already loaded by the CLI)
- Validate against the bundled JSON schema
- Apply defaults (range=A:Z, timezone=UTC, backup_directory=./backups)
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "ENV_OVERRIDES",
    "load_config",
]

DEFAULT_CONFIG_PATH = Path("config/sync.yml")
SCHEMA_PATH = Path(__file__).with_name("schema.json")

# env var -> (section, key); section None = top level
ENV_OVERRIDES: dict[str, tuple[str | None, str]] = {
    "ONBOARDING_FORM_FILE_ID": ("onboarding", "spreadsheet_id"),
    "ONBOARDING_SHEET_NAME": ("onboarding", "sheet_name"),
    "ONBOARDING_SHEET_RANGE": ("onboarding", "range"),
    "NETWORKING_DASHBOARD_FILE_ID": ("networking", "spreadsheet_id"),
    "NETWORKING_SHEET_NAME": ("networking", "sheet_name"),
    "NETWORKING_SHEET_RANGE": ("networking", "range"),
    "GOOGLE_APPLICATION_CREDENTIALS": ("credentials", "service_account_file"),
    "SYNC_TIMEZONE": (None, "timezone"),
}


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: schema file unreadable or the data violates it
    """
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    try:
        jsonschema.validate(data, schema)
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _apply_env_overrides(data: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    merged = {k: (dict(v) if isinstance(v, dict) else v) for k, v in data.items()}
    for var, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(var)
        if not value:
            continue
        if section is None:
            merged[key] = value
        else:
            target = merged.setdefault(section, {})
            if not isinstance(target, dict):
                # schema validation reports the type error
                continue
            target[key] = value
    return merged


def _sheet(raw: dict[str, Any]) -> SheetLocation:
    return SheetLocation(
        spreadsheet_id=raw["spreadsheet_id"],
        sheet_name=raw.get("sheet_name") or None,
        cell_range=raw.get("range") or DEFAULT_RANGE,
    )


def load_config(path: Path = DEFAULT_CONFIG_PATH, environ: Mapping[str, str] | None = None) -> SyncConfig:
    """Build SyncConfig from ``path`` and ``environ`` (os.environ by default)."""
    if environ is None:
        environ = os.environ
    data: dict[str, Any] = {}
    if path.exists():
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid yaml: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"config root must be a mapping: {path}")

    data = _apply_env_overrides(data, environ)
    _validate_config_schema(data)

    tz = data.get("timezone", "UTC")
    try:
        ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"unknown timezone: {tz}") from e

    creds_raw = data.get("credentials") or {}
    credentials = CredentialsConfig(
        service_account_file=creds_raw.get("service_account_file"),
        client_email=environ.get("GOOGLE_CLIENT_EMAIL"),
        private_key=environ.get("GOOGLE_PRIVATE_KEY"),
        project_id=environ.get("GOOGLE_PROJECT_ID"),
        client_id=environ.get("GOOGLE_CLIENT_ID"),
    )
    return SyncConfig(
        onboarding=_sheet(data["onboarding"]),
        networking=_sheet(data["networking"]),
        timezone=tz,
        backup_directory=data.get("backup_directory", "./backups"),
        credentials=credentials,
    )
