"""Settings loader for keysecret."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from keysecret.secrets.keychain_client import DEFAULT_SECURITY_COMMAND

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "keysecret" / "config.yaml"
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR"}


@dataclass(frozen=True)
class Settings:
    security_command: str = DEFAULT_SECURITY_COMMAND
    timeout_seconds: int = 30
    default_account: str = ""
    log_level: str = "WARNING"
    allow_non_darwin: bool = False


class SettingsLoadError(RuntimeError):
    """Raised when settings cannot be loaded."""


def _resolve_path(path: Optional[Path]) -> tuple[Path, bool]:
    if path is not None:
        return path, True
    env_path = os.getenv("KEYSECRET_CONFIG", "").strip()
    if env_path:
        return Path(env_path), True
    return DEFAULT_CONFIG_PATH, False


def _read_raw(path: Path, explicit: bool) -> dict[str, Any]:
    if not path.exists():
        if explicit:
            raise SettingsLoadError(f"config file not found: {path}")
        return {}
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise SettingsLoadError(f"failed to parse YAML config at {path}: {exc}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise SettingsLoadError("config root must be an object")
    return raw


def load_settings(path: Optional[Path] = None) -> Settings:
    config_path, explicit = _resolve_path(path)
    raw = _read_raw(config_path, explicit=explicit)

    security_raw = raw.get("security", {})
    if not isinstance(security_raw, dict):
        raise SettingsLoadError("security must be an object")

    command = os.getenv("KEYSECRET_SECURITY_COMMAND", "").strip() or str(
        security_raw.get("command", DEFAULT_SECURITY_COMMAND)
    ).strip()
    if not command:
        raise SettingsLoadError("security.command must not be empty")

    timeout_raw = os.getenv("KEYSECRET_TIMEOUT_SECONDS", "").strip() or security_raw.get("timeout_seconds", 30)
    try:
        timeout_seconds = int(timeout_raw)
    except (TypeError, ValueError) as exc:
        raise SettingsLoadError(f"invalid security.timeout_seconds: {timeout_raw}") from exc
    if timeout_seconds <= 0:
        raise SettingsLoadError("security.timeout_seconds must be > 0")

    log_level = str(raw.get("log_level", "WARNING")).strip().upper()
    if log_level not in LOG_LEVELS:
        raise SettingsLoadError(f"invalid log_level: {log_level}")

    return Settings(
        security_command=command,
        timeout_seconds=timeout_seconds,
        default_account=str(raw.get("default_account", "") or ""),
        log_level=log_level,
        allow_non_darwin=bool(security_raw.get("allow_non_darwin", False)),
    )
