"""Keychain client factory based on OS and settings."""

from __future__ import annotations

import platform
from typing import Optional

from keysecret.config.settings import Settings
from keysecret.secrets.errors import SpawnFailureError
from keysecret.secrets.keychain_client import KeychainClient
from keysecret.secrets.process import ProcessRunner


def create_keychain_client(settings: Settings, runner: Optional[ProcessRunner] = None) -> KeychainClient:
    system = platform.system().lower()
    if system != "darwin" and not settings.allow_non_darwin:
        raise SpawnFailureError(
            f"unsupported OS for keychain access: {platform.system()} (supported: macOS)"
        )
    return KeychainClient(
        command=settings.security_command,
        runner=runner,
        timeout_seconds=settings.timeout_seconds,
    )
