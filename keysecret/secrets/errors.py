"""Keychain error taxonomy.

Every failure surfaced by the keychain layer is one of the subclasses below.
Callers match on the exception type (or `kind`), never on its name.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    INVALID_TYPE = "invalid_type"
    SPAWN_FAILURE = "spawn_failure"
    PROCESS_FAILURE = "process_failure"


class SecretStoreError(RuntimeError):
    """Base for all keychain failures."""

    kind: ErrorKind


class SecretNotFoundError(SecretStoreError):
    """Raised when the keychain has no matching item."""

    kind = ErrorKind.NOT_FOUND


class SecretAlreadyExistsError(SecretStoreError):
    """Raised when adding an item that exists without forcing an update."""

    kind = ErrorKind.ALREADY_EXISTS


class InvalidSecretTypeError(SecretStoreError):
    """Raised for a record type outside generic/internet."""

    kind = ErrorKind.INVALID_TYPE


class SpawnFailureError(SecretStoreError):
    """Raised when the security tool cannot be launched at all."""

    kind = ErrorKind.SPAWN_FAILURE


class ProcessFailureError(SecretStoreError):
    """Raised for any unrecognized non-zero exit of the security tool."""

    kind = ErrorKind.PROCESS_FAILURE

    def __init__(self, exit_code: int, detail: Optional[str] = None) -> None:
        message = f"security exited with code {exit_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.exit_code = exit_code
        self.detail = detail
