"""Process execution primitive for the security tool."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from keysecret.secrets.errors import SpawnFailureError

TIMEOUT_EXIT_CODE = 124


@dataclass(frozen=True)
class ProcessResult:
    exit_code: int
    output: str


class ProcessRunner(Protocol):
    def run(self, command: str, args: Sequence[str]) -> ProcessResult:
        """Run to completion and return exit code plus combined output."""


class SubprocessRunner:
    """Runs the tool with stderr merged into stdout.

    `subprocess.run` drains both pipes before returning, so the exit code is
    only observed once all output has been captured.
    """

    def __init__(self, timeout_seconds: Optional[int] = None) -> None:
        self._timeout_seconds = timeout_seconds

    def run(self, command: str, args: Sequence[str]) -> ProcessResult:
        cmd = [command, *args]
        try:
            proc = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                encoding="utf-8",
                errors="replace",
                timeout=self._timeout_seconds,
                check=False,
            )
        except FileNotFoundError as exc:
            raise SpawnFailureError(f"security tool not found: {command}") from exc
        except PermissionError as exc:
            raise SpawnFailureError(f"security tool is not executable: {command}") from exc
        except subprocess.TimeoutExpired as exc:
            output = exc.output if isinstance(exc.output, str) else ""
            return ProcessResult(exit_code=TIMEOUT_EXIT_CODE, output=output or "timed out")
        except OSError as exc:
            raise SpawnFailureError(f"security tool could not be launched: {command}: {exc}") from exc
        return ProcessResult(exit_code=int(proc.returncode), output=proc.stdout or "")
