"""macOS keychain adapter built on the `security` CLI."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from keysecret.models.secret import PROBE_ORDER, Acknowledged, SecretIdentity, SecretKind, SecretRecord
from keysecret.secrets.codec import code_to_scheme, parse_dump, scheme_to_code
from keysecret.secrets.errors import (
    InvalidSecretTypeError,
    ProcessFailureError,
    SecretAlreadyExistsError,
    SecretNotFoundError,
)
from keysecret.secrets.process import ProcessResult, ProcessRunner, SubprocessRunner

logger = logging.getLogger(__name__)

DEFAULT_SECURITY_COMMAND = "/usr/bin/security"

# errSecItemNotFound / errSecDuplicateItem as reported by `security`.
EXIT_OK = 0
EXIT_ITEM_NOT_FOUND = 44
EXIT_DUPLICATE_ITEM = 45


def subcommand_for(action: str, kind: object) -> str:
    if not isinstance(kind, SecretKind):
        raise InvalidSecretTypeError(f"secret type was '{kind}': must be one of generic, internet")
    return f"{action}-{kind.value}-password"


class KeychainClient:
    def __init__(
        self,
        command: str = DEFAULT_SECURITY_COMMAND,
        runner: Optional[ProcessRunner] = None,
        timeout_seconds: Optional[int] = None,
    ) -> None:
        self._command = command
        self._runner = runner or SubprocessRunner(timeout_seconds=timeout_seconds)

    def find(self, identity: SecretIdentity, probe: bool = False) -> SecretRecord:
        if not probe:
            return self._find_as(identity, identity.kind)

        for kind in PROBE_ORDER:
            try:
                return self._find_as(identity, kind)
            except SecretNotFoundError:
                logger.debug("no %s item for %s, probing next type", kind.value, identity.name)
        raise SecretNotFoundError(f"could not find secret '{identity.name}' in default keychain")

    def set(self, identity: SecretIdentity, secret: str, force: bool = False) -> Acknowledged:
        args = self._build_add_args(identity, secret=secret, force=force)
        result = self._run(args)
        if result.exit_code == EXIT_OK:
            logger.info("stored %s secret %s", identity.kind.value, identity.name)
            return Acknowledged(operation="set", identity=identity)
        if result.exit_code == EXIT_DUPLICATE_ITEM and not force:
            raise SecretAlreadyExistsError(f"secret '{identity.name}' already exists in keychain")
        raise ProcessFailureError(result.exit_code, self._tail(result.output))

    def remove(self, identity: SecretIdentity) -> Acknowledged:
        args = [
            subcommand_for("delete", identity.kind),
            "-a",
            identity.account,
            "-s",
            identity.name,
        ]
        result = self._run(args)
        if result.exit_code == EXIT_OK:
            logger.info("deleted %s secret %s", identity.kind.value, identity.name)
            return Acknowledged(operation="delete", identity=identity)
        if result.exit_code == EXIT_ITEM_NOT_FOUND:
            raise SecretNotFoundError(f"could not find secret '{identity.name}' in default keychain")
        raise ProcessFailureError(result.exit_code, self._tail(result.output))

    def _find_as(self, identity: SecretIdentity, kind: SecretKind) -> SecretRecord:
        args = [
            subcommand_for("find", kind),
            "-a",
            identity.account,
            "-s",
            identity.name,
            "-g",
        ]
        result = self._run(args)
        if result.exit_code == EXIT_ITEM_NOT_FOUND:
            raise SecretNotFoundError(f"could not find secret '{identity.name}' in default keychain")
        if result.exit_code != EXIT_OK:
            raise ProcessFailureError(result.exit_code, self._tail(result.output))
        return self._to_record(identity, kind, result.output)

    @staticmethod
    def _build_add_args(identity: SecretIdentity, secret: str, force: bool) -> list[str]:
        args = [
            subcommand_for("add", identity.kind),
            "-a",
            identity.account,
            "-s",
            identity.name,
            "-w",
            secret,
        ]
        if force:
            args.append("-U")
        if identity.kind is SecretKind.INTERNET:
            if identity.path is not None:
                args.extend(["-p", identity.path])
            code = scheme_to_code(identity.scheme)
            if code is not None:
                args.extend(["-r", code])
        return args

    @staticmethod
    def _to_record(identity: SecretIdentity, kind: SecretKind, output: str) -> SecretRecord:
        dump = parse_dump(output)
        name_field = dump.server if kind is SecretKind.INTERNET else dump.service
        host = dump.server.get(identity.host) if kind is SecretKind.INTERNET else identity.host
        return SecretRecord(
            kind=kind,
            name=name_field.get(identity.name) or identity.name,
            account=dump.account.get(identity.account) or "",
            host=host,
            path=dump.path.get(identity.path),
            scheme=code_to_scheme(dump.protocol.get()) or identity.scheme,
            keychain=dump.keychain.get(),
            label=dump.label.get(),
            password=dump.password.get(),
        )

    def _run(self, args: Sequence[str]) -> ProcessResult:
        logger.debug("running %s %s", self._command, " ".join(self._mask(args)))
        result = self._runner.run(self._command, args)
        logger.debug("%s exited with code %s", args[0], result.exit_code)
        return result

    @staticmethod
    def _mask(args: Sequence[str]) -> list[str]:
        masked = list(args)
        for idx, arg in enumerate(masked[:-1]):
            if arg == "-w":
                masked[idx + 1] = "***"
        return masked

    @staticmethod
    def _tail(text: str, limit: int = 500) -> str:
        clean = (text or "").strip()
        if len(clean) <= limit:
            return clean
        return clean[-limit:]
