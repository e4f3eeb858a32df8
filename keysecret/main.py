"""keysecret command-line entrypoint."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from keysecret.cli.prompter import ConsolePrompter
from keysecret.config.settings import SettingsLoadError, load_settings
from keysecret.core.controller import Prompter, SecretController
from keysecret.core.identity import classify
from keysecret.models.secret import SecretIdentity
from keysecret.secrets.errors import SecretNotFoundError, SecretStoreError
from keysecret.secrets.factory import create_keychain_client

logger = logging.getLogger("keysecret")

EXIT_NOT_FOUND = 1
EXIT_FAILURE = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="keysecret", description="Manage secrets in the macOS keychain")
    parser.add_argument("--config", type=Path, help="Path to config YAML (default: ~/.config/keysecret/config.yaml)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    for name, help_text in [
        ("get", "Print a secret, offering to create it when missing"),
        ("set", "Store a secret, asking before overriding"),
        ("config", "Alias of set"),
        ("delete", "Delete a secret"),
    ]:
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("service", nargs="?", help="Service name or URL")
        cmd.add_argument("--account", help="Account name (default: from config)")
        kind_group = cmd.add_mutually_exclusive_group()
        kind_group.add_argument("--type", dest="kind", help="Record type: generic or internet")
        if name == "get":
            kind_group.add_argument(
                "--probe",
                action="store_true",
                help="Try generic then internet records",
            )
            cmd.add_argument("--json", action="store_true", help="Print record metadata as JSON")
    return parser


def _resolve_identity(args: argparse.Namespace, account: str, prompter: Prompter) -> Optional[SecretIdentity]:
    service = args.service
    if not service:
        service = prompter.ask("service:").strip()
    if not service:
        return None
    identity = classify(service, account)
    if args.kind:
        identity = identity.with_kind(args.kind)
    return identity


def run(args: argparse.Namespace, controller: SecretController, prompter: Prompter, account: str) -> int:
    identity = _resolve_identity(args, account=account, prompter=prompter)
    if identity is None:
        print("Error: service is required.", file=sys.stderr)
        return EXIT_FAILURE

    if args.command == "get":
        record = controller.get(identity, probe=bool(getattr(args, "probe", False)))
        if args.json:
            print(record.model_dump_json(exclude={"password"}, indent=2))
        else:
            print(record.password or "")
        return 0

    if args.command in {"set", "config"}:
        ack = controller.config(identity)
        if ack is None:
            print(f"Kept existing {identity.name} secret.")
        else:
            print(f"{identity.name} secret set.")
        return 0

    controller.delete(identity)
    print(f"{identity.name} secret deleted.")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        settings = load_settings(args.config)
    except SettingsLoadError as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    prompter = ConsolePrompter()
    account = args.account if args.account is not None else settings.default_account
    try:
        client = create_keychain_client(settings)
        controller = SecretController(client, prompter)
        return run(args, controller=controller, prompter=prompter, account=account)
    except SecretNotFoundError as exc:
        logger.debug("not found: %s", exc)
        print(f"Not found: {exc}", file=sys.stderr)
        return EXIT_NOT_FOUND
    except SecretStoreError as exc:
        logger.debug("%s failed: %s", args.command, exc)
        print(f"Error ({exc.kind.value}): {exc}", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    raise SystemExit(main())
