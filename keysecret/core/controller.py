"""Interactive get/config/delete flows over the keychain client."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from keysecret.models.secret import Acknowledged, SecretIdentity, SecretRecord
from keysecret.secrets.errors import SecretNotFoundError
from keysecret.secrets.keychain_client import KeychainClient

logger = logging.getLogger(__name__)

# A missing secret may be created once and looked up again, never more.
MAX_GET_RETRIES = 1


class Prompter(Protocol):
    def ask(self, text: str) -> str: ...

    def ask_hidden(self, text: str) -> str: ...

    def confirm(self, text: str) -> bool: ...


class SecretController:
    def __init__(self, client: KeychainClient, prompter: Prompter) -> None:
        self._client = client
        self._prompter = prompter

    def get(self, identity: SecretIdentity, probe: bool = False) -> SecretRecord:
        retries = 0
        while True:
            try:
                return self._client.find(identity, probe=probe)
            except SecretNotFoundError:
                if retries >= MAX_GET_RETRIES:
                    raise
                if not self._prompter.confirm(
                    f"The {identity.name} secret has not been set.\nDo you want to set it now?"
                ):
                    raise
            retries += 1
            value = self._ask_secret(identity)
            self._client.set(identity, value, force=False)
            logger.info("created %s, retrying lookup", identity.name)

    def config(self, identity: SecretIdentity) -> Optional[Acknowledged]:
        try:
            self._client.find(identity)
        except SecretNotFoundError:
            pass
        else:
            if not self._prompter.confirm(
                f"The {identity.name} secret has already been set.\nDo you want to override it?"
            ):
                logger.info("kept existing %s", identity.name)
                return None
        value = self._ask_secret(identity)
        return self._client.set(identity, value, force=True)

    set = config

    def delete(self, identity: SecretIdentity) -> Acknowledged:
        return self._client.remove(identity)

    def _ask_secret(self, identity: SecretIdentity) -> str:
        question = f"{identity.name} secret:"
        while True:
            value = self._prompter.ask_hidden(question)
            if value:
                return value
            question = f"{identity.name} secret is required. Please enter a value:"
