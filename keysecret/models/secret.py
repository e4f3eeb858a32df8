"""Secret identity and record contracts.

Both are immutable values passed along the call chain; the keychain itself is
the only persistence layer.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from keysecret.secrets.errors import InvalidSecretTypeError


class SecretKind(str, Enum):
    GENERIC = "generic"
    INTERNET = "internet"

    @classmethod
    def parse(cls, raw: object) -> "SecretKind":
        if isinstance(raw, SecretKind):
            return raw
        value = str(raw or "").strip().lower()
        for kind in cls:
            if kind.value == value:
                return kind
        options = ", ".join(kind.value for kind in cls)
        raise InvalidSecretTypeError(f"secret type was '{raw}': must be one of {options}")


# Fixed order used when the record type is not known in advance.
PROBE_ORDER = (SecretKind.GENERIC, SecretKind.INTERNET)


class SecretIdentity(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: SecretKind
    name: str
    account: str = ""
    host: Optional[str] = None
    path: Optional[str] = None
    scheme: Optional[str] = None

    def with_kind(self, kind: Union[SecretKind, str]) -> "SecretIdentity":
        return self.model_copy(update={"kind": SecretKind.parse(kind)})


class SecretRecord(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: SecretKind
    name: str
    account: str = ""
    host: Optional[str] = None
    path: Optional[str] = None
    scheme: Optional[str] = None
    keychain: Optional[str] = None
    label: Optional[str] = None
    password: Optional[str] = Field(default=None, repr=False)


class Acknowledged(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    operation: Literal["set", "delete"]
    identity: SecretIdentity
