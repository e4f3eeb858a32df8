"""Text protocol of the `security` tool.

`find-*-password -g` prints a dump like:

    keychain: "/Users/bob/Library/Keychains/login.keychain-db"
    attributes:
        0x00000007 <blob>="example.com"
        "acct"<blob>="bob"
        "ptcl"<uint32>="htps"
        "srvr"<blob>="example.com"
    password: 0x68656C6C6F  "hello"

Values are double-quoted, the `<NULL>` placeholder, or `0x`-prefixed hex.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

NULL_TOKEN = "<NULL>"

_HEX_VALUE = re.compile(r"^0x([0-9a-fA-F]+)")
_QUOTED_VALUE = re.compile(r'"(.*)"')

# Order matters only for readability; each pattern is matched independently.
_DUMP_PATTERNS: dict[str, re.Pattern[str]] = {
    "keychain": re.compile(r"keychain: (.*)"),
    "account": re.compile(r'"acct"<\w+>=(.*)'),
    "service": re.compile(r'"svce"<\w+>=(.*)'),
    "server": re.compile(r'"srvr"<\w+>=(.*)'),
    "path": re.compile(r'"path"<\w+>=(.*)'),
    "protocol": re.compile(r'"ptcl"<\w+>=(.*)'),
    "password": re.compile(r"^password: (.*)", re.MULTILINE),
    "label": re.compile(r"0x00000007 <\w+>=(.*)"),
}

_SCHEME_TO_CODE = {
    "https:": "htps",
    "http:": "http",
}
_CODE_TO_SCHEME = {code: scheme for scheme, code in _SCHEME_TO_CODE.items()}


class FieldState(str, Enum):
    ABSENT = "absent"
    NULL = "null"
    PRESENT = "present"


@dataclass(frozen=True)
class DumpField:
    state: FieldState
    value: Optional[str] = None

    @classmethod
    def absent(cls) -> "DumpField":
        return cls(state=FieldState.ABSENT)

    @classmethod
    def decoded(cls, value: Optional[str]) -> "DumpField":
        if value is None:
            return cls(state=FieldState.NULL)
        return cls(state=FieldState.PRESENT, value=value)

    @property
    def is_present(self) -> bool:
        return self.state is FieldState.PRESENT

    def get(self, default: Optional[str] = None) -> Optional[str]:
        if self.state is FieldState.PRESENT:
            return self.value
        return default


@dataclass(frozen=True)
class KeychainDump:
    keychain: DumpField
    account: DumpField
    service: DumpField
    server: DumpField
    path: DumpField
    protocol: DumpField
    password: DumpField
    label: DumpField


def decode_field(raw: str) -> Optional[str]:
    """Decode one attribute value; `None` means the store reported `<NULL>`."""
    value = raw.rstrip("\r")
    if value.strip() == NULL_TOKEN:
        return None
    hex_match = _HEX_VALUE.match(value)
    if hex_match:
        digits = hex_match.group(1)
        if len(digits) % 2:
            digits = digits[:-1]
        return bytes.fromhex(digits).decode("utf-8", errors="replace")
    quoted = _QUOTED_VALUE.search(value)
    if quoted:
        return quoted.group(1)
    return value


def parse_dump(text: str) -> KeychainDump:
    fields: dict[str, DumpField] = {}
    for name, pattern in _DUMP_PATTERNS.items():
        match = pattern.search(text)
        if match is None:
            fields[name] = DumpField.absent()
            continue
        fields[name] = DumpField.decoded(decode_field(match.group(1)))
    return KeychainDump(**fields)


def scheme_to_code(scheme: Optional[str]) -> Optional[str]:
    if scheme is None:
        return None
    return _SCHEME_TO_CODE.get(scheme)


def code_to_scheme(code: Optional[str]) -> Optional[str]:
    if code is None:
        return None
    return _CODE_TO_SCHEME.get(code)
