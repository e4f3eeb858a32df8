"""Classify a service string into a keychain identity."""

from __future__ import annotations

from urllib.parse import urlsplit

from keysecret.models.secret import SecretIdentity, SecretKind

_DEFAULT_PORTS = {"http": 80, "https": 443}


def classify(service: str, account: str = "") -> SecretIdentity:
    """Return an internet identity for a URL with scheme and host, else a generic one.

    Pure: no I/O, and a non-URL string is kept verbatim as the generic name.
    A non-default port stays part of the host, so `example.com:8443` and
    `example.com` are distinct identities.
    """
    try:
        parts = urlsplit(service)
        hostname = parts.hostname
        port = parts.port
    except ValueError:
        return SecretIdentity(kind=SecretKind.GENERIC, name=service, account=account)

    if not parts.scheme or not hostname:
        return SecretIdentity(kind=SecretKind.GENERIC, name=service, account=account)

    scheme = parts.scheme.lower()
    host = hostname
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        host = f"{hostname}:{port}"

    return SecretIdentity(
        kind=SecretKind.INTERNET,
        name=host,
        account=account,
        host=host,
        path=parts.path or "/",
        scheme=f"{scheme}:",
    )
