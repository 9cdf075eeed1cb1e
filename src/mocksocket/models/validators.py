"""Shared validators for mocksocket constructor and close arguments."""

from collections.abc import Sequence
from typing import Any
from urllib.parse import urlsplit, urlunsplit

from mocksocket.errors import InvalidProtocolError, InvalidURLError
from mocksocket.models.constants import (
    ALLOWED_URL_SCHEMES,
    CONSTRUCTOR_ERROR_PREFIX,
    PROTOCOL_SEPARATORS,
)

_DEFAULT_PORTS = {"ws": 80, "wss": 443}


def validate_url(url: Any) -> str:
    """Validate a WebSocket URL and return its normalized form.

    The scheme and host are lower-cased, default ports are dropped and an
    empty path becomes ``/``, so ``ws://LOCALHOST:80`` and ``ws://localhost/``
    address the same server.

    Raises:
        InvalidURLError: If the URL is empty, unparsable, not ws/wss, has no
            host, or carries a fragment identifier.

    Example:
        >>> validate_url("ws://Example.com:80")
        'ws://example.com/'
    """
    if not url:
        raise InvalidURLError(
            url, f"{CONSTRUCTOR_ERROR_PREFIX} 1 argument required, but only 0 present."
        )
    if not isinstance(url, str):
        raise InvalidURLError(url, f"{CONSTRUCTOR_ERROR_PREFIX} The URL '{url}' is invalid.")

    try:
        parts = urlsplit(url.strip())
        port = parts.port
    except ValueError as e:
        raise InvalidURLError(url, f"{CONSTRUCTOR_ERROR_PREFIX} The URL '{url}' is invalid.") from e

    scheme = parts.scheme.lower()
    if not scheme:
        raise InvalidURLError(url, f"{CONSTRUCTOR_ERROR_PREFIX} The URL '{url}' is invalid.")
    if scheme not in ALLOWED_URL_SCHEMES:
        raise InvalidURLError(
            url,
            f"{CONSTRUCTOR_ERROR_PREFIX} The URL's scheme must be either 'ws' or 'wss'. "
            f"'{scheme}:' is not allowed.",
        )
    if not parts.hostname:
        raise InvalidURLError(url, f"{CONSTRUCTOR_ERROR_PREFIX} The URL '{url}' is invalid.")
    if parts.fragment:
        raise InvalidURLError(
            url,
            f"{CONSTRUCTOR_ERROR_PREFIX} The URL contains a fragment identifier "
            f"('#{parts.fragment}'). Fragment identifiers are not allowed in WebSocket URLs.",
        )

    host = parts.hostname
    netloc = f"[{host}]" if ":" in host else host
    if port is not None and port != _DEFAULT_PORTS[scheme]:
        netloc = f"{netloc}:{port}"
    userinfo, at, _ = parts.netloc.rpartition("@")
    if at:
        netloc = f"{userinfo}@{netloc}"

    return urlunsplit((scheme, netloc, parts.path or "/", parts.query, ""))


def _is_token(name: str) -> bool:
    return bool(name) and all(
        0x21 <= ord(ch) <= 0x7E and ch not in PROTOCOL_SEPARATORS for ch in name
    )


def validate_protocols(protocols: Any = None) -> list[str]:
    """Validate requested sub-protocols and return them as an ordered list.

    Accepts None (no protocols), a single name, or a sequence of names.

    Raises:
        InvalidProtocolError: If a name is not a valid token or is requested twice.

    Example:
        >>> validate_protocols("chat")
        ['chat']
        >>> validate_protocols(["chat", "superchat"])
        ['chat', 'superchat']
    """
    if protocols is None:
        return []
    if isinstance(protocols, str):
        protocols = [protocols]
    elif not isinstance(protocols, Sequence) or isinstance(protocols, (bytes, bytearray)):
        raise InvalidProtocolError(
            protocols, f"{CONSTRUCTOR_ERROR_PREFIX} The subprotocol '{protocols}' is invalid."
        )

    seen: set[str] = set()
    result: list[str] = []
    for protocol in protocols:
        if not isinstance(protocol, str) or not _is_token(protocol):
            raise InvalidProtocolError(
                protocol, f"{CONSTRUCTOR_ERROR_PREFIX} The subprotocol '{protocol}' is invalid."
            )
        if protocol in seen:
            raise InvalidProtocolError(
                protocol, f"{CONSTRUCTOR_ERROR_PREFIX} The subprotocol '{protocol}' is duplicated."
            )
        seen.add(protocol)
        result.append(protocol)
    return result


def utf8_byte_length(text: str) -> int:
    """Return the length of ``text`` once encoded as UTF-8.

    Lone surrogates count as three bytes each, as a browser would encode them.
    """
    return len(text.encode("utf-8", errors="surrogatepass"))
