"""Validaciones locales de forma (sin I/O).

Todo lo que se puede rechazar antes de tocar la red vive aquí: base URL,
token TXT, CIDRs de allowfrom y nombres DNS.
"""

from __future__ import annotations

import ipaddress
import re
from collections.abc import Iterable
from urllib.parse import urlsplit, urlunsplit

from pydantic import AnyHttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from acmedns_client.core.errors import ConfigError, ValidationError

# base64url(SHA-256) sin padding, el valor que ACME publica en DNS-01.
TXT_TOKEN_LENGTH = 43

_HTTP_URL = TypeAdapter(AnyHttpUrl)
_DNS_LABEL_RE = re.compile(r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$")


def parse_base_url(raw: str | None) -> str:
    """Valida la base URL y la normaliza con `/` final.

    El `/` final hace que `join("register")` conserve un prefijo de ruta
    (p.ej. `https://host/acme-dns/` -> `https://host/acme-dns/register`).
    """

    if raw is None or not raw.strip():
        raise ConfigError("acme-dns base URL is empty", field="base_url")
    try:
        url = _HTTP_URL.validate_python(raw.strip())
    except PydanticValidationError as exc:
        raise ConfigError(
            f"invalid acme-dns base URL {raw!r}: {exc.errors()[0]['msg']}",
            field="base_url",
        ) from exc
    if not url.host:
        raise ConfigError(f"acme-dns base URL has no host: {raw!r}", field="base_url")

    parts = urlsplit(str(url))
    path = parts.path if parts.path.endswith("/") else parts.path + "/"
    return urlunsplit((parts.scheme, parts.netloc, path, "", ""))


def validate_txt_value(txt: str | None, *, check_length: bool) -> str:
    if txt is None or not isinstance(txt, str) or not txt.strip():
        raise ValidationError("TXT value is required", field="txt")
    if txt != txt.strip():
        raise ValidationError("TXT value has leading or trailing whitespace", field="txt")
    if check_length and len(txt) != TXT_TOKEN_LENGTH:
        raise ValidationError(
            f"TXT value must be exactly {TXT_TOKEN_LENGTH} characters, got {len(txt)}",
            field="txt",
        )
    return txt


def validate_header_value(value: str, *, field: str) -> str:
    """Las credenciales viajan en cabeceras HTTP: solo ASCII imprimible."""

    if not value.isascii() or not value.isprintable():
        raise ValidationError(f"{field} must be printable ASCII to be sent as a header", field=field)
    return value


def validate_allowfrom(entries: Iterable[str]) -> list[str]:
    """Comprueba que cada entrada sea una red/IP (como hace el servidor).

    Se acepta notación no estricta (`192.168.100.1/24`), igual que acme-dns.
    """

    out: list[str] = []
    for entry in entries:
        value = entry.strip() if isinstance(entry, str) else ""
        try:
            ipaddress.ip_network(value, strict=False)
        except ValueError as exc:
            raise ValidationError(f"invalid allowfrom CIDR: {entry!r}", field="allowfrom") from exc
        out.append(value)
    return out


def split_allowfrom(raw: str | None) -> list[str]:
    """`"a, b,,c"` -> `["a", "b", "c"]`; vacío o None -> `[]`."""

    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def is_valid_dns_name(name: str) -> bool:
    if not name:
        return False
    name = name[:-1] if name.endswith(".") else name
    if not name or len(name) > 253:
        return False
    return all(_DNS_LABEL_RE.match(label) for label in name.split("."))
