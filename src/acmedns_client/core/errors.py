"""Taxonomía de errores del cliente acme-dns.

Por qué una jerarquía propia:
- El caller decide la política de reintentos (depende del timing de su flujo
  ACME), así que cada error indica si reintentar tiene sentido (`retryable`).
- Las excepciones de httpx/pydantic no salen de la librería: se encadenan
  como `__cause__` para no perder el detalle.
"""

from __future__ import annotations

BODY_SNIPPET_CHARS = 512


def _snippet(body: str | None) -> str:
    if not body:
        return ""
    text = body.strip()
    if len(text) <= BODY_SNIPPET_CHARS:
        return text
    return text[:BODY_SNIPPET_CHARS] + "…"


class AcmeDnsError(Exception):
    """Base de todos los errores de la librería."""

    retryable: bool = False


class ConfigError(AcmeDnsError):
    """Base URL o variables de entorno ausentes/inválidas."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class ValidationError(AcmeDnsError):
    """Entrada local inválida (token TXT, CIDR). No se hizo ninguna petición."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NetworkError(AcmeDnsError):
    """Fallo de transporte: DNS, TCP, TLS o timeout."""

    retryable = True


class _HTTPStatusError(AcmeDnsError):
    def __init__(self, message: str, *, status_code: int, body: str | None = None) -> None:
        self.status_code = status_code
        self.body = _snippet(body)
        detail = f"{message} (HTTP {status_code})"
        if self.body:
            detail = f"{detail}: {self.body}"
        super().__init__(detail)


class AuthError(_HTTPStatusError):
    """El servidor rechazó las credenciales (401/403)."""


class ServerError(_HTTPStatusError):
    """Status no exitoso de un servidor alcanzable."""

    @property
    def retryable(self) -> bool:  # type: ignore[override]
        return self.status_code >= 500


class ParseError(AcmeDnsError):
    """La respuesta no tiene la forma esperada (versión de servidor distinta)."""

    def __init__(self, message: str, *, field: str | None = None, body: str | None = None) -> None:
        self.field = field
        self.body = _snippet(body)
        super().__init__(message)
