"""Cliente para la API HTTP de acme-dns (delegación de challenges DNS-01).

Uso típico::

    client = AcmeDnsApiClient("https://auth.example.org/")
    credentials = await client.register()          # una sola vez; guárdalas
    await client.update_txt(credentials, token)    # en cada challenge
"""

from __future__ import annotations

from acmedns_client.adapters.acmedns_api import AcmeDnsApiClient
from acmedns_client.core.config import AppSettings, CredentialSettings
from acmedns_client.core.domain.models import Credentials, UpdateResult
from acmedns_client.core.domain.validation import TXT_TOKEN_LENGTH
from acmedns_client.core.errors import (
    AcmeDnsError,
    AuthError,
    ConfigError,
    NetworkError,
    ParseError,
    ServerError,
    ValidationError,
)

__version__ = "0.1.0"

__all__ = [
    "TXT_TOKEN_LENGTH",
    "AcmeDnsApiClient",
    "AcmeDnsError",
    "AppSettings",
    "AuthError",
    "ConfigError",
    "CredentialSettings",
    "Credentials",
    "NetworkError",
    "ParseError",
    "ServerError",
    "UpdateResult",
    "ValidationError",
]
