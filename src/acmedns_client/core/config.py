"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que el cliente HTTP y la CLI lean config de forma consistente.

Las credenciales van en una clase aparte: se generan una vez con `register`
y su ciclo de vida lo controla el caller, no la configuración del cliente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from acmedns_client.core.errors import ConfigError

ENV_PREFIX = "ACME_DNS_"

API_BASE_ENV = "ACME_DNS_API_BASE"
USERNAME_ENV = "ACME_DNS_USERNAME"
PASSWORD_ENV = "ACME_DNS_PASSWORD"
SUBDOMAIN_ENV = "ACME_DNS_SUBDOMAIN"
FULLDOMAIN_ENV = "ACME_DNS_FULLDOMAIN"
ALLOWFROM_ENV = "ACME_DNS_ALLOWFROM"

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_USER_AGENT = "acmedns-client/0.1"


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "acmedns-client"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "acmedns-client"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "acmedns-client"
    return Path.home() / ".config" / "acmedns-client"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


_SETTINGS_CONFIG = SettingsConfigDict(
    env_prefix=ENV_PREFIX,
    extra="ignore",
    case_sensitive=False,
    # Orden: proyecto primero (dev), luego config global de usuario.
    env_file=(".env", str(get_user_env_file())),
    env_file_encoding="utf-8",
)


class AppSettings(BaseSettings):
    """Configuración del cliente acme-dns.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el cliente.
    - Un único contrato de configuración para librería y CLI.
    """

    model_config = _SETTINGS_CONFIG

    api_base: str | None = Field(
        default=None,
        description="Base URL de la API acme-dns (p.ej. https://auth.example.org/).",
    )
    http_timeout_seconds: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        min_length=1,
        description="User-Agent enviado al servidor acme-dns.",
    )
    validate_txt_length: bool = Field(
        default=False,
        description="Exigir tokens TXT de 43 caracteres antes de llamar a /update.",
    )


class CredentialSettings(BaseSettings):
    """Credenciales acme-dns tal como llegan del entorno.

    Todos los campos son opcionales aquí: la comprobación de obligatorios la
    hace `Credentials.from_environment` para poder nombrar cada variable que
    falta en un único `ConfigError`.
    """

    model_config = _SETTINGS_CONFIG

    username: str | None = Field(default=None, description="Usuario emitido por /register.")
    password: str | None = Field(default=None, description="Password emitido por /register.")
    subdomain: str | None = Field(default=None, description="Subdominio asignado.")
    fulldomain: str | None = Field(default=None, description="FQDN destino del CNAME.")
    allowfrom: str | None = Field(
        default=None,
        description="CIDRs permitidos, separados por comas (opcional).",
    )


def load_app_settings(**overrides: object) -> AppSettings:
    """`AppSettings()` con errores de validación traducidos a `ConfigError`."""

    try:
        return AppSettings(**overrides)
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        field = ENV_PREFIX + str(error["loc"][0]).upper() if error.get("loc") else None
        raise ConfigError(f"invalid setting {field}: {error['msg']}", field=field) from exc
