"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- La forma JSON de `Credentials` es exactamente la respuesta de `/register`,
  así que el mismo modelo sirve para parsear y para persistir (lo hace el caller).

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.config import ConfigDict

from acmedns_client.core.config import (
    ALLOWFROM_ENV,
    FULLDOMAIN_ENV,
    PASSWORD_ENV,
    SUBDOMAIN_ENV,
    USERNAME_ENV,
    CredentialSettings,
)
from acmedns_client.core.domain.validation import is_valid_dns_name, split_allowfrom
from acmedns_client.core.errors import ConfigError, ParseError

_ENV_NAMES = {
    "username": USERNAME_ENV,
    "password": PASSWORD_ENV,
    "subdomain": SUBDOMAIN_ENV,
    "fulldomain": FULLDOMAIN_ENV,
    "allowfrom": ALLOWFROM_ENV,
}
_REQUIRED = ("username", "password", "subdomain", "fulldomain")


class Credentials(BaseModel):
    """Credenciales de una identidad acme-dns.

    Por qué es inmutable:
    - Se obtienen una única vez con `register` y desde ahí son estado del
      caller; la librería nunca las modifica ni las guarda.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    username: str = Field(
        ...,
        min_length=1,
        description="Token de usuario emitido por el servidor.",
    )
    password: str = Field(
        ...,
        min_length=1,
        repr=False,
        description="Secreto emitido por el servidor.",
    )
    subdomain: str = Field(
        ...,
        min_length=1,
        description="Subdominio asignado (etiqueta tipo UUID).",
    )
    fulldomain: str = Field(
        ...,
        min_length=1,
        description="Nombre completo al que debe apuntar el CNAME del caller.",
    )
    allowfrom: list[str] = Field(
        default_factory=list,
        description="CIDRs que pueden enviar updates (vacío = sin restricción).",
    )

    @field_validator("allowfrom", mode="before")
    @classmethod
    def _none_is_empty(cls, value: object) -> object:
        return [] if value is None else value

    @field_validator("fulldomain")
    @classmethod
    def _check_fulldomain(cls, value: str) -> str:
        if not is_valid_dns_name(value):
            raise ValueError(f"not a valid DNS name: {value!r}")
        return value

    # -- codecs -----------------------------------------------------------

    @classmethod
    def from_dict(cls, data: object) -> "Credentials":
        """Valida un dict con la forma de la respuesta de `/register`."""

        if not isinstance(data, Mapping):
            raise ParseError(
                f"expected a JSON object with credentials, got {type(data).__name__}",
            )
        try:
            return cls.model_validate(dict(data))
        except PydanticValidationError as exc:
            field = _first_error_field(exc)
            raise ParseError(
                f"invalid credentials field {field!r}: {exc.errors()[0]['msg']}",
                field=field,
            ) from exc

    @classmethod
    def from_json(cls, text: str) -> "Credentials":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ParseError("credentials are not valid JSON", body=text) from exc
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def to_json(self, *, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    def to_env(self) -> dict[str, str]:
        """Mapa plano de variables de entorno (inverso de `from_environment`)."""

        return {
            USERNAME_ENV: self.username,
            PASSWORD_ENV: self.password,
            SUBDOMAIN_ENV: self.subdomain,
            FULLDOMAIN_ENV: self.fulldomain,
            ALLOWFROM_ENV: ",".join(self.allowfrom),
        }

    @classmethod
    def from_environment(cls, settings: CredentialSettings | None = None) -> "Credentials":
        """Carga credenciales desde `ACME_DNS_*` (entorno o `.env`).

        Requeridas: USERNAME, PASSWORD, SUBDOMAIN, FULLDOMAIN.
        Opcional: ALLOWFROM (CIDRs separados por comas).
        """

        settings = settings or CredentialSettings()
        values: dict[str, str] = {}
        missing: list[str] = []
        for attr in _REQUIRED:
            value = getattr(settings, attr)
            if not value or not value.strip():
                missing.append(_ENV_NAMES[attr])
                continue
            values[attr] = value
        if missing:
            raise ConfigError(
                "missing required environment variable(s): " + ", ".join(missing),
                field=missing[0],
            )

        try:
            return cls(allowfrom=split_allowfrom(settings.allowfrom), **values)
        except PydanticValidationError as exc:
            env_name = _ENV_NAMES.get(_first_error_field(exc) or "", ALLOWFROM_ENV)
            raise ConfigError(
                f"invalid value in {env_name}: {exc.errors()[0]['msg']}",
                field=env_name,
            ) from exc

    def challenge_cname(self, domain: str) -> str:
        """Registro CNAME que delega el challenge DNS-01 de `domain`."""

        name = domain.strip().rstrip(".")
        if name.startswith("*."):
            name = name[2:]
        return f"_acme-challenge.{name} CNAME {self.fulldomain}"


class UpdateResult(BaseModel):
    """Confirmación de `/update`: el servidor devuelve el TXT que almacenó."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    txt: str = Field(..., description="Valor TXT almacenado por el servidor.")


def _first_error_field(exc: PydanticValidationError) -> str | None:
    errors = exc.errors()
    if not errors or not errors[0].get("loc"):
        return None
    return str(errors[0]["loc"][0])
