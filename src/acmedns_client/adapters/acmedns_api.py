"""Cliente async para la API HTTP de acme-dns.

Responsabilidad:
- `/health`: comprobación sin autenticación.
- `/register`: alta de una identidad nueva (subdominio + credenciales).
- `/update`: publicar el token TXT de un challenge DNS-01.

Flujo típico:
1. `register()` una sola vez y guardar las `Credentials` (lo hace el caller).
2. Crear `_acme-challenge.<dominio> CNAME <fulldomain>`.
3. En cada challenge DNS-01, `update_txt(credentials, token)`.

El cliente es un valor de configuración inmutable: cada llamada abre y cierra
su propio `httpx.AsyncClient`, así que puede compartirse entre tareas.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import httpx
from pydantic import ValidationError as PydanticValidationError

from acmedns_client.adapters.http_client import build_async_client
from acmedns_client.core.config import (
    API_BASE_ENV,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    AppSettings,
    load_app_settings,
)
from acmedns_client.core.domain.models import Credentials, UpdateResult
from acmedns_client.core.domain.validation import (
    parse_base_url,
    validate_allowfrom,
    validate_header_value,
    validate_txt_value,
)
from acmedns_client.core.errors import (
    AuthError,
    ConfigError,
    NetworkError,
    ParseError,
    ServerError,
)

logger = logging.getLogger(__name__)


class AcmeDnsApiClient:
    """Cliente mínimo para acme-dns: base URL + timeout, sin estado mutable."""

    __slots__ = ("_base_url", "_timeout", "_validate_txt_length", "_user_agent", "_transport")

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        validate_txt_length: bool = False,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if timeout is None or timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {timeout!r}", field="timeout")
        self._base_url = httpx.URL(parse_base_url(base_url))
        self._timeout = float(timeout)
        self._validate_txt_length = validate_txt_length
        self._user_agent = user_agent
        self._transport = transport

    @classmethod
    def from_environment(
        cls,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "AcmeDnsApiClient":
        """Crea el cliente desde `ACME_DNS_API_BASE` (+ timeout/política opcionales)."""

        settings = settings or load_app_settings()
        if not settings.api_base or not settings.api_base.strip():
            raise ConfigError(
                f"missing required environment variable {API_BASE_ENV}",
                field=API_BASE_ENV,
            )
        return cls(
            settings.api_base,
            timeout=settings.http_timeout_seconds,
            validate_txt_length=settings.validate_txt_length,
            user_agent=settings.user_agent,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return str(self._base_url)

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def validate_txt_length(self) -> bool:
        return self._validate_txt_length

    def __setattr__(self, name: str, value: object) -> None:
        if hasattr(self, name):
            raise AttributeError(f"{type(self).__name__} is immutable")
        super().__setattr__(name, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.base_url!r}, timeout={self._timeout!r})"

    # -- operaciones ----------------------------------------------------------

    async def health_check(self) -> None:
        """`GET /health`. Cualquier 2xx es éxito; el body se ignora."""

        response = await self._send("GET", "health")
        if not response.is_success:
            raise ServerError("health check failed", status_code=response.status_code, body=response.text)

    async def register(self, allowfrom: Sequence[str] | None = None) -> Credentials:
        """`POST /register`. Crea una identidad NUEVA en cada llamada.

        Sin `allowfrom` (o vacío) no se envía body: el servidor aplica su
        default (sin restricción de origen).
        """

        payload: dict[str, list[str]] | None = None
        if allowfrom:
            payload = {"allowfrom": validate_allowfrom(allowfrom)}

        response = await self._send("POST", "register", json=payload)
        if not response.is_success:
            raise ServerError("registration failed", status_code=response.status_code, body=response.text)

        try:
            data = response.json()
        except ValueError as exc:
            raise ParseError("registration response is not valid JSON", body=response.text) from exc
        credentials = Credentials.from_dict(data)
        logger.info("Registered acme-dns subdomain %s", credentials.fulldomain)
        return credentials

    async def update_txt(
        self,
        credentials: Credentials,
        txt_value: str,
        *,
        validate_length: bool | None = None,
    ) -> UpdateResult:
        """`POST /update` autenticado. Last write wins en el servidor.

        La validación local ocurre antes de cualquier petición. `validate_length`
        pisa la política del cliente para esta llamada.
        """

        check_length = self._validate_txt_length if validate_length is None else validate_length
        txt = validate_txt_value(txt_value, check_length=check_length)
        username = validate_header_value(credentials.username, field="username")
        password = validate_header_value(credentials.password, field="password")

        response = await self._send(
            "POST",
            "update",
            json={"subdomain": credentials.subdomain, "txt": txt},
            auth=httpx.BasicAuth(username, password),
            headers={
                # Cabeceras nativas de acme-dns.
                "X-Api-User": username,
                "X-Api-Key": password,
            },
        )
        if response.status_code in (401, 403):
            raise AuthError("acme-dns rejected the credentials", status_code=response.status_code, body=response.text)
        if not response.is_success:
            raise ServerError("TXT update failed", status_code=response.status_code, body=response.text)

        try:
            result = UpdateResult.model_validate_json(response.text)
        except PydanticValidationError as exc:
            raise ParseError("unexpected /update response", field="txt", body=response.text) from exc
        logger.info("Updated TXT record for %s", credentials.fulldomain)
        return result

    # -- transporte -----------------------------------------------------------

    async def _send(
        self,
        method: str,
        path: str,
        *,
        json: object | None = None,
        auth: httpx.Auth | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        url = self._base_url.join(path)
        logger.debug("%s %s", method, url)
        try:
            async with build_async_client(
                timeout_seconds=self._timeout,
                user_agent=self._user_agent,
                extra_headers=headers,
                transport=self._transport,
            ) as client:
                response = await client.request(method, url, json=json, auth=auth)
        except httpx.RequestError as exc:
            raise NetworkError(f"{method} {url} failed: {exc}") from exc
        logger.debug("%s %s -> HTTP %s", method, url, response.status_code)
        return response
