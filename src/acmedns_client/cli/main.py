"""CLI de prueba manual contra un servidor acme-dns.

Por qué una CLI tan fina:
- Toda la lógica vive en `AcmeDnsApiClient`; aquí solo parseamos flags,
  llamamos al cliente y decidimos qué va a stdout (datos) y qué a stderr (UI).
- `register` imprime JSON (o `export ...`) para poder hacer
  `eval "$(acme-dns-cli register --format env)"` desde un script.
"""

from __future__ import annotations

import asyncio
import logging
import shlex
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler

from acmedns_client.adapters.acmedns_api import AcmeDnsApiClient
from acmedns_client.cli import doctor
from acmedns_client.cli.ui_components import build_cname_panel, build_credentials_table
from acmedns_client.core.config import AppSettings, load_app_settings
from acmedns_client.core.domain.models import Credentials
from acmedns_client.core.domain.validation import split_allowfrom
from acmedns_client.core.errors import AcmeDnsError

T = TypeVar("T")

app = typer.Typer(
    name="acme-dns-cli",
    no_args_is_help=True,
    help="Tiny CLI to test an acme-dns server.",
)

_console = Console()
_err_console = Console(stderr=True)


class OutputFormat(str, Enum):
    JSON = "json"
    ENV = "env"


@dataclass
class CliState:
    settings: AppSettings

    def build_client(self) -> AcmeDnsApiClient:
        return AcmeDnsApiClient.from_environment(self.settings)


def configure_logging(verbose: bool) -> None:
    """Logging a stderr vía Rich; `--verbose` activa DEBUG."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_err_console, show_path=False)],
        force=True,
    )
    # httpx loguea cada request en INFO; con el nuestro en DEBUG es suficiente.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _fail(exc: AcmeDnsError) -> typer.Exit:
    _err_console.print(f"[red]Error ({type(exc).__name__}):[/red] {exc}", highlight=False)
    return typer.Exit(code=1)


def _run(state: CliState, call: Callable[[AcmeDnsApiClient], Coroutine[Any, Any, T]]) -> T:
    """Construye el cliente, ejecuta la llamada y traduce errores a exit 1."""

    try:
        client = state.build_client()
        return asyncio.run(call(client))
    except AcmeDnsError as exc:
        raise _fail(exc) from exc


@app.callback()
def main(
    ctx: typer.Context,
    api_base: Annotated[
        str | None,
        typer.Option(
            "--api-base",
            help="Base URL of the acme-dns API, e.g. https://auth.example.org/ [env: ACME_DNS_API_BASE]",
        ),
    ] = None,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", min=0.001, help="Per-request timeout in seconds."),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging.")] = False,
) -> None:
    configure_logging(verbose)

    overrides: dict[str, object] = {}
    if api_base is not None:
        overrides["api_base"] = api_base
    if timeout is not None:
        overrides["http_timeout_seconds"] = timeout
    try:
        settings = load_app_settings(**overrides)
    except AcmeDnsError as exc:
        raise _fail(exc) from exc
    ctx.obj = CliState(settings=settings)


@app.command()
def health(ctx: typer.Context) -> None:
    """Call /health and print the result."""

    state: CliState = ctx.obj
    _run(state, lambda client: client.health_check())
    typer.echo("health OK")


@app.command()
def register(
    ctx: typer.Context,
    allowfrom: Annotated[
        list[str] | None,
        typer.Option(
            "--allowfrom",
            help="CIDR allowed to call /update (comma-separated or repeated).",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", case_sensitive=False, help="json or shell `export` lines."),
    ] = OutputFormat.JSON,
    domain: Annotated[
        str | None,
        typer.Option("--domain", help="Domain to show the CNAME delegation record for."),
    ] = None,
) -> None:
    """Call /register and print the resulting credentials.

    Every call creates a NEW acme-dns identity: store the output.
    """

    state: CliState = ctx.obj
    cidrs = [cidr for raw in allowfrom or [] for cidr in split_allowfrom(raw)]
    credentials: Credentials = _run(state, lambda client: client.register(cidrs or None))

    if output_format is OutputFormat.ENV:
        for key, value in credentials.to_env().items():
            typer.echo(f"export {key}={shlex.quote(value)}")
    else:
        typer.echo(credentials.to_json())

    _err_console.print(build_credentials_table(credentials))
    _err_console.print(build_cname_panel(credentials, domain))


@app.command()
def update(
    ctx: typer.Context,
    txt: Annotated[str, typer.Option("--txt", help="TXT value to set for the challenge.")],
    check_length: Annotated[
        bool | None,
        typer.Option(
            "--check-length/--no-check-length",
            help="Require a 43 character token (default: ACME_DNS_VALIDATE_TXT_LENGTH).",
        ),
    ] = None,
) -> None:
    """Call /update using credentials from the environment.

    Uses ACME_DNS_USERNAME, ACME_DNS_PASSWORD, ACME_DNS_SUBDOMAIN,
    ACME_DNS_FULLDOMAIN and the optional ACME_DNS_ALLOWFROM.
    """

    state: CliState = ctx.obj
    try:
        credentials = Credentials.from_environment()
    except AcmeDnsError as exc:
        raise _fail(exc) from exc

    _run(state, lambda client: client.update_txt(credentials, txt, validate_length=check_length))
    typer.echo(f"update OK for {credentials.fulldomain}")


@app.command(name="doctor")
def doctor_command(ctx: typer.Context) -> None:
    """Show the effective configuration and probe /health."""

    state: CliState = ctx.obj
    try:
        client = state.build_client()
    except AcmeDnsError:
        client = None
    if not doctor.run(state.settings, console=_console, client=client):
        raise typer.Exit(code=1)


def run() -> None:
    app()
