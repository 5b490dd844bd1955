"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

from rich.console import Console
from rich.table import Table

from acmedns_client.adapters.acmedns_api import AcmeDnsApiClient
from acmedns_client.core.config import AppSettings
from acmedns_client.core.domain.models import Credentials
from acmedns_client.core.errors import AcmeDnsError


async def _check_health(client: AcmeDnsApiClient) -> tuple[bool, str]:
    try:
        await client.health_check()
        return True, "GET /health OK"
    except AcmeDnsError as exc:
        return False, str(exc)


def _check_credentials() -> tuple[str, str]:
    try:
        credentials = Credentials.from_environment()
    except AcmeDnsError as exc:
        return "MISSING", str(exc)
    return "OK", credentials.fulldomain


def run(settings: AppSettings, *, console: Console, client: AcmeDnsApiClient | None = None) -> bool:
    """Run baseline diagnostics and print them as a table.

    Returns True when the server answered the health probe.
    """

    table = Table(title="acme-dns Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    ok_health = False
    if client is None:
        try:
            client = AcmeDnsApiClient.from_environment(settings)
        except AcmeDnsError as exc:
            table.add_row("API base", "FAIL", str(exc))

    if client is not None:
        table.add_row("API base", "OK", client.base_url)
        table.add_row("Timeout", "OK", f"{client.timeout:g}s")
        table.add_row(
            "TXT length check",
            "ON" if client.validate_txt_length else "OFF",
            "43 characters" if client.validate_txt_length else "left to the server",
        )
        ok_health, detail = asyncio.run(_check_health(client))
        table.add_row("Health", "OK" if ok_health else "FAIL", detail)

    status, detail = _check_credentials()
    table.add_row("Credentials (env)", status, detail)

    console.print(table)
    return ok_health
