"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Todo lo visual va a stderr: stdout queda libre para JSON/exports.
"""

from __future__ import annotations

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from acmedns_client.core.domain.models import Credentials


def build_credentials_table(credentials: Credentials) -> Table:
    """Resumen de una identidad registrada (sin el password)."""

    table = Table(title="acme-dns account", show_header=False)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("username", credentials.username)
    table.add_row("subdomain", credentials.subdomain)
    table.add_row("fulldomain", credentials.fulldomain)
    table.add_row("allowfrom", ", ".join(credentials.allowfrom) or "(any)")
    return table


def build_cname_panel(credentials: Credentials, domain: str | None = None) -> Panel:
    """Instrucciones de delegación: el CNAME que el operador debe crear una vez."""

    if domain:
        record = credentials.challenge_cname(domain)
    else:
        record = f"_acme-challenge.<your-domain> CNAME {credentials.fulldomain}"

    body = Text()
    body.append("Add this record to your main DNS zone:\n\n")
    body.append(f"  {record}\n", style="bold")
    body.append("\nThis is a one time action per domain.", style="dim")
    return Panel(body, title=Text("CNAME delegation", style="bold yellow"), border_style="yellow")
