# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0
"""Config-related CLI commands for ContextWeaver."""

from __future__ import annotations

from cyclopts import App
from rich.console import Console
from rich.table import Table

from contextweaver.cli.utils import exit_with_error
from contextweaver.config.settings import get_settings
from contextweaver.exceptions import ContextWeaverError


console = Console(markup=True, emoji=True)
app = App("config", help="View your ContextWeaver config.", console=console)


@app.default
def config() -> None:
    """Show the effective configuration. Secrets are masked."""
    try:
        settings = get_settings()
    except ContextWeaverError as e:
        exit_with_error(console, e, "Loading configuration")

    console.print("[bold blue]ContextWeaver Configuration[/bold blue]\n")
    table = Table(show_header=True, header_style="bold blue")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    for section, values in settings.redacted().items():
        if not isinstance(values, dict):
            table.add_row(section, str(values))
            continue
        for key, value in values.items():
            table.add_row(f"{section}.{key}", "unset" if value is None else str(value))
    console.print(table)
    console.print("\n[dim]Override any setting with CONTEXTWEAVER_<SECTION>__<KEY>.[/dim]")


__all__ = ("app", "config")
