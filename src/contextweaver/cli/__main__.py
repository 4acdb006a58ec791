# SPDX-FileCopyrightText: 2025 Knitli Inc.
# SPDX-FileContributor: Adam Poulemanos <adam@knit.li>
#
# SPDX-License-Identifier: MIT OR Apache-2.0

"""ContextWeaver CLI entrypoint.

Commands are registered and lazy-loaded from here.
"""

from __future__ import annotations

import sys

from cyclopts import App, Parameter
from rich.console import Console

from contextweaver import __version__
from contextweaver.cli.utils import CONTEXTWEAVER_PREFIX, configure_logging


console = Console(markup=True, emoji=True)
app = App(
    "contextweaver",
    help="ContextWeaver: chunk, rank, and pack source code for language models.",
    default_parameter=Parameter(negative=()),
    version=__version__,
    console=console,
)
app.command("contextweaver.cli.commands.chunk:app", name="chunk")
app.command("contextweaver.cli.commands.diagram:app", name="diagram")
app.command("contextweaver.cli.commands.config:app", name="config")


def main() -> None:
    """Main CLI entry point."""
    configure_logging()
    try:
        app()
    except KeyboardInterrupt:
        console.print(f"\n{CONTEXTWEAVER_PREFIX} [yellow]Interrupted.[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"{CONTEXTWEAVER_PREFIX} [bold red]Fatal error: {e}[/bold red]")
        console.print("\n[red]Traceback:[/red]")
        console.print_exception(max_frames=10)
        sys.exit(1)


if __name__ == "__main__":
    main()


__all__ = ("app", "console", "main")
