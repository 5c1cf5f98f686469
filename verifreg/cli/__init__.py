"""
verifreg.cli
------------
Command-line entrypoints for inspecting verified registry call payloads:

- encode  : JSON parameters (or a JSON return) → 0x-hex CBOR
- decode  : 0x-hex / binary CBOR → JSON, with the same strict checks as the library
- methods : table of exported methods and their numbers

Usage:
  python -m verifreg.cli methods
  python -m verifreg.cli encode get-claims params.json
  python -m verifreg.cli decode get-claims 0x8282...
"""
from __future__ import annotations

from typing import Optional

import typer

from .. import logging as vlog
from ..config import load
from ..errors import ConfigError
from ..version import __version__
from . import commands

__all__ = ["build_app", "main", "__version__"]


def build_app() -> typer.Typer:
    app = typer.Typer(
        name="verifreg",
        help="Encode/decode verified registry actor call payloads",
        no_args_is_help=True,
        add_completion=False,
    )

    @app.callback(invoke_without_command=True)
    def _meta(
        ctx: typer.Context,
        version: bool = typer.Option(False, "--version", "-V", help="Print version and exit", is_eager=True),
        config: Optional[str] = typer.Option(None, "--config", "-c", help="TOML/JSON config file"),
    ) -> None:
        if version:
            typer.echo(f"verifreg {__version__}")
            raise typer.Exit(0)
        try:
            cfg = load(config)
        except ConfigError as e:
            typer.echo(f"config error: {e}", err=True)
            raise typer.Exit(2)
        vlog.configure_from_config(cfg)
        ctx.obj = cfg

    app.command("encode")(commands.encode)
    app.command("decode")(commands.decode)
    app.command("methods")(commands.methods)
    return app


app = build_app()


def main(argv: Optional[list[str]] = None) -> int:
    """Entrypoint used by the console script and `python -m verifreg.cli`."""
    app(args=argv)
    return 0
