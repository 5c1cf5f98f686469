"""
verifreg.cli.commands
=====================

encode / decode / methods subcommands.

JSON conventions match `verifreg.types`: byte fields are ``0x`` hex strings,
BigInt fields are decimal strings on output (ints or strings on input).

Binary input for `decode` may be given as:
  0x<hex> | <hex>    inline
  @path              raw bytes read from a file
  -                  hex read from stdin
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import Config, defaults
from ..errors import VerifRegError
from ..methods import MethodSpec, all_methods, resolve
from ..types import parse_hex

_err = Console(stderr=True)


# ----------------- helpers -----------------


def _config(ctx: Optional[typer.Context]) -> Config:
    obj = getattr(ctx, "obj", None) if ctx is not None else None
    return obj if isinstance(obj, Config) else defaults()


def _fail(e: VerifRegError) -> NoReturn:
    _err.print(f"[red]error[/red] {escape(str(e))}")
    typer.echo(json.dumps(e.to_dict(), sort_keys=True), err=True)
    raise typer.Exit(1)


def _resolve(method: str) -> MethodSpec:
    try:
        return resolve(method)
    except VerifRegError as e:
        _fail(e)


def _read_json(path: str) -> Any:
    try:
        text = sys.stdin.read() if path == "-" else Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise typer.BadParameter(f"cannot read {path!r}: {e}") from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"{path!r} is not valid JSON: {e}") from e


def _read_payload(data: str) -> bytes:
    if data == "-":
        data = sys.stdin.read().strip()
    if data.startswith("@"):
        try:
            return Path(data[1:]).read_bytes()
        except OSError as e:
            raise typer.BadParameter(f"cannot read {data[1:]!r}: {e}") from e
    try:
        return parse_hex(data.strip())
    except VerifRegError as e:
        raise typer.BadParameter(str(e)) from e


# ----------------- commands -----------------


def encode(
    ctx: typer.Context,
    method: str = typer.Argument(..., help="Method name (GetClaims, get-claims, ...) or number"),
    source: str = typer.Argument("-", help="JSON file with the value, or '-' for stdin"),
    as_return: bool = typer.Option(False, "--return", "-r", help="Encode the method's return shape instead"),
) -> None:
    """
    Encode JSON parameters (or a return value) to 0x-hex CBOR.
    """
    spec = _resolve(method)
    obj = _read_json(source)
    try:
        if as_return:
            if spec.encode_return is None or spec.return_type is None:
                raise typer.BadParameter(f"{spec.name} has no return value")
            raw = spec.encode_return(spec.return_type.from_obj(obj))
        else:
            raw = spec.encode_params(spec.params_type.from_obj(obj))
    except VerifRegError as e:
        _fail(e)
    except (KeyError, TypeError, ValueError) as e:
        raise typer.BadParameter(f"cannot build {spec.name} value from JSON: {e}") from e
    typer.echo("0x" + raw.hex())


def decode(
    ctx: typer.Context,
    method: str = typer.Argument(..., help="Method name (GetClaims, get-claims, ...) or number"),
    data: str = typer.Argument(..., help="0x-hex, @file (raw bytes) or '-' (hex on stdin)"),
    params: bool = typer.Option(False, "--params", "-p", help="Decode the method's parameters instead"),
    strict: Optional[bool] = typer.Option(
        None, "--strict/--lenient", help="Reject trailing bytes (default from config)"
    ),
) -> None:
    """
    Decode CBOR bytes into JSON using the method's schema.
    """
    spec = _resolve(method)
    raw = _read_payload(data)
    cfg = _config(ctx)
    use_strict = cfg.codec.strict_trailing if strict is None else strict
    if params:
        decoder = spec.decode_params
    else:
        if spec.decode_return is None:
            raise typer.BadParameter(f"{spec.name} has no return value; use --params")
        decoder = spec.decode_return
    try:
        value = decoder(raw, strict=use_strict)
    except VerifRegError as e:
        _fail(e)
    typer.echo(json.dumps(value.to_obj(), indent=2))


def methods() -> None:
    """
    List exported verified registry methods.
    """
    table = Table(title="Verified registry methods", box=box.SIMPLE)
    table.add_column("Method")
    table.add_column("Number", justify="right")
    table.add_column("Reply")
    for spec in all_methods():
        table.add_row(
            spec.name,
            str(int(spec.number)),
            "yes" if spec.has_return else "-",
        )
    Console().print(table)


__all__ = ["encode", "decode", "methods"]
