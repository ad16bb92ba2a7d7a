"""CLI entry point using typer."""

from __future__ import annotations

import asyncio
import sys
from typing import Any, Coroutine, List, TypeVar

import typer
from rich.console import Console
from rich.table import Table

from sui_cli_proxy import __version__
from sui_cli_proxy.config import CONFIG_FILE, AppConfig, load_config, save_config
from sui_cli_proxy.errors import ProxyError
from sui_cli_proxy.logging_setup import setup_logging
from sui_cli_proxy.services.proxy import CommandProxy
from sui_cli_proxy.storage.models import CommandResult
from sui_cli_proxy.utils.formatting import format_duration, format_status, key_row
from sui_cli_proxy.utils.system import check_tool

T = TypeVar("T")

app = typer.Typer(
    name="sui-cli-proxy",
    help="Run sui and walrus commands with secrets redacted from the output.",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)

PASSTHROUGH = {"allow_extra_args": True, "ignore_unknown_options": True}


def _proxy() -> CommandProxy:
    config = load_config()
    setup_logging(config, console=True)
    return CommandProxy(config)


def _run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a proxy coroutine, turning proxy errors into a one-line message."""
    try:
        return asyncio.run(coro)
    except ProxyError as e:
        err_console.print(f"[red]{e.message}[/red]", highlight=False)
        raise typer.Exit(1)


def _show(result: CommandResult) -> None:
    """Print a sanitized result and exit with the tool's status."""
    if result.stdout:
        console.print(result.stdout.rstrip(), markup=False, highlight=False)
    if result.stderr:
        err_console.print(result.stderr.rstrip(), markup=False, highlight=False, style="yellow")
    err_console.print(
        f"[dim][{format_status(result)}] {format_duration(result.duration_ms)}[/dim]",
        highlight=False,
    )
    if result.exit_code != 0:
        raise typer.Exit(result.exit_code if result.exit_code > 0 else 1)


# --- sui ---


@app.command("exec", context_settings=PASSTHROUGH)
def exec_(args: List[str] = typer.Argument(..., help="Arguments passed to sui")) -> None:
    """Run an arbitrary sui command."""
    _show(_run(_proxy().execute_command(args)))


@app.command()
def keys(
    strict: bool = typer.Option(False, "--strict", help="Fail unless the tool returns a JSON key list"),
) -> None:
    """List keystore entries."""
    records = _run(_proxy().list_keys(strict))
    if not records:
        console.print("[dim]No keys found.[/dim]")
        return

    table = Table(title="Keys")
    table.add_column("Alias", style="cyan")
    table.add_column("Address", style="green")
    table.add_column("Scheme")
    for record in records:
        table.add_row(*key_row(record))
    console.print(table)


@app.command()
def generate(
    scheme: str = typer.Argument("ed25519", help="ed25519, secp256k1 or secp256r1"),
    word_length: int = typer.Option(None, "--word-length", "-w", help="Mnemonic length (12-24)"),
) -> None:
    """Generate a new key."""
    _show(_run(_proxy().generate_key(scheme, word_length)))


@app.command()
def switch(address: str = typer.Argument(..., help="Address to make active")) -> None:
    """Switch the active address."""
    _show(_run(_proxy().set_active_key(address)))


@app.command()
def address() -> None:
    """Show the active address."""
    active = _run(_proxy().get_active_address())
    if active:
        console.print(active, markup=False, highlight=False)
    else:
        console.print("[dim](none)[/dim]")


@app.command()
def envs() -> None:
    """Show configured environments."""
    environment = _run(_proxy().get_environment())
    if "aliases" in environment:
        for alias in environment["aliases"]:
            marker = "*" if alias == environment.get("active") else " "
            console.print(f"{marker} {alias}", markup=False, highlight=False)
    else:
        console.print(environment["envs"].rstrip(), markup=False, highlight=False)


# --- walrus ---


@app.command()
def store(
    path: str = typer.Argument(..., help="File to upload"),
    epochs: int = typer.Option(None, "--epochs", "-e", help="Storage duration in epochs"),
) -> None:
    """Store a file as a blob."""
    _show(_run(_proxy().upload_blob(path, epochs)))


@app.command()
def read(
    blob_id: str = typer.Argument(..., help="Blob ID"),
    out: str = typer.Option(None, "--out", "-o", help="Write the blob to this path"),
) -> None:
    """Read a blob."""
    _show(_run(_proxy().download_blob(blob_id, out)))


@app.command()
def blobs() -> None:
    """List blobs owned by the active wallet."""
    _show(_run(_proxy().list_blobs()))


@app.command("blob-status")
def blob_status(blob_id: str = typer.Argument(..., help="Blob ID")) -> None:
    """Show the status of a blob."""
    _show(_run(_proxy().blob_status(blob_id)))


@app.command("delete-blob")
def delete_blob(blob_id: str = typer.Argument(..., help="Blob ID")) -> None:
    """Delete a deletable blob."""
    _show(_run(_proxy().delete_blob(blob_id)))


@app.command()
def extend(
    object_id: str = typer.Argument(..., help="Blob object ID"),
    epochs: int = typer.Option(..., "--epochs", "-e", help="Epochs to add"),
) -> None:
    """Extend the lifetime of a blob."""
    _show(_run(_proxy().extend_blob(object_id, epochs)))


@app.command("storage-info")
def storage_info() -> None:
    """Show storage system information."""
    _show(_run(_proxy().storage_info()))


# --- housekeeping ---


@app.command()
def config(
    key: str = typer.Argument(None, help="Config key (e.g., runner.timeout)"),
    value: str = typer.Argument(None, help="New value"),
) -> None:
    """View or modify configuration."""
    cfg = load_config()

    if key is None:
        table = Table(title="Configuration")
        table.add_column("Key", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("tools.sui", cfg.tools.sui)
        table.add_row("tools.walrus", cfg.tools.walrus)
        table.add_row("tools.extra_paths", ", ".join(cfg.tools.extra_paths) or "(none)")
        table.add_row("runner.timeout", str(cfg.runner.timeout) if cfg.runner.timeout else "none")
        table.add_row("runner.max_output", str(cfg.runner.max_output) if cfg.runner.max_output else "unlimited")
        table.add_row("session.cache_size", str(cfg.session.cache_size))
        table.add_row("logging.level", cfg.logging.level)
        table.add_row("logging.file", cfg.logging.file)

        console.print(table)
        if not CONFIG_FILE.exists():
            console.print("[dim]Using defaults; no config file yet.[/dim]")
        return

    if value is None:
        console.print("[red]Usage: sui-cli-proxy config <key> <value>[/red]")
        raise typer.Exit(1)

    parts = key.split(".")
    if len(parts) != 2:
        console.print("[red]Key format: section.key (e.g., runner.timeout)[/red]")
        raise typer.Exit(1)

    section, attr = parts
    section_map = {"tools": cfg.tools, "runner": cfg.runner, "session": cfg.session, "logging": cfg.logging}

    if section not in section_map:
        console.print(f"[red]Unknown section: {section}[/red]")
        raise typer.Exit(1)

    obj = section_map[section]
    if not hasattr(obj, attr):
        console.print(f"[red]Unknown key: {key}[/red]")
        raise typer.Exit(1)

    # Type coercion
    current = getattr(obj, attr)
    try:
        if isinstance(current, bool):
            typed_value: Any = value.lower() in ("true", "1", "yes")
        elif isinstance(current, int):
            typed_value = int(value)
        elif isinstance(current, list):
            typed_value = [v.strip() for v in value.split(",") if v.strip()]
        else:
            typed_value = value
    except ValueError:
        console.print(f"[red]Invalid value type for {key}[/red]")
        raise typer.Exit(1)

    setattr(obj, attr, typed_value)
    save_config(cfg)
    console.print(f"[green]{key} = {typed_value}[/green]")


def _tool_versions(cfg: AppConfig) -> list[tuple[str, bool, str]]:
    return [
        (name, *check_tool(binary, cfg.tools.extra_paths))
        for name, binary in (("sui", cfg.tools.sui), ("walrus", cfg.tools.walrus))
    ]


@app.command()
def doctor() -> None:
    """Report whether the sui and walrus tools can be found."""
    cfg = load_config()
    missing = False
    for name, installed, info in _tool_versions(cfg):
        if installed:
            console.print(f"  {name}: [green]{info}[/green]", highlight=False)
        else:
            console.print(f"  {name}: [yellow]{info}[/yellow]", highlight=False)
            missing = True
    if missing:
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"sui-cli-proxy v{__version__}")
    console.print(f"Python: {sys.version.split()[0]}")
    console.print(f"Config: {CONFIG_FILE}")


if __name__ == "__main__":
    app()
