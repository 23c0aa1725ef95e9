"""
authkeep CLI entry point.

Commands:
    authkeep init    — Generate and store fresh credentials
    authkeep show    — Summarize stored credentials
    authkeep keys    — List stored keyed records
    authkeep remove  — Delete stored credentials
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from authkeep.auth.codec import BufferJSON
from authkeep.auth.state import CREDS_ID, use_document_auth_state
from authkeep.auth.types import KeyCategory, split_record_id
from authkeep.core.config import AuthKeepConfig
from authkeep.core.errors import AuthKeepError
from authkeep.core.logging import LoggingSink, setup_logging
from authkeep.store.base import DocumentStore
from authkeep.store.factory import open_store

app = typer.Typer(
    name="authkeep",
    help="authkeep — persist messaging-client auth state in a document store.",
    add_completion=False,
)

console = Console()


def _load_config(db: Path | None, verbose: bool = False) -> AuthKeepConfig:
    overrides: dict[str, Any] = {}
    if db is not None:
        overrides["store"] = {"path": str(db)}
    if verbose:
        overrides["logging"] = {"level": "DEBUG", "diagnostics": True}
    config = AuthKeepConfig.load(overrides=overrides)

    setup_logging(
        log_dir=Path(config.logging.log_dir),
        console_level=config.logging.level_number,
    )
    return config


async def _with_store(config: AuthKeepConfig, action) -> Any:
    store = await open_store(config)
    try:
        return await action(store)
    finally:
        await store.close()


def _run(config: AuthKeepConfig, action) -> Any:
    try:
        return asyncio.run(_with_store(config, action))
    except AuthKeepError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)


@app.command()
def init(
    db: Path = typer.Option(None, "--db", help="Override store.path"),
    force: bool = typer.Option(False, "--force", "-f", help="Replace existing creds"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
) -> None:
    """Generate fresh credentials and save them."""
    config = _load_config(db, verbose)
    sink = LoggingSink() if config.logging.diagnostics else None

    async def action(store: DocumentStore) -> bool:
        if await store.exists(CREDS_ID):
            if not force:
                return False
            await store.delete(CREDS_ID)
        handle = await use_document_auth_state(
            store, sink=sink, max_concurrency=config.keys.max_concurrency
        )
        await handle.save_creds()
        return True

    if not _run(config, action):
        console.print(
            f"[yellow]Credentials already stored at {config.store.path}[/yellow]\n"
            f"[dim]Use --force to replace them[/dim]"
        )
        raise typer.Exit(0)

    console.print(f"[green]Credentials saved to {config.store.path}[/green]")


@app.command()
def show(db: Path = typer.Option(None, "--db", help="Override store.path")) -> None:
    """Summarize the stored credentials. Private keys are never printed."""
    config = _load_config(db)

    async def action(store: DocumentStore) -> Any:
        text = await store.find_one(CREDS_ID)
        return BufferJSON.decode(text) if text is not None else None

    creds = _run(config, action)
    if creds is None:
        console.print("[dim]No credentials stored. Run 'authkeep init'[/dim]")
        raise typer.Exit(1)

    table = Table(show_header=False, box=None)
    table.add_column("field", style="bold")
    table.add_column("value")
    table.add_row("registration id", str(creds.get("registrationId")))
    table.add_row("registered", str(creds.get("registered")))
    table.add_row("account", str((creds.get("me") or {}).get("id", "-")))
    table.add_row("next pre-key id", str(creds.get("nextPreKeyId")))
    identity = (creds.get("signedIdentityKey") or {}).get("public")
    if isinstance(identity, bytes):
        table.add_row("identity key", identity.hex())

    console.print(Panel(table, title="creds", border_style="cyan"))


def _category_of(doc_id: str) -> KeyCategory | None:
    parsed = split_record_id(doc_id)
    return parsed[0] if parsed else None


@app.command()
def keys(
    category: KeyCategory = typer.Argument(None, help="Only list this category"),
    db: Path = typer.Option(None, "--db", help="Override store.path"),
) -> None:
    """List stored keyed records."""
    config = _load_config(db)
    prefix = f"{category.value}-" if category else ""

    async def action(store: DocumentStore) -> list[str]:
        return await store.list_ids(prefix)

    ids = [doc_id for doc_id in _run(config, action) if doc_id != CREDS_ID]
    if category:
        # "sender-key-" also prefixes sender-key-memory records
        ids = [doc_id for doc_id in ids if _category_of(doc_id) is category]
    if not ids:
        console.print("[dim]No keyed records stored[/dim]")
        return

    for doc_id in ids:
        console.print(doc_id)
    console.print(f"[dim]{len(ids)} record(s)[/dim]")


@app.command()
def remove(
    db: Path = typer.Option(None, "--db", help="Override store.path"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete the stored credentials. Keyed records are left in place."""
    config = _load_config(db)
    if not yes and not typer.confirm(f"Delete credentials in {config.store.path}?"):
        raise typer.Exit(0)

    async def action(store: DocumentStore) -> bool:
        if not await store.exists(CREDS_ID):
            return False
        handle = await use_document_auth_state(store)
        await handle.remove_creds()
        return True

    if _run(config, action):
        console.print("[green]Credentials removed[/green]")
    else:
        console.print("[dim]No credentials stored[/dim]")


@app.command()
def version() -> None:
    """Show the authkeep version."""
    from authkeep import __version__

    console.print(f"authkeep {__version__}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
