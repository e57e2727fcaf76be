#!/usr/bin/env python3
"""
Wallet login from the terminal.

Email login sends a code through thirdweb and asks for it back.
Farcaster login just maps the FID to its pseudo-address.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import logging

import typer
from dotenv import load_dotenv
from rich.console import Console

from dhab.auth.wallet import AuthError, AuthSession, AuthStrategy, ThirdwebAuth, farcaster_account
from dhab.core.config import Config
from dhab.core.db import init_db
from dhab.sobriety import store

app = typer.Typer(help="Dhab wallet login")
console = Console()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def _link(config: Config, fid: int, session: AuthSession) -> None:
    account = session.account
    try:
        store.link_wallet(config, fid, account.address, account.strategy)
        console.print(f"[green]✓ Linked to timer for FID {fid}[/green]")
    except LookupError:
        console.print("[yellow]No timer for this FID yet; wallet not linked[/yellow]")


@app.command()
def email(
    address: str = typer.Argument(..., help="Email address"),
    fid: int = typer.Option(None, "--fid", help="Link the wallet to this FID's timer"),
):
    """Log in with an emailed verification code."""
    load_dotenv()
    config = Config.from_env()
    auth = ThirdwebAuth(config)
    session = AuthSession()

    session.begin(AuthStrategy.EMAIL)
    try:
        auth.initiate_email_login(address)
    except (AuthError, ValueError) as e:
        session.failed(f"Failed to send verification code: {e}")
        console.print(f"[red]{session.error}[/red]")
        raise typer.Exit(1)

    code = typer.prompt("Verification code")
    try:
        session.connected(auth.verify_email_code(address, code))
    except (AuthError, ValueError) as e:
        session.failed(str(e))
        console.print(f"[red]{session.error}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓ Connected: {session.account.address}[/green]")

    if fid:
        init_db(config)
        _link(config, fid, session)


@app.command()
def farcaster(
    fid: int = typer.Argument(..., help="Farcaster ID"),
    username: str = typer.Option(None, "--username", "-u", help="Farcaster username"),
):
    """Log in as a Farcaster mini-app user."""
    load_dotenv()
    config = Config.from_env()
    session = AuthSession()

    session.begin(AuthStrategy.FARCASTER)
    try:
        session.connected(farcaster_account(fid, username))
    except ValueError as e:
        session.failed(str(e))
        console.print(f"[red]{session.error}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓ Connected: {session.account.address}[/green]")

    init_db(config)
    _link(config, fid, session)


if __name__ == "__main__":
    app()
