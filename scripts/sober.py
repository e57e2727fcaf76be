#!/usr/bin/env python3
"""
Sobriety timer from the terminal.

Take the daily pledge, start a timer, check progress and savings.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import logging
from typing import List, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from dhab.core.config import Config
from dhab.core.db import init_db
from dhab.core.utils import format_currency, today_iso
from dhab.sobriety import store
from dhab.sobriety.summary import build_summary
from dhab.views.state import PLEDGE_MOTIVATIONS, PledgeForm, pledge_day_name

app = typer.Typer(help="Dhab sobriety timer")
console = Console()

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def _config() -> Config:
    load_dotenv()
    config = Config.from_env()
    init_db(config)
    return config


@app.command()
def pledge(
    fid: int = typer.Option(..., "--fid", help="Farcaster ID"),
    reason: List[str] = typer.Option(..., "--reason", "-r", help="Motivation id (repeatable)"),
):
    """
    Take today's pledge.

    Example:
        python scripts/sober.py pledge --fid 42 -r health -r money
    """
    config = _config()

    form = PledgeForm()
    form.toggle_accepted()
    for motivation_id in reason:
        try:
            form.toggle_motivation(motivation_id)
        except ValueError as e:
            known = ", ".join(mid for mid, _ in PLEDGE_MOTIVATIONS)
            console.print(f"[red]{e}[/red] (choose from: {known})")
            raise typer.Exit(1)

    if not form.can_confirm:
        console.print("[red]Pick at least one reason[/red]")
        raise typer.Exit(1)

    today = today_iso()
    try:
        store.update_pledge(config, fid, today, form.motivation_text())
    except LookupError:
        console.print("[yellow]No timer yet. Pledge noted; run 'start' to begin.[/yellow]")
        console.print(f"Motivation: {form.motivation_text()}")
        return

    console.print(f"[green]✓ {pledge_day_name()} pledge taken[/green]")


@app.command()
def start(
    fid: int = typer.Option(..., "--fid", help="Farcaster ID"),
    addiction: str = typer.Option(..., "--addiction", "-a", help="Habit to track"),
    date: str = typer.Option(None, "--date", "-d", help="Start date YYYY-MM-DD (default: today)"),
    time: Optional[str] = typer.Option(None, "--time", "-t", help="Start time HH:MM"),
    cost: Optional[float] = typer.Option(None, "--cost", "-c", help="Daily cost in dollars"),
    motivation: Optional[str] = typer.Option(None, "--motivation", "-m", help="Why you are quitting"),
):
    """Start (or restart) a sobriety timer."""
    config = _config()

    try:
        record = store.save_user_sobriety(
            config,
            fid=fid,
            start_date=date or today_iso(),
            addiction=addiction,
            start_time=time,
            daily_cost=cost,
            motivation=motivation,
        )
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(
        f"[green]✓ Tracking {record['addiction']} since {record['startDate']}[/green]"
    )


@app.command()
def status(
    fid: int = typer.Option(..., "--fid", help="Farcaster ID"),
):
    """Show the timer, milestone and savings."""
    config = _config()

    record = store.get_user_sobriety(config, fid)
    if record is None:
        console.print("[yellow]No timer found. Start one with 'start'.[/yellow]")
        raise typer.Exit(1)

    summary = build_summary(config, record)
    timer = summary["timer"]
    savings = summary["savings"]

    console.print(f"\n[bold]{summary['addiction']}[/bold]  ·  {summary['milestone']}")
    console.print(
        f"[cyan]{timer['days']}[/cyan] days  "
        f"[cyan]{timer['hours']}[/cyan] hrs  "
        f"[cyan]{timer['minutes']}[/cyan] min  "
        f"[cyan]{timer['seconds']}[/cyan] sec\n"
    )

    table = Table(title="Savings")
    table.add_column("Period", style="cyan")
    table.add_column("Amount", justify="right", style="green")
    table.add_row("Daily cost", format_currency(savings["dailyCost"]))
    table.add_row("Saved so far", savings["currentFormatted"])
    table.add_row("Per month", format_currency(savings["monthly"]))
    table.add_row("Per year", format_currency(savings["yearly"]))
    table.add_row("In 5 years", format_currency(savings["fiveYear"]))
    console.print(table)

    bills = "💵" * savings["filledBillSlots"] + "·" * (10 - savings["filledBillSlots"])
    console.print(f"{bills}  {savings['twentyDollarBills']} × $20")
    console.print(f"[italic]{savings['message']}[/italic]")

    if record.get("motivation"):
        console.print(f"\nMotivation: {record['motivation']}")


@app.command()
def cost(
    fid: int = typer.Option(..., "--fid", help="Farcaster ID"),
    amount: float = typer.Argument(..., help="New daily cost in dollars"),
):
    """Change the daily cost used for savings."""
    config = _config()

    try:
        record = store.update_daily_cost(config, fid, amount)
    except LookupError:
        console.print("[yellow]No timer found[/yellow]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓ Daily cost set to {format_currency(record['dailyCost'])}[/green]")


@app.command()
def reset(
    fid: int = typer.Option(..., "--fid", help="Farcaster ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete the timer and start over."""
    config = _config()

    if not yes and not typer.confirm("Reset your timer?"):
        raise typer.Exit(0)

    if store.delete_user_sobriety(config, fid):
        console.print("[green]✓ Timer reset[/green]")
    else:
        console.print("[yellow]Nothing to reset[/yellow]")


if __name__ == "__main__":
    app()
