#!/usr/bin/env python3
"""
Community feed from the terminal.

Read a habit's feed and post, comment, react or flag anonymously.
The pseudonym is derived from --device, the habit and the start date,
so it matches what the app shows for the same user.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import logging
import uuid

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel

from dhab.community import feed
from dhab.community.anonymity import anonymous_seed, generate_anonymous_id
from dhab.core.config import Config
from dhab.core.db import init_db
from dhab.core.utils import now_ms
from dhab.views.community import build_feed_view
from dhab.views.state import POST_MILESTONES, post_milestone_text

app = typer.Typer(help="Dhab anonymous community")
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


def _pseudonym(device: str, addiction: str, start_date: str) -> str:
    return generate_anonymous_id(anonymous_seed(device, addiction, start_date))


@app.command()
def whoami(
    device: str = typer.Option(..., "--device", help="Device identifier"),
    addiction: str = typer.Option(..., "--addiction", "-a", help="Habit community"),
    start_date: str = typer.Option(..., "--start", help="Timer start date YYYY-MM-DD"),
):
    """Show the pseudonym you post under."""
    console.print(_pseudonym(device, addiction, start_date))


@app.command(name="feed")
def show_feed(
    addiction: str = typer.Option(..., "--addiction", "-a", help="Habit community"),
    device: str = typer.Option(None, "--device", help="Device identifier"),
    start_date: str = typer.Option(None, "--start", help="Timer start date YYYY-MM-DD"),
):
    """Show the feed for one habit, newest first."""
    config = _config()

    viewer = None
    user_flags = None
    if device and start_date:
        viewer = _pseudonym(device, addiction, start_date)
        user_flags = feed.get_user_flags(config, viewer)

    posts = build_feed_view(
        feed.get_posts(config, addiction),
        viewer_id=viewer,
        threshold=config.flag_threshold,
        user_flags=user_flags,
    )

    if not posts:
        console.print("[yellow]No posts yet[/yellow]")
        return

    for post in posts:
        reactions = "  ".join(
            f"{r['emoji']} {r['count']}{'*' if r['userReacted'] else ''}"
            for r in post["reactions"]
        )
        body = post["content"]
        if post.get("milestone"):
            body = f"[bold]{post['milestone']}[/bold]\n{body}"
        body += f"\n\n{reactions}"
        for comment in post["comments"]:
            body += f"\n  ↳ [cyan]{comment['anonymousId']}[/cyan]: {comment['content']}"

        console.print(Panel(
            body,
            title=f"{post['anonymousId']} · {post['timeAgo']}",
            subtitle=f"id {post['id']}",
            border_style="red" if post["flaggedByUser"] else "blue",
        ))


@app.command()
def post(
    content: str = typer.Argument(..., help="What you want to share"),
    device: str = typer.Option(..., "--device", help="Device identifier"),
    addiction: str = typer.Option(..., "--addiction", "-a", help="Habit community"),
    start_date: str = typer.Option(..., "--start", help="Timer start date YYYY-MM-DD"),
    milestone: str = typer.Option(
        None, "--milestone", help="Badge: " + ", ".join(mid for mid, _ in POST_MILESTONES)
    ),
):
    """Share an anonymous post."""
    config = _config()
    author = _pseudonym(device, addiction, start_date)

    badge = None
    if milestone:
        try:
            badge = post_milestone_text(milestone)
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)

    try:
        created = feed.create_post(
            config,
            post_id=str(uuid.uuid4()),
            anonymous_id=author,
            addiction=addiction,
            content=content,
            timestamp=now_ms(),
            milestone=badge,
        )
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓ Posted as {author} (id {created['id']})[/green]")


@app.command()
def comment(
    post_id: str = typer.Argument(..., help="Post id"),
    content: str = typer.Argument(..., help="Comment text"),
    device: str = typer.Option(..., "--device", help="Device identifier"),
    addiction: str = typer.Option(..., "--addiction", "-a", help="Habit community"),
    start_date: str = typer.Option(..., "--start", help="Timer start date YYYY-MM-DD"),
):
    """Comment on a post."""
    config = _config()
    author = _pseudonym(device, addiction, start_date)

    try:
        feed.add_comment(
            config,
            comment_id=str(uuid.uuid4()),
            post_id=post_id,
            anonymous_id=author,
            content=content,
            timestamp=now_ms(),
        )
    except (LookupError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓ Commented as {author}[/green]")


@app.command()
def react(
    post_id: str = typer.Argument(..., help="Post id"),
    emoji: str = typer.Argument(..., help="Reaction emoji"),
    device: str = typer.Option(..., "--device", help="Device identifier"),
    addiction: str = typer.Option(..., "--addiction", "-a", help="Habit community"),
    start_date: str = typer.Option(..., "--start", help="Timer start date YYYY-MM-DD"),
):
    """Toggle a reaction on a post."""
    config = _config()
    author = _pseudonym(device, addiction, start_date)

    try:
        added = feed.toggle_reaction(config, post_id, author, emoji)
    except LookupError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"{emoji} {'added' if added else 'removed'}")


@app.command()
def flag(
    target_id: str = typer.Argument(..., help="Post or comment id"),
    target_type: str = typer.Option("post", "--type", help="post or comment"),
    device: str = typer.Option(..., "--device", help="Device identifier"),
    addiction: str = typer.Option(..., "--addiction", "-a", help="Habit community"),
    start_date: str = typer.Option(..., "--start", help="Timer start date YYYY-MM-DD"),
):
    """Flag a post or comment for review."""
    config = _config()
    author = _pseudonym(device, addiction, start_date)

    try:
        result = feed.flag_content(config, target_type, target_id, author)
    except (LookupError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if result["already_flagged"]:
        console.print("[yellow]You already flagged this[/yellow]")
    elif result["hidden"]:
        console.print(f"[green]✓ Flagged; {target_type} is now hidden[/green]")
    else:
        console.print(f"[green]✓ Flagged ({result['flag_count']}/{config.flag_threshold})[/green]")


if __name__ == "__main__":
    app()
