#!/usr/bin/env python3
"""
Run the Dhab HTTP API.

Serves the sobriety, community, auth and habit catalog endpoints.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import logging

import typer
import uvicorn
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel

from dhab.api.app import create_app
from dhab.core.config import Config

app = typer.Typer(help="Run the Dhab HTTP API")
console = Console()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


@app.command()
def main(
    host: str = typer.Option("127.0.0.1", "--host", "-h", help="Interface to bind"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to listen on"),
):
    """
    Start the API server.

    Example:
        python scripts/serve.py --port 3000
    """
    load_dotenv()
    config = Config.from_env()

    console.print(Panel(config.get_summary(), title="Dhab", border_style="cyan"))

    uvicorn.run(create_app(config), host=host, port=port, log_config=None)


if __name__ == "__main__":
    app()
