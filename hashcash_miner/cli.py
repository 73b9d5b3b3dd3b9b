"""
CLI entry point for hashcash-miner.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import structlog
import typer
from pydantic import ValidationError

from . import hashcash1
from .config import get_settings
from .exceptions import HashcashError
from .hexcodec import decode_fixed, encode_hex
from .miner import Cash, Miner, sample as run_sample

app = typer.Typer(
    name="hashcash-miner",
    help="Hashcash proof-of-work miner and verifier",
    add_completion=False,
)

hashcash1_app = typer.Typer(help="hashcash1: SHA-512 over 64-byte key || 64-byte challenge")
app.add_typer(hashcash1_app, name="hashcash1")


def configure_logging(level: str, fmt: str) -> None:
    """Send structlog output to stderr so stdout carries only results."""
    renderer = (
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.WARNING)
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _fail(error: Exception) -> typer.Exit:
    typer.echo(f"Error: {error}", err=True)
    return typer.Exit(1)


@app.callback()
def setup() -> None:
    """Hashcash proof-of-work miner and verifier."""
    try:
        settings = get_settings()
    except ValidationError as e:
        raise _fail(e)

    configure_logging(settings.log_level, settings.log_format)


@hashcash1_app.command(context_settings={"ignore_unknown_options": True})
def create(
    challenge_hex: str = typer.Argument(..., help="64-byte challenge as hex"),
    limit: int = typer.Argument(..., help="Target difficulty (accepted, currently unused)"),
    timeout_seconds: int = typer.Argument(..., help="Search budget in seconds"),
) -> None:
    """
    Search for the best key and print it as hex.

    Example:
        hashcash-miner hashcash1 create 0101...01 -1 60
    """
    try:
        challenge = decode_fixed(challenge_hex, hashcash1.CHALLENGE_SIZE, "challenge")
        key = hashcash1.create(challenge, timeout_seconds, limit)
    except HashcashError as e:
        raise _fail(e)

    typer.echo(encode_hex(key))


@hashcash1_app.command()
def verify(
    key_hex: str = typer.Argument(..., help="64-byte key as hex"),
    challenge_hex: str = typer.Argument(..., help="64-byte challenge as hex"),
) -> None:
    """Print the number of leading zero bits the key scores."""
    try:
        key = decode_fixed(key_hex, hashcash1.KEY_SIZE, "key")
        challenge = decode_fixed(challenge_hex, hashcash1.CHALLENGE_SIZE, "challenge")
        bits = hashcash1.verify(key, challenge)
    except HashcashError as e:
        raise _fail(e)

    typer.echo(str(bits))


@app.command()
def mine(
    payload_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="File to stamp"
    ),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", help="Target difficulty"),
    computation_time: Optional[int] = typer.Option(
        None, "--time", "-t", help="Search budget in seconds"
    ),
) -> None:
    """
    Mine a Cash for a file and print it as JSON.
    """
    settings = get_settings()
    miner = Miner(
        limit=settings.limit if limit is None else limit,
        computation_time=(
            settings.computation_time_seconds if computation_time is None else computation_time
        ),
    )

    try:
        with open(payload_file, "rb") as f:
            cash = miner.create(f)
    except HashcashError as e:
        raise _fail(e)

    if cash is None:
        typer.echo("Mining disabled: limit is 0 or no computation time", err=True)
        raise typer.Exit(1)

    typer.echo(cash.model_dump_json())


@app.command()
def check(
    payload_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="Stamped file"
    ),
    cash_json: str = typer.Argument(..., help="Cash JSON as printed by 'mine'"),
) -> None:
    """Print the score of a Cash against a file."""
    try:
        cash = Cash.model_validate_json(cash_json)
        with open(payload_file, "rb") as f:
            bits = Miner.verify(cash, f)
    except (ValidationError, HashcashError) as e:
        raise _fail(e)

    typer.echo(str(bits))


@app.command()
def sample(
    computation_time: Optional[int] = typer.Option(
        None, "--time", "-t", help="Search budget in seconds"
    ),
) -> None:
    """Mine a random payload and print the score reached."""
    settings = get_settings()
    seconds = settings.computation_time_seconds if computation_time is None else computation_time

    try:
        bits = run_sample(seconds)
    except HashcashError as e:
        raise _fail(e)

    typer.echo(f"{bits} bits in {seconds}s")


@app.command()
def version() -> None:
    """Show the hashcash-miner version."""
    from hashcash_miner import __version__
    typer.echo(f"hashcash-miner v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
