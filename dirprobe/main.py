import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer

from .errors import ConfigError, WordlistError
from .models import DEFAULT_USER_AGENT, VERSION, ScanConfig
from .scanner import scan
from .wordlists import read_wordlist

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

log = logging.getLogger("dirprobe.main")

app = typer.Typer(help="dirprobe - probe a web root for unlisted paths.", add_completion=False)


def _version_callback(value: bool):
    if value:
        typer.echo(f"dirprobe {VERSION}")
        raise typer.Exit()


def _fail(message: str, code: int):
    typer.echo(f"error: {message}", err=True)
    raise typer.Exit(code=code)


@app.command()
def run(
    base: str = typer.Argument(..., help="Base URL, e.g. https://example.com"),
    wordlist: Path = typer.Option(..., "--wordlist", "-w", help="Wordlist file, one path per line"),
    concurrency: int = typer.Option(50, "--concurrency", "-c", help="Max requests in flight"),
    get: bool = typer.Option(False, "--get", help="Always use GET instead of HEAD"),
    timeout: float = typer.Option(10.0, help="Per-request timeout in seconds"),
    exts: str = typer.Option("", help="Comma-separated extensions, e.g. php,html"),
    user_agent: str = typer.Option(DEFAULT_USER_AGENT, help="User-Agent header"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress to stderr"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """Probe BASE + every wordlist entry and print interesting responses."""
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING, format=LOG_FORMAT)

    try:
        config = ScanConfig.build(
            base=base,
            wordlist=wordlist,
            concurrency=concurrency,
            prefer_get=get,
            timeout=timeout,
            extensions=exts,
            user_agent=user_agent,
        )
    except ConfigError as e:
        _fail(e.message, 2)

    try:
        words = read_wordlist(config.wordlist)
    except WordlistError as e:
        _fail(e.message, 1)

    log.info("Scanning %s with %d words, concurrency=%d", config.base, len(words), config.concurrency)
    try:
        result = asyncio.run(scan(config, words))
    except KeyboardInterrupt:
        _fail("interrupted", 130)

    if not result.ok:
        _fail(result.error.message, 1)


if __name__ == "__main__":
    app()
