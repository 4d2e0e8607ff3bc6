"""Command-line interface for regex-mask."""

import sys
import logging
from pathlib import Path
from typing import Optional

import click

from regexmask import __version__
from regexmask.catalog import DEFAULT_CATALOG
from regexmask.config import load_config
from regexmask.lifecycle import ExecutionScope
from regexmask.models import MaskError, MaskPolicy
from regexmask.udf import ScopedMasker


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """regex-mask: Mask account numbers, emails and national IDs."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose)


@main.command()
@click.option(
    "--key",
    "-k",
    required=True,
    help="Catalog key (e.g., SSN, EMAIL, APN)",
)
@click.option(
    "--text",
    "-t",
    help="Text to mask (use --in for file input)",
)
@click.option(
    "--in",
    "input_file",
    type=click.Path(exists=True, path_type=Path),
    help="Input file to mask",
)
@click.option(
    "--out",
    "output_file",
    type=click.Path(path_type=Path),
    help="Output file (prints to stdout if not specified)",
)
@click.option(
    "--mask-char",
    "-m",
    help="Single replacement character (asterisks if not specified)",
)
@click.option(
    "--stats",
    is_flag=True,
    help="Print masking statistics",
)
def mask(
    key: str,
    text: Optional[str],
    input_file: Optional[Path],
    output_file: Optional[Path],
    mask_char: Optional[str],
    stats: bool,
) -> None:
    """Mask text or file with a catalog pattern."""
    if text is None and input_file is None:
        click.echo("Error: Must provide --text or --in", err=True)
        sys.exit(1)

    if input_file:
        text = input_file.read_text(encoding="utf-8")

    masker = ScopedMasker()
    scope = ExecutionScope(scope_id="cli")
    masker.lifecycle.init(scope)
    try:
        if mask_char is None:
            result = masker.mask_detailed(scope, key, text, policy=MaskPolicy.FILL_ASTERISK)
        else:
            result = masker.mask_detailed(scope, key, text, mask_char)
    finally:
        masker.lifecycle.teardown(scope)

    if not result.ok or result.text is None:
        click.echo(f"Error: {_describe_failure(key, result.error, result.message)}", err=True)
        sys.exit(1)

    if output_file:
        output_file.write_text(result.text, encoding="utf-8")
        if stats:
            click.echo(f"Masked {result.match_count} matches to {output_file}")
    else:
        click.echo(result.text)
        if stats:
            click.echo(f"\n[Masked {result.match_count} matches]", err=True)


@main.command()
def list_keys() -> None:
    """List available catalog keys."""
    click.echo(f"Loaded {len(DEFAULT_CATALOG)} patterns\n")
    for entry in DEFAULT_CATALOG.entries():
        click.echo(f"  {entry.key:<10} {entry.pattern}")


@main.command()
@click.option(
    "--port",
    "-p",
    type=int,
    help="Port to listen on",
)
@click.option(
    "--host",
    "-h",
    help="Host to bind to",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Configuration file",
)
@click.pass_context
def serve(
    ctx: click.Context,
    port: Optional[int],
    host: Optional[str],
    config: Optional[Path],
) -> None:
    """Start HTTP server."""
    try:
        import uvicorn
        from regexmask.server import create_app
    except ImportError:
        click.echo(
            "Error: Server dependencies not installed. Install with: pip install regex-mask[server]",
            err=True,
        )
        sys.exit(1)

    try:
        config_data = load_config(config)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)

    if not ctx.obj.get("verbose"):
        logging.getLogger().setLevel(config_data["logging"]["level"])

    # Override with CLI options
    server_config = config_data["server"]
    port = port or server_config["port"]
    host = host or server_config["host"]

    click.echo(f"Starting server on {host}:{port}")

    app = create_app(config_data)

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level="info" if ctx.obj.get("verbose") else "warning",
    )


def _describe_failure(key: str, error: Optional[MaskError], message: Optional[str]) -> str:
    """Human readable failure description."""
    if message:
        return message
    if error == MaskError.UNKNOWN_KEY:
        return f"Unknown key: {key}"
    if error == MaskError.INVALID_MASK_LENGTH:
        return "Mask character must be exactly one character"
    return error.value if error else "masking failed"


if __name__ == "__main__":
    main()
