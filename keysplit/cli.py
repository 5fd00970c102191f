"""
keysplit Command Line Interface - Split a document on a regex key.

Usage:
    keysplit -i <document> -o <output dir> -m "<pattern>" [-d] [-v] [-e]

Exit codes:
    0  success
    1  input file not found
    2  input is not a supported document
    3  output directory not found
    4  no split pattern given
    5  invalid pattern or option
    6  input could not be read
    7  output could not be written
"""

import json
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

import keysplit
from keysplit.config import (
    SplitConfig,
    COLLISION_POLICIES,
    NO_MATCH_POLICIES,
    PDF_METHODS,
    parse_key_group,
)
from keysplit.exceptions import (
    KeySplitError,
    InputNotFoundError,
    NoSplitModeError,
    OutputDirectoryError,
)
from keysplit.document.backend import backend_for_path
from keysplit.splitter import KeySplitter
from keysplit.types import SplitResult


def configure_logging(verbose: bool, explicit: bool, level: str = "WARNING") -> None:
    """Route keysplit logging to stderr through rich."""
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        show_time=False,
    )
    root = logging.getLogger("keysplit")
    root.handlers[:] = [handler]
    root.propagate = False
    root.setLevel(logging.INFO if verbose else getattr(logging, level, logging.WARNING))

    # Per-page match details
    logging.getLogger("keysplit.matches").setLevel(
        logging.DEBUG if explicit else logging.NOTSET
    )


def check_preconditions(document: str, output: str, pattern: str) -> None:
    """
    Validate the run before any page is read, in exit code order.

    Raises:
        InputNotFoundError, InputFormatError, OutputDirectoryError, NoSplitModeError
    """
    if not Path(document).is_file():
        raise InputNotFoundError(f"Input file does not exist: {document}")
    backend_for_path(document)
    if not Path(output).is_dir():
        raise OutputDirectoryError(f"Output directory does not exist: {output}")
    if not pattern:
        raise NoSplitModeError("No valid split type selected (use -m/--matching-key-split)")


def print_result(result: SplitResult, console: Console) -> None:
    table = Table(title=f"{Path(result.source).name}: {result.total_pages} pages")
    table.add_column("Pages", justify="right")
    table.add_column("Key")
    table.add_column("Output")

    for written in result.segments:
        seg = written.segment
        pages = str(seg.start) if seg.start == seg.end else f"{seg.start}-{seg.end}"
        key = escape(seg.key) if seg.key is not None else "[dim](none)[/dim]"
        table.add_row(pages, key, escape(written.path))

    console.print(table)


@click.command()
@click.version_option(version=keysplit.__version__, prog_name="keysplit")
@click.option("--input", "-i", "document", required=True,
              help="Path of the document to split")
@click.option("--output", "-o", required=True,
              help="Directory to write output documents to")
@click.option("--matching-key-split", "-m", "pattern", default=None,
              help="Split where the regex capture on a page changes")
@click.option("--key-group", "-g", default=None,
              help="Capture group index or name holding the key [default: 1]")
@click.option("--dated", "-d", is_flag=True,
              help="Start output filenames with today's date (YYYYMMDD_)")
@click.option("--on-collision", type=click.Choice(COLLISION_POLICIES), default=None,
              help="What to do when a key reappears later in the document [default: suffix]")
@click.option("--no-match", type=click.Choice(NO_MATCH_POLICIES), default=None,
              help="What to do with pages the pattern does not match [default: carry_forward]")
@click.option("--method", type=click.Choice(PDF_METHODS), default=None,
              help="PDF text extraction method [default: pymupdf]")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Output verbose process info")
@click.option("--explicit", "-e", is_flag=True,
              help="Show regex matches and groups for every page")
@click.pass_context
def cli(ctx, document, output, pattern, key_group, dated, on_collision,
        no_match, method, as_json, verbose, explicit):
    """
    Split a multi-page document wherever the regex key changes.

    Examples:
        keysplit -i statements.pdf -o out/ -m "^Account: (\\d+)"
        keysplit -i invoices.pdf -o out/ -m "Invoice (?P<no>\\d+)" -g no -d
    """
    try:
        env = SplitConfig.from_env()
    except KeySplitError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(e.exit_code)

    configure_logging(verbose, explicit, env.log_level)
    console = Console()

    pattern = pattern or env.pattern
    dated = dated or env.dated

    try:
        check_preconditions(document, output, pattern)
        config = SplitConfig(
            pattern=pattern,
            key_group=parse_key_group(key_group) if key_group is not None else env.key_group,
            dated=dated,
            date_format=env.date_format,
            on_collision=on_collision or env.on_collision,
            no_match=no_match or env.no_match,
            pdf_method=method or env.pdf_method,
            verbose=verbose,
            explicit=explicit,
            log_level=env.log_level,
        )
        result = KeySplitter(config).split(document, output)
    except KeySplitError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(e.exit_code)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        print_result(result, console)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
