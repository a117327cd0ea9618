"""Command-line interface for apidocs2md."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markdown import Markdown
from rich.progress import Progress, SpinnerColumn, TextColumn

from . import __version__
from .core import ConversionSession, DocumentConverter, save_markdown
from .errors import Apidocs2mdError
from .logging_config import setup_logging
from .models.config import ConverterConfig
from .models.events import ConversionStatus


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="apidocs2md",
        description="Convert an API documentation page to clean Markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Save to api-documentation.md
  apidocs2md https://docs.example.com/api/reference

  # Write to a specific file, or to stdout
  apidocs2md https://docs.example.com/api -o stripe-api.md
  apidocs2md https://docs.example.com/api --stdout

  # Preview in the terminal
  apidocs2md https://docs.example.com/api --preview

  # Convert a saved page
  apidocs2md --html-file page.html --base-url https://docs.example.com/api/
        """,
    )

    parser.add_argument(
        "url",
        nargs="?",
        help="URL of the documentation page",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="YAML configuration file",
    )

    # Input
    input_group = parser.add_argument_group("input")
    input_group.add_argument(
        "--html-file",
        type=Path,
        default=None,
        help="Convert a local HTML file instead of fetching URL",
    )
    input_group.add_argument(
        "--base-url",
        default=None,
        help="URL used to resolve relative links in --html-file (default: URL or the file's location)",
    )

    # Output
    output_group = parser.add_argument_group("output")
    output_group.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output file (default: api-documentation.md)",
    )
    output_group.add_argument(
        "--stdout",
        action="store_true",
        help="Write Markdown to stdout instead of a file",
    )
    output_group.add_argument(
        "--preview",
        action="store_true",
        help="Render the Markdown in the terminal instead of saving it",
    )

    # Conversion
    conversion_group = parser.add_argument_group("conversion")
    conversion_group.add_argument(
        "--engine",
        choices=["rules", "html2text"],
        default=None,
        help="Conversion engine (default: rules)",
    )
    conversion_group.add_argument(
        "--min-length",
        type=int,
        default=None,
        help="Minimum Markdown length before extraction is considered failed (default: 100)",
    )

    # Network
    network_group = parser.add_argument_group("network")
    network_group.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Request timeout in seconds (default: 10)",
    )
    network_group.add_argument(
        "--relay",
        default=None,
        metavar="URL",
        help="Relay URL template containing '{url}'",
    )
    network_group.add_argument(
        "--retries",
        type=int,
        default=None,
        help="Retry attempts for 429/5xx responses (default: 0)",
    )

    # Logging
    log_group = parser.add_mutually_exclusive_group()
    log_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )
    log_group.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Minimal output",
    )

    return parser


def build_config(args: argparse.Namespace) -> ConverterConfig:
    """Merge the optional YAML file with command-line overrides."""
    base = ConverterConfig.from_yaml_file(args.config) if args.config else ConverterConfig()
    config_kwargs: dict[str, Any] = base.model_dump()

    if args.output is not None:
        config_kwargs["output"]["path"] = args.output

    if args.engine is not None:
        config_kwargs["markdown"]["engine"] = args.engine
    if args.min_length is not None:
        config_kwargs["markdown"]["min_content_length"] = args.min_length

    if args.timeout is not None:
        config_kwargs["network"]["timeout"] = args.timeout
    if args.relay is not None:
        config_kwargs["network"]["relay_url"] = args.relay
    if args.retries is not None:
        config_kwargs["network"]["max_retries"] = args.retries

    if args.verbose:
        config_kwargs["log_level"] = "DEBUG"
    elif args.quiet:
        config_kwargs["log_level"] = "ERROR"

    return ConverterConfig.model_validate(config_kwargs)


def convert_file(args: argparse.Namespace, config: ConverterConfig) -> str:
    """Convert a local HTML file."""
    base_url = args.base_url or args.url or args.html_file.resolve().as_uri()
    html = args.html_file.read_bytes()
    return DocumentConverter(config).convert(html, base_url)


async def convert_url(args: argparse.Namespace, config: ConverterConfig, console: Console) -> Optional[str]:
    """Fetch and convert args.url, showing a progress spinner."""
    async with ConversionSession(config) as session:
        if args.quiet:
            async for _ in session.run(args.url):
                pass
        else:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
            ) as progress:
                task = progress.add_task("Starting...", total=None)

                async for event in session.run(args.url):
                    if event.status != ConversionStatus.ERROR:
                        progress.update(task, description=f"[cyan]{event.progress}% {event.message}")

        if session.error:
            console.print(f"[red]Error:[/red] {session.error}")
        return session.markdown


def emit(markdown: str, args: argparse.Namespace, config: ConverterConfig, console: Console) -> None:
    """Write the document to stdout, the terminal preview or the output file."""
    if args.stdout:
        sys.stdout.write(markdown + "\n")
    elif args.preview:
        Console().print(Markdown(markdown))
    else:
        path = save_markdown(markdown, config.output.path, overwrite=config.output.overwrite)
        if not args.quiet:
            console.print(f"[green]Conversion completed successfully![/green] Saved to {path}")


def run_converter(args: argparse.Namespace) -> int:
    """Run a conversion with given arguments."""
    # Status goes to stderr so --stdout output stays clean
    console = Console(stderr=True)

    if not args.url and not args.html_file:
        console.print("[red]Error:[/red] Please provide a URL or --html-file")
        return 1

    try:
        config = build_config(args)
    except (ValidationError, yaml.YAMLError, OSError) as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 1

    setup_logging(config.log_level, log_file=config.log_file)

    try:
        if args.html_file:
            markdown: Optional[str] = convert_file(args, config)
        else:
            markdown = asyncio.run(convert_url(args, config, console))
        if markdown is None:
            return 1
        emit(markdown, args, config, console)
    except (Apidocs2mdError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1

    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    return run_converter(args)


if __name__ == "__main__":
    sys.exit(main())
