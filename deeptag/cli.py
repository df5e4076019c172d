#!/usr/bin/env python3
"""
deeptag - LLM keyword tags for outliner notes

Command-line front end running the tagging commands against a JSON
document, the same way a host application runs them on its outline.
"""
import sys
import argparse
import logging
from dataclasses import asdict
from datetime import date, datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from deeptag.commands import CommandContext, CommandRegistry
from deeptag.config import DeeptagConfig, init_config
from deeptag.document import Document
from deeptag.extractor import extract_selection
from deeptag.prompts import build_prompt
from deeptag.tagger import register_commands

logger = logging.getLogger(__name__)


console = Console()


def parse_date(value: str) -> date:
    """argparse type for YYYY-MM-DD dates."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}', expected YYYY-MM-DD")


def mask_secret(value: str) -> str:
    if not value:
        return "(not set)"
    if len(value) <= 8:
        return "*" * len(value)
    return f"{value[:4]}...{value[-4:]}"


def run_command(args, name: str, node_id: Optional[str] = None,
                page: Optional[str] = None, selection: Optional[str] = None) -> int:
    """Load the document, invoke a tagging command and save the result."""
    config = args.deeptag_config
    document = Document.load(Path(args.document), console=console)
    if page:
        document.current_page = page
    if selection is not None:
        document.selection = selection

    registry = CommandRegistry()
    register_commands(registry)

    context = CommandContext.from_host(document, config, node_id=node_id, today=args.date)
    tags = registry.invoke(name, context)
    if tags is None:
        return 1

    console.print(", ".join(tags), style="bold", markup=False)
    if args.dry_run:
        console.print("[dim]Dry run: document not saved[/dim]")
    else:
        document.save()
    return 0


def cmd_block(args) -> int:
    """Tag a single block."""
    return run_command(args, "tags", node_id=args.node_id)


def cmd_page(args) -> int:
    """Tag a whole page."""
    return run_command(args, "page-tags", page=args.page)


def cmd_selection(args) -> int:
    """Tag a piece of selected text."""
    return run_command(args, "selection-tags", node_id=args.node_id, selection=args.text)


def cmd_prompt(args) -> int:
    """Print the prompt that would be sent, without calling the API."""
    text = args.text if args.text is not None else sys.stdin.read()
    content = extract_selection(text)
    if not content:
        console.print("[yellow]Nothing to analyze[/yellow]")
        return 1
    print(build_prompt(content, args.date or date.today()))
    return 0


def cmd_config(args) -> int:
    """Show or set configuration values."""
    config = args.deeptag_config

    if args.action == "set":
        if not args.key or args.value is None:
            console.print("[red]Usage: deeptag config set KEY VALUE[/red]")
            return 1
        try:
            config.set_value(args.key, args.value)
        except (KeyError, ValueError) as e:
            console.print(f"[red]Error: {e}[/red]")
            return 1
        path = Path(args.config) if args.config else None
        config.persist(args.key, path)
        console.print(f"[green]Set {args.key}[/green]")
        return 0

    table = Table(title="deeptag configuration")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="green")
    for key, value in asdict(config).items():
        if args.key and key != args.key:
            continue
        shown = mask_secret(value) if key == "api_credential" else str(value)
        table.add_row(key, shown)
    console.print(table)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deeptag",
        description="deeptag - keyword tags for outliner notes from a chat-completion API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Tag one block (writes or updates its "tags::" child)
  deeptag block notes.json a1b2c3

  # Tag a whole page (appends a "Page Tags::" node)
  deeptag page notes.json --page Journal

  # Tag a selection (adds a "Selection Tags::" node after the block)
  deeptag selection notes.json a1b2c3 --text "Some selected text"

  # Inspect the prompt for a given date
  deeptag prompt "Les réseaux de neurones" --date 2025-02-15

  # Configuration
  deeptag config set api_credential sk-...
  deeptag config show

Configuration:
  Config file: ~/.config/deeptag/config.toml or ./deeptag.toml
  Environment: DEEPTAG_API_CREDENTIAL, DEEPTAG_MODEL, DEEPTAG_ENDPOINT
        """
    )

    # Global options
    parser.add_argument("--config", help="Config file path")
    parser.add_argument("--api-key", help="API key (overrides config)")
    parser.add_argument("--date", type=parse_date, help="Reference date, YYYY-MM-DD (default: today)")
    parser.add_argument("--dry-run", action="store_true", help="Do not save the document")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True, help="Commands")

    block_parser = subparsers.add_parser("block", help="Tag a block")
    block_parser.add_argument("document", help="JSON document")
    block_parser.add_argument("node_id", help="Block identifier")
    block_parser.set_defaults(func=cmd_block)

    page_parser = subparsers.add_parser("page", help="Tag a page")
    page_parser.add_argument("document", help="JSON document")
    page_parser.add_argument("--page", help="Page name (default: first page)")
    page_parser.set_defaults(func=cmd_page)

    selection_parser = subparsers.add_parser("selection", help="Tag selected text")
    selection_parser.add_argument("document", help="JSON document")
    selection_parser.add_argument("node_id", help="Block being edited")
    selection_parser.add_argument("--text", required=True, help="Selected text")
    selection_parser.set_defaults(func=cmd_selection)

    prompt_parser = subparsers.add_parser("prompt", help="Show the prompt for some text")
    prompt_parser.add_argument("text", nargs="?", help="Text (default: stdin)")
    prompt_parser.set_defaults(func=cmd_prompt)

    config_parser = subparsers.add_parser("config", help="Show or set configuration")
    config_parser.add_argument("action", nargs="?", choices=["show", "set"], default="show")
    config_parser.add_argument("key", nargs="?", help="Config key")
    config_parser.add_argument("value", nargs="?", help="Config value (for set)")
    config_parser.set_defaults(func=cmd_config)

    return parser


def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config_file = Path(args.config) if args.config else None
    config: DeeptagConfig = init_config(config_file=config_file, api_credential=args.api_key)
    args.deeptag_config = config

    level = logging.DEBUG if args.verbose else getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format='%(levelname)s: %(message)s')

    try:
        code = args.func(args)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
