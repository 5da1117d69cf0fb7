import argparse
import logging
import sys

from rich.console import Console
from rich.prompt import Confirm

from clipm import __version__, commands
from clipm.clipboard import Clipboard, PasteboardClipboard
from clipm.config import DB_PATH, DEFAULT_LIMIT, LOG_PATH
from clipm.display import render_entries
from clipm.errors import ClipmError, FilesystemError
from clipm.storage import StorageManager
from clipm.utils import ensure_dirs, format_size

logger = logging.getLogger(__name__)

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def say(message: str) -> None:
    console.print(message, markup=False, soft_wrap=True)


def setup_logging(verbose: bool = False) -> None:
    try:
        file_handler = logging.FileHandler(LOG_PATH)
    except OSError as exc:
        raise FilesystemError(f"cannot open log file {LOG_PATH}: {exc}") from exc
    file_handler.setLevel(logging.INFO)
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[file_handler, stream_handler],
    )


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got '{value}'")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {number}")
    return number


def _positive_int(value: str) -> int:
    number = _non_negative_int(value)
    if number == 0:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clipm",
        description="clipm - command-line clipboard history manager for macOS",
    )
    parser.add_argument("--version", action="version", version=f"clipm {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    sub = parser.add_subparsers(dest="command", required=True, metavar="command")

    store = sub.add_parser("store", help="Save current clipboard to history")
    store.add_argument("-l", "--label", help="Optional label for the entry")
    store.add_argument(
        "-t", "--type", dest="content_type", default="text", metavar="{text,password}",
        help="Content type (password entries are masked and never full-text indexed)",
    )

    get = sub.add_parser("get", help="Copy entry to clipboard (default: most recent)")
    get.add_argument("id", nargs="?", type=int, help="Entry ID (defaults to most recent)")

    lst = sub.add_parser("list", help="Show clipboard history as a table")
    lst.add_argument("-n", "--limit", type=_positive_int, default=DEFAULT_LIMIT, help="Maximum number of entries to show")
    lst.add_argument("-o", "--offset", type=_non_negative_int, default=0, help="Number of entries to skip")
    lst.add_argument("-l", "--label", help="Only entries with this label")
    lst.add_argument("-d", "--days", type=_non_negative_int, help="Only entries from the last D days")
    lst.add_argument("-t", "--type", dest="content_type", metavar="{text,password}", help="Only entries of this type")

    search = sub.add_parser("search", help="Full-text search clipboard history")
    search.add_argument("query", help="Search query")
    search.add_argument("-n", "--limit", type=_positive_int, default=DEFAULT_LIMIT, help="Maximum number of results")
    search.add_argument("-d", "--days", type=_non_negative_int, help="Only entries from the last D days")
    search.add_argument("-t", "--type", dest="content_type", metavar="{text,password}", help="Only entries of this type")

    label = sub.add_parser("label", help="Add, update or remove the label on an entry")
    label.add_argument("id", type=int, help="Entry ID")
    label.add_argument("label", nargs="?", help="Label text (omit or leave blank to remove label)")

    delete = sub.add_parser("delete", help="Delete a single entry")
    delete.add_argument("id", type=int, help="Entry ID to delete")
    delete.add_argument("-f", "--force", action="store_true", help="Skip confirmation prompt")

    clear = sub.add_parser("clear", help="Clear all clipboard history")
    clear.add_argument("-f", "--force", action="store_true", help="Skip confirmation prompt")

    return parser


def confirm(question: str) -> bool:
    return Confirm.ask(question, default=False, console=console)


def run_command(args: argparse.Namespace, storage: StorageManager, clipboard: Clipboard) -> int:
    """Execute one parsed command and print its outcome."""
    logger.debug("Running command %s", args.command)

    if args.command == "store":
        result = commands.store(storage, clipboard, label=args.label, content_type=args.content_type)
        if result.skipped:
            say("Skipped: content matches most recent entry.")
        elif result.label is not None:
            say(f'Stored as entry #{result.entry_id} ({format_size(result.byte_size)}, label: "{result.label}").')
        else:
            say(f"Stored as entry #{result.entry_id} ({format_size(result.byte_size)}).")

    elif args.command == "get":
        entry = commands.get(storage, clipboard, args.id)
        say(f"Copied entry #{entry.id} to clipboard ({format_size(entry.byte_size)}).")

    elif args.command == "list":
        entries = commands.list_entries(
            storage, args.limit, args.offset, label=args.label, days=args.days, content_type=args.content_type
        )
        if not entries:
            say("No entries in clipboard history.")
        else:
            console.print(render_entries(entries))

    elif args.command == "search":
        entries = commands.search(storage, args.query, args.limit, days=args.days, content_type=args.content_type)
        if not entries:
            say(f'No results for "{args.query}".')
        else:
            console.print(render_entries(entries))

    elif args.command == "label":
        new_label = commands.label(storage, args.id, args.label)
        if new_label is None:
            say(f"Label removed from entry #{args.id}.")
        else:
            say(f'Entry #{args.id} labeled "{new_label}".')

    elif args.command == "delete":
        if not args.force and not confirm(f"Delete entry #{args.id}?"):
            say("Aborted.")
            return 0
        commands.delete(storage, args.id)
        say(f"Deleted entry #{args.id}.")

    elif args.command == "clear":
        if not args.force and not confirm("Delete all clipboard history?"):
            say("Aborted.")
            return 0
        count = commands.clear(storage)
        say(f"Cleared {count} entries.")

    return 0


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    try:
        ensure_dirs()
        setup_logging(args.verbose)
        with StorageManager(DB_PATH) as storage:
            code = run_command(args, storage, PasteboardClipboard())
    except ClipmError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        err_console.print(f"Error: {exc}", markup=False, soft_wrap=True)
        sys.exit(1)
    except KeyboardInterrupt:
        err_console.print("Aborted.", markup=False)
        sys.exit(130)

    sys.exit(code)


if __name__ == "__main__":
    main()
