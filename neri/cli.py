import argparse
import logging
from typing import List, Optional

from rich.console import Console

from .config import get_config
from .errors import TranslationError
from .logger import TranslationLogger, setup_logging
from .shell import Shell
from .translator import Translator
from .ui import display_error, display_history, display_provider_config, display_translation

logger = logging.getLogger(__name__)

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="neri",
        description="""
        neri turns natural language into a single shell command using an AI provider
        (openai, gemini or ollama). Commands are displayed, never executed.
        Run without arguments to start the interactive shell.
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show informational log messages.")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'ask' command
    ask_parser = subparsers.add_parser("ask", help="Translates a single request and prints the command.")
    ask_parser.add_argument("text", nargs="+", help="The natural language request.")
    ask_parser.add_argument("-q", "--quiet", action="store_true", help="Print only the command.")

    # 'history' command
    history_parser = subparsers.add_parser("history", help="Shows recent translations.")
    history_parser.add_argument("-n", "--limit", type=int, default=10, help="Number of entries to show.")

    # 'config' command
    config_parser = subparsers.add_parser("config", help="Shows the resolved provider configuration.")
    config_parser.add_argument("--init", action="store_true", help="Create a default config file.")

    # 'shell' command
    subparsers.add_parser("shell", help="Starts the interactive shell (default).")

    return parser


def handle_ask(text: str, quiet: bool = False) -> int:
    translator = Translator()
    config = translator.provider_config()
    history = TranslationLogger()
    try:
        translation = translator.translate(text)
    except TranslationError as e:
        display_error(e, console=console)
        history.log_translation(text, config.provider, config.model, raw=e.raw, error=str(e))
        return 1

    if quiet:
        # plain print keeps the command pipeable
        print(translation.command)
    else:
        display_translation(translation.raw, translation.command, console=console)
    history.log_translation(text, config.provider, config.model, raw=translation.raw, command=translation.command)
    return 0


def handle_history(limit: int) -> int:
    display_history(TranslationLogger().get_history(limit=limit), console=console)
    return 0


def handle_config(init: bool = False) -> int:
    config = get_config()
    if init:
        if config.write_default_config():
            console.print(f"Created default config file at: {config.config_file}")
        else:
            console.print(f"[yellow]Config file already exists: {config.config_file}[/yellow]")
        return 0
    display_provider_config(config.provider_config(), config.config_file, console=console)
    return 0


def run_cli(argv: Optional[List[str]] = None) -> int:
    """Parse arguments and dispatch. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    config = get_config()
    if args.verbose:
        config.verbose = True
    setup_logging(config)

    if args.command == "ask":
        return handle_ask(" ".join(args.text), quiet=args.quiet)
    elif args.command == "history":
        return handle_history(args.limit)
    elif args.command == "config":
        return handle_config(init=args.init)
    return Shell(history=TranslationLogger(config), console=console).run()
