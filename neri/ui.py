from typing import Any, Dict, List

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .config import ProviderConfig
from .errors import TranslationError

console = Console()


def display_banner(console: Console = console):
    console.print(Panel(
        Text("neri - AI assisted mini shell", justify="center"),
        subtitle="Type 'exit' or 'quit' to leave",
        border_style="blue"
    ))
    console.print("[dim]Commands are shown, never executed.[/dim]\n")


def display_api_key_warning(config: ProviderConfig, console: Console = console):
    """Warn when a provider that needs a key has none configured."""
    console.print(Panel(
        f"No AI_API_KEY found in the environment.\n"
        f"To use [bold]{config.provider}[/bold], run: export AI_API_KEY=your_key\n"
        f"The shell will keep running but API calls will fail.",
        title="[bold yellow]Warning[/bold yellow]",
        border_style="yellow"
    ))


def display_translation(raw: str, command: str, console: Console = console, show_raw: bool = True):
    """Show the provider's raw answer and the extracted command."""
    if show_raw and raw:
        console.print(f"[dim]AI raw:[/dim] {escape(raw)}")
    console.print(f"[bold green]CMD:[/bold green] {escape(command)}")
    console.print()


def display_error(error: TranslationError, console: Console = console):
    console.print(f"[bold red]Error processing request:[/bold red] {escape(str(error))}")
    if error.raw:
        console.print(f"[dim]AI raw:[/dim] {escape(error.raw)}")
    console.print()


def display_history(history: List[Dict[str, Any]], console: Console = console) -> None:
    """Display translation history."""
    if not history:
        console.print("[yellow]No translation history found.[/yellow]")
        return

    table = Table(title=f"Translation History (Last {len(history)})")
    table.add_column("Time", style="cyan")
    table.add_column("Provider", style="magenta")
    table.add_column("Instruction", style="green")
    table.add_column("Command", style="yellow")

    for entry in history:
        datetime_str = entry.get("datetime", "Unknown")
        if isinstance(datetime_str, str) and len(datetime_str) > 19:
            datetime_str = datetime_str[:19].replace("T", " ")

        if entry.get("command"):
            command = escape(entry["command"])
        else:
            command = f"[red]{escape(entry.get('error') or 'no command')}[/red]"
        table.add_row(
            datetime_str,
            entry.get("provider", "?"),
            escape(entry.get("instruction", "")),
            command,
        )

    console.print(table)


def display_provider_config(config: ProviderConfig, config_file: str, console: Console = console):
    table = Table(title="Provider Configuration", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Provider", config.provider)
    table.add_row("Endpoint", config.base_url or "[red]none[/red]")
    table.add_row("Model", config.model or "[red]none[/red]")
    if config.requires_api_key:
        table.add_row("API key", config.masked_api_key() or "[red]not set[/red]")
    table.add_row("Config file", config_file)
    console.print(table)
