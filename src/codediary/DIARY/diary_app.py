# DIARY/diary_app.py
import json
from datetime import datetime
from typing import List, Optional

import dateparser
import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table
from rich.text import Text

from codediary.config import (
    DATABASE_ENV_VAR, LOG_FILE_ENV_VAR, get_database_path, get_log_file, get_log_level
)
from codediary.logging_setup import setup_logging
from codediary.DIARY.database import DiaryStore
from codediary.DIARY.errors import DiaryError, EmptyDiaryError, IndexOutOfRangeError
from codediary.DIARY.model import Entry, sort_entries
from codediary.DIARY.selection import entry_at, filter_by_range, resolve_position

console = Console()
err_console = Console(stderr=True)

diary_app = typer.Typer(help="Write, browse and prune your diary entries.")

ACTIONS = ["add", "list", "view", "delete"]


def fail(message: str):
    """Prints an error on stderr and stops the command with exit code 1."""
    err_console.print(f"[bold red]Error:[/bold red] {escape(message)}")
    raise typer.Exit(code=1)


def get_store(ctx: typer.Context) -> DiaryStore:
    """Opens the diary database on first use and closes it when the command ends."""
    state = ctx.ensure_object(dict)
    if "store" not in state:
        try:
            state["store"] = DiaryStore(state.get("db_path") or get_database_path())
        except DiaryError as e:
            fail(str(e))
        ctx.call_on_close(state["store"].close)
    return state["store"]


@diary_app.callback(invoke_without_command=True)
def diary_main_callback(
    ctx: typer.Context,
    db: Optional[str] = typer.Option(None, "--db", envvar=DATABASE_ENV_VAR,
        help="Path to the diary database. Defaults to ~/code_diary.db."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging on stderr."),
    log_file: Optional[str] = typer.Option(None, "--log-file",
        help=f"Also write logs to this file (rotated). Can be set with ${LOG_FILE_ENV_VAR}."
    ),
):
    """
    Sets up logging and remembers which diary database to use.
    Without a command, asks what you want to do.
    """
    setup_logging(get_log_level(verbose), get_log_file(log_file))
    ctx.obj = {"db_path": get_database_path(db)}

    if ctx.invoked_subcommand is None:
        store = get_store(ctx)
        action = Prompt.ask("What do you want to do?", choices=ACTIONS, default="add")
        logger.debug("Interactive action: {}", action)
        if action == "add":
            add_entry(store, None, None)
        elif action == "list":
            show_entries(store)
        elif action == "view":
            view_entry(store, None)
        else:
            delete_entry(store, None, assume_yes=False)


def parse_time_arg(time_str: Optional[str]) -> Optional[datetime]:
    if time_str:
        try:
            # ISO first, then natural language like "last monday"
            return datetime.fromisoformat(time_str)
        except ValueError:
            parsed_date = dateparser.parse(time_str)
            if parsed_date:
                return parsed_date
            fail(f"Could not parse time: '{time_str}'")
    return None


def load_sorted_entries(store: DiaryStore) -> List[Entry]:
    try:
        return sort_entries(store.get_all_entries())
    except DiaryError as e:
        fail(str(e))


def display_entries(entries: List[Entry], title: Optional[str] = None):
    """Helper to show entries in a table. '#' is the 1-based position used by view/delete."""
    table = Table(title=title, show_header=True, header_style="bold blue")
    table.add_column("#", justify="right", style="dim", width=4)
    table.add_column("Title", style="bold")
    table.add_column("Written", justify="center", style="magenta")
    table.add_column("Preview")

    for idx, entry in enumerate(entries, start=1):
        title_text = Text(entry.display_title, style="bold cyan" if entry.title else "white")
        preview = entry.content.splitlines()[0] if entry.content else ""
        if len(preview) > 40:
            preview = preview[:37] + "..."
        table.add_row(str(idx), title_text, str(entry.timestamp), Text(preview, style="yellow"))

    console.print(table)


def pick_position(entries: List[Entry], message: str) -> int:
    display_entries(entries)
    return IntPrompt.ask(message)


def add_entry(store: DiaryStore, title: Optional[str], content: Optional[str]) -> Entry:
    if content is None:
        if title is None:
            title = typer.prompt("Please give a title (optional)", default="", show_default=False)
        content = typer.prompt("Please enter your diary entry")

    try:
        entry = Entry.create_new(title, content, store.next_id)
        store.insert_entry(entry)
    except DiaryError as e:
        fail(str(e))

    console.print(f"Added [bold green]{escape(entry.summary())}[/bold green].")
    return entry


def show_entries(store: DiaryStore, since: Optional[datetime] = None,
                 until: Optional[datetime] = None, as_json: bool = False):
    entries = filter_by_range(load_sorted_entries(store), since, until)
    if as_json:
        typer.echo(json.dumps([entry.to_dict() for entry in entries], indent=2))
        return
    if not entries:
        console.print("[yellow]No diary entries yet.[/yellow]" if since is None and until is None
                      else "[yellow]No diary entries in that range.[/yellow]")
        return
    display_entries(entries, title="Your Diary")


def view_entry(store: DiaryStore, position: Optional[int]) -> Entry:
    entries = load_sorted_entries(store)
    try:
        if not entries:
            raise EmptyDiaryError("No diary entries yet.")
        if position is None:
            position = pick_position(entries, "Which entry do you want to view?")
        entry = entry_at(position - 1, entries)
    except EmptyDiaryError as e:
        fail(str(e))
    except IndexOutOfRangeError:
        fail(f"There is no entry #{position}. Pick a number between 1 and {len(entries)}.")

    console.print(Panel(
        Text(entry.content, style="yellow"),
        title=f"[bold blue]{escape(entry.display_title)}[/bold blue]",
        subtitle=f"[red]{entry.timestamp}[/red]",
        expand=False,
    ))
    return entry


def delete_entry(store: DiaryStore, position: Optional[int], assume_yes: bool):
    # One fetch: the id is resolved against the same list the user saw
    entries = load_sorted_entries(store)
    try:
        if not entries:
            raise EmptyDiaryError("No diary entries yet.")
        if position is None:
            position = pick_position(entries, "Which entry do you want to delete?")
        entry_id = resolve_position(position - 1, entries)
    except EmptyDiaryError as e:
        fail(str(e))
    except IndexOutOfRangeError:
        fail(f"There is no entry #{position}. Pick a number between 1 and {len(entries)}.")

    entry = entries[position - 1]
    if not assume_yes and not typer.confirm(f"Delete '{entry.summary()}'. Are you sure?"):
        console.print("[yellow]Nothing deleted.[/yellow]")
        raise typer.Exit(code=0)

    try:
        store.delete_entry(entry_id)
    except DiaryError as e:
        fail(str(e))
    console.print(f"Entry [bold yellow]#{position}[/bold yellow] ({escape(entry.summary())}) deleted.")


@diary_app.command()
def add(
    ctx: typer.Context,
    title: Optional[str] = typer.Option(None, "--title", "-t", help="Optional title for the entry."),
    content: Optional[str] = typer.Option(None, "--content", "-c",
        help="The entry text. Prompted for when left out."
    ),
):
    """
    Writes a new diary entry stamped with the current time.
    """
    add_entry(get_store(ctx), title, content)


@diary_app.command("list")
def list_command(
    ctx: typer.Context,
    since: Optional[str] = typer.Option(None, "--since", help="Only entries written at or after this time (e.g. '2024-01-01' or 'last week')."),
    until: Optional[str] = typer.Option(None, "--until", help="Only entries written at or before this time."),
    as_json: bool = typer.Option(False, "--json", help="Print entries as JSON instead of a table."),
):
    """
    Lists your entries, oldest first.
    """
    show_entries(get_store(ctx), parse_time_arg(since), parse_time_arg(until), as_json)


# Negative numbers reach the range check instead of being read as options
@diary_app.command(context_settings={"ignore_unknown_options": True})
def view(
    ctx: typer.Context,
    position: Optional[int] = typer.Argument(None, help="The # of the entry as shown by 'list'."),
):
    """
    Shows one entry in full.
    """
    view_entry(get_store(ctx), position)


@diary_app.command(context_settings={"ignore_unknown_options": True})
def delete(
    ctx: typer.Context,
    position: Optional[int] = typer.Argument(None, help="The # of the entry as shown by 'list'."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
):
    """
    Deletes an entry by its position in 'list'. This cannot be undone.
    """
    delete_entry(get_store(ctx), position, yes)


@diary_app.command(hidden=True)
def reset(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
):
    """
    Removes every entry from the diary.
    """
    if not yes and not typer.confirm("This wipes your whole diary. Are you sure?"):
        raise typer.Exit(code=0)
    try:
        get_store(ctx).reset()
    except DiaryError as e:
        fail(str(e))
    console.print("[bold red]Diary wiped.[/bold red]")


if __name__ == "__main__":
    diary_app()
