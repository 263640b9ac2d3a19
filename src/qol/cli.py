"""Main CLI for qol."""

import logging
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Generator, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import QolConfig, get_config_help_message, resolve_config
from .db import Database
from .errors import NotFoundError, QolError
from .git import GitCommand, GitRunner, handle_command
from .items import ItemStore
from .quotes import QuoteStore

app = typer.Typer(
    name="qol",
    help="Quality of life commands.",
    invoke_without_command=True,
)
console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Route log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def fail(error: Exception) -> None:
    """Print an error and exit non-zero."""
    console.print(f"[red]Error:[/red] {escape(str(error))}", soft_wrap=True)
    raise typer.Exit(1)


def get_config(ctx: typer.Context) -> QolConfig:
    config = ctx.find_root().obj
    if not isinstance(config, QolConfig):
        config = resolve_config()
        ctx.find_root().obj = config
    return config


@contextmanager
def open_database(ctx: typer.Context) -> Generator[Database, None, None]:
    """Open the database with its schema applied; report qol errors and exit."""
    config = get_config(ctx)
    try:
        with Database(config.db_path) as db:
            db.init_schema(config.schema_path)
            yield db
    except QolError as e:
        fail(e)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"qol {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """Quality of life commands."""
    setup_logging(verbose)
    try:
        ctx.obj = resolve_config()
    except QolError as e:
        fail(e)

    if ctx.invoked_subcommand is None:
        console.print("No command provided.")
        raise typer.Exit(0)


# ============================================================================
# Git Commands
# ============================================================================

git_app = typer.Typer(help="Git repo interactions.")
app.add_typer(git_app, name="git")


def _run_git(command: GitCommand, repo: Optional[Path], **options) -> None:
    try:
        handle_command(command, GitRunner(repo), console, **options)
    except QolError as e:
        fail(e)


RepoOption = typer.Option(None, "--repo", "-C", help="Repository directory (default: cwd)")


@git_app.command("status")
def git_status(repo: Optional[Path] = RepoOption):
    """Short status with branch information."""
    _run_git(GitCommand.STATUS, repo)


@git_app.command("log")
def git_log(
    count: int = typer.Option(10, "--count", "-n", help="Number of commits to show"),
    repo: Optional[Path] = RepoOption,
):
    """One-line log of recent commits."""
    _run_git(GitCommand.LOG, repo, count=count)


@git_app.command("branches")
def git_branches(repo: Optional[Path] = RepoOption):
    """List local branches with their upstreams."""
    _run_git(GitCommand.BRANCHES, repo)


@git_app.command("pull")
def git_pull(repo: Optional[Path] = RepoOption):
    """Fast-forward pull from the upstream branch."""
    _run_git(GitCommand.PULL, repo)


@git_app.command("push")
def git_push(repo: Optional[Path] = RepoOption):
    """Push the current branch."""
    _run_git(GitCommand.PUSH, repo)


@git_app.command("commit")
def git_commit(
    message: str = typer.Option(..., "--message", "-m", help="Commit message"),
    stage_all: bool = typer.Option(False, "--all", "-a", help="Stage tracked changes first"),
    repo: Optional[Path] = RepoOption,
):
    """Commit staged changes."""
    _run_git(GitCommand.COMMIT, repo, message=message, stage_all=stage_all)


@git_app.command("sync")
def git_sync(repo: Optional[Path] = RepoOption):
    """Rebase onto upstream, then push."""
    _run_git(GitCommand.SYNC, repo)


# ============================================================================
# Web Search
# ============================================================================


@app.command("web-search")
def web_search(
    query: Optional[List[str]] = typer.Argument(None, help="Search terms"),
):
    """Search google."""
    console.print("[red]Error:[/red] web-search is not implemented.")
    raise typer.Exit(1)


# ============================================================================
# Variable Commands
# ============================================================================

var_app = typer.Typer(help="Stored key/value pairs.")
app.add_typer(var_app, name="var")


@var_app.command("set")
def var_set(
    ctx: typer.Context,
    var: str = typer.Argument(..., help="Key"),
    val: Optional[str] = typer.Argument(None, help="Value (omit to store an empty value)"),
):
    """Store a value, overwriting any existing one."""
    with open_database(ctx) as db:
        ItemStore(db).insert_or_update(var, val)
        console.print(f"[green]✓[/green] Set [cyan]{escape(var)}[/cyan]")


@var_app.command("add")
def var_add(
    ctx: typer.Context,
    var: str = typer.Argument(..., help="Key"),
    val: Optional[str] = typer.Argument(None, help="Value"),
):
    """Store a value only if the key is new."""
    with open_database(ctx) as db:
        if ItemStore(db).insert(var, val):
            console.print(f"[green]✓[/green] Added [cyan]{escape(var)}[/cyan]")
        else:
            console.print(f"[yellow]{escape(var)} already exists; left unchanged.[/yellow]")


@var_app.command("get")
def var_get(
    ctx: typer.Context,
    var: str = typer.Argument(..., help="Key"),
):
    """Print the value stored under a key."""
    with open_database(ctx) as db:
        item = ItemStore(db).get_by_var(var)
        console.print(item.val or "", markup=False, highlight=False)


@var_app.command("list")
def var_list(ctx: typer.Context):
    """List every stored key/value pair."""
    with open_database(ctx) as db:
        items = ItemStore(db).get_all()

    if not items:
        console.print("[dim]No items stored.[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", justify="right")
    table.add_column("VAR", style="cyan")
    table.add_column("VAL")
    for item in items:
        table.add_row(str(item.id), escape(item.var), escape(item.val or ""))
    console.print(table)


@var_app.command("update")
def var_update(
    ctx: typer.Context,
    item_id: int = typer.Argument(..., help="Item ID"),
    var: str = typer.Argument(..., help="New key"),
    val: Optional[str] = typer.Argument(None, help="New value"),
):
    """Overwrite the key and value of an item by ID."""
    with open_database(ctx) as db:
        if not ItemStore(db).update(item_id, var, val):
            console.print(f"[yellow]No item updated:[/yellow] no item with id {item_id}")
            raise typer.Exit(1)
        console.print(f"[green]✓[/green] Updated item {item_id}")


@var_app.command("rm")
def var_rm(
    ctx: typer.Context,
    item_id: int = typer.Argument(..., help="Item ID"),
):
    """Delete an item by ID."""
    with open_database(ctx) as db:
        if not ItemStore(db).delete(item_id):
            raise NotFoundError(f"No item with id {item_id}")
        console.print(f"[green]✓[/green] Deleted item {item_id}")


@var_app.command("exists")
def var_exists(
    ctx: typer.Context,
    var: str = typer.Argument(..., help="Key"),
):
    """Exit 0 if the key is stored, 1 otherwise."""
    with open_database(ctx) as db:
        found = ItemStore(db).exists_by_var(var)
    console.print("yes" if found else "no")
    if not found:
        raise typer.Exit(1)


# ============================================================================
# Quote Commands
# ============================================================================

quote_app = typer.Typer(help="Quotes and the quote of the day.")
app.add_typer(quote_app, name="quote")


def _print_quote(quote) -> None:
    console.print(f"[italic]“{escape(quote.quote)}”[/italic]")
    if quote.author:
        console.print(f"  — {escape(quote.author)}", style="dim")


@quote_app.command("add")
def quote_add(
    ctx: typer.Context,
    quote: str = typer.Argument(..., help="Quote text"),
    author: Optional[str] = typer.Option(None, "--author", "-a", help="Author"),
):
    """Add a quote (updates the author if the quote exists)."""
    with open_database(ctx) as db:
        quote_id = QuoteStore(db).add(quote, author)
        console.print(f"[green]✓[/green] Stored quote {quote_id}")


@quote_app.command("list")
def quote_list(ctx: typer.Context):
    """List stored quotes."""
    with open_database(ctx) as db:
        quotes = QuoteStore(db).list_quotes()

    if not quotes:
        console.print("[dim]No quotes stored.[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", justify="right")
    table.add_column("Quote")
    table.add_column("Author", style="cyan")
    for q in quotes:
        table.add_row(str(q.id), escape(q.quote), escape(q.author or ""))
    console.print(table)


@quote_app.command("rm")
def quote_rm(
    ctx: typer.Context,
    quote_id: int = typer.Argument(..., help="Quote ID"),
):
    """Delete a quote."""
    with open_database(ctx) as db:
        if not QuoteStore(db).delete(quote_id):
            raise NotFoundError(f"No quote with id {quote_id}")
        console.print(f"[green]✓[/green] Deleted quote {quote_id}")


@quote_app.command("today")
def quote_today(
    ctx: typer.Context,
    day: Optional[str] = typer.Option(None, "--date", "-d", help="Day as YYYY-MM-DD (default: today)"),
):
    """Show the quote of the day."""
    try:
        target = date.fromisoformat(day) if day else None
    except ValueError:
        console.print(f"[red]Error:[/red] Invalid date: {escape(day)}")
        raise typer.Exit(1)

    with open_database(ctx) as db:
        _print_quote(QuoteStore(db).daily(target))


@quote_app.command("import")
def quote_import(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="YAML file of quotes"),
):
    """Import quotes from a YAML file."""
    with open_database(ctx) as db:
        count = QuoteStore(db).import_yaml(path)
        console.print(f"[green]✓[/green] Imported {count} quotes")


# ============================================================================
# Database Commands
# ============================================================================

db_app = typer.Typer(help="Database maintenance.")
app.add_typer(db_app, name="db")


@db_app.command("init")
def db_init(ctx: typer.Context):
    """Create the database and its tables if absent."""
    with open_database(ctx) as db:
        console.print(f"[green]✓[/green] Database ready at {escape(str(db.db_path))}")


@db_app.command("vacuum")
def db_vacuum(ctx: typer.Context):
    """Rebuild the database file to reclaim space."""
    with open_database(ctx) as db:
        db.compact()
        console.print(f"[green]✓[/green] Vacuumed {escape(str(db.db_path))}")


@db_app.command("info")
def db_info(ctx: typer.Context):
    """Show resolved paths and tables."""
    config = get_config(ctx)
    console.print(get_config_help_message(config), markup=False, highlight=False)
    with open_database(ctx) as db:
        console.print(f"  Tables: {', '.join(db.tables())}")


if __name__ == "__main__":
    app()
