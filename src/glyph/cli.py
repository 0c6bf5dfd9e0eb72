"""CLI entry point for glyph.

Provides ``ask``, ``diff``, ``stand``, ``pin`` and ``config`` sub-commands using
Click and Rich for output formatting.

Usage::

    glyph ask how do I undo the last commit
    git log -5 | glyph ask summarise these commits --no-context
    glyph diff --staged
    glyph stand --since yesterday
    glyph pin add "docker compose logs -f" --tag ops
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass, field
from typing import NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text

from glyph.config import Config, config_path, load_config
from glyph.context import gather_context
from glyph.errors import GlyphError
from glyph.git import get_commit_subjects, get_diff
from glyph.mind.client import client_from_config
from glyph.render import STYLES, StreamPrinter, make_console, print_error, print_muted
from glyph.store import PIN_TYPES, PinEntry, PinStore, infer_type, short_id, truncate

logger = logging.getLogger(__name__)

ASK_SYSTEM_PROMPT = """You are a helpful terminal assistant. Be concise. Use plain text, no markdown headers.
When relevant, prefer showing commands over explaining them."""

DIFF_SYSTEM_PROMPT = """You are a code reviewer. Summarize what this diff does in plain language.
List the most important changes as a short bullet list.
End with one line flagging any potential issue if you see one, or "Looks clean." if not."""

STAND_SYSTEM_PROMPT = """You are helping a developer write a standup update.
Given a list of git commit messages, write a short standup in first person.
Format: 3-5 bullet points, plain English, no jargon, no markdown.
Focus on what was done, not implementation details."""


@dataclass
class AppContext:
    config: Config
    log_handler: RichHandler | None = None
    console: Console = field(init=False)
    err_console: Console = field(init=False)

    def __post_init__(self) -> None:
        self.restyle(self.config.default_style)

    def restyle(self, style: str) -> None:
        """Rebuild both consoles for *style* and point logging at the new stderr one."""
        self.config.default_style = style
        self.console = make_console(style)
        self.err_console = make_console(style, stderr=True)
        if self.log_handler is not None:
            self.log_handler.console = self.err_console


def _setup_logging(verbose: bool) -> RichHandler:
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(console=make_console(stderr=True), rich_tracebacks=True)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
    )
    return handler


def _apply_style(ctx: click.Context, param: click.Parameter, value: str | None) -> None:
    app = ctx.find_object(AppContext)
    if value and app is not None:
        app.restyle(value)


def style_option(func):
    """Per-command ``--style`` that overrides the configured default_style."""
    return click.option(
        "--style",
        type=click.Choice(STYLES),
        default=None,
        expose_value=False,
        callback=_apply_style,
        help="Output style: ascii, rounded or minimal.",
    )(func)


def _fail(app: AppContext, exc: GlyphError) -> NoReturn:
    print_error(app.err_console, str(exc))
    raise SystemExit(1) from exc


async def _stream_answer(app: AppContext, system: str, user: str) -> str:
    client = client_from_config(app.config)
    async with client:
        fragments = await client.stream(system, user)
        async with fragments:
            text = await StreamPrinter(app.console).print_stream(fragments)
        if fragments.interrupted is not None:
            logger.info("Answer may be incomplete: %s", fragments.interrupted)
        return text


def _answer(app: AppContext, system: str, user: str) -> None:
    try:
        asyncio.run(_stream_answer(app, system, user))
    except GlyphError as exc:
        _fail(app, exc)


@click.group()
@click.version_option(package_name="glyph")
@click.option(
    "--style",
    type=click.Choice(STYLES),
    default=None,
    help="Output style (defaults to the configured default_style).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, style: str | None, verbose: bool) -> None:
    """glyph: small AI helpers for the terminal."""
    handler = _setup_logging(verbose)
    try:
        config = load_config()
    except GlyphError as exc:
        print_error(handler.console, str(exc))
        raise SystemExit(1) from exc
    if style:
        config.default_style = style

    ctx.obj = AppContext(config=config, log_handler=handler)


@main.command()
@click.argument("question", nargs=-1, required=True)
@click.option("--no-context", is_flag=True, help="Skip automatic directory context injection.")
@style_option
@click.pass_obj
def ask(app: AppContext, question: tuple[str, ...], no_context: bool) -> None:
    """Ask a question, with the current directory as context."""
    text = " ".join(question)

    stdin = click.get_text_stream("stdin")
    if not stdin.isatty():
        piped = stdin.read()
        if piped:
            text = f"{piped}\n\n{text}"

    system = ASK_SYSTEM_PROMPT
    if not no_context:
        dir_context = gather_context(os.getcwd())
        if dir_context:
            system += "\n\nCurrent directory context:\n" + dir_context

    _answer(app, system, text)


@main.command()
@click.option("--staged", is_flag=True, help="Diff staged changes (git diff --cached).")
@click.option("--commit", default="", help="Explain a specific commit (git show <hash>).")
@style_option
@click.pass_obj
def diff(app: AppContext, staged: bool, commit: str) -> None:
    """Explain a git diff."""
    try:
        diff_text = get_diff(staged=staged, commit=commit)
    except GlyphError as exc:
        _fail(app, exc)

    if not diff_text.strip():
        print_muted(app.console, "No changes found.")
        return
    _answer(app, DIFF_SYSTEM_PROMPT, diff_text)


@main.command()
@click.option(
    "--since",
    default="today",
    show_default=True,
    help="Date range: today, yesterday, '2 days ago', or any git date.",
)
@click.option(
    "--copy", "copy_tip", is_flag=True, help="Print a tip for piping output to the clipboard."
)
@style_option
@click.pass_obj
def stand(app: AppContext, since: str, copy_tip: bool) -> None:
    """Write a standup update from recent commits."""
    try:
        commits = get_commit_subjects(since)
    except GlyphError as exc:
        _fail(app, exc)

    if not commits.strip():
        print_muted(app.console, f"No commits found since {since}.")
        return
    _answer(app, STAND_SYSTEM_PROMPT, commits)

    if copy_tip:
        print_muted(
            app.err_console,
            "\nTip: pipe output to clipboard with: glyph stand | pbcopy  (macOS) "
            "or  glyph stand | xclip  (Linux)",
        )


@main.command(name="config")
@click.pass_obj
def show_config(app: AppContext) -> None:
    """Show the effective configuration."""
    cfg = app.config
    table = Table(title=str(config_path()))
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_row("ai_provider", cfg.ai_provider)
    table.add_row("ai_model", cfg.ai_model)
    table.add_row("api_key", _mask(cfg.api_key))
    table.add_row("ollama_host", cfg.ollama_host)
    table.add_row("default_style", cfg.default_style)
    app.console.print(table)


def _mask(secret: str) -> str:
    if not secret:
        return "(not set)"
    if len(secret) <= 8:
        return "****"
    return f"{secret[:4]}...{secret[-4:]}"


# ---------------------------------------------------------------------------
# pin
# ---------------------------------------------------------------------------

PIN_TEXT_WIDTH = 60


def _pin_table(entries: list[PinEntry]) -> Table:
    table = Table()
    for header in ("ID", "TYPE", "TAG", "TEXT", "DATE"):
        table.add_column(header)
    for entry in entries:
        table.add_row(
            short_id(entry.id),
            entry.kind,
            Text(entry.tag),
            Text(truncate(entry.text, PIN_TEXT_WIDTH)),
            entry.created_at.date().isoformat(),
        )
    return table


@main.group()
@style_option
def pin() -> None:
    """Clipboard for things you find in the terminal."""


@pin.command(name="add")
@click.argument("text", nargs=-1, required=True)
@click.option("--tag", default="", help="Tag for the entry.")
@click.option("--url", "as_url", is_flag=True, help="Mark the entry as a URL.")
@click.option("--cmd", "as_cmd", is_flag=True, help="Mark the entry as a command.")
@click.pass_obj
def pin_add(
    app: AppContext, text: tuple[str, ...], tag: str, as_url: bool, as_cmd: bool
) -> None:
    """Save a new entry."""
    joined = " ".join(text)
    if as_url:
        kind = "url"
    elif as_cmd:
        kind = "cmd"
    else:
        kind = infer_type(joined)

    entry = PinEntry(text=joined, tag=tag, kind=kind)
    try:
        PinStore().append(entry)
    except GlyphError as exc:
        _fail(app, exc)
    click.echo(f"pinned {short_id(entry.id)} [{kind}]")


@pin.command(name="get")
@click.argument("entry_id")
@click.pass_obj
def pin_get(app: AppContext, entry_id: str) -> None:
    """Print the raw text of an entry."""
    try:
        entry = PinStore().get(entry_id)
    except GlyphError as exc:
        _fail(app, exc)
    click.echo(entry.text, nl=False)


@pin.command(name="list")
@click.option("--tag", default="", help="Filter by tag.")
@click.option("--type", "kind", type=click.Choice(PIN_TYPES), default=None, help="Filter by type.")
@click.pass_obj
def pin_list(app: AppContext, tag: str, kind: str | None) -> None:
    """List pinned entries."""
    try:
        entries = PinStore().load()
    except GlyphError as exc:
        _fail(app, exc)
    if tag:
        entries = [e for e in entries if e.tag == tag]
    if kind:
        entries = [e for e in entries if e.kind == kind]
    app.console.print(_pin_table(entries))


@pin.command(name="rm")
@click.argument("entry_id")
@click.pass_obj
def pin_rm(app: AppContext, entry_id: str) -> None:
    """Remove an entry."""
    try:
        PinStore().remove(entry_id)
    except GlyphError as exc:
        _fail(app, exc)
    click.echo(f"removed {entry_id}")


@pin.command(name="search")
@click.argument("query")
@click.pass_obj
def pin_search(app: AppContext, query: str) -> None:
    """Search entries by text or tag."""
    try:
        entries = PinStore().search(query)
    except GlyphError as exc:
        _fail(app, exc)
    app.console.print(_pin_table(entries))


if __name__ == "__main__":
    main()
