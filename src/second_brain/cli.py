from __future__ import annotations

import argparse
import asyncio
import logging
import os
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .config import AppConfig, load_config
from .llm import CompletionClient, OpenAICompletionClient
from .models import Category
from .query import AssistantBusyError, referenced_documents
from .workspace import Workspace

console = Console()


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _category(value: str) -> Category:
    category = Category.parse(value)
    if category is None:
        raise argparse.ArgumentTypeError(
            f"unknown category {value!r} (choose from {', '.join(c.value for c in Category)})"
        )
    return category


def _make_client(require_key: bool) -> CompletionClient:
    if require_key and not os.getenv("OPENAI_API_KEY"):
        raise SystemExit("OPENAI_API_KEY is not set. Put it in a .env file or environment variable.")
    return OpenAICompletionClient()


class _OfflineClient:
    """Client for commands that never reach the completion service."""

    async def complete(self, model: str, max_tokens: int, prompt: str) -> str:
        raise RuntimeError("completion service is not available for this command")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="second-brain",
        description="Second Brain - collect your notes and ask a personal coach about them.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config.yaml",
        help="Path to a config YAML file (default: config.yaml).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest_parser = subparsers.add_parser("ingest", help="Ingest and categorize .txt/.md files.")
    ingest_parser.add_argument("paths", nargs="+", type=Path, help="Files or directories to ingest.")

    ask_parser = subparsers.add_parser("ask", help="Ask a question about your documents.")
    ask_parser.add_argument("question", type=str, help="Question to ask.")
    ask_parser.add_argument("--category", type=_category, default=None, help="Only search this category.")

    docs_parser = subparsers.add_parser("docs", help="List ingested documents.")
    docs_parser.add_argument("--category", type=_category, default=None, help="Only list this category.")

    cat_parser = subparsers.add_parser("categorize", help="Override the category of a document.")
    cat_parser.add_argument("filename", type=str)
    cat_parser.add_argument("category", type=_category)

    rm_parser = subparsers.add_parser("remove", help="Remove a document.")
    rm_parser.add_argument("filename", type=str)

    subparsers.add_parser("history", help="Show the conversation transcript.")

    clear_parser = subparsers.add_parser("clear", help="Delete all documents and messages.")
    clear_parser.add_argument("--yes", action="store_true", help="Confirm the irreversible clear.")

    settings_parser = subparsers.add_parser("settings", help="Show or edit coaching settings.")
    settings_sub = settings_parser.add_subparsers(dest="action", required=True)
    settings_sub.add_parser("show", help="Print the current settings.")
    settings_sub.add_parser("reset", help="Restore the built-in defaults.")
    add_p = settings_sub.add_parser("add-principle", help="Append an alignment principle.")
    add_p.add_argument("text", type=str)
    rm_p = settings_sub.add_parser("remove-principle", help="Remove an alignment principle (1-based).")
    rm_p.add_argument("number", type=int)
    style_p = settings_sub.add_parser("style", help="Change the communication style.")
    style_p.add_argument("--directness", type=int, dest="directness_level")
    style_p.add_argument("--challenge", type=int, dest="challenge_approach")
    style_p.add_argument("--support", type=str, dest="support_style")
    style_p.add_argument("--feedback", type=str, dest="feedback_method")
    trait_p = settings_sub.add_parser("trait", help="Turn a personality trait on or off.")
    trait_p.add_argument("name", type=str, help="camelCase trait name, e.g. emotionallyAware.")
    trait_p.add_argument("state", choices=["on", "off"])

    return parser


def _print_documents(ws: Workspace, category: Optional[Category]) -> None:
    docs = ws.documents.documents(category)
    title = f"{category.value}: {len(docs)}" if category else f"All Documents: {len(docs)}"
    table = Table(title=title)
    table.add_column("Document")
    table.add_column("Category")
    table.add_column("Chunks", justify="right")
    table.add_column("Size", justify="right")
    for doc in docs:
        table.add_row(
            doc.filename,
            f"[{doc.category.color}]{doc.category.glyph} {doc.category.value}[/]",
            str(len(doc.chunks)),
            f"{doc.size_bytes / 1024:.1f}KB",
        )
    console.print(table)


def _print_settings(ws: Workspace) -> None:
    s = ws.settings.current
    style = s.communication_style
    principles = "\n".join(f"{i}. {p}" for i, p in enumerate(s.alignment_principles, start=1))
    console.print(Panel(principles, title="Alignment principles", expand=False))
    console.print(
        Panel(
            f"Directness: {style.directness_level}/10\n"
            f"Challenge: {style.challenge_approach}/10\n"
            f"Support style: {style.support_style}\n"
            f"Feedback method: {style.feedback_method}",
            title="Communication style",
            expand=False,
        )
    )
    traits = "\n".join(
        f"[green]{name}: on[/]" if on else f"[dim]{name}: off[/]"
        for name, on in s.response_personality.items()
    )
    console.print(Panel(traits or "(none)", title="Response personality", expand=False))


def _print_history(ws: Workspace) -> None:
    if not len(ws.conversation):
        console.print("[yellow]No messages yet.[/yellow]")
        return
    for msg in ws.conversation.messages:
        if msg.role == "user":
            console.print(f"[bold blue]You:[/bold blue] {msg.content}")
            continue
        console.print(f"[bold magenta]Coach:[/bold magenta] {msg.content}")
        sources = referenced_documents(msg)
        if sources:
            console.print(f"[dim italic]Referenced: {', '.join(sources)}[/dim italic]")


async def _ask(ws: Workspace, question: str, category: Optional[Category]) -> None:
    ws.selected_category = category
    if category is not None:
        console.print(f"[{category.color}]{category.glyph} Searching in: {category.value}[/]")
    with console.status("Thinking..."):
        reply = await ws.ask(question)

    console.rule("[bold green]Answer[/bold green]")
    console.print(reply.content.strip())
    sources = referenced_documents(reply)
    if sources:
        console.rule("[bold blue]Referenced[/bold blue]")
        console.print(", ".join(sources))


async def _ingest(ws: Workspace, paths: List[Path]) -> None:
    with console.status("Processing & categorizing files..."):
        added = await ws.upload(paths)
    if not added:
        console.print("[yellow]No new .txt or .md documents were ingested.[/yellow]")
        return
    for doc in added:
        console.print(
            f"[green]Added[/green] {doc.filename}: {len(doc.chunks)} chunks, "
            f"[{doc.category.color}]{doc.category.glyph} {doc.category.value}[/]"
        )


def run(args: argparse.Namespace, cfg: AppConfig, client: Optional[CompletionClient] = None) -> int:
    needs_service = args.command in {"ingest", "ask"}
    if client is None:
        client = _make_client(require_key=True) if needs_service else _OfflineClient()
    ws = Workspace(cfg, client)

    if args.command == "ingest":
        asyncio.run(_ingest(ws, args.paths))
    elif args.command == "ask":
        try:
            asyncio.run(_ask(ws, args.question, args.category))
        except (AssistantBusyError, ValueError) as e:
            console.print(f"[red]{e}[/red]")
            return 1
    elif args.command == "docs":
        _print_documents(ws, args.category)
    elif args.command == "categorize":
        try:
            doc = ws.set_category(args.filename, args.category)
        except KeyError as e:
            console.print(f"[red]{e.args[0]}[/red]")
            return 1
        console.print(f"{doc.filename} -> {doc.category.glyph} {doc.category.value}")
    elif args.command == "remove":
        try:
            ws.remove_document(args.filename)
        except KeyError as e:
            console.print(f"[red]{e.args[0]}[/red]")
            return 1
        console.print(f"Removed {args.filename}")
    elif args.command == "history":
        _print_history(ws)
    elif args.command == "clear":
        if not args.yes:
            console.print("[red]This deletes all documents and messages. Re-run with --yes.[/red]")
            return 1
        ws.clear_all()
        console.print("[green]All documents and messages cleared.[/green]")
    elif args.command == "settings":
        return _run_settings(ws, args)
    return 0


def _run_settings(ws: Workspace, args: argparse.Namespace) -> int:
    try:
        if args.action == "reset":
            ws.settings.reset()
        elif args.action == "add-principle":
            ws.settings.add_principle(args.text)
        elif args.action == "remove-principle":
            if args.number < 1:
                raise IndexError("principle numbers start at 1")
            ws.settings.remove_principle(args.number - 1)
        elif args.action == "style":
            changes = {
                k: v
                for k, v in vars(args).items()
                if k in {"directness_level", "challenge_approach", "support_style", "feedback_method"}
                and v is not None
            }
            ws.settings.set_style(**changes)
        elif args.action == "trait":
            ws.settings.set_trait(args.name, args.state == "on")
    except (ValueError, IndexError) as e:
        console.print(f"[red]Settings not changed: {e}[/red]")
        return 1
    _print_settings(ws)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    cfg = load_config(Path(args.config))
    _setup_logging(cfg.log_level)
    return run(args, cfg)


if __name__ == "__main__":
    raise SystemExit(main())
