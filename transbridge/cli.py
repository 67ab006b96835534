from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import TranslatorSettings, load_settings, settings_from_env
from .engines.base import BaseEngine
from .engines.factory import build_registry
from .errors import TranslatorError
from .models import TranslationRequest, is_auto
from .registry import TranslatorManager
from .utils.hashing import stable_id as compute_stable_id
from .utils.logging_config import configure_logging

app = typer.Typer(add_completion=False, help="Ad-hoc translation and detection across configured engines")
console = Console()


class State:
    config: Path | None = None


def _run_async(coro):
    return asyncio.run(coro)


def _load_settings() -> TranslatorSettings:
    if State.config is not None:
        return load_settings(State.config)
    return settings_from_env()


def _manager() -> TranslatorManager:
    return TranslatorManager(build_registry(_load_settings()))


def _select(manager: TranslatorManager, engine: str | None, all_engines: bool) -> List[BaseEngine]:
    if all_engines:
        return [manager.by(name) for name in manager.names()]
    return [manager.by(engine) if engine else manager.default()]


def _fail(exc: TranslatorError) -> None:
    console.print(f"[red]Error:[/red] {escape(str(exc))}")
    raise typer.Exit(code=1)


@app.callback()
def main(
    config: Path | None = typer.Option(
        None, "--config", "-c", exists=True, readable=True, help="JSON engine configuration (defaults to environment)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(level="DEBUG" if verbose else "WARNING")
    State.config = config


@app.command(help="Translate TEXT with one engine, or with every engine side by side")
def translate(
    text: str = typer.Argument(...),
    engine: str | None = typer.Option(None, "--engine", "-e", help="Engine name (defaults to the configured default)"),
    source: str = typer.Option("auto", "--from", "-f", help="Source language code or 'auto'"),
    target: str = typer.Option("es", "--to", "-t", help="Target language code"),
    html: bool = typer.Option(False, help="Treat input as HTML"),
    all_engines: bool = typer.Option(False, "--all", help="Compare every registered engine"),
) -> None:
    async def runner() -> None:
        manager = _manager()
        try:
            request = TranslationRequest(text=text, source=source, target=target, html=html)
            engines = _select(manager, engine, all_engines)
            if all_engines:
                table = Table("Engine", "Translation", "Detected")
                for item in engines:
                    result = await item.translate(request)
                    table.add_row(item.name, escape(result.translated_text), result.detected_source)
                console.print(table)
                return
            item = engines[0]
            result = await item.translate(request)
            console.print(f"[green]{escape(f'[{item.name}]')}[/green] {escape(result.translated_text)}")
            if is_auto(source) and result.detected_source:
                console.print(f"Detected: {result.detected_source}")
        finally:
            await manager.aclose()

    try:
        _run_async(runner())
    except TranslatorError as exc:
        _fail(exc)


@app.command(help="Detect the language of TEXT")
def detect(
    text: str = typer.Argument(...),
    engine: str | None = typer.Option(None, "--engine", "-e"),
    all_engines: bool = typer.Option(False, "--all", help="Compare every registered engine"),
) -> None:
    async def runner() -> None:
        manager = _manager()
        try:
            table = Table("Engine", "Language", "Confidence")
            for item in _select(manager, engine, all_engines):
                result = await item.detect(text)
                table.add_row(item.name, result.language, f"{result.confidence:.2f}")
            console.print(table)
        finally:
            await manager.aclose()

    try:
        _run_async(runner())
    except TranslatorError as exc:
        _fail(exc)


@app.command(help="List registered engines")
def engines() -> None:
    try:
        manager = _manager()
    except TranslatorError as exc:
        _fail(exc)
        return
    table = Table("Name", "Vendor", "Base URI", "Default")
    for name in manager.names():
        item = manager.by(name)
        marker = "*" if name == manager.default_name() else ""
        table.add_row(name, item.vendor, item.transport.base_uri, marker)
    console.print(table)
    logger.debug(f"{len(manager.names())} engines registered")


@app.command("stable-id", help="Print the locale-tagged content id of TEXT")
def stable_id(text: str = typer.Argument(...), locale: str = typer.Argument(...)) -> None:
    try:
        console.print(compute_stable_id(text, locale))
    except TranslatorError as exc:
        _fail(exc)


if __name__ == "__main__":
    app()
