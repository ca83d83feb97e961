from __future__ import annotations

import asyncio
from pathlib import Path
import typer
from aiohttp import web
from rich.console import Console
from rich.table import Table

from catalog import JsonCatalog
from config import SETTINGS
from translator.background import BackgroundTranslator
from translator.factory import build_orchestrator
from utils.cache import open_translation_cache
from utils.lang import SUPPORTED_LOCALES
from utils.logging_config import configure_logging
from web import build_app

app = typer.Typer(add_completion=False)
console = Console()


def _run_async(coro):
    return asyncio.run(coro)


def _open_cache():
    return open_translation_cache(
        SETTINGS.cache.path,
        capacity=SETTINGS.cache.capacity,
        flush_every=SETTINGS.cache.flush_every,
    )


def _check_locale(locale: str) -> str:
    if locale not in SUPPORTED_LOCALES:
        raise typer.BadParameter(f"locale must be one of {', '.join(SUPPORTED_LOCALES)}")
    return locale


@app.command(help="Translate a text, or the contents of a file, into the target locale")
def translate(
    text: str | None = typer.Argument(None, help="Text to translate"),
    file: Path | None = typer.Option(None, "--file", "-f", exists=True, readable=True, dir_okay=False),
    target: str = typer.Option(SETTINGS.default_target_locale, "--target", "-t", callback=_check_locale),
) -> None:
    configure_logging(SETTINGS.log_file)
    if file is not None:
        text = file.read_text(encoding="utf-8")
    if not text:
        raise typer.BadParameter("provide TEXT or --file")

    with _open_cache() as cache:
        orchestrator = build_orchestrator(cache)

        async def runner() -> str:
            try:
                return await orchestrator.translate_long(text, target)
            finally:
                await orchestrator.client.translator.close()

        with console.status(f"Translating {len(text)} characters to {target}"):
            result = _run_async(runner())
    console.print(result)


@app.command(help="Serve the on-demand translation endpoint for a catalog file")
def serve(
    catalog: Path = typer.Option(Path("data/catalog.json"), "--catalog", "-c"),
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8080, "--port", "-p"),
) -> None:
    configure_logging(SETTINGS.log_file)
    with _open_cache() as cache:
        source = JsonCatalog(catalog)
        console.log(f"Loaded {len(source)} catalog entries from {catalog}")
        background = BackgroundTranslator(
            build_orchestrator(cache),
            source,
            enabled=SETTINGS.enable_translation,
            target_locales=(SETTINGS.default_target_locale,),
        )
        web.run_app(
            build_app(background, cache, default_locale=SETTINGS.default_target_locale),
            host=host,
            port=port,
            print=console.log,
        )


@app.command("cache-info", help="Show the translation cache location and size")
def cache_info() -> None:
    configure_logging(SETTINGS.log_file, level="WARNING")
    with _open_cache() as cache:
        table = Table(show_header=False)
        table.add_row("Path", str(SETTINGS.cache.path))
        table.add_row("Entries", str(cache.size()))
        table.add_row("Capacity", str(cache.capacity))
        table.add_row("Flush every", f"{cache.flush_every} inserts")
        console.print(table)


if __name__ == "__main__":
    app()
