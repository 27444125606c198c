from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from jsonsql.completion import SchemaCompleter, column_insert_text
from jsonsql.config import get_settings
from jsonsql.domain.models import LoadResult
from jsonsql.errors import EngineError, InputError
from jsonsql.pipeline import ProjectionPipeline
from jsonsql.reporter import print_columns, print_error, print_readiness, print_result
from jsonsql.utils.logging import configure_logging

app = typer.Typer(help="Load JSON into a table and query it with SQL.")

SHELL_HELP = """Commands:
  .columns      show the column list
  .load PATH    load another JSON file ('-' for stdin)
  .pick COLUMN  append a column to the current query
  .run          run the current query
  .help         show this help
  .quit         leave the shell
Anything else runs as SQL and becomes the current query."""


def _read_source(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


async def _load(
    pipeline: ProjectionPipeline, source: str, console: Console
) -> Optional[LoadResult]:
    """Load a JSON file into the pipeline; report failures and return None."""
    try:
        text = _read_source(source)
    except OSError as exc:
        print_error(f"Cannot read {source}: {exc}", console)
        return None
    try:
        loaded = await pipeline.load_text(text)
    except InputError as exc:
        print_error(str(exc), console)
        return None
    except EngineError as exc:
        print_error(exc.message, console)
        return None
    if loaded is None:
        print_error(f"{source} is empty; nothing loaded.", console)
        return None
    console.print(
        f"Loaded {loaded.row_count:,} row(s) into [bold]{pipeline.table_name}[/bold] "
        f"with {len(loaded.columns)} column(s)."
    )
    return loaded


@app.callback()
def setup(
    log_level: Optional[str] = typer.Option(
        None, "--log-level", "-l", help="Override LOG_LEVEL (e.g. DEBUG, WARNING)."
    ),
) -> None:
    settings = get_settings()
    configure_logging(level=log_level or settings.log_level, json_logs=settings.log_json)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"table={settings.table_name} limit={settings.default_query_limit} | "
        f"duckdb={settings.duckdb_database} threads={settings.duckdb_threads or 'auto'} "
        f"init_timeout={settings.engine_init_timeout_seconds:g}s | env={settings.app_env}"
    )


@app.command()
def columns(
    source: str = typer.Argument(..., help="JSON file to load, or '-' for stdin."),
) -> None:
    """
    Load a JSON file and list the inferred columns.
    """
    console = Console()

    async def _run() -> bool:
        pipeline = ProjectionPipeline()
        try:
            if await _load(pipeline, source, console) is None:
                return False
            print_columns(pipeline.schema, console, table_name=pipeline.table_name)
            return True
        finally:
            pipeline.close()

    if not asyncio.run(_run()):
        raise typer.Exit(code=1)


@app.command()
def query(
    source: str = typer.Argument(..., help="JSON file to load, or '-' for stdin."),
    sql: Optional[str] = typer.Argument(
        None, help="SQL to run; previews the table when omitted."
    ),
) -> None:
    """
    Load a JSON file and run one query against it.
    """
    console = Console()

    async def _run() -> bool:
        pipeline = ProjectionPipeline()
        try:
            loaded = await _load(pipeline, source, console)
            if loaded is None:
                return False
            outcome = loaded.preview if sql is None else await pipeline.run_query(sql)
            print_result(outcome, console)
            return outcome.ok
        finally:
            pipeline.close()

    if not asyncio.run(_run()):
        raise typer.Exit(code=1)


def _install_completer(completer: SchemaCompleter) -> None:
    try:
        import readline
    except ImportError:  # pragma: no cover - platforms without readline
        return

    matches: List[str] = []

    def _complete(text: str, state: int) -> Optional[str]:
        if state == 0:
            matches[:] = [item.insert_text for item in completer.complete(text)]
        return matches[state] if state < len(matches) else None

    readline.set_completer_delims(" \t\n,()=<>")
    readline.set_completer(_complete)
    readline.parse_and_bind("tab: complete")


@app.command()
def shell(
    source: Optional[str] = typer.Argument(None, help="JSON file to load first."),
) -> None:
    """
    Interactive session: load JSON, inspect columns, run SQL.
    """
    console = Console()
    pipeline = ProjectionPipeline()
    completer = SchemaCompleter(pipeline.table_name)
    pipeline.subscribe(completer)
    _install_completer(completer)

    loop = asyncio.new_event_loop()
    try:
        try:
            loop.run_until_complete(pipeline.ensure_ready())
        except EngineError as exc:
            print_error(exc.message, console)
        print_readiness(pipeline.state, console)

        draft = pipeline.default_sql
        if source is not None:
            loaded = loop.run_until_complete(_load(pipeline, source, console))
            if loaded is not None:
                print_result(loaded.preview, console)

        console.print(SHELL_HELP, markup=False)
        while True:
            try:
                line = input(f"{pipeline.table_name}> ").strip()
            except EOFError:
                break
            if not line:
                continue
            if line in (".quit", ".exit"):
                break
            if line == ".help":
                console.print(SHELL_HELP, markup=False)
            elif line == ".columns":
                print_columns(pipeline.schema, console, table_name=pipeline.table_name)
            elif line.startswith(".load"):
                path = line[len(".load"):].strip()
                if not path:
                    print_error("Usage: .load PATH", console)
                else:
                    loaded = loop.run_until_complete(_load(pipeline, path, console))
                    if loaded is not None:
                        draft = pipeline.default_sql
                        print_result(loaded.preview, console)
            elif line.startswith(".pick"):
                name = line[len(".pick"):].strip()
                if name not in {column.name for column in pipeline.schema}:
                    print_error(f"Unknown column: {name or '(none)'}", console)
                else:
                    draft = draft.rstrip() + column_insert_text(name)
                    console.print(draft, markup=False)
            elif line == ".run":
                print_result(loop.run_until_complete(pipeline.run_query(draft)), console)
            else:
                draft = line
                print_result(loop.run_until_complete(pipeline.run_query(line)), console)
    finally:
        pipeline.close()
        loop.close()


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
