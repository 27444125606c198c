"""
Projection pipeline: JSON in, queryable table and schema out.

Usage:
    from jsonsql.pipeline import ProjectionPipeline

    pipeline = ProjectionPipeline()
    await pipeline.ensure_ready()
    loaded = await pipeline.load_text('[{"id": 1, "user": {"name": "Alice"}}]')
    outcome = await pipeline.run_query('SELECT "user.name" FROM t')

A load flattens the document, infers its schema, replaces the table, pushes
the schema to completion hosts and previews the table with the default query.
Loads of the same table must be serialized by the caller.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, List, Optional

from jsonsql.completion import SQL_KEYWORDS, CompletionHost
from jsonsql.config import default_query, get_settings
from jsonsql.domain.models import ColumnDescriptor, LoadResult, QueryOutcome
from jsonsql.errors import EngineError, InputError, format_engine_error
from jsonsql.infrastructure.abstract import Readiness, SqlEngine
from jsonsql.infrastructure.duckdb_engine import DuckDBEngine
from jsonsql.projection.flatten import flatten
from jsonsql.projection.schema import infer_schema
from jsonsql.utils.logging import get_logger
from jsonsql.utils.profiler import profile_block

log = get_logger(__name__)


def _reject_constant(token: str) -> Any:
    raise ValueError(f"{token} is not valid JSON")


def parse_json_text(text: str) -> Any:
    """
    Decode JSON text supplied by the user.

    NaN, Infinity and -Infinity are rejected; they are not JSON.

    Raises
    ------
    InputError
        If the text is not valid JSON.
    """
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        raise InputError(f"Invalid JSON: {exc}") from exc


class ProjectionPipeline:
    """
    Orchestrates flattening, schema inference, materialization and queries.

    Parameters
    ----------
    engine : SqlEngine, optional
        Query engine; a `DuckDBEngine` built from settings when omitted.
    table_name : str, optional
        Name of the projected table. Defaults to settings.table_name.
    default_limit : int, optional
        Row cap of the preview query. Defaults to settings.default_query_limit.
    hosts : iterable of CompletionHost
        Receivers of every new schema.
    """

    def __init__(
        self,
        engine: Optional[SqlEngine] = None,
        table_name: Optional[str] = None,
        default_limit: Optional[int] = None,
        hosts: Iterable[CompletionHost] = (),
    ) -> None:
        settings = get_settings()
        self.engine: SqlEngine = engine if engine is not None else DuckDBEngine()
        self.table_name = table_name or settings.table_name
        self.default_limit = default_limit or settings.default_query_limit
        self._hosts: List[CompletionHost] = list(hosts)
        self._schema: List[ColumnDescriptor] = []
        self._row_count = 0

    @property
    def state(self) -> Readiness:
        return self.engine.state

    @property
    def schema(self) -> List[ColumnDescriptor]:
        return list(self._schema)

    @property
    def row_count(self) -> int:
        return self._row_count

    @property
    def default_sql(self) -> str:
        return default_query(self.table_name, self.default_limit)

    def subscribe(self, host: CompletionHost) -> None:
        """Register a completion host and bring it up to date right away."""
        self._hosts.append(host)
        host.update(self.schema, list(SQL_KEYWORDS))

    async def ensure_ready(self) -> None:
        await self.engine.ensure_ready()

    async def load(self, data: Any) -> LoadResult:
        """
        Project decoded JSON into the table and preview it.

        Raises
        ------
        EngineError
            If the engine cannot start or cannot build the table; the previous
            schema is kept in that case.
        """
        log.info("[LOAD START]", extra={"table": self.table_name})
        with profile_block("load") as stats:
            rows = flatten(data)
            schema = infer_schema(rows)
            try:
                await self.engine.materialize(rows, self.table_name)
            except EngineError:
                log.exception("[LOAD FAILED]", extra={"table": self.table_name, "rows": len(rows)})
                raise

            self._schema = schema
            self._row_count = len(rows)
            self._notify_hosts()

            preview = await self.run_query(self.default_sql)

        log.info(
            "[LOAD COMPLETE]",
            extra={
                "table": self.table_name,
                "rows": len(rows),
                "columns": len(schema),
                "duration_ms": stats.duration_ms,
                "peak_rss_bytes": stats.peak_rss_bytes,
            },
        )
        return LoadResult(
            table_name=self.table_name,
            row_count=len(rows),
            schema=schema,
            preview=preview,
            duration_ms=stats.duration_ms,
        )

    async def load_text(self, text: str) -> Optional[LoadResult]:
        """
        Parse JSON text and load it. Blank text is ignored and returns None.

        Raises
        ------
        InputError
            If the text is not valid JSON; nothing is loaded.
        """
        if not text.strip():
            return None
        data = parse_json_text(text)
        return await self.load(data)

    async def run_query(self, sql: str) -> QueryOutcome:
        """
        Run SQL verbatim; engine errors come back as a normalized message.
        """
        rows: List[dict] = []
        message: Optional[str] = None
        with profile_block("query") as stats:
            try:
                rows = await self.engine.execute(sql)
            except EngineError as exc:
                message = format_engine_error(exc)

        if message is not None:
            log.warning("[QUERY FAILED]", extra={"sql": sql, "error": message})
            return QueryOutcome(sql=sql, error=message, duration_ms=stats.duration_ms)

        log.info(
            "[QUERY COMPLETE]",
            extra={"sql": sql, "rows": len(rows), "duration_ms": stats.duration_ms},
        )
        return QueryOutcome(
            sql=sql,
            rows=rows,
            columns=list(rows[0].keys()) if rows else [],
            duration_ms=stats.duration_ms,
        )

    def _notify_hosts(self) -> None:
        keywords = list(SQL_KEYWORDS)
        for host in self._hosts:
            host.update(self.schema, keywords)

    def close(self) -> None:
        close = getattr(self.engine, "close", None)
        if callable(close):
            close()


__all__ = ["ProjectionPipeline", "parse_json_text"]
