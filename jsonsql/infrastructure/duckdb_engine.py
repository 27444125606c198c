"""
DuckDB adapter for the projection pipeline.

Owns one in-process DuckDB connection per engine object. The connection is
opened lazily by `ensure_ready()` through a single-flight initializer, so
concurrent callers share one start-up and one outcome. DuckDB calls are
blocking; they run in a worker thread and are serialized by a per-engine lock.

Rows are handed to DuckDB as a JSON document and the table is created with
`read_json_auto`, which infers column types from the data.
"""

from __future__ import annotations

import asyncio
import json
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import duckdb

from jsonsql.config import get_settings
from jsonsql.domain.models import ROW_ID_COLUMN, FlatRow
from jsonsql.domain.values import EmptyMarker
from jsonsql.errors import EngineError, EngineInitError
from jsonsql.infrastructure.abstract import AbstractSqlEngine, Readiness
from jsonsql.utils.logging import get_logger
from jsonsql.utils.once import AsyncOnce

log = get_logger(__name__)

# Scan every row for types and keep sparse keys as columns instead of
# collapsing the record into a MAP.
_READ_JSON_OPTIONS = (
    "format='array', sample_size=-1, map_inference_threshold=-1, field_appearance_threshold=0"
)


def quote_identifier(name: str) -> str:
    """Quote a table or column name for DuckDB."""
    return '"' + name.replace('"', '""') + '"'


def quote_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def _json_default(value: Any) -> Any:
    if isinstance(value, EmptyMarker):
        return value.to_json()
    return str(value)


def rows_to_json(rows: Sequence[FlatRow]) -> str:
    """Serialize flat rows, turning empty markers back into [] and {}."""
    return json.dumps(list(rows), default=_json_default, ensure_ascii=False)


def _close_late_connection(future: "asyncio.Future[duckdb.DuckDBPyConnection]") -> None:
    if future.cancelled() or future.exception() is not None:
        return
    future.result().close()
    log.info("[ENGINE CLEANUP] Closed connection opened after start-up timed out")


class DuckDBEngine(AbstractSqlEngine):
    """
    Query engine backed by an in-process DuckDB database.

    Parameters
    ----------
    database : str, optional
        DuckDB database path; ``:memory:`` keeps everything in RAM.
    threads : int, optional
        DuckDB worker threads; engine default when omitted.
    init_timeout_seconds : float, optional
        Start-up budget; a slower start counts as a failure.
    """

    name: str = "duckdb"

    def __init__(
        self,
        database: Optional[str] = None,
        threads: Optional[int] = None,
        init_timeout_seconds: Optional[float] = None,
    ) -> None:
        settings = get_settings()
        self.database = database or settings.duckdb_database
        self.threads = threads if threads is not None else settings.duckdb_threads
        self.init_timeout_seconds = init_timeout_seconds or settings.engine_init_timeout_seconds
        self._conn: Optional[duckdb.DuckDBPyConnection] = None
        self._lock = threading.Lock()
        self._init: AsyncOnce[duckdb.DuckDBPyConnection] = AsyncOnce(self._initialize)

    @property
    def state(self) -> Readiness:
        if not self._init.started:
            return Readiness.NOT_STARTED
        if not self._init.done:
            return Readiness.INITIALIZING
        return Readiness.FAILED if self._init.failed else Readiness.READY

    def _connect(self) -> duckdb.DuckDBPyConnection:
        config: Dict[str, Any] = {}
        if self.threads:
            config["threads"] = self.threads
        conn = duckdb.connect(database=self.database, config=config)
        conn.execute("SELECT 1").fetchall()
        return conn

    async def _initialize(self) -> duckdb.DuckDBPyConnection:
        log.info(
            "[ENGINE INIT] Starting DuckDB",
            extra={"engine": self.name, "database": self.database},
        )
        connecting = asyncio.ensure_future(asyncio.to_thread(self._connect))
        try:
            conn = await asyncio.wait_for(
                asyncio.shield(connecting), timeout=self.init_timeout_seconds
            )
        except asyncio.TimeoutError as exc:
            # The worker thread cannot be interrupted; close whatever it opens.
            connecting.add_done_callback(_close_late_connection)
            log.error(
                "[ENGINE FAILED] DuckDB start-up timed out",
                extra={"engine": self.name, "timeout_seconds": self.init_timeout_seconds},
            )
            raise EngineInitError(
                f"DuckDB did not start within {self.init_timeout_seconds:g}s"
            ) from exc
        except duckdb.Error as exc:
            log.error("[ENGINE FAILED] DuckDB could not start", extra={"engine": self.name})
            raise EngineInitError(f"DuckDB failed to start: {exc}") from exc

        self._conn = conn
        log.info("[ENGINE READY] DuckDB", extra={"engine": self.name})
        return conn

    async def ensure_ready(self) -> duckdb.DuckDBPyConnection:
        return await self._init.get()

    def reset(self) -> None:
        """
        Allow a new initialization after a failure.

        Closes the current connection, if any; tables in a ``:memory:``
        database are lost.
        """
        self._init.reset()
        self.close()

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def _connection(self) -> duckdb.DuckDBPyConnection:
        if self._conn is None:
            raise EngineError("Database not connected")
        return self._conn

    async def materialize(self, rows: Sequence[FlatRow], table_name: str) -> None:
        await self.ensure_ready()
        await asyncio.to_thread(self._materialize_sync, list(rows), table_name)
        log.info(
            "[TABLE LOADED]",
            extra={"engine": self.name, "table": table_name, "rows": len(rows)},
        )

    def _materialize_sync(self, rows: List[FlatRow], table_name: str) -> None:
        table = quote_identifier(table_name)
        with self._lock:
            conn = self._connection()
            try:
                if not rows:
                    conn.execute(
                        f"CREATE OR REPLACE TABLE {table} ({quote_identifier(ROW_ID_COLUMN)} BIGINT)"
                    )
                    return
                with tempfile.TemporaryDirectory(prefix="jsonsql-") as tmpdir:
                    path = Path(tmpdir) / "rows.json"
                    path.write_text(rows_to_json(rows), encoding="utf-8")
                    conn.execute(
                        f"CREATE OR REPLACE TABLE {table} AS "
                        f"SELECT * FROM read_json_auto({quote_literal(str(path))}, {_READ_JSON_OPTIONS})"
                    )
            except duckdb.Error as exc:
                raise EngineError(str(exc)) from exc

    async def execute(self, sql: str) -> List[Dict[str, Any]]:
        await self.ensure_ready()
        return await asyncio.to_thread(self._execute_sync, sql)

    def _execute_sync(self, sql: str) -> List[Dict[str, Any]]:
        with self._lock:
            conn = self._connection()
            try:
                cursor = conn.execute(sql)
                if cursor.description is None:
                    return []
                columns = [column[0] for column in cursor.description]
                return [dict(zip(columns, record)) for record in cursor.fetchall()]
            except duckdb.Error as exc:
                raise EngineError(str(exc)) from exc


__all__ = [
    "DuckDBEngine",
    "quote_identifier",
    "rows_to_json",
]
