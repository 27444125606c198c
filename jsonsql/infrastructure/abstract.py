"""
Engine interface consumed by the projection pipeline.

The pipeline never talks to a database directly; it depends on this protocol
so the real DuckDB adapter and test doubles are interchangeable.
"""

from __future__ import annotations

import abc
import enum
from typing import Any, Dict, List, Protocol, Sequence, runtime_checkable

from jsonsql.domain.models import FlatRow


class Readiness(str, enum.Enum):
    """Lifecycle of an engine's one-time initialization."""

    NOT_STARTED = "not_started"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"

    def __str__(self) -> str:
        return self.value


@runtime_checkable
class SqlEngine(Protocol):
    """
    Common interface every query engine must implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier.
    """

    name: str

    @property
    def state(self) -> Readiness:
        ...

    async def ensure_ready(self) -> Any:
        """
        Start the engine once and return its handle.

        Concurrent and repeated calls share a single initialization and
        observe the same outcome.
        """
        ...

    async def materialize(self, rows: Sequence[FlatRow], table_name: str) -> None:
        """
        Replace `table_name` with a table built from `rows`, letting the
        engine infer column types from the data.
        """
        ...

    async def execute(self, sql: str) -> List[Dict[str, Any]]:
        """
        Run `sql` and return one dict per result row.

        Raises
        ------
        EngineError
            If the engine rejects the statement.
        """
        ...


class AbstractSqlEngine(abc.ABC):
    """
    Optional ABC helper for class-based implementations.

    Subclasses set `name` and implement the three engine operations.
    """

    name: str

    @property
    @abc.abstractmethod
    def state(self) -> Readiness:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    async def ensure_ready(self) -> Any:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    async def materialize(
        self, rows: Sequence[FlatRow], table_name: str
    ) -> None:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    async def execute(self, sql: str) -> List[Dict[str, Any]]:  # pragma: no cover - interface only
        raise NotImplementedError


__all__ = [
    "AbstractSqlEngine",
    "Readiness",
    "SqlEngine",
]
