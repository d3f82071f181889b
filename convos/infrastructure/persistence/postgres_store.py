"""
PostgreSQL Store - calls the same-named database functions over a psycopg pool.

Every operation is a set-returning function answering one row:

    SELECT result_code, message, tables
    FROM convo_get_all(before => %(before)s, count => %(count)s, ...)

where `tables` is a JSON array of row arrays, ordered as
[primary rows, [{"total": n}], [{"max_created": ts}]]. Timestamps inside the
JSON are ISO strings; the manager's row models parse them.

Connection errors and SQL errors propagate; the manager turns them into a Fault.
"""

import logging
from typing import Any

from psycopg import sql
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from convos.domain.ports import Store, StoreResult
from convos.domain.value_objects import ResultCode

logger = logging.getLogger(__name__)


class PostgresStore(Store):
    def __init__(self, pool: AsyncConnectionPool):
        self._pool = pool

    @classmethod
    async def connect(cls, conninfo: str, min_size: int = 1, max_size: int = 10) -> "PostgresStore":
        connection_kwargs = {
            "autocommit": True,
            "prepare_threshold": 0,  # Disable prepared statements for pgbouncer compatibility
            "row_factory": dict_row,
        }
        pool = AsyncConnectionPool(
            conninfo=conninfo,
            min_size=min_size,
            max_size=max_size,
            kwargs=connection_kwargs,
            open=False,
        )
        await pool.open()
        logger.info(f"[Postgres] Connection pool opened (max_size={max_size})")
        return cls(pool)

    @staticmethod
    def _statement(operation: str, parameters: dict[str, Any]) -> sql.Composed:
        arguments = sql.SQL(", ").join(
            sql.SQL("{} => {}").format(sql.Identifier(name), sql.Placeholder(name))
            for name in parameters
        )
        return sql.SQL("SELECT result_code, message, tables FROM {}({})").format(
            sql.Identifier(operation), arguments
        )

    async def _call(self, operation: str, parameters: dict[str, Any]) -> dict[str, Any]:
        async with self._pool.connection() as conn:
            cursor = await conn.execute(self._statement(operation, parameters), parameters)
            row = await cursor.fetchone()
        if row is None:
            raise RuntimeError(f"Store function {operation} returned no outcome row")
        return row

    async def execute(self, operation: str, parameters: dict[str, Any]) -> StoreResult:
        row = await self._call(operation, parameters)
        return StoreResult(ResultCode.parse(row["result_code"]), row["message"] or "")

    async def execute_with_results(
        self, operation: str, parameters: dict[str, Any]
    ) -> StoreResult:
        row = await self._call(operation, parameters)
        return StoreResult(
            ResultCode.parse(row["result_code"]),
            row["message"] or "",
            row["tables"] or [],
        )

    async def close(self) -> None:
        await self._pool.close()
        logger.info("[Postgres] Connection pool closed")
