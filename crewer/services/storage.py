"""
Storage collaborator used by the migration engine.

Thin wrapper over an AsyncSession exposing the handful of operations the
engine needs: filtered selects, counts, single inserts that hand back the
generated id, multi-row inserts, and a transaction boundary. Injected into
the engine so tests and callers control the session and its transaction.
"""
from contextlib import asynccontextmanager
from typing import Any, Iterable, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession


class MigrationStorage:
    """Session-backed storage for the legacy migration"""

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def transaction(self):
        """Commit-or-rollback boundary.

        Inside a transaction the caller already opened, the work runs in a
        SAVEPOINT: a failure undoes all of it while the caller keeps its
        transaction, and success leaves the final commit to the caller.
        Otherwise begins and commits its own transaction.
        """
        if self.session.in_transaction():
            async with self.session.begin_nested():
                yield self
        else:
            async with self.session.begin():
                yield self

    async def select_where(self, model, *criteria, order_by: Sequence[Any] = ()) -> list:
        query = select(model).where(*criteria)
        if order_by:
            query = query.order_by(*order_by)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_where(self, model, *criteria) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(model).where(*criteria)
        )
        return result.scalar() or 0

    async def get(self, model, row_id: str) -> Optional[Any]:
        return await self.session.get(model, row_id)

    async def insert_returning(self, model, values: dict):
        """Insert one row and flush so its primary key is usable right away"""
        row = model(**values)
        self.session.add(row)
        await self.session.flush()
        return row

    async def insert_many(self, model, rows: Iterable[dict]) -> list:
        """Insert several rows of one table in a single flush"""
        objects = [model(**values) for values in rows]
        if not objects:
            return []
        self.session.add_all(objects)
        await self.session.flush()
        return objects
