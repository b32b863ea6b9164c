"""
Base Repository for Elevion

Generic async repository implementing the create/get/update/list
contracts shared by every entity. Repositories are bound to one session;
the caller owns the transaction.
"""

from datetime import datetime
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Type, TypeVar, Union

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from elevion.infrastructure.db.models.base import utc_now
from elevion.infrastructure.exceptions import ConstraintViolationError, NotFoundError


# Type variables for generic repository
ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=SQLModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=SQLModel)

Clock = Callable[[], datetime]


def violated_constraint(error: IntegrityError) -> Optional[str]:
    """
    Name the constraint an IntegrityError reports.

    asyncpg exposes `constraint_name`; SQLite only lists the columns
    ("UNIQUE constraint failed: users.username").
    """
    orig = error.orig
    name = getattr(orig, "constraint_name", None) or getattr(orig.__cause__, "constraint_name", None)
    if name:
        return name
    text = str(orig)
    if "constraint failed:" in text:
        return text.split("constraint failed:", 1)[1].strip()
    return None


class BaseRepository(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    Generic async repository with CRUD operations.

    Args:
        model: The SQLModel table class to operate on
        session: Async database session
        clock: Source of "now" for timestamps and time-window filters
    """

    def __init__(
        self,
        model: Type[ModelType],
        session: AsyncSession,
        clock: Clock = utc_now,
    ):
        self._model = model
        self._session = session
        self._clock = clock

    @property
    def session(self) -> AsyncSession:
        """Get the current session."""
        return self._session

    @property
    def table_name(self) -> str:
        return self._model.__tablename__

    def now(self) -> datetime:
        return self._clock()

    def _has_column(self, name: str) -> bool:
        return name in self._model.__table__.columns

    async def get_by_id(self, id: int) -> Optional[ModelType]:
        """
        Get a single record by its primary key.

        Returns:
            Model instance or None if not found
        """
        return await self._session.get(self._model, id)

    async def get_all(
        self,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[ModelType]:
        """Get all records in primary key order."""
        stmt = select(self._model).order_by(self._model.id).offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def count(self) -> int:
        """Get total count of records."""
        stmt = select(func.count()).select_from(self._model)
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def create(
        self,
        data: Union[CreateSchemaType, Mapping[str, Any]],
    ) -> ModelType:
        """
        Insert a new record and return it with generated id and timestamps.

        Raises:
            ConstraintViolationError: a unique or foreign-key constraint
                rejected the row
        """
        values = data.model_dump() if isinstance(data, SQLModel) else dict(data)
        now = self.now()
        for column in ("created_at", "updated_at"):
            if self._has_column(column):
                values.setdefault(column, now)

        db_obj = self._model.model_validate(values)
        self._session.add(db_obj)
        try:
            await self._session.flush()
        except IntegrityError as e:
            raise ConstraintViolationError(
                f"Cannot create {self.table_name} row: {e.orig}",
                operation="insert",
                table=self.table_name,
                constraint=violated_constraint(e),
                original_error=e,
            ) from e
        await self._session.refresh(db_obj)
        return db_obj

    async def update(
        self,
        id: int,
        data: Union[UpdateSchemaType, Mapping[str, Any]],
    ) -> ModelType:
        """
        Merge the supplied fields into an existing record.

        Only fields explicitly set on the update schema are written;
        `updated_at` is always refreshed. The change is a single UPDATE
        statement, so a missing row is detected from the matched row count.

        Raises:
            NotFoundError: no row has this id
            ConstraintViolationError: the new values break a constraint
        """
        values = self._update_values(data)
        if self._has_column("updated_at"):
            values["updated_at"] = self.now()

        await self._execute_update(id, values)
        return await self._session.get(self._model, id, populate_existing=True)

    def _update_values(
        self,
        data: Union[UpdateSchemaType, Mapping[str, Any]],
    ) -> Dict[str, Any]:
        if isinstance(data, SQLModel):
            return data.model_dump(exclude_unset=True)
        return dict(data)

    async def _execute_update(self, id: int, values: Dict[str, Any]) -> None:
        stmt = (
            update(self._model)
            .where(self._model.id == id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self._session.execute(stmt)
        except IntegrityError as e:
            raise ConstraintViolationError(
                f"Cannot update {self.table_name} {id}: {e.orig}",
                operation="update",
                table=self.table_name,
                constraint=violated_constraint(e),
                original_error=e,
            ) from e

        if result.rowcount == 0:
            raise NotFoundError(
                f"{self.table_name} {id} not found",
                operation="update",
                table=self.table_name,
            )

    async def increment(self, id: int, column: str, amount: int = 1) -> None:
        """
        Add to a counter column in place (`SET col = col + amount`).

        The arithmetic happens in the store, so concurrent increments do
        not lose updates.
        """
        counter = getattr(self._model, column)
        values: Dict[str, Any] = {column: counter + amount}
        if self._has_column("updated_at"):
            values["updated_at"] = self.now()
        await self._execute_update(id, values)
