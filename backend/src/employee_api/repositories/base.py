"""Base repository with common database operations."""

from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from employee_api.models.domain.employee import SortDirection
from employee_api.models.orm.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Base repository with common CRUD and paging operations."""

    model: type[T]

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session."""
        self.session = session

    async def get_by_id(self, id: int) -> T | None:
        """Get a record by ID.

        Args:
            id: Record ID

        Returns:
            Record or None if not found
        """
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def count(self) -> int:
        """Count total records.

        Returns:
            Total count
        """
        result = await self.session.execute(
            select(func.count()).select_from(self.model)
        )
        return result.scalar_one()

    async def create(self, **kwargs: Any) -> T:
        """Create a new record.

        Args:
            **kwargs: Field values

        Returns:
            Created record, refreshed so store-assigned values are loaded
        """
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, instance: T, **kwargs: Any) -> T:
        """Overwrite fields of a loaded record.

        Args:
            instance: Record to update
            **kwargs: Fields to update

        Returns:
            Updated record
        """
        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, instance: T) -> None:
        """Delete a loaded record permanently.

        Args:
            instance: Record to delete
        """
        await self.session.delete(instance)
        await self.session.flush()

    def _order_by(self, query: Select, sort_column: str, sort_dir: SortDirection) -> Select:
        """Apply ordering with id as a stable tie-breaker."""
        column = getattr(self.model, sort_column)
        ordered = column.desc() if sort_dir == SortDirection.DESC else column.asc()
        query = query.order_by(ordered)
        if sort_column != "id":
            query = query.order_by(self.model.id.asc())
        return query

    async def _list(self, query: Select) -> list[T]:
        """Execute a select and return all rows as a list."""
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def _page(
        self,
        query: Select,
        sort_column: str,
        sort_dir: SortDirection,
        offset: int,
        limit: int,
    ) -> tuple[list[T], int]:
        """Execute a select as one page plus a total count.

        Args:
            query: Filtered select over the model
            sort_column: ORM attribute name to order by
            sort_dir: Sort direction
            offset: Number of rows to skip
            limit: Maximum number of rows to return

        Returns:
            Tuple of (records, total_count)
        """
        count_query = select(func.count()).select_from(query.order_by(None).subquery())
        total = (await self.session.execute(count_query)).scalar_one()

        page_query = self._order_by(query, sort_column, sort_dir).offset(offset).limit(limit)
        return await self._list(page_query), total
