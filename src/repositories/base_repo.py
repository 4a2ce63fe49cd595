from typing import TypeVar, Generic, Type, Optional, Any, Sequence

from sqlalchemy import select, func, and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from src.model.base import Base

# Generic type for SQLAlchemy models
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository class with common CRUD operations.

    Methods named ``create``/``update``/``delete`` commit immediately.
    ``add`` only flushes, so a service can group several writes and
    call ``commit`` once.

    Usage:
        class UserRepository(BaseRepository[User]):
            def __init__(self, session: AsyncSession):
                super().__init__(User, session)
    """
    model: Type[ModelType]

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        """
        Initialize repository with model class and database session.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    def _not_deleted(self, query: Select, include_deleted: bool) -> Select:
        if not include_deleted and hasattr(self.model, 'is_deleted'):
            query = query.where(self.model.is_deleted.is_(False))
        return query

    # ==================== CREATE ====================

    async def create(self, obj_in: dict | ModelType) -> ModelType:
        """
        Create a new record and commit.

        Args:
            obj_in: Dictionary or model instance with data to create

        Returns:
            Created model instance
        """
        db_obj = await self.add(obj_in)
        await self.session.commit()
        await self.session.refresh(db_obj)
        return db_obj

    async def add(self, obj_in: dict | ModelType) -> ModelType:
        """
        Add a record to the session and flush without committing.

        Args:
            obj_in: Dictionary or model instance with data to create

        Returns:
            Model instance with its primary key populated
        """
        if isinstance(obj_in, dict):
            db_obj = self.model(**obj_in)
        else:
            db_obj = obj_in

        self.session.add(db_obj)
        await self.session.flush()
        return db_obj

    # ==================== READ ====================

    async def get_by_id(self, id: int, include_deleted: bool = False) -> Optional[ModelType]:
        """
        Get a single record by ID.

        Args:
            id: Primary key ID
            include_deleted: Whether to include soft-deleted records

        Returns:
            Model instance or None if not found
        """
        query = select(self.model).where(self.model.id == id)
        query = self._not_deleted(query, include_deleted)

        result = await self.session.execute(query)
        return result.unique().scalar_one_or_none()

    async def get_by_field(
        self,
        field: str,
        value: Any,
        include_deleted: bool = False
    ) -> Optional[ModelType]:
        """
        Get a single record by a specific field value.

        Args:
            field: Field name to filter by
            value: Value to match
            include_deleted: Whether to include soft-deleted records

        Returns:
            Model instance or None if not found
        """
        query = select(self.model).where(getattr(self.model, field) == value)
        query = self._not_deleted(query, include_deleted)

        result = await self.session.execute(query)
        return result.unique().scalar_one_or_none()

    async def get_by_filters(
        self,
        filters: dict[str, Any],
        skip: int = 0,
        limit: int = 100,
        include_deleted: bool = False,
        order_by: Optional[str] = None,
        order_desc: bool = False
    ) -> Sequence[ModelType]:
        """
        Get records matching multiple filter conditions.

        Args:
            filters: Dictionary of field-value pairs to filter by
            skip: Number of records to skip
            limit: Maximum number of records to return
            include_deleted: Whether to include soft-deleted records
            order_by: Field name to order by
            order_desc: Whether to order descending

        Returns:
            List of model instances
        """
        conditions = [getattr(self.model, field) == value for field, value in filters.items()]

        if not include_deleted and hasattr(self.model, 'is_deleted'):
            conditions.append(self.model.is_deleted.is_(False))

        query = select(self.model).where(and_(*conditions))

        if order_by:
            order_column = getattr(self.model, order_by)
            query = query.order_by(order_column.desc() if order_desc else order_column)

        query = query.offset(skip).limit(limit)

        result = await self.session.execute(query)
        return result.unique().scalars().all()

    # ==================== UPDATE ====================

    async def update(self, db_obj: ModelType, obj_in: dict) -> ModelType:
        """
        Apply field values to a loaded record and commit.

        Args:
            db_obj: Model instance to update
            obj_in: Dictionary with fields to update

        Returns:
            Updated model instance
        """
        for field, value in obj_in.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        await self.session.commit()
        await self.session.refresh(db_obj)
        return db_obj

    # ==================== DELETE ====================

    async def delete(self, db_obj: ModelType, hard_delete: bool = False) -> None:
        """
        Delete a loaded record (soft delete when the model supports it).

        Args:
            db_obj: Model instance to delete
            hard_delete: If True, permanently delete the record
        """
        if not hard_delete and hasattr(db_obj, 'is_deleted'):
            db_obj.is_deleted = True
        else:
            await self.session.delete(db_obj)

        await self.session.flush()

    # ==================== COUNT ====================

    async def count_by_filters(
        self,
        filters: dict[str, Any],
        include_deleted: bool = False
    ) -> int:
        """
        Count records matching filter conditions.

        Args:
            filters: Dictionary of field-value pairs to filter by
            include_deleted: Whether to include soft-deleted records

        Returns:
            Count of matching records
        """
        conditions = [getattr(self.model, field) == value for field, value in filters.items()]

        if not include_deleted and hasattr(self.model, 'is_deleted'):
            conditions.append(self.model.is_deleted.is_(False))

        query = select(func.count(self.model.id)).where(and_(*conditions))

        result = await self.session.execute(query)
        return result.scalar() or 0

    # ==================== UTILITY ====================

    async def commit(self):
        """Commit the current transaction"""
        await self.session.commit()

    async def refresh(self, db_obj: ModelType, attribute_names: Optional[list[str]] = None) -> ModelType:
        """
        Refresh a model instance from database.

        Args:
            db_obj: Model instance to refresh
            attribute_names: Only refresh these attributes (relationships included)

        Returns:
            Refreshed model instance
        """
        await self.session.refresh(db_obj, attribute_names=attribute_names)
        return db_obj
