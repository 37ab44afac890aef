from typing import Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from nokanban.core.exceptions.domain import CreationFailedError
from nokanban.models.base import Base
from nokanban.schemas.board import PositionUpdate

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class BaseRepository(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """Generic repository with async CRUD operations."""

    def __init__(self, session: AsyncSession, model: type[ModelType]):
        self.session = session
        self.model = model

    async def create_one(
        self,
        schema: CreateSchemaType,
        *,
        auto_commit: bool = True,
    ) -> ModelType:
        """Insert a single record and return the stored row."""
        data = schema.model_dump(exclude_none=True)
        stmt = insert(self.model).values(**data).returning(self.model)
        result = await self.session.execute(stmt)
        instance = result.scalar_one_or_none()
        if instance is None:
            raise CreationFailedError(self.model.__name__)
        if auto_commit:
            await self.session.commit()
        else:
            await self.session.flush()
        return instance

    async def get_by_id(self, obj_id: str) -> ModelType | None:
        """Get a record by its primary key, always reading through to the database."""
        stmt = (
            select(self.model)
            .where(self.model.id == obj_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_by_id(
        self,
        obj_id: str,
        schema: UpdateSchemaType,
        *,
        exclude_none: bool = True,
        auto_commit: bool = True,
    ) -> ModelType | None:
        """Update a record by ID in a single UPDATE statement."""
        instance = await self.get_by_id(obj_id)
        if not instance:
            return None

        data = schema.model_dump(exclude_none=exclude_none)
        for key, value in data.items():
            setattr(instance, key, value)

        if auto_commit:
            await self.session.commit()
            await self.session.refresh(instance)
        else:
            await self.session.flush()
        return instance

    async def update_positions(
        self,
        updates: list[PositionUpdate],
        *,
        auto_commit: bool = True,
    ) -> None:
        """Write each {id, position} pair in list order, committing once."""
        for item in updates:
            stmt = (
                update(self.model)
                .where(self.model.id == item.id)
                .values(position=item.position)
            )
            await self.session.execute(stmt)
        if auto_commit:
            await self.session.commit()

    async def delete_by_id(self, obj_id: str, *, auto_commit: bool = True) -> bool:
        """Delete a record by ID. Returns True if deleted."""
        stmt = delete(self.model).where(self.model.id == obj_id)
        result = await self.session.execute(stmt)
        if auto_commit:
            await self.session.commit()
        return result.rowcount > 0  # type: ignore
