"""
Generic async repository shared by the user and listing stores.

Writes commit immediately; a failed commit rolls the session back so the
request's session stays usable for the error response.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func
from househunt.database import Base
from typing import TypeVar, Generic, Optional, Dict, Any, Type
import uuid
import logging

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    CRUD operations for a single model class.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    @property
    def model_name(self) -> str:
        return self.model.__name__

    async def _commit(self, action: str) -> None:
        try:
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"{self.model_name} {action} failed, rolled back: {e}")
            raise

    async def create(self, obj_in: Dict[str, Any]) -> ModelType:
        """
        Insert a new row.

        Args:
            obj_in: Column values for the new record

        Returns:
            The persisted instance, refreshed from the database
        """
        db_obj = self.model(**obj_in)
        self.db.add(db_obj)
        await self._commit("create")
        await self.db.refresh(db_obj)
        logger.debug(f"Created {self.model_name} {db_obj.id}")
        return db_obj

    async def get_by_id(self, id: uuid.UUID) -> Optional[ModelType]:
        result = await self.db.execute(select(self.model).where(self.model.id == id))
        obj = result.scalar_one_or_none()
        if obj is None:
            logger.debug(f"{self.model_name} {id} not found")
        return obj

    async def update(self, db_obj: ModelType, obj_in: Dict[str, Any]) -> ModelType:
        """
        Apply values to an instance loaded through this session and persist them.

        Unknown keys are ignored. Concurrent updates to the same row are last-write-wins.
        """
        for field, value in obj_in.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        await self._commit("update")
        await self.db.refresh(db_obj)
        logger.debug(f"Updated {self.model_name} {db_obj.id}: {sorted(obj_in)}")
        return db_obj

    async def delete(self, id: uuid.UUID) -> bool:
        """
        Delete a row by primary key.

        Returns:
            True if a row was removed, False if none matched
        """
        result = await self.db.execute(delete(self.model).where(self.model.id == id))
        await self._commit("delete")
        logger.debug(f"Delete {self.model_name} {id}: {result.rowcount} row(s)")
        return result.rowcount > 0

    async def count(self) -> int:
        result = await self.db.execute(select(func.count(self.model.id)))
        return result.scalar_one()

    async def exists(self, id: uuid.UUID) -> bool:
        result = await self.db.execute(select(self.model.id).where(self.model.id == id))
        return result.scalar_one_or_none() is not None
