"""
Document store adapter.

Thin CRUD/query/aggregate layer over the parcels, payments, users, riders and
trackings collections. Every mutation commits on its own and reports counts,
so callers can detect no-ops the same way they would against a document
database.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, TypeVar
from sqlalchemy import select, func, delete, update
from sqlalchemy.ext.asyncio import AsyncSession

ModelT = TypeVar("ModelT")


@dataclass
class UpdateResult:
    matched_count: int
    modified_count: int


@dataclass
class DeleteResult:
    deleted_count: int


class DocumentStore:
    """Collection operations bound to one request's session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert_one(self, model: Type[ModelT], values: Dict[str, Any]) -> ModelT:
        document = model(**values)
        self.session.add(document)
        await self.session.commit()
        await self.session.refresh(document)
        return document

    async def find(
        self,
        model: Type[ModelT],
        *criteria,
        order_by: Sequence[Any] = (),
        limit: Optional[int] = None
    ) -> List[ModelT]:
        query = select(model).where(*criteria).order_by(*order_by)
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def find_one(self, model: Type[ModelT], *criteria) -> Optional[ModelT]:
        result = await self.session.execute(select(model).where(*criteria).limit(1))
        return result.scalar_one_or_none()

    async def get(self, model: Type[ModelT], document_id: Any) -> Optional[ModelT]:
        return await self.session.get(model, document_id)

    async def update_one(self, model: Type[ModelT], *criteria, values: Dict[str, Any]) -> UpdateResult:
        """
        Set ``values`` on the first document matching ``criteria``.

        The UPDATE itself carries ``criteria``, so a document that stopped
        matching after it was read (another request got there first) is
        reported with ``matched_count`` 0 and left untouched.
        ``modified_count`` is 0 when every value already held.
        """
        document = await self.find_one(model, *criteria)
        if document is None:
            return UpdateResult(matched_count=0, modified_count=0)

        changes = {
            field: value for field, value in values.items()
            if getattr(document, field) != value
        }
        if not changes:
            return UpdateResult(matched_count=1, modified_count=0)

        stmt = update(model).where(
            model.id == document.id,
            *criteria
        ).values(**changes).execution_options(synchronize_session=False)
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            await self.session.rollback()
            return UpdateResult(matched_count=0, modified_count=0)

        await self.session.commit()
        await self.session.refresh(document)
        return UpdateResult(matched_count=1, modified_count=1)

    async def delete_one(self, model: Type[ModelT], *criteria) -> DeleteResult:
        document = await self.find_one(model, *criteria)
        if document is None:
            return DeleteResult(deleted_count=0)
        result = await self.session.execute(
            delete(model).where(model.id == document.id)
        )
        await self.session.commit()
        return DeleteResult(deleted_count=result.rowcount)

    async def count_by(self, model: Type[ModelT], column) -> List[Tuple[Any, int]]:
        """Group every document by ``column`` and count each group."""
        result = await self.session.execute(
            select(column, func.count()).select_from(model).group_by(column)
        )
        return [(value, count) for value, count in result.all()]
