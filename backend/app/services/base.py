"""
Realty CRM API - Owner-Scoped Resource Service
================================================

What:  The five CRUD operations shared by every CRM resource.
How:   One SQLAlchemy statement per operation (two for listing), always
       filtered on `user_id == owner_id`. Subclasses bind the ORM model,
       the response schema, and the resource name used in 404 bodies.
Who:   Called by route handlers after every gate has passed.

Operation summary:
    list_records    count + paged select, newest `updated_at` first
    create_record   insert with user_id = caller
    get_record      select by id; None → NotFoundError
    update_record   select by id (scalar_one), assign provided fields
    delete_record   select by id (scalar_one), hard delete

Error Handling:
    - A malformed id, a missing row, or another user's row → NotFoundError
    - NoResultFound from scalar_one() → NotFoundError
    - Any other SQLAlchemyError → DatabaseError (logged with context)
    No retries: failures propagate immediately.
"""

import logging
import uuid
from typing import Any, ClassVar, Optional, Type

from pydantic import BaseModel
from sqlalchemy import desc, func, select
from sqlalchemy.exc import NoResultFound, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, NotFoundError
from app.schemas.common import Page, PageMeta, PaginationQuery

logger = logging.getLogger(__name__)


def parse_record_id(raw: str) -> Optional[uuid.UUID]:
    """Return the UUID for a path id, or None when it is not a UUID."""
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        return None


class OwnedResourceService:
    """
    Base service for resources owned by exactly one user.

    Subclass attributes:
        model:           SQLAlchemy model with OwnedRecordMixin columns
        response_schema: pydantic schema built from ORM rows (from_attributes)
        resource_name:   "Client", "Transaction" → "<name> not found"
    """

    model: ClassVar[Type[Any]]
    response_schema: ClassVar[Type[BaseModel]]
    resource_name: ClassVar[str]

    # ── Helpers ───────────────────────────────────────────────────────────

    def _owned(self, owner_id: str):
        return select(self.model).where(self.model.user_id == owner_id)

    def _not_found(self, record_id: str) -> NotFoundError:
        return NotFoundError(resource=self.resource_name, resource_id=str(record_id))

    def _database_error(self, operation: str, error: Exception, **context: Any) -> DatabaseError:
        logger.error(
            "Database error during %s %s: %s",
            operation,
            self.resource_name.lower(),
            str(error),
            exc_info=True,
        )
        return DatabaseError(
            context={"operation": operation, "error_type": type(error).__name__, **context}
        )

    async def _load_for_write(self, db: AsyncSession, owner_id: str, record_id: str) -> Any:
        """
        Load the caller's row for update/delete.

        scalar_one() raises NoResultFound when nothing matches, which is
        translated to NotFoundError by the callers.
        """
        parsed_id = parse_record_id(record_id)
        if parsed_id is None:
            raise NoResultFound(f"{record_id!r} is not a valid id")
        result = await db.execute(self._owned(owner_id).where(self.model.id == parsed_id))
        return result.scalar_one()

    # ── Operations ────────────────────────────────────────────────────────

    async def list_records(
        self,
        db: AsyncSession,
        owner_id: str,
        query: PaginationQuery,
    ) -> Page:
        """
        One page of the caller's rows plus the unpaginated total.

        Query plan:
            SELECT ... WHERE user_id = :owner ORDER BY updated_at DESC
            LIMIT :limit OFFSET :offset
            SELECT count(*) ... WHERE user_id = :owner
        """
        try:
            page_query = (
                self._owned(owner_id)
                .order_by(desc(self.model.updated_at))
                .offset(query.offset)
                .limit(query.limit)
            )
            result = await db.execute(page_query)
            rows = list(result.scalars().all())

            count_query = (
                select(func.count())
                .select_from(self.model)
                .where(self.model.user_id == owner_id)
            )
            count_result = await db.execute(count_query)
            total = count_result.scalar() or 0
        except SQLAlchemyError as e:
            raise self._database_error("list", e, owner_id=owner_id) from e

        return Page[self.response_schema](
            data=[self.response_schema.model_validate(row) for row in rows],
            meta=PageMeta(total=total, page=query.page, limit=query.limit),
        )

    async def create_record(self, db: AsyncSession, owner_id: str, payload: BaseModel) -> BaseModel:
        """Insert a row from the validated payload, owned by the caller."""
        record = self.model(**payload.model_dump(exclude_unset=True), user_id=owner_id)
        try:
            db.add(record)
            await db.flush()
            await db.refresh(record)
        except SQLAlchemyError as e:
            raise self._database_error("create", e, owner_id=owner_id) from e

        logger.info("%s %s created by %s", self.resource_name, record.id, owner_id)
        return self.response_schema.model_validate(record)

    async def get_record(self, db: AsyncSession, owner_id: str, record_id: str) -> BaseModel:
        """Fetch one of the caller's rows by id."""
        parsed_id = parse_record_id(record_id)
        if parsed_id is None:
            raise self._not_found(record_id)

        try:
            result = await db.execute(self._owned(owner_id).where(self.model.id == parsed_id))
            record = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise self._database_error("get", e, record_id=str(record_id)) from e

        if record is None:
            raise self._not_found(record_id)
        return self.response_schema.model_validate(record)

    async def update_record(
        self,
        db: AsyncSession,
        owner_id: str,
        record_id: str,
        payload: BaseModel,
    ) -> BaseModel:
        """Apply the fields present in the payload; absent fields are untouched."""
        try:
            record = await self._load_for_write(db, owner_id, record_id)
            for field, value in payload.model_dump(exclude_unset=True).items():
                setattr(record, field, value)
            await db.flush()
            await db.refresh(record)
        except NoResultFound:
            raise self._not_found(record_id) from None
        except SQLAlchemyError as e:
            raise self._database_error("update", e, record_id=str(record_id)) from e

        logger.info("%s %s updated by %s", self.resource_name, record.id, owner_id)
        return self.response_schema.model_validate(record)

    async def delete_record(self, db: AsyncSession, owner_id: str, record_id: str) -> None:
        """Hard-delete one of the caller's rows."""
        try:
            record = await self._load_for_write(db, owner_id, record_id)
            await db.delete(record)
            await db.flush()
        except NoResultFound:
            raise self._not_found(record_id) from None
        except SQLAlchemyError as e:
            raise self._database_error("delete", e, record_id=str(record_id)) from e

        logger.info("%s %s deleted by %s", self.resource_name, record_id, owner_id)
