"""
Storage access shared by every owned resource.

Repositories never commit; the unit of work that owns the session does.
Reads always go through select() so rows removed by a database-level
cascade are never served from the session identity map.
"""

from contextlib import contextmanager
from typing import Any, ClassVar, Dict, Generic, Iterable, Iterator, List, Optional, Sequence, Tuple, Type, TypeVar

from sqlalchemy import delete, desc, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_manager.kernel.errors import (
    ConflictError,
    InternalError,
    NotFoundError,
    PortfolioManagerError,
)
from portfolio_manager.kernel.models import Base, normalize_title
from portfolio_manager.logging_config import get_logger
from portfolio_manager.schemas.common import Pagination

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


def _is_unique_violation(exc: IntegrityError) -> bool:
    message = str(exc.orig).lower()
    return "unique" in message or "duplicate key" in message


def _is_foreign_key_violation(exc: IntegrityError) -> bool:
    return "foreign key" in str(exc.orig).lower()


@contextmanager
def storage_errors(
    entity: str,
    operation: str,
    reference_field: Optional[str] = None,
) -> Iterator[None]:
    """
    Translate driver failures into the core error taxonomy.

    Unique violations become ConflictError. A foreign key violation means
    the row points at a record that does not exist and becomes
    NotFoundError naming reference_field. Every other SQLAlchemyError
    becomes InternalError. Core errors pass through untouched.
    """
    try:
        yield
    except PortfolioManagerError:
        raise
    except IntegrityError as exc:
        if _is_unique_violation(exc):
            raise ConflictError(
                f"{entity} already exists",
                entity=entity,
                operation=operation,
            ) from exc
        if _is_foreign_key_violation(exc):
            raise NotFoundError(
                f"{entity} references a missing record",
                entity=entity,
                operation=operation,
                details={"field": reference_field} if reference_field else {},
            ) from exc
        logger.error(
            "Integrity failure",
            extra={"entity": entity, "operation": operation, "error": str(exc.orig)},
        )
        raise InternalError(
            f"failed to {operation} {entity}",
            entity=entity,
            operation=operation,
        ) from exc
    except SQLAlchemyError as exc:
        logger.error(
            "Storage failure",
            extra={"entity": entity, "operation": operation, "error": str(exc)},
        )
        raise InternalError(
            f"failed to {operation} {entity}",
            entity=entity,
            operation=operation,
        ) from exc


class ResourceRepository(Generic[ModelT]):
    """
    CRUD for one owned resource type.

    Subclasses set:
        model: the mapped class
        entity: name used in errors, audit events and metrics
        parent_attr: column holding the parent ID (None for portfolios)
        order_attr: column holding the sibling order (None if unordered)
        title_scope_attr: column titles are unique within (None if untitled)
    """

    model: ClassVar[Type[Any]]
    entity: ClassVar[str]
    parent_attr: ClassVar[Optional[str]] = None
    order_attr: ClassVar[Optional[str]] = None
    title_scope_attr: ClassVar[Optional[str]] = None

    def __init__(self, session: AsyncSession):
        self.session = session

    def _column(self, name: str):
        return getattr(self.model, name)

    async def create(self, **values: Any) -> ModelT:
        """Insert a new row and flush so its ID and timestamps are populated."""
        reference_field = self.parent_attr or "owner_id"
        with storage_errors(self.entity, "create", reference_field=reference_field):
            instance = self.model(**values)
            self.session.add(instance)
            await self.session.flush()
        logger.debug("Created", extra={"entity": self.entity, "entity_id": instance.id})
        return instance

    async def get_by_id(self, resource_id: int) -> Optional[ModelT]:
        with storage_errors(self.entity, "get"):
            result = await self.session.execute(
                select(self.model).where(self.model.id == resource_id)
            )
            return result.scalar_one_or_none()

    async def get_by_ids(self, resource_ids: Iterable[int]) -> List[ModelT]:
        """Fetch every row whose ID is listed. Missing IDs are simply absent."""
        ids = list(resource_ids)
        if not ids:
            return []
        with storage_errors(self.entity, "get"):
            result = await self.session.execute(
                select(self.model).where(self.model.id.in_(ids))
            )
            return list(result.scalars().all())

    async def get_by_parent_id(self, parent_id: int) -> List[ModelT]:
        """Children of one parent in sibling order, ties broken by ID."""
        if self.parent_attr is None:
            raise NotImplementedError(f"{self.entity} has no parent")
        query = select(self.model).where(self._column(self.parent_attr) == parent_id)
        if self.order_attr is not None:
            query = query.order_by(self._column(self.order_attr), self.model.id)
        else:
            query = query.order_by(self.model.id)
        with storage_errors(self.entity, "list"):
            result = await self.session.execute(query)
            return list(result.scalars().all())

    async def get_by_owner_id(
        self,
        owner_id: str,
        pagination: Pagination,
    ) -> Tuple[List[ModelT], int]:
        """
        One page of an owner's resources, newest first.

        Returns:
            (items, total) where total counts every matching row
        """
        owner_column = self.model.owner_id
        with storage_errors(self.entity, "list"):
            total = await self.session.scalar(
                select(func.count()).select_from(self.model).where(owner_column == owner_id)
            )
            result = await self.session.execute(
                select(self.model)
                .where(owner_column == owner_id)
                .order_by(desc(self.model.created_at), desc(self.model.id))
                .offset(pagination.offset)
                .limit(pagination.limit)
            )
            return list(result.scalars().all()), total or 0

    async def update(self, instance: ModelT, **changes: Any) -> ModelT:
        """Apply attribute changes to a loaded row and flush."""
        with storage_errors(self.entity, "update"):
            for key, value in changes.items():
                setattr(instance, key, value)
            await self.session.flush()
        return instance

    async def update_position(self, resource_id: int, position: int) -> None:
        """Set one row's sibling order. Other siblings are not touched."""
        if self.order_attr is None:
            raise NotImplementedError(f"{self.entity} is not ordered")
        with storage_errors(self.entity, "update position"):
            result = await self.session.execute(
                update(self.model)
                .where(self.model.id == resource_id)
                .values({self.order_attr: position})
            )
        if result.rowcount == 0:
            raise NotFoundError(
                f"{self.entity} not found",
                entity=self.entity,
                operation="update position",
                details={"id": resource_id},
            )

    async def bulk_update_positions(self, items: Sequence[Tuple[int, int]]) -> None:
        """
        Set the sibling order of several rows in the current transaction.

        Args:
            items: (id, position) pairs

        Raises:
            NotFoundError: if any ID matched no row
        """
        for resource_id, position in items:
            await self.update_position(resource_id, position)

    async def delete(self, resource_id: int) -> None:
        """Delete one row. Descendants go with it through ON DELETE CASCADE."""
        with storage_errors(self.entity, "delete"):
            result = await self.session.execute(
                delete(self.model).where(self.model.id == resource_id)
            )
        if result.rowcount == 0:
            raise NotFoundError(
                f"{self.entity} not found",
                entity=self.entity,
                operation="delete",
                details={"id": resource_id},
            )

    async def check_title_duplicate(
        self,
        title: str,
        scope_id: Any,
        exclude_id: int = 0,
    ) -> bool:
        """
        Whether a sibling in scope already uses this title.

        Args:
            title: Candidate title, compared case-insensitively and trimmed
            scope_id: Owner ID for portfolios, portfolio ID otherwise
            exclude_id: Row to ignore (the one being renamed); 0 ignores nothing
        """
        if self.title_scope_attr is None:
            raise NotImplementedError(f"{self.entity} has no title")
        query = select(func.count()).select_from(self.model).where(
            self._column(self.title_scope_attr) == scope_id,
            self.model.title_key == normalize_title(title),
        )
        if exclude_id > 0:
            query = query.where(self.model.id != exclude_id)
        with storage_errors(self.entity, "check duplicate"):
            count = await self.session.scalar(query)
        return bool(count)

    async def find_owner_drift(self) -> List[Tuple[int, str, str]]:
        """
        Rows whose denormalized owner_id no longer matches the owner chain.

        Returns:
            (id, stored owner_id, resolved owner_id) triples
        """
        raise NotImplementedError(f"{self.entity} has no owner copy")

    async def set_owner_copy(self, resource_id: int, owner_id: str) -> None:
        with storage_errors(self.entity, "repair owner"):
            await self.session.execute(
                update(self.model)
                .where(self.model.id == resource_id)
                .values(owner_id=owner_id)
            )

    def snapshot(self, instance: ModelT) -> Dict[str, Any]:
        """Column values of a row, for audit payloads."""
        return {
            column.key: getattr(instance, column.key)
            for column in self.model.__table__.columns
            if column.key not in ("title_key", "created_at", "updated_at")
        }
