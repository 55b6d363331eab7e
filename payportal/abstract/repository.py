"""Generic repository for the data access layer.

A repository wraps one entity type and one ``AsyncSession``. It is resolved
by FastAPI through ``Depends()`` in request handlers and built by hand with an
explicit session in startup hooks and tests.
"""

from collections.abc import Sequence
from typing import Annotated
from typing import Any

from fastapi import Depends
from sqlalchemy import ColumnElement
from sqlalchemy import exists
from sqlalchemy import select
from sqlalchemy import update
from sqlalchemy.exc import NoResultFound
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.interfaces import ORMOption

from payportal.core.database import get_session
from payportal.exceptions import NotFoundException

from .entity import Entity


# Type alias for filter conditions
type FilterType = ColumnElement[bool] | bool


class Repository[EntityT: Entity]:
    """Base repository with the operations shared by every domain.

    Usage with FastAPI:
        ```python
        class PaymentRepository(Repository[Payment]):
            pass  # Entity type taken from the generic parameter

        class PaymentService(Service):
            def __init__(self, payment_repo: Annotated[PaymentRepository, Depends()]) -> None:
                self._payment_repo = payment_repo
        ```

    Manual instantiation:
        ```python
        async with get_session_context() as session:
            admin = await EmployeeRepository(session).get_super_admin()
        ```

    Attributes:
        _entity: Entity class bound by the generic parameter.
        _session: Async session all statements run on.
    """

    _entity: type[Entity]
    __orig_bases__: tuple[type, ...]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        """Bind the entity type when a concrete repository is declared."""
        super().__init_subclass__(**kwargs)
        cls._entity = cls.__orig_bases__[0].__args__[0]

    def __init__(self, session: Annotated[AsyncSession, Depends(get_session)]) -> None:
        self._session = session

    @property
    def session(self) -> AsyncSession:
        return self._session

    # =========================================================================
    # QUERIES
    # =========================================================================

    async def exists(self, *filters: FilterType) -> bool:
        """Check whether any row matches the filters.

        Example:
            if await repo.exists(Employee.username == username):
                raise ConflictException("Username already exists")
        """
        result = await self._session.execute(select(exists().where(*filters)))
        return result.scalar_one()

    async def select_one(self, *filters: FilterType, options: Sequence[ORMOption] = ()) -> EntityT | None:
        """Return the single matching entity, or None.

        Raises:
            MultipleResultsFound: If more than one row matches.
        """
        stmt = select(self._entity).where(*filters).options(*options)
        result = await self._session.execute(stmt)
        return result.scalars().one_or_none()

    async def get_by_id(
        self,
        pk: Any,
        options: Sequence[ORMOption] = (),
        populate_existing: bool = False,
    ) -> EntityT:
        """Return the entity with primary key ``pk``.

        With ``populate_existing`` an instance already in the session is
        overwritten with the row as currently stored, which is how callers
        observe the effect of ``update_by_filters``.

        Raises:
            NotFoundException: If no such row exists.
        """
        stmt = select(self._entity).where(self._entity.pk == pk).options(*options)
        if populate_existing:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self._session.execute(stmt)
        try:
            return result.scalars().one()
        except NoResultFound:
            raise NotFoundException(entity_name=self._entity.__name__, entity_id=str(pk)) from None

    async def select_all(
        self,
        *filters: FilterType,
        order_by: Sequence[Any] = (),
        options: Sequence[ORMOption] = (),
    ) -> Sequence[EntityT]:
        """Return every matching entity.

        Example:
            payments = await repo.select_all(
                Payment.customer_id == customer_id,
                order_by=[Payment.created_at.desc()],
            )
        """
        stmt = select(self._entity).where(*filters).options(*options).order_by(*order_by)
        result = await self._session.execute(stmt)
        return result.scalars().all()

    # =========================================================================
    # WRITES
    # =========================================================================

    async def create(self, *, flush: bool = True, **values: Any) -> EntityT:
        """Add a new entity built from ``values``.

        Flushing assigns the primary key and Python-side defaults, so the
        returned instance is complete.
        """
        instance = self._entity(**values)
        self._session.add(instance)
        if flush:
            await self._session.flush()
        return instance

    async def update_by_filters(self, values: dict[str, Any], *filters: FilterType) -> int:
        """Update every row matching the filters in one statement.

        The filters double as a guard: the statement is a conditional update,
        so callers detect a lost race from a zero row count. Instances already
        loaded are not synchronized; reload them with ``populate_existing``.

        Returns:
            Number of rows updated.

        Example:
            updated = await repo.update_by_filters(
                {"status": PaymentStatus.APPROVED},
                Payment.pk == payment_id,
                Payment.status == PaymentStatus.PENDING,
            )
        """
        stmt = (
            update(self._entity)
            .where(*filters)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount

    async def delete(self, entity: EntityT, *, flush: bool = True) -> None:
        await self._session.delete(entity)
        if flush:
            await self._session.flush()
