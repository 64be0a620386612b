"""SQLAlchemyRepository — relational adapter on a synchronous ``Session``."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import DataError

from ..repository import Repository
from .compiler import build_select, build_where
from .mapper import RecordMapper

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from sqlalchemy.orm import Session

    from ..primitives.clock import Clock
    from ..query import Query
    from .strategy import SQLAlchemyOperatorRegistry

logger = logging.getLogger(__name__)


class SQLAlchemyRepository(Repository):
    """
    Implementation of :class:`Repository` using SQLAlchemy 2.0.

    Separates the persistence model (``db_model_cls``, a declarative
    class) from the type handed back to callers: with ``domain_model_cls``
    (a pydantic model) every result is validated into it, otherwise
    detached ORM instances are returned.

    Every call opens its own session from ``session_factory`` (usually a
    ``sessionmaker``) and commits before returning::

        engine = create_engine("sqlite://")
        repo = SQLAlchemyRepository(
            UserRecord,
            session_factory=sessionmaker(engine),
            domain_model_cls=User,
        )
        repo.create({"name": "Steve", "age": 30})
    """

    def __init__(
        self,
        db_model_cls: type[Any],
        *,
        session_factory: Callable[[], Session],
        primary_key: str | None = None,
        domain_model_cls: type[Any] | None = None,
        clock: Clock | None = None,
        registry: SQLAlchemyOperatorRegistry | None = None,
    ) -> None:
        self._mapper = RecordMapper(db_model_cls)
        super().__init__(
            db_model_cls,
            primary_key=primary_key or self._mapper.primary_key,
            domain_model_cls=domain_model_cls,
            clock=clock,
        )
        self.db_model_cls = db_model_cls
        self._session_factory = session_factory
        self._registry = registry

    # -- query execution -----------------------------------------------------

    def execute_find(self, query: Query) -> list[Any]:
        stmt = build_select(self.db_model_cls, query, registry=self._registry)
        logger.debug("SQL find: %s", stmt)
        with self._session_factory() as session:
            rows = session.scalars(stmt).all()
            return [self._from_row(session, row) for row in rows]

    def execute_count(self, query: Query) -> int:
        stmt = (
            select(func.count())
            .select_from(self.db_model_cls)
            .where(*build_where(self.db_model_cls, query.filters, registry=self._registry))
        )
        logger.debug("SQL count: %s", stmt)
        with self._session_factory() as session:
            return int(session.scalar(stmt) or 0)

    def execute_remove(self, query: Query) -> None:
        stmt = delete(self.db_model_cls).where(
            *build_where(self.db_model_cls, query.filters, registry=self._registry)
        )
        logger.debug("SQL remove: %s", stmt)
        with self._session_factory() as session, session.begin():
            session.execute(stmt, execution_options={"synchronize_session": False})

    # -- record primitives ---------------------------------------------------

    def find_by_id(self, record_id: Any) -> Any | None:
        if record_id is None:
            return None
        try:
            with self._session_factory() as session:
                row = session.get(self.db_model_cls, record_id)
                return self._from_row(session, row) if row is not None else None
        except DataError:
            logger.debug("Identity %r rejected by the database, treated as not found", record_id)
            return None

    def store(self, attrs: Mapping[str, Any]) -> Any:
        data = dict(attrs)
        record_id = data.pop(self.primary_key, None)
        with self._session_factory() as session, session.begin():
            if record_id is None:
                instance = self._mapper.to_instance(data)
                session.add(instance)
                session.flush()
                record_id = getattr(instance, self.primary_key)
            else:
                session.execute(
                    update(self.db_model_cls)
                    .where(self._pk_column == record_id)
                    .values(**data),
                    execution_options={"synchronize_session": False},
                )
        logger.debug("SQL stored %s %r", self.db_model_cls.__name__, record_id)
        return record_id

    def delete(self, record_id: Any) -> None:
        with self._session_factory() as session, session.begin():
            session.execute(
                delete(self.db_model_cls).where(self._pk_column == record_id),
                execution_options={"synchronize_session": False},
            )

    def field_names(self) -> set[str]:
        return set(self._mapper.columns)

    # -- mapping -------------------------------------------------------------

    @property
    def _pk_column(self) -> Any:
        return getattr(self.db_model_cls, self.primary_key)

    def _from_row(self, session: Session, row: Any) -> Any:
        if self.domain_model_cls is not None:
            return self.domain_model_cls.model_validate(self._mapper.to_attrs(row))
        session.expunge(row)
        return self._mapper.normalise(row)

    def _attrs_of(self, model: Any) -> dict[str, Any]:
        if isinstance(model, self.db_model_cls):
            return self._mapper.to_attrs(model)
        return super()._attrs_of(model)
