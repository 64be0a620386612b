"""Relational adapter: statement compilation and ORM mapping."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from conftest import NOW, User, UserRecord
from sqlalchemy import Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql.elements import False_, True_

from query_repository import (
    FieldNotFoundError,
    FilterFactory,
    FilterOperator,
    Query,
    Sort,
    SortOrder,
)
from query_repository.sql import (
    SQLAlchemyOperatorRegistry,
    SQLAlchemyRepository,
    build_filter,
    build_order_by,
    build_select,
)
from query_repository.sql.mapper import RecordMapper

f = FilterFactory()


def sql(filter_) -> str:
    return str(build_filter(UserRecord, filter_))


class TestCompiler:
    def test_null_equality(self):
        assert sql(f.eq("name", None)) == "users.name IS NULL"
        assert sql(f.not_eq("name", None)) == "users.name IS NOT NULL"

    def test_inequality_keeps_null_rows(self):
        assert sql(f.not_eq("name", "Steve")) == (
            "users.name != :name_1 OR users.name IS NULL"
        )

    def test_inclusion_with_a_null_member(self):
        compiled = sql(f.in_("age", [1, None]))
        assert "users.age IN" in compiled
        assert compiled.endswith("OR users.age IS NULL")

    def test_empty_inclusion_matches_nothing(self):
        assert isinstance(build_filter(UserRecord, f.in_("age", [])), False_)
        assert sql(f.in_("age", [None])) == "users.age IS NULL"

    def test_exclusion_branches(self):
        assert isinstance(build_filter(UserRecord, f.not_in("age", [])), True_)
        assert sql(f.not_in("age", [None])) == "users.age IS NOT NULL"
        assert sql(f.not_in("age", [1])).endswith("OR users.age IS NULL")
        assert sql(f.not_in("age", [1, None])).endswith("AND users.age IS NOT NULL")

    def test_like_escapes_wildcards(self):
        compiled = sql(f.like("name", "50%_off"))
        assert "LIKE" in compiled
        assert "ESCAPE '/'" in compiled

    def test_like_on_a_non_text_column_matches_nothing(self):
        assert isinstance(build_filter(UserRecord, f.like("age", "1")), False_)
        assert "LIKE" in sql(f.like("name", "1"))

    def test_composites_are_parenthesised(self):
        node = f.and_(f.eq("age", 1), f.or_(f.eq("name", "a"), f.eq("name", "b")))
        assert sql(node) == (
            "users.age = :age_1 AND (users.name = :name_1 OR users.name = :name_2)"
        )

    def test_values_are_bound_parameters(self):
        compiled = sql(f.eq("name", "x'; DROP TABLE users; --"))
        assert "DROP" not in compiled

    def test_order_by_null_placement(self):
        clauses = build_order_by(
            UserRecord, [Sort("age"), Sort("name", SortOrder.DESC)]
        )
        assert [str(c) for c in clauses] == [
            "users.age ASC NULLS FIRST",
            "users.name DESC NULLS LAST",
        ]

    def test_select_applies_paging(self):
        stmt = build_select(UserRecord, Query(limit=2, offset=4))
        compiled = str(stmt)
        assert "LIMIT" in compiled
        assert "OFFSET" in compiled

    def test_unknown_field_suggests_columns(self):
        with pytest.raises(FieldNotFoundError) as excinfo:
            build_filter(UserRecord, f.eq("nmae", "Steve"))
        assert excinfo.value.suggestions == ["name"]
        assert excinfo.value.model_name == "UserRecord"

    def test_unknown_sort_field(self):
        with pytest.raises(FieldNotFoundError):
            build_order_by(UserRecord, [Sort("nmae")])

    def test_custom_registry_without_the_operator(self):
        with pytest.raises(ValueError, match="Unsupported operator for SQLAlchemy"):
            build_filter(
                UserRecord, f.eq("age", 1), registry=SQLAlchemyOperatorRegistry()
            )

    def test_default_registry_covers_every_leaf_operator(self):
        from query_repository.sql import DEFAULT_SQLA_REGISTRY

        leaves = set(FilterOperator) - {FilterOperator.AND, FilterOperator.OR}
        assert DEFAULT_SQLA_REGISTRY.supported_operators == leaves


class Base(DeclarativeBase):
    pass


class Account(Base):
    __tablename__ = "accounts"

    code: Mapped[int] = mapped_column("account_code", Integer, primary_key=True)
    owner: Mapped[str | None] = mapped_column(String(64))


class TestMapper:
    def test_primary_key_is_the_attribute_name(self):
        assert RecordMapper(Account).primary_key == "code"
        assert RecordMapper(UserRecord).primary_key == "id"

    def test_columns(self):
        assert RecordMapper(Account).columns == {"code", "owner"}

    def test_naive_datetimes_are_read_as_utc(self):
        naive = datetime(2012, 11, 10, 12, 0)
        attrs = RecordMapper(UserRecord).to_attrs(UserRecord(id=1, opened_at=naive))
        assert attrs["opened_at"] == naive.replace(tzinfo=timezone.utc)


class TestSQLAlchemyRepository:
    @pytest.fixture
    def orm_repo(self, sql_session_factory, clock):
        return SQLAlchemyRepository(
            UserRecord, session_factory=sql_session_factory, clock=clock
        )

    def test_detects_the_primary_key(self, orm_repo):
        assert orm_repo.primary_key == "id"
        assert orm_repo.field_names() == {
            "id",
            "name",
            "age",
            "opened_at",
            "created_at",
            "updated_at",
        }

    def test_returns_detached_orm_instances(self, orm_repo):
        created = orm_repo.create({"name": "Steve"})
        assert isinstance(created, UserRecord)
        assert created.created_at == NOW
        assert orm_repo.first().name == "Steve"

    def test_projects_into_the_domain_model(self, sql_session_factory, clock):
        repo = SQLAlchemyRepository(
            UserRecord,
            session_factory=sql_session_factory,
            domain_model_cls=User,
            clock=clock,
        )
        repo.create({"name": "Steve", "age": 30})
        user = repo.eq("age", 30).first()
        assert isinstance(user, User)
        assert user.created_at == NOW

    def test_unknown_field_raises_at_execution(self, orm_repo):
        orm_repo.create()
        cursor = orm_repo.eq("nmae", "Steve")
        with pytest.raises(FieldNotFoundError):
            cursor.all()
        with pytest.raises(FieldNotFoundError):
            orm_repo.sort("nmae").first()

    def test_unknown_identity(self, orm_repo):
        assert orm_repo.find_by_id(None) is None
        assert orm_repo.find_by_id(404) is None

    def test_update_from_an_orm_instance(self, orm_repo):
        created = orm_repo.create({"name": "Steve", "age": 30})
        created.age = 31
        updated = orm_repo.update(created)
        assert (updated.id, updated.name, updated.age) == (created.id, "Steve", 31)

    def test_custom_primary_key(self, clock):
        from sqlalchemy import create_engine
        from sqlalchemy.orm import sessionmaker
        from sqlalchemy.pool import StaticPool

        engine = create_engine("sqlite://", poolclass=StaticPool)
        Base.metadata.create_all(engine)
        repo = SQLAlchemyRepository(
            Account, session_factory=sessionmaker(engine), clock=clock
        )
        first = repo.create({"owner": "Steve"})
        second = repo.create({"owner": "Bob"})
        assert repo.default_sorts() == [Sort("code")]
        assert repo.last().code == second.code
        repo.remove(first)
        assert [a.owner for a in repo.all()] == ["Bob"]
        engine.dispose()
