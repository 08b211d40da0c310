"""
SQL translation tests for the PostgreSQL entity store.

Statements are compiled against the PostgreSQL dialect; no database is
needed.
"""

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import IntegrityError, OperationalError

from support_desk.config import Settings, StorageBackend
from support_desk.core import ConfigurationException, ConflictException, RepositoryException
from support_desk.infrastructure.database import normalize_database_url
from support_desk.infrastructure.store import (
    Collection, InMemoryEntityStore, SQLAlchemyEntityStore, build_entity_store
)
from support_desk.infrastructure.store.models import SupportCaseModel, SupportPersonModel
from support_desk.infrastructure.store.sql import build_find, build_order_by, build_where
from support_desk.persons.domain import PersonFilter, build_person_query
from support_desk.shared.domain import And, Contains, Eq, Lt, MatchAll, Ne, Or, SortKey


def _sql(clause, literal: bool = True) -> str:
    compile_kwargs = {"literal_binds": True} if literal else {}
    return str(clause.compile(dialect=postgresql.dialect(), compile_kwargs=compile_kwargs))


class TestWhere:

    def test_match_all(self):
        assert _sql(build_where(SupportCaseModel, MatchAll())) == "true"

    def test_eq_none_is_null_check(self):
        sql = _sql(build_where(SupportCaseModel, Eq("assigned_support_person", None)))
        assert sql == "support_cases.assigned_support_person IS NULL"

    def test_ne_value_keeps_nulls(self):
        sql = _sql(build_where(SupportCaseModel, Ne("assigned_support_person", "")))
        assert "IS NULL OR" in sql
        assert "!= ''" in sql

    def test_contains_uses_jsonb_containment(self):
        predicate = Contains("specializations", "Database")
        sql = _sql(build_where(SupportPersonModel, predicate), literal=False)
        assert "support_persons.specializations @>" in sql

    def test_conjunction(self):
        predicate = And.of(Eq("is_active", True), Lt("current_workload", 10))
        sql = _sql(build_where(SupportPersonModel, predicate))
        assert "support_persons.is_active = true" in sql
        assert "support_persons.current_workload < 10" in sql

    def test_empty_disjunction_matches_nothing(self):
        assert _sql(build_where(SupportCaseModel, Or.of())) == "false"

    def test_unknown_field_rejected(self):
        with pytest.raises(RepositoryException):
            build_where(SupportCaseModel, Eq("nope", 1))

    def test_position_not_queryable(self):
        with pytest.raises(RepositoryException):
            build_where(SupportCaseModel, Eq("position", 1))


class TestOrderBy:

    def test_default_is_insertion_order(self):
        clauses = build_order_by(SupportCaseModel, None)
        assert [_sql(c) for c in clauses] == ["support_cases.position ASC"]

    def test_descending_puts_nulls_last_then_position(self):
        clauses = build_order_by(SupportPersonModel, SortKey("customer_satisfaction_rating", True))
        assert _sql(clauses[0]).endswith("DESC NULLS LAST")
        assert _sql(clauses[1]) == "support_persons.position ASC"

    def test_ranked_sort_maps_levels(self):
        query = build_person_query(PersonFilter(sort_by="seniority"))
        sql = _sql(build_order_by(SupportPersonModel, query.sort)[0])
        assert sql.startswith("CASE WHEN")
        assert "support_persons.seniority IS NULL" in sql
        assert "support_persons.seniority = 'Manager'" in sql
        assert "THEN 4" in sql
        assert sql.endswith("ELSE 5 END ASC NULLS FIRST")


class TestFind:

    def test_window(self):
        query = build_person_query(PersonFilter(limit=10, offset=20))
        sql = _sql(build_find(SupportPersonModel, query.predicate, query.sort, query.skip, query.limit))
        assert "LIMIT 10" in sql
        assert "OFFSET 20" in sql


class _FailingFlushSession:
    """Session stand-in whose flush raises the given error."""

    def __init__(self, error):
        self.error = error
        self.added = []

    def add(self, instance):
        self.added.append(instance)

    async def flush(self):
        raise self.error


class TestInsertFailures:

    async def test_duplicate_case_id_is_conflict(self):
        session = _FailingFlushSession(IntegrityError("INSERT", {}, Exception("duplicate key")))
        store = SQLAlchemyEntityStore(session)

        with pytest.raises(ConflictException) as exc_info:
            await store.insert(Collection.CASES, {"id": "x", "title": "dup"})

        assert exc_info.value.code == "CASE_ALREADY_EXISTS"
        assert exc_info.value.details == {"id": "x"}

    async def test_person_integrity_error_is_store_failure(self):
        session = _FailingFlushSession(IntegrityError("INSERT", {}, Exception("duplicate key")))
        store = SQLAlchemyEntityStore(session)

        with pytest.raises(RepositoryException):
            await store.insert(Collection.PERSONS, {"alias": "jdoe", "name": "Jane"})

    async def test_connection_error_is_store_failure(self):
        session = _FailingFlushSession(OperationalError("INSERT", {}, Exception("refused")))
        store = SQLAlchemyEntityStore(session)

        with pytest.raises(RepositoryException):
            await store.insert(Collection.CASES, {"title": "x"})


class TestBuildEntityStore:

    def test_memory_backend_reuses_given_store(self):
        memory = InMemoryEntityStore()
        assert build_entity_store(StorageBackend.MEMORY, memory_store=memory) is memory

    def test_postgres_backend_wraps_session(self):
        session = object()
        store = build_entity_store("POSTGRES", session=session)
        assert isinstance(store, SQLAlchemyEntityStore)

    def test_postgres_without_session_rejected(self):
        with pytest.raises(ConfigurationException):
            build_entity_store(StorageBackend.POSTGRES)

    def test_unknown_backend_rejected(self):
        with pytest.raises(ConfigurationException):
            build_entity_store("mongo")

    def test_settings_reject_unknown_backend(self):
        with pytest.raises(ValueError):
            Settings(storage_backend="mongo")


class TestDatabaseUrl:

    @pytest.mark.parametrize("url,expected", [
        ("postgres://u:p@db/app", "postgresql+asyncpg://u:p@db/app"),
        ("postgresql://u:p@db/app?sslmode=require", "postgresql+asyncpg://u:p@db/app?ssl=require"),
        ("postgresql+asyncpg://u:p@db/app", "postgresql+asyncpg://u:p@db/app"),
    ])
    def test_normalized_for_asyncpg(self, url, expected):
        assert normalize_database_url(url) == expected
