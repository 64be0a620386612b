"""Document adapter: match-document compilation, serialization and identities."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

import pytest
from bson import Decimal128, ObjectId
from conftest import NOW, User
from pymongo import ASCENDING, DESCENDING

from query_repository import (
    FilterFactory,
    Sort,
    SortOrder,
    UnsupportedFilterCombinationError,
)
from query_repository.mongo import MongoQueryBuilder, MongoRepository
from query_repository.mongo.serialization import (
    attrs_to_doc,
    coerce_id,
    deserialize_value,
    doc_to_attrs,
    serialize_value,
)

f = FilterFactory()
OID = "507f1f77bcf86cd799439011"


@pytest.fixture
def builder() -> MongoQueryBuilder:
    return MongoQueryBuilder()


class TestBuildMatch:
    def test_no_filters_match_everything(self, builder):
        assert builder.build_match([]) == {}

    def test_single_equality_collapses(self, builder):
        assert builder.build_match([f.eq("name", "Steve")]) == {"name": "Steve"}
        assert builder.build_match([f.eq("name", None)]) == {"name": None}

    def test_operators_on_one_field_merge(self, builder):
        match = builder.build_match(
            [f.eq("name", "Steve"), f.gte("age", 18), f.lt("age", 30)]
        )
        assert match == {"name": "Steve", "age": {"$gte": 18, "$lt": 30}}

    def test_repeated_operator_gets_its_own_clause(self, builder):
        match = builder.build_match([f.gt("age", 18), f.gt("age", 21)])
        assert match == {"age": {"$gt": 18}, "$and": [{"age": {"$gt": 21}}]}

    def test_two_equalities_on_one_field_are_rejected(self, builder):
        with pytest.raises(UnsupportedFilterCombinationError) as excinfo:
            builder.build_match([f.eq("name", "a"), f.eq("name", "b")])
        assert excinfo.value.field == "name"

    def test_equality_with_another_operator_is_rejected(self, builder):
        with pytest.raises(UnsupportedFilterCombinationError, match="age"):
            builder.build_match([f.eq("age", 1), f.gt("age", 0)])

    def test_equality_inside_or_is_allowed(self, builder):
        match = builder.build_match(
            [f.eq("name", "a"), f.or_(f.eq("name", "b"), f.not_eq("age", None))]
        )
        assert match == {
            "name": "a",
            "$or": [{"name": "b"}, {"age": {"$ne": None}}],
        }

    def test_several_composites_are_anded(self, builder):
        either = f.or_(f.eq("age", 1), f.eq("age", 2))
        both = f.and_(f.eq("name", "a"), f.lt("age", 3))
        assert builder.build_match([either, both]) == {
            "$and": [
                {"$or": [{"age": 1}, {"age": 2}]},
                {"$and": [{"name": "a"}, {"age": {"$lt": 3}}]},
            ]
        }

    def test_membership_values_are_deduplicated(self, builder):
        assert builder.build_match([f.in_("age", [1, 1, None])]) == {
            "age": {"$in": [1, None]}
        }
        assert builder.build_match([f.not_in("age", [])]) == {"age": {"$nin": []}}

    def test_like_escapes_regex_metacharacters(self, builder):
        assert builder.build_match([f.like("name", "a.c")]) == {
            "name": {"$regex": r"a\.c", "$options": "i"}
        }

    def test_identity_maps_to_object_id(self, builder):
        assert builder.build_match([f.eq("id", OID)]) == {"_id": ObjectId(OID)}
        assert builder.build_match([f.in_("id", [OID, "nope"])]) == {
            "_id": {"$in": [ObjectId(OID), "nope"]}
        }

    def test_values_are_serialised(self, builder):
        match = builder.build_match([f.gte("opened_at", NOW)])
        assert match == {"opened_at": {"$gte": datetime(2012, 11, 10, 12, 0)}}

    def test_dict_equality_uses_eq(self, builder):
        assert builder.build_match([f.eq("meta", {"a": 1})]) == {
            "meta": {"$eq": {"a": 1}}
        }

    def test_custom_identity_field(self):
        builder = MongoQueryBuilder(id_field="code")
        assert builder.field_path("code") == "_id"
        assert builder.field_path("id") == "id"


def test_build_sort(builder):
    sorts = [Sort("age", SortOrder.DESC), Sort("id")]
    assert builder.build_sort(sorts) == [("age", DESCENDING), ("_id", ASCENDING)]


class TestSerialization:
    def test_serialize_value(self):
        assert serialize_value(NOW) == datetime(2012, 11, 10, 12, 0)
        assert serialize_value(UUID(int=1)) == str(UUID(int=1))
        assert serialize_value(Decimal("1.5")) == Decimal128("1.5")
        assert serialize_value({"at": [NOW]}) == {"at": [datetime(2012, 11, 10, 12)]}

    def test_deserialize_value(self):
        assert deserialize_value(datetime(2012, 11, 10, 12)) == NOW
        assert deserialize_value(Decimal128("1.5")) == Decimal("1.5")
        assert deserialize_value(ObjectId(OID)) == OID

    def test_identity_field_round_trip(self):
        doc = attrs_to_doc({"id": 1, "_id": 2, "name": "Steve"})
        assert doc == {"name": "Steve"}
        attrs = doc_to_attrs({"_id": ObjectId(OID), "name": "Steve"})
        assert attrs == {"id": OID, "name": "Steve"}

    def test_coerce_id(self):
        assert coerce_id(OID) == ObjectId(OID)
        assert coerce_id("nope") == "nope"
        assert coerce_id(1) == 1

    def test_aware_datetimes_in_other_zones(self):
        local = datetime(2012, 11, 10, 14, 0, tzinfo=timezone.utc).astimezone()
        assert serialize_value(local) == datetime(2012, 11, 10, 14, 0)


class TestMongoRepository:
    @pytest.fixture
    def repo(self, mongo_collection, clock) -> MongoRepository:
        return MongoRepository(User, collection=mongo_collection, clock=clock)

    def test_identities_are_object_id_strings(self, repo, mongo_collection):
        created = repo.create({"name": "Steve"})
        assert ObjectId.is_valid(created.id)
        stored = mongo_collection.find_one({"_id": ObjectId(created.id)})
        assert stored["name"] == "Steve"
        assert "id" not in stored

    @pytest.mark.parametrize("record_id", ["unknown", 12, ["a"], None, OID])
    def test_unparsable_or_unknown_identity_is_not_found(self, repo, record_id):
        repo.create()
        assert repo.find_by_id(record_id) is None

    def test_remove_by_unparsable_identity_raises_not_found(self, repo):
        from query_repository import RecordNotFoundError

        with pytest.raises(RecordNotFoundError):
            repo.remove_by_id("unknown")

    def test_conflicting_equalities_surface_from_the_repository(self, repo):
        repo.create({"name": "Steve"})
        with pytest.raises(UnsupportedFilterCombinationError):
            repo.eq("name", "Steve").eq("name", "Bob").all()

    def test_datetimes_come_back_aware(self, repo):
        created = repo.create({"opened_at": NOW})
        assert created.opened_at == NOW
        assert created.created_at.tzinfo is not None

    def test_zero_limit_returns_nothing(self, repo):
        repo.create()
        assert repo.limit(0).all() == []

    def test_update_cannot_touch_the_document_identity(self, repo):
        created = repo.create({"name": "Steve"})
        updated = repo.update(created, {"_id": OID, "name": "Bob"})
        assert updated.id == created.id
        assert updated.name == "Bob"
