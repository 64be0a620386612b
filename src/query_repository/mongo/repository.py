"""MongoRepository — document adapter on a synchronous pymongo collection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from bson.errors import InvalidId

from ..repository import Repository
from .query_builder import MongoQueryBuilder
from .serialization import attrs_to_doc, doc_to_attrs, to_object_id

if TYPE_CHECKING:
    from collections.abc import Mapping

    from bson import ObjectId
    from pydantic import BaseModel
    from pymongo.collection import Collection

    from ..primitives.clock import Clock
    from ..query import Query

logger = logging.getLogger(__name__)


class MongoRepository(Repository):
    """
    Implementation of :class:`Repository` using pymongo.

    Documents are keyed by a server-generated ``ObjectId`` stored in
    ``_id``; models see it as the string value of ``primary_key``.
    Any object exposing the pymongo ``Collection`` API works, including
    ``mongomock`` collections in tests::

        repo = MongoRepository(User, collection=MongoClient().app.users)
    """

    def __init__(
        self,
        model_cls: type[BaseModel],
        *,
        collection: Collection[Any],
        primary_key: str = "id",
        domain_model_cls: type[Any] | None = None,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(
            model_cls,
            primary_key=primary_key,
            domain_model_cls=domain_model_cls,
            clock=clock,
        )
        self._collection = collection
        self._builder = MongoQueryBuilder(id_field=primary_key)

    # -- query execution -----------------------------------------------------

    def execute_find(self, query: Query) -> list[Any]:
        match = self._builder.build_match(query.filters)
        sort = self._builder.build_sort(query.sorts)
        logger.debug(
            "Mongo find on %s: filter=%s sort=%s skip=%s limit=%s",
            self._collection.name,
            match,
            sort,
            query.offset,
            query.limit,
        )
        if query.limit == 0:
            # pymongo treats limit(0) as "no limit"
            return []
        cursor = self._collection.find(match)
        if sort:
            cursor = cursor.sort(sort)
        if query.offset:
            cursor = cursor.skip(query.offset)
        if query.limit is not None:
            cursor = cursor.limit(query.limit)
        return [self._build(self._attrs_from_doc(doc)) for doc in cursor]

    def execute_count(self, query: Query) -> int:
        match = self._builder.build_match(query.filters)
        logger.debug("Mongo count on %s: filter=%s", self._collection.name, match)
        return self._collection.count_documents(match)

    def execute_remove(self, query: Query) -> None:
        match = self._builder.build_match(query.filters)
        result = self._collection.delete_many(match)
        logger.debug(
            "Mongo remove on %s: filter=%s deleted=%d",
            self._collection.name,
            match,
            result.deleted_count,
        )

    # -- record primitives ---------------------------------------------------

    def find_by_id(self, record_id: Any) -> Any | None:
        object_id = self._parse_id(record_id)
        if object_id is None:
            return None
        doc = self._collection.find_one({"_id": object_id})
        return self._build(self._attrs_from_doc(doc)) if doc is not None else None

    def store(self, attrs: Mapping[str, Any]) -> Any:
        record_id = attrs.get(self.primary_key)
        doc = attrs_to_doc(self._validated(attrs), id_field=self.primary_key)
        if record_id is None:
            result = self._collection.insert_one(doc)
            record_id = str(result.inserted_id)
        else:
            self._collection.replace_one({"_id": to_object_id(record_id)}, doc)
        logger.debug("Mongo stored %s in %s", record_id, self._collection.name)
        return record_id

    def delete(self, record_id: Any) -> None:
        self._collection.delete_one({"_id": to_object_id(record_id)})

    def field_names(self) -> set[str]:
        return set(self.model_cls.model_fields)

    def protected_fields(self) -> set[str]:
        return super().protected_fields() | {"_id"}

    # -- internals -----------------------------------------------------------

    def _parse_id(self, record_id: Any) -> ObjectId | None:
        try:
            return to_object_id(record_id)
        except (InvalidId, TypeError):
            logger.debug("Unparsable identity %r treated as not found", record_id)
            return None

    def _validated(self, attrs: Mapping[str, Any]) -> dict[str, Any]:
        return self.model_cls.model_validate(dict(attrs)).model_dump()

    def _attrs_from_doc(self, doc: Mapping[str, Any]) -> dict[str, Any]:
        return doc_to_attrs(dict(doc), id_field=self.primary_key)
