# database.py
"""Document store access.

Route handlers and services talk to a ``Store``: a document store addressed by
collection name and document id, supporting equality filters (a scalar filter
value against an array field means "array contains"), ordering, counting,
merge-upserts and batched writes. ``MongoStore`` runs on MongoDB through motor;
``MemoryStore`` keeps everything in process and backs the test suite.
"""
import copy
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING, DeleteOne, ReplaceOne

from config import BATCH_WRITE_LIMIT, MONGODB_DB, MONGODB_URI, STORE_BACKEND

logger = logging.getLogger(__name__)

MODULES = "modules"
LESSONS = "lessons"
QUESTIONS = "questions"
RESPONSES = "responses"
PROGRESS = "progress"
USERS = "users"
REPORTS = "reports"

ASC = "asc"
DESC = "desc"

Order = Sequence[Tuple[str, str]]


@dataclass
class BatchOp:
    """One write inside a ``batch_write`` call. ``kind`` is "set" or "delete"."""
    kind: str
    collection: str
    id: str
    data: Optional[Dict[str, Any]] = None


def new_id() -> str:
    return str(uuid.uuid4())


def server_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def chunked(items: Sequence[Any], size: int = BATCH_WRITE_LIMIT) -> Iterator[List[Any]]:
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


class Store(ABC):
    async def init(self) -> None:
        pass

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    async def find(
        self,
        collection: str,
        filter: Optional[Dict[str, Any]] = None,
        order: Optional[Order] = None,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Return matching documents. ``cursor`` is the id of the last document
        of the previous page; results start right after it."""

    @abstractmethod
    async def count(self, collection: str, filter: Optional[Dict[str, Any]] = None) -> int:
        ...

    @abstractmethod
    async def insert(self, collection: str, data: Dict[str, Any], doc_id: Optional[str] = None) -> str:
        ...

    @abstractmethod
    async def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> bool:
        """Set ``fields`` on an existing document. False if it does not exist."""

    @abstractmethod
    async def upsert_merge(
        self,
        collection: str,
        doc_id: str,
        fields: Dict[str, Any],
        on_insert: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Create or merge into ``doc_id``. Only ``fields`` are touched on an
        existing document; ``on_insert`` is written only when it is created."""

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> bool:
        ...

    @abstractmethod
    async def batch_write(self, ops: Sequence[BatchOp]) -> None:
        ...

    @staticmethod
    def _check_batch(ops: Sequence[BatchOp]) -> None:
        if len(ops) > BATCH_WRITE_LIMIT:
            raise ValueError(f"Batch of {len(ops)} writes exceeds the limit of {BATCH_WRITE_LIMIT}")
        for op in ops:
            if op.kind not in ("set", "delete"):
                raise ValueError(f"Unknown batch operation: {op.kind}")


class MongoStore(Store):
    def __init__(self, db):
        self.db = db

    async def init(self) -> None:
        for name in (MODULES, LESSONS, QUESTIONS, RESPONSES, PROGRESS, USERS, REPORTS):
            await self.db[name].create_index("id", unique=True)
        await self.db[USERS].create_index("email")
        await self.db[RESPONSES].create_index("lessonId")
        await self.db[PROGRESS].create_index([("userId", ASCENDING), ("updatedAt", DESCENDING)])
        logger.info(f"Indexes ensured on database {self.db.name}")

    async def get(self, collection, doc_id):
        return await self.db[collection].find_one({"id": doc_id}, {"_id": 0})

    async def find(self, collection, filter=None, order=None, limit=None, cursor=None):
        query = dict(filter or {})
        order = list(order or [])
        if cursor:
            anchor = await self.db[collection].find_one({"id": cursor})
            if anchor is not None:
                query = {"$and": [query, self._after(anchor, order)]}
        sort = [(field, ASCENDING if direction == ASC else DESCENDING) for field, direction in order]
        # _id grows with insertion, so ties keep creation order
        sort.append(("_id", ASCENDING))
        find_cursor = self.db[collection].find(query, {"_id": 0}).sort(sort)
        if limit:
            find_cursor = find_cursor.limit(limit)
        return await find_cursor.to_list(None)

    @staticmethod
    def _after(anchor, order):
        keys = list(order) + [("_id", ASC)]
        clauses = []
        for i, (field, direction) in enumerate(keys):
            clause = {prev: anchor.get(prev) for prev, _ in keys[:i]}
            clause[field] = {"$gt" if direction == ASC else "$lt": anchor.get(field)}
            clauses.append(clause)
        return {"$or": clauses}

    async def count(self, collection, filter=None):
        return await self.db[collection].count_documents(dict(filter or {}))

    async def insert(self, collection, data, doc_id=None):
        doc = dict(data)
        doc["id"] = doc_id or new_id()
        await self.db[collection].insert_one(doc)
        return doc["id"]

    async def update(self, collection, doc_id, fields):
        result = await self.db[collection].update_one({"id": doc_id}, {"$set": dict(fields)})
        return result.matched_count > 0

    async def upsert_merge(self, collection, doc_id, fields, on_insert=None):
        update = {"$set": dict(fields)}
        extra = {k: v for k, v in (on_insert or {}).items() if k not in fields}
        if extra:
            update["$setOnInsert"] = extra
        await self.db[collection].update_one({"id": doc_id}, update, upsert=True)

    async def delete(self, collection, doc_id):
        result = await self.db[collection].delete_one({"id": doc_id})
        return result.deleted_count > 0

    async def batch_write(self, ops):
        self._check_batch(ops)
        grouped: Dict[str, list] = {}
        for op in ops:
            if op.kind == "set":
                request = ReplaceOne({"id": op.id}, {**(op.data or {}), "id": op.id}, upsert=True)
            else:
                request = DeleteOne({"id": op.id})
            grouped.setdefault(op.collection, []).append(request)
        for collection, requests in grouped.items():
            await self.db[collection].bulk_write(requests, ordered=True)


class MemoryStore(Store):
    def __init__(self):
        self.collections: Dict[str, Dict[str, Dict[str, Any]]] = {}

    def _collection(self, name):
        return self.collections.setdefault(name, {})

    @staticmethod
    def _matches(doc, filter):
        for field, expected in filter.items():
            actual = doc.get(field)
            if isinstance(actual, list) and not isinstance(expected, list):
                if expected not in actual:
                    return False
            elif type(actual) is bool or type(expected) is bool:
                if actual is not expected:
                    return False
            elif actual != expected:
                return False
        return True

    @staticmethod
    def _sorted(docs: Iterable[Dict[str, Any]], order):
        docs = list(docs)
        for field, direction in reversed(list(order or [])):
            docs.sort(
                key=lambda d: (d.get(field) is not None, d.get(field)),
                reverse=direction == DESC,
            )
        return docs

    async def get(self, collection, doc_id):
        doc = self._collection(collection).get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    async def find(self, collection, filter=None, order=None, limit=None, cursor=None):
        docs = [d for d in self._collection(collection).values() if self._matches(d, filter or {})]
        docs = self._sorted(docs, order)
        if cursor:
            ids = [d["id"] for d in docs]
            if cursor in ids:
                docs = docs[ids.index(cursor) + 1:]
        if limit:
            docs = docs[:limit]
        return copy.deepcopy(docs)

    async def count(self, collection, filter=None):
        return sum(1 for d in self._collection(collection).values() if self._matches(d, filter or {}))

    async def insert(self, collection, data, doc_id=None):
        doc = copy.deepcopy(dict(data))
        doc["id"] = doc_id or new_id()
        self._collection(collection)[doc["id"]] = doc
        return doc["id"]

    async def update(self, collection, doc_id, fields):
        doc = self._collection(collection).get(doc_id)
        if doc is None:
            return False
        doc.update(copy.deepcopy(dict(fields)))
        return True

    async def upsert_merge(self, collection, doc_id, fields, on_insert=None):
        docs = self._collection(collection)
        if doc_id in docs:
            docs[doc_id].update(copy.deepcopy(dict(fields)))
        else:
            doc = copy.deepcopy(dict(on_insert or {}))
            doc.update(copy.deepcopy(dict(fields)))
            doc["id"] = doc_id
            docs[doc_id] = doc

    async def delete(self, collection, doc_id):
        return self._collection(collection).pop(doc_id, None) is not None

    async def batch_write(self, ops):
        self._check_batch(ops)
        for op in ops:
            if op.kind == "set":
                doc = copy.deepcopy(dict(op.data or {}))
                doc["id"] = op.id
                self._collection(op.collection)[op.id] = doc
            else:
                self._collection(op.collection).pop(op.id, None)


_store: Optional[Store] = None


def get_store() -> Store:
    global _store
    if _store is None:
        if STORE_BACKEND == "memory":
            logger.info("Using in-memory document store")
            _store = MemoryStore()
        else:
            logger.info(f"Connecting to MongoDB database {MONGODB_DB}")
            _store = MongoStore(AsyncIOMotorClient(MONGODB_URI)[MONGODB_DB])
    return _store
