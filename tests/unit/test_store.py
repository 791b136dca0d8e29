"""Tests for the in-memory document store."""
import pytest

from config import BATCH_WRITE_LIMIT
from database import ASC, DESC, BatchOp, chunked


@pytest.fixture
def lessons(store, put):
    put(store, "lessons", "a", title="A", tags=["x", "y"], level="beginner", createdAt="1")
    put(store, "lessons", "b", title="B", tags=["y"], level="advanced", createdAt="3")
    put(store, "lessons", "c", title="C", tags=[], level="beginner", createdAt="2")
    return store


@pytest.mark.asyncio
async def test_equality_filter(lessons):
    found = await lessons.find("lessons", {"level": "beginner"}, order=[("createdAt", ASC)])
    assert [d["id"] for d in found] == ["a", "c"]


@pytest.mark.asyncio
async def test_scalar_filter_on_array_is_contains(lessons):
    found = await lessons.find("lessons", {"tags": "y"}, order=[("createdAt", ASC)])
    assert [d["id"] for d in found] == ["a", "b"]


@pytest.mark.asyncio
async def test_boolean_filter_does_not_match_integers(store, put):
    put(store, "progress", "p1", bookmarked=True)
    put(store, "progress", "p2", bookmarked=1)
    assert await store.count("progress", {"bookmarked": True}) == 1


@pytest.mark.asyncio
async def test_order_limit_and_cursor(lessons):
    first = await lessons.find("lessons", order=[("createdAt", DESC)], limit=2)
    assert [d["id"] for d in first] == ["b", "c"]
    rest = await lessons.find("lessons", order=[("createdAt", DESC)], limit=2, cursor="c")
    assert [d["id"] for d in rest] == ["a"]


@pytest.mark.asyncio
async def test_ties_keep_insertion_order(store, put):
    for doc_id in ("m1", "m2", "m3"):
        put(store, "modules", doc_id, createdAt="same")
    found = await store.find("modules", order=[("createdAt", DESC)])
    assert [d["id"] for d in found] == ["m1", "m2", "m3"]


@pytest.mark.asyncio
async def test_returned_documents_are_copies(lessons):
    doc = await lessons.get("lessons", "a")
    doc["tags"].append("z")
    assert (await lessons.get("lessons", "a"))["tags"] == ["x", "y"]


@pytest.mark.asyncio
async def test_insert_generates_id(store):
    doc_id = await store.insert("reports", {"message": "hi"})
    assert (await store.get("reports", doc_id)) == {"message": "hi", "id": doc_id}


@pytest.mark.asyncio
async def test_update_missing_document(store):
    assert await store.update("lessons", "nope", {"title": "x"}) is False


@pytest.mark.asyncio
async def test_upsert_merge_keeps_untouched_fields(store):
    await store.upsert_merge("progress", "u_l", {"status": "in_progress"}, on_insert={"createdAt": "t0"})
    await store.upsert_merge("progress", "u_l", {"bookmarked": True}, on_insert={"createdAt": "t1"})
    assert await store.get("progress", "u_l") == {
        "id": "u_l", "status": "in_progress", "bookmarked": True, "createdAt": "t0",
    }


@pytest.mark.asyncio
async def test_batch_write_sets_and_deletes(lessons):
    await lessons.batch_write([
        BatchOp("delete", "lessons", "a"),
        BatchOp("set", "questions", "q1", {"prompt": "?"}),
    ])
    assert await lessons.get("lessons", "a") is None
    assert await lessons.get("questions", "q1") == {"prompt": "?", "id": "q1"}


@pytest.mark.asyncio
async def test_batch_write_rejects_oversized_batches(store):
    ops = [BatchOp("set", "modules", str(i), {}) for i in range(BATCH_WRITE_LIMIT + 1)]
    with pytest.raises(ValueError):
        await store.batch_write(ops)


def test_chunked():
    assert [len(c) for c in chunked(list(range(1201)), 500)] == [500, 500, 201]
