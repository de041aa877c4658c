"""Book Repository: verifies collection calls, silent no-ops and driver error translation.

Invariants:
    - create stores every request field plus the clock's timestamp
    - edit uses $set with upsert=False; unknown ids match nothing and succeed
    - delete on an unknown id succeeds
    - ConnectionFailure -> DatabaseConnectionError, other PyMongoError -> DatabaseQueryError
    - One unmappable document fails fetch_all entirely
"""

from datetime import datetime, timezone

import pytest
from bson import ObjectId
from pymongo.errors import (
    AutoReconnect, OperationFailure, ServerSelectionTimeoutError, WriteError,
)

from books_api.core.errors import (
    DatabaseConnectionError, DatabaseQueryError, DocumentMappingError, InvalidIdError,
)
from books_api.schemas.book import BookRequest

DUNE = BookRequest(name="Dune", author="Herbert", num_pages=412, tags=["sci-fi"])


async def test_create_inserts_document_with_timestamp(repository, fake_collection):
    await repository.create(DUNE)

    assert len(fake_collection.docs) == 1
    stored = fake_collection.docs[0]
    assert isinstance(stored["_id"], ObjectId)
    assert stored["name"] == "Dune"
    assert stored["author"] == "Herbert"
    assert stored["num_pages"] == 412
    assert stored["tags"] == ["sci-fi"]
    assert stored["added_at"] == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


async def test_create_returns_nothing(repository):
    assert await repository.create(DUNE) is None


async def test_fetch_all_empty(repository):
    assert await repository.fetch_all() == []


async def test_fetch_all_uses_no_filter(repository, fake_collection):
    await repository.fetch_all()
    assert fake_collection.calls == [("find", {})]


async def test_fetch_all_keeps_storage_order(repository):
    for name in ("A", "B", "C"):
        await repository.create(DUNE.model_copy(update={"name": name}))

    books = await repository.fetch_all()
    assert [b.name for b in books] == ["A", "B", "C"]


async def test_fetch_all_fails_on_one_bad_document(repository, fake_collection):
    await repository.create(DUNE)
    fake_collection.insert_raw({"_id": ObjectId(), "author": "Nobody"})

    with pytest.raises(DocumentMappingError) as exc:
        await repository.fetch_all()
    assert exc.value.field_name == "name"
    assert fake_collection.last_cursor.closed is True


async def test_fetch_all_closes_cursor_after_full_read(repository, fake_collection):
    await repository.create(DUNE)
    await repository.fetch_all()
    assert fake_collection.last_cursor.closed is True


async def test_edit_replaces_all_fields_and_resets_timestamp(repository, fake_collection):
    await repository.create(DUNE)
    book_id = str(fake_collection.docs[0]["_id"])
    first_added_at = fake_collection.docs[0]["added_at"]

    edited = BookRequest(name="Dune Messiah", author="F. Herbert", num_pages=256, tags=[])
    await repository.edit(book_id, edited)

    [book] = await repository.fetch_all()
    assert book.id == book_id
    assert (book.name, book.author, book.num_pages, book.tags) == (
        "Dune Messiah", "F. Herbert", 256, [],
    )
    assert book.added_at > first_added_at


async def test_edit_sends_set_without_upsert(repository, fake_collection):
    book_id = "65f1a2b3c4d5e6f7a8b9c0d1"
    await repository.edit(book_id, DUNE)

    op, filter, update, upsert = fake_collection.calls[-1]
    assert op == "update_one"
    assert filter == {"_id": ObjectId(book_id)}
    assert set(update["$set"]) == {"name", "author", "num_pages", "added_at", "tags"}
    assert upsert is False


async def test_edit_unknown_id_is_silent_noop(repository, fake_collection):
    await repository.edit("65f1a2b3c4d5e6f7a8b9c0d1", DUNE)
    assert fake_collection.docs == []


async def test_delete_removes_document(repository, fake_collection):
    await repository.create(DUNE)
    book_id = str(fake_collection.docs[0]["_id"])

    await repository.delete(book_id)

    assert await repository.fetch_all() == []


async def test_delete_unknown_id_is_silent_noop(repository, fake_collection):
    await repository.create(DUNE)
    await repository.delete("65f1a2b3c4d5e6f7a8b9c0d1")
    assert len(fake_collection.docs) == 1


@pytest.mark.parametrize("call", [
    lambda repo: repo.edit("not-an-id", DUNE),
    lambda repo: repo.delete("not-an-id"),
])
async def test_invalid_id_rejected_before_any_db_call(repository, fake_collection, call):
    with pytest.raises(InvalidIdError):
        await call(repository)
    assert fake_collection.calls == []


@pytest.mark.parametrize("error", [
    ServerSelectionTimeoutError("no servers"),
    AutoReconnect("connection reset"),
])
async def test_connection_failures_map_to_connection_error(repository, fake_collection, error):
    fake_collection.fail_with(error)
    with pytest.raises(DatabaseConnectionError) as exc:
        await repository.create(DUNE)
    assert exc.value.operation == "insert"
    assert exc.value.__cause__ is error


async def test_query_failure_during_find_maps_to_query_error(repository, fake_collection):
    fake_collection.fail_with(OperationFailure("unauthorized"))
    with pytest.raises(DatabaseQueryError) as exc:
        await repository.fetch_all()
    assert exc.value.operation == "find"


async def test_query_failure_during_update_records_book_id(repository, fake_collection):
    fake_collection.fail_with(WriteError("document too large"))
    with pytest.raises(DatabaseQueryError) as exc:
        await repository.edit("65f1a2b3c4d5e6f7a8b9c0d1", DUNE)
    assert exc.value.operation == "update"
    assert exc.value.context.book_id == "65f1a2b3c4d5e6f7a8b9c0d1"


async def test_query_failure_during_delete(repository, fake_collection):
    fake_collection.fail_with(OperationFailure("not primary"))
    with pytest.raises(DatabaseQueryError):
        await repository.delete("65f1a2b3c4d5e6f7a8b9c0d1")
