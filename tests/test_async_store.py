"""Tests for the asyncio adapter."""

import asyncio
import threading

import pytest

from ragstore.models import RagQuery
from ragstore.vectorstores import AsyncVectorStore, InMemoryVectorStore, SqliteVectorStore


class BlockingEmbedder:
    """Embedder that waits for a release signal before answering."""

    def __init__(self, inner):
        self.inner = inner
        self.release = threading.Event()
        self.dimension = inner.dimension
        self.model_name = inner.model_name

    def embed(self, texts):
        self.release.wait(timeout=10)
        return self.inner.embed(texts)


def test_async_index_and_search(db_path, embedder):
    async def scenario():
        store = AsyncVectorStore(SqliteVectorStore(db_path, embedder))
        await asyncio.gather(
            store.index_document("a.txt", "hello world"),
            store.index_document("b.txt", "goodbye world"),
        )
        results = await store.search(RagQuery("hello", top_k=1))
        files = await store.get_indexed_files()
        count = await store.get_chunk_count()
        await store.close()
        return results, files, count

    results, files, count = asyncio.run(scenario())

    assert results[0].chunk.source_file == "a.txt"
    assert files == {"a.txt", "b.txt"}
    assert count == 2


def test_async_remove_clear_and_check(tmp_path, embedder):
    doc = tmp_path / "doc.txt"
    doc.write_text("some text")

    async def scenario():
        store = AsyncVectorStore(InMemoryVectorStore(embedder))
        await store.index_document(str(doc), doc.read_text())
        checked = await store.batch_check_files_for_changes([str(doc)])
        await store.remove_document(str(doc))
        after_remove = await store.get_indexed_files()
        await store.index_document("other.txt", "more text")
        await store.clear_index()
        return checked, after_remove, await store.get_chunk_count()

    checked, after_remove, count = asyncio.run(scenario())

    assert checked == {str(doc): False}
    assert after_remove == set()
    assert count == 0


def test_timed_out_index_never_half_writes(db_path, embedder):
    blocking = BlockingEmbedder(embedder)
    inner = SqliteVectorStore(db_path, blocking, chunk_size=20, chunk_overlap=5)

    async def scenario():
        store = AsyncVectorStore(inner)
        with pytest.raises(asyncio.TimeoutError):
            await store.index_document(
                "long.txt", " ".join(f"w{i}" for i in range(100)), timeout=0.05
            )
        # nothing written while the embedder is still blocked
        assert await store.get_chunk_count() == 0

        blocking.release.set()
        for _ in range(200):
            if await store.get_chunk_count():
                break
            await asyncio.sleep(0.05)
        return inner.get_file_chunks("long.txt")

    chunks = asyncio.run(scenario())

    assert chunks
    assert [c.chunk_index for c in chunks] == list(range(len(chunks)))
    inner.close()
