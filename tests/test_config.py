"""Tests for settings and component factories."""

import pytest

from ragstore.chunkers import CharacterChunker, WordChunker
from ragstore.config import StoreSettings, create_embedder, create_vector_store
from ragstore.embedders import HashingEmbedder
from ragstore.storage import ChunkStore
from ragstore.vectorstores import InMemoryVectorStore, SqliteVectorStore


def test_defaults():
    settings = StoreSettings()
    assert settings.store_type == "optimized"
    assert settings.chunk_size == 1000
    assert settings.chunk_overlap == 200
    assert settings.hash_algorithm == "md5"


def test_from_env_casts_values():
    env = {
        "RAGSTORE_DB_PATH": "/tmp/index.db",
        "RAGSTORE_CHUNK_SIZE": "300",
        "RAGSTORE_CHUNK_OVERLAP": "50",
        "RAGSTORE_BUSY_TIMEOUT": "2.5",
        "RAGSTORE_STORE_TYPE": "sqlite",
        "UNRELATED": "ignored",
    }

    settings = StoreSettings.from_env(env)

    assert settings.db_path == "/tmp/index.db"
    assert settings.chunk_size == 300
    assert settings.chunk_overlap == 50
    assert settings.busy_timeout == 2.5
    assert settings.store_type == "sqlite"


def test_overrides_win_and_none_is_ignored():
    env = {"RAGSTORE_STORE_TYPE": "sqlite", "RAGSTORE_DB_PATH": "env.db"}

    settings = StoreSettings.from_env(env, store_type="memory", db_path=None)

    assert settings.store_type == "memory"
    assert settings.db_path == "env.db"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"store_type": "postgres"},
        {"chunk_unit": "sentence"},
        {"embedding_provider": "openai"},
        {"chunk_size": 0},
        {"chunk_size": 100, "chunk_overlap": 100},
        {"chunk_overlap": -1},
    ],
)
def test_invalid_settings(kwargs):
    with pytest.raises(ValueError):
        StoreSettings(**kwargs)


def test_invalid_env_number():
    with pytest.raises(ValueError):
        StoreSettings.from_env({"RAGSTORE_CHUNK_SIZE": "many"})


def test_hash_embedder_factory():
    embedder = create_embedder(StoreSettings(embedding_provider="hash", embedding_dimension=64))
    assert isinstance(embedder, HashingEmbedder)
    assert embedder.dimension == 64


@pytest.mark.parametrize(
    "store_type,tracked",
    [("sqlite", False), ("optimized", True)],
)
def test_sqlite_variants(db_path, store_type, tracked):
    settings = StoreSettings(db_path=str(db_path), store_type=store_type, embedding_provider="hash")

    store = create_vector_store(settings)

    assert isinstance(store, SqliteVectorStore)
    assert store.track_file_changes is tracked
    assert isinstance(store.chunker, WordChunker)
    store.close()
    assert store.chunk_store.closed


def test_memory_variant_with_char_chunks():
    settings = StoreSettings(
        store_type="memory", chunk_unit="char", chunk_size=100, chunk_overlap=10, embedding_provider="hash"
    )

    store = create_vector_store(settings)

    assert isinstance(store, InMemoryVectorStore)
    assert isinstance(store.chunker, CharacterChunker)
    assert store.chunk_size == 100


def test_shared_chunk_store_is_not_closed(db_path, embedder):
    shared = ChunkStore(db_path)
    settings = StoreSettings(db_path=str(db_path), embedding_provider="hash")

    store = create_vector_store(settings, embedder=embedder, chunk_store=shared)
    store.close()

    assert store.embedder is embedder
    assert not shared.closed
    shared.close()


def test_sentence_transformer_factory_uses_batch_size(monkeypatch):
    from ragstore.embedders import sentence_transformer

    def not_loaded(*args, **kwargs):
        raise AssertionError("model must load lazily")

    monkeypatch.setattr(sentence_transformer, "SentenceTransformer", not_loaded)
    settings = StoreSettings(embedding_model="paraphrase-MiniLM-L3-v2", embedding_batch_size=4)

    embedder = create_embedder(settings)

    assert embedder.model_name == "paraphrase-MiniLM-L3-v2"
    assert embedder.batch_size == 4
