"""Tests for the sliding-window chunkers."""

import pytest

from ragstore.chunkers import CharacterChunker, WordChunker
from ragstore.protocols import ChunkingStrategy


def test_chunkers_satisfy_protocol():
    assert isinstance(WordChunker(), ChunkingStrategy)
    assert isinstance(CharacterChunker(), ChunkingStrategy)


@pytest.mark.parametrize("content", ["", "   ", "\n\t  \n"])
def test_blank_content_yields_no_chunks(content):
    assert WordChunker().split(content, 10, 2) == []
    assert CharacterChunker().split(content, 10, 2) == []


def test_short_document_is_one_chunk():
    assert WordChunker().split("one two three", 10, 2) == ["one two three"]


def test_exact_size_document_is_one_chunk():
    assert WordChunker().split("a b c d", 4, 1) == ["a b c d"]


def test_word_windows_overlap():
    words = " ".join(f"w{i}" for i in range(10))

    chunks = WordChunker().split(words, 4, 1)

    assert chunks == ["w0 w1 w2 w3", "w3 w4 w5 w6", "w6 w7 w8 w9"]


def test_whitespace_is_normalized():
    assert WordChunker().split("alpha\n\nbeta\tgamma  delta", 10, 0) == ["alpha beta gamma delta"]


def test_phrase_across_boundary_survives_in_one_chunk():
    text = " ".join(["filler"] * 7 + ["needle", "haystack"] + ["filler"] * 7)

    chunks = WordChunker().split(text, 8, 2)

    assert any("needle haystack" in chunk for chunk in chunks)


def test_default_sizes_split_long_document():
    text = " ".join(["word"] * 2000)

    chunks = WordChunker().split(text, 1000, 200)

    assert len(chunks) == 3
    assert [len(c.split()) for c in chunks] == [1000, 1000, 400]


def test_character_windows():
    assert CharacterChunker().split("abcdefghij", 4, 2) == ["abcd", "cdef", "efgh", "ghij"]


@pytest.mark.parametrize("size,overlap", [(0, 0), (-5, 0), (10, 10), (10, 12), (10, -1)])
def test_invalid_window_configuration(size, overlap):
    with pytest.raises(ValueError):
        WordChunker().split("some text here", size, overlap)
