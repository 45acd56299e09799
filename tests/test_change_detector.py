"""Tests for FileChangeDetector."""

import hashlib
import os

import pytest

from ragstore.detection import FileChangeDetector
from ragstore.models import FileMetadata
from ragstore.protocols import ChangeDetector


@pytest.fixture
def detector():
    return FileChangeDetector()


@pytest.fixture
def sample(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("first version\n")
    return path


def stored_state(path):
    return hashlib.md5(path.read_bytes()).hexdigest(), os.stat(path).st_mtime


def test_detector_satisfies_protocol(detector):
    assert isinstance(detector, ChangeDetector)


def test_compute_hash_matches_hashlib(detector, sample):
    assert detector.compute_hash(sample) == hashlib.md5(sample.read_bytes()).hexdigest()


def test_compute_hash_other_algorithm(sample):
    detector = FileChangeDetector(algorithm="sha256")
    assert detector.compute_hash(sample) == hashlib.sha256(sample.read_bytes()).hexdigest()


def test_unknown_algorithm_rejected():
    with pytest.raises(ValueError):
        FileChangeDetector(algorithm="not-a-hash")


def test_hash_text_matches_utf8_digest(detector):
    assert detector.hash_text("héllo") == hashlib.md5("héllo".encode("utf-8")).hexdigest()


def test_compute_hash_missing_file_raises(detector, tmp_path):
    with pytest.raises(OSError):
        detector.compute_hash(tmp_path / "missing.txt")


def test_no_stored_state_is_changed(detector, sample):
    assert detector.has_changed(sample) is True


def test_unchanged_file(detector, sample):
    file_hash, mtime = stored_state(sample)
    assert detector.has_changed(sample, file_hash, mtime) is False


def test_stored_hash_is_compared_case_insensitively(detector, sample):
    file_hash, mtime = stored_state(sample)
    assert detector.has_changed(sample, file_hash.upper(), mtime) is False


def test_modified_time_change_is_changed(detector, sample):
    file_hash, mtime = stored_state(sample)
    os.utime(sample, (mtime + 10, mtime + 10))
    assert detector.has_changed(sample, file_hash, mtime) is True


def test_content_change_with_same_mtime_is_changed(detector, sample):
    file_hash, mtime = stored_state(sample)
    sample.write_text("second, longer version\n")
    os.utime(sample, (mtime, mtime))
    assert detector.has_changed(sample, file_hash, mtime) is True


def test_hash_only_comparison(detector, sample):
    file_hash, _ = stored_state(sample)
    assert detector.has_changed(sample, file_hash) is False
    assert detector.has_changed(sample, "0" * 32) is True


def test_mtime_without_hash_is_changed(detector, sample):
    _, mtime = stored_state(sample)
    assert detector.has_changed(sample, None, mtime) is True


def test_missing_file_is_changed(detector, tmp_path):
    assert detector.has_changed(tmp_path / "gone.txt", "abc", 1.0) is True


def test_cache_avoids_rehashing(detector, sample, monkeypatch):
    file_hash, mtime = stored_state(sample)
    assert detector.has_changed(sample, file_hash, None) is False
    assert detector.cache_stats() == (1, sample.stat().st_size)

    def fail(_path):
        raise AssertionError("file should not be hashed again")

    monkeypatch.setattr(detector, "compute_hash", fail)
    assert detector.has_changed(sample, file_hash, mtime) is False


def test_clear_cache(detector, sample):
    file_hash, _ = stored_state(sample)
    detector.has_changed(sample, file_hash)
    detector.clear_cache()
    assert detector.cache_stats() == (0, 0)


def test_get_file_metadata(detector, sample):
    meta = detector.get_file_metadata(sample)
    assert meta.size == sample.stat().st_size
    assert meta.last_modified == sample.stat().st_mtime
    assert meta.hash == ""


def test_batch_check(detector, tmp_path):
    same = tmp_path / "same.txt"
    edited = tmp_path / "edited.txt"
    fresh = tmp_path / "fresh.txt"
    for path in (same, edited, fresh):
        path.write_text(f"contents of {path.name}")

    same_hash, same_mtime = stored_state(same)
    stored = {
        str(same): FileMetadata(str(same), same_hash, same.stat().st_size, same_mtime),
        str(edited): FileMetadata(str(edited), "0" * 32, edited.stat().st_size),
    }

    results = detector.batch_check([str(same), str(edited), str(fresh), str(same)], stored)

    assert results == {str(same): False, str(edited): True, str(fresh): True}


def test_batch_check_empty(detector):
    assert detector.batch_check([]) == {}


def test_batch_check_propagates_read_errors(detector, sample, monkeypatch):
    file_hash, _ = stored_state(sample)

    def unreadable(_path):
        raise PermissionError("denied")

    monkeypatch.setattr(detector, "compute_hash", unreadable)
    stored = {str(sample): FileMetadata(str(sample), file_hash, 1)}
    with pytest.raises(OSError):
        detector.batch_check([str(sample)], stored)
