"""
Shared test fixtures and configuration for pytest.
"""

import io
import logging
import struct
import sys
from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple

import pytest

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# ============================================================================
# Binary vector file helpers
# ============================================================================

def build_vector_blob(
    entries: Iterable[Tuple[str, Sequence[float]]],
    vector_size: Optional[int] = None,
    vocabulary_size: Optional[int] = None,
    header: Optional[bytes] = None,
    newline_before_word: bool = False,
) -> bytes:
    """
    Build a word2vec binary blob from (word, vector) pairs.

    Args:
        entries: Words and their raw vectors
        vector_size: Header dimension (default: length of the first vector)
        vocabulary_size: Header count (default: number of entries)
        header: Raw header bytes, overriding the two values above
        newline_before_word: Prefix each word with a newline, as some writers do
    """
    entries = list(entries)
    if header is None:
        if vector_size is None:
            vector_size = len(entries[0][1]) if entries else 0
        if vocabulary_size is None:
            vocabulary_size = len(entries)
        header = f"{vocabulary_size} {vector_size}\n".encode("utf-8")

    body = bytearray(header)
    for word, vector in entries:
        if newline_before_word:
            body += b"\n"
        body += word.encode("utf-8") + b" "
        body += struct.pack(f"<{len(vector)}f", *vector)
    return bytes(body)


class OneByteStream(io.RawIOBase):
    """Stream that returns at most one byte per read call."""

    def __init__(self, data: bytes):
        self._data = io.BytesIO(data)

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        return self._data.read(1 if size != 0 else 0)


class FailingStream(io.RawIOBase):
    """Stream that serves ``data`` and then raises OSError."""

    def __init__(self, data: bytes):
        self._data = io.BytesIO(data)

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        chunk = self._data.read(size)
        if not chunk:
            raise OSError("simulated disk failure")
        return chunk


# ============================================================================
# Pytest hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def reset_package_logger():
    """Remove handlers the CLI attaches so captured streams are not reused."""
    yield
    package_logger = logging.getLogger("wordvec")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def animal_entries():
    """Small vocabulary with an obvious nearest neighbor structure."""
    return [
        ("cat", [3.0, 4.0, 0.0]),
        ("kitten", [3.0, 3.9, 0.2]),
        ("dog", [0.0, 5.0, 1.0]),
        ("car", [0.0, 0.0, 7.0]),
    ]


@pytest.fixture
def royalty_entries():
    """Vocabulary where king - man + woman lands nearest to queen."""
    return [
        ("king", [1.0, 1.0, 0.0, 0.1]),
        ("queen", [1.0, -1.0, 0.0, 0.1]),
        ("man", [0.0, 1.0, 0.0, 0.0]),
        ("woman", [0.0, -1.0, 0.0, 0.0]),
        ("prince", [0.9, 0.8, 0.3, 0.0]),
        ("apple", [0.0, 0.0, 1.0, 1.0]),
    ]


@pytest.fixture
def animal_blob(animal_entries) -> bytes:
    return build_vector_blob(animal_entries)


@pytest.fixture
def vector_file(tmp_path, animal_blob) -> Path:
    """Binary vector file on disk with the animal vocabulary."""
    path = tmp_path / "vectors.bin"
    path.write_bytes(animal_blob)
    return path


@pytest.fixture
def build_blob():
    """Factory fixture exposing build_vector_blob to tests."""
    return build_vector_blob


@pytest.fixture
def one_byte_stream():
    """Factory for streams that return one byte per read."""
    return OneByteStream


@pytest.fixture
def failing_stream():
    """Factory for streams that raise OSError once their data runs out."""
    return FailingStream
