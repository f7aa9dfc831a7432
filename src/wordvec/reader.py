"""
Binary Vector Reader - Parse word2vec binary vector files.

Implements:
- Header parsing ("<vocabulary_size> <vector_size>\\n")
- Lazy, forward-only iteration over (word, vector) records
- Lenient handling of truncated streams (iteration stops, flag is set)

The reader only needs ``read(n)`` from the underlying stream. It keeps its
own buffer so it can split on newline and space delimiters without relying
on the stream's line handling.
"""

import logging
from typing import BinaryIO, Iterator, Optional, Tuple

import numpy as np

from .core.exceptions import VectorFormatError
from .core.types import VectorHeader


logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024

# Little-endian IEEE-754 single precision
FLOAT_DTYPE = np.dtype("<f4")

WORD_DELIMITER = b" "
LINE_DELIMITER = b"\n"


def parse_header(line: bytes) -> VectorHeader:
    """
    Parse the header line of a binary vector file.

    Tokens that are not plain decimal integers are skipped; exactly two
    integers must remain, in the order (vocabulary_size, vector_size).

    Args:
        line: Raw header bytes, with or without the trailing newline

    Returns:
        Parsed VectorHeader

    Raises:
        VectorFormatError: If the line is not UTF-8 or does not yield two integers
    """
    try:
        text = line.decode("utf-8")
    except UnicodeDecodeError as e:
        raise VectorFormatError(f"Header is not valid UTF-8: {e}") from e

    numbers = [int(token) for token in text.split() if token.isascii() and token.isdigit()]
    if len(numbers) != 2:
        raise VectorFormatError(
            f"Header must contain exactly two integers, found {len(numbers)}: {text.strip()!r}",
            header_line=text,
        )

    return VectorHeader(vocabulary_size=numbers[0], vector_size=numbers[1])


class WordVectorReader:
    """
    One-pass reader over a binary vector stream.

    The header is read on construction. Iterating yields ``(word, vector)``
    pairs, where ``vector`` is a writable float32 array that has not been
    normalized. Iteration stops after ``vocabulary_size`` records or at the
    first record that cannot be read completely; in the latter case
    ``ended_early`` is True and ``end_reason`` describes what failed.

    Example:
        >>> with open("vectors.bin", "rb") as f:
        ...     reader = WordVectorReader(f)
        ...     for word, vector in reader:
        ...         ...
    """

    def __init__(self, stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Initialize the reader and parse the header.

        Args:
            stream: Binary file-like object supporting read(n)
            chunk_size: Bytes requested from the stream per read

        Raises:
            VectorFormatError: If the header is missing or malformed
            OSError: If the underlying stream fails
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")

        self._stream = stream
        self._chunk_size = chunk_size
        self._buffer = bytearray()
        self._pos = 0
        self._eof = False

        self._vectors_read = 0
        self._ended_early = False
        self._end_reason: Optional[str] = None
        self._finished = False

        self._header = self._read_header()
        logger.debug(
            f"Vector header: {self._header.vocabulary_size} entries, "
            f"{self._header.vector_size} dimensions"
        )

    @property
    def header(self) -> VectorHeader:
        return self._header

    @property
    def vocabulary_size(self) -> int:
        return self._header.vocabulary_size

    @property
    def vector_size(self) -> int:
        return self._header.vector_size

    @property
    def vectors_read(self) -> int:
        return self._vectors_read

    @property
    def ended_early(self) -> bool:
        return self._ended_early

    @property
    def end_reason(self) -> Optional[str]:
        return self._end_reason

    def __iter__(self) -> Iterator[Tuple[str, np.ndarray]]:
        return self

    def __next__(self) -> Tuple[str, np.ndarray]:
        if self._finished or self._vectors_read >= self._header.vocabulary_size:
            self._finished = True
            raise StopIteration

        word_bytes, found = self._read_until(WORD_DELIMITER)
        if not found:
            self._stop_early("stream ended inside a word")

        try:
            # Some writers put a newline before each word, others don't
            word = word_bytes.decode("utf-8").strip()
        except UnicodeDecodeError:
            self._stop_early(f"word at entry {self._vectors_read} is not valid UTF-8")

        record_bytes = self._header.record_bytes
        raw = self._read_exact(record_bytes)
        if len(raw) < record_bytes:
            self._stop_early(
                f"vector for {word!r} truncated ({len(raw)} of {record_bytes} bytes)"
            )

        vector = np.frombuffer(raw, dtype=FLOAT_DTYPE).astype(np.float32)
        self._vectors_read += 1
        return word, vector

    def _stop_early(self, reason: str) -> None:
        """Mark the stream as ended early and stop iteration."""
        self._ended_early = True
        self._end_reason = reason
        self._finished = True
        logger.debug(f"Vector stream ended early after {self._vectors_read} entries: {reason}")
        raise StopIteration

    def _read_header(self) -> VectorHeader:
        line, found = self._read_until(LINE_DELIMITER)
        if not line:
            raise VectorFormatError("Vector stream is empty")
        if not found:
            logger.debug("Header line has no trailing newline")
        return parse_header(line)

    def _fill(self) -> bool:
        """Pull one more chunk from the stream. Returns False at EOF."""
        if self._eof:
            return False

        try:
            chunk = self._stream.read(self._chunk_size)
        except EOFError as e:
            # Compressed streams raise here when their trailer is missing
            logger.debug(f"Compressed stream ended without its end marker: {e}")
            chunk = b""
        if not chunk:
            self._eof = True
            return False

        if self._pos:
            del self._buffer[:self._pos]
            self._pos = 0
        self._buffer += chunk
        return True

    def _read_until(self, delimiter: bytes) -> Tuple[bytes, bool]:
        """
        Read bytes up to and including ``delimiter``.

        Returns:
            (data, found). At EOF without the delimiter, data holds the
            remaining bytes and found is False.
        """
        scanned = 0
        while True:
            index = self._buffer.find(delimiter, self._pos + scanned)
            if index >= 0:
                data = bytes(self._buffer[self._pos:index + 1])
                self._pos = index + 1
                return data, True

            scanned = len(self._buffer) - self._pos
            if not self._fill():
                data = bytes(self._buffer[self._pos:])
                self._pos = len(self._buffer)
                return data, False

    def _read_exact(self, size: int) -> bytes:
        """Read ``size`` bytes, or whatever remains if the stream ends first."""
        while len(self._buffer) - self._pos < size:
            if not self._fill():
                break

        end = min(self._pos + size, len(self._buffer))
        data = bytes(self._buffer[self._pos:end])
        self._pos = end
        return data
