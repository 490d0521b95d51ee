"""Hashing utilities for deterministic package digests.

Every digest in a manifest, and the aggregate package hash built from them,
goes through this module so that all of them share one algorithm and one
encoding (lowercase hex SHA-256).
"""

from pathlib import Path
from typing import BinaryIO, Optional, Union
import hashlib
import zipfile
import zlib

from .constants import CHUNK_SIZE, HASH_ALGORITHM
from .errors import StreamReadError


# Errors a file or zip entry stream can raise mid-read
STREAM_ERRORS = (OSError, EOFError, ValueError, zlib.error, zipfile.BadZipFile)


def new_hasher():
    """Return a fresh hash object for HASH_ALGORITHM."""
    return hashlib.new(HASH_ALGORITHM)


def digest_stream(
    stream: BinaryIO,
    chunk_size: int = CHUNK_SIZE,
    name: Optional[str] = None,
) -> str:
    """Consume a binary stream to EOF and return its hex digest.

    Each call owns its hasher; nothing read from the stream is kept beyond
    the hash state.

    Args:
        stream: Readable binary file-like object
        chunk_size: Bytes requested per read
        name: Label used in error messages (defaults to the stream's name)

    Returns:
        64-character lowercase hex SHA-256 digest

    Raises:
        ValueError: If chunk_size is less than 1
        StreamReadError: If the stream fails before EOF
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be at least 1, got {chunk_size}")
    hasher = new_hasher()
    try:
        for chunk in iter(lambda: stream.read(chunk_size), b""):
            hasher.update(chunk)
    except STREAM_ERRORS as e:
        raise StreamReadError(name or getattr(stream, "name", "<stream>"), e) from e
    return hasher.hexdigest()


def hash_file(path: Union[str, Path], chunk_size: int = CHUNK_SIZE) -> str:
    """Compute the hex digest of a file's contents.

    Args:
        path: Path to file to hash
        chunk_size: Bytes requested per read

    Returns:
        64-character lowercase hex SHA-256 digest

    Raises:
        StreamReadError: If the file cannot be opened or read
    """
    path = Path(path)
    try:
        f = path.open("rb")
    except OSError as e:
        raise StreamReadError(path, e) from e
    with f:
        return digest_stream(f, chunk_size, name=str(path))


def digest_text(text: str) -> str:
    """Digest UTF-8 encoded text."""
    hasher = new_hasher()
    hasher.update(text.encode("utf-8"))
    return hasher.hexdigest()


__all__ = [
    "STREAM_ERRORS",
    "digest_stream",
    "digest_text",
    "hash_file",
    "new_hasher",
]
