"""Stable API for bundle-hash.

This module is the small surface other tools (release and deploy scripts)
should import. It hides the builder and reader classes so they can change
without breaking callers.

Example:
    >>> from bundle_hash.api import build_manifest, compute_package_hash
    >>> manifest = build_manifest("dist/release.zip")
    >>> manifest.save("dist/release.manifest.json")
    >>> compute_package_hash("build/www") == manifest.compute_aggregate_digest()
"""

from pathlib import Path
from typing import Optional, Union

from .builder import build_manifest
from .config import HashConfig
from .hashing import hash_file


def compute_package_hash(path: Union[str, Path], config: Optional[HashConfig] = None) -> str:
    """Return the aggregate package hash of a zip archive or directory.

    The same files yield the same hash whether they are zipped or extracted.

    Args:
        path: Zip archive or directory
        config: Optional build configuration

    Returns:
        64-character lowercase hex digest

    Raises:
        InvalidInputError: If path is neither a zip archive nor a directory
        StreamReadError, ArchiveProtocolError, TraversalError: On read failures
    """
    return build_manifest(path, config).compute_aggregate_digest()


__all__ = ["build_manifest", "compute_package_hash", "hash_file"]
