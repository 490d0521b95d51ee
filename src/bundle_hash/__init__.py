"""Content-addressed manifests for packages given as directories or zip archives."""

from .builder import (
    ManifestBuilder,
    NotAnArchive,
    build_from_archive,
    build_from_directory,
    build_manifest,
)
from .config import HashConfig, load_hash_config
from .constants import BUNDLE_HASH_VERSION
from .errors import (
    ArchiveProtocolError,
    BundleHashError,
    InvalidInputError,
    StreamReadError,
    TraversalError,
)
from .hashing import digest_stream, hash_file
from .ignore import IgnoreRules, is_ignored
from .manifest import PackageManifest

__version__ = BUNDLE_HASH_VERSION

__all__ = [
    "ArchiveProtocolError",
    "BundleHashError",
    "HashConfig",
    "IgnoreRules",
    "InvalidInputError",
    "ManifestBuilder",
    "NotAnArchive",
    "PackageManifest",
    "StreamReadError",
    "TraversalError",
    "build_from_archive",
    "build_from_directory",
    "build_manifest",
    "digest_stream",
    "hash_file",
    "is_ignored",
    "load_hash_config",
]
