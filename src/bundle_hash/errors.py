"""Custom exceptions for bundle-hash.

Every failure of a manifest build derives from BundleHashError. Archive
input that is not a zip container is not an error at all; it is reported
through the NotAnArchive outcome in bundle_hash.builder.
"""

from pathlib import Path
from typing import Union


class BundleHashError(RuntimeError):
    """Base class for all bundle-hash errors."""
    pass


class InvalidInputError(BundleHashError):
    """Directory mode was requested for a path that is not a directory."""

    def __init__(self, path: Union[str, Path]):
        self.path = str(path)
        super().__init__(
            f"Not a directory: {self.path}. "
            f"Pass a directory, or hash a single file with hash_file()."
        )


class TraversalError(BundleHashError):
    """Walking a directory tree failed."""

    def __init__(self, path: Union[str, Path], cause: BaseException):
        self.path = str(path)
        self.cause = cause
        super().__init__(f"Failed to list {self.path}: {cause}")


# Read Errors
class StreamReadError(BundleHashError):
    """A file or archive entry stream failed before reaching EOF."""

    def __init__(self, path: Union[str, Path], cause: BaseException):
        self.path = str(path)
        self.cause = cause
        super().__init__(f"Failed to read {self.path}: {cause}")


class ArchiveProtocolError(BundleHashError):
    """The archive reader failed outside of an entry read (corrupt or unsupported entry)."""

    def __init__(self, path: Union[str, Path], cause: BaseException):
        self.path = str(path)
        self.cause = cause
        super().__init__(f"Archive error at {self.path}: {cause}")
