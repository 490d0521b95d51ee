"""Filesystem reader: directory checks, file streams and recursive walks."""

import os
from pathlib import Path
from typing import BinaryIO, Iterator, Tuple, Union

from ..errors import TraversalError


def is_directory(path: Union[str, Path]) -> bool:
    """Check whether path refers to an existing directory."""
    return Path(path).is_dir()


def open_file(path: Union[str, Path]) -> BinaryIO:
    """Open a file as a binary read stream."""
    return Path(path).open("rb")


def walk_files(root: Union[str, Path]) -> Iterator[Tuple[str, Path]]:
    """Yield every file below root.

    Directories are not yielded. Symlinked directories are not followed;
    symlinked files are yielded and read through the link.

    Args:
        root: Directory to walk

    Yields:
        (relative POSIX path, absolute path) tuples

    Raises:
        TraversalError: If any directory cannot be listed
    """
    root = Path(root)

    def _raise(err: OSError):
        raise TraversalError(err.filename or root, err) from err

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        # Sort in place for a stable walk order
        dirnames.sort()
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            yield path.relative_to(root).as_posix(), path
