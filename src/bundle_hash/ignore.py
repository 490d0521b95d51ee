"""Metadata filtering for archive entries and directory files.

Both build modes ask the same question of every entry: is this package
content, or platform noise (macOS resource-fork folders, Finder metadata)?
The answer depends only on the entry's path, whether it is a regular file,
and the IgnoreRules passed in.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

from pathspec import PathSpec

from .constants import DS_STORE, MACOSX_DIR, S_IFDIR, S_IFMT, S_IFREG


@dataclass(frozen=True)
class IgnoreRules:
    """Names and patterns that mark an entry as non-content.

    Attributes:
        metadata_dirs: Top-level directory names ignored with everything below them
        metadata_files: File names ignored at any depth (regular files only)
        patterns: Extra gitignore-style patterns matched against the relative path
    """

    metadata_dirs: Tuple[str, ...] = (MACOSX_DIR,)
    metadata_files: Tuple[str, ...] = (DS_STORE,)
    patterns: Tuple[str, ...] = ()
    _spec: Optional[PathSpec] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        # Compile patterns once; frozen dataclass needs object.__setattr__
        if self.patterns:
            object.__setattr__(
                self, "_spec", PathSpec.from_lines("gitwildmatch", self.patterns)
            )

    @classmethod
    def create(
        cls,
        metadata_dirs: Iterable[str] = (MACOSX_DIR,),
        metadata_files: Iterable[str] = (DS_STORE,),
        patterns: Iterable[str] = (),
    ) -> "IgnoreRules":
        """Build rules from any iterables (lists from YAML config, etc.)."""
        return cls(
            metadata_dirs=tuple(metadata_dirs),
            metadata_files=tuple(metadata_files),
            patterns=tuple(p for p in patterns if p and not p.startswith("#")),
        )

    def matches_pattern(self, relpath: str) -> bool:
        """Check a relative POSIX path against the extra patterns."""
        return self._spec is not None and self._spec.match_file(relpath)


DEFAULT_RULES = IgnoreRules()


def is_ignored(path: str, is_regular_file: bool, rules: IgnoreRules = DEFAULT_RULES) -> bool:
    """Decide whether an entry is platform metadata rather than content.

    Rules, in order:
        1. First path segment is a metadata directory -> ignored, any type.
        2. Regular file whose last segment is a metadata file name -> ignored.
        3. Path matches one of the extra patterns -> ignored.

    Args:
        path: Archive- or root-relative path with forward slashes
        is_regular_file: Whether the entry is a regular file
        rules: Names and patterns to apply

    Returns:
        True if the entry must not be digested
    """
    segments = path.split("/")
    if segments[0] in rules.metadata_dirs:
        return True
    if is_regular_file and segments[-1] in rules.metadata_files:
        return True
    return rules.matches_pattern(path)


def mode_type(external_attr: int) -> int:
    """Extract the Unix file-type bits from zip external attributes.

    Returns 0 when the archiver stored no Unix mode (e.g. FAT/NTFS origin).
    """
    return (external_attr >> 16) & S_IFMT


def is_regular_mode(external_attr: int, name: str = "") -> bool:
    """Whether zip external attributes describe a regular file.

    Entries with no usable mode count as "not a directory" unless the name
    itself says so (trailing slash), so they are treated as regular files.
    """
    ftype = mode_type(external_attr)
    if ftype:
        return ftype == S_IFREG
    return not name.endswith("/")


def is_directory_mode(external_attr: int, name: str = "") -> bool:
    """Whether a zip entry is a directory, by trailing slash or mode bits."""
    return name.endswith("/") or mode_type(external_attr) == S_IFDIR
