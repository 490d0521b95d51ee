"""Base protocol for archive readers."""

from dataclasses import dataclass
from typing import BinaryIO, Optional, Protocol

from ..ignore import is_directory_mode, is_regular_mode, mode_type


@dataclass(frozen=True)
class ArchiveEntry:
    """One entry descriptor from an archive's entry sequence."""

    name: str  # archive-relative, forward slashes
    external_attr: int = 0
    index: int = 0  # position in archive order

    @property
    def mode_type(self) -> int:
        return mode_type(self.external_attr)

    @property
    def is_directory(self) -> bool:
        return is_directory_mode(self.external_attr, self.name)

    @property
    def is_regular_file(self) -> bool:
        return is_regular_mode(self.external_attr, self.name)


class ArchiveReader(Protocol):
    """
    Protocol for lazy, sequential archive readers.

    Entries are handed out one at a time; the caller asks for the next one
    only after it has opened or skipped the current one. Streams opened for
    earlier entries may still be read while later entries are requested.
    """

    def read_entry(self) -> Optional[ArchiveEntry]:
        """
        Return the next entry descriptor.

        Returns:
            The next entry, or None once the sequence is exhausted

        Raises:
            ArchiveProtocolError: If the archive itself is unreadable
        """
        ...

    def open_read_stream(self, entry: ArchiveEntry) -> BinaryIO:
        """
        Open a byte stream over an entry's content.

        Raises:
            ArchiveProtocolError: If the entry cannot be opened
        """
        ...

    def close(self) -> None:
        """Release the archive handle."""
        ...
