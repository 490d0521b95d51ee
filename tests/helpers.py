"""Test helpers: known digests, zip modes and fake stream/reader doubles."""

import io
from typing import Optional

from bundle_hash.errors import ArchiveProtocolError
from bundle_hash.readers.base import ArchiveEntry


# Known SHA-256 digests
HELLO_SHA256 = "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
WORLD_SHA256 = "486ea46224d1bb4fb680f34f7c9ad96a8f24ec88be73ea8e5a6c65260e9cb8a7"
EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

# Unix modes as stored by Info-ZIP in the upper 16 bits of external_attr
REGULAR_ATTR = 0o100644 << 16
SYMLINK_ATTR = 0o120777 << 16
DIR_ATTR = (0o040755 << 16) | 0x10


class FailingStream(io.BytesIO):
    """Stream that fails on the first read."""

    def read(self, size=-1):
        raise OSError("simulated read failure")


class GatedStream(io.BytesIO):
    """Stream whose first read waits for a gate to open (or times out)."""

    def __init__(self, data: bytes, gate):
        super().__init__(data)
        self.gate = gate
        self.gate_was_open = None

    def read(self, size=-1):
        if self.gate_was_open is None:
            self.gate_was_open = self.gate.wait(timeout=5)
        return super().read(size)


class FakeArchiveReader:
    """In-memory ArchiveReader recording the calls made to it."""

    def __init__(self, entries, fail_on_entry: Optional[int] = None):
        self.entries = list(entries)
        self.fail_on_entry = fail_on_entry
        self.pos = 0
        self.closed = False
        self.calls = []
        self.streams = []
        self.peak_open = 0

    def read_entry(self):
        self.calls.append("read_entry")
        if self.fail_on_entry is not None and self.pos == self.fail_on_entry:
            raise ArchiveProtocolError("fake.zip", ValueError("truncated archive"))
        if self.pos >= len(self.entries):
            return None
        name = self.entries[self.pos][0]
        entry = ArchiveEntry(name=name, external_attr=REGULAR_ATTR, index=self.pos)
        self.pos += 1
        return entry

    def open_read_stream(self, entry):
        self.calls.append(f"open:{entry.name}")
        content = self.entries[entry.index][1]
        stream = io.BytesIO(content) if isinstance(content, bytes) else content
        self.streams.append(stream)
        self.peak_open = max(self.peak_open, sum(not s.closed for s in self.streams))
        return stream

    def close(self):
        self.closed = True
