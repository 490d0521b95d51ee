"""Package manifest: the path -> digest mapping of a package's content.

The manifest is built once by bundle_hash.builder and never mutated
afterwards. Its aggregate digest (the "package hash") identifies the whole
package independent of file order or archive format.
"""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .hashing import digest_text

logger = logging.getLogger(__name__)


def _canonical_json(value) -> str:
    """Compact JSON with non-ASCII kept as-is (same bytes as JSON.stringify)."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _utf16_key(text: str) -> bytes:
    # Big-endian bytes compare like the 16-bit code units they encode
    return text.encode("utf-16-be", "surrogatepass")


class PackageManifest(BaseModel):
    """Mapping of content-bearing relative paths to their digests.

    All paths are POSIX strings (forward slashes). All digests are 64-char
    lowercase hex SHA-256 values.
    """

    model_config = ConfigDict(frozen=True)

    files: Mapping[str, str] = Field(default_factory=dict, validate_default=True)

    @field_validator("files", mode="after")
    @classmethod
    def _freeze_files(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, str]] = None) -> "PackageManifest":
        """Create a manifest owning a copy of the given mapping."""
        return cls(files=dict(mapping or {}))

    def digests_by_path(self) -> Mapping[str, str]:
        """Read-only view of the path -> digest mapping."""
        return self.files

    def __len__(self) -> int:
        return len(self.files)

    def __contains__(self, path: object) -> bool:
        return path in self.files

    def compute_aggregate_digest(self) -> str:
        """Compute the package hash from all path/digest pairs.

        The entries are rendered as "path:digest", sorted by UTF-16 code unit
        (the order JavaScript's default sort uses, so other clients can
        reproduce the value), serialized as a compact JSON array and digested.

        Returns:
            64-character lowercase hex SHA-256 digest
        """
        entries = sorted(
            (f"{path}:{digest}" for path, digest in self.files.items()),
            key=_utf16_key,
        )
        return digest_text(_canonical_json(entries))

    def serialize(self) -> str:
        """Encode as a flat JSON object of path -> digest."""
        return _canonical_json(dict(sorted(self.files.items())))

    @classmethod
    def deserialize(cls, text: Optional[str]) -> "PackageManifest":
        """Parse serialized manifest text.

        Parsing is tolerant: empty text, invalid JSON, a non-object document
        or non-string values all produce an empty manifest, since a missing
        prior manifest (first build) is a normal state for callers.
        """
        try:
            data = json.loads(text)
        except (TypeError, ValueError, RecursionError):
            logger.debug("Manifest text is not JSON, treating as empty")
            return cls()

        if not isinstance(data, dict):
            logger.debug("Manifest JSON is a %s, not an object, treating as empty", type(data).__name__)
            return cls()

        try:
            return cls.model_validate({"files": data})
        except ValidationError:
            logger.debug("Manifest JSON has non-string entries, treating as empty")
            return cls()

    def save(self, path: Union[str, Path]) -> None:
        """Write the serialized manifest to a file."""
        path = Path(path)
        path.write_text(self.serialize(), encoding="utf-8")
        logger.info("Wrote manifest with %d entries to %s", len(self.files), path)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "PackageManifest":
        """Load a manifest file; a missing file yields an empty manifest.

        Bytes that are not UTF-8 text are treated like any other malformed
        manifest.

        Raises:
            OSError: If the path exists but cannot be read (e.g. a directory)
        """
        path = Path(path)
        if not path.exists():
            return cls()
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            logger.debug("Manifest file %s is not UTF-8 text, treating as empty", path)
            return cls()
        return cls.deserialize(text)
