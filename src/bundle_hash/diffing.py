"""Diff computation between two package manifests."""

from typing import Dict, List

from pydantic import BaseModel, Field

from .manifest import PackageManifest


class ManifestDiff(BaseModel):
    """Per-path comparison of an old and a new manifest."""

    added: List[str] = Field(default_factory=list)
    removed: List[str] = Field(default_factory=list)
    modified: List[str] = Field(default_factory=list)
    unchanged: List[str] = Field(default_factory=list)
    old_digest: str
    new_digest: str

    @property
    def has_changes(self) -> bool:
        """Whether the package content identity changed."""
        return self.old_digest != self.new_digest

    @property
    def counts(self) -> Dict[str, int]:
        return {
            "added": len(self.added),
            "removed": len(self.removed),
            "modified": len(self.modified),
            "unchanged": len(self.unchanged),
        }

    @property
    def summary(self) -> str:
        if not self.has_changes:
            return "No changes"
        parts = [f"{n} {kind}" for kind, n in self.counts.items() if n and kind != "unchanged"]
        return ", ".join(parts)


def diff_manifests(old: PackageManifest, new: PackageManifest) -> ManifestDiff:
    """
    Compare two manifests path by path.

    Args:
        old: Previously recorded manifest (may be empty, e.g. first build).
        new: Manifest of the current contents.

    Returns:
        ManifestDiff with sorted path lists and both aggregate digests.
    """
    old_files = old.digests_by_path()
    new_files = new.digests_by_path()

    added, removed, modified, unchanged = [], [], [], []
    for path in sorted(set(old_files) | set(new_files)):
        old_digest = old_files.get(path)
        new_digest = new_files.get(path)
        if old_digest is None:
            added.append(path)
        elif new_digest is None:
            removed.append(path)
        elif old_digest != new_digest:
            modified.append(path)
        else:
            unchanged.append(path)

    return ManifestDiff(
        added=added,
        removed=removed,
        modified=modified,
        unchanged=unchanged,
        old_digest=old.compute_aggregate_digest(),
        new_digest=new.compute_aggregate_digest(),
    )
