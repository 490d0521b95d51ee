"""Shared test fixtures."""

import zipfile
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple, Union

import pytest

from helpers import DIR_ATTR, REGULAR_ATTR


@pytest.fixture
def sample_files() -> Dict[str, bytes]:
    """A small package used across build tests."""
    return {
        "index.html": b"<html>hello</html>",
        "js/app.js": b"console.log('hi');\n",
        "assets/img/logo.png": bytes(range(256)) * 8,
        "assets/empty.txt": b"",
    }


@pytest.fixture
def make_tree(tmp_path):
    """Factory fixture to write a {relpath: bytes} mapping as a directory tree."""
    def _make(files: Dict[str, bytes], name: str = "tree") -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        for relpath, content in files.items():
            file_path = root / relpath
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(content)
        return root
    return _make


@pytest.fixture
def make_zip(tmp_path):
    """Factory fixture to write a zip archive.

    Entries are (name, content) or (name, content, external_attr) tuples, or
    a {name: content} mapping. Without an explicit attr, entries get a
    regular-file Unix mode (names ending in "/" get a directory mode).
    Pass attr=0 to store no Unix mode at all.
    """
    def _make(
        entries: Union[Dict[str, bytes], Iterable[Tuple]],
        name: str = "package.zip",
        compression: int = zipfile.ZIP_DEFLATED,
    ) -> Path:
        if isinstance(entries, dict):
            entries = list(entries.items())
        zip_path = tmp_path / name
        with zipfile.ZipFile(zip_path, "w", compression=compression) as zf:
            for item in entries:
                entry_name, content = item[0], item[1]
                attr: Optional[int] = item[2] if len(item) > 2 else None
                info = zipfile.ZipInfo(entry_name, date_time=(2024, 1, 1, 0, 0, 0))
                info.compress_type = compression
                if attr is None:
                    attr = DIR_ATTR if entry_name.endswith("/") else REGULAR_ATTR
                info.external_attr = attr
                zf.writestr(info, content)
        return zip_path
    return _make
