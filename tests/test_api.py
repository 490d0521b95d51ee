"""Tests for the stable API surface."""

import pytest

from bundle_hash.api import build_manifest, compute_package_hash, hash_file
from bundle_hash.errors import InvalidInputError

from helpers import HELLO_SHA256


class TestApi:
    """Test the public entry points."""

    def test_package_hash_same_for_zip_and_directory(self, make_tree, make_zip, sample_files):
        assert compute_package_hash(make_tree(sample_files)) == compute_package_hash(make_zip(sample_files))

    def test_package_hash_matches_manifest(self, make_tree, sample_files):
        root = make_tree(sample_files)
        assert compute_package_hash(root) == build_manifest(root).compute_aggregate_digest()

    def test_hash_file(self, tmp_path):
        f = tmp_path / "a.txt"
        f.write_bytes(b"hello")
        assert hash_file(f) == HELLO_SHA256

    def test_plain_file_is_invalid(self, tmp_path):
        f = tmp_path / "notes.txt"
        f.write_text("notes")
        with pytest.raises(InvalidInputError):
            compute_package_hash(f)
