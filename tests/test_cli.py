"""Integration tests for CLI commands."""

import json

import pytest
from typer.testing import CliRunner

from bundle_hash.cli import app
from bundle_hash.manifest import PackageManifest

from helpers import HELLO_SHA256, WORLD_SHA256


@pytest.fixture
def runner():
    """Create a CliRunner for in-process testing."""
    return CliRunner()


@pytest.fixture
def package_dir(make_tree):
    return make_tree({"a.txt": b"hello", "b/c.txt": b"world"})


class TestManifestCommand:
    """Test `bundle-hash manifest`."""

    def test_prints_manifest(self, runner, package_dir):
        result = runner.invoke(app, ["manifest", str(package_dir)])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"a.txt": HELLO_SHA256, "b/c.txt": WORLD_SHA256}

    def test_writes_output_file(self, runner, make_zip, tmp_path):
        zip_path = make_zip({"a.txt": b"hello", "b/c.txt": b"world"})
        out = tmp_path / "release.manifest.json"

        result = runner.invoke(app, ["manifest", str(zip_path), "-o", str(out)])

        assert result.exit_code == 0, result.output
        saved = PackageManifest.load(out)
        assert dict(saved.digests_by_path()) == {"a.txt": HELLO_SHA256, "b/c.txt": WORLD_SHA256}
        assert "Wrote 2 entries" in result.output

    def test_invalid_path(self, runner, tmp_path):
        result = runner.invoke(app, ["manifest", str(tmp_path / "missing")])
        assert result.exit_code == 1
        assert "Not a directory" in result.output


class TestHashCommand:
    """Test `bundle-hash hash`."""

    def test_prints_aggregate(self, runner, package_dir, make_zip):
        expected = PackageManifest.from_mapping(
            {"a.txt": HELLO_SHA256, "b/c.txt": WORLD_SHA256}
        ).compute_aggregate_digest()

        from_dir = runner.invoke(app, ["hash", str(package_dir)])
        from_zip = runner.invoke(app, ["hash", str(make_zip({"a.txt": b"hello", "b/c.txt": b"world"}))])

        assert from_dir.exit_code == 0
        assert from_dir.stdout.strip() == expected
        assert from_zip.stdout.strip() == expected

    def test_config_option(self, runner, package_dir, tmp_path):
        cfg = tmp_path / "cfg.yaml"
        cfg.write_text("ignore:\n  patterns: ['b/']\n")

        result = runner.invoke(app, ["--config", str(cfg), "hash", str(package_dir)])

        expected = PackageManifest.from_mapping({"a.txt": HELLO_SHA256}).compute_aggregate_digest()
        assert result.exit_code == 0, result.output
        assert result.stdout.strip() == expected


class TestDiffCommand:
    """Test `bundle-hash diff`."""

    def test_up_to_date(self, runner, package_dir, tmp_path):
        saved = tmp_path / "saved.json"
        runner.invoke(app, ["manifest", str(package_dir), "-o", str(saved)])

        result = runner.invoke(app, ["diff", str(saved), str(package_dir)])

        assert result.exit_code == 0, result.output
        assert "Up to date" in result.output

    def test_changed(self, runner, package_dir, tmp_path):
        saved = tmp_path / "saved.json"
        runner.invoke(app, ["manifest", str(package_dir), "-o", str(saved)])
        (package_dir / "a.txt").write_bytes(b"changed")
        (package_dir / "new.txt").write_bytes(b"new")

        result = runner.invoke(app, ["diff", str(saved), str(package_dir)])

        assert result.exit_code == 1
        assert "1 added" in result.output
        assert "1 modified" in result.output

    def test_missing_manifest_counts_as_empty(self, runner, package_dir, tmp_path):
        result = runner.invoke(app, ["diff", str(tmp_path / "none.json"), str(package_dir)])

        assert result.exit_code == 1
        assert "2 added" in result.output

    def test_unreadable_manifest_is_clean_error(self, runner, package_dir, tmp_path):
        """A manifest path that cannot be read exits 1 with a message, not a traceback."""
        result = runner.invoke(app, ["diff", str(tmp_path), str(package_dir)])

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "Cannot read manifest" in result.output

    def test_non_utf8_manifest_counts_as_empty(self, runner, package_dir, tmp_path):
        saved = tmp_path / "saved.json"
        saved.write_bytes(b"\xff\xfe\x00")

        result = runner.invoke(app, ["diff", str(saved), str(package_dir)])

        assert result.exit_code == 1
        assert "2 added" in result.output
