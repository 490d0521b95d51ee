"""Readers for package sources (directory trees and zip archives)."""

from .base import ArchiveEntry, ArchiveReader
from .fs import is_directory, open_file, walk_files
from .archive import ZipArchiveReader, open_zip

__all__ = [
    "ArchiveEntry",
    "ArchiveReader",
    "ZipArchiveReader",
    "is_directory",
    "open_file",
    "open_zip",
    "walk_files",
]
