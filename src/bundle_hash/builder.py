"""Manifest builders for directory trees and zip archives.

Both sources end in the same place: a PackageManifest holding exactly the
content-bearing entries, each with the digest of its bytes. Digests run on a
thread pool so slow streams overlap; the manifest is only produced once every
digest has finished, and the first failure aborts the whole build.

Archive mode walks entries strictly one at a time:

    AwaitingEntry -> EntryOpen -> Digesting (on a worker) -> AwaitingEntry | Done

The next entry is requested as soon as the current entry's stream is open,
without waiting for its digest. Only when every worker already has a backlog
(max_workers * IN_FLIGHT_PER_WORKER open streams) does discovery wait for one
digest to finish, so large archives never hold all their entries open.
"""

import logging
import threading
from concurrent.futures import FIRST_COMPLETED, FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable, Dict, List, Optional, Tuple, Union

from .config import HashConfig
from .errors import InvalidInputError, StreamReadError
from .hashing import digest_stream
from .ignore import is_ignored
from .manifest import PackageManifest
from .readers.base import ArchiveEntry, ArchiveReader
from .readers.fs import is_directory, open_file, walk_files
from .readers.archive import open_zip

logger = logging.getLogger(__name__)

# Archive entries opened but not yet digested, per worker
IN_FLIGHT_PER_WORKER = 2

PathLike = Union[str, Path]
FileOpener = Callable[[Path], BinaryIO]
ArchiveOpener = Callable[[PathLike], Optional[ArchiveReader]]


@dataclass(frozen=True)
class NotAnArchive:
    """Archive mode outcome for input that is not a zip container.

    This is not a failure: callers fall back to directory mode (or another
    strategy) when they get one.
    """

    path: str
    reason: str = "not a readable zip container"


class _DigestCollector:
    """Result map and first-failure latch shared by the workers of one build."""

    def __init__(self):
        self._lock = threading.Lock()
        self._digests: Dict[str, Tuple[int, str]] = {}
        self.error: Optional[BaseException] = None

    def add(self, path: str, digest: str, order: int = 0) -> None:
        """Record a digest; for a repeated path the higher order wins."""
        with self._lock:
            current = self._digests.get(path)
            if current is None or current[0] <= order:
                self._digests[path] = (order, digest)

    def fail(self, error: BaseException) -> None:
        with self._lock:
            if self.error is None:
                self.error = error

    def raise_if_failed(self) -> None:
        if self.error is not None:
            raise self.error

    def digests(self) -> Dict[str, str]:
        with self._lock:
            return {path: digest for path, (_, digest) in self._digests.items()}


def _cancel(futures: List[Future]) -> None:
    for future in futures:
        future.cancel()


class ManifestBuilder:
    """Builds PackageManifests from directories or zip archives."""

    def __init__(
        self,
        config: Optional[HashConfig] = None,
        file_opener: FileOpener = open_file,
        archive_opener: ArchiveOpener = open_zip,
    ):
        """Initialize builder.

        Args:
            config: Worker count, chunk size and ignore rules (defaults if None)
            file_opener: Opens a directory-mode file as a binary stream
            archive_opener: Opens a candidate archive; returns None if it is not one
        """
        self.config = config or HashConfig()
        self.rules = self.config.ignore_rules()
        self.file_opener = file_opener
        self.archive_opener = archive_opener
        self.max_in_flight = self.config.max_workers * IN_FLIGHT_PER_WORKER

    # ---------- workers ----------

    def _run(self, collector: _DigestCollector, path: str, order: int, digest_fn) -> str:
        """Worker body: digest, then record the result or the failure."""
        try:
            digest = digest_fn()
        except BaseException as e:
            collector.fail(e)
            raise
        collector.add(path, digest, order)
        logger.debug("Digested %s: %s", path, digest[:12])
        return digest

    def _digest_file(self, path: Path) -> str:
        try:
            stream = self.file_opener(path)
        except OSError as e:
            raise StreamReadError(path, e) from e
        with stream:
            return digest_stream(stream, self.config.chunk_size, name=str(path))

    def _digest_entry(self, stream: BinaryIO, label: str) -> str:
        # Entry streams are closed by the driving thread, which owns the archive
        return digest_stream(stream, self.config.chunk_size, name=label)

    def _release_finished(self, inflight: Dict[Future, BinaryIO], block: bool) -> None:
        """Close the streams of finished digests, first waiting for one if block."""
        if block:
            wait(list(inflight), return_when=FIRST_COMPLETED)
        for future in [f for f in inflight if f.done()]:
            inflight.pop(future).close()

    def _join(self, futures: List[Future], collector: _DigestCollector) -> Dict[str, str]:
        """Wait for every digest; re-raise the first failure."""
        wait(futures, return_when=FIRST_EXCEPTION)
        collector.raise_if_failed()
        return collector.digests()

    # ---------- sources ----------

    def build_from_directory(self, root: PathLike) -> PackageManifest:
        """Build a manifest from every content-bearing file below root.

        Args:
            root: Directory to hash

        Returns:
            PackageManifest keyed by root-relative POSIX paths

        Raises:
            InvalidInputError: If root is not an existing directory
            TraversalError: If the walk fails
            StreamReadError: If any file cannot be read
        """
        if not is_directory(root):
            raise InvalidInputError(root)
        root = Path(root)

        collector = _DigestCollector()
        futures: List[Future] = []
        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            try:
                for relpath, file_path in walk_files(root):
                    collector.raise_if_failed()
                    if is_ignored(relpath, True, self.rules):
                        logger.debug("Ignoring %s", relpath)
                        continue
                    futures.append(executor.submit(
                        self._run, collector, relpath, 0,
                        lambda p=file_path: self._digest_file(p),
                    ))
                digests = self._join(futures, collector)
            except BaseException:
                _cancel(futures)
                raise

        logger.info("Built manifest for directory %s: %d files", root, len(digests))
        return PackageManifest.from_mapping(digests)

    def build_from_archive(self, path: PathLike) -> Union[PackageManifest, NotAnArchive]:
        """Build a manifest from the content-bearing entries of a zip archive.

        Args:
            path: Candidate archive file

        Returns:
            PackageManifest keyed by archive entry names, or NotAnArchive if
            the file cannot be opened as a zip container

        Raises:
            ArchiveProtocolError: If the archive or an entry header is corrupt
            StreamReadError: If any entry's content cannot be read
        """
        reader = self.archive_opener(path)
        if reader is None:
            logger.debug("%s is not an archive", path)
            return NotAnArchive(path=str(path))

        collector = _DigestCollector()
        inflight: Dict[Future, BinaryIO] = {}
        seen: Dict[str, int] = {}
        try:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                try:
                    while True:
                        collector.raise_if_failed()
                        entry: Optional[ArchiveEntry] = reader.read_entry()
                        if entry is None:
                            break
                        if entry.is_directory or is_ignored(entry.name, entry.is_regular_file, self.rules):
                            logger.debug("Skipping entry %s", entry.name)
                            continue
                        if entry.name in seen:
                            logger.warning(
                                "Duplicate archive entry %s in %s; using the later one", entry.name, path
                            )
                        seen[entry.name] = entry.index

                        stream = reader.open_read_stream(entry)
                        label = f"{path}!{entry.name}"
                        future = executor.submit(
                            self._run, collector, entry.name, entry.index,
                            lambda s=stream, n=label: self._digest_entry(s, n),
                        )
                        inflight[future] = stream
                        self._release_finished(inflight, block=len(inflight) >= self.max_in_flight)
                    digests = self._join(list(inflight), collector)
                except BaseException:
                    _cancel(list(inflight))
                    raise
        finally:
            for stream in inflight.values():
                stream.close()
            reader.close()

        logger.info("Built manifest for archive %s: %d entries", path, len(digests))
        return PackageManifest.from_mapping(digests)

    def build(self, path: PathLike) -> PackageManifest:
        """Build from an archive, falling back to directory mode."""
        result = self.build_from_archive(path)
        if isinstance(result, NotAnArchive):
            return self.build_from_directory(path)
        return result


def build_from_directory(path: PathLike, config: Optional[HashConfig] = None) -> PackageManifest:
    """Build a manifest from a directory tree with a default builder."""
    return ManifestBuilder(config).build_from_directory(path)


def build_from_archive(
    path: PathLike, config: Optional[HashConfig] = None
) -> Union[PackageManifest, NotAnArchive]:
    """Build a manifest from a zip archive with a default builder."""
    return ManifestBuilder(config).build_from_archive(path)


def build_manifest(path: PathLike, config: Optional[HashConfig] = None) -> PackageManifest:
    """Build a manifest from an archive or, failing that, a directory."""
    return ManifestBuilder(config).build(path)
