"""Zip archive reader backed by the standard zipfile module."""

import logging
import struct
import zipfile
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from ..errors import ArchiveProtocolError
from .base import ArchiveEntry

logger = logging.getLogger(__name__)


class ZipArchiveReader:
    """
    Sequential entry reader over a zip container.

    Entries come out in central-directory order, one per read_entry() call.
    Several entry streams may be open at once; zipfile serializes the
    underlying seeks and reads.
    """

    def __init__(self, zf: zipfile.ZipFile, path: Union[str, Path]):
        self._zf = zf
        self.path = str(path)
        self._infos: Iterator[zipfile.ZipInfo] = iter(zf.infolist())
        self._index = 0
        self._by_index = {}

    def read_entry(self) -> Optional[ArchiveEntry]:
        info = next(self._infos, None)
        if info is None:
            return None
        entry = ArchiveEntry(
            name=info.filename,
            external_attr=info.external_attr,
            index=self._index,
        )
        self._by_index[entry.index] = info
        self._index += 1
        return entry

    def open_read_stream(self, entry: ArchiveEntry) -> BinaryIO:
        info = self._by_index.pop(entry.index, None)
        if info is None:
            raise ArchiveProtocolError(
                f"{self.path}!{entry.name}", KeyError("entry not issued by this reader")
            )
        try:
            return self._zf.open(info, "r")
        except (zipfile.BadZipFile, NotImplementedError, RuntimeError, OSError, EOFError) as e:
            raise ArchiveProtocolError(f"{self.path}!{entry.name}", e) from e

    def close(self) -> None:
        self._zf.close()

    def __enter__(self) -> "ZipArchiveReader":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def open_zip(path: Union[str, Path]) -> Optional[ZipArchiveReader]:
    """Open a candidate file as a zip container.

    Returns:
        A reader, or None when the file is not a readable zip container
        (missing, a directory, not zip bytes, damaged central directory)

    Raises:
        ArchiveProtocolError: If the container is readable but an entry name
            flagged as UTF-8 does not decode
    """
    try:
        zf = zipfile.ZipFile(path, "r")
    except UnicodeDecodeError as e:
        raise ArchiveProtocolError(path, e) from e
    except (zipfile.BadZipFile, OSError, EOFError, ValueError, struct.error) as e:
        logger.debug("Not a zip container: %s (%s)", path, e)
        return None
    return ZipArchiveReader(zf, path)
