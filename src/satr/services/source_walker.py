"""Recursive discovery of CFDI documents on disk.

Loose ``.xml`` files are yielded as they are found. ``.zip`` files are opened
and their ``.xml`` members yielded in place, one level deep: a zip inside a
zip is not opened.
"""

from __future__ import annotations

import logging
import os
import zipfile
import zlib
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from satr.config import ARCHIVE_SUFFIX, DOCUMENT_SUFFIX
from satr.services.exceptions import ExtractionError

logger = logging.getLogger(__name__)

ARCHIVE_MEMBER_SEP = "!"


@dataclass(frozen=True)
class RawDocument:
    """Unparsed document content plus where it came from."""

    source: str  # file path, or "archive.zip!member.xml"
    content: bytes


def _raise_walk_error(exc: OSError) -> None:
    raise ExtractionError(f"Error al leer el directorio {exc.filename}: {exc}", exc.filename) from exc


def read_document(path: Path) -> RawDocument:
    try:
        with path.open("rb") as f:
            content = f.read()
    except OSError as exc:
        raise ExtractionError(f"Error al leer el archivo {path}: {exc}", str(path)) from exc
    return RawDocument(source=str(path), content=content)


def iter_archive_documents(path: Path) -> Iterator[RawDocument]:
    """Yield every ``.xml`` member of a zip archive, fully read into memory.

    Members are visited in the archive's central-directory order.
    """
    try:
        with zipfile.ZipFile(path) as archive:
            for info in archive.infolist():
                if info.is_dir() or not info.filename.endswith(DOCUMENT_SUFFIX):
                    continue
                try:
                    with archive.open(info) as member:
                        content = member.read()
                except (OSError, zipfile.BadZipFile, zlib.error, RuntimeError, NotImplementedError) as exc:
                    raise ExtractionError(
                        f"Error al leer {info.filename} dentro de {path}: {exc}", str(path)
                    ) from exc
                yield RawDocument(source=f"{path}{ARCHIVE_MEMBER_SEP}{info.filename}", content=content)
    except (OSError, zipfile.BadZipFile) as exc:
        raise ExtractionError(f"Error al abrir el archivo zip {path}: {exc}", str(path)) from exc


def _documents_at(path: Path) -> Iterator[RawDocument]:
    # FIFOs, sockets and dangling symlinks are not documents; is_file follows links
    if not path.is_file():
        return
    name = path.name
    if name.endswith(DOCUMENT_SUFFIX):
        yield read_document(path)
    elif name.endswith(ARCHIVE_SUFFIX):
        logger.debug("Opening archive %s", path)
        yield from iter_archive_documents(path)


def walk_documents(root: str | os.PathLike[str]) -> Iterator[RawDocument]:
    """Yield every CFDI document under *root*, descending into zip archives.

    Directories and files are visited in sorted name order, so repeated walks
    over an unchanged tree yield the same sequence. Raises ExtractionError on
    the first unreadable directory, file or archive.
    """
    root_path = Path(root)
    if root_path.is_file():
        yield from _documents_at(root_path)
        return

    for dirpath, dirnames, filenames in os.walk(root_path, onerror=_raise_walk_error):
        dirnames.sort()
        for filename in sorted(filenames):
            yield from _documents_at(Path(dirpath) / filename)
