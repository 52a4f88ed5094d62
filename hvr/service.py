"""Library management: upload, download, search and dependency resolution."""

from __future__ import annotations

import hashlib
import io
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Mapping, Union

from hvr.database import LibraryNotFoundError, SQLiteDatabase
from hvr.filestore import LocalFileStore
from hvr.models import Library
from hvr.resolver import Resolver
from hvr.versions import VersionError, parse_version


class LibraryExistsError(Exception):
    """Raised when uploading a name and version that is already stored."""


@dataclass(frozen=True)
class DownloadResult:
    """A stored archive with its modification time and SHA-256 hash."""

    content: bytes
    mod_time: datetime
    hash: str


class _HashingReader:
    """Reads from a stream while feeding a SHA-256 digest."""

    def __init__(self, source: BinaryIO) -> None:
        self._source = source
        self.digest = hashlib.sha256()

    def read(self, size: int = -1) -> bytes:
        chunk = self._source.read(size)
        self.digest.update(chunk)
        return chunk


class LibraryService:
    """Ties together the record database, the archive store and the resolver."""

    def __init__(self, db: SQLiteDatabase, file_store: LocalFileStore) -> None:
        self._db = db
        self._file_store = file_store
        self._resolver = Resolver(db)

    def upload(
        self,
        name: str,
        version: str,
        description: str,
        author: str,
        repo_url: str,
        dependencies: Mapping[str, str] | None,
        data: Union[bytes, BinaryIO],
        mod_time: datetime,
    ) -> Library:
        """Store a new library version; existing versions are never overwritten."""
        try:
            parsed = parse_version(version)
        except VersionError as exc:
            raise VersionError(f"invalid version: {exc}") from exc

        try:
            self._db.get(name, str(parsed))
        except LibraryNotFoundError:
            pass
        else:
            raise LibraryExistsError(f"library version already exists: {name} {parsed}")

        stream = io.BytesIO(data) if isinstance(data, (bytes, bytearray)) else data
        reader = _HashingReader(stream)
        file_path = self._file_store.save(name, str(parsed), reader, mod_time)

        library = Library(
            name=name,
            version=parsed,
            description=description,
            author=author,
            repo_url=repo_url,
            file_path=file_path,
            hash=reader.digest.hexdigest(),
            dependencies=dict(dependencies or {}),
        )
        self._db.save(library)
        return library

    def download(self, name: str, version: str) -> DownloadResult:
        """Return the archive of a version, or of the highest one for "latest"."""
        if version == "latest":
            library = self._db.get_latest(name)
        else:
            try:
                parsed = parse_version(version)
            except VersionError as exc:
                raise VersionError(f"invalid version: {exc}") from exc
            library = self._db.get(name, str(parsed))

        stored = self._file_store.get(library.file_path)
        return DownloadResult(
            content=stored.content, mod_time=stored.mod_time, hash=library.hash
        )

    def search(self, query: str) -> list[Library]:
        return self._db.search(query)

    def resolve_library_dependencies(self, name: str, version: str) -> list[Library]:
        """Return the resolved dependencies of a stored library version."""
        try:
            library = self._db.get(name, version)
        except LibraryNotFoundError as exc:
            raise LibraryNotFoundError(
                f"failed to get library {name} version {version}: {exc}"
            ) from exc
        return self._resolver.resolve_dependencies(library)