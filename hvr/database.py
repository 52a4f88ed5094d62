"""SQLite storage of library records."""

from __future__ import annotations

import json
import sqlite3
import threading
from os import PathLike

from hvr.models import Library
from hvr.versions import Version, VersionError, parse_version

_COLUMNS = "name, version, description, author, repo_url, file_path, hash, dependencies"

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS libraries (
    name TEXT,
    version TEXT,
    description TEXT,
    author TEXT,
    repo_url TEXT,
    file_path TEXT,
    hash TEXT,
    dependencies TEXT,
    PRIMARY KEY (name, version)
)
"""


class LibraryNotFoundError(LookupError):
    """Raised when no matching library record exists."""


def _load_dependencies(text: str | None) -> dict[str, str]:
    return dict(json.loads(text) or {}) if text else {}


class SQLiteDatabase:
    """Library records keyed by name and version."""

    def __init__(self, path: str | PathLike[str]) -> None:
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._lock = threading.Lock()
        with self._lock, self._conn:
            self._conn.execute(_CREATE_TABLE)

    def save(self, library: Library) -> None:
        """Insert the record, replacing any with the same name and version."""
        dependencies = json.dumps(
            library.dependencies, sort_keys=True, separators=(",", ":")
        )
        with self._lock, self._conn:
            self._conn.execute(
                f"INSERT OR REPLACE INTO libraries ({_COLUMNS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    library.name,
                    str(library.version),
                    library.description,
                    library.author,
                    library.repo_url,
                    library.file_path,
                    library.hash,
                    dependencies,
                ),
            )

    def get(self, name: str, version: str) -> Library:
        """Return the record for an exact name and version string."""
        with self._lock:
            row = self._conn.execute(
                f"SELECT {_COLUMNS} FROM libraries WHERE name = ? AND version = ?",
                (name, version),
            ).fetchone()
        if row is None:
            raise LibraryNotFoundError(f"library {name} version {version} not found")
        lib_name, version_text, description, author, repo_url, file_path, digest, deps = row
        return Library(
            name=lib_name,
            version=parse_version(version_text),
            description=description,
            author=author,
            repo_url=repo_url,
            file_path=file_path,
            hash=digest,
            dependencies=_load_dependencies(deps),
        )

    def search(self, query: str) -> list[Library]:
        """Return name and version of every library whose name contains the query."""
        with self._lock:
            rows = self._conn.execute(
                "SELECT name, version FROM libraries WHERE name LIKE ?",
                (f"%{query}%",),
            ).fetchall()
        return [Library(name=name, version=parse_version(text)) for name, text in rows]

    def get_latest(self, name: str) -> Library:
        """Return the record with the highest valid version of a library."""
        with self._lock:
            rows = self._conn.execute(
                f"SELECT {_COLUMNS} FROM libraries WHERE name = ? ORDER BY version DESC",
                (name,),
            ).fetchall()
        latest: Library | None = None
        for lib_name, version_text, description, author, repo_url, file_path, digest, deps in rows:
            try:
                version = parse_version(version_text)
            except VersionError:
                continue
            if latest is None or version > latest.version:
                try:
                    dependencies = _load_dependencies(deps)
                except ValueError:
                    dependencies = {}
                latest = Library(
                    name=lib_name,
                    version=version,
                    description=description,
                    author=author,
                    repo_url=repo_url,
                    file_path=file_path,
                    hash=digest,
                    dependencies=dependencies,
                )
        if latest is None:
            raise LibraryNotFoundError(f"no valid versions found for library {name}")
        return latest

    def get_all_versions(self, name: str) -> list[Version]:
        """Return every valid version stored for a library."""
        with self._lock:
            rows = self._conn.execute(
                "SELECT version FROM libraries WHERE name = ?", (name,)
            ).fetchall()
        versions = []
        for (text,) in rows:
            try:
                versions.append(parse_version(text))
            except VersionError:
                continue
        return versions

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> SQLiteDatabase:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()