"""Resolution of a library's transitive dependencies."""

from __future__ import annotations

import sqlite3

from hvr.database import LibraryNotFoundError, SQLiteDatabase
from hvr.models import Library
from hvr.versions import VersionError, parse_constraint


class ResolutionError(Exception):
    """Raised when a dependency cannot be resolved."""


class Resolver:
    """Picks the highest stored version that satisfies each dependency constraint."""

    def __init__(self, db: SQLiteDatabase) -> None:
        self._db = db

    def resolve_dependencies(self, library: Library) -> list[Library]:
        """Return every library that the given one depends on, directly or not."""
        resolved: dict[str, Library] = {}
        self._resolve(library, resolved, 0)
        return list(resolved.values())

    def _resolve(self, library: Library, resolved: dict[str, Library], depth: int) -> None:
        if depth > 100:
            raise ResolutionError("dependency resolution too deep, possible circular dependency")
        for name, text in library.dependencies.items():
            try:
                constraint = parse_constraint(text)
            except VersionError as exc:
                raise ResolutionError(f"invalid version constraint for {name}: {exc}") from exc
            try:
                versions = self._db.get_all_versions(name)
            except sqlite3.Error as exc:
                raise ResolutionError(f"failed to get versions for {name}: {exc}") from exc
            best = max((v for v in versions if constraint.check(v)), default=None)
            if best is None:
                raise ResolutionError(f"no suitable version found for {name} matching {text}")
            try:
                dependency = self._db.get(name, str(best))
            except (LibraryNotFoundError, VersionError, sqlite3.Error) as exc:
                raise ResolutionError(
                    f"failed to get library {name} version {best}: {exc}"
                ) from exc
            if name not in resolved:
                resolved[name] = dependency
                self._resolve(dependency, resolved, depth + 1)