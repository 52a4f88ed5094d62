"""The library record kept by the registry."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from hvr.versions import Version, parse_version

_TEXT_FIELDS = ("name", "description", "author", "repo_url", "file_path", "hash")


@dataclass
class Library:
    """A published library version and its metadata."""

    name: str
    version: Version | None = None
    description: str = ""
    author: str = ""
    repo_url: str = ""
    file_path: str = ""
    hash: str = ""
    dependencies: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form of the record."""
        data = {key: getattr(self, key) for key in _TEXT_FIELDS}
        data["version"] = None if self.version is None else str(self.version)
        data["dependencies"] = dict(self.dependencies)
        return data


def library_from_dict(data: dict[str, Any]) -> Library:
    """Build a Library from its JSON form."""
    version = data.get("version")
    return Library(
        version=parse_version(version) if version else None,
        dependencies=dict(data.get("dependencies") or {}),
        **{key: data.get(key) or "" for key in _TEXT_FIELDS},
    )


__all__ = ["Library", "library_from_dict", "asdict"]