"""Reading library metadata files."""

from __future__ import annotations

import glob
import json
import os
from dataclasses import dataclass, field


@dataclass
class Metadata:
    """Description of a library to publish, with its files already expanded."""

    name: str = ""
    version: str = ""
    description: str = ""
    author: str = ""
    repo_url: str = ""
    files: list[str] = field(default_factory=list)
    dependencies: dict[str, str] = field(default_factory=dict)


def parse_metadata_file(filename: str | os.PathLike[str]) -> Metadata:
    """Read a JSON metadata file and expand the glob patterns in its file list."""
    with open(filename, "rb") as file:
        data = json.load(file)
    if not isinstance(data, dict):
        raise ValueError("metadata must be a JSON object")
    return Metadata(
        name=data.get("name") or "",
        version=data.get("version") or "",
        description=data.get("description") or "",
        author=data.get("author") or "",
        repo_url=data.get("repo_url") or "",
        files=[
            match
            for pattern in data.get("files") or []
            for match in sorted(glob.glob(pattern))
        ],
        dependencies=dict(data.get("dependencies") or {}),
    )