"""Local storage of library archives."""

from __future__ import annotations

import os
import shutil
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Union

Data = Union[bytes, bytearray, memoryview, BinaryIO]


@dataclass(frozen=True)
class StoredFile:
    """The content of a stored archive and its modification time."""

    content: bytes
    mod_time: datetime


class LocalFileStore:
    """Archives stored as <base_dir>/<name>/<version>.zip."""

    def __init__(self, base_dir: str | os.PathLike[str]) -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def save(self, name: str, version: str, data: Data, mod_time: datetime) -> str:
        """Write the archive, set its modification time and return its path."""
        path = self.base_dir / name / f"{version}.zip"
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as out:
            if isinstance(data, (bytes, bytearray, memoryview)):
                out.write(data)
            else:
                shutil.copyfileobj(data, out)
        os.utime(path, (time.time(), mod_time.timestamp()))
        return str(path)

    def get(self, path: str | os.PathLike[str]) -> StoredFile:
        """Read a stored archive."""
        with open(path, "rb") as file:
            stat = os.fstat(file.fileno())
            content = file.read()
        return StoredFile(
            content=content,
            mod_time=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        )