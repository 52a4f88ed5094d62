"""Building zip archives of library files."""

from __future__ import annotations

import argparse
import errno
import io
import os
import zipfile
from pathlib import Path
from typing import BinaryIO, Iterator, Sequence, Union


def _walk(directory: Path, prefix: str) -> Iterator[tuple[Path, str]]:
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        arcname = prefix + entry.name
        if entry.is_dir():
            yield from _walk(entry, arcname + "/")
        else:
            yield entry, arcname


def _deflated_info(name: str) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(name)
    info.compress_type = zipfile.ZIP_DEFLATED
    return info


def zip_directory(
    base_path: str | os.PathLike[str], out_path: str | os.PathLike[str]
) -> list[str]:
    """Zip every file below base_path, named relative to it; return the names."""
    names = []
    with zipfile.ZipFile(out_path, "w") as archive:
        for file_path, arcname in _walk(Path(base_path), ""):
            archive.writestr(_deflated_info(arcname), file_path.read_bytes())
            names.append(arcname)
    return names


def add_file_to_zip(zip_file: zipfile.ZipFile, filename: str) -> None:
    """Add a file under its given name, keeping its timestamp, deflated."""
    if Path(filename).is_dir():
        raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), filename)
    zip_file.write(filename, arcname=filename, compress_type=zipfile.ZIP_DEFLATED)


def zip_single_file(filename: str, data: Union[bytes, BinaryIO]) -> bytes:
    """Return an in-memory zip archive holding one file."""
    content = data if isinstance(data, (bytes, bytearray)) else data.read()
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr(_deflated_info(filename), content)
    return buffer.getvalue()


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="hvr-make-test-zip",
        description="Zip a directory tree into an archive.",
    )
    parser.add_argument("source", nargs="?", default="testdata/libraries/lib-a")
    parser.add_argument("output", nargs="?", default="testdata/test-lib.zip")
    args = parser.parse_args(argv)
    zip_directory(args.source, args.output)
    return 0