"""Command-line interface of the registry client."""

from __future__ import annotations

import argparse
import json
import os
import sys
import tempfile
import zipfile
from pathlib import Path
from typing import Sequence

from hvr.archive import add_file_to_zip
from hvr.client import (
    DEFAULT_SERVER_URL,
    ClientError,
    download_library,
    resolve_dependencies,
    upload_library,
)
from hvr.metadata import parse_metadata_file

DEFAULT_INSTALL_DIR = "vendor"

_SAMPLE_LIBRARIES = (
    {"name": "test-lib", "version": "1.0.0"},
    {"name": "another-lib", "version": "2.0.0"},
)


def is_valid_version(version: str) -> bool:
    """Return whether a version string is acceptable for installation."""
    return len(version) > 0


def install_library(name: str, version: str, install_dir: str | os.PathLike[str]) -> Path:
    """Record an installed library as a marker file in install_dir; return its path."""
    if version != "latest" and not is_valid_version(version):
        raise ClientError(f"invalid version format: {version}")
    directory = Path(install_dir)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ClientError(f"failed to create installation directory: {exc}") from exc
    marker = directory / f"{name}-{version}.txt"
    try:
        marker.write_bytes(b"")
    except OSError as exc:
        raise ClientError(f"failed to create dummy file: {exc}") from exc
    return marker


def search_libraries(query: str) -> list[dict[str, str]]:
    """Return the known libraries whose names contain the query."""
    return [dict(entry) for entry in _SAMPLE_LIBRARIES if query in entry["name"]]


class _StringToString(argparse.Action):
    """Collects "key=value,key=value" option values into a dict."""

    def __call__(self, parser, namespace, values, option_string=None):
        current = dict(getattr(namespace, self.dest) or {})
        if values:
            for pair in values.split(","):
                key, sep, value = pair.partition("=")
                if not sep:
                    parser.error(f"{pair} must be formatted as key=value")
                current[key] = value
        setattr(namespace, self.dest, current)


def _run_upload(args: argparse.Namespace) -> None:
    upload_library(
        args.file,
        args.name,
        args.version,
        args.description,
        args.author,
        args.repo_url,
        args.dependencies,
        args.server,
    )


def _run_download(args: argparse.Namespace) -> None:
    if args.name is None:
        raise ClientError("library name is required")
    try:
        download_library(args.name, args.version, args.output or ".", args.server)
    except ClientError as exc:
        raise ClientError(f"failed to download library: {exc}") from exc


def _run_search(args: argparse.Namespace) -> None:
    if args.query is None:
        raise ClientError("search query is required")
    results = search_libraries(args.query)
    if args.json:
        print(json.dumps(results, separators=(",", ":")))
    elif not results:
        print("No libraries found")
    else:
        for result in results:
            print(f"{result['name']} ({result['version']})")


def _run_uploadmeta(args: argparse.Namespace) -> None:
    try:
        meta = parse_metadata_file(args.metadata_file)
    except (OSError, ValueError) as exc:
        raise ClientError(f"failed to parse metadata file: {exc}") from exc

    handle, archive_path = tempfile.mkstemp(prefix="library-", suffix=".zip")
    os.close(handle)
    try:
        with zipfile.ZipFile(archive_path, "w") as archive:
            for filename in meta.files:
                try:
                    add_file_to_zip(archive, filename)
                except OSError as exc:
                    raise ClientError(f"failed to add file to zip: {exc}") from exc
        upload_library(
            archive_path,
            meta.name,
            meta.version,
            meta.description,
            meta.author,
            meta.repo_url,
            meta.dependencies,
            args.server,
        )
    finally:
        try:
            os.remove(archive_path)
        except OSError:
            pass


def _run_resolve(args: argparse.Namespace) -> None:
    dependencies = resolve_dependencies(args.name, args.version, args.server)
    print(f"Dependencies for {args.name} version {args.version}:")
    for dep in dependencies:
        version = dep.version if dep.version is not None else ""
        print(f"- {dep.name} ({version})")


def _run_install(args: argparse.Namespace) -> None:
    if args.name is None:
        raise ClientError("library name is required")
    install_library(args.name, args.version, args.dir)
    print(f"Library {args.name} version {args.version} installed successfully in {args.dir}")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all client commands."""
    parser = argparse.ArgumentParser(
        prog="hvr",
        description="A command-line interface for interacting with the Hamilton Venus Registry.",
    )
    parser.add_argument(
        "--server", default=DEFAULT_SERVER_URL, help="URL of the registry server"
    )
    commands = parser.add_subparsers(dest="command", metavar="<command>")

    upload = commands.add_parser("upload", help="Upload a library to the registry")
    upload.add_argument("file")
    upload.add_argument("--name", required=True, help="Name of the library")
    upload.add_argument("--version", required=True, help="Version of the library")
    upload.add_argument("--description", default="", help="Description of the library")
    upload.add_argument("--author", default="", help="Author of the library")
    upload.add_argument("--repo-url", default="", help="Repository URL of the library")
    upload.add_argument(
        "--dependencies",
        action=_StringToString,
        default=None,
        help="Dependencies of the library (format: name=version)",
    )
    upload.set_defaults(handler=_run_upload)

    download = commands.add_parser("download", help="Download a library")
    download.add_argument("name", nargs="?")
    download.add_argument("version", nargs="?", default="latest")
    download.add_argument(
        "-o", "--output", default="", help="Output directory for downloaded files"
    )
    download.set_defaults(handler=_run_download)

    search = commands.add_parser("search", help="Search for libraries")
    search.add_argument("query", nargs="?")
    search.add_argument("--json", action="store_true", help="Output results in JSON format")
    search.set_defaults(handler=_run_search)

    uploadmeta = commands.add_parser(
        "uploadmeta", help="Upload a library to the registry using a metadata file"
    )
    uploadmeta.add_argument("metadata_file")
    uploadmeta.set_defaults(handler=_run_uploadmeta)

    resolve = commands.add_parser("resolve", help="Resolve dependencies for a library")
    resolve.add_argument("name")
    resolve.add_argument("version")
    resolve.set_defaults(handler=_run_resolve)

    install = commands.add_parser("install", help="Install a library")
    install.add_argument("name", nargs="?")
    install.add_argument("version", nargs="?", default="latest")
    install.add_argument(
        "-d", "--dir", default=DEFAULT_INSTALL_DIR, help="Installation directory"
    )
    install.set_defaults(handler=_run_install)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the client; return the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 0
    try:
        args.handler(args)
    except (ClientError, OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())