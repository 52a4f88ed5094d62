"""HTTP client for the registry server."""

from __future__ import annotations

import hashlib
import json
import os
import time
from datetime import datetime
from pathlib import Path
from typing import Mapping

import requests

from hvr.models import Library, library_from_dict

DEFAULT_SERVER_URL = "http://localhost:8080"

_CHUNK_SIZE = 64 * 1024


class ClientError(Exception):
    """Raised when a registry operation fails on the client side."""


def _status(response: requests.Response) -> str:
    return f"{response.status_code} {response.reason or ''}".strip()


def upload_library(
    file_path: str | os.PathLike[str],
    name: str,
    version: str,
    description: str,
    author: str,
    repo_url: str,
    dependencies: Mapping[str, str] | None,
    server_url: str = DEFAULT_SERVER_URL,
) -> None:
    """Send a library file with its metadata to the registry."""
    try:
        file = open(file_path, "rb")
    except OSError as exc:
        raise ClientError(f"failed to open file: {exc}") from exc

    with file:
        mod_time = int(os.fstat(file.fileno()).st_mtime)
        fields = {
            "name": name,
            "version": version,
            "description": description,
            "author": author,
            "repoURL": repo_url,
            "dependencies": json.dumps(
                dict(dependencies) if dependencies is not None else None,
                sort_keys=True,
                separators=(",", ":"),
            ),
            "modTime": str(mod_time),
        }
        try:
            response = requests.post(
                f"{server_url}/upload",
                data=fields,
                files={"file": (os.path.basename(file_path), file)},
            )
        except requests.RequestException as exc:
            raise ClientError(f"failed to send request: {exc}") from exc

    with response:
        if response.status_code != 201:
            raise ClientError(
                f"upload failed with status: {_status(response)}, body: {response.text}"
            )
    print(f"Library {name} version {version} uploaded successfully")


def filename_from_header(header: str) -> str:
    """Return the file name given by a Content-Disposition header, or ""."""
    if not header:
        return ""
    parts = header.split("filename=")
    if len(parts) != 2:
        return ""
    path = parts[1].strip('"')
    if not path:
        return "."
    separators = "/" + (os.sep if os.sep != "/" else "")
    stripped = path.rstrip(separators)
    if not stripped:
        return os.sep
    for separator in separators:
        stripped = stripped.rsplit(separator, 1)[-1]
    return stripped


def _describe_time(timestamp: int) -> str:
    moment = datetime.fromtimestamp(timestamp).astimezone()
    return moment.strftime("%Y-%m-%d %H:%M:%S %z %Z")


def download_library(
    name: str,
    version: str,
    dest_path: str | os.PathLike[str],
    server_url: str = DEFAULT_SERVER_URL,
) -> str:
    """Download a library archive, verify its hash and return where it was saved."""
    url = f"{server_url}/download?name={name}&version={version}"
    print(f"Downloading from: {url}")

    try:
        response = requests.get(url, stream=True)
    except requests.RequestException as exc:
        raise ClientError(f"failed to download: {exc}") from exc

    with response:
        if response.status_code != 200:
            raise ClientError(
                f"download failed with status: {_status(response)}, body: {response.text}"
            )

        filename = filename_from_header(response.headers.get("Content-Disposition", ""))
        if not filename:
            filename = f"{name}-{version}.zip"
        path = Path(dest_path) / filename

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ClientError(f"failed to create directory: {exc}") from exc

        try:
            out = path.open("wb")
        except OSError as exc:
            raise ClientError(f"failed to create file: {exc}") from exc

        expected_hash = response.headers.get("X-File-Hash", "")
        hasher = hashlib.sha256()
        written = 0
        with out:
            try:
                for chunk in response.iter_content(_CHUNK_SIZE):
                    out.write(chunk)
                    hasher.update(chunk)
                    written += len(chunk)
            except (OSError, requests.RequestException) as exc:
                raise ClientError(f"failed to save file: {exc}") from exc
        print(f"Wrote {written} bytes to file")

        actual_hash = hasher.hexdigest()
        if actual_hash != expected_hash:
            path.unlink(missing_ok=True)
            raise ClientError(f"hash mismatch: expected {expected_hash}, got {actual_hash}")

        mod_time_text = response.headers.get("X-File-ModTime", "")
        if mod_time_text:
            try:
                mod_time = int(mod_time_text)
            except ValueError:
                pass
            else:
                try:
                    os.utime(path, (time.time(), mod_time))
                except (OSError, OverflowError) as exc:
                    print(f"Warning: Failed to set modification time: {exc}")
                else:
                    print(f"Set modification time to: {_describe_time(mod_time)}")

    print(f"Library downloaded and verified successfully as {path}")
    return str(path)


def resolve_dependencies(
    name: str, version: str, server_url: str = DEFAULT_SERVER_URL
) -> list[Library]:
    """Ask the registry for the resolved dependencies of a library version."""
    url = f"{server_url}/resolve?name={name}&version={version}"
    try:
        response = requests.get(url)
    except requests.RequestException as exc:
        raise ClientError(f"failed to resolve dependencies: {exc}") from exc

    with response:
        if response.status_code != 200:
            raise ClientError(f"failed to resolve dependencies: {_status(response)}")
        try:
            payload = response.json()
            if payload is None:
                return []
            if not isinstance(payload, list):
                raise ValueError("expected a JSON array")
            return [library_from_dict(item) for item in payload]
        except (ValueError, TypeError, AttributeError) as exc:
            raise ClientError(f"failed to decode response: {exc}") from exc