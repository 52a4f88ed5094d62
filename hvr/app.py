"""HTTP interface of the registry."""

from __future__ import annotations

import json
import logging
import posixpath
import re
import sqlite3
import time
from datetime import datetime, timezone
from typing import Any

from flask import Flask, Response, request

from hvr.archive import zip_single_file
from hvr.service import LibraryExistsError, LibraryService
from hvr.versions import VersionError, parse_version

logger = logging.getLogger(__name__)

_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def _error(message: str, status: int) -> Response:
    return Response(message + "\n", status=status, mimetype="text/plain")


def _json(payload: Any, status: int = 200) -> Response:
    return Response(json.dumps(payload) + "\n", status=status, mimetype="application/json")


def _parse_dependencies(text: str) -> dict[str, str]:
    loaded = json.loads(text)
    if loaded is None:
        return {}
    if not isinstance(loaded, dict) or not all(
        isinstance(value, str) for value in loaded.values()
    ):
        raise ValueError("dependencies must be an object of strings")
    return loaded


def _parse_mod_time(text: str) -> datetime:
    if _INTEGER_RE.fullmatch(text):
        try:
            return datetime.fromtimestamp(int(text), tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            pass
    return datetime.fromtimestamp(time.time(), tz=timezone.utc)


def create_app(service: LibraryService) -> Flask:
    """Build the web application serving the given library service."""
    app = Flask(__name__)

    @app.route("/", defaults={"path": ""}, methods=_ALL_METHODS)
    @app.route("/<path:path>", methods=_ALL_METHODS)
    def index(path: str) -> Response:
        return Response("Welcome to Hamilton Venus Registry!", mimetype="text/plain")

    @app.route("/upload", methods=_ALL_METHODS)
    def upload() -> Response:
        if request.method != "POST":
            return _error("Method not allowed", 405)
        if request.mimetype != "multipart/form-data":
            logger.warning("Error parsing multipart form: not multipart/form-data")
            return _error("Error parsing form", 400)

        name = request.form.get("name", "")
        version = request.form.get("version", "")
        try:
            parse_version(version)
        except VersionError as exc:
            logger.warning("Invalid version: %s", exc)
            return _error("Invalid version", 400)

        file = request.files.get("file")
        if file is None:
            logger.warning("Error retrieving file: no file in form")
            return _error("Error retrieving file", 400)

        mod_time = _parse_mod_time(request.form.get("modTime", ""))
        filename = posixpath.basename((file.filename or "").replace("\\", "/"))
        logger.info("Uploading file: %s, name: %s, version: %s", filename, name, version)

        archive = zip_single_file(filename, file.stream)

        try:
            dependencies = _parse_dependencies(request.form.get("dependencies", ""))
        except ValueError as exc:
            logger.warning("Error parsing dependencies: %s", exc)
            return _error("Error parsing dependencies", 400)

        try:
            service.upload(
                name,
                version,
                request.form.get("description", ""),
                request.form.get("author", ""),
                request.form.get("repoURL", ""),
                dependencies,
                archive,
                mod_time,
            )
        except LibraryExistsError as exc:
            logger.warning("Attempt to overwrite existing version: %s", exc)
            return _error(f"Error: {exc}", 409)
        except (VersionError, OSError, sqlite3.Error) as exc:
            logger.error("Error uploading file: %s", exc)
            return _error(f"Error uploading file: {exc}", 500)

        return _json({"message": "Library uploaded successfully"}, 201)

    @app.route("/download", methods=_ALL_METHODS)
    def download() -> Response:
        if request.method != "GET":
            return _error("Method not allowed", 405)
        name = request.args.get("name", "")
        version = request.args.get("version", "") or "latest"
        if not name:
            return _error("Name is required", 400)

        try:
            result = service.download(name, version)
        except (LookupError, VersionError, OSError, sqlite3.Error) as exc:
            logger.error("Error downloading file: %s", exc)
            return _error(f"Error downloading file: {exc}", 500)

        response = Response(result.content, mimetype="application/zip")
        response.headers["Content-Disposition"] = (
            f"attachment; filename={name}-{version}.zip"
        )
        response.headers["X-File-ModTime"] = str(int(result.mod_time.timestamp()))
        response.headers["X-File-Hash"] = result.hash
        logger.info("File %s-%s.zip downloaded successfully", name, version)
        return response

    @app.route("/search", methods=_ALL_METHODS)
    def search() -> Response:
        if request.method != "GET":
            return _error("Method not allowed", 405)
        query = request.args.get("q", "")
        if not query:
            return _error("Missing q parameter", 400)
        try:
            results = service.search(query)
        except (VersionError, sqlite3.Error) as exc:
            return _error(str(exc), 500)
        payload = [lib.to_dict() for lib in results] if results else None
        return _json(payload)

    @app.route("/resolve", methods=_ALL_METHODS)
    def resolve() -> Response:
        if request.method != "GET":
            return _error("Method not allowed", 405)
        name = request.args.get("name", "")
        version = request.args.get("version", "")
        if not name or not version:
            return _error("Name and version are required", 400)
        try:
            dependencies = service.resolve_library_dependencies(name, version)
        except Exception as exc:  # every failure is reported to the caller
            logger.error("Error resolving dependencies: %s", exc)
            return _error(f"Error resolving dependencies: {exc}", 500)
        return _json([lib.to_dict() for lib in dependencies])

    return app