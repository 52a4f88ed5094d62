"""Command that starts the registry server."""

from __future__ import annotations

import logging
import re
import sys
from typing import Sequence

from hvr.app import create_app
from hvr.database import SQLiteDatabase
from hvr.filestore import LocalFileStore
from hvr.service import LibraryService

logger = logging.getLogger(__name__)

_DB_PATH = "./hvpm.db"
_FILES_DIR = "./library_files"
_DEFAULT_PORT = "8080"
_PORT_RE = re.compile(r"[+-]?[0-9]+")


def main(argv: Sequence[str] | None = None) -> int:
    """Serve the registry on the port given as first argument (default 8080)."""
    args = list(sys.argv[1:] if argv is None else argv)
    port = args[0] if args else _DEFAULT_PORT

    if not _PORT_RE.fullmatch(port):
        print(f"Invalid port number: {port}", file=sys.stderr)
        return 1

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")

    try:
        db = SQLiteDatabase(_DB_PATH)
    except Exception as exc:
        print(f"Failed to initialize database: {exc}", file=sys.stderr)
        return 1

    with db:
        try:
            file_store = LocalFileStore(_FILES_DIR)
        except OSError as exc:
            print(f"Failed to initialize file store: {exc}", file=sys.stderr)
            return 1

        app = create_app(LibraryService(db, file_store))
        logger.info("Server starting on :%s", port)
        try:
            app.run(host="0.0.0.0", port=int(port))
        except (OSError, OverflowError) as exc:
            print(exc, file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())