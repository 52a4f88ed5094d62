# hvr

A small registry for Hamilton Venus libraries. It has two parts:

* **`hvr-server`** is an HTTP server (Flask). It stores versioned libraries
  as zip archives and keeps their metadata in a SQLite database.
* **`hvr`** is a command-line client. It uploads, downloads and resolves
  libraries against that server.

Versions follow semantic versioning. A leading `v` is accepted, and a
missing minor or patch number counts as `0`. Dependencies are declared as
`name -> constraint` pairs, for example `dep1: ^1.0.0`. Constraints can use:

* the operators `=`, `!=`, `>`, `<`, `>=`, `<=`, `~` and `^`;
* wildcards such as `1.x` or `2.*`;
* ranges such as `1.0 - 2.0`;
* comma- or space-separated conjunctions;
* `||` alternatives.

To resolve dependencies, the server picks for each constraint the highest
stored version that satisfies it. It then resolves that version's own
dependencies in the same way, down to a depth of 100.

## Installation

```
pip install .
```

To run the tests, install the test extra and run pytest:

```
pip install ".[test]"
pytest
```

## Running the server

```
hvr-server          # listens on port 8080
hvr-server 9000     # listens on port 9000
```

The port must be an integer. Anything else makes the server exit with
`Invalid port number: <port>`.

The server works in the current directory:

* the database is `./hvpm.db`;
* the archives are stored as `./library_files/<name>/<version>.zip`.

The server listens on all interfaces and uses Flask's built-in server.

### Endpoints

| Method | Path        | Parameters                                    | Result                                                    |
|--------|-------------|-----------------------------------------------|-----------------------------------------------------------|
| any    | `/`         |                                               | `Welcome to Hamilton Venus Registry!`                     |
| POST   | `/upload`   | multipart form (see below)                    | `201` with a JSON message; `409` if the version exists    |
| GET    | `/download` | `name`, optional `version` (default `latest`) | The zip archive                                           |
| GET    | `/search`   | `q`                                           | JSON list of libraries whose names contain `q`, or `null` |
| GET    | `/resolve`  | `name`, `version`                             | JSON list of the resolved dependencies                    |

A request to one of these paths with the wrong method gets `405`. A request
that lacks a required parameter gets `400`.

An upload form carries these fields:

* `name`;
* `version`, which must be a valid semantic version;
* `file`;
* `description`, `author` and `repoURL`;
* `dependencies`, a JSON object of strings or `null`;
* `modTime`, optional, in Unix seconds. If it is missing or invalid, the
  current time is used.

The uploaded file is wrapped in a zip archive, under its own base name,
before it is stored. A version that has already been published cannot be
overwritten.

A download answers with the content type `application/zip` and sets these
headers:

* `Content-Disposition`: `attachment; filename=<name>-<version>.zip`, where
  `<version>` is the version as requested, so it may be `latest`;
* `X-File-Hash`: the SHA-256 of the archive;
* `X-File-ModTime`: the archive's modification time in Unix seconds.

## Using the client

By default the client talks to `http://localhost:8080`. To use another
server, give `--server URL` before the command:

```
hvr --server http://localhost:9000 download my-lib
```

When a command fails, the client prints `Error: <message>` to standard error
and exits with status 1.

### Upload a library

```
hvr upload build/my-lib.zip --name my-lib --version 1.0.0 \
    --description "Liquid handling helpers" --author "Lab Automation" \
    --dependencies dep1=^1.0.0,dep2=~2.0.0
```

* `--name` and `--version` are required.
* `--dependencies` takes comma-separated `name=constraint` pairs and may be
  given more than once.
* `--repo-url` sets the repository URL.

The file's modification time is sent along with the upload.

### Upload from a metadata file

```
hvr uploadmeta hvr.json
```

The metadata file is a JSON object:

```json
{
  "name": "my-lib",
  "version": "1.2.0",
  "description": "Liquid handling helpers",
  "author": "Lab Automation",
  "repo_url": "",
  "files": ["src/*.hsl", "README.txt"],
  "dependencies": {"dep1": "^1.0.0"}
}
```

Each entry in `files` is a glob pattern. Every file it matches is packed,
deflated and under its given path, into a temporary zip archive. That
archive is then uploaded and removed afterwards.

### Download a library

```
hvr download my-lib            # latest version
hvr download my-lib 1.0.0
hvr download my-lib 1.0.0 -o libs/
```

The archive is saved in the current directory, or in the directory given
with `-o/--output`. It takes the file name from the server's
`Content-Disposition` header.

The archive's SHA-256 is checked against the `X-File-Hash` header. If they
differ, the file is deleted and the command fails. The file's modification
time is then set from `X-File-ModTime`.

### Resolve dependencies

```
hvr resolve my-lib 1.0.0
```

This prints each resolved dependency as `- <name> (<version>)`.

### Search

```
hvr search test
hvr search test --json
```

This prints the matching entries as `<name> (<version>)`, or
`No libraries found` if there are none. With `--json` the results are
printed as a JSON list of `{"name": ..., "version": ...}` objects.

### Install

```
hvr install my-lib 1.0.0
hvr install my-lib --dir third_party
```

This creates an empty marker file `<name>-<version>.txt` in the install
directory. The directory is `vendor` by default and is created if needed.
The version defaults to `latest`, and an empty version is rejected.

### Building a test archive

```
hvr-make-test-zip [SOURCE_DIR] [OUTPUT_ZIP]
```

This zips every file below `SOURCE_DIR` into `OUTPUT_ZIP`, named relative to
`SOURCE_DIR`. The defaults are `testdata/libraries/lib-a` and
`testdata/test-lib.zip`.

## Using it as a library

The parts can also be used from Python:

* `hvr.versions`: `parse_version`, `parse_constraint`, `Version`, `Constraint`.
* `hvr.database.SQLiteDatabase`: the record store.
* `hvr.filestore.LocalFileStore`: the archive store.
* `hvr.service.LibraryService`: upload, download, search and resolve.
* `hvr.app.create_app`: builds the Flask application around a service.
* `hvr.client`: `upload_library`, `download_library` and
  `resolve_dependencies` for talking to a running server.

## Interactive screens

`hvr.ui` has terminal screens built on blessed. They need a terminal.

* `run_main_tui()` shows a menu of Upload, Download, Search and Quit. Use
  `up`/`k` and `down`/`j` to move, and `enter` or space to pick.
* `run_download_tui()`, `run_search_tui()` and `run_upload_tui()` ask for
  their fields one after another and return what was typed.

In every screen, `q` or Ctrl+C closes it.

## What it does not do

* `hvr install` does not download or unpack anything. It only writes the
  empty marker file.
* `hvr search` does not ask the server. It filters a fixed built-in list of
  two entries, `test-lib` (1.0.0) and `another-lib` (2.0.0). Use the server's
  `/search` endpoint to search the stored libraries.
* The interactive screens only collect input. No `hvr` command opens them,
  and they do not upload, download or search anything.
* There is no authentication. Anyone who can reach the server can upload.