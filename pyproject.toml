[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hvr"
version = "0.1.0"
description = "A registry for Hamilton Venus libraries: an HTTP server, a command-line client and semantic-version dependency resolution."
requires-python = ">=3.10"
keywords = ["registry", "package-manager", "semver", "dependencies", "hamilton", "venus"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Software Distribution",
]
dependencies = [
    "blessed",
    "flask",
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
hvr = "hvr.cli:main"
hvr-server = "hvr.server:main"
hvr-make-test-zip = "hvr.archive:main"

[tool.hatch.build.targets.wheel]
packages = ["hvr"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
