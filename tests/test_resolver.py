import pytest

from hvr.database import SQLiteDatabase
from hvr.models import Library
from hvr.resolver import ResolutionError, Resolver
from hvr.versions import parse_version


@pytest.fixture
def db(tmp_path):
    database = SQLiteDatabase(tmp_path / "test.db")
    yield database
    database.close()


def _add(db, name, version, dependencies=None):
    library = Library(
        name=name, version=parse_version(version), dependencies=dependencies or {}
    )
    db.save(library)
    return library


def test_no_dependencies_resolves_to_empty_list(db):
    root = _add(db, "root", "1.0.0")
    assert Resolver(db).resolve_dependencies(root) == []


def test_picks_highest_matching_version(db):
    _add(db, "lib-b", "1.0.0")
    _add(db, "lib-b", "1.5.0")
    _add(db, "lib-b", "2.0.0")
    root = _add(db, "root", "1.0.0", {"lib-b": "^1.0.0"})
    resolved = Resolver(db).resolve_dependencies(root)
    assert [(lib.name, str(lib.version)) for lib in resolved] == [("lib-b", "1.5.0")]


def test_transitive_dependencies_are_included(db):
    _add(db, "lib-c", "3.0.0")
    _add(db, "lib-b", "1.0.0", {"lib-c": ">=3.0.0"})
    root = _add(db, "lib-a", "1.0.0", {"lib-b": "1.0.0"})
    resolved = Resolver(db).resolve_dependencies(root)
    names = sorted(lib.name for lib in resolved)
    assert names == ["lib-b", "lib-c"]
    by_name = {lib.name: lib for lib in resolved}
    assert by_name["lib-b"].dependencies == {"lib-c": ">=3.0.0"}


def test_circular_dependencies_terminate(db):
    a = _add(db, "a", "1.0.0", {"b": "^1.0.0"})
    _add(db, "b", "1.0.0", {"a": "^1.0.0"})
    resolved = Resolver(db).resolve_dependencies(a)
    assert sorted(lib.name for lib in resolved) == ["a", "b"]


def test_invalid_constraint_raises(db):
    _add(db, "lib-b", "1.0.0")
    root = _add(db, "root", "1.0.0", {"lib-b": "not a version"})
    with pytest.raises(ResolutionError, match="invalid version constraint for lib-b"):
        Resolver(db).resolve_dependencies(root)


def test_no_suitable_version_raises(db):
    _add(db, "lib-b", "1.0.0")
    root = _add(db, "root", "1.0.0", {"lib-b": "^3.0.0"})
    with pytest.raises(ResolutionError) as info:
        Resolver(db).resolve_dependencies(root)
    assert str(info.value) == "no suitable version found for lib-b matching ^3.0.0"


def test_missing_dependency_raises(db):
    root = _add(db, "root", "1.0.0", {"ghost": "*"})
    with pytest.raises(ResolutionError, match="no suitable version found for ghost"):
        Resolver(db).resolve_dependencies(root)


def test_long_chain_within_limit_resolves(db):
    for index in range(100):
        _add(db, f"l{index}", "1.0.0", {f"l{index + 1}": "1.0.0"})
    _add(db, "l100", "1.0.0")
    root = db.get("l0", "1.0.0")
    resolved = Resolver(db).resolve_dependencies(root)
    assert len(resolved) == 100


def test_too_deep_chain_raises(db):
    for index in range(105):
        _add(db, f"l{index}", "1.0.0", {f"l{index + 1}": "1.0.0"})
    _add(db, "l105", "1.0.0")
    root = db.get("l0", "1.0.0")
    with pytest.raises(ResolutionError, match="too deep"):
        Resolver(db).resolve_dependencies(root)