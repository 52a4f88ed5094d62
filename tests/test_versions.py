import random

import pytest

from hvr.versions import VersionError, parse_constraint, parse_version


def test_round_trip_full_version():
    text = "1.2.3-beta.1+build.5"
    version = parse_version(text)
    assert str(version) == text
    assert version.prerelease == "beta.1"
    assert version.metadata == "build.5"


def test_short_forms_are_normalised():
    assert str(parse_version("v1.2")) == "1.2.0"
    assert parse_version("1") == parse_version("1.0.0")
    assert str(parse_version("v1.0.0")) == "1.0.0"


@pytest.mark.parametrize("text", ["", "abc", "1.2.3.4", "1.0.0-01", "1.0.0-", "v"])
def test_invalid_versions(text):
    with pytest.raises(VersionError):
        parse_version(text)


def test_metadata_ignored_in_equality():
    assert parse_version("1.0.0+a") == parse_version("1.0.0+b")
    assert hash(parse_version("1.0.0+a")) == hash(parse_version("1.0.0+b"))


def test_precedence_order():
    ordered = [
        "1.0.0-alpha",
        "1.0.0-alpha.1",
        "1.0.0-alpha.beta",
        "1.0.0-beta",
        "1.0.0-beta.2",
        "1.0.0-beta.11",
        "1.0.0-rc.1",
        "1.0.0",
        "1.9.0",
        "1.10.0",
        "2.0.0",
    ]
    shuffled = ordered[:]
    random.Random(7).shuffle(shuffled)
    result = sorted((parse_version(t) for t in shuffled))
    assert [str(v) for v in result] == ordered


def test_greater_than():
    assert parse_version("1.10.0") > parse_version("1.9.0")
    assert parse_version("2.0.0-rc.1") < parse_version("2.0.0")


@pytest.mark.parametrize(
    "constraint, version",
    [
        ("^1.2.0", "1.9.9"),
        ("~2.0.0", "2.0.5"),
        ("1.2", "1.2.7"),
        ("1.2.x", "1.2.0"),
        ("*", "3.4.5"),
        (">=1.0.0, <2.0.0", "1.5.0"),
        (">=1.0.0 <2.0.0", "1.0.0"),
        ("1.0.0 - 2.0.0", "2.0.0"),
        ("<1.0.0 || >=3.0.0", "3.1.0"),
        ("!=1.0.0", "1.0.1"),
        ("^0.2.3", "0.2.9"),
        ("=1.0.0", "v1.0.0"),
        ("<=1.2", "1.2.9"),
        (">1.2", "1.3.0"),
        ("~1", "1.9.0"),
        ("^1.0.0-beta", "1.0.0-beta.2"),
    ],
)
def test_constraint_matches(constraint, version):
    assert parse_constraint(constraint).check(parse_version(version))


@pytest.mark.parametrize(
    "constraint, version",
    [
        ("^1.2.0", "2.0.0"),
        ("^1.2.0", "1.1.9"),
        ("~2.0.0", "2.1.0"),
        ("1.2", "1.3.0"),
        (">=1.0.0 <2.0.0", "2.0.0"),
        ("^1.0.0", "1.5.0-beta"),
        ("^0.2.3", "0.3.0"),
        (">1.2", "1.2.9"),
        ("!=1.0.0", "1.0.0"),
        ("<1.0.0 || >=3.0.0", "2.0.0"),
    ],
)
def test_constraint_rejects(constraint, version):
    assert not parse_constraint(constraint).check(parse_version(version))


def test_check_accepts_string():
    constraint = parse_constraint("~2.0.0")
    assert constraint.check("2.0.3")
    assert not constraint.check("2.1.0")


def test_constraint_keeps_original_text():
    assert str(parse_constraint("^1.0.0")) == "^1.0.0"


@pytest.mark.parametrize("text", ["", "abc", ">>1.0.0", "^1.0.0 ||"])
def test_invalid_constraints(text):
    with pytest.raises(VersionError):
        parse_constraint(text)