"""Semantic versions and version constraints."""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass


class VersionError(ValueError):
    """Raised for a malformed version or version constraint."""


_IDENT = r"[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*"
_VERSION_RE = re.compile(
    rf"v?([0-9]+)(?:\.([0-9]+))?(?:\.([0-9]+))?(?:-({_IDENT}))?(?:\+({_IDENT}))?"
)


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """A semantic version; build metadata is ignored when comparing."""

    major: int
    minor: int = 0
    patch: int = 0
    prerelease: str = ""
    metadata: str = ""

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.metadata:
            text += f"+{self.metadata}"
        return text

    def _key(self) -> tuple:
        pre = tuple(
            (0, int(part), "") if part.isdigit() else (1, 0, part)
            for part in self.prerelease.split(".")
        ) if self.prerelease else ()
        return (self.major, self.minor, self.patch, not self.prerelease, pre)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())


def parse_version(text: str) -> Version:
    """Parse a version, allowing a leading "v" and missing minor or patch."""
    match = _VERSION_RE.fullmatch(text)
    if match is None:
        raise VersionError(f"invalid semantic version: {text!r}")
    major, minor, patch, pre, meta = match.groups()
    return Version(int(major), int(minor or 0), int(patch or 0), pre or "", meta or "")


_PART = r"(?:[0-9]+|[xX*])"
_TERM_RE = re.compile(
    rf"\s*(>=|=>|<=|=<|!=|~>|>|<|=|~|\^)?\s*"
    rf"(v?{_PART}(?:\.{_PART}){{0,2}}(?:-{_IDENT})?(?:\+{_IDENT})?)\s*,?\s*"
)
_RANGE_RE = re.compile(r"(\S+)\s+-\s+(\S+)")
_OP_ALIASES = {"": "=", "=>": ">=", "=<": "<=", "~>": "~"}


@dataclass(frozen=True)
class _Term:
    op: str
    version: Version
    precision: int  # number of parts given before a wildcard: 0 to 3

    def _head(self, v: Version) -> tuple[int, ...]:
        return (v.major, v.minor, v.patch)[: self.precision]

    def matches(self, v: Version) -> bool:
        con, p = self.version, self.precision
        if v.prerelease and not con.prerelease:
            return False
        exact = p in (0, 3)
        if self.op == "=":
            return v == con if p == 3 else self._tilde(v)
        if self.op == "!=":
            return p != 0 and (v != con if p == 3 else self._head(v) != self._head(con))
        if self.op == ">":
            return v > con if exact else self._head(v) > self._head(con)
        if self.op == "<":
            return v < con
        if self.op == ">=":
            return v >= con
        if self.op == "<=":
            return v <= con if exact else self._head(v) <= self._head(con)
        if self.op == "~":
            return self._tilde(v)
        return self._caret(v)

    def _tilde(self, v: Version) -> bool:
        con, p = self.version, self.precision
        if p == 0:
            return True
        if v < con:
            return False
        if (con.major, con.minor, con.patch) == (0, 0, 0) and p == 3:
            return True
        return v.major == con.major and (p == 1 or v.minor == con.minor)

    def _caret(self, v: Version) -> bool:
        con, p = self.version, self.precision
        if p == 0:
            return True
        if v < con:
            return False
        if con.major > 0 or p == 1:
            return v.major == con.major
        if v.major > 0:
            return False
        if con.minor > 0 or p == 2:
            return v.minor == con.minor
        return v.minor == 0 and v.patch == con.patch


def _parse_term(op: str, text: str) -> _Term:
    body, _, meta = text.lstrip("v").partition("+")
    numbers, _, pre = body.partition("-")
    parts = numbers.split(".")
    precision = next(
        (i for i, part in enumerate(parts) if part in ("x", "X", "*")), len(parts)
    )
    values = [int(part) for part in parts[:precision]] + [0] * (3 - precision)
    return _Term(_OP_ALIASES.get(op, op), Version(*values, pre, meta), precision)


@dataclass(frozen=True)
class Constraint:
    """A set of alternatives ("||"), each a conjunction of version terms."""

    original: str
    alternatives: tuple[tuple[_Term, ...], ...]

    def __str__(self) -> str:
        return self.original

    def check(self, version: Version | str) -> bool:
        """Return whether the version satisfies the constraint."""
        if isinstance(version, str):
            version = parse_version(version)
        return any(all(t.matches(version) for t in terms) for terms in self.alternatives)


def parse_constraint(text: str) -> Constraint:
    """Parse a constraint such as "^1.2", ">=1.0, <2.0" or "1.0 - 2.0 || 3.x"."""
    alternatives = []
    for part in text.split("||"):
        part = _RANGE_RE.sub(r">=\1 <=\2", part)
        terms, pos = [], 0
        while pos < len(part):
            match = _TERM_RE.match(part, pos)
            if match is None:
                raise VersionError(f"improper constraint: {text}")
            terms.append(_parse_term(match[1] or "", match[2]))
            pos = match.end()
        if not terms:
            raise VersionError(f"improper constraint: {text}")
        alternatives.append(tuple(terms))
    return Constraint(text, tuple(alternatives))