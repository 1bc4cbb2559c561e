"""Semantic version validation and range matching.

Release versions follow SemVer 2.0.0 and user constraints use the npm range
grammar (``>=1.0.0 <2.0.0``, ``^0.4``, ``~1.2.3``, ``1.x``, ``1.0.0 - 1.4``,
``a || b``). Ranges are translated onto ``packaging`` specifier sets, one set
per ``||`` alternative:

    >>> satisfies("1.4.0", ">=1.0.0 <2.0.0")
    True
    >>> satisfies("0.5.0", "^0.4.0")
    False

A prerelease version only satisfies a comparator set that itself names a
prerelease of the same ``MAJOR.MINOR.PATCH``, as npm does.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from packaging.specifiers import InvalidSpecifier, Specifier, SpecifierSet
from packaging.version import InvalidVersion, Version

from hcp_setup.core.result import Err, Ok, Result

__all__ = [
    "WILDCARD",
    "InvalidRangeError",
    "VersionRange",
    "clean",
    "is_valid",
    "parse_range",
    "parse_version",
    "satisfies",
]

WILDCARD = "*"

_IDENT = r"(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
_PRERELEASE = rf"{_IDENT}(?:\.{_IDENT})*"
_BUILD = r"[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*"

_SEMVER_RE = re.compile(
    r"^[v=\s]*"
    r"(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    rf"(?:-({_PRERELEASE}))?"
    rf"(?:\+({_BUILD}))?\s*$"
)

_XR = r"(?:0|[1-9]\d*|[xX*])"
_PARTIAL_RE = re.compile(
    rf"^[v=]*({_XR})(?:\.({_XR})(?:\.({_XR})(?:-({_PRERELEASE}))?(?:\+{_BUILD})?)?)?$"
)

_OPERATOR_SPACE_RE = re.compile(r"(<=|>=|<|>|=|\^|~>|~)\s+")
_HYPHEN_RE = re.compile(r"^(\S+)\s+-\s+(\S+)$")
_COMPARATOR_RE = re.compile(r"^(<=|>=|<|>|=|\^|~>|~)?(.+)$")

# Upper bound that nothing satisfies, for comparators like "<*".
_NOTHING = "<0.0.0"


@dataclass(frozen=True, slots=True)
class InvalidRangeError:
    """A version constraint that cannot be parsed."""

    expr: str
    message: str

    def __str__(self) -> str:
        return f"invalid version constraint {self.expr!r}: {self.message}"


def _match(version: str) -> re.Match[str] | None:
    return _SEMVER_RE.match(version)


def is_valid(version: str) -> bool:
    """Return True if ``version`` is a single exact semantic version.

    A leading ``v`` or ``=`` is tolerated ("v1.2.3" is valid).
    """
    return _match(version) is not None


def clean(version: str) -> str | None:
    """Return the normalized form of an exact version, or None if invalid.

    Example: clean("v1.2.3") -> "1.2.3"
    """
    m = _match(version)
    if m is None:
        return None
    major, minor, patch, pre, build = m.groups()
    text = f"{major}.{minor}.{patch}"
    if pre:
        text += f"-{pre}"
    if build:
        text += f"+{build}"
    return text


def parse_version(version: str) -> Version | None:
    """Parse a semantic version into a comparable ``Version``.

    Build metadata is dropped since it never affects precedence. Returns None
    for invalid versions and for prerelease tags PEP 440 cannot express.
    """
    m = _match(version)
    if m is None:
        return None
    major, minor, patch, pre, _build = m.groups()
    try:
        return _pep440(f"{major}.{minor}.{patch}", pre)
    except InvalidVersion:
        return None


def _pep440(release: str, prerelease: str | None) -> Version:
    """Map ``MAJOR.MINOR.PATCH[-pre]`` onto a ``Version`` with the same precedence.

    A numeric tag ("1.2.3-0") becomes a dev release, which sorts below alpha,
    beta and rc just as numeric identifiers sort first in semver. Any other
    tag must read as a/b/rc; tags PEP 440 would take for a post or dev
    release ("1.2.3-r1", "1.2.3-dev") raise InvalidVersion.
    """
    if not prerelease:
        return Version(release)
    if prerelease.isdigit():
        return Version(f"{release}.dev{prerelease}")
    version = Version(f"{release}-{prerelease}")
    if version.pre is None or version.post is not None or version.dev is not None:
        raise InvalidVersion(f"prerelease tag {prerelease!r} is not a/b/rc")
    return version


@dataclass(frozen=True, slots=True)
class _Partial:
    major: int | None
    minor: int | None
    patch: int | None
    prerelease: str | None = None

    @property
    def is_full(self) -> bool:
        return self.patch is not None

    def floor(self) -> str:
        release = f"{self.major or 0}.{self.minor or 0}.{self.patch or 0}"
        prerelease = self.prerelease if self.is_full else None
        try:
            return str(_pep440(release, prerelease))
        except InvalidVersion as e:
            raise ValueError(f"unsupported version {release}-{prerelease}") from e

    def ceiling(self) -> str:
        """Smallest version above every version this partial covers."""
        if self.major is None:
            raise ValueError("a wildcard has no upper bound")
        if self.minor is None:
            return f"{self.major + 1}.0.0"
        return f"{self.major}.{self.minor + 1}.0"


def _parse_partial(text: str) -> _Partial | None:
    m = _PARTIAL_RE.match(text)
    if m is None:
        return None
    parts: list[int | None] = []
    for raw in m.groups()[:3]:
        if raw is None or raw in ("x", "X", "*") or (parts and parts[-1] is None):
            parts.append(None)
        else:
            parts.append(int(raw))
    prerelease = m.group(4) if parts[2] is not None else None
    return _Partial(parts[0], parts[1], parts[2], prerelease)


_EXACT_OPS = {"": "==", "=": "==", ">=": ">=", ">": ">", "<": "<", "<=": "<="}


def _primitive(op: str, p: _Partial) -> list[str]:
    if p.major is None:
        return [_NOTHING] if op in ("<", ">") else []
    if p.is_full:
        return [f"{_EXACT_OPS[op]}{p.floor()}"]
    match op:
        case "" | "=":
            return [f">={p.floor()}", f"<{p.ceiling()}"]
        case ">=":
            return [f">={p.floor()}"]
        case ">":
            return [f">={p.ceiling()}"]
        case "<":
            return [f"<{p.floor()}"]
        case "<=":
            return [f"<{p.ceiling()}"]
        case _:
            raise ValueError(f"unknown operator {op!r}")


def _caret(p: _Partial) -> list[str]:
    if p.major is None:
        return []
    if p.major > 0 or p.minor is None:
        upper = f"{p.major + 1}.0.0"
    elif p.minor > 0 or p.patch is None:
        upper = f"0.{p.minor + 1}.0"
    else:
        upper = f"0.0.{p.patch + 1}"
    return [f">={p.floor()}", f"<{upper}"]


def _tilde(p: _Partial) -> list[str]:
    if p.major is None:
        return []
    return [f">={p.floor()}", f"<{p.ceiling()}"]


def _hyphen(low: _Partial, high: _Partial) -> list[str]:
    specs: list[str] = []
    if low.major is not None:
        specs.append(f">={low.floor()}")
    if high.major is not None:
        specs.append(f"<={high.floor()}" if high.is_full else f"<{high.ceiling()}")
    return specs


@dataclass(frozen=True, slots=True)
class _ComparatorSet:
    specifiers: SpecifierSet
    prerelease_bases: frozenset[tuple[int, int, int]]

    def contains(self, version: Version) -> bool:
        if version.is_prerelease and version.release[:3] not in self.prerelease_bases:
            return False
        return all(_admits(spec, version) for spec in self.specifiers)


def _admits(spec: Specifier, version: Version) -> bool:
    # PEP 440 "<V" never admits prereleases of V; plain precedence does.
    match spec.operator:
        case "<":
            return version < Version(spec.version)
        case ">":
            return version > Version(spec.version)
        case _:
            return spec.contains(version, prereleases=True)


def _parse_set(text: str) -> _ComparatorSet:
    text = _OPERATOR_SPACE_RE.sub(r"\1", text.strip())
    specs: list[str] = []
    bases: set[tuple[int, int, int]] = set()

    def note(p: _Partial) -> None:
        if p.prerelease and p.major is not None and p.minor is not None and p.patch is not None:
            bases.add((p.major, p.minor, p.patch))

    hyphen = _HYPHEN_RE.match(text)
    if hyphen:
        low, high = _parse_partial(hyphen.group(1)), _parse_partial(hyphen.group(2))
        if low is None or high is None:
            raise ValueError(f"bad hyphen range {text!r}")
        note(low)
        note(high)
        specs.extend(_hyphen(low, high))
    else:
        for token in text.split():
            m = _COMPARATOR_RE.match(token)
            partial = _parse_partial(m.group(2)) if m else None
            if m is None or partial is None:
                raise ValueError(f"bad comparator {token!r}")
            op = m.group(1) or ""
            note(partial)
            if op == "^":
                specs.extend(_caret(partial))
            elif op in ("~", "~>"):
                specs.extend(_tilde(partial))
            else:
                specs.extend(_primitive(op, partial))

    try:
        specifiers = SpecifierSet(",".join(specs))
    except InvalidSpecifier as e:
        raise ValueError(str(e)) from e
    return _ComparatorSet(specifiers=specifiers, prerelease_bases=frozenset(bases))


@dataclass(frozen=True, slots=True)
class VersionRange:
    """A parsed version constraint: any one of its comparator sets must hold."""

    expr: str
    sets: tuple[_ComparatorSet, ...]

    def contains(self, version: str) -> bool:
        """Return True if ``version`` is a valid semver satisfying the range."""
        parsed = parse_version(version)
        if parsed is None:
            return False
        return any(s.contains(parsed) for s in self.sets)

    def __contains__(self, version: str) -> bool:
        return self.contains(version)

    def __str__(self) -> str:
        return self.expr


def parse_range(expr: str) -> Result[VersionRange, InvalidRangeError]:
    """Parse an npm-style range expression.

    An empty expression, ``*`` and ``x`` match every non-prerelease version.

    Returns:
        Ok with the VersionRange, or Err with InvalidRangeError
    """
    sets: list[_ComparatorSet] = []
    for alternative in expr.strip().split("||"):
        try:
            sets.append(_parse_set(alternative))
        except ValueError as e:
            return Err(InvalidRangeError(expr=expr, message=str(e)))
    return Ok(VersionRange(expr=expr, sets=tuple(sets)))


def satisfies(version: str, expr: str) -> bool:
    """Return True if ``version`` satisfies ``expr`` (False for invalid ranges)."""
    return parse_range(expr).map(lambda r: r.contains(version)).unwrap_or(False)
