"""
Restricted semantic-version ranges.

Grammar: up to two whitespace-separated clauses, ``>=X.Y.Z`` (inclusive lower
bound) and ``<X.Y.Z`` (exclusive upper bound), in any order. Versions are
exactly three dot-separated non-negative integers. Anything richer (``^``,
``~``, ``||``, ``>``, ``<=``, ``=``, pre-release or build tags) is rejected
with an error instead of being approximated.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from oiml.core.errors import RangeSyntaxError, VersionSyntaxError

Version = Tuple[int, int, int]

_VERSION_RE = re.compile(r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)$")
_CLAUSE_RE = re.compile(r"^(>=|<)(.+)$")


def parse_version(raw: str) -> Version:
    text = (raw or "").strip()
    m = _VERSION_RE.match(text)
    if not m:
        raise VersionSyntaxError(f"Invalid version {raw!r}: expected MAJOR.MINOR.PATCH")
    return int(m.group(1)), int(m.group(2)), int(m.group(3))


@dataclass(frozen=True)
class VersionRange:
    lower: Optional[Version] = None
    upper: Optional[Version] = None

    def contains(self, version: Version) -> bool:
        if self.lower is not None and not _at_least(version, self.lower):
            return False
        if self.upper is not None and not _below(version, self.upper):
            return False
        return True


def _at_least(version: Version, bound: Version) -> bool:
    for v, b in zip(version, bound):
        if v < b:
            return False
        if v > b:
            return True
    return True


def _below(version: Version, bound: Version) -> bool:
    for v, b in zip(version, bound):
        if v < b:
            return True
        if v > b:
            return False
    # equal on every component
    return False


def parse_range(raw: str) -> VersionRange:
    text = (raw or "").strip()
    if not text:
        return VersionRange()
    if "||" in text:
        raise RangeSyntaxError(f"Unsupported range {raw!r}: '||' alternatives are not supported")

    lower: Optional[Version] = None
    upper: Optional[Version] = None

    for clause in text.split():
        m = _CLAUSE_RE.match(clause)
        if not m:
            raise RangeSyntaxError(f"Unsupported range clause {clause!r} in {raw!r}: only '>=' and '<' are allowed")
        op, operand = m.group(1), m.group(2)
        if operand.startswith("="):
            # "<=" parses as "<" with operand "=X.Y.Z"
            raise RangeSyntaxError(f"Unsupported range clause {clause!r} in {raw!r}: only '>=' and '<' are allowed")
        try:
            bound = parse_version(operand)
        except VersionSyntaxError as exc:
            raise RangeSyntaxError(f"Invalid bound in range {raw!r}: {exc}") from exc

        if op == ">=":
            if lower is not None:
                raise RangeSyntaxError(f"Range {raw!r} has more than one '>=' clause")
            lower = bound
        else:
            if upper is not None:
                raise RangeSyntaxError(f"Range {raw!r} has more than one '<' clause")
            upper = bound

    return VersionRange(lower=lower, upper=upper)


def satisfies_range(version: str, range_: str) -> bool:
    """
    >>> satisfies_range("1.2.3", ">=1.0.0 <2.0.0")
    True
    >>> satisfies_range("2.0.0", ">=1.0.0 <2.0.0")
    False
    """
    return parse_range(range_).contains(parse_version(version))
