"""Version range parser for verlimit.

Turns free-form npm range expressions into :class:`VersionRange` values
and extracts lower/upper bounds from them.

Supported input is deliberately loose, since ``engines`` fields and
dependency specs in the wild are loose:

- ``"14"``, ``"16.x"``, ``"1.2.3"``           → bare
- ``"^14.0.0"``, ``"~1.2"``                  → caret / tilde
- ``">=16"``, ``">16"``, ``"<=18"``, ``"<19"`` → single comparator
- ``">=16.0.0,<=18.0.0"``, ``"^14 || ^16"``   → compound
- ``"latest"``, ``"invalid"``                → invalid (no numeral)

Pre-release and build suffixes (``1.2.3-beta.1``, ``1.0.0+abc``) are
ignored.

Typical usage::

    >>> extract_lower_bound(">=16.0.0,<=18.0.0")
    '16.0.0'
    >>> extract_upper_bound("<19.0.0")
    '18.99.99'
"""

from __future__ import annotations

import re
import functools
from typing import List, Optional, Tuple

from verlimit.models.version_range import (
    OPERATOR_KINDS,
    Comparator,
    RangeKind,
    VersionRange,
)

# Operator (optional), then up to three numeric components. Extra
# components and wildcards (".4", ".x", ".*") are consumed and dropped.
_COMPARATOR_RE = re.compile(
    r"(?P<op>>=|<=|>|<|\^|~|=)?\s*(?P<version>\d+(?:\.\d+){0,2})(?:\.[0-9xX*]+)*"
)

_NUMERIC_RE = re.compile(r"\d+(?:\.\d+){0,2}")

# "-beta.1" / "+build.5" glued to a preceding digit
_SUFFIX_RE = re.compile(r"(?<=\d)[-+][0-9A-Za-z][0-9A-Za-z.-]*")

_INCLUSIVE_UPPER = "<="
_EXCLUSIVE_UPPER = "<"

#: Component value used when an exclusive bound borrows from the left.
_BORROW_CEILING = 99


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def _pad(version: str) -> Tuple[int, int, int]:
    """Split a dotted numeric literal into three ints, padding with zeros."""
    parts = [int(p) for p in version.split(".")[:3]]
    while len(parts) < 3:
        parts.append(0)
    return parts[0], parts[1], parts[2]


def _join(parts: Tuple[int, int, int]) -> str:
    return ".".join(str(p) for p in parts)


def normalize_version(text: Optional[str]) -> Optional[str]:
    """Extract the first version literal in ``text`` as ``major.minor.patch``.

    Args:
        text: Arbitrary text, e.g. ``"^14"`` or ``"node v18.2"``.

    Returns:
        The padded version, or ``None`` if ``text`` has no numeral.

    Examples:
        >>> normalize_version("^14")
        '14.0.0'
        >>> normalize_version("invalid") is None
        True
    """
    if not text:
        return None

    match = _NUMERIC_RE.search(text)
    if match is None:
        return None
    return _join(_pad(match.group(0)))


def decrement_version(version: str) -> str:
    """Return the largest version below ``version``, by one patch unit.

    Borrowing sets the lower components to 99. ``0.0.0`` stays ``0.0.0``.

    Examples:
        >>> decrement_version("19.5.3")
        '19.5.2'
        >>> decrement_version("14.1.0")
        '14.0.99'
        >>> decrement_version("19.0.0")
        '18.99.99'
    """
    major, minor, patch = _pad(version)

    if patch > 0:
        patch -= 1
    elif minor > 0:
        minor -= 1
        patch = _BORROW_CEILING
    elif major > 0:
        major -= 1
        minor = _BORROW_CEILING
        patch = _BORROW_CEILING

    return _join((major, minor, patch))


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=1024)
def parse_range(expression: str) -> VersionRange:
    """Parse a range expression into a :class:`VersionRange`.

    Never raises: text without any numeral yields ``RangeKind.INVALID``.

    Args:
        expression: Raw range text.

    Returns:
        The parsed range.
    """
    cleaned = _SUFFIX_RE.sub("", expression)

    comparators: List[Comparator] = [
        Comparator(
            operator=match.group("op") or "",
            version=_join(_pad(match.group("version"))),
        )
        for match in _COMPARATOR_RE.finditer(cleaned)
    ]

    if not comparators:
        kind = RangeKind.INVALID
    elif len(comparators) == 1:
        kind = OPERATOR_KINDS[comparators[0].operator]
    else:
        kind = RangeKind.COMPOUND

    return VersionRange(raw=expression, kind=kind, comparators=tuple(comparators))


# ---------------------------------------------------------------------------
# Bound extraction
# ---------------------------------------------------------------------------


def lower_bound(version_range: VersionRange) -> Optional[str]:
    """Return the representative minimum version of a parsed range.

    This is the version of the first comparator, whatever its operator.
    For ``"<19.0.0"`` that is ``19.0.0``: a lone upper bound is still
    treated as the range's representative version.
    """
    comparator = version_range.first()
    return comparator.version if comparator else None


def upper_bound(version_range: VersionRange) -> Optional[str]:
    """Return the explicit maximum version of a parsed range.

    An inclusive ``<=`` bound wins over an exclusive ``<`` bound wherever
    they appear. Exclusive bounds are decremented by one patch unit.
    """
    inclusive = version_range.first(_INCLUSIVE_UPPER)
    if inclusive is not None:
        return inclusive.version

    exclusive = version_range.first(_EXCLUSIVE_UPPER)
    if exclusive is not None:
        return decrement_version(exclusive.version)

    return None


def extract_lower_bound(expression: Optional[str]) -> Optional[str]:
    """Parse ``expression`` and return its lower bound (see :func:`lower_bound`)."""
    if not expression:
        return None
    return lower_bound(parse_range(expression))


def extract_upper_bound(expression: Optional[str]) -> Optional[str]:
    """Parse ``expression`` and return its upper bound (see :func:`upper_bound`)."""
    if not expression:
        return None
    return upper_bound(parse_range(expression))
