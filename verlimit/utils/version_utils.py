"""
Version comparison utilities for verlimit.

Versions are dotted numeric strings (``"18"``, ``"16.14"``, ``"8.6.0"``).
Comparison looks at ``(major, minor, patch)`` only; missing trailing
components count as ``0``.
"""

from __future__ import annotations

import functools
from typing import Tuple

from packaging.version import InvalidVersion, Version, parse


def compare_versions(a: str, b: str) -> int:
    """Compare two dotted version strings.

    Args:
        a: First version.
        b: Second version.

    Returns:
        ``-1`` if ``a < b``, ``0`` if equal, ``1`` if ``a > b``.

    Raises:
        InvalidVersion: Either input is not a version string.

    Examples:
        >>> compare_versions("1", "1.0.0")
        0
        >>> compare_versions("1.0", "1.1.0")
        -1
    """
    left = _normalize_release(_parse_version(a))
    right = _normalize_release(_parse_version(b))

    if left < right:
        return -1
    if left > right:
        return 1
    return 0


#: Sort key for lists of version strings, e.g. ``sorted(keys, key=version_key)``.
version_key = functools.cmp_to_key(compare_versions)


def _parse_version(value: str) -> Version:
    """Parse a version string into a PEP 440 Version object."""
    parsed = parse(value.strip())
    if not isinstance(parsed, Version):
        raise InvalidVersion(value)
    return parsed


def _normalize_release(version: Version) -> Tuple[int, int, int]:
    """Normalize a version's release segment to (major, minor, patch)."""
    release = version.release
    major = release[0] if len(release) > 0 else 0
    minor = release[1] if len(release) > 1 else 0
    patch = release[2] if len(release) > 2 else 0
    return major, minor, patch
