"""
Unified data model exports for verlimit.

Example:
    >>> from verlimit.models import RawConstraint, Summary, VersionRange
"""

from __future__ import annotations

from verlimit.models.constraint import ConstraintSource, RawConstraint
from verlimit.models.summary import Summary, SummarySource, VersionBounds
from verlimit.models.version_range import Comparator, RangeKind, VersionRange

__all__ = [
    "Comparator",
    "ConstraintSource",
    "RangeKind",
    "RawConstraint",
    "Summary",
    "SummarySource",
    "VersionBounds",
    "VersionRange",
]
