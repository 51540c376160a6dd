"""
Parsed version range model for verlimit.

A raw range expression such as ``">=16.0.0,<=18.0.0"`` is parsed once
into a :class:`VersionRange`; bound extraction then works on its
comparators instead of re-scanning the text.
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass
from typing import Optional, Tuple


class RangeKind(str, Enum):
    """Shape of a parsed range expression."""

    BARE = "bare"  # "14", "1.2.3", "16.x"
    CARET = "caret"  # "^14.0.0"
    TILDE = "tilde"  # "~1.2.0"
    GTE = "gte"  # ">=16"
    GT = "gt"  # ">16"
    LTE = "lte"  # "<=18"
    LT = "lt"  # "<19.0.0"
    EXACT = "exact"  # "=1.2.3"
    COMPOUND = "compound"  # ">=16 <19", "^14 || ^16"
    INVALID = "invalid"  # no numeral at all


#: Operator token → kind for single-comparator ranges.
OPERATOR_KINDS = {
    "": RangeKind.BARE,
    "^": RangeKind.CARET,
    "~": RangeKind.TILDE,
    ">=": RangeKind.GTE,
    ">": RangeKind.GT,
    "<=": RangeKind.LTE,
    "<": RangeKind.LT,
    "=": RangeKind.EXACT,
}


@dataclass(frozen=True)
class Comparator:
    """One ``operator version`` pair of a range.

    Attributes:
        operator: Operator token (``""`` for a bare version).
        version: Version normalized to ``major.minor.patch``.
    """

    operator: str
    version: str

    def __str__(self) -> str:
        return f"{self.operator}{self.version}"


@dataclass(frozen=True)
class VersionRange:
    """A parsed version range expression.

    Attributes:
        raw: Original expression text.
        kind: Shape of the expression.
        comparators: Comparators in the order they appear.
    """

    raw: str
    kind: RangeKind
    comparators: Tuple[Comparator, ...] = ()

    @property
    def is_valid(self) -> bool:
        return self.kind is not RangeKind.INVALID

    def first(self, *operators: str) -> Optional[Comparator]:
        """Return the first comparator using one of ``operators``.

        With no arguments, returns the first comparator of any kind.
        """
        for comparator in self.comparators:
            if not operators or comparator.operator in operators:
                return comparator
        return None
