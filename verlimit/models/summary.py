"""
Reconciled summary model for verlimit.

A :class:`Summary` is the single result of an analysis run: the lowest and
highest Node.js/npm versions the project is compatible with, plus which
kind of constraint determined the minimum.
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from verlimit.constants import LATEST_COMPATIBLE, UNLIMITED


class SummarySource(str, Enum):
    """Which bucket of constraints determined the Node.js minimum."""

    ENGINES = "engines"
    DEPENDENCIES = "dependencies"
    NONE = "none"


@dataclass(frozen=True)
class VersionBounds:
    """A Node.js/npm version pair.

    On the ``highest`` side the values may be the sentinels
    ``"unlimited"`` (node) and ``"latest compatible"`` (npm).
    """

    node: Optional[str] = None
    npm: Optional[str] = None

    def to_json(self) -> Dict[str, Optional[str]]:
        return {"node": self.node, "npm": self.npm}


@dataclass(frozen=True)
class Summary:
    """Reconciled version range of a project.

    Attributes:
        lowest: Tightest minimum Node.js version and its npm version.
        highest: Tightest maximum Node.js version and its npm version.
        source: Origin of the Node.js minimum.
    """

    lowest: VersionBounds = field(default_factory=VersionBounds)
    highest: VersionBounds = field(default_factory=VersionBounds)
    source: SummarySource = SummarySource.NONE

    @classmethod
    def empty(cls) -> "Summary":
        """Return the summary for a project with no usable constraints."""
        return cls()

    @property
    def has_constraints(self) -> bool:
        return self.lowest.node is not None

    @property
    def has_node_ceiling(self) -> bool:
        """True if ``highest.node`` is a concrete version."""
        return self.highest.node not in (None, UNLIMITED)

    @property
    def has_npm_ceiling(self) -> bool:
        """True if ``highest.npm`` is a concrete version."""
        return self.highest.npm not in (None, LATEST_COMPATIBLE)

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-safe dictionary of the summary."""
        return {
            "lowest": self.lowest.to_json(),
            "highest": self.highest.to_json(),
            "source": self.source.value,
        }
