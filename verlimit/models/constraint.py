"""
Raw constraint model for verlimit.

A :class:`RawConstraint` records one Node.js/npm requirement found while
scanning a project, tagged with where it came from.
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass
from typing import Any, Dict, Optional


class ConstraintSource(str, Enum):
    """Origin of a raw constraint."""

    ENGINES = "engines"
    DEPENDENCY = "dependency"
    DEV_DEPENDENCY = "devDependency"
    LOCKFILE = "lockfile"

    @property
    def is_engines(self) -> bool:
        return self is ConstraintSource.ENGINES


@dataclass(frozen=True)
class RawConstraint:
    """An origin-tagged Node.js/npm requirement.

    Attributes:
        name: Project name (engines) or package name (dependencies).
        node_version: Node.js range expression, if any.
        npm_version: npm range expression, if any. Only engines
            constraints carry one.
        source: Where the constraint was found.
    """

    name: str
    node_version: Optional[str]
    npm_version: Optional[str] = None
    source: ConstraintSource = ConstraintSource.DEPENDENCY

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-safe dictionary using the manifest's key style."""
        return {
            "name": self.name,
            "nodeVersion": self.node_version,
            "npmVersion": self.npm_version,
            "source": self.source.value,
        }
