"""
verlimit: Node.js engine range inference

verlimit inspects a Node.js project's ``package.json`` and
``package-lock.json`` and infers the narrowest Node.js/npm version range
implied by declared engine constraints and known dependency requirements.
The reconciled range can then be written back into ``package.json``.

Features include:
    • Engine constraint extraction (``engines.node``, ``engines.npm``,
      ``packageManager``)
    • Built-in knowledge of popular packages' Node.js requirements
    • Lockfile scanning (npm v7+ ``packages`` and legacy ``dependencies``)
    • Range reconciliation (highest minimum, lowest maximum)
    • Safe, atomic ``package.json`` updates

The analysis is a best-effort heuristic: no registry is consulted and no
full dependency graph is resolved.
"""

from __future__ import annotations

from verlimit.__version__ import __version__

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "verlimit Contributors"
__license__ = "Apache-2.0"
__description__ = "Infer the Node.js and npm version range a project supports."

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

from verlimit.core import (
    ConstraintCollector,
    NodeNpmTable,
    PackageRequirementTable,
    reconcile,
    update_manifest_engines,
)
from verlimit.models import RawConstraint, Summary

__all__ = [
    "__version__",
    "ConstraintCollector",
    "NodeNpmTable",
    "PackageRequirementTable",
    "RawConstraint",
    "Summary",
    "reconcile",
    "update_manifest_engines",
]
