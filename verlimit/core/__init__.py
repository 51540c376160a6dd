"""
Core functionality exports for verlimit.

The analysis pipeline, leaf-first:

    parser → tables → collector → reconciler → updater

Importing from here keeps user-facing imports clean and stable:

    from verlimit.core import ConstraintCollector, reconcile
"""

from __future__ import annotations

from verlimit.core.parser import (
    decrement_version,
    extract_lower_bound,
    extract_upper_bound,
    normalize_version,
    parse_range,
)
from verlimit.core.tables import (
    DEFAULT_NODE_NPM_TABLE,
    DEFAULT_REQUIREMENT_TABLE,
    NodeNpmTable,
    PackageRequirementTable,
)
from verlimit.core.collector import (
    CollectionResult,
    ConstraintCollector,
    ManifestInfo,
    read_manifest,
)
from verlimit.core.reconciler import ReconcileState, fold_constraint, reconcile
from verlimit.core.updater import render_engine_fields, update_manifest_engines

__all__ = [
    "parse_range",
    "normalize_version",
    "decrement_version",
    "extract_lower_bound",
    "extract_upper_bound",
    "NodeNpmTable",
    "PackageRequirementTable",
    "DEFAULT_NODE_NPM_TABLE",
    "DEFAULT_REQUIREMENT_TABLE",
    "ConstraintCollector",
    "CollectionResult",
    "ManifestInfo",
    "read_manifest",
    "ReconcileState",
    "fold_constraint",
    "reconcile",
    "render_engine_fields",
    "update_manifest_engines",
]
