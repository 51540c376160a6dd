"""Constraint reconciliation for verlimit.

Folds a list of :class:`RawConstraint` records into one :class:`Summary`:

- the Node.js minimum is the **highest** of all minimums, because every
  constraint's minimum must hold;
- the Node.js maximum is the **lowest** of all explicit maximums (the
  intersection of the ranges);
- npm bounds come from ``engines`` constraints only, and otherwise default
  to the npm version bundled with the reconciled Node.js bounds.

Dependency-derived constraints are folded before ``engines`` constraints.
When several constraints share the winning Node.js minimum, the last one
folded names the source, so ``engines`` wins ties.

Typical usage::

    >>> summary = reconcile(collector.collect().constraints)
    >>> summary.lowest.node, summary.source.value
    ('16.0.0', 'engines')
"""

from __future__ import annotations

import functools
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional

from verlimit.utils.logger import get_logger
from verlimit.utils.version_utils import compare_versions
from verlimit.constants import LATEST_COMPATIBLE, UNLIMITED
from verlimit.core.tables import DEFAULT_NODE_NPM_TABLE, NodeNpmTable
from verlimit.core.parser import extract_lower_bound, extract_upper_bound
from verlimit.models import (
    ConstraintSource,
    RawConstraint,
    Summary,
    SummarySource,
    VersionBounds,
)

logger = get_logger("core.reconciler")


@dataclass(frozen=True)
class ReconcileState:
    """Running bounds while folding constraints.

    The default instance is the neutral starting state.
    """

    lowest_node: Optional[str] = None
    highest_node: Optional[str] = None
    lowest_npm: Optional[str] = None
    highest_npm: Optional[str] = None
    source: SummarySource = SummarySource.NONE


def _max_version(current: Optional[str], candidate: Optional[str]) -> Optional[str]:
    if candidate is None:
        return current
    if current is None or compare_versions(candidate, current) > 0:
        return candidate
    return current


def _min_version(current: Optional[str], candidate: Optional[str]) -> Optional[str]:
    if candidate is None:
        return current
    if current is None or compare_versions(candidate, current) < 0:
        return candidate
    return current


def _source_of(constraint: RawConstraint) -> SummarySource:
    if constraint.source.is_engines:
        return SummarySource.ENGINES
    return SummarySource.DEPENDENCIES


def fold_constraint(state: ReconcileState, constraint: RawConstraint) -> ReconcileState:
    """Combine one constraint into the running state.

    Args:
        state: Bounds accumulated so far.
        constraint: Next constraint.

    Returns:
        A new state; ``state`` is not modified.
    """
    lowest_node = state.lowest_node
    source = state.source

    node_floor = extract_lower_bound(constraint.node_version)
    if node_floor is not None:
        if lowest_node is None or compare_versions(node_floor, lowest_node) >= 0:
            # Ties reassign the source: last folded wins
            lowest_node = node_floor
            source = _source_of(constraint)

    highest_node = _min_version(
        state.highest_node, extract_upper_bound(constraint.node_version)
    )

    lowest_npm = state.lowest_npm
    highest_npm = state.highest_npm
    if constraint.source.is_engines:
        lowest_npm = _max_version(
            lowest_npm, extract_lower_bound(constraint.npm_version)
        )
        highest_npm = _min_version(
            highest_npm, extract_upper_bound(constraint.npm_version)
        )

    return replace(
        state,
        lowest_node=lowest_node,
        highest_node=highest_node,
        lowest_npm=lowest_npm,
        highest_npm=highest_npm,
        source=source,
    )


def order_constraints(constraints: Iterable[RawConstraint]) -> List[RawConstraint]:
    """Put dependency-derived constraints first and ``engines`` last.

    Relative order inside each bucket is kept. Constraints that cannot
    contribute anything are dropped.
    """
    dependencies: List[RawConstraint] = []
    engines: List[RawConstraint] = []

    for constraint in constraints:
        if constraint.source is ConstraintSource.ENGINES:
            if constraint.node_version or constraint.npm_version:
                engines.append(constraint)
        elif constraint.node_version:
            dependencies.append(constraint)

    return dependencies + engines


def finalize(state: ReconcileState, npm_table: NodeNpmTable) -> Summary:
    """Turn a folded state into a :class:`Summary`, filling in defaults."""
    if state.lowest_node is None:
        return Summary.empty()

    lowest_npm = state.lowest_npm or npm_table.npm_for(state.lowest_node)

    if state.highest_npm is not None:
        highest_npm = state.highest_npm
    elif state.highest_node is not None:
        highest_npm = npm_table.npm_for(state.highest_node)
    else:
        highest_npm = LATEST_COMPATIBLE

    return Summary(
        lowest=VersionBounds(node=state.lowest_node, npm=lowest_npm),
        highest=VersionBounds(node=state.highest_node or UNLIMITED, npm=highest_npm),
        source=state.source,
    )


def reconcile(
    constraints: Iterable[RawConstraint],
    npm_table: NodeNpmTable = DEFAULT_NODE_NPM_TABLE,
) -> Summary:
    """Reconcile raw constraints into a single :class:`Summary`.

    Args:
        constraints: Constraints as produced by the collector.
        npm_table: Node.js → npm correspondence used for npm defaults.

    Returns:
        The reconciled summary; ``Summary.empty()`` when no constraint
        yields a Node.js minimum.
    """
    ordered = order_constraints(constraints)
    state = functools.reduce(fold_constraint, ordered, ReconcileState())

    logger.debug(
        "Reconciled %d constraint(s): node %s..%s, npm %s..%s (source: %s)",
        len(ordered),
        state.lowest_node,
        state.highest_node,
        state.lowest_npm,
        state.highest_npm,
        state.source.value,
    )

    return finalize(state, npm_table)
