"""Static version knowledge used by the analysis.

Two lookup tables drive the heuristics:

- :class:`NodeNpmTable` maps a minimum Node.js version to the npm version
  bundled with it.
- :class:`PackageRequirementTable` maps a package's own version to the
  minimum Node.js version that release requires.

Both are immutable once built. The built-in data lives in
:data:`DEFAULT_NODE_NPM_TABLE` and :data:`DEFAULT_REQUIREMENT_TABLE`;
callers (and tests) may pass their own tables instead.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Tuple

from verlimit.core.parser import normalize_version
from verlimit.utils.version_utils import compare_versions, version_key


class NodeNpmTable:
    """Ordered Node.js → npm version correspondence.

    Args:
        mapping: Node.js minimum version → npm version. Must not be empty.

    Raises:
        ValueError: ``mapping`` is empty.
    """

    __slots__ = ("_entries",)

    def __init__(self, mapping: Mapping[str, str]) -> None:
        if not mapping:
            raise ValueError("Node/npm table must contain at least one entry")

        self._entries: Tuple[Tuple[str, str], ...] = tuple(
            (node, mapping[node]) for node in sorted(mapping, key=version_key)
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"NodeNpmTable({dict(self._entries)!r})"

    def npm_for(self, node_version: str) -> str:
        """Return the npm version for ``node_version``.

        Picks the first table key that is ``>=`` the given version. Versions
        past the last key get the last (newest known) npm version.

        Examples:
            >>> DEFAULT_NODE_NPM_TABLE.npm_for("18.0.0")
            '8.6.0'
            >>> DEFAULT_NODE_NPM_TABLE.npm_for("99.0.0")
            '10.4.0'
        """
        for node, npm in self._entries:
            if compare_versions(node_version, node) <= 0:
                return npm
        return self._entries[-1][1]


class PackageRequirementTable:
    """Package release → minimum Node.js version rules.

    Args:
        mapping: Package name → {package version threshold → Node.js
            minimum}. A rule applies to every release at or above its
            threshold, up to the next threshold.
    """

    __slots__ = ("_rules",)

    def __init__(self, mapping: Mapping[str, Mapping[str, str]]) -> None:
        self._rules: Mapping[str, Tuple[Tuple[str, str], ...]] = MappingProxyType(
            {
                name: tuple(
                    (threshold, rules[threshold])
                    for threshold in sorted(rules, key=version_key)
                )
                for name, rules in mapping.items()
            }
        )

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, package_name: object) -> bool:
        return package_name in self._rules

    def __repr__(self) -> str:
        return f"PackageRequirementTable(packages={sorted(self._rules)!r})"

    def node_requirement_for(
        self,
        package_name: str,
        package_version: Optional[str],
    ) -> Optional[str]:
        """Return the minimum Node.js version a package release needs.

        The highest threshold ``<=`` the normalized package version wins.
        Releases newer than every known threshold inherit the newest rule.

        Args:
            package_name: npm package name.
            package_version: Version or range, e.g. ``"^14.0.0"``.

        Returns:
            Node.js minimum version, or ``None`` when the package is unknown,
            the version has no numeral, or no threshold applies.

        Examples:
            >>> DEFAULT_REQUIREMENT_TABLE.node_requirement_for("commander", "^14.0.0")
            '18.0.0'
            >>> DEFAULT_REQUIREMENT_TABLE.node_requirement_for("left-pad", "1.0.0")
        """
        rules = self._rules.get(package_name)
        if rules is None:
            return None

        normalized = normalize_version(package_version)
        if normalized is None:
            return None

        requirement: Optional[str] = None
        for threshold, node in rules:
            if compare_versions(normalized, threshold) < 0:
                break
            requirement = node

        return requirement


# ---------------------------------------------------------------------------
# Built-in data
# ---------------------------------------------------------------------------

#: npm versions bundled with Node.js releases
#: (https://nodejs.org/en/download/releases/).
DEFAULT_NODE_NPM_TABLE = NodeNpmTable(
    {
        "4.0.0": "2.14.2",
        "6.0.0": "3.8.6",
        "8.0.0": "5.0.0",
        "10.0.0": "6.0.0",
        "12.0.0": "6.9.0",
        "14.0.0": "6.14.4",
        "16.0.0": "7.10.0",
        "18.0.0": "8.6.0",
        "20.0.0": "9.6.4",
        "21.0.0": "10.2.0",
        "22.0.0": "10.4.0",
    }
)

#: Minimum Node.js versions of popular packages, by package release.
DEFAULT_REQUIREMENT_TABLE = PackageRequirementTable(
    {
        "react": {"16.0.0": "8.0.0", "17.0.0": "12.0.0", "18.0.0": "14.0.0"},
        "next": {
            "10.0.0": "10.13.0",
            "11.0.0": "12.0.0",
            "12.0.0": "12.22.0",
            "13.0.0": "16.14.0",
            "14.0.0": "18.17.0",
        },
        "express": {"4.0.0": "0.10.0", "5.0.0": "12.0.0"},
        "commander": {
            "10.0.0": "14.0.0",
            "11.0.0": "16.0.0",
            "12.0.0": "16.0.0",
            "13.0.0": "16.0.0",
            "14.0.0": "18.0.0",
        },
        "typescript": {"4.0.0": "10.0.0", "5.0.0": "14.17.0"},
        "eslint": {"8.0.0": "12.22.0", "9.0.0": "18.18.0"},
        "webpack": {"5.0.0": "10.13.0"},
        "node-fetch": {"3.0.0": "14.0.0"},
        "axios": {"1.0.0": "14.0.0"},
    }
)
