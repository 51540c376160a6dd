from __future__ import annotations

from typing import Optional

import pytest

from verlimit.core.tables import (
    DEFAULT_NODE_NPM_TABLE,
    DEFAULT_REQUIREMENT_TABLE,
    NodeNpmTable,
    PackageRequirementTable,
)
from verlimit.utils.version_utils import compare_versions


@pytest.mark.unit
class TestNodeNpmTable:
    """Tests for NodeNpmTable."""

    def test_empty_table_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            NodeNpmTable({})

    def test_entries_are_sorted_by_version(self) -> None:
        table = NodeNpmTable({"10.0.0": "6.0.0", "4.0.0": "2.14.2", "8.0.0": "5.0.0"})

        assert [node for node, _ in table] == ["4.0.0", "8.0.0", "10.0.0"]
        assert len(table) == 3

    @pytest.mark.parametrize(
        "node, npm",
        [
            ("4.0.0", "2.14.2"),
            ("14.0.0", "6.14.4"),
            ("16.0.0", "7.10.0"),
            ("16.14.0", "8.6.0"),
            ("18.0.0", "8.6.0"),
            ("20", "9.6.4"),
            ("22.0.0", "10.4.0"),
            ("0.10.0", "2.14.2"),
        ],
    )
    def test_npm_for(self, node: str, npm: str) -> None:
        """Test the first key at or above the Node.js version is used."""
        assert DEFAULT_NODE_NPM_TABLE.npm_for(node) == npm

    def test_beyond_last_key_uses_last_entry(self) -> None:
        assert DEFAULT_NODE_NPM_TABLE.npm_for("99.0.0") == DEFAULT_NODE_NPM_TABLE.npm_for(
            "22.0.0"
        )

    def test_monotonic(self) -> None:
        nodes = ["0.1.0", "4.0.0", "7.5.0", "12.0.0", "16.14.0", "21.0.0", "30.0.0"]
        npms = [DEFAULT_NODE_NPM_TABLE.npm_for(node) for node in nodes]

        for lower, higher in zip(npms, npms[1:]):
            assert compare_versions(lower, higher) <= 0

    def test_substitute_table(self) -> None:
        table = NodeNpmTable({"1.0.0": "1.1.1"})

        assert table.npm_for("0.5.0") == "1.1.1"
        assert table.npm_for("5.0.0") == "1.1.1"


@pytest.mark.unit
class TestPackageRequirementTable:
    """Tests for PackageRequirementTable."""

    @pytest.mark.parametrize(
        "package, version, expected",
        [
            ("commander", "^14.0.0", "18.0.0"),
            ("commander", "^12.1.0", "16.0.0"),
            ("commander", "10.0.0", "14.0.0"),
            ("commander", "~15.2.0", "18.0.0"),
            ("react", "^17.0.2", "12.0.0"),
            ("next", "13.4.1", "16.14.0"),
            ("express", "^4.18.2", "0.10.0"),
            ("typescript", "5.3.3", "14.17.0"),
            ("eslint", "^9.1.0", "18.18.0"),
            ("node-fetch", "3", "14.0.0"),
        ],
    )
    def test_requirements(self, package: str, version: str, expected: str) -> None:
        assert DEFAULT_REQUIREMENT_TABLE.node_requirement_for(package, version) == expected

    @pytest.mark.parametrize(
        "package, version",
        [
            ("left-pad", "1.3.0"),
            ("commander", "^9.0.0"),
            ("react", "latest"),
            ("axios", None),
            ("webpack", "4.46.0"),
        ],
        ids=["unknown-package", "below-thresholds", "no-numeral", "none", "below"],
    )
    def test_no_rule(self, package: str, version: Optional[str]) -> None:
        assert DEFAULT_REQUIREMENT_TABLE.node_requirement_for(package, version) is None

    def test_contains(self) -> None:
        assert "react" in DEFAULT_REQUIREMENT_TABLE
        assert "webpack" in DEFAULT_REQUIREMENT_TABLE
        assert "left-pad" not in DEFAULT_REQUIREMENT_TABLE

    def test_thresholds_sorted_numerically(self) -> None:
        table = PackageRequirementTable(
            {"pkg": {"10.0.0": "16.0.0", "2.0.0": "8.0.0", "9.0.0": "14.0.0"}}
        )

        assert table.node_requirement_for("pkg", "9.5.0") == "14.0.0"
        assert table.node_requirement_for("pkg", "10.0.0") == "16.0.0"
        assert table.node_requirement_for("pkg", "3.0.0") == "8.0.0"

    def test_source_mapping_changes_do_not_leak(self) -> None:
        rules = {"pkg": {"1.0.0": "12.0.0"}}
        table = PackageRequirementTable(rules)

        rules["pkg"]["1.0.0"] = "20.0.0"
        rules["other"] = {"1.0.0": "20.0.0"}

        assert table.node_requirement_for("pkg", "1.0.0") == "12.0.0"
        assert "other" not in table
