"""Constraint collection for verlimit.

Scans a project's ``package.json`` and ``package-lock.json`` and turns
everything that implies a Node.js/npm requirement into
:class:`RawConstraint` records:

1. ``engines.node`` / ``engines.npm`` (npm falls back to a
   ``packageManager: "npm@X.Y.Z"`` field)
2. ``dependencies`` recognized by the requirement table
3. ``devDependencies`` recognized by the requirement table
4. lockfile packages recognized by the requirement table

Constraints are returned in that order and never deduplicated.

Failure policy: a broken lockfile or manifest only removes its own
constraints. The run stops (:class:`ProjectNotFoundError`) only when no
usable input exists at all.
"""

from __future__ import annotations

import re
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from verlimit.utils.logger import get_logger
from verlimit.models import ConstraintSource, RawConstraint
from verlimit.utils.filesystem import find_project_files, read_json_object
from verlimit.core.tables import DEFAULT_REQUIREMENT_TABLE, PackageRequirementTable
from verlimit.constants import (
    DEFAULT_INCLUDE_DEV_DEPENDENCIES,
    DEFAULT_INCLUDE_LOCKFILE,
    LOCKFILE_FILENAME,
    MANIFEST_FILENAME,
    UNKNOWN_PROJECT_NAME,
)
from verlimit.exceptions import (
    FileOperationError,
    ParseError,
    ProjectNotFoundError,
)

logger = get_logger("core.collector")

# Literal "npm@X.Y.Z", optionally with a corepack "+sha..." hash
_PACKAGE_MANAGER_NPM_RE = re.compile(r"npm@(\d+\.\d+\.\d+)(?:\+\S+)?")


@dataclass(frozen=True)
class ManifestInfo:
    """The parts of ``package.json`` relevant to version analysis.

    Attributes:
        name: Project name, ``"unknown"`` if missing.
        node_version: ``engines.node`` expression.
        npm_version: ``engines.npm`` expression, or ``">=X.Y.Z"`` derived
            from a ``packageManager`` of the form ``npm@X.Y.Z`` when
            ``engines.npm`` is absent.
        dependencies: Package name → version spec.
        dev_dependencies: Package name → version spec.
    """

    name: str = UNKNOWN_PROJECT_NAME
    node_version: Optional[str] = None
    npm_version: Optional[str] = None
    dependencies: Mapping[str, str] = field(default_factory=dict)
    dev_dependencies: Mapping[str, str] = field(default_factory=dict)


@dataclass
class CollectionResult:
    """Output of :meth:`ConstraintCollector.collect`.

    Attributes:
        constraints: Raw constraints in encounter order.
        warnings: Non-fatal problems (e.g. an unparseable lockfile).
        project_name: Manifest ``name``, if a manifest was read.
        manifest_path: Manifest that was found, if any.
        lockfile_path: Lockfile that was found, if any.
    """

    constraints: List[RawConstraint] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    project_name: Optional[str] = None
    manifest_path: Optional[Path] = None
    lockfile_path: Optional[Path] = None


def _string_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _string_mapping(value: Any) -> Dict[str, str]:
    """Keep the ``name: "spec"`` entries of a dependency section."""
    if not isinstance(value, dict):
        return {}
    return {name: spec for name, spec in value.items() if isinstance(spec, str)}


def read_manifest(manifest_path: Path) -> Optional[ManifestInfo]:
    """Read the version-relevant fields of a ``package.json``.

    Args:
        manifest_path: Path to the manifest.

    Returns:
        Parsed :class:`ManifestInfo`, or ``None`` if the file cannot be read
        or is not a JSON object. The failure is logged, not raised.
    """
    try:
        data = read_json_object(manifest_path)
    except (FileOperationError, ParseError) as exc:
        logger.error(
            "Error reading %s at %s: %s", MANIFEST_FILENAME, manifest_path, exc
        )
        return None

    engines = data.get("engines")
    if not isinstance(engines, dict):
        engines = {}

    npm_version = _string_or_none(engines.get("npm"))
    package_manager = _string_or_none(data.get("packageManager"))

    if package_manager and npm_version is None:
        match = _PACKAGE_MANAGER_NPM_RE.fullmatch(package_manager)
        if match:
            npm_version = f">={match.group(1)}"

    return ManifestInfo(
        name=_string_or_none(data.get("name")) or UNKNOWN_PROJECT_NAME,
        node_version=_string_or_none(engines.get("node")),
        npm_version=npm_version,
        dependencies=_string_mapping(data.get("dependencies")),
        dev_dependencies=_string_mapping(data.get("devDependencies")),
    )


class ConstraintCollector:
    """Collects raw version constraints from a Node.js project.

    Args:
        project_root: Directory holding ``package.json`` and/or
            ``package-lock.json``. Defaults to the current directory.
        requirement_table: Package → Node.js requirement rules.
        quiet: Suppress progress and warning log messages. Warnings are
            still recorded in the result.
        include_dev_dependencies: Consider ``devDependencies``.
        include_lockfile: Scan ``package-lock.json``.

    Example:
        >>> result = ConstraintCollector(Path("my-app")).collect()
        >>> [c.source.value for c in result.constraints]
        ['engines', 'dependency', 'lockfile']
    """

    def __init__(
        self,
        project_root: Optional[Path] = None,
        *,
        requirement_table: PackageRequirementTable = DEFAULT_REQUIREMENT_TABLE,
        quiet: bool = False,
        include_dev_dependencies: bool = DEFAULT_INCLUDE_DEV_DEPENDENCIES,
        include_lockfile: bool = DEFAULT_INCLUDE_LOCKFILE,
    ) -> None:
        self.project_root = Path(project_root or Path.cwd()).resolve()
        self.requirement_table = requirement_table
        self.quiet = quiet
        self.include_dev_dependencies = include_dev_dependencies
        self.include_lockfile = include_lockfile

    def _info(self, message: str, *args: Any) -> None:
        if not self.quiet:
            logger.info(message, *args)

    def collect(self) -> CollectionResult:
        """Scan the project and return its raw constraints.

        Returns:
            :class:`CollectionResult` with constraints in encounter order.

        Raises:
            ProjectNotFoundError: Neither a usable manifest nor a lockfile
                exists in the project root.
        """
        self._info("Analyzing project in %s...", self.project_root)

        manifest_path, lockfile_path = find_project_files(self.project_root)
        result = CollectionResult(
            manifest_path=manifest_path,
            lockfile_path=lockfile_path,
        )

        manifest = read_manifest(manifest_path) if manifest_path else None
        if manifest is not None:
            result.project_name = manifest.name
            self._info("Project %s analyzing dependencies...", manifest.name)
            result.constraints.extend(self._manifest_constraints(manifest))

        if lockfile_path is not None and self.include_lockfile:
            result.constraints.extend(
                self._lockfile_constraints(lockfile_path, result)
            )
        elif manifest is None:
            raise ProjectNotFoundError(
                f"No {MANIFEST_FILENAME} or {LOCKFILE_FILENAME} found!",
                directory=str(self.project_root),
            )

        logger.debug("Collected %d constraint(s)", len(result.constraints))
        return result

    # ------------------------------------------------------------------
    # Manifest
    # ------------------------------------------------------------------

    def _manifest_constraints(self, manifest: ManifestInfo) -> List[RawConstraint]:
        constraints: List[RawConstraint] = []

        if manifest.node_version:
            self._info("Found Node.js engine requirement: %s", manifest.node_version)
            constraints.append(
                RawConstraint(
                    name=manifest.name,
                    node_version=manifest.node_version,
                    npm_version=manifest.npm_version,
                    source=ConstraintSource.ENGINES,
                )
            )

        constraints.extend(
            self._package_constraints(
                manifest.dependencies.items(), ConstraintSource.DEPENDENCY
            )
        )
        if self.include_dev_dependencies:
            constraints.extend(
                self._package_constraints(
                    manifest.dev_dependencies.items(), ConstraintSource.DEV_DEPENDENCY
                )
            )

        return constraints

    def _package_constraints(
        self,
        packages: Iterable[Tuple[str, str]],
        source: ConstraintSource,
    ) -> Iterator[RawConstraint]:
        """Yield a constraint for every package the requirement table knows."""
        label = (
            "DevDependency"
            if source is ConstraintSource.DEV_DEPENDENCY
            else "Dependency"
        )

        for name, version in packages:
            if name not in self.requirement_table:
                continue

            requirement = self.requirement_table.node_requirement_for(name, version)
            if requirement is None:
                continue

            self._info(
                "%s %s@%s requires Node.js %s", label, name, version, requirement
            )
            yield RawConstraint(name=name, node_version=requirement, source=source)

    # ------------------------------------------------------------------
    # Lockfile
    # ------------------------------------------------------------------

    def _lockfile_constraints(
        self,
        lockfile_path: Path,
        result: CollectionResult,
    ) -> List[RawConstraint]:
        """Return lockfile constraints, or none if the lockfile is unusable."""
        self._info("Found %s, analyzing dependency tree...", LOCKFILE_FILENAME)

        try:
            data = read_json_object(lockfile_path)
            entries = list(_lockfile_entries(data, lockfile_path))
        except (FileOperationError, ParseError) as exc:
            warning = f"Could not parse {LOCKFILE_FILENAME}: {exc}"
            result.warnings.append(warning)
            if not self.quiet:
                logger.warning(warning)
            return []

        return list(self._package_constraints(entries, ConstraintSource.LOCKFILE))


def _is_present(value: Any) -> bool:
    """Return True for any container, even an empty one, or a truthy scalar."""
    if isinstance(value, (dict, list)):
        return True
    return bool(value)


def _lockfile_entries(
    data: Dict[str, Any],
    lockfile_path: Path,
) -> Iterator[Tuple[str, str]]:
    """Yield ``(package name, version)`` pairs from a decoded lockfile.

    Supports the npm v7+ flat ``packages`` map (keyed by install path, the
    root entry ``""`` is skipped) and the legacy ``dependencies`` map keyed
    by package name. Entries without a string ``version`` are skipped.
    A ``packages`` map selects the v7+ layout even when it is empty.

    Raises:
        ParseError: The chosen section is not a JSON object.
    """
    if _is_present(data.get("packages")):
        section = data["packages"]
        modern = True
    elif _is_present(data.get("dependencies")):
        section = data["dependencies"]
        modern = False
    else:
        return

    if not isinstance(section, dict):
        raise ParseError(
            f"Unexpected lockfile layout: {'packages' if modern else 'dependencies'} "
            "is not an object",
            file_path=str(lockfile_path),
        )

    for key, info in section.items():
        if modern and key == "":
            continue
        if not isinstance(info, dict):
            continue

        version = _string_or_none(info.get("version"))
        if version is None:
            continue

        name = key.split("/")[-1] if modern else key
        yield name, version
