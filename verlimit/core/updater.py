"""Manifest updater for verlimit.

Writes a reconciled :class:`Summary` back into ``package.json``:

- ``engines.node``   → ``>=<lowest>`` or ``>=<lowest>,<=<highest>``
- ``engines.npm``    → same shape, using the npm bounds
- ``packageManager`` → ``npm@<lowest npm>``

Every other key is left untouched and key order is preserved. The file is
rewritten atomically with 2-space indentation and a trailing newline.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Union

from verlimit.models import Summary
from verlimit.constants import MANIFEST_INDENT
from verlimit.utils.logger import get_logger
from verlimit.exceptions import FileOperationError, ParseError
from verlimit.utils.filesystem import read_json_object, safe_write_file

logger = get_logger("core.updater")


def render_engine_fields(summary: Summary) -> Dict[str, str]:
    """Return the manifest values that :func:`update_manifest_engines` writes.

    Keys are ``"node"``, ``"npm"`` and ``"packageManager"``; a key is
    absent when the summary has nothing to say about it.

    Example:
        >>> render_engine_fields(summary)
        {'node': '>=16.0.0,<=18.0.0', 'npm': '>=8.0.0,<=9.0.0',
         'packageManager': 'npm@8.0.0'}
    """
    fields: Dict[str, str] = {}

    if summary.lowest.node:
        node = f">={summary.lowest.node}"
        if summary.has_node_ceiling:
            node += f",<={summary.highest.node}"
        fields["node"] = node

    if summary.lowest.npm:
        npm = f">={summary.lowest.npm}"
        if summary.has_npm_ceiling:
            npm += f",<={summary.highest.npm}"
        fields["npm"] = npm
        fields["packageManager"] = f"npm@{summary.lowest.npm}"

    return fields


def apply_engine_fields(manifest: Dict[str, Any], summary: Summary) -> Dict[str, Any]:
    """Set the engine fields of a decoded manifest in place.

    A missing or non-object ``engines`` value is replaced by an object.

    Returns:
        The same ``manifest`` object, for chaining.
    """
    fields = render_engine_fields(summary)

    engines = manifest.get("engines")
    if not isinstance(engines, dict):
        engines = {}
        manifest["engines"] = engines

    if "node" in fields:
        engines["node"] = fields["node"]
    if "npm" in fields:
        engines["npm"] = fields["npm"]
    if "packageManager" in fields:
        manifest["packageManager"] = fields["packageManager"]

    return manifest


def update_manifest_engines(
    manifest_path: Union[str, Path],
    summary: Summary,
    *,
    create_backup: bool = False,
) -> bool:
    """Write ``summary``'s bounds into the manifest at ``manifest_path``.

    Args:
        manifest_path: Path to ``package.json``.
        summary: Reconciled summary to persist.
        create_backup: Keep a timestamped copy of the original file.

    Returns:
        ``True`` on success, ``False`` if the manifest could not be read,
        parsed, or written. Failures are logged, never raised.
    """
    path = Path(manifest_path)

    try:
        manifest = read_json_object(path)
        apply_engine_fields(manifest, summary)
        content = json.dumps(manifest, indent=MANIFEST_INDENT, ensure_ascii=False)
        backup = safe_write_file(path, content + "\n", create_backup=create_backup)
    except (FileOperationError, ParseError) as exc:
        logger.error("Error updating %s: %s", path, exc)
        return False

    if backup is not None:
        logger.info("Backup of %s saved to %s", path.name, backup)
    logger.info("Updated engines in %s", path)
    return True
