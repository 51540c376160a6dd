"""
Shared context object for verlimit CLI commands.

This module defines the global Click context used to share configuration
and runtime options across CLI subcommands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from verlimit.config import VerlimitConfig


class VerlimitContext:
    """Global context object for verlimit CLI commands.

    An instance of this class is created once per CLI invocation and
    passed to commands using Click's context mechanism.

    Attributes:
        config_path: Path to the verlimit configuration file, if any.
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        color: Whether colored terminal output is enabled.
        config: Loaded configuration, ``None`` until the CLI loads it.
    """

    __slots__ = ("config_path", "verbose", "color", "config")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.verbose: int = 0
        self.color: bool = True
        self.config: Optional[VerlimitConfig] = None

    def get_config(self) -> VerlimitConfig:
        """Return the loaded configuration, or defaults if none was loaded."""
        return self.config or VerlimitConfig()


#: Click decorator for injecting :class:`VerlimitContext` into commands.
pass_context = click.make_pass_decorator(VerlimitContext, ensure=True)
