"""
Shared context object for regscout CLI commands.

One :class:`RegScoutContext` is created per invocation by the top-level
click group and handed to subcommands through :data:`pass_context`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from regscout.config import RegScoutConfig


class RegScoutContext:
    """Global context object for regscout CLI commands.

    Attributes:
        config_path: Path of the loaded configuration file, if any.
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        color: Whether colored terminal output is enabled.
        config: Loaded configuration; defaults apply until the group
            callback replaces it.
    """

    __slots__ = ("config_path", "verbose", "color", "config")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.verbose: int = 0
        self.color: bool = True
        self.config: RegScoutConfig = RegScoutConfig()


#: Click decorator for injecting :class:`RegScoutContext` into commands.
pass_context = click.make_pass_decorator(RegScoutContext, ensure=True)
