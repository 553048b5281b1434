"""Check command implementation for regscout.

Runs one full aggregation cycle against the live registry and prints the
compatibility verdict of every plugin. The cycle goes through
:class:`~regscout.core.service.RegistryService`, so the command obeys the
same aggregation timeout and credential rules as the HTTP server.

Typical usage::

    # Overview table
    $ regscout check

    # Plugins that support neither core line
    $ regscout check --only-unsupported

    # Machine-readable output, same shape as GET /registry
    $ regscout check --format json > registry.json
"""

from __future__ import annotations

import sys
import json
import click
import asyncio
from typing import Any, Dict, List

from regscout.core import RegistryService
from regscout.exceptions import RegScoutError
from regscout.context import pass_context, RegScoutContext
from regscout.utils import (
    format_support,
    get_logger,
    print_error,
    print_success,
    print_table,
    print_warning,
)

logger = get_logger("commands.check")


@click.command()
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@click.option(
    "--only-unsupported",
    is_flag=True,
    help="Show only plugins that support neither core line.",
)
@pass_context
def check(ctx: RegScoutContext, format: str, only_unsupported: bool) -> None:
    """Aggregate the plugin registry and report v0/v1 support.

    Exits 0 when the registry was aggregated, 1 when the cycle failed
    (missing token, timeout, unexpected error).
    """
    try:
        ok = asyncio.run(_check_async(ctx, format, only_unsupported))
        sys.exit(0 if ok else 1)

    except RegScoutError as e:
        print_error(f"{e}")
        sys.exit(1)
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        logger.exception("Error in check command")
        sys.exit(1)


async def _check_async(ctx: RegScoutContext, format: str, only_unsupported: bool) -> bool:
    show_progress = format == "table" or ctx.verbose > 0

    service = RegistryService(ctx.config)
    response = await service.read()

    if not response.ok:
        print_error(response.payload.get("message") or response.payload["error"])
        return False

    registry: Dict[str, Any] = response.payload["registry"]
    if only_unsupported:
        registry = {
            name: entry
            for name, entry in registry.items()
            if not entry["supports"]["v0"] and not entry["supports"]["v1"]
        }

    if format == "json":
        payload = dict(response.payload, registry=registry)
        print(json.dumps(payload, indent=2))
        return True

    if not registry:
        if show_progress:
            msg = (
                "Every plugin supports at least one core line"
                if only_unsupported
                else "Registry is empty"
            )
            (print_success if only_unsupported else print_warning)(msg)
        return True

    _display_table(registry, response.payload["lastUpdatedAt"])

    if show_progress:
        both = sum(1 for e in registry.values() if e["supports"]["v0"] and e["supports"]["v1"])
        print_success(f"\n{len(registry)} plugin(s) checked, {both} support both core lines")
    return True


def _display_table(registry: Dict[str, Any], last_updated_at: str) -> None:
    rows = [_create_table_row(name, entry) for name, entry in registry.items()]

    column_styles: Dict[str, Dict[str, Any]] = {
        "Plugin": {"style": "bold cyan", "no_wrap": True},
        "v0": {"justify": "center", "no_wrap": True},
        "v1": {"justify": "center", "no_wrap": True},
        "Latest 0.x": {"justify": "center", "style": "dim"},
        "Latest 1.x": {"justify": "center", "style": "bold green"},
        "Branches": {"justify": "left"},
    }

    print_table(
        rows,
        title="Plugin Compatibility",
        caption=f"Last updated {last_updated_at}",
        column_styles=column_styles,
    )


def _create_table_row(name: str, entry: Dict[str, Any]) -> Dict[str, str]:
    """Build one table row from a serialized :class:`VersionInfo`."""
    git = entry.get("git") or {}
    npm = entry.get("npm") or {}
    supports = entry["supports"]

    def latest(major: str) -> str:
        version = (git.get(major) or {}).get("version") or npm.get(major)
        return version or "[dim]-[/dim]"

    branches: List[str] = []
    for major in ("v0", "v1"):
        branch = (git.get(major) or {}).get("branch")
        if branch:
            branches.append(f"{major}: {branch}")

    return {
        "Plugin": name,
        "v0": format_support(supports["v0"]),
        "v1": format_support(supports["v1"]),
        "Latest 0.x": latest("v0"),
        "Latest 1.x": latest("v1"),
        "Branches": ", ".join(branches) or "[dim]-[/dim]",
    }
