"""Inspect command implementation for regscout.

Reconciles a single plugin without downloading the registry index. Handy
for checking why a plugin is (or is not) marked as supporting a core line.

Typical usage::

    $ regscout inspect @elizaos-plugins/plugin-solana github:elizaos-plugins/plugin-solana
    $ regscout -vv inspect my-plugin github:me/my-plugin --format json
"""

from __future__ import annotations

import sys
import json
import click
import asyncio
from typing import Any, Dict

from regscout.core import Upstreams
from regscout.models import VersionInfo
from regscout.context import pass_context, RegScoutContext
from regscout.exceptions import AggregationTimeoutError, MissingCredentialError, RegScoutError
from regscout.utils import format_support, get_logger, get_raw_console, print_error

logger = get_logger("commands.inspect")


@click.command()
@click.argument("identifier")
@click.argument("reference")
@click.option(
    "--format",
    "-f",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def inspect(ctx: RegScoutContext, identifier: str, reference: str, format: str) -> None:
    """Reconcile one plugin, e.g. IDENTIFIER=@scope/pkg REFERENCE=github:scope/pkg."""
    try:
        info = asyncio.run(_inspect_async(ctx, identifier, reference))
    except RegScoutError as e:
        print_error(f"{e}")
        sys.exit(1)
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        logger.exception("Error in inspect command")
        sys.exit(1)

    if format == "json":
        print(json.dumps({identifier: info.to_json()}, indent=2))
    else:
        _display_details(identifier, info)


async def _inspect_async(ctx: RegScoutContext, identifier: str, reference: str) -> VersionInfo:
    config = ctx.config
    if not config.github_token:
        raise MissingCredentialError()

    async with Upstreams(config, config.github_token) as upstreams:
        try:
            return await asyncio.wait_for(
                upstreams.reconciler.reconcile(identifier, reference),
                config.aggregation_timeout,
            )
        except asyncio.TimeoutError as exc:
            raise AggregationTimeoutError(config.aggregation_timeout) from exc


def _display_details(identifier: str, info: VersionInfo) -> None:
    console = get_raw_console()
    data: Dict[str, Any] = info.to_json()

    console.print(f"\n[bold]{identifier}[/bold]")
    console.print("=" * 50)
    console.print(f"Supports v0: {format_support(info.supports.v0)}")
    console.print(f"Supports v1: {format_support(info.supports.v1)}")

    git = data.get("git")
    if git:
        console.print(f"\n[bold]GitHub[/bold] ({git['repo']})")
        for major in ("v0", "v1"):
            line = git[major]
            console.print(
                f"  • {major}: version={line['version'] or '-'} branch={line['branch'] or '-'}"
            )

    npm = data.get("npm") or {}
    console.print(f"\n[bold]npm[/bold] ({npm.get('repo') or '-'})")
    if info.npm is not None and not info.npm.found:
        console.print("  [dim]package not found[/dim]")
    else:
        for major in ("v0", "v1"):
            console.print(f"  • {major}: {npm.get(major) or '-'}")

    console.print("")
