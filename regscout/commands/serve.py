"""Serve command implementation for regscout.

Runs the registry HTTP API (``GET /registry``, ``GET /health``) under
uvicorn. The configuration loaded by the CLI group is shared with the app,
so ``--config`` and the environment apply to the server too.
"""

from __future__ import annotations

import click
import uvicorn

from regscout.constants import DEFAULT_HOST, DEFAULT_PORT
from regscout.context import pass_context, RegScoutContext
from regscout.core import RegistryService
from regscout.server import create_app
from regscout.utils import get_logger, print_warning

logger = get_logger("commands.serve")


@click.command()
@click.option("--host", default=DEFAULT_HOST, show_default=True, help="Interface to bind.")
@click.option("--port", default=DEFAULT_PORT, show_default=True, type=int, help="Port to bind.")
@pass_context
def serve(ctx: RegScoutContext, host: str, port: int) -> None:
    """Serve the aggregated registry over HTTP."""
    config = ctx.config
    if not config.github_token:
        print_warning("No GitHub token configured; /registry will fail until one is set")

    app = create_app(lambda: RegistryService(config))
    logger.info("Serving registry on http://%s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_level="warning" if ctx.verbose == 0 else "info")
