"""``wren run`` — serve an app with pounce."""

import argparse
import sys

from wren.cli._resolve import resolve_app
from wren.errors import ConfigurationError
from wren.server.dev import run_server


def run_app(args: argparse.Namespace) -> None:
    """Resolve ``args.app`` and start pounce.

    Reloading is on outside production unless ``--no-reload`` is given.
    """
    try:
        app = resolve_app(args.app)
        app._ensure_frozen()
    except (ModuleNotFoundError, AttributeError, TypeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    run_server(
        app,
        args.host or app.config.host,
        args.port or app.config.port,
        reload=not (args.no_reload or app.config.is_production),
        workers=args.workers,
        app_path=args.app,
    )
