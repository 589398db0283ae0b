"""``wren routes`` — list API namespaces, controllers, and handlers.

Resolves an import string to an ApiApp, freezes it (running module
discovery), and prints one row per handler.
"""

import argparse
import sys

from wren.cli._resolve import resolve_app
from wren.errors import ConfigurationError
from wren.routing.methods import VERBS
from wren.routing.registry import NamespaceRegistry


def route_rows(registry: NamespaceRegistry) -> list[tuple[str, str, str, str]]:
    """``(verb, route, handler, module)`` rows, sorted by route then verb."""
    rows: list[tuple[str, str, str, str]] = []
    for entry in registry:
        aliases = {target: alias for alias, target in entry.controller_map.items()}
        for key, controller in entry.controllers.items():
            segment = aliases.get(key, key)
            for name in sorted(registry.handlers_for(controller).names):
                verb, _, method = name.partition("_")
                verb = "*" if verb == "any" else verb.upper()
                path = f"{entry.namespace}/{segment}/" + ("{method}" if method == "remap" else method)
                rows.append((verb, path, f"{controller.__qualname__}.{name}", entry.owner))
    rows.sort(key=lambda r: (r[1], VERBS.index(r[0].lower()) if r[0] != "*" else len(VERBS)))
    return rows


def run_routes(args: argparse.Namespace) -> None:
    """Print the handler table for ``args.app``."""
    try:
        app = resolve_app(args.app)
        registry = app.router.registry
    except (ModuleNotFoundError, AttributeError, TypeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    rows = route_rows(registry)
    if not rows:
        print("No API handlers registered.")
        return

    # Column widths
    max_verb = max(max(len(r[0]) for r in rows), 4)  # "VERB" header
    max_path = max(max(len(r[1]) for r in rows), 5)  # "ROUTE" header
    max_handler = max(max(len(r[2]) for r in rows), 7)  # "HANDLER" header

    fmt = f"{{:<{max_verb}}}  {{:<{max_path}}}  {{:<{max_handler}}}  {{}}"
    print(fmt.format("VERB", "ROUTE", "HANDLER", "MODULE"))
    print("-" * min(max_verb + max_path + max_handler + 12, 80))
    for row in rows:
        print(fmt.format(*row))
