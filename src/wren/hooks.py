"""Router hooks — let the embedding application extend the dispatcher.

A hook is any object with these three methods; subclass ``RouterHook``
to override only the ones you need::

    class Audit(RouterHook):
        def on_ready(self, route, controller):
            audit_log.info("calling %s", route.route_string)

    app = ApiApp(hook=Audit())

``on_startup`` and ``on_ready`` may be ``def`` or ``async def``; exceptions
they raise are treated like exceptions raised by a handler.
``on_construct`` runs while the app freezes and must be a plain ``def``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from wren.controller import Controller
    from wren.routing.route import RouteDescriptor
    from wren.server.dispatcher import ApiRouter


class RouterHook:
    """No-op base hook. The default when the app supplies none."""

    def on_construct(self, router: ApiRouter) -> Any:
        """Called once, when the router is built at app freeze."""

    def on_startup(self, route: RouteDescriptor) -> Any:
        """Called at the start of every non-preflight request, after parsing."""

    def on_ready(self, route: RouteDescriptor, controller: Controller) -> Any:
        """Called after auth passes and the controller exists, before the handler runs."""
