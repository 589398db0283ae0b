"""Serve an ApiApp with the pounce ASGI server.

pounce is an optional dependency (``pip install wren[server]``); any
ASGI server can host the app instead.
"""


def run_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
    workers: int = 1,
    app_path: str | None = None,
) -> None:
    """Start pounce with a live ``ApiApp``.

    Pounce's ``run()`` takes an import string (e.g., ``"myapp:app"``),
    but wren has a live app object. We use ``pounce.Server`` directly
    with the ASGI callable.

    Args:
        app: ASGI callable (wren ApiApp instance).
        host: Bind host address.
        port: Bind port number.
        reload: Restart on source changes (development only).
        workers: Worker count.
        app_path: Optional ``"module:attribute"`` import string, so reloads
            pick up code changes on disk.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1 if reload else workers,
        reload=reload,
    )
    server = Server(config, app, app_path=app_path)
    server.run()
