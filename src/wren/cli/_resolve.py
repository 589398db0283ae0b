"""App import resolution — resolves ``"module:attribute"`` strings to ApiApp instances.

Shared utility used by ``wren run`` and ``wren routes``.
"""

import importlib

from wren.app import ApiApp


def resolve_app(import_string: str) -> ApiApp:
    """Resolve an import string to a wren ApiApp instance.

    Accepts ``"module:attribute"`` format.  When the attribute portion
    is omitted, defaults to ``"app"`` (e.g. ``"myapp"`` resolves to
    ``myapp.app``). Factory functions are called.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not an ``ApiApp`` or a
            factory returning one.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "app"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    # ApiApp is itself callable (ASGI), so only call non-apps
    if callable(obj) and not isinstance(obj, ApiApp):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, ApiApp):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a wren.ApiApp instance"
        raise TypeError(msg)

    return obj
