"""Invoke helper — call sync or async callables uniformly.

Controller handlers, auth predicates, and collaborator methods (token
store, identity service) can each be ``def`` or ``async def``. The
sync/async check lives here and nowhere else.

Usage::

    from wren._internal.invoke import invoke

    result = await invoke(controller.get_list)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
