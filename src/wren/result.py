"""Typed results for the dispatch pipeline.

Recoverable failures (bad token, unknown route, missing scope) travel up
the pipeline as values instead of exceptions. Each step returns either
``Ok`` carrying its output or ``Err`` carrying an ``ApiError``; the
dispatcher performs the final translation to an envelope.

Usage::

    match verify(request):
        case Ok(value=token):
            ...
        case Err(error=error):
            return error_envelope(error)
"""

from dataclasses import dataclass

from wren.errors import ApiError


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """A successful pipeline step."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Err:
    """A failed pipeline step carrying the recoverable error."""

    error: ApiError

    @property
    def is_ok(self) -> bool:
        return False


type Result[T] = Ok[T] | Err
