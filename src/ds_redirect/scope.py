"""Lifetime scopes for redirections and the temporary trees they own."""

from __future__ import annotations

import functools
import logging
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Literal, TypeVar

from ds_redirect.errors import NoActiveScopeError

LOGGER = logging.getLogger(__name__)

ScopeName = Literal["local", "global"]
T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Any])


@dataclass(slots=True)
class _Binding:
    resource: Any
    teardown: Callable[[], None]


@dataclass(eq=False, slots=True)
class Scope:
    """A lifetime token owning teardowns that run once, newest first, on close.

    A global scope never runs its teardowns: resources bound to it live for the
    rest of the process.
    """

    name: str = "local"
    is_global: bool = False
    _bindings: list[_Binding] = field(default_factory=list, repr=False)
    _closed: bool = field(default=False, repr=False)

    @property
    def closed(self) -> bool:
        return self._closed

    def bind(self, resource: T, teardown: Callable[[], None]) -> T:
        """Register teardown for resource and hand the resource back."""

        if self.is_global:
            return resource
        if self._closed:
            raise RuntimeError(f"scope {self.name!r} is already closed")
        self._bindings.append(_Binding(resource=resource, teardown=teardown))
        return resource

    def close(self) -> None:
        """Run every bound teardown in reverse order; a second close is a no-op."""

        if self._closed or self.is_global:
            return
        self._closed = True
        first_error: BaseException | None = None
        while self._bindings:
            binding = self._bindings.pop()
            LOGGER.debug("scope.teardown scope=%s resource=%s", self.name, binding.resource)
            try:
                binding.teardown()
            except Exception as exc:
                LOGGER.error("scope.teardown_failed scope=%s resource=%s error=%s", self.name, binding.resource, exc)
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error

    def __enter__(self) -> "Scope":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


GLOBAL_SCOPE = Scope(name="global", is_global=True)

_ACTIVE_SCOPES: ContextVar[tuple[Scope, ...]] = ContextVar("ds_redirect_active_scopes", default=())


def current_scope() -> Scope:
    """Return the innermost active redirection scope."""

    active = _ACTIVE_SCOPES.get()
    if not active:
        raise NoActiveScopeError(
            "redirect(scope='local') needs an enclosing redirection_scope() or @scoped function; "
            "pass scope='global' for a permanent redirection."
        )
    return active[-1]


def resolve_scope(scope: ScopeName | Scope) -> Scope:
    """Map 'local', 'global' or an explicit Scope to the Scope to bind against."""

    if isinstance(scope, Scope):
        return scope
    if scope == "global":
        return GLOBAL_SCOPE
    if scope == "local":
        return current_scope()
    raise ValueError(f"scope must be 'local', 'global' or a Scope instance, got {scope!r}")


@contextmanager
def redirection_scope(name: str = "local") -> Iterator[Scope]:
    """Open a scope that local redirections bind to until the block exits."""

    scope = Scope(name=name)
    token = _ACTIVE_SCOPES.set(_ACTIVE_SCOPES.get() + (scope,))
    try:
        yield scope
    finally:
        _ACTIVE_SCOPES.reset(token)
        scope.close()


def scoped(func: F) -> F:
    """Run the decorated function inside its own redirection scope."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        with redirection_scope(name=func.__qualname__):
            return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]
