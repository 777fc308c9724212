"""Request store propagation using contextvars.

The active Store follows the dynamic extent of a request: it survives every
await, is inherited by tasks created with ``asyncio.create_task`` or
``asyncio.gather`` and by ``loop.call_soon`` callbacks (asyncio copies the
current context when scheduling), and is never visible to another request
running concurrently on the same loop.

Usage:
    # In middleware (request start)
    response = await arun(Store(logger=request_log), call_next, request)

    # Anywhere downstream
    store = get_active_store()
    if store is not None:
        store.logger.info({}, "inside the request")
"""

from __future__ import annotations

import contextvars
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from typing import Any, ParamSpec, TypeVar

from scopedlog.domain.models.store import Store

P = ParamSpec("P")
T = TypeVar("T")

# Default is None: outside a request there is no association, which is not
# an error (callers fall back to the root logger).
_active_store: contextvars.ContextVar[Store | None] = contextvars.ContextVar(
    "scopedlog_store", default=None
)


def get_active_store() -> Store | None:
    """Get the Store governing the current execution point.

    Returns:
        The active Store, or None outside any request extent.
    """
    return _active_store.get()


@contextmanager
def store_scope(store: Store) -> Iterator[Store]:
    """Make ``store`` active for the body of a ``with`` block.

    The previous association (or none) is restored on exit, so scopes nest.

    Args:
        store: The Store to activate.

    Yields:
        The activated Store.
    """
    token = _active_store.set(store)
    try:
        yield store
    finally:
        _active_store.reset(token)


def run(store: Store, fn: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
    """Call ``fn`` synchronously with ``store`` active.

    ``fn`` runs in a copy of the current context, so nothing it sets can
    leak back into the caller.

    Args:
        store: The Store to activate.
        fn: Callable to run.
        *args: Positional arguments for ``fn``.
        **kwargs: Keyword arguments for ``fn``.

    Returns:
        Whatever ``fn`` returns.
    """

    def _scoped() -> T:
        _active_store.set(store)
        return fn(*args, **kwargs)

    return contextvars.copy_context().run(_scoped)


async def arun(
    store: Store,
    fn: Callable[..., Awaitable[T]],
    *args: Any,
    **kwargs: Any,
) -> T:
    """Await ``fn(*args, **kwargs)`` with ``store`` active.

    Args:
        store: The Store to activate.
        fn: Coroutine function to await.
        *args: Positional arguments for ``fn``.
        **kwargs: Keyword arguments for ``fn``.

    Returns:
        The awaited result.
    """
    with store_scope(store):
        return await fn(*args, **kwargs)
