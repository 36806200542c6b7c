"""Deferred imports for optional drivers.

The redis and motor drivers are only imported when a backend that
needs them is actually opened.
"""

from collections.abc import Callable
from functools import cache
from importlib import import_module

__all__ = ["lazy_import"]


def lazy_import(module_name: str, attribute: str | None = None) -> Callable[[], object]:
    """Return a cached loader for a module, or for one attribute of it.

    Example:
        get_async_redis = lazy_import("redis.asyncio", "Redis")
        Redis = get_async_redis()

    Raises:
        ImportError: When the loader runs and the driver is not installed
    """

    @cache
    def load() -> object:
        try:
            module = import_module(module_name)
        except ModuleNotFoundError as e:
            raise ImportError(
                f"'{module_name}' is required by this storage backend but is not installed"
            ) from e
        return module if attribute is None else getattr(module, attribute)

    return load
