"""
Registry pattern utility for name-keyed descriptors.

This module provides the :py:class:`Registry` mapping and the
``new_registry`` function which creates a registry together with a decorator
for registering entries. Color models, blend modes, filters and projections
all live in such registries.

Usage example::

    from pixelcomp.registry import new_registry

    # Create a registry and decorator
    MODELS, register = new_registry("color model", attribute="NAME")

    # Register a model
    @register("HSL")
    class HSL:
        pass

    # Look up a model
    model = MODELS.get("HSL")
"""

import logging
import threading
from typing import Any, Callable, Iterator, List, Tuple, TypeVar, Union

from pixelcomp.errors import DuplicateRegistration, InvalidArgument

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Registry:
    """
    Thread-safe mapping of unique names to descriptors.

    Registration and lookup are serialized by a single lock; entries are never
    replaced once registered.

    :param kind: Human readable entry kind used in error messages.
    """

    def __init__(self, kind: str = "entry") -> None:
        self.kind = kind
        self._items: dict = {}
        self._lock = threading.RLock()

    def add(self, name: str, item: Any) -> Any:
        """
        Register `item` under `name`.

        :raises InvalidArgument: If the name is empty.
        :raises DuplicateRegistration: If the name is already registered.
        """
        if not isinstance(name, str) or not name:
            raise InvalidArgument("%s name must be a non-empty string" % self.kind)
        with self._lock:
            if name in self._items:
                raise DuplicateRegistration(
                    "%s %r is already registered" % (self.kind, name)
                )
            self._items[name] = item
        logger.debug("Registered %s %r", self.kind, name)
        return item

    def get(self, name: str) -> Any:
        """
        Look up a registered entry.

        :raises InvalidArgument: If the name is unknown.
        """
        with self._lock:
            try:
                return self._items[name]
            except (KeyError, TypeError):
                raise InvalidArgument("unknown %s: %r" % (self.kind, name)) from None

    def names(self) -> List[str]:
        """Sorted list of registered names."""
        with self._lock:
            return sorted(self._items)

    def values(self) -> List[Any]:
        """Registered entries in name order."""
        with self._lock:
            return [self._items[name] for name in sorted(self._items)]

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __repr__(self) -> str:
        return "%s(%r, %d entries)" % (self.__class__.__name__, self.kind, len(self))


def new_registry(
    kind: str = "entry", attribute: Union[str, None] = None
) -> Tuple[Registry, Callable]:
    """
    Returns an empty :py:class:`Registry` and a @register decorator.

    :param kind: Entry kind used in error messages.
    :param attribute: Optional attribute name to set on registered objects.
                     The key will be stored as this attribute on the object.
    :return: Tuple of (registry, register_decorator)

    Example::

        FILTERS, register = new_registry("filter", attribute="name")

        @register("invert")
        def invert(image):
            ...

        # FILTERS.get("invert") is invert
        # invert.name == "invert"
    """
    registry = Registry(kind)

    def register(key: str) -> Callable[[Callable[..., T]], Callable[..., T]]:
        def decorator(func: Callable[..., T]) -> Callable[..., T]:
            registry.add(key, func)
            if attribute:
                setattr(func, attribute, key)
            return func

        return decorator

    return registry, register
