"""
Read-only resource access for the core.

The core never loads assets itself. It asks an injected ResourceProvider
whether loading has finished and which model keys exist, so it can pick a
category's model or fall back to a primitive shape.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional


class ResourceProvider(ABC):
    """Readiness flag plus lookup by key."""

    @abstractmethod
    def is_ready(self) -> bool:
        """True once every resource has been loaded."""
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the resource stored under ``key`` or None."""
        pass

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    @property
    def error(self) -> Optional[str]:
        """Loading error message, if loading failed."""
        return None


class StaticResourceProvider(ResourceProvider):
    """Provider over an in-memory mapping.

    Args:
        resources: Key -> resource mapping
        ready: Initial readiness flag

    Examples:
        >>> provider = StaticResourceProvider({'sodaCan': object()})
        >>> provider.has('sodaCan'), provider.has('movil')
        (True, False)
    """

    def __init__(self, resources: Optional[Dict[str, Any]] = None, ready: bool = True):
        self._resources: Dict[str, Any] = dict(resources or {})
        self._ready = ready
        self._error: Optional[str] = None

    def is_ready(self) -> bool:
        return self._ready

    def get(self, key: str) -> Optional[Any]:
        return self._resources.get(key)

    @property
    def error(self) -> Optional[str]:
        return self._error

    def keys(self) -> Iterable[str]:
        return self._resources.keys()

    def add(self, key: str, resource: Any) -> None:
        self._resources[key] = resource

    def mark_ready(self) -> None:
        self._ready = True
        self._error = None

    def mark_failed(self, error: str) -> None:
        self._ready = False
        self._error = error
