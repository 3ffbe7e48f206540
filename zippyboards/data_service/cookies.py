"""Cookie adapters the data service client uses to persist its session."""
from abc import ABC, abstractmethod
from typing import Dict, Optional

COOKIE_PATH = "/"


class CookieAdapter(ABC):
    """Read and write the session cookie on behalf of the client.

    Implementations always scope cookies to ``COOKIE_PATH`` whatever path the
    caller asks for.
    """

    @abstractmethod
    def get(self, name: str) -> Optional[str]:
        raise NotImplementedError

    @abstractmethod
    def set(self, name: str, value: str, max_age: Optional[int] = None) -> None:
        raise NotImplementedError

    @abstractmethod
    def remove(self, name: str) -> None:
        raise NotImplementedError


class MemoryCookies(CookieAdapter):
    """Dictionary-backed cookies for scripts and tests."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.values: Dict[str, str] = dict(initial or {})
        self.paths: Dict[str, str] = {}

    def get(self, name: str) -> Optional[str]:
        return self.values.get(name)

    def set(self, name: str, value: str, max_age: Optional[int] = None) -> None:
        self.values[name] = value
        self.paths[name] = COOKIE_PATH

    def remove(self, name: str) -> None:
        self.values.pop(name, None)
        self.paths.pop(name, None)
