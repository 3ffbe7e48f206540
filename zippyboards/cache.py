"""Process-local cache of rendered page payloads, keyed by path."""
import logging
import threading
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


def project_path(project_id: str) -> str:
    return f"/projects/{project_id}"


class PageCache:
    def __init__(self):
        self._entries: Dict[str, Any] = {}
        self._generations: Dict[str, int] = {}
        self._lock = threading.Lock()

    def get(self, path: str) -> Optional[Any]:
        with self._lock:
            return self._entries.get(path)

    def set(self, path: str, payload: Any) -> None:
        with self._lock:
            self._entries[path] = payload

    def get_or_build(self, path: str, build: Callable[[], Any]) -> Any:
        """Return the cached payload for ``path``, building it on a miss.

        A payload whose path was revalidated while ``build`` ran is returned
        to the caller but not stored.
        """
        with self._lock:
            cached = self._entries.get(path)
            generation = self._generations.get(path, 0)
        if cached is not None:
            return cached

        payload = build()
        with self._lock:
            if self._generations.get(path, 0) == generation:
                self._entries[path] = payload
            else:
                logger.debug("Discarded stale build of %s", path)
        return payload

    def revalidate_path(self, path: str) -> None:
        """Drop the cached payload so the next request rebuilds it."""
        with self._lock:
            self._generations[path] = self._generations.get(path, 0) + 1
            dropped = self._entries.pop(path, None)
        if dropped is not None:
            logger.debug("Revalidated %s", path)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._generations.clear()
