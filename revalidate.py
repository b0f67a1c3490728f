# revalidate.py
import logging
import threading
from typing import Any, Callable, Dict

logger = logging.getLogger(__name__)

INVOICES_PATH = "/invoices"

class ViewCache:
  """Memoized listing payloads, keyed by view path."""

  def __init__(self) -> None:
    self._entries: Dict[str, Any] = {}
    # bumped by invalidate; a load only lands if its generation is still current
    self._generations: Dict[str, int] = {}
    self._lock = threading.Lock()

  def get_or_set(self, path: str, loader: Callable[[], Any]) -> Any:
    with self._lock:
      if path in self._entries:
        return self._entries[path]
      started = self._generations.get(path, 0)
    value = loader()
    with self._lock:
      if self._generations.get(path, 0) == started:
        self._entries[path] = value
      else:
        logger.debug("discarding listing for %s loaded across an invalidation", path)
    return value

  def invalidate(self, path: str) -> None:
    with self._lock:
      self._generations[path] = self._generations.get(path, 0) + 1
      dropped = self._entries.pop(path, None) is not None
    logger.info("invalidated view %s (cached=%s)", path, dropped)

  def __contains__(self, path: str) -> bool:
    with self._lock:
      return path in self._entries

view_cache = ViewCache()

def get_view_cache() -> ViewCache:
  return view_cache
