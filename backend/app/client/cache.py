# app/client/cache.py
import logging
from typing import Any, Dict, Hashable, Optional

logger = logging.getLogger(__name__)

KINDS = ("habits", "vitals")


class DataCache:
    """
    Read-through cache for one client session, keyed by data kind and query key.

    It only remembers what the server already returned to this session and is
    never consulted for access decisions.
    """

    def __init__(self):
        self._buckets: Dict[str, Dict[Hashable, Any]] = {kind: {} for kind in KINDS}

    def get(self, kind: str, key: Hashable) -> Optional[Any]:
        return self._buckets.get(kind, {}).get(key)

    def set(self, kind: str, key: Hashable, value: Any) -> None:
        self._buckets.setdefault(kind, {})[key] = value

    def invalidate(self, kind: Optional[str] = None, key: Optional[Hashable] = None) -> None:
        """Drop one entry, one kind, or (with no arguments) everything."""
        if kind is None:
            logger.debug("Clearing the whole data cache")
            self._buckets = {k: {} for k in KINDS}
        elif key is None:
            self._buckets[kind] = {}
        else:
            self._buckets.get(kind, {}).pop(key, None)

    def __contains__(self, item) -> bool:
        kind, key = item
        return key in self._buckets.get(kind, {})
