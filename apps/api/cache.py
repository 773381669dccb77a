import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple


_lock = threading.Lock()
_cache: Dict[str, Tuple[float, Any, Optional[str]]] = {}


def _prune(now: float) -> None:
    for key in [k for k, (expires_at, _, _) in _cache.items() if expires_at <= now]:
        del _cache[key]


def get_or_set(key: str, ttl_seconds: int, version: Optional[str], compute: Callable[[], Any]) -> Any:
    """Memoize compute() under key until the TTL passes or version changes."""
    now = time.time()
    with _lock:
        entry = _cache.get(key)
    if entry:
        expires_at, value, cached_version = entry
        if expires_at > now and cached_version == version:
            return value
    value = compute()
    with _lock:
        # Keys are per upload, so expired entries are dropped on every write.
        _prune(now)
        _cache[key] = (now + ttl_seconds, value, version)
    return value


def size() -> int:
    with _lock:
        return len(_cache)


def clear() -> None:
    with _lock:
        _cache.clear()
