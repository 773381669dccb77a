import threading
import time
from typing import Dict, List


_lock = threading.Lock()
_attempts: Dict[str, List[float]] = {}


def check_rate_limit(key: str, limit: int, window_sec: int) -> bool:
    """Record an attempt for key; False once limit attempts fall inside the window."""
    now = time.time()
    window_start = now - window_sec
    with _lock:
        times = [t for t in _attempts.get(key, []) if t >= window_start]
        if len(times) >= limit:
            _attempts[key] = times
            return False
        times.append(now)
        _attempts[key] = times
    return True


def clear_rate_limit(key: str | None = None) -> None:
    with _lock:
        if key is None:
            _attempts.clear()
        else:
            _attempts.pop(key, None)
