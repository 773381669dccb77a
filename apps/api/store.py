import threading
import time
from dataclasses import dataclass
from typing import Dict, Optional

from services.processing.pipeline import PipelineRun


@dataclass(frozen=True)
class StoredUpload:
    upload_id: str
    filename: str
    created_at: float
    expires_at: float
    run: PipelineRun


_lock = threading.Lock()
_uploads: Dict[str, StoredUpload] = {}


def _evict_expired(now: float) -> None:
    for key in [k for k, v in _uploads.items() if v.expires_at <= now]:
        del _uploads[key]


def put(upload_id: str, filename: str, run: PipelineRun, ttl_seconds: int) -> StoredUpload:
    now = time.time()
    upload = StoredUpload(
        upload_id=upload_id,
        filename=filename,
        created_at=now,
        expires_at=now + ttl_seconds,
        run=run,
    )
    with _lock:
        _evict_expired(now)
        _uploads[upload_id] = upload
    return upload


def get(upload_id: str) -> Optional[StoredUpload]:
    with _lock:
        _evict_expired(time.time())
        return _uploads.get(upload_id)


def count() -> int:
    with _lock:
        _evict_expired(time.time())
        return len(_uploads)


def clear() -> None:
    with _lock:
        _uploads.clear()
