import logging
import os

from .request_context import request_id_var, upload_id_var

LOG_FORMAT = (
    "%(asctime)s %(levelname)s %(name)s "
    "request_id=%(request_id)s upload_id=%(upload_id)s %(message)s"
)


def _stamp(record: logging.LogRecord, overwrite: bool = False) -> logging.LogRecord:
    if overwrite or not hasattr(record, "request_id"):
        record.request_id = request_id_var.get() or "-"
    if overwrite or not hasattr(record, "upload_id"):
        record.upload_id = upload_id_var.get() or "-"
    return record


class ContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        _stamp(record, overwrite=True)
        return True


class SafeFormatter(logging.Formatter):
    """Formatter that tolerates records created before setup_logging() ran."""

    def format(self, record: logging.LogRecord) -> str:
        return super().format(_stamp(record))


def setup_logging(level: str | None = None) -> None:
    level = (level or os.getenv("TRAINLOG_LOG_LEVEL", "INFO")).upper()
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    base_factory = logging.getLogRecordFactory()

    def record_factory(*args, **kwargs):
        return _stamp(base_factory(*args, **kwargs))

    logging.setLogRecordFactory(record_factory)
    logging.basicConfig(level=level, format=LOG_FORMAT)

    formatter = SafeFormatter(LOG_FORMAT)
    for handler in root.handlers:
        handler.setFormatter(formatter)
        handler.addFilter(ContextFilter())
