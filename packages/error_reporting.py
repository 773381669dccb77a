import logging
import os

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration


def _float_env(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def init_error_reporting(service_name: str, enable_fastapi: bool = False) -> bool:
    dsn = os.getenv("TRAINLOG_SENTRY_DSN")
    if not dsn:
        return False

    integrations = [LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)]
    if enable_fastapi:
        integrations.extend([FastApiIntegration(), StarletteIntegration()])

    sentry_sdk.init(
        dsn=dsn,
        environment=os.getenv("TRAINLOG_ENV", os.getenv("RUN_MODE", "prod")),
        release=os.getenv("TRAINLOG_RELEASE"),
        traces_sample_rate=_float_env("TRAINLOG_SENTRY_TRACES_SAMPLE_RATE", 0.0),
        integrations=integrations,
        # Uploaded activity names and descriptions stay out of events.
        send_default_pii=False,
    )
    sentry_sdk.set_tag("service", service_name)
    return True
