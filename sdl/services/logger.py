"""
Base Logger
-----------
Wraps a logging engine so every record comes out in a shape Cloud Logging
and Error Reporting understand.

Build one per process and pass it to whatever needs to log. Per inbound
request, derive a RequestLogger from it with new_request_logger().

The raw Entry is available through `entry` for anything this class does
not cover (other severities, extra bound fields).
"""

import time
from typing import Any, Mapping

from sdl.core.config import Config, get_settings
from sdl.core.logging import Entry, Level, build_engine, format_timestamp, parse_level, stack_trace
from sdl.models.schemas import Fields, HTTPRequestFields, ServiceContext
from sdl.services.fields import to_fields
from sdl.services.request_logger import RequestLogger


class Logger:
    def __init__(self, config: Config):
        # Raises ConfigError before anything is built.
        level = parse_level(config.logging_level)

        engine = build_engine(config.service_name or "sdl", level, config.write_location)
        self._entry = Entry(engine)
        self._service_context = ServiceContext(
            service=config.service_name,
            version=config.version,
        )

    @classmethod
    def from_settings(cls) -> "Logger":
        return cls(get_settings())

    @property
    def entry(self) -> Entry:
        return self._entry

    @property
    def engine(self):
        return self._entry.engine

    @property
    def service_context(self) -> ServiceContext:
        return self._service_context

    def info(self, *args: Any) -> None:
        """Log at info level. Dropped by the engine if below the configured level."""
        self._entry.info(*args)

    def json_payload(self, payload: Mapping[str, Any]) -> Entry:
        """
        An Entry carrying `payload` as jsonPayload fields. Finish it with a
        severity, e.g. `logger.json_payload({"user": 1}).info("")`.

        Cloud Logging shows the message only when jsonPayload has none of
        its own, so the message is best left empty.
        https://cloud.google.com/logging/docs/reference/v2/rest/v2/LogEntry
        """
        return self._entry.with_fields(to_fields(payload))

    def error(self, err: BaseException | str) -> None:
        """
        Log `err` as an Error Reporting event.

        The message is the error text so it reads well in Cloud Logging; the
        same text heads the stack trace so it reads well in Error Reporting.
        """
        # https://cloud.google.com/error-reporting/reference/rest/v1beta1/ErrorEvent
        error_fields: Fields = {
            "serviceContext": self._service_context.to_fields(),
            "eventTime": format_timestamp(time.time_ns()),
            # https://cloud.google.com/error-reporting/docs/formatting-error-messages#json_representation
            "stack_trace": stack_trace(err),
        }
        self._entry.with_fields(error_fields).log(Level.ERROR, err)

    def new_request_logger(self, fields: HTTPRequestFields) -> RequestLogger:
        return RequestLogger.create(self, fields)
