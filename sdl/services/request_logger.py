"""
Request Logger
--------------
Logs on behalf of a single inbound request, at info or error level.

Cloud Logging and Error Reporting describe the same request with different
field names and nesting, so info_json_payload() and error() build their
own shapes:
  - LogEntry.httpRequest        https://cloud.google.com/logging/docs/reference/v2/rest/v2/LogEntry
  - ErrorContext.httpRequest    https://cloud.google.com/error-reporting/docs/formatting-error-messages

A RequestLogger lives as long as the request it describes. It borrows the
owning Logger and must not outlive it.
"""

import time
from typing import TYPE_CHECKING, Any, Mapping

from fastapi import Request
from starlette.datastructures import URL

from sdl.core.errors import ValidationError
from sdl.core.logging import Level, format_timestamp, stack_trace
from sdl.models.schemas import Fields, HTTPRequest, HTTPRequestFields
from sdl.services.fields import to_fields

if TYPE_CHECKING:
    from sdl.services.logger import Logger

# Forces Error Reporting to treat the record as an error event, whatever
# other fields end up on it.
REPORTED_ERROR_EVENT_TYPE = (
    "type.googleapis.com/google.devtools.clouderrorreporting.v1beta1.ReportedErrorEvent"
)

# Query parameter that may carry an API key.
_SECRET_QUERY_PARAM = "key"


def strip_query_param(url: URL | str, key: str) -> str:
    """Drop every `key` parameter; the rest of the query is re-encoded."""
    return str(URL(str(url)).remove_query_params(key))


def _snapshot(request: Request, status: int) -> HTTPRequest:
    client = request.client
    return HTTPRequest(
        method=request.method,
        url=strip_query_param(request.url, _SECRET_QUERY_PARAM),
        user_agent=request.headers.get("user-agent", ""),
        remote_ip=f"{client.host}:{client.port}" if client else "",
        status=status,
        protocol=f"HTTP/{request.scope.get('http_version', '1.1')}",
    )


class RequestLogger:
    def __init__(self, logger: "Logger", http_request: HTTPRequest):
        self._logger = logger
        self._http_request = http_request

    @classmethod
    def create(cls, logger: "Logger", fields: HTTPRequestFields) -> "RequestLogger":
        if fields.request is None:
            raise ValidationError("cannot log nil request")
        return cls(logger, _snapshot(fields.request, fields.status))

    @property
    def http_request(self) -> HTTPRequest:
        return self._http_request

    def info_json_payload(self, payload: Mapping[str, Any]) -> None:
        """
        Log `payload` as jsonPayload at info level, with httpRequest filled in.

        The message is left empty; everything of interest is in the payload.
        Payload keys are merged last, so a caller's own `httpRequest` wins.
        """
        log_fields: Fields = {"httpRequest": self._http_request.as_log_entry()}
        log_fields.update(to_fields(payload))

        self._logger.entry.with_fields(log_fields).info("")

    def error(self, err: BaseException | str) -> None:
        """
        Log an error raised while serving the request.

        Nothing is returned or raised: one request rarely logs more than one
        error, and a failed log line must not fail the request.
        """
        # https://cloud.google.com/error-reporting/reference/rest/v1beta1/ErrorEvent
        error_fields: Fields = {
            "serviceContext": self._logger.service_context.to_fields(),
            "context": {
                "httpRequest": self._http_request.as_error_context(),
            },
            "eventTime": format_timestamp(time.time_ns()),
            "stack_trace": stack_trace(err),
            "@type": REPORTED_ERROR_EVENT_TYPE,
        }
        self._logger.entry.with_fields(error_fields).log(Level.ERROR, err)
