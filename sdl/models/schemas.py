"""
Pydantic Models — service context and HTTP request snapshots
------------------------------------------------------------
These models serve two purposes:
  1. Immutable values a Logger or RequestLogger holds for its lifetime
  2. Shaping the nested objects Cloud Logging and Error Reporting expect

The two backends name the same HTTP facts differently, so HTTPRequest
renders itself once per schema instead of sharing one dict.
"""

from typing import Any

from fastapi import Request
from pydantic import BaseModel, ConfigDict

# A caller's structured data. Keys are passed through untouched.
Payload = dict[str, Any]

# The engine-side representation of a Payload.
Fields = dict[str, Any]


# ── Error Reporting service context ──────────────────────────────────────────

class ServiceContext(BaseModel):
    """
    https://cloud.google.com/error-reporting/reference/rest/v1beta1/ServiceContext
    """

    model_config = ConfigDict(frozen=True)

    service: str = ""
    version: str = ""

    def to_fields(self) -> Fields:
        return {"service": self.service, "version": self.version}


# ── Request input ────────────────────────────────────────────────────────────

class HTTPRequestFields(BaseModel):
    """What a caller hands over to get a RequestLogger."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    request: Request | None = None
    status: int = 0


# ── Request snapshot ─────────────────────────────────────────────────────────

class HTTPRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: str
    url: str
    user_agent: str = ""
    remote_ip: str = ""
    status: int = 0
    protocol: str = ""

    def as_log_entry(self) -> Fields:
        """
        LogEntry.httpRequest
        https://cloud.google.com/logging/docs/reference/v2/rest/v2/LogEntry#httprequest
        """
        return {
            "requestMethod": self.method,
            "requestUrl": self.url,
            "userAgent": self.user_agent,
            "remoteIp": self.remote_ip,
            "status": self.status,
            "protocol": self.protocol,
        }

    def as_error_context(self) -> Fields:
        """
        ErrorContext.httpRequest
        https://cloud.google.com/error-reporting/reference/rest/v1beta1/ErrorContext#httprequestcontext
        """
        return {
            "method": self.method,
            "url": self.url,
            "userAgent": self.user_agent,
            "responseStatusCode": self.status,
            "remoteIp": self.remote_ip,
        }
