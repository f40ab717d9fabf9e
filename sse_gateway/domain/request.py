"""
Request/Response Domain Model

Defines the proxy request received from the caller and the response handed
back to the API layer.
"""

import json
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from sse_gateway.common.errors import ValidationError

logger = logging.getLogger(__name__)

AggregationMode = Literal["raw", "final-text", "smart"]


class SSEOptions(BaseModel):
    """Per-request SSE aggregation options"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    aggregation_mode: Optional[AggregationMode] = Field(None, alias="aggregationMode")
    response_content_type: Optional[str] = Field(None, alias="responseContentType")

    @field_validator("response_content_type")
    @classmethod
    def check_header_value(cls, v: Optional[str]) -> Optional[str]:
        # Sent back as a raw header value
        if v is None:
            return v
        if "\r" in v or "\n" in v:
            raise ValueError("responseContentType must not contain line breaks")
        try:
            v.encode("latin-1")
        except UnicodeEncodeError:
            raise ValueError("responseContentType must be latin-1 text")
        return v


class TLSOptions(BaseModel):
    """Per-request TLS options"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    reject_unauthorized: Optional[bool] = Field(None, alias="rejectUnauthorized")


class ProxyRequestSpec(BaseModel):
    """
    Proxy Request Model

    Describes the upstream request the caller wants issued. Immutable after validation.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    # HTTP Method
    method: str = ""
    # Absolute upstream URL
    url: str = ""
    # Outbound request headers
    headers: dict[str, str] = Field(default_factory=dict)
    # Timeout override (seconds)
    timeout: Optional[float] = Field(None, ge=0)
    # Body: text, or any JSON value serialized on dispatch
    body: Any = None
    sse: Optional[SSEOptions] = None
    tls: Optional[TLSOptions] = None

    @field_validator("headers", mode="before")
    @classmethod
    def stringify_header_values(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, dict):
            return {
                key: value if isinstance(value, str) else json.dumps(value)
                for key, value in v.items()
            }
        return v

    @property
    def aggregation_mode(self) -> Optional[str]:
        return self.sse.aggregation_mode if self.sse else None

    @property
    def response_content_type(self) -> Optional[str]:
        return self.sse.response_content_type if self.sse else None

    @property
    def reject_unauthorized(self) -> Optional[bool]:
        return self.tls.reject_unauthorized if self.tls else None


def parse_proxy_request(raw: bytes) -> ProxyRequestSpec:
    """
    Parse the inbound request body into a ProxyRequestSpec

    Args:
        raw: Inbound body bytes (UTF-8 JSON object)

    Returns:
        ProxyRequestSpec: Validated request

    Raises:
        ValidationError: On malformed JSON, wrong field types, or missing method/url
    """
    try:
        payload = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValidationError(code="invalid_json", details={"error": str(e)})

    if not isinstance(payload, dict):
        raise ValidationError(code="invalid_json", details={"error": "payload must be an object"})

    try:
        spec = ProxyRequestSpec.model_validate(payload)
    except PydanticValidationError as e:
        logger.debug("Proxy request validation failed: %s", e)
        raise ValidationError(code="invalid_fields", details={"errors": e.errors()})

    if not spec.method or not spec.url:
        raise ValidationError(message="method and url are required", code="missing_fields")

    return spec


@dataclass
class GatewayResponse:
    """
    Gateway Response Data Class

    Either a complete body (aggregation path, errors) or a byte stream (passthrough).
    """

    # HTTP status code
    status_code: int
    # Response headers as raw (name, value) pairs
    raw_headers: list[tuple[bytes, bytes]] = field(default_factory=list)
    # Complete body
    body: bytes = b""
    # Streamed body (passthrough only)
    stream: Optional[AsyncIterator[bytes]] = None

    @property
    def is_stream(self) -> bool:
        return self.stream is not None
