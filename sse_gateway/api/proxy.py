"""
Proxy API

Provides the `POST /proxy` forwarding endpoint.
"""

from fastapi import APIRouter, Request
from fastapi.responses import Response, StreamingResponse

from sse_gateway.api.deps import ProxyServiceDep, SettingsDep
from sse_gateway.common.errors import RequestTooLargeError
from sse_gateway.domain.request import GatewayResponse, parse_proxy_request

router = APIRouter(tags=["Proxy"])


async def read_request_body(request: Request, max_bytes: int) -> bytes:
    """
    Read the inbound body completely before anything is dispatched

    Args:
        request: Inbound request
        max_bytes: Size ceiling (0 = unlimited)

    Raises:
        RequestTooLargeError: Body exceeds the ceiling
    """
    declared = request.headers.get("content-length")
    if max_bytes > 0 and declared and declared.isdigit() and int(declared) > max_bytes:
        raise RequestTooLargeError(details={"content_length": int(declared)})

    chunks: list[bytes] = []
    total = 0
    async for chunk in request.stream():
        total += len(chunk)
        if max_bytes > 0 and total > max_bytes:
            raise RequestTooLargeError(details={"received": total})
        chunks.append(chunk)
    return b"".join(chunks)


def to_http_response(result: GatewayResponse) -> Response:
    """Translate a GatewayResponse into a Starlette response"""
    if result.is_stream:
        response = StreamingResponse(result.stream, status_code=result.status_code)
        # Upstream headers are forwarded as raw pairs (repeated names, original casing)
        response.raw_headers = list(result.raw_headers)
        return response

    return Response(
        content=result.body,
        status_code=result.status_code,
        headers={
            key.decode("latin-1"): value.decode("latin-1")
            for key, value in result.raw_headers
        },
    )


@router.post("/proxy")
async def proxy(
    request: Request,
    settings: SettingsDep,
    service: ProxyServiceDep,
):
    """
    Forward a JSON-described request to its upstream

    Non-SSE responses are relayed verbatim; SSE responses are aggregated into one body.
    """
    raw = await read_request_body(request, settings.MAX_REQUEST_BODY_BYTES)
    spec = parse_proxy_request(raw)
    result = await service.forward(spec)
    return to_http_response(result)
