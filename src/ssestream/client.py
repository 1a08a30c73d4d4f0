"""Opens an event stream over HTTP and hands the response body to EventStream.

Only the initial connection lives here. Reconnecting with the retained
``last_event_id`` after the stream ends is left to the caller.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import structlog

from ssestream.config import StreamConfig
from ssestream.errors import ReadError, UnexpectedStatusError
from ssestream.stream import EventStream

log = structlog.get_logger()

EVENT_STREAM_MEDIA_TYPE = "text/event-stream"


def build_request_headers(last_event_id: str = "") -> dict[str, str]:
    """Build headers for a stream request, resuming from ``last_event_id`` if set."""
    headers = {
        "Accept": EVENT_STREAM_MEDIA_TYPE,
        "Cache-Control": "no-cache",
    }
    if last_event_id:
        headers["Last-Event-ID"] = last_event_id
    return headers


@asynccontextmanager
async def connect(
    url: str,
    *,
    client: httpx.AsyncClient,
    last_event_id: str = "",
    config: StreamConfig | None = None,
) -> AsyncIterator[EventStream]:
    """GET ``url`` and yield a started EventStream over the response body.

    Args:
        url: The event stream resource.
        client: The httpx client used to send the request.
        last_event_id: Sent as ``Last-Event-ID`` when non-empty.
        config: Stream settings; defaults are read from the environment.

    Raises:
        UnexpectedStatusError: The server answered with a status other than 200.
        ReadError: The request failed before a response arrived.
    """
    config = config or StreamConfig()
    request = client.build_request(
        "GET",
        url,
        headers=build_request_headers(last_event_id),
        timeout=config.request_timeout,
    )
    log.info("event_stream_connect", url=url, last_event_id=last_event_id or None)

    try:
        response = await client.send(request, stream=True)
    except httpx.HTTPError as exc:
        raise ReadError(f"http error: {exc!r}") from exc

    if response.status_code != 200:
        try:
            await response.aread()
            body = response.text[:500]
        except httpx.HTTPError:
            body = ""
        finally:
            await response.aclose()
        log.warning(
            "event_stream_bad_status",
            url=url,
            status=response.status_code,
            body=body,
        )
        raise UnexpectedStatusError(response.status_code, url)

    async with EventStream(response, last_event_id=last_event_id, config=config) as stream:
        yield stream
