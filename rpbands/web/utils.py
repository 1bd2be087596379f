"""Request correlation for the web routes."""

from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import Request

from rpbands.core.logging import log_context

REQUEST_ID_HEADER = "X-Request-ID"


@contextmanager
def request_trace(request: Request) -> Iterator[str]:
    """Log everything handled for ``request`` under one trace id.

    The caller's ``X-Request-ID`` becomes the trace id when present, so
    feed warnings and aggregation failures can be matched to the request.
    """
    with log_context(trace_id=request.headers.get(REQUEST_ID_HEADER), path=request.url.path) as trace_id:
        yield trace_id
