from logging import getLogger
from typing import Optional, Protocol, Union

import httpx
from opentelemetry import trace
from opentelemetry.trace import StatusCode, TracerProvider

from ._lazy import LazyResponse
from ._utils import handle_errors
from ._utils.constants import (
    LOGGER_NAME,
    SPAN_ATTR_HTTP_METHOD,
    SPAN_ATTR_STATUS_CODE,
    SPAN_ATTR_URL,
)
from .models import RequestDescriptor


class Transport(Protocol):
    """Performs the network I/O for a compiled request."""

    def send(self, request: RequestDescriptor) -> LazyResponse: ...


class HttpxTransport:
    """Transport backed by ``httpx``.

    ``send`` only prepares the call: the request goes out when the returned
    :class:`LazyResponse` is consumed, through ``httpx.Client`` for
    ``result()`` and ``httpx.AsyncClient`` for ``await``. Each send is
    wrapped in an OpenTelemetry span.

    Clients that are not passed in are created on first use, so a transport
    only consumed synchronously never opens an ``AsyncClient``. ``aclose()``
    closes both clients; ``close()`` can only close the sync one.
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        async_client: Optional[httpx.AsyncClient] = None,
        *,
        timeout: Union[int, float, None] = None,
        raise_for_status: bool = True,
        tracer_provider: Optional[TracerProvider] = None,
    ) -> None:
        self._logger = getLogger(LOGGER_NAME)
        self._client_kwargs = {"timeout": timeout} if timeout is not None else {}
        self._client = client
        self._client_async = async_client
        self._raise_for_status = raise_for_status
        self._tracer = trace.get_tracer(__name__, tracer_provider=tracer_provider)

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(**self._client_kwargs)
        return self._client

    @property
    def async_client(self) -> httpx.AsyncClient:
        if self._client_async is None:
            self._client_async = httpx.AsyncClient(**self._client_kwargs)
        return self._client_async

    def _build(
        self,
        client: Union[httpx.Client, httpx.AsyncClient],
        request: RequestDescriptor,
    ) -> httpx.Request:
        # the query is already percent-encoded; keep it out of httpx's params
        return client.build_request(
            request.method,
            request.full_url,
            headers=request.headers,
            content=request.body.encode() if request.body is not None else None,
        )

    def _check(self, response: httpx.Response) -> httpx.Response:
        if self._raise_for_status:
            with handle_errors():
                response.raise_for_status()
        return response

    def send(self, request: RequestDescriptor) -> LazyResponse[httpx.Response]:
        url = request.full_url
        span_name = f"{request.method} {request.url}"
        attributes = {SPAN_ATTR_HTTP_METHOD: request.method, SPAN_ATTR_URL: url}

        def run() -> httpx.Response:
            with self._tracer.start_as_current_span(
                span_name, attributes=attributes
            ) as span:
                self._logger.debug(f"Sending: {request.method} {url}")
                with handle_errors():
                    response = self.client.send(self._build(self.client, request))
                span.set_attribute(SPAN_ATTR_STATUS_CODE, response.status_code)
                if response.is_error:
                    span.set_status(StatusCode.ERROR)
                return self._check(response)

        async def run_async() -> httpx.Response:
            with self._tracer.start_as_current_span(
                span_name, attributes=attributes
            ) as span:
                self._logger.debug(f"Sending: {request.method} {url}")
                with handle_errors():
                    response = await self.async_client.send(
                        self._build(self.async_client, request)
                    )
                span.set_attribute(SPAN_ATTR_STATUS_CODE, response.status_code)
                if response.is_error:
                    span.set_status(StatusCode.ERROR)
                return self._check(response)

        return LazyResponse(run, run_async)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
        if self._client_async is not None and not self._client_async.is_closed:
            self._logger.warning(
                "AsyncClient is still open; use aclose() to release it"
            )

    async def aclose(self) -> None:
        if self._client is not None:
            self._client.close()
        if self._client_async is not None:
            await self._client_async.aclose()
